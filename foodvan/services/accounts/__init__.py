"""
Account services: the credential store and the registration, login,
update and logout flows built on it.
"""
