"""
                        Services Module

Business logic behind the two backends. Services with an external
backing store have a Mock (development) and a Real implementation
chosen by ENV_MODE.

Services:
    - security: bcrypt hasher, password policy, token issuer
    - sessions: in-memory / Redis login sessions
    - accounts: credential store and account flows
    - vendors: van status and order fulfilment
"""
