"""
                Food Van Ordering

Customer-facing and vendor-facing REST backends for a food van
ordering platform: account registration, login sessions, bearer
tokens, van status and order fulfilment.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
