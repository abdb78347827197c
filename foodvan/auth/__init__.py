"""
Authentication package.

- Error kinds reported by the account flows
- Session (email + password) and bearer token strategies
- Route guards as FastAPI dependencies
"""
