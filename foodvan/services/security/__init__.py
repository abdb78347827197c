"""
Security Service Factory

Builds the password hasher, password policy and token issuer from the
application settings. Each factory is cached so the whole process
shares one configured instance.

Usage:
    from foodvan.services.security import get_password_hasher, get_token_issuer

    hasher = get_password_hasher()
    digest = await hasher.hash("abc12345")
"""

import logging
from functools import lru_cache

from foodvan.core.config import get_settings
from foodvan.services.security.passwords import PasswordHasher
from foodvan.services.security.policy import PasswordPolicy, PolicyResult, PolicyViolation
from foodvan.services.security.tokens import TokenIssuer

logger = logging.getLogger(__name__)


@lru_cache()
def get_password_hasher() -> PasswordHasher:
    """Get the bcrypt hasher configured with BCRYPT_ROUNDS."""
    settings = get_settings()
    logger.info(f"Password Hasher: bcrypt (rounds={settings.bcrypt_rounds})")
    return PasswordHasher(rounds=settings.bcrypt_rounds)


@lru_cache()
def get_password_policy() -> PasswordPolicy:
    """Get the password policy (8+ characters, a letter and a digit)."""
    return PasswordPolicy()


@lru_cache()
def get_token_issuer() -> TokenIssuer:
    """Get the token issuer signing with JWT_SECRET."""
    settings = get_settings()
    return TokenIssuer(secret=settings.jwt_secret, algorithm=settings.jwt_algorithm)


def reset_security_services() -> None:
    """
    Clear the cached instances.

    Useful for testing or when configuration changes at runtime.
    """
    get_password_hasher.cache_clear()
    get_password_policy.cache_clear()
    get_token_issuer.cache_clear()
    logger.debug("Security service cache cleared")


__all__ = [
    "get_password_hasher",
    "get_password_policy",
    "get_token_issuer",
    "reset_security_services",
    "PasswordHasher",
    "PasswordPolicy",
    "PolicyResult",
    "PolicyViolation",
    "TokenIssuer",
]
