"""
Session Store Factory

Provides a single entry point for obtaining the session store.

Environment Switching:
    - ENV_MODE=development → MockSessionStore (in-memory)
    - ENV_MODE=staging → RedisSessionStore
    - ENV_MODE=production → RedisSessionStore
"""

import logging
from functools import lru_cache

from foodvan.core.config import get_settings
from foodvan.services.sessions.base import BaseSessionStore, SessionData
from foodvan.services.sessions.mock import MockSessionStore
from foodvan.services.sessions.redis_store import RedisSessionStore

logger = logging.getLogger(__name__)


@lru_cache()
def get_session_store() -> BaseSessionStore:
    """
    Get the configured session store instance.

    The instance is cached so every request shares the same store.

    Returns:
        BaseSessionStore: MockSessionStore or RedisSessionStore
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Session Store: Using MockSessionStore (development mode)")
        return MockSessionStore(ttl_seconds=settings.session_ttl_seconds)

    logger.info(
        f"Session Store: Using RedisSessionStore "
        f"({settings.env_mode.value} mode)"
    )
    return RedisSessionStore(
        redis_url=settings.redis_url,
        ttl_seconds=settings.session_ttl_seconds,
    )


def reset_session_store() -> None:
    """
    Clear the cached session store instance.

    The next call to get_session_store() will create a new instance.
    """
    get_session_store.cache_clear()
    logger.debug("Session store cache cleared")


__all__ = [
    "get_session_store",
    "reset_session_store",
    "BaseSessionStore",
    "SessionData",
    "MockSessionStore",
    "RedisSessionStore",
]
