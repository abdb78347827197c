"""
Redis Session Store

Production implementation backed by Redis. Each session is one JSON
value under ``foodvan:session:<id>`` written with SETEX, so Redis
expires it on its own and every worker process sees the same sessions.
"""

import json
import logging
from datetime import datetime
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from foodvan.auth.exceptions import PersistenceError
from foodvan.services.sessions.base import BaseSessionStore, SessionData

logger = logging.getLogger(__name__)

KEY_PREFIX = "foodvan:session:"


class RedisSessionStore(BaseSessionStore):
    """Session store using redis.asyncio."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        ttl_seconds: int = 86400,
        client: Optional[aioredis.Redis] = None,
    ):
        super().__init__(ttl_seconds)
        if client is None:
            if redis_url is None:
                raise ValueError("RedisSessionStore needs a redis_url or a client")
            client = aioredis.from_url(redis_url, decode_responses=True)
        self.client = client
        logger.info(f"RedisSessionStore initialized (ttl={ttl_seconds}s)")

    @property
    def provider_name(self) -> str:
        return "redis"

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{KEY_PREFIX}{session_id}"

    async def create(self, kind: str, account_id: int) -> str:
        session_id = self.new_session_id()
        data = SessionData(kind=kind, account_id=account_id, created_at=datetime.now())
        try:
            await self.client.setex(
                self._key(session_id),
                self.ttl_seconds,
                json.dumps(data.to_dict()),
            )
        except RedisError as e:
            logger.exception(f"Could not store session: {e}")
            raise PersistenceError() from e
        return session_id

    async def get(self, session_id: str) -> Optional[SessionData]:
        try:
            raw = await self.client.get(self._key(session_id))
        except RedisError as e:
            logger.exception(f"Could not read session: {e}")
            raise PersistenceError() from e
        if not raw:
            return None
        try:
            return SessionData.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding corrupt session {session_id[:8]}…: {e}")
            await self.destroy(session_id)
            return None

    async def destroy(self, session_id: str) -> None:
        try:
            await self.client.delete(self._key(session_id))
        except RedisError as e:
            logger.exception(f"Could not delete session: {e}")
            raise PersistenceError() from e

    async def health_check(self) -> bool:
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            logger.error(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.aclose()
