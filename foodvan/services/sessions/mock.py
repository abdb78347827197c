"""
Mock Session Store Implementation

Keeps sessions in a process-local dict. Used in development mode
(ENV_MODE=development) and in the test suite, so the backends run
without a Redis server. Sessions are lost on restart and are not shared
between worker processes.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from foodvan.services.sessions.base import BaseSessionStore, SessionData

logger = logging.getLogger(__name__)


class MockSessionStore(BaseSessionStore):
    """In-memory session store with expiry."""

    def __init__(self, ttl_seconds: int = 86400):
        super().__init__(ttl_seconds)
        self._sessions: dict[str, SessionData] = {}
        logger.info(f"MockSessionStore initialized (ttl={ttl_seconds}s)")

    @property
    def provider_name(self) -> str:
        return "memory"

    def _expired(self, data: SessionData) -> bool:
        return datetime.now() - data.created_at > timedelta(seconds=self.ttl_seconds)

    def _prune(self) -> None:
        expired = [sid for sid, data in self._sessions.items() if self._expired(data)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug(f"[MOCK] Pruned {len(expired)} expired sessions")

    async def create(self, kind: str, account_id: int) -> str:
        self._prune()
        session_id = self.new_session_id()
        self._sessions[session_id] = SessionData(
            kind=kind,
            account_id=account_id,
            created_at=datetime.now(),
        )
        logger.debug(f"[MOCK] Session created for {kind} #{account_id}")
        return session_id

    async def get(self, session_id: str) -> Optional[SessionData]:
        data = self._sessions.get(session_id)
        if data is None:
            return None
        if self._expired(data):
            self._sessions.pop(session_id, None)
            return None
        return data

    async def destroy(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    async def health_check(self) -> bool:
        return True

    def clear(self) -> None:
        """Drop every session."""
        self._sessions.clear()
