"""
Session Store Abstract Base Class

Defines the interface for server-held login sessions. A session maps an
opaque id (kept by the browser in an HTTP-only cookie) to the account
that logged in. Both MockSessionStore and RedisSessionStore implement
this contract.

Design Pattern: Strategy Pattern
    - In-memory store for development and tests
    - Redis store for staging and production
"""

import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class SessionData:
    """
    What a session remembers about its client.

    Attributes:
        kind: Account variant ("customer" or "vendor")
        account_id: Primary key of the logged-in account
        created_at: When the session was established
    """
    kind: str
    account_id: int
    created_at: datetime

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "kind": self.kind,
            "account_id": self.account_id,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionData":
        return cls(
            kind=data["kind"],
            account_id=int(data["account_id"]),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


class BaseSessionStore(ABC):
    """
    Abstract base class for session stores.

    Attributes:
        ttl_seconds: How long a session lives after creation
    """

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def new_session_id() -> str:
        """Generate an unguessable session id."""
        return secrets.token_urlsafe(32)

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the store name (e.g. "memory", "redis")."""
        pass

    @abstractmethod
    async def create(self, kind: str, account_id: int) -> str:
        """
        Establish a session for an account.

        Returns:
            str: The new session id
        """
        pass

    @abstractmethod
    async def get(self, session_id: str) -> Optional[SessionData]:
        """Return the live session for this id, or None."""
        pass

    @abstractmethod
    async def destroy(self, session_id: str) -> None:
        """Forget a session. Unknown ids are ignored."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the backing store is reachable."""
        pass

    async def close(self) -> None:
        """Release connections held by the store."""
        pass
