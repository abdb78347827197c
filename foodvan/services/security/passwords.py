"""
Password Hasher

Salted bcrypt digests with a fixed work factor. The work factor is
passed in at construction (from BCRYPT_ROUNDS) rather than read from a
module constant, so tests can run with the cheapest setting while
production keeps the configured cost.

bcrypt is CPU bound; both operations run in a worker thread so a
login does not stall every other request on the event loop.
"""

import asyncio
import logging

import bcrypt

from foodvan.auth.exceptions import InternalHashError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """
    bcrypt hasher bound to one work factor.

    Example:
        >>> hasher = PasswordHasher(rounds=10)
        >>> digest = await hasher.hash("abc12345")
        >>> await hasher.verify("abc12345", digest)
        True
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def _hash_sync(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def _verify_sync(plaintext: str, digest: str) -> bool:
        return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("utf-8"))

    async def hash(self, plaintext: str) -> str:
        """
        Hash a password.

        Raises:
            InternalHashError: bcrypt rejected the input (e.g. NUL bytes,
                or more than 72 bytes on recent bcrypt releases)
        """
        if not plaintext:
            raise InternalHashError()
        try:
            return await asyncio.to_thread(self._hash_sync, plaintext)
        except (ValueError, TypeError) as e:
            logger.exception(f"Password hashing failed: {e}")
            raise InternalHashError() from e

    async def verify(self, plaintext: str, digest: str) -> bool:
        """Check a password against a stored digest. Never raises."""
        if not plaintext or not digest:
            return False
        try:
            return await asyncio.to_thread(self._verify_sync, plaintext, digest)
        except (ValueError, TypeError):
            # Malformed digest or over-long input
            return False
