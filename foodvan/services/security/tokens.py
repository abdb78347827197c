"""
Token Issuer

Mints the opaque bearer tokens handed out on login and password change.

A token is an HS256 JWT carrying the account identity and a fingerprint
of the password digest it was issued against. Its signature is not what
makes it valid: the issued string is stored on the account and a
request is authenticated by exact match against that stored value.
Storing a new token therefore revokes every earlier one.

The issuer never checks passwords; callers authenticate first.
"""

import hashlib
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

import jwt

logger = logging.getLogger(__name__)


class TokenIssuer:
    """
    Signs identity payloads with a server-held secret.

    Attributes:
        secret: HMAC signing secret (JWT_SECRET)
        algorithm: JWT algorithm, HS256 by default
    """

    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm

    @staticmethod
    def password_fingerprint(password_digest: str) -> str:
        """Short, one-way marker of the password a token was issued against."""
        return hashlib.sha256(password_digest.encode("utf-8")).hexdigest()[:16]

    def issue(self, account: Any) -> str:
        """
        Issue a token for an already-authenticated account.

        Args:
            account: Customer or Vendor row; ``password`` must hold the
                digest that is current at issuance time

        Returns:
            str: Encoded token
        """
        payload = {
            "sub": str(account.id),
            "kind": account.kind.value,
            "email": account.email,
            "pwd": self.password_fingerprint(account.password),
            "iat": int(datetime.now(timezone.utc).timestamp()),
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        logger.debug(f"Issued token for {account.kind.value} #{account.id}")
        return token

    def decode(self, token: str) -> Optional[dict[str, Any]]:
        """
        Verify the signature and return the payload.

        Returns:
            dict if the token was signed with this secret, None otherwise
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.InvalidTokenError as e:
            logger.debug(f"Token failed signature check: {e}")
            return None

    def matches(self, token: str, account: Any) -> bool:
        """Check the token names this account (id and variant)."""
        payload = self.decode(token)
        if not payload:
            return False
        return (
            payload.get("sub") == str(account.id)
            and payload.get("kind") == account.kind.value
        )
