"""
Authentication strategies.

SessionStrategy checks an email and password against the credential
store (browser login). BearerStrategy resolves a presented token back
to the account holding it (API clients, the vendor app and the
customer profile update).
"""

import logging
from typing import Generic, Optional

from foodvan.auth.exceptions import InvalidCredentials, Unauthorized
from foodvan.services.accounts.store import AccountT, CredentialStore
from foodvan.services.security import PasswordHasher, TokenIssuer

logger = logging.getLogger(__name__)


class SessionStrategy(Generic[AccountT]):
    """Email + password authentication."""

    def __init__(self, store: CredentialStore[AccountT], hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    async def authenticate(self, email: Optional[str], password: Optional[str]) -> AccountT:
        """
        Return the account for these credentials.

        Unknown email and wrong password raise the same InvalidCredentials
        so responses do not reveal which emails are registered.
        """
        account = await self.store.find_by_email(email) if email else None
        if account is None or not await self.hasher.verify(password or "", account.password):
            logger.warning(f"Failed {self.store.kind} login attempt")
            raise InvalidCredentials()
        return account


class BearerStrategy(Generic[AccountT]):
    """
    Token authentication by exact match against the stored token.

    A token is accepted only while it is the account's current token, so
    rotating the stored value revokes all earlier tokens at once. The
    signature check only confirms the token names the account holding it.
    """

    def __init__(self, store: CredentialStore[AccountT], issuer: TokenIssuer):
        self.store = store
        self.issuer = issuer

    async def resolve(self, token: Optional[str]) -> AccountT:
        if not token:
            raise Unauthorized()
        account = await self.store.find_by_token(token)
        if account is None:
            raise Unauthorized()
        if not self.issuer.matches(token, account):
            logger.warning(f"Stored token of {self.store.kind} #{account.id} names another account")
            raise Unauthorized()
        return account
