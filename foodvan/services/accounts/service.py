"""
Account Service

Registration, login, profile update and logout for one account variant.
Validation (uniqueness, password policy, old-password check) always
completes before anything is written, and a new password digest is
committed together with the token issued for it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional

from foodvan.auth.exceptions import AccountExists, FoodVanError, Unauthorized
from foodvan.auth.strategies import SessionStrategy
from foodvan.services.accounts.store import AccountT, CredentialStore, normalize_email
from foodvan.services.security import PasswordHasher, PasswordPolicy, TokenIssuer
from foodvan.services.sessions import BaseSessionStore

logger = logging.getLogger(__name__)


@dataclass
class LoginResult:
    """Outcome of a successful login."""
    account: Any
    token: str
    session_id: str


class AccountService(Generic[AccountT]):
    """
    Account flows shared by the customer and vendor backends.

    Attributes:
        store: Credential store for the variant
        hasher: bcrypt hasher
        policy: Password policy checked on registration and password change
        issuer: Token issuer
        sessions: Server-side session store
    """

    def __init__(
        self,
        store: CredentialStore[AccountT],
        hasher: PasswordHasher,
        policy: PasswordPolicy,
        issuer: TokenIssuer,
        sessions: BaseSessionStore,
    ):
        self.store = store
        self.hasher = hasher
        self.policy = policy
        self.issuer = issuer
        self.sessions = sessions
        self.strategy = SessionStrategy(store, hasher)

    @property
    def kind(self) -> str:
        return self.store.kind

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    async def register(self, email: str, password: str, **profile: Any) -> AccountT:
        """
        Create an account with no token.

        Raises:
            AccountExists: email already registered for this variant
            WeakPassword: password breaks the policy
            PersistenceError: the insert failed
        """
        if await self.store.find_by_email(email) is not None:
            logger.info(f"Registration refused: {self.kind} email already in use")
            raise AccountExists()

        self.policy.check(password)

        digest = await self.hasher.hash(password)
        account = self.store.model(email=email, password=digest, token=None, **profile)
        account = await self.store.add(account)

        logger.info(f"✅ Registered {self.kind} #{account.id}")
        return account

    # =========================================================================
    # LOGIN / LOGOUT
    # =========================================================================

    async def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate, rotate the bearer token and open a session.

        The new token replaces the stored one, which revokes any token
        issued earlier. The session is opened first: if the session store
        is down, the previous token stays valid.
        """
        account = await self.strategy.authenticate(email, password)

        session_id = await self.sessions.create(self.kind, account.id)

        token = self.issuer.issue(account)
        account.token = token
        try:
            account = await self.store.save(account)
        except FoodVanError:
            await self.sessions.destroy(session_id)
            raise

        logger.info(f"🔑 {self.kind.capitalize()} #{account.id} logged in")
        return LoginResult(account=account, token=token, session_id=session_id)

    async def logout(self, session_id: Optional[str]) -> None:
        """Destroy the session. The bearer token is left untouched."""
        if not session_id:
            return
        await self.sessions.destroy(session_id)
        logger.info(f"{self.kind.capitalize()} session closed")

    # =========================================================================
    # PROFILE UPDATE
    # =========================================================================

    async def update(
        self,
        account: AccountT,
        old_password: str,
        new_email: Optional[str] = None,
        new_password: Optional[str] = None,
    ) -> AccountT:
        """
        Change email and/or password of an authenticated account.

        Stops with Unauthorized before touching anything when the old
        password does not match. A new password gets a new token in the
        same commit, so the digest and the token never diverge.
        """
        if not await self.hasher.verify(old_password or "", account.password):
            logger.warning(f"{self.kind.capitalize()} #{account.id} update refused: old password mismatch")
            raise Unauthorized()

        if new_email is not None:
            existing = await self.store.find_by_email(new_email)
            if existing is not None and existing.id != account.id:
                raise AccountExists()

        if new_password is not None:
            self.policy.check(new_password)

        if new_email is not None:
            account.email = normalize_email(new_email)

        if new_password is not None:
            account.password = await self.hasher.hash(new_password)
            account.token = self.issuer.issue(account)

        account = await self.store.save(account)

        if new_password is not None:
            logger.info(f"🔁 {self.kind.capitalize()} #{account.id} password changed, token rotated")
        if new_email is not None:
            logger.info(f"{self.kind.capitalize()} #{account.id} email updated")
        return account
