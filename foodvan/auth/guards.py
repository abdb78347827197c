"""
Route guards as FastAPI dependencies.

One ``AccountGuards`` instance exists per backend. Session guards look
at the session cookie and redirect browsers; the bearer guard looks at
the ``Authorization: Bearer`` header and answers 401.

Usage:
    guards = AccountGuards(Customer, prefix="/api/customer")

    @router.get("/home")
    async def home(customer: Customer = Depends(guards.require_authenticated)):
        ...
"""

import logging
from typing import Generic, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from foodvan.auth.strategies import BearerStrategy
from foodvan.core.config import get_settings
from foodvan.database import get_db
from foodvan.services.accounts.service import AccountService
from foodvan.services.accounts.store import AccountT, CredentialStore
from foodvan.services.security import get_password_hasher, get_password_policy, get_token_issuer
from foodvan.services.sessions import SessionData, get_session_store

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _redirect(location: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_302_FOUND, headers={"Location": location})


class AccountGuards(Generic[AccountT]):
    """
    Dependencies for one account variant.

    Attributes:
        model: Customer or Vendor
        prefix: Route prefix of the backend (e.g. "/api/customer")
    """

    def __init__(self, model: type[AccountT], prefix: str):
        self.model = model
        self.prefix = prefix.rstrip("/")

    @property
    def login_url(self) -> str:
        return f"{self.prefix}/login"

    @property
    def home_url(self) -> str:
        return f"{self.prefix}/home"

    # =========================================================================
    # SERVICES
    # =========================================================================

    def service(self, db: AsyncSession = Depends(get_db)) -> AccountService[AccountT]:
        """Account service wired with the configured hasher, issuer and sessions."""
        return AccountService(
            store=CredentialStore(db, self.model),
            hasher=get_password_hasher(),
            policy=get_password_policy(),
            issuer=get_token_issuer(),
            sessions=get_session_store(),
        )

    # =========================================================================
    # SESSION GUARDS
    # =========================================================================

    @staticmethod
    def session_id(request: Request) -> Optional[str]:
        return request.cookies.get(get_settings().session_cookie_name) or None

    async def current_session(self, request: Request) -> Optional[SessionData]:
        """The live session of this variant carried by the request, if any."""
        sid = self.session_id(request)
        if not sid:
            return None
        session = await get_session_store().get(sid)
        if session is None or session.kind != self.model.kind.value:
            return None
        return session

    async def require_authenticated(
        self,
        request: Request,
        db: AsyncSession = Depends(get_db),
    ) -> AccountT:
        """Let logged-in browsers through; send everyone else to the login page."""
        session = await self.current_session(request)
        if session is None:
            raise _redirect(self.login_url)

        account = await CredentialStore(db, self.model).get(session.account_id)
        if account is None:
            logger.warning(f"Session refers to missing {self.model.kind.value} #{session.account_id}")
            await get_session_store().destroy(self.session_id(request))
            raise _redirect(self.login_url)
        return account

    async def require_anonymous(self, request: Request) -> None:
        """Keep logged-in browsers away from the login and register pages."""
        if await self.current_session(request) is not None:
            raise _redirect(self.home_url)

    # =========================================================================
    # BEARER GUARD
    # =========================================================================

    async def require_bearer(
        self,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        db: AsyncSession = Depends(get_db),
    ) -> AccountT:
        """Resolve the bearer token to its account or answer 401."""
        token = credentials.credentials if credentials else None
        strategy = BearerStrategy(CredentialStore(db, self.model), get_token_issuer())
        return await strategy.resolve(token)
