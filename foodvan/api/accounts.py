"""
Account routes shared by both backends.

Adds the entry pages (login, register, home), credential login and
logout to a router. Registration bodies differ per backend, so each
backend declares its own POST /register.
"""

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from foodvan.auth.exceptions import InvalidCredentials
from foodvan.auth.guards import AccountGuards
from foodvan.core.config import get_settings
from foodvan.schemas import ErrorResponse, LoginRequest, TokenResponse
from foodvan.services.accounts.service import AccountService

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def add_account_routes(router: APIRouter, guards: AccountGuards) -> None:
    """Register GET /login, /register, /home, POST /login and DELETE /logout."""
    kind = guards.model.kind.value

    def page(request: Request, template: str, **context: Any) -> HTMLResponse:
        return templates.TemplateResponse(
            request,
            template,
            {"kind": kind, "prefix": guards.prefix, **context},
        )

    @router.get("/login", response_class=HTMLResponse, dependencies=[Depends(guards.require_anonymous)])
    async def login_page(request: Request) -> HTMLResponse:
        """Login entry point (anonymous visitors only)."""
        return page(request, "login.html")

    @router.get("/register", response_class=HTMLResponse, dependencies=[Depends(guards.require_anonymous)])
    async def register_page(request: Request) -> HTMLResponse:
        """Registration entry point (anonymous visitors only)."""
        return page(request, "register.html")

    @router.get("/home", response_class=HTMLResponse)
    async def home_page(request: Request, account=Depends(guards.require_authenticated)) -> HTMLResponse:
        """Landing page for logged-in browsers."""
        return page(request, "home.html", name=account.full_name or account.email)

    @router.post(
        "/login",
        response_model=TokenResponse,
        responses={500: {"model": ErrorResponse}},
        summary="Log in with email and password",
    )
    async def login(
        credentials: LoginRequest,
        service: AccountService = Depends(guards.service),
    ) -> JSONResponse:
        """
        Authenticate, open a browser session and return a fresh bearer token.

        The token replaces any token issued before, revoking it.
        """
        try:
            result = await service.login(credentials.email, credentials.password)
        except InvalidCredentials as e:
            body = ErrorResponse(error=e.message, flash=[e.message])
            return JSONResponse(status_code=e.status_code, content=body.model_dump())

        settings = get_settings()
        response = JSONResponse(content={"token": result.token})
        response.set_cookie(
            settings.session_cookie_name,
            result.session_id,
            max_age=settings.session_ttl_seconds,
            httponly=True,
            samesite="lax",
            secure=settings.session_cookie_secure,
        )
        return response

    @router.delete("/logout", summary="Log out of the browser session")
    async def logout(
        request: Request,
        service: AccountService = Depends(guards.service),
    ) -> RedirectResponse:
        await service.logout(guards.session_id(request))
        response = RedirectResponse(guards.login_url, status_code=303)
        response.delete_cookie(get_settings().session_cookie_name)
        return response
