"""
Customer backend routes, mounted under /api/customer.

Endpoints:
    - GET  /login, /register, /home: entry pages
    - POST /login: credentials → {token}
    - POST /register: create account → 302 to /login
    - POST /update: bearer-authenticated email/password change
    - DELETE /logout: end the browser session
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from foodvan.api.accounts import add_account_routes
from foodvan.auth.guards import AccountGuards
from foodvan.models import Customer
from foodvan.schemas import CustomerRegister, CustomerResponse, CustomerUpdate, ErrorResponse
from foodvan.services.accounts.service import AccountService

logger = logging.getLogger(__name__)

PREFIX = "/api/customer"

guards: AccountGuards[Customer] = AccountGuards(Customer, prefix=PREFIX)
router = APIRouter(prefix=PREFIX, tags=["Customer"])

add_account_routes(router, guards)


@router.post(
    "/register",
    status_code=302,
    responses={500: {"model": ErrorResponse}},
    dependencies=[Depends(guards.require_anonymous)],
    summary="Register a customer account",
)
async def register(
    body: CustomerRegister,
    service: AccountService[Customer] = Depends(guards.service),
) -> RedirectResponse:
    """Create the account and send the browser to the login page."""
    await service.register(
        body.email,
        body.password,
        given_name=body.givenname,
        family_name=body.familyname,
    )
    return RedirectResponse(guards.login_url, status_code=302)


@router.post(
    "/update",
    response_model=CustomerResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Change email and/or password",
)
async def update(
    body: CustomerUpdate,
    customer: Customer = Depends(guards.require_bearer),
    service: AccountService[Customer] = Depends(guards.service),
) -> CustomerResponse:
    """
    Update the authenticated customer.

    ``old_password`` must match before anything changes. A new password
    rotates the token; the returned account carries the new one.
    """
    updated = await service.update(
        customer,
        old_password=body.old_password,
        new_email=body.new_email,
        new_password=body.new_password,
    )
    return CustomerResponse.model_validate(updated)
