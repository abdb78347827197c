"""
Vendor backend routes, mounted under /api/vendor.

Endpoints:
    - GET  /login, /register, /home: entry pages
    - POST /login, /register, DELETE /logout: account flow
    - POST /open, /close, /relocate: van status (bearer)
    - GET  /orders, /order/{order_id}: order queue (bearer)
    - POST /fulfillOrder: mark an order ready for pickup (bearer)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from foodvan.api.accounts import add_account_routes
from foodvan.auth.guards import AccountGuards
from foodvan.database import get_db
from foodvan.models import Vendor
from foodvan.schemas import (
    ErrorResponse,
    FulfillOrderRequest,
    OrderResponse,
    VanLocationUpdate,
    VendorRegister,
    VendorResponse,
)
from foodvan.services.accounts.service import AccountService
from foodvan.services.vendors import VendorService

logger = logging.getLogger(__name__)

PREFIX = "/api/vendor"

guards: AccountGuards[Vendor] = AccountGuards(Vendor, prefix=PREFIX)
router = APIRouter(prefix=PREFIX, tags=["Vendor"])

add_account_routes(router, guards)

BEARER_ERRORS = {401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


def get_vendor_service(db: AsyncSession = Depends(get_db)) -> VendorService:
    return VendorService(db)


# =============================================================================
# ACCOUNT
# =============================================================================

@router.post(
    "/register",
    status_code=302,
    responses={500: {"model": ErrorResponse}},
    dependencies=[Depends(guards.require_anonymous)],
    summary="Register a van",
)
async def register(
    body: VendorRegister,
    service: AccountService[Vendor] = Depends(guards.service),
) -> RedirectResponse:
    await service.register(body.email, body.password, name=body.name)
    return RedirectResponse(guards.login_url, status_code=302)


# =============================================================================
# STATUS
# =============================================================================

@router.post("/open", response_model=VendorResponse, responses=BEARER_ERRORS)
async def open_van(
    body: VanLocationUpdate,
    vendor: Vendor = Depends(guards.require_bearer),
    service: VendorService = Depends(get_vendor_service),
) -> VendorResponse:
    """Open for business at the posted address and location."""
    vendor = await service.open(vendor, address=body.address, location=body.location)
    return VendorResponse.from_vendor(vendor)


@router.post("/close", response_model=VendorResponse, responses=BEARER_ERRORS)
async def close_van(
    vendor: Vendor = Depends(guards.require_bearer),
    service: VendorService = Depends(get_vendor_service),
) -> VendorResponse:
    vendor = await service.close(vendor)
    return VendorResponse.from_vendor(vendor)


@router.post("/relocate", response_model=VendorResponse, responses=BEARER_ERRORS)
async def relocate_van(
    body: VanLocationUpdate,
    vendor: Vendor = Depends(guards.require_bearer),
    service: VendorService = Depends(get_vendor_service),
) -> VendorResponse:
    vendor = await service.relocate(vendor, address=body.address, location=body.location)
    return VendorResponse.from_vendor(vendor)


# =============================================================================
# ORDERS
# =============================================================================

@router.get("/orders", response_model=list[OrderResponse], responses=BEARER_ERRORS)
async def outstanding_orders(
    vendor: Vendor = Depends(guards.require_bearer),
    service: VendorService = Depends(get_vendor_service),
) -> list[OrderResponse]:
    """Orders of this van that are still being prepared."""
    orders = await service.outstanding_orders(vendor)
    return [OrderResponse.model_validate(o) for o in orders]


@router.get(
    "/order/{order_id}",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}, **BEARER_ERRORS},
)
async def order_details(
    order_id: int,
    vendor: Vendor = Depends(guards.require_bearer),
    service: VendorService = Depends(get_vendor_service),
) -> OrderResponse:
    order = await service.get_order(vendor, order_id)
    return OrderResponse.model_validate(order)


@router.post(
    "/fulfillOrder",
    response_model=OrderResponse,
    responses={404: {"model": ErrorResponse}, **BEARER_ERRORS},
)
async def fulfill_order(
    body: FulfillOrderRequest,
    vendor: Vendor = Depends(guards.require_bearer),
    service: VendorService = Depends(get_vendor_service),
) -> OrderResponse:
    """Mark one of this van's orders ready for pickup."""
    order = await service.fulfill_order(vendor, body.order)
    return OrderResponse.model_validate(order)
