"""
Vendor Service

Van status (open, close, relocate) and the order queue of a van. Every
operation acts on the vendor resolved from the bearer token; orders of
other vans are reported as not found.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from foodvan.auth.exceptions import NotFound, PersistenceError
from foodvan.models import Order, OrderStatus, Vendor
from foodvan.schemas import Location

logger = logging.getLogger(__name__)


class VendorService:
    """Status and order operations for the authenticated van."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _commit(self, what: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception(f"Could not {what}: {e}")
            raise PersistenceError() from e

    @staticmethod
    def _place(vendor: Vendor, address: Optional[str], location: Optional[Location]) -> None:
        if address is not None:
            vendor.address = address
        if location is not None:
            vendor.latitude = location.latitude
            vendor.longitude = location.longitude

    # =========================================================================
    # VAN STATUS
    # =========================================================================

    async def open(
        self,
        vendor: Vendor,
        address: Optional[str] = None,
        location: Optional[Location] = None,
    ) -> Vendor:
        """Open for business at the given address/position."""
        vendor.open = True
        self._place(vendor, address, location)
        await self._commit(f"open van #{vendor.id}")
        logger.info(f"🚚 Van #{vendor.id} open at {vendor.address or 'unknown address'}")
        return vendor

    async def close(self, vendor: Vendor) -> Vendor:
        """Stop taking orders. Closing a closed van changes nothing."""
        vendor.open = False
        await self._commit(f"close van #{vendor.id}")
        logger.info(f"Van #{vendor.id} closed")
        return vendor

    async def relocate(
        self,
        vendor: Vendor,
        address: Optional[str] = None,
        location: Optional[Location] = None,
    ) -> Vendor:
        """Move the van without changing whether it is open."""
        self._place(vendor, address, location)
        await self._commit(f"relocate van #{vendor.id}")
        logger.info(f"Van #{vendor.id} relocated to {vendor.address or 'unknown address'}")
        return vendor

    # =========================================================================
    # ORDERS
    # =========================================================================

    async def outstanding_orders(self, vendor: Vendor) -> list[Order]:
        """Orders still being prepared, oldest first."""
        query = (
            select(Order)
            .where(Order.vendor_id == vendor.id, Order.status == OrderStatus.PREPARING)
            .order_by(Order.created_at.asc(), Order.id.asc())
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.exception(f"Could not list orders of van #{vendor.id}: {e}")
            raise PersistenceError() from e
        return list(result.scalars().all())

    async def get_order(self, vendor: Vendor, order_id: int) -> Order:
        query = select(Order).where(Order.id == order_id, Order.vendor_id == vendor.id)
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.exception(f"Could not load order #{order_id}: {e}")
            raise PersistenceError() from e
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFound(f"Order #{order_id} not found")
        return order

    async def fulfill_order(self, vendor: Vendor, order_id: int) -> Order:
        """Mark an order ready for pickup."""
        order = await self.get_order(vendor, order_id)
        order.status = OrderStatus.READY
        await self._commit(f"fulfil order #{order_id}")
        await self.db.refresh(order)
        logger.info(f"✅ Order #{order_id} ready for pickup (van #{vendor.id})")
        return order
