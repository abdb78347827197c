"""
SQLAlchemy Database Models

Account tables for the two backends plus the orders vendors fulfil:
- Customer accounts (customer backend)
- Vendor accounts with van status (vendor backend)
- Orders placed with a vendor

Both account tables share the credential columns (email, password
digest, current bearer token) through AccountMixin so the auth flow
can treat them alike.

Version: 1.0.0
"""

import enum

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, Enum, Boolean, ForeignKey
from sqlalchemy.sql import func

from foodvan.database import Base


class AccountKind(str, enum.Enum):
    """Which backend an account belongs to."""
    CUSTOMER = "customer"
    VENDOR = "vendor"


class OrderStatus(str, enum.Enum):
    """Order status workflow as seen by the van."""
    PREPARING = "Preparing"
    READY = "Ready for pickup"
    FULFILLED = "Fulfilled"
    CANCELLED = "Cancelled"


class AccountMixin:
    """
    Credential columns shared by every account variant.

    ``password`` always holds a bcrypt digest. ``token`` is the single
    active bearer token; replacing it revokes every earlier token.
    """

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(100), nullable=False)
    token = Column(String(512), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class Customer(AccountMixin, Base):
    """A customer who orders from vans."""
    __tablename__ = "customers"

    kind = AccountKind.CUSTOMER

    given_name = Column(String(100), nullable=True)
    family_name = Column(String(100), nullable=True)

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.given_name, self.family_name) if p)

    def __repr__(self):
        return f"<Customer #{self.id} - {self.email}>"


class Vendor(AccountMixin, Base):
    """
    A food van.

    The van is only visible to customers while ``open`` is set; its
    parked location is the last address/position sent with /open or
    /relocate.
    """
    __tablename__ = "vendors"

    kind = AccountKind.VENDOR

    name = Column(String(100), nullable=True)

    # =========================================================================
    # VAN STATUS
    # =========================================================================
    open = Column(Boolean, default=False, nullable=False)
    address = Column(String(255), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    @property
    def full_name(self) -> str:
        return self.name or ""

    def __repr__(self):
        state = "open" if self.open else "closed"
        return f"<Vendor #{self.id} - {self.email} - {state}>"


class Order(Base):
    """An order placed with a van."""
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True, index=True)

    items = Column(Text, nullable=False)  # JSON string of ordered items

    status = Column(
        Enum(OrderStatus, values_callable=lambda e: [m.value for m in e]),
        default=OrderStatus.PREPARING,
        nullable=False,
        index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<Order #{self.id} - vendor {self.vendor_id} - {self.status.value}>"
