"""
Pydantic Schemas for Request/Response Validation

Request bodies of both backends and the sanitized account views they
return. Account responses never include the password digest.

Version: 1.0.0
"""

import json
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# =============================================================================
# AUTH REQUEST SCHEMAS
# =============================================================================

class LoginRequest(BaseModel):
    """Credentials posted to /login."""
    email: str = Field(..., examples=["a@b.com"])
    password: str = Field(..., examples=["abc12345"])


class CustomerRegister(BaseModel):
    """Request schema for creating a customer account."""
    email: EmailStr = Field(..., examples=["a@b.com"])
    # Strength is checked by the password policy, not here
    password: str = Field(..., examples=["abc12345"])
    givenname: Optional[str] = Field(None, max_length=100, examples=["Ada"])
    familyname: Optional[str] = Field(None, max_length=100, examples=["Lovelace"])


class VendorRegister(BaseModel):
    """Request schema for creating a vendor (van) account."""
    email: EmailStr = Field(..., examples=["van@b.com"])
    password: str = Field(..., examples=["abc12345"])
    name: Optional[str] = Field(None, max_length=100, examples=["Tasty Van"])


class CustomerUpdate(BaseModel):
    """Profile change; old_password is always required."""
    old_password: str = Field(..., examples=["abc12345"])
    new_email: Optional[EmailStr] = Field(None, examples=["new@b.com"])
    new_password: Optional[str] = Field(None, examples=["xyz98765"])


# =============================================================================
# VENDOR REQUEST SCHEMAS
# =============================================================================

class Location(BaseModel):
    latitude: float = Field(..., ge=-90, le=90, examples=[-37.7983])
    longitude: float = Field(..., ge=-180, le=180, examples=[144.961])


class VanLocationUpdate(BaseModel):
    """Body of /open and /relocate."""
    address: Optional[str] = Field(None, max_length=255, examples=["700 Swanston Street"])
    location: Optional[Location] = None


class FulfillOrderRequest(BaseModel):
    order: int = Field(..., ge=1, examples=[42])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class TokenResponse(BaseModel):
    token: str


class CustomerResponse(BaseModel):
    """Customer account without the password digest."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    token: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class VendorResponse(BaseModel):
    """Vendor account and van status without the password digest."""
    id: int
    email: str
    name: Optional[str] = None
    open: bool
    address: Optional[str] = None
    position: Optional[Location] = None
    token: Optional[str] = None

    @classmethod
    def from_vendor(cls, vendor: Any) -> "VendorResponse":
        position = None
        if vendor.latitude is not None and vendor.longitude is not None:
            position = Location(latitude=vendor.latitude, longitude=vendor.longitude)
        return cls(
            id=vendor.id,
            email=vendor.email,
            name=vendor.name,
            open=bool(vendor.open),
            address=vendor.address,
            position=position,
            token=vendor.token,
        )


class OrderResponse(BaseModel):
    """Order as seen by the van."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    vendor_id: int
    customer_id: Optional[int] = None
    items: List[Any]
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("items", mode="before")
    @classmethod
    def parse_items(cls, v: Any) -> Any:
        """Orders store their items as a JSON string."""
        if isinstance(v, str):
            return json.loads(v)
        return v

    @field_validator("status", mode="before")
    @classmethod
    def status_value(cls, v: Any) -> Any:
        return getattr(v, "value", v)


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    flash: Optional[List[str]] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    sessions: str
    timestamp: datetime
