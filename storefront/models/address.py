# storefront/models/address.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class UserAddress(SQLModel, table=True):
    """
    Saved shipping address.

    At most one address per user has is_default=True; AddressService
    clears the flag on the others before setting it.
    """

    __tablename__ = "user_addresses"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: str = Field(index=True, max_length=64)

    label: str = Field(max_length=50, description="Home / Work / ...")
    full_name: str = Field(max_length=100)
    phone: str | None = Field(default=None, max_length=20)
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    pincode: str = Field(max_length=6)
    country: str = Field(default="India")
    is_default: bool = Field(default=False, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
