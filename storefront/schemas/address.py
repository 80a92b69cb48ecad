# storefront/schemas/address.py
import re
import uuid
from datetime import datetime

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

PINCODE_RE = re.compile(r"[0-9]{6}")
PHONE_RE = re.compile(r"[0-9]{10}")


def _check_pincode(v: str) -> str:
    v = v.strip()
    if not PINCODE_RE.fullmatch(v):
        raise ValueError("Please enter a valid 6-digit pincode")
    return v


def _check_phone(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        return None
    if not PHONE_RE.fullmatch(v):
        raise ValueError("Please enter a valid 10-digit phone number")
    return v


class AddressCreate(SQLModel):
    """
    Payload for saving a new address.

    is_default=True (or being the user's first address) makes it the
    default and clears the flag on the others.
    """

    model_config = ConfigDict(extra="forbid")

    label: str = Field(default="Home", max_length=50)
    full_name: str = Field(max_length=100)
    phone: str | None = None
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    pincode: str
    country: str = "India"
    is_default: bool = False

    @field_validator("label", "full_name", "address_line1", "city", "state", "country")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("pincode")
    @classmethod
    def valid_pincode(cls, v: str) -> str:
        return _check_pincode(v)

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str | None) -> str | None:
        return _check_phone(v)


class AddressUpdate(SQLModel):
    """
    Partial update. Use the set-default endpoint to change the default flag.
    """

    model_config = ConfigDict(extra="forbid")

    label: str | None = Field(default=None, max_length=50)
    full_name: str | None = Field(default=None, max_length=100)
    phone: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    country: str | None = None

    @field_validator("label", "full_name", "address_line1", "city", "state", "country")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("field cannot be null")
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("pincode")
    @classmethod
    def valid_pincode(cls, v: str | None) -> str | None:
        if v is None:
            raise ValueError("Please enter a valid 6-digit pincode")
        return _check_pincode(v)

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str | None) -> str | None:
        return _check_phone(v)


class AddressRead(SQLModel):
    id: uuid.UUID
    user_id: str
    label: str
    full_name: str
    phone: str | None
    address_line1: str
    address_line2: str | None
    city: str
    state: str
    pincode: str
    country: str
    is_default: bool
    created_at: datetime
    updated_at: datetime
