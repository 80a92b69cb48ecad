# storefront/schemas/custom_design.py
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

DesignStatus = Literal[
    "pending",
    "reviewing",
    "quoted",
    "in_progress",
    "completed",
    "rejected",
]


class CategoryRead(SQLModel):
    id: str
    name: str
    description: str | None = None
    image_url: str | None = None
    is_active: bool


class CustomDesignCreate(SQLModel):
    """
    Intake form for a custom design request.
    """

    model_config = ConfigDict(extra="forbid")

    customer_name: str = Field(max_length=100)
    customer_email: EmailStr
    customer_phone: str | None = Field(default=None, max_length=20)
    category_id: str
    product_id: uuid.UUID | None = None
    design_reference_images: list[str] = Field(default_factory=list, max_length=5)
    quantity: int = Field(default=1, ge=1)
    additional_details: str | None = Field(default=None, max_length=2000)

    @field_validator("customer_name", "category_id")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("customer_phone", "additional_details")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class CustomDesignRead(SQLModel):
    id: uuid.UUID
    customer_name: str
    customer_email: str
    customer_phone: str | None
    category_id: str
    product_id: uuid.UUID | None
    design_reference_images: list[str] | None
    quantity: int
    additional_details: str | None
    status: DesignStatus
    admin_notes: str | None
    estimated_completion_date: date | None
    estimated_price: float | None
    final_price: float | None
    created_at: datetime
    updated_at: datetime


class CustomDesignDetailRead(CustomDesignRead):
    """
    Request with the names of its category and base product.
    """

    category_name: str | None = None
    product_name: str | None = None
    product_price: float | None = None


class CustomDesignStatusUpdate(SQLModel):
    """
    Admin payload. Optional fields are only written when provided.
    """

    model_config = ConfigDict(extra="forbid")

    status: DesignStatus
    admin_notes: str | None = None
    estimated_price: float | None = Field(default=None, gt=0)
    final_price: float | None = Field(default=None, gt=0)
    estimated_completion_date: date | None = None
