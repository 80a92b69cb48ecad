# storefront/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.review import ReviewRead

ProductCategory = Literal[
    "Painting",
    "Pots",
    "Canvas",
    "Hand Painted Jewelry",
    "Terracotta Pots",
    "Fabric Painting",
    "Portrait",
    "Wall Hanging",
]


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    slug: str
    description: str | None = None
    specification: str | None = None
    price: float
    original_price: float | None = None
    category: str | None = None
    category_id: str | None = None
    size: str | None = None
    images: list[str] = []
    is_featured: bool = False
    ai_hint: str | None = None
    sold_out: bool = False
    created_at: datetime

    @field_validator("images", mode="before")
    @classmethod
    def images_never_null(cls, v: list[str] | None) -> list[str]:
        if not v:
            return []
        return [img for img in v if isinstance(img, str) and img.strip()]


class ProductDetailRead(ProductRead):
    """
    Product page payload, including its reviews.
    """

    reviews: list[ReviewRead] = []


class ProductDiscountRead(ProductRead):
    discount_percentage: int


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - slug is optional: if omitted, generated from `name`.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    slug: str | None = None
    description: str | None = None
    specification: str | None = None
    price: float = Field(ge=0)
    original_price: float | None = Field(default=None, ge=0)
    category: ProductCategory | None = None
    category_id: str | None = None
    size: str | None = None
    images: list[str] = []
    is_featured: bool = False
    ai_hint: str | None = None
    sold_out: bool = False

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_required(v)

    @field_validator("slug")
    @classmethod
    def normalize_slug(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        if not v:
            raise ValueError("slug cannot be empty if provided")
        return v


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    slug: str | None = None
    description: str | None = None
    specification: str | None = None
    price: float | None = Field(default=None, ge=0)
    original_price: float | None = Field(default=None, ge=0)
    category: ProductCategory | None = None
    category_id: str | None = None
    size: str | None = None
    images: list[str] | None = None
    is_featured: bool | None = None
    ai_hint: str | None = None
    sold_out: bool | None = None

    @field_validator("name", "slug")
    @classmethod
    def not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return _strip_required(v)

    @field_validator("name", "price", "is_featured", "sold_out")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v


class SlugFix(SQLModel):
    id: uuid.UUID
    old_slug: str | None
    new_slug: str


class SlugRepairReport(SQLModel):
    """
    Result of a slug repair run.
    """

    success: bool = True
    message: str
    fixed_count: int
    total_products: int
    fixed_products: list[SlugFix]
