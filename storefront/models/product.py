# storefront/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column
from sqlmodel import SQLModel, Field

from storefront.models.columns import StringArray


class Category(SQLModel, table=True):
    """
    Catalog category.

    id is a human-readable key (e.g. "terracotta-pots"), name is the
    display label that products also carry in their `category` column.
    """

    __tablename__ = "categories"

    id: str = Field(primary_key=True, max_length=100)
    name: str = Field(max_length=100, index=True)
    description: str | None = None
    image_url: str | None = None
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Invariant:
      - slug is generate_slug(name), made unique with a numeric suffix.
        Enforced by the unique column and by ProductService on every write.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the artwork/product",
    )

    slug: str = Field(
        max_length=255,
        unique=True,
        index=True,
        description="URL-friendly identifier (unique)",
    )

    description: str | None = None
    specification: str | None = None

    price: float = Field(
        ge=0,
        description="Unit price (INR)",
    )
    original_price: float | None = Field(
        default=None,
        description="Pre-discount price, if discounted",
    )

    # Painting | Pots | Canvas | Hand Painted Jewelry | Terracotta Pots |
    # Fabric Painting | Portrait | Wall Hanging
    category: str | None = Field(default=None, index=True)
    category_id: str | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    size: str | None = None
    images: list[str] | None = Field(
        default=None,
        sa_column=Column(StringArray),
    )
    is_featured: bool = Field(default=False, index=True)
    ai_hint: str | None = None
    sold_out: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last update timestamp (UTC)",
    )
