# storefront/models/custom_design.py
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Column
from sqlmodel import SQLModel, Field

from storefront.models.columns import StringArray


class CustomDesignRequest(SQLModel, table=True):
    """
    Customer intake for a made-to-order piece.

    References a category and a base product, plus the public URLs of
    uploaded reference images.
    """

    __tablename__ = "custom_designs"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    customer_name: str = Field(max_length=100)
    customer_email: str = Field(index=True)
    customer_phone: str | None = Field(default=None, max_length=20)

    category_id: str = Field(foreign_key="categories.id", index=True)
    product_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="products.id",
    )

    design_reference_images: list[str] | None = Field(
        default=None,
        sa_column=Column(StringArray),
    )
    quantity: int = Field(default=1, gt=0)
    additional_details: str | None = None

    # pending | reviewing | quoted | in_progress | completed | rejected
    status: str = Field(default="pending", index=True)
    admin_notes: str | None = None
    estimated_completion_date: date | None = None
    estimated_price: float | None = None
    final_price: float | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
