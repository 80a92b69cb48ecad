# storefront/models/review.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column
from sqlmodel import SQLModel, Field

from storefront.models.columns import StringArray


class Review(SQLModel, table=True):
    """
    Product review.

    author_name is the display name shown on the storefront; user_id ties
    the review to its author for ownership checks and the per-product cap.
    """

    __tablename__ = "reviews"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    user_id: str = Field(index=True, max_length=64)
    author_name: str = Field(max_length=100)

    rating: int = Field(ge=1, le=5)
    comment: str | None = Field(default=None, max_length=1000)
    image_urls: list[str] | None = Field(
        default=None,
        sa_column=Column(StringArray),
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
