# storefront/models/notify.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class ProductNotifyRequest(SQLModel, table=True):
    """
    "Tell me when it's back" request for a sold-out product.
    """

    __tablename__ = "product_notify_requests"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    user_email: str = Field(index=True)
    user_name: str | None = None

    notified: bool = Field(default=False, index=True)
    notified_at: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
