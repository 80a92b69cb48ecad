# storefront/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order (cash on delivery).

    Created together with its OrderItems. If the items cannot be stored
    the order row is removed again (see OrderService.create_order).
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # Null for guest checkout
    user_id: str | None = Field(
        default=None,
        index=True,
        description="Clerk user id of the buyer, if signed in",
    )

    customer_name: str
    customer_phone: str | None = Field(default=None, index=True)

    shipping_address_line1: str
    shipping_address_line2: str | None = None
    shipping_city: str
    shipping_state: str
    shipping_pincode: str

    subtotal: float
    shipping_cost: float = 0.0
    total_amount: float = Field(
        description="subtotal + shipping_cost",
    )

    payment_method: str = Field(default="cod")
    payment_id: str | None = None

    # Processing | Shipped | Delivered | Cancelled
    status: str = Field(
        default="Processing",
        index=True,
        description="Order status lifecycle",
    )
    cancellation_reason: str | None = None

    # Set when the owning user is deleted at the identity provider
    deleted: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    price_at_purchase is a snapshot and never follows later price changes.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    price_at_purchase: float = Field(
        description="Unit price at time of order",
    )
