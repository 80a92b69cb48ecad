# storefront/schemas/order.py
import re
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

OrderStatus = Literal["Processing", "Shipped", "Delivered", "Cancelled"]

PHONE_RE = re.compile(r"[0-9]{10}")
PINCODE_RE = re.compile(r"[0-9]{6}")


class CartLine(SQLModel):
    """
    One entry of the client-side cart snapshot.
    """

    product_id: uuid.UUID
    quantity: int = Field(ge=1)


class CheckoutData(SQLModel):
    """
    Contact and shipping details entered at checkout.

    Field rules (name non-empty, 10-digit phone, 6-digit pincode, COD only)
    are checked in OrderService so that the caller gets one readable
    message per problem.
    """

    model_config = ConfigDict(extra="forbid")

    customer_name: str = ""
    customer_phone: str = ""
    shipping_address_line1: str = ""
    shipping_address_line2: str | None = None
    shipping_city: str = ""
    shipping_state: str = ""
    shipping_pincode: str = ""
    payment_method: str = "cod"
    payment_id: str | None = None

    @field_validator(
        "customer_name",
        "customer_phone",
        "shipping_address_line1",
        "shipping_city",
        "shipping_state",
        "shipping_pincode",
        "payment_method",
    )
    @classmethod
    def strip(cls, v: str) -> str:
        return v.strip()

    @field_validator("shipping_address_line2", "payment_id")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderCreate(SQLModel):
    """
    Checkout payload: contact details plus the cart snapshot.
    """

    model_config = ConfigDict(extra="forbid")

    checkout: CheckoutData
    items: list[CartLine]


class CartQuoteRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    items: list[CartLine]


class CartQuoteLine(SQLModel):
    product_id: uuid.UUID
    name: str
    quantity: int
    unit_price: float
    line_total: float


class CartQuote(SQLModel):
    """
    Priced cart: total_amount == subtotal + shipping_cost.
    """

    items: list[CartQuoteLine]
    subtotal: float
    shipping_cost: float
    total_amount: float


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: str | None
    customer_name: str
    customer_phone: str | None
    shipping_address_line1: str
    shipping_address_line2: str | None
    shipping_city: str
    shipping_state: str
    shipping_pincode: str
    subtotal: float
    shipping_cost: float
    total_amount: float
    payment_method: str
    payment_id: str | None
    status: OrderStatus
    cancellation_reason: str | None
    created_at: datetime


class OrderItemRead(SQLModel):
    """
    Order line with the product's name and images, when still available.
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID | None
    quantity: int
    price_at_purchase: float
    line_total: float
    product_name: str | None = None
    product_images: list[str] = []


class OrderWithItemsRead(OrderRead):
    """
    Full order view including items.
    """

    items: list[OrderItemRead]


class OrderCancel(SQLModel):
    model_config = ConfigDict(extra="forbid")

    reason: str = Field(min_length=1, max_length=500)

    @field_validator("reason")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please select or provide a reason for cancelling your order.")
        return v


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
