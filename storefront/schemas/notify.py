# storefront/schemas/notify.py
import uuid
from datetime import datetime

from pydantic import ConfigDict, EmailStr
from sqlmodel import SQLModel, Field


class NotifyRequestCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    user_email: EmailStr
    user_name: str | None = Field(default=None, max_length=100)


class NotifyRequestRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    user_email: str
    user_name: str | None
    notified: bool
    notified_at: datetime | None
    created_at: datetime


class NotifyRequestStatus(SQLModel):
    has_request: bool


class NotifySendResult(SQLModel):
    """
    Outcome of sending back-in-stock emails for a product.
    """

    notified_count: int
    failed_emails: list[str]
