# storefront/schemas/wishlist.py
import uuid
from datetime import datetime

from sqlmodel import SQLModel

from storefront.schemas.product import ProductRead


class WishlistItemRead(SQLModel):
    id: uuid.UUID
    user_id: str
    product_id: uuid.UUID
    created_at: datetime


class WishlistEntryRead(WishlistItemRead):
    """
    Wishlist row with the product it points at (None if it was deleted).
    """

    product: ProductRead | None = None


class WishlistStatus(SQLModel):
    product_id: uuid.UUID
    is_in_wishlist: bool


class WishlistCount(SQLModel):
    count: int
