# storefront/repositories/wishlist_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.wishlist import WishlistItem


class WishlistRepository:

    def list_for_user(self, session: Session, user_id: str) -> list[WishlistItem]:
        stmt = (
            select(WishlistItem)
            .where(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: str, product_id: uuid.UUID
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.user_id == user_id, WishlistItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def count_for_user(self, session: Session, user_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(WishlistItem)
            .where(WishlistItem.user_id == user_id)
        )
        return int(session.exec(stmt).one() or 0)

    # CRUD
    def create(self, session: Session, item: WishlistItem) -> WishlistItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: WishlistItem) -> None:
        session.delete(item)
        session.commit()
