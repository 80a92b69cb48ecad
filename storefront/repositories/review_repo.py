# storefront/repositories/review_repo.py
import uuid

from sqlalchemy import func
from sqlmodel import Session, select

from storefront.models.review import Review


class ReviewRepository:
    """
    Data access layer for reviews.
    """

    def get_by_id(self, session: Session, review_id: uuid.UUID) -> Review | None:
        return session.get(Review, review_id)

    def list_for_product(self, session: Session, product_id: uuid.UUID) -> list[Review]:
        stmt = (
            select(Review)
            .where(Review.product_id == product_id)
            .order_by(Review.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def list_for_user(
        self,
        session: Session,
        user_id: str,
        product_id: uuid.UUID | None = None,
    ) -> list[Review]:
        stmt = select(Review).where(Review.user_id == user_id)
        if product_id is not None:
            stmt = stmt.where(Review.product_id == product_id)
        stmt = stmt.order_by(Review.created_at.desc())
        return list(session.exec(stmt).all())

    def count_for_user_product(
        self,
        session: Session,
        user_id: str,
        product_id: uuid.UUID,
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(Review)
            .where(Review.user_id == user_id, Review.product_id == product_id)
        )
        return int(session.exec(stmt).one() or 0)

    def rating_summary(self, session: Session, product_id: uuid.UUID) -> tuple[float, int]:
        """
        Return (average rating, review count) for a product.
        """
        stmt = (
            select(func.coalesce(func.avg(Review.rating), 0.0), func.count(Review.id))
            .where(Review.product_id == product_id)
        )
        average, count = session.exec(stmt).one()
        return float(average or 0.0), int(count or 0)

    def create(self, session: Session, review: Review) -> Review:
        session.add(review)
        session.commit()
        session.refresh(review)
        return review

    def update(self, session: Session, review: Review) -> Review:
        session.add(review)
        session.commit()
        session.refresh(review)
        return review

    def delete(self, session: Session, review: Review) -> None:
        session.delete(review)
        session.commit()
