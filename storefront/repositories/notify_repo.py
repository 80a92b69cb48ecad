# storefront/repositories/notify_repo.py
import uuid

from sqlmodel import Session, select

from storefront.models.notify import ProductNotifyRequest


class NotifyRepository:

    def get_request(
        self,
        session: Session,
        product_id: uuid.UUID,
        user_email: str,
    ) -> ProductNotifyRequest | None:
        stmt = select(ProductNotifyRequest).where(
            ProductNotifyRequest.product_id == product_id,
            ProductNotifyRequest.user_email == user_email,
        )
        return session.exec(stmt).first()

    def list_pending(
        self, session: Session, product_id: uuid.UUID
    ) -> list[ProductNotifyRequest]:
        stmt = (
            select(ProductNotifyRequest)
            .where(
                ProductNotifyRequest.product_id == product_id,
                ProductNotifyRequest.notified == False,  # noqa: E712
            )
            .order_by(ProductNotifyRequest.created_at)
        )
        return list(session.exec(stmt).all())

    def create(
        self, session: Session, request: ProductNotifyRequest
    ) -> ProductNotifyRequest:
        session.add(request)
        session.commit()
        session.refresh(request)
        return request

    def save_all(
        self, session: Session, requests: list[ProductNotifyRequest]
    ) -> None:
        session.add_all(requests)
        session.commit()
