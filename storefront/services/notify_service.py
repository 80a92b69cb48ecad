# storefront/services/notify_service.py
import logging
import smtplib
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.config import get_settings
from storefront.core.email_client import send_email
from storefront.models.notify import ProductNotifyRequest
from storefront.repositories.notify_repo import NotifyRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.notify import (
    NotifyRequestCreate,
    NotifyRequestStatus,
    NotifySendResult,
)

settings = get_settings()
logger = logging.getLogger(__name__)


class NotifyService:
    """
    Back-in-stock notification requests.
    """

    def __init__(self, repo: NotifyRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    def _get_product_or_404(self, session: Session, product_id: uuid.UUID):
        product = self.product_repo.get_by_id(session, product_id)
        if product is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def request_notification(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: NotifyRequestCreate,
    ) -> ProductNotifyRequest:
        self._get_product_or_404(session, product_id)
        email = str(payload.user_email).lower()

        if self.repo.get_request(session, product_id, email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You have already requested a notification for this product",
            )

        user_name = (payload.user_name or "").strip() or email.split("@")[0]
        return self.repo.create(
            session,
            ProductNotifyRequest(product_id=product_id, user_email=email, user_name=user_name),
        )

    def has_request(
        self, session: Session, product_id: uuid.UUID, email: str
    ) -> NotifyRequestStatus:
        found = self.repo.get_request(session, product_id, email.strip().lower())
        return NotifyRequestStatus(has_request=found is not None)

    def list_pending(
        self, session: Session, product_id: uuid.UUID
    ) -> list[ProductNotifyRequest]:
        return self.repo.list_pending(session, product_id)

    def send_notifications(self, session: Session, product_id: uuid.UUID) -> NotifySendResult:
        """
        Email every pending requester and mark the delivered ones notified.

        Failed recipients stay pending so a later run retries them.
        """
        if not settings.smtp_configured:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Email delivery is not configured",
            )

        product = self._get_product_or_404(session, product_id)
        pending = self.repo.list_pending(session, product_id)
        product_url = f"{settings.APP_URL.rstrip('/')}/product/{product.slug}"

        notified: list[ProductNotifyRequest] = []
        failed: list[str] = []
        for request in pending:
            subject = f"{product.name} is back in stock"
            text_body = (
                f"Hi {request.user_name or 'there'},\n\n"
                f"Good news! {product.name} is available again.\n"
                f"Get it here: {product_url}\n\n"
                f"{settings.SMTP_FROM_NAME}"
            )
            try:
                send_email(request.user_email, subject, text_body)
            except (smtplib.SMTPException, OSError) as exc:
                logger.error("Back-in-stock mail to %s failed: %s", request.user_email, exc)
                failed.append(request.user_email)
                continue

            request.notified = True
            request.notified_at = datetime.now(timezone.utc)
            notified.append(request)

        if notified:
            self.repo.save_all(session, notified)
        logger.info(
            "Back-in-stock for %s: %d sent, %d failed", product_id, len(notified), len(failed)
        )
        return NotifySendResult(notified_count=len(notified), failed_emails=failed)
