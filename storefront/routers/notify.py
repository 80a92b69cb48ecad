# storefront/routers/notify.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr
from sqlmodel import Session

from storefront.core.auth import require_admin
from storefront.database import get_session
from storefront.repositories.notify_repo import NotifyRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.notify import (
    NotifyRequestCreate,
    NotifyRequestRead,
    NotifyRequestStatus,
    NotifySendResult,
)
from storefront.services.notify_service import NotifyService

router = APIRouter(prefix="/products/{product_id}/notify", tags=["Notifications"])

repo = NotifyRepository()
product_repo = ProductRepository()
service = NotifyService(repo, product_repo)


@router.post(
    "",
    response_model=NotifyRequestRead,
    status_code=status.HTTP_201_CREATED,
)
def request_notification(
    product_id: uuid.UUID,
    payload: NotifyRequestCreate,
    session: Session = Depends(get_session),
):
    """
    Ask to be emailed when a sold-out product is back (guests allowed).
    """
    return service.request_notification(session, product_id, payload)


@router.get("/status", response_model=NotifyRequestStatus)
def notification_status(
    product_id: uuid.UUID,
    email: EmailStr = Query(...),
    session: Session = Depends(get_session),
):
    return service.has_request(session, product_id, str(email))


@router.get(
    "",
    response_model=list[NotifyRequestRead],
    dependencies=[Depends(require_admin)],
)
def list_pending_requests(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.list_pending(session, product_id)


@router.post(
    "/send",
    response_model=NotifySendResult,
    dependencies=[Depends(require_admin)],
)
def send_notifications(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Email all pending requesters and mark them notified (admin only).
    """
    return service.send_notifications(session, product_id)
