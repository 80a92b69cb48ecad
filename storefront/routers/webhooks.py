# storefront/routers/webhooks.py
import json
import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.core.webhooks import verify_clerk_webhook, verify_supabase_webhook
from storefront.database import get_session
from storefront.routers.users import service as user_service
from storefront.schemas.system import WebhookAck
from storefront.services.webhook_service import WebhookService

router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])

service = WebhookService(user_service)

logger = logging.getLogger(__name__)


@router.post("/clerk", response_model=WebhookAck)
async def clerk_webhook(
    request: Request,
    session: Session = Depends(get_session),
):
    """
    Identity-provider events (svix-signed).

    - 400: svix headers missing or signature invalid
    - 503: CLERK_WEBHOOK_SECRET not configured
    """
    body = await request.body()
    event = verify_clerk_webhook(body, request.headers)
    service.handle_clerk_event(session, event)
    return WebhookAck()


@router.post("/supabase", response_model=WebhookAck)
async def supabase_webhook(
    request: Request,
    session: Session = Depends(get_session),
    authorization: str | None = Header(None),
):
    """
    Database events (ORDER_CREATED, PAYMENT_COMPLETED).
    """
    verify_supabase_webhook(authorization)
    try:
        payload = json.loads(await request.body())
        service.handle_supabase_event(session, payload)
    except (ValueError, AttributeError, SQLAlchemyError) as exc:
        logger.error("Supabase webhook failed: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Webhook processing failed"},
        )
    return WebhookAck()
