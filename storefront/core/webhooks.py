# storefront/core/webhooks.py
import hmac
import json
import logging
from typing import Any, Mapping

from fastapi import HTTPException, status
from svix.webhooks import Webhook, WebhookVerificationError

from storefront.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


def verify_clerk_webhook(body: bytes, headers: Mapping[str, str]) -> dict[str, Any]:
    """
    Verify a Clerk (svix-signed) webhook and return the decoded event.

    Raises:
        HTTPException(503): CLERK_WEBHOOK_SECRET is not configured.
        HTTPException(400): svix headers missing or signature invalid.
    """
    if not settings.CLERK_WEBHOOK_SECRET:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Webhook secret is not configured",
        )

    svix_headers = {name: headers.get(name) for name in SVIX_HEADERS}
    if not all(svix_headers.values()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing svix headers",
        )

    try:
        Webhook(settings.CLERK_WEBHOOK_SECRET).verify(body, svix_headers)
    except WebhookVerificationError as exc:
        logger.warning("Rejected Clerk webhook %s: %s", svix_headers["svix-id"], exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid webhook signature",
        )

    # verify() only checks the signature; its return value differs across svix versions
    try:
        event = json.loads(body)
    except ValueError:
        event = None
    if not isinstance(event, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook payload must be a JSON object",
        )
    return event


def verify_supabase_webhook(authorization: str | None) -> None:
    """
    Check the Authorization header of a database webhook against
    SUPABASE_WEBHOOK_SECRET ("Bearer <secret>" or the bare secret).

    Without a configured secret every call is accepted.

    Raises:
        HTTPException(401): header missing or wrong.
    """
    secret = settings.SUPABASE_WEBHOOK_SECRET
    if not secret:
        logger.warning("SUPABASE_WEBHOOK_SECRET not set, accepting unverified webhook")
        return

    token = (authorization or "").strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()

    if not token or not hmac.compare_digest(token.encode(), secret.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook authorization",
        )
