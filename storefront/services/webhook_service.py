# storefront/services/webhook_service.py
import logging
from typing import Any, Callable

from sqlmodel import Session

from storefront.services.user_service import UserService

logger = logging.getLogger(__name__)

Handler = Callable[[Session, dict[str, Any]], None]


class WebhookService:
    """
    Routes verified webhook events to their handlers.

    Each provider has a table from event type to handler; unknown types
    are logged and acknowledged.
    """

    def __init__(self, user_service: UserService):
        self.user_service = user_service
        self.clerk_handlers: dict[str, Handler] = {
            "user.created": self._on_user_upsert,
            "user.updated": self._on_user_upsert,
            "user.deleted": self._on_user_deleted,
        }
        self.supabase_handlers: dict[str, Handler] = {
            "ORDER_CREATED": self._on_order_created,
            "PAYMENT_COMPLETED": self._on_payment_completed,
        }

    def _dispatch(
        self,
        handlers: dict[str, Handler],
        source: str,
        session: Session,
        event_type: str | None,
        data: dict[str, Any],
    ) -> bool:
        handler = handlers.get(event_type or "")
        if handler is None:
            logger.info("Unhandled %s event type: %s", source, event_type)
            return False
        handler(session, data)
        return True

    def handle_clerk_event(self, session: Session, event: dict[str, Any]) -> bool:
        """
        Returns True when a handler ran.
        """
        return self._dispatch(
            self.clerk_handlers,
            "clerk",
            session,
            event.get("type"),
            event.get("data") or {},
        )

    def handle_supabase_event(self, session: Session, payload: dict[str, Any]) -> bool:
        return self._dispatch(
            self.supabase_handlers,
            "supabase",
            session,
            payload.get("type"),
            payload.get("record") or {},
        )

    # ----- Clerk -----

    def _on_user_upsert(self, session: Session, data: dict[str, Any]) -> None:
        if not data.get("id"):
            logger.warning("User event without id, ignored")
            return
        user = self.user_service.sync_from_identity(session, data)
        logger.info("Synced user %s from identity provider", user.id)

    def _on_user_deleted(self, session: Session, data: dict[str, Any]) -> None:
        user_id = data.get("id")
        if not user_id:
            logger.warning("user.deleted event without id")
            return
        flagged = self.user_service.remove_from_identity(session, user_id)
        logger.info("Deleted user %s, flagged %d orders", user_id, flagged)

    # ----- Supabase -----

    def _on_order_created(self, session: Session, record: dict[str, Any]) -> None:
        logger.info("Order created event: %s", record.get("id"))

    def _on_payment_completed(self, session: Session, record: dict[str, Any]) -> None:
        logger.info("Payment completed event: %s", record.get("id"))
