# storefront/services/user_service.py
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.user import User
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import UserRoleUpdate, UserUpdate

logger = logging.getLogger(__name__)


def _primary_value(
    entries: list[dict[str, Any]] | None,
    primary_id: str | None,
    key: str,
) -> str | None:
    """
    Pick the primary entry of a Clerk email_addresses / phone_numbers list,
    or the first one when no primary is marked.
    """
    if not entries:
        return None
    for entry in entries:
        if primary_id and entry.get("id") == primary_id:
            return entry.get(key)
    return entries[0].get(key)


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - profile reads and edits for the signed-in user
      - admin listing and role changes
      - mirroring identity-provider events (create / update / delete)
    """

    def __init__(self, repo: UserRepository, order_repo: OrderRepository):
        self.repo = repo
        self.order_repo = order_repo

    # ----- Self profile -----

    def get_me(self, current_user: User) -> User:
        """Return the current authenticated user."""
        return current_user

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits. Email is owned by the identity
        provider and cannot be changed here.
        """
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(current_user, field, value)
        current_user.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, current_user)

    # ----- Admin operations -----

    def list_users(
        self,
        session: Session,
        role: str | None = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[User]:
        """List users, optionally filtered by role (admin only)."""
        return self.repo.list(session, role=role, skip=skip, limit=limit)

    def get_user(self, session: Session, user_id: str) -> User:
        """
        Get a user by id (admin only).

        Raises:
            HTTPException(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user

    def update_role(
        self,
        session: Session,
        user_id: str,
        payload: UserRoleUpdate,
    ) -> User:
        """Change user's role (admin only)."""
        user = self.get_user(session, user_id)
        user.role = payload.role
        user.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, user)

    # ----- Identity provider sync -----

    def sync_from_identity(self, session: Session, data: dict[str, Any]) -> User:
        """
        Upsert the local mirror from a user.created / user.updated payload.

        The application role is never taken from the payload.
        """
        user_id = data.get("id")
        if not user_id:
            raise ValueError("user payload without id")

        email = _primary_value(
            data.get("email_addresses"),
            data.get("primary_email_address_id"),
            "email_address",
        )
        phone = _primary_value(
            data.get("phone_numbers"),
            data.get("primary_phone_number_id"),
            "phone_number",
        )

        user = self.repo.get_by_id(session, user_id)
        if user is None:
            user = User(id=user_id, role="user")

        user.email = email or user.email
        user.first_name = data.get("first_name") or ""
        user.last_name = data.get("last_name") or ""
        user.phone = phone or user.phone
        user.avatar_url = data.get("image_url") or user.avatar_url
        user.updated_at = datetime.now(timezone.utc)
        return self.repo.save(session, user)

    def remove_from_identity(self, session: Session, user_id: str) -> int:
        """
        Handle user.deleted: drop the mirror row and flag the user's orders
        as deleted. Returns the number of flagged orders.
        """
        flagged = self.order_repo.flag_deleted_for_user(session, user_id)
        user = self.repo.get_by_id(session, user_id)
        if user is not None:
            self.repo.delete(session, user)
        session.commit()
        return flagged
