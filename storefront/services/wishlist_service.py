# storefront/services/wishlist_service.py
import logging
import uuid
from typing import Callable

import httpx
from fastapi import HTTPException, status
from postgrest.exceptions import APIError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session
from supabase import Client

from storefront.core.supabase_client import supabase_rpc_client
from storefront.models.wishlist import WishlistItem
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.product import ProductRead
from storefront.schemas.wishlist import WishlistCount, WishlistEntryRead, WishlistStatus

logger = logging.getLogger(__name__)

TOGGLE_RPC = "toggle_wishlist_item"


class WishlistService:
    """
    Business logic for wishlists.

    Toggle goes through the toggle_wishlist_item database function when a
    Supabase client is available, and falls back to a check-then-write on
    the ORM session otherwise. The fallback is not atomic; the unique
    (user_id, product_id) constraint catches a concurrent double insert.
    """

    def __init__(
        self,
        repo: WishlistRepository,
        product_repo: ProductRepository,
        rpc_client_factory: Callable[[], Client | None] = supabase_rpc_client,
    ):
        self.repo = repo
        self.product_repo = product_repo
        self.rpc_client_factory = rpc_client_factory

    def _ensure_product(self, session: Session, product_id: uuid.UUID) -> None:
        if self.product_repo.get_by_id(session, product_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

    def list_items(self, session: Session, user_id: str) -> list[WishlistEntryRead]:
        items = self.repo.list_for_user(session, user_id)
        products = {
            p.id: p
            for p in self.product_repo.get_many(session, [i.product_id for i in items])
        }

        entries = []
        for item in items:
            product = products.get(item.product_id)
            entries.append(
                WishlistEntryRead(
                    id=item.id,
                    user_id=item.user_id,
                    product_id=item.product_id,
                    created_at=item.created_at,
                    product=(
                        ProductRead.model_validate(product, from_attributes=True)
                        if product
                        else None
                    ),
                )
            )
        return entries

    def add(self, session: Session, user_id: str, product_id: uuid.UUID) -> WishlistItem:
        self._ensure_product(session, product_id)
        if self.repo.get_item(session, user_id, product_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product is already in your wishlist",
            )
        try:
            return self.repo.create(
                session, WishlistItem(user_id=user_id, product_id=product_id)
            )
        except IntegrityError:
            session.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product is already in your wishlist",
            )

    def remove(self, session: Session, user_id: str, product_id: uuid.UUID) -> None:
        item = self.repo.get_item(session, user_id, product_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product is not in your wishlist",
            )
        self.repo.delete(session, item)

    def is_in_wishlist(
        self, session: Session, user_id: str, product_id: uuid.UUID
    ) -> WishlistStatus:
        item = self.repo.get_item(session, user_id, product_id)
        return WishlistStatus(product_id=product_id, is_in_wishlist=item is not None)

    def count(self, session: Session, user_id: str) -> WishlistCount:
        return WishlistCount(count=self.repo.count_for_user(session, user_id))

    # ----- Toggle -----

    def _toggle_via_rpc(self, user_id: str, product_id: uuid.UUID) -> bool | None:
        """
        Call the database function. Returns None when it is unavailable.
        """
        client = self.rpc_client_factory()
        if client is None:
            return None
        try:
            response = client.rpc(
                TOGGLE_RPC,
                {"user_uuid": user_id, "product_uuid": str(product_id)},
            ).execute()
        except (APIError, httpx.HTTPError) as exc:
            logger.warning("RPC %s failed, using fallback: %s", TOGGLE_RPC, exc)
            return None

        if not isinstance(response.data, bool):
            logger.warning(
                "RPC %s returned unexpected data %r, using fallback",
                TOGGLE_RPC,
                response.data,
            )
            return None
        return response.data

    def _toggle_fallback(
        self, session: Session, user_id: str, product_id: uuid.UUID
    ) -> bool:
        item = self.repo.get_item(session, user_id, product_id)
        if item is not None:
            self.repo.delete(session, item)
            return False

        self._ensure_product(session, product_id)
        try:
            self.repo.create(session, WishlistItem(user_id=user_id, product_id=product_id))
        except IntegrityError:
            # Inserted concurrently; it is in the wishlist either way
            session.rollback()
        return True

    def toggle(
        self, session: Session, user_id: str, product_id: uuid.UUID
    ) -> WishlistStatus:
        """
        Flip membership and return the new state.
        """
        added = self._toggle_via_rpc(user_id, product_id)
        if added is None:
            added = self._toggle_fallback(session, user_id, product_id)
        return WishlistStatus(product_id=product_id, is_in_wishlist=added)
