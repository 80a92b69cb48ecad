# storefront/routers/wishlist.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.wishlist_repo import WishlistRepository
from storefront.schemas.wishlist import (
    WishlistCount,
    WishlistEntryRead,
    WishlistItemRead,
    WishlistStatus,
)
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])

repo = WishlistRepository()
product_repo = ProductRepository()
service = WishlistService(repo, product_repo)


@router.get("", response_model=list[WishlistEntryRead])
def list_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    The current user's wishlist with product details.
    """
    return service.list_items(session, current_user.id)


@router.get("/count", response_model=WishlistCount)
def wishlist_count(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.count(session, current_user.id)


@router.get("/{product_id}", response_model=WishlistStatus)
def is_in_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return service.is_in_wishlist(session, current_user.id, product_id)


@router.post(
    "/{product_id}",
    response_model=WishlistItemRead,
    status_code=status.HTTP_201_CREATED,
)
def add_to_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add a product. 409 if it is already there.
    """
    return service.add(session, current_user.id, product_id)


@router.post("/{product_id}/toggle", response_model=WishlistStatus)
def toggle_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Add the product if absent, remove it if present.
    """
    return service.toggle(session, current_user.id, product_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    service.remove(session, current_user.id, product_id)
    return None
