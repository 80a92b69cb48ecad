# storefront/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from storefront.core.auth import get_current_user, require_admin, require_auth
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import (
    OrderCancel,
    OrderCreate,
    OrderRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
product_repo = ProductRepository()
service = OrderService(order_repo, product_repo)


# -------- Customer endpoints --------


@router.post(
    "",
    response_model=OrderWithItemsRead,
    status_code=status.HTTP_201_CREATED,
)
def place_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Place a cash-on-delivery order from a cart snapshot.

    Auth:
      - Guests may check out; signed-in orders are linked to the user.
    """
    return service.create_order(session, payload, current_user)


@router.get("/me", response_model=list[OrderWithItemsRead])
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """
    List the authenticated user's orders with items, newest first.
    """
    return service.list_user_orders(session, current_user.id, skip, limit)


@router.get("/{order_id}", response_model=OrderWithItemsRead)
def get_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_current_user),
):
    """
    Get an order with items.

    - Orders of signed-in customers: owner or admin only.
    - Guest orders: anyone holding the id (confirmation page).
    """
    return service.get_order(session, order_id, current_user)


@router.post("/{order_id}/cancel", response_model=OrderRead)
def cancel_order(
    order_id: uuid.UUID,
    payload: OrderCancel,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Cancel one of your orders while it is still Processing.
    """
    return service.cancel_order(session, order_id, current_user, payload.reason)


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=list[OrderRead],
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
):
    """
    List all orders (admin only).
    """
    return service.list_all_orders(session, skip, limit)


@router.get(
    "/by-phone/{phone}",
    response_model=list[OrderWithItemsRead],
    dependencies=[Depends(require_admin)],
)
def list_orders_by_phone(
    phone: str,
    session: Session = Depends(get_session),
):
    """
    Orders placed with a given customer phone (admin only).
    """
    return service.list_orders_by_phone(session, phone)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only) with simple state machine.

      Processing -> Shipped, Cancelled

      Shipped    -> Delivered

      Delivered  -> (no change)

      Cancelled  -> (no change)

    """
    return service.update_status(session, order_id, payload)
