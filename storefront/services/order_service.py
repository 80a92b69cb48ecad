# storefront/services/order_service.py
import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.models.order import Order, OrderItem
from storefront.models.product import Product
from storefront.models.user import User
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.order import (
    PHONE_RE,
    PINCODE_RE,
    CartLine,
    CartQuote,
    CartQuoteLine,
    CheckoutData,
    OrderCreate,
    OrderItemRead,
    OrderStatusUpdate,
    OrderWithItemsRead,
)

logger = logging.getLogger(__name__)

# Shipping is free for now
SHIPPING_COST = 0.0

ACCEPTED_PAYMENT_METHODS = {"cod"}

# Allowed admin transitions
STATUS_TRANSITIONS: dict[str, set[str]] = {
    "Processing": {"Shipped", "Cancelled"},
    "Shipped": {"Delivered"},
    "Delivered": set(),
    "Cancelled": set(),
}


def compute_total(subtotal: float, shipping_cost: float = SHIPPING_COST) -> float:
    """
    total_amount is always subtotal + shipping_cost.
    """
    if subtotal < 0 or shipping_cost < 0:
        raise ValueError("subtotal and shipping_cost must be non-negative")
    return subtotal + shipping_cost


def validate_checkout(checkout: CheckoutData) -> None:
    """
    Check contact/shipping fields in the order the checkout form shows them.

    Raises:
        HTTPException(400) with the first problem found.
    """
    required = [
        (checkout.customer_name, "Customer name is required"),
        (checkout.customer_phone, "Customer phone is required"),
        (checkout.shipping_address_line1, "Shipping address is required"),
        (checkout.shipping_city, "Shipping city is required"),
        (checkout.shipping_state, "Shipping state is required"),
        (checkout.shipping_pincode, "Shipping pincode is required"),
    ]
    for value, message in required:
        if not value:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    if not PHONE_RE.fullmatch(checkout.customer_phone):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter a valid 10-digit phone number",
        )

    if not PINCODE_RE.fullmatch(checkout.shipping_pincode):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter a valid 6-digit pincode",
        )

    if checkout.payment_method not in ACCEPTED_PAYMENT_METHODS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only Cash on Delivery is currently available",
        )


def _friendly_db_message(exc: SQLAlchemyError, constraint_msg: str, duplicate_msg: str) -> str:
    text = str(getattr(exc, "orig", exc) or exc).lower()
    if "duplicate" in text or "unique" in text:
        return duplicate_msg
    if "constraint" in text:
        return constraint_msg
    return "database error"


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Validate checkout details (name, 10-digit phone, 6-digit pincode, COD)
      - Price the cart snapshot against live products
      - Insert the order, then its items; remove the order again if the
        items cannot be stored
      - Ownership checks, cancellation, admin status transitions
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ):
        self.order_repo = order_repo
        self.product_repo = product_repo

    # -------- Pricing --------

    def _resolve_products(
        self,
        session: Session,
        lines: list[CartLine],
    ) -> dict[uuid.UUID, Product]:
        if not lines:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        product_map = {
            p.id: p
            for p in self.product_repo.get_many(session, [line.product_id for line in lines])
        }

        errors: list[dict[str, str]] = []
        for line in lines:
            product = product_map.get(line.product_id)
            if product is None:
                errors.append(
                    {"product_id": str(line.product_id), "reason": "Product not found"}
                )
            elif product.sold_out:
                errors.append(
                    {"product_id": str(line.product_id), "reason": "Product is sold out"}
                )

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )
        return product_map

    def quote_cart(self, session: Session, lines: list[CartLine]) -> CartQuote:
        """
        Price a cart snapshot with live product prices.
        """
        product_map = self._resolve_products(session, lines)

        quote_lines: list[CartQuoteLine] = []
        subtotal = 0.0
        for line in lines:
            product = product_map[line.product_id]
            line_total = line.quantity * product.price
            subtotal += line_total
            quote_lines.append(
                CartQuoteLine(
                    product_id=product.id,
                    name=product.name,
                    quantity=line.quantity,
                    unit_price=product.price,
                    line_total=line_total,
                )
            )

        return CartQuote(
            items=quote_lines,
            subtotal=subtotal,
            shipping_cost=SHIPPING_COST,
            total_amount=compute_total(subtotal, SHIPPING_COST),
        )

    # -------- Checkout --------

    def create_order(
        self,
        session: Session,
        payload: OrderCreate,
        user: User | None = None,
    ) -> OrderWithItemsRead:
        """
        Place a cash-on-delivery order.

        Steps:
          1. Validate checkout fields.
          2. Price the cart against live products (price snapshot).
          3. Insert the Order row (status 'Processing').
          4. Insert the OrderItem rows.
          5. If 4 fails: roll back, delete the order row if it is still
             there, and report the failure.
        """
        checkout = payload.checkout
        validate_checkout(checkout)

        quote = self.quote_cart(session, payload.items)

        order = Order(
            user_id=user.id if user else None,
            customer_name=checkout.customer_name,
            customer_phone=checkout.customer_phone,
            shipping_address_line1=checkout.shipping_address_line1,
            shipping_address_line2=checkout.shipping_address_line2,
            shipping_city=checkout.shipping_city,
            shipping_state=checkout.shipping_state,
            shipping_pincode=checkout.shipping_pincode,
            subtotal=quote.subtotal,
            shipping_cost=quote.shipping_cost,
            total_amount=quote.total_amount,
            payment_method=checkout.payment_method,
            payment_id=checkout.payment_id,
            status="Processing",
        )

        try:
            order = self.order_repo.create_order(session, order)
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Order creation error: %s", exc)
            message = _friendly_db_message(
                exc,
                "Invalid data provided. Please check your information and try again.",
                "An order with this information already exists.",
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to create order: {message}",
            )

        order_id = order.id
        items = [
            OrderItem(
                order_id=order_id,
                product_id=line.product_id,
                quantity=line.quantity,
                price_at_purchase=line.unit_price,
            )
            for line in quote.items
        ]

        try:
            items = self.order_repo.create_items(session, items)
            session.commit()
        except SQLAlchemyError as exc:
            logger.error("Order items creation failed for order %s: %s", order_id, exc)
            self._discard_order(session, order_id)
            message = _friendly_db_message(
                exc,
                "Invalid product data. Please try again.",
                "Duplicate order items detected.",
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to create order items: {message}",
            )

        session.refresh(order)
        logger.info("Order %s created (%d items, total %.2f)", order.id, len(items), order.total_amount)
        return self._build_order_with_items_dto(session, order, items)

    def _discard_order(self, session: Session, order_id: uuid.UUID) -> None:
        """
        Compensating action for a failed item insert.

        Rolling back drops the uncommitted order; if the order row was
        already committed it is deleted explicitly.
        """
        session.rollback()
        leftover = self.order_repo.get_by_id(session, order_id)
        if leftover is not None:
            self.order_repo.delete_order(session, leftover)
            session.commit()
            logger.warning("Deleted order %s after item insert failure", order_id)

    # -------- Reads --------

    def _get_order_or_404(self, session: Session, order_id: uuid.UUID) -> Order:
        order = self.order_repo.get_by_id(session, order_id)
        if not order or order.deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    def get_order(
        self,
        session: Session,
        order_id: uuid.UUID,
        user: User | None,
    ) -> OrderWithItemsRead:
        """
        Order with items.

        - Orders placed by a signed-in user are visible to that user and
          to admins only (404 for anyone else).
        - Guest orders are reachable by id (order confirmation page).
        """
        order = self._get_order_or_404(session, order_id)
        if order.user_id is not None:
            is_owner = user is not None and user.id == order.user_id
            is_admin = user is not None and user.role == "admin"
            if not (is_owner or is_admin):
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Order not found",
                )

        items = self.order_repo.list_items_for_order(session, order.id)
        return self._build_order_with_items_dto(session, order, items)

    def list_user_orders(
        self,
        session: Session,
        user_id: str,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderWithItemsRead]:
        orders = self.order_repo.list_for_user(session, user_id, skip, limit)
        return self._attach_items(session, orders)

    def list_orders_by_phone(
        self,
        session: Session,
        phone: str,
    ) -> list[OrderWithItemsRead]:
        orders = self.order_repo.list_by_phone(session, phone.strip())
        return self._attach_items(session, orders)

    def list_all_orders(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[Order]:
        return self.order_repo.list_all(session, skip, limit)

    # -------- Status changes --------

    def cancel_order(
        self,
        session: Session,
        order_id: uuid.UUID,
        user: User,
        reason: str,
    ) -> Order:
        """
        Customer cancellation. Only 'Processing' orders can be cancelled.
        """
        order = self._get_order_or_404(session, order_id)
        if order.user_id != user.id and user.role != "admin":
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        if order.status != "Processing":
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Order cannot be cancelled in status {order.status}",
            )

        order.status = "Cancelled"
        order.cancellation_reason = reason
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        return order

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> Order:
        """
        Admin-only status update with simple state machine:

          Processing -> Shipped, Cancelled
          Shipped    -> Delivered
          Delivered  -> (no change)
          Cancelled  -> (no change)

        Any invalid transition raises 400.
        """
        order = self._get_order_or_404(session, order_id)

        current = order.status
        new = payload.status

        if current == new:
            return order

        if new not in STATUS_TRANSITIONS.get(current, set()):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid status transition: {current} -> {new}",
            )

        order.status = new
        order.updated_at = datetime.now(timezone.utc)
        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)
        return order

    # -------- Helper DTO builders --------

    def _attach_items(
        self,
        session: Session,
        orders: list[Order],
    ) -> list[OrderWithItemsRead]:
        """
        Fetch items of all orders in one query and group them per order.
        """
        items = self.order_repo.list_items_for_orders(session, [o.id for o in orders])
        by_order: dict[uuid.UUID, list[OrderItem]] = {}
        for item in items:
            by_order.setdefault(item.order_id, []).append(item)

        return [
            self._build_order_with_items_dto(session, o, by_order.get(o.id, []))
            for o in orders
        ]

    def _build_order_with_items_dto(
        self,
        session: Session,
        order: Order,
        items: list[OrderItem],
    ) -> OrderWithItemsRead:
        products = {
            p.id: p
            for p in self.product_repo.get_many(
                session, [it.product_id for it in items if it.product_id]
            )
        }

        item_dtos: list[OrderItemRead] = []
        for it in items:
            product = products.get(it.product_id) if it.product_id else None
            item_dtos.append(
                OrderItemRead(
                    id=it.id,
                    order_id=it.order_id,
                    product_id=it.product_id,
                    quantity=it.quantity,
                    price_at_purchase=it.price_at_purchase,
                    line_total=it.quantity * it.price_at_purchase,
                    product_name=product.name if product else None,
                    product_images=list(product.images or []) if product else [],
                )
            )

        return OrderWithItemsRead(
            **order.model_dump(
                include=set(OrderWithItemsRead.model_fields) - {"items"}
            ),
            items=item_dtos,
        )
