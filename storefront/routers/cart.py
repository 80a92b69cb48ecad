# storefront/routers/cart.py
from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.database import get_session
from storefront.routers.orders import service as order_service
from storefront.schemas.order import CartQuote, CartQuoteRequest

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.post("/quote", response_model=CartQuote)
def quote_cart(
    payload: CartQuoteRequest,
    session: Session = Depends(get_session),
):
    """
    Price the client-side cart with live product prices.

    The cart itself lives in the browser; nothing is stored here.
    """
    return order_service.quote_cart(session, payload.items)
