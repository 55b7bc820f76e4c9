"""Checkout and order API routes"""

import logging
from datetime import datetime
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException

from ..core.config import settings
from ..core.errors import KartShopError, PersistenceFailed
from ..core.session import session_manager
from ..models.receipt import (
    CheckoutRequest,
    CheckoutResponse,
    OrderStatistics,
    OrderStatus,
    OrderStatusRequest,
    Receipt,
    ReceiptResponse,
)
from ..database.carts import cart_db
from ..database.merchandise import merchandise_db
from ..database.orders import order_db
from ..security.identity import current_session_id, optional_user, require_admin, require_user
from ..services.checkout import CheckoutProcessor, StockLockManager
from ..services.orders import OrderService
from .errors import http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])

# Checkout and cancellation share one set of stock locks
stock_locks = StockLockManager()

checkout_processor = CheckoutProcessor(
    catalog=merchandise_db,
    order_history=order_db,
    locks=stock_locks,
    currency=settings.currency,
)
order_service = OrderService(
    catalog=merchandise_db,
    orders=order_db,
    locks=stock_locks,
)


def order_response(receipt: Receipt) -> ReceiptResponse:
    return ReceiptResponse.from_receipt(receipt, status=order_db.status_of(receipt.order_id))


@router.post("", response_model=CheckoutResponse)
async def checkout(
    request: CheckoutRequest,
    user: Optional[Any] = Depends(optional_user),
    session_id: Optional[str] = Depends(current_session_id),
):
    """
    Place an order for the cart.

    An empty cart is rejected before the login check, so anonymous
    visitors still see "Your cart is empty". A logged-in user checking
    out an anonymous cart takes ownership of it.
    """
    cart = cart_db.get_cart(request.cart_id)
    if not cart or not cart.accessible_by(user):
        raise HTTPException(status_code=404, detail="Cart not found")

    if user is not None and cart.owner is None:
        cart.claim(user, session_id)
        session = session_manager.get_session(session_id) if session_id else None
        if session:
            session.attach_cart(cart.cart_id)

    try:
        receipt = checkout_processor.checkout(cart, user)
    except PersistenceFailed as exc:
        # Sale is final; report it without the history record
        logger.error(f"Checkout for cart {request.cart_id}: {exc}")
        return CheckoutResponse(
            success=True,
            receipt=ReceiptResponse.from_receipt(exc.receipt),
            recorded=False,
            message=str(exc),
        )
    except KartShopError as exc:
        raise http_error(exc)

    return CheckoutResponse(
        success=True,
        receipt=order_response(receipt),
        message=f"Order placed successfully! Total: {receipt.currency} {receipt.total}",
    )


@router.get("/orders/stats", response_model=OrderStatistics)
async def order_statistics(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    admin: str = Depends(require_admin),
):
    """Sales report over all customers (admin)"""
    return order_service.statistics(start=start, end=end)


@router.get("/orders/{order_id}", response_model=ReceiptResponse)
async def get_order(order_id: str, user: Any = Depends(require_user)):
    """Get one of the caller's orders"""
    try:
        return order_response(order_service.get_order(order_id, customer=user))
    except KartShopError as exc:
        raise http_error(exc)


@router.get("/orders", response_model=list[ReceiptResponse])
async def list_orders(
    status: Optional[OrderStatus] = None,
    limit: int = 50,
    user: Any = Depends(require_user),
):
    """List the caller's recent orders"""
    return [
        order_response(receipt)
        for receipt in order_db.list_orders(customer=user, status=status, limit=limit)
    ]


@router.post("/orders/{order_id}/cancel", response_model=ReceiptResponse)
async def cancel_order(order_id: str, user: Any = Depends(require_user)):
    """Cancel one of the caller's confirmed orders and restock its items"""
    try:
        receipt = order_service.cancel(order_id, customer=user)
    except KartShopError as exc:
        raise http_error(exc)
    return order_response(receipt)


@router.patch("/orders/{order_id}/status", response_model=ReceiptResponse)
async def update_order_status(
    order_id: str,
    request: OrderStatusRequest,
    admin: str = Depends(require_admin),
):
    """Move any order along its lifecycle (admin)"""
    try:
        receipt = order_service.update_status(order_id, request.status)
    except KartShopError as exc:
        raise http_error(exc)
    return order_response(receipt)
