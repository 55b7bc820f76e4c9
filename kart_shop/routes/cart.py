"""Cart API routes"""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException

from ..core.config import settings
from ..core.errors import KartShopError
from ..core.session import session_manager
from ..models.cart import (
    AddToCartRequest,
    CartResponse,
    CartView,
    UpdateCartItemRequest,
)
from ..database.carts import cart_db
from ..security.identity import current_session_id, optional_user
from ..services.cart_store import CartStore
from .errors import http_error

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def cart_view(cart: CartStore) -> CartView:
    try:
        return CartView(**cart.summary(), currency=settings.currency)
    except KartShopError as exc:
        raise http_error(exc)


def cart_response(
    cart: CartStore,
    message: Optional[str] = None,
    warnings: Optional[list[str]] = None,
) -> CartResponse:
    """Pull lines back under live stock, then render the cart"""
    notices = cart.reconcile()
    warnings = list(warnings or []) + [notice.message for notice in notices]
    return CartResponse(cart=cart_view(cart), message=message, warnings=warnings)


def load_cart(cart_id: str, user: Optional[Any]) -> CartStore:
    """Cart by id; someone else's cart is reported as missing"""
    cart = cart_db.get_cart(cart_id)
    if not cart or not cart.accessible_by(user):
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart


@router.post("", response_model=CartResponse)
async def create_cart(
    user: Optional[Any] = Depends(optional_user),
    session_id: Optional[str] = Depends(current_session_id),
):
    """Create a new shopping cart"""
    cart_db.purge_expired(session_manager, settings.session_max_age_hours)

    session = session_manager.get_session(session_id) if session_id else None
    if session:
        cart = cart_db.create_cart(owner=user, session_id=session.session_id)
        session.attach_cart(cart.cart_id)
    else:
        cart = cart_db.create_cart()
    return cart_response(cart, message="Cart created")


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str, user: Optional[Any] = Depends(optional_user)):
    """Get cart by ID, pulling lines back under live stock"""
    return cart_response(load_cart(cart_id, user))


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_to_cart(
    cart_id: str,
    request: AddToCartRequest,
    user: Optional[Any] = Depends(optional_user),
):
    """Add an item to the cart"""
    cart = load_cart(cart_id, user)
    try:
        update = cart.add_item(request.merchandise_id, request.quantity)
    except KartShopError as exc:
        raise http_error(exc)

    warnings = [update.stock_limited.message] if update.limited else []
    return cart_response(cart, message=f"{update.name} added to cart!", warnings=warnings)


@router.put("/{cart_id}/items/{merchandise_id}", response_model=CartResponse)
async def update_cart_item(
    cart_id: str,
    merchandise_id: str,
    request: UpdateCartItemRequest,
    user: Optional[Any] = Depends(optional_user),
):
    """Update item quantity in cart"""
    cart = load_cart(cart_id, user)
    try:
        update = cart.update_quantity(merchandise_id, request.quantity)
    except KartShopError as exc:
        raise http_error(exc)

    warnings = [update.stock_limited.message] if update.limited else []
    return cart_response(cart, message="Cart updated", warnings=warnings)


@router.delete("/{cart_id}/items/{merchandise_id}", response_model=CartResponse)
async def remove_from_cart(
    cart_id: str,
    merchandise_id: str,
    user: Optional[Any] = Depends(optional_user),
):
    """Remove an item from the cart"""
    cart = load_cart(cart_id, user)
    cart.remove_item(merchandise_id)
    return cart_response(cart, message="Item removed")


@router.delete("/{cart_id}", response_model=CartResponse)
async def clear_cart(cart_id: str, user: Optional[Any] = Depends(optional_user)):
    """Clear all items from cart"""
    cart = load_cart(cart_id, user)
    cart.clear()
    return cart_response(cart, message="Cart cleared")
