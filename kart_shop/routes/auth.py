"""Mock registration and login routes"""

import logging
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException

from ..core.config import settings
from ..core.session import session_manager
from ..database.carts import cart_db
from ..database.users import user_db
from ..models.user import LoginRequest, RegisterRequest, TokenResponse, User
from ..security.identity import current_session_id, require_user, token_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def check_password(password: str) -> None:
    if len(password) < settings.min_password_length:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.min_password_length} characters",
        )


def issue_token(user: User) -> TokenResponse:
    session = session_manager.create_session(user.user_id)
    return TokenResponse(
        access_token=token_service.issue(session),
        expires_in=settings.token_ttl_minutes * 60,
        user=user,
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest):
    """Register a new account and log it in"""
    check_password(request.password)

    user = user_db.register(
        name=request.name,
        email=request.email,
        phone=request.phone,
        address=request.address,
    )
    if not user:
        raise HTTPException(status_code=409, detail="Email already registered")

    logger.info(f"Registered user {user.user_id}")
    return issue_token(user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Mock login.

    Any email is accepted as long as the password is long enough;
    unknown emails get an account on the spot.
    """
    check_password(request.password)
    user = user_db.get_or_register(request.email)
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account disabled")

    logger.info(f"User {user.user_id} logged in")
    return issue_token(user)


@router.post("/logout")
async def logout(
    user: Any = Depends(require_user),
    session_id: Optional[str] = Depends(current_session_id),
):
    """End the session and drop the carts it owned"""
    session = session_manager.get_session(session_id) if session_id else None
    dropped = 0
    if session:
        for cart_id in session.cart_ids:
            if cart_db.delete_cart(cart_id):
                dropped += 1
        session_manager.delete_session(session.session_id)

    return {"logged_out": True, "carts_dropped": dropped}


@router.get("/me", response_model=User)
async def me(user: Any = Depends(require_user)):
    """Current user's profile"""
    profile = user_db.get_by_id(user)
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return profile
