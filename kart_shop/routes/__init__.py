# API Routes

from .merchandise import router as merchandise_router
from .cart import router as cart_router
from .checkout import router as checkout_router
from .auth import router as auth_router
from .demo import router as demo_router

__all__ = [
    "merchandise_router",
    "cart_router",
    "checkout_router",
    "auth_router",
    "demo_router",
]
