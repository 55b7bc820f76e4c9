# Cart and checkout services

from .cart_store import CartStore, CatalogProvider
from .checkout import CheckoutProcessor, OrderHistory, StockLockManager
from .orders import OrderService

__all__ = [
    "CartStore",
    "CatalogProvider",
    "CheckoutProcessor",
    "OrderHistory",
    "OrderService",
    "StockLockManager",
]
