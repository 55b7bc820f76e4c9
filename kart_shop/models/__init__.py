# Shop Models

from .merchandise import (
    Merchandise,
    MerchandiseCategory,
    MerchandiseRef,
    MerchandiseSearchResponse,
    MerchandiseSortField,
    MerchandiseUpdateRequest,
    RatingRequest,
    RestockRequest,
    SortOrder,
)
from .cart import (
    CartLine,
    CartUpdate,
    StockLimited,
    AddToCartRequest,
    UpdateCartItemRequest,
    CartLineView,
    CartView,
    CartResponse,
)
from .receipt import (
    Receipt,
    ReceiptLine,
    CheckoutRequest,
    CheckoutResponse,
    ReceiptResponse,
    OrderStatus,
    OrderStatusRequest,
    OrderStatistics,
)
from .user import User, RegisterRequest, LoginRequest, TokenResponse

__all__ = [
    "Merchandise",
    "MerchandiseCategory",
    "MerchandiseRef",
    "MerchandiseSearchResponse",
    "MerchandiseSortField",
    "MerchandiseUpdateRequest",
    "RatingRequest",
    "RestockRequest",
    "SortOrder",
    "CartLine",
    "CartUpdate",
    "StockLimited",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartLineView",
    "CartView",
    "CartResponse",
    "Receipt",
    "ReceiptLine",
    "CheckoutRequest",
    "CheckoutResponse",
    "ReceiptResponse",
    "OrderStatus",
    "OrderStatusRequest",
    "OrderStatistics",
    "User",
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
]
