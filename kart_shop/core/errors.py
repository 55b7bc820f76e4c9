"""Error types raised by the cart and checkout services"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.receipt import Receipt


class KartShopError(Exception):
    """Base class for all shop errors"""

    message = "Shop error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


# Cart errors

class CartError(KartShopError):
    """Raised by cart mutations"""


class ItemUnavailable(CartError):
    """Merchandise is unknown to the catalog or no longer on sale"""

    def __init__(self, merchandise_id: str):
        self.merchandise_id = merchandise_id
        super().__init__(f"Merchandise {merchandise_id} is not available")


class StockExhausted(CartError):
    """Cart line already holds every unit in stock"""

    def __init__(self, merchandise_id: str, available: int):
        self.merchandise_id = merchandise_id
        self.available = available
        super().__init__(
            f"No more stock for merchandise {merchandise_id}. Available: {available}"
        )


class InvalidQuantity(CartError):
    """Quantity must be a positive integer"""

    def __init__(self, quantity: int):
        self.quantity = quantity
        super().__init__(f"Quantity must be greater than 0, got {quantity}")


class CatalogLookupFailed(CartError):
    """Catalog could not resolve an item already present in a cart"""

    def __init__(self, merchandise_id: str):
        self.merchandise_id = merchandise_id
        super().__init__(f"Catalog lookup failed for merchandise {merchandise_id}")


# Checkout errors

class CheckoutError(KartShopError):
    """Raised when a cart cannot be turned into an order"""


class EmptyCart(CheckoutError):
    message = "Your cart is empty"


class NotAuthenticated(CheckoutError):
    message = "Please login to checkout"


class StockConflict(CheckoutError):
    """One or more lines exceed live stock.

    ``conflicts`` maps merchandise id to the quantity available when the
    cart was revalidated.
    """

    def __init__(self, conflicts: dict[str, int]):
        self.conflicts = dict(conflicts)
        ids = ", ".join(sorted(self.conflicts))
        super().__init__(f"Insufficient stock for merchandise: {ids}")

    @property
    def merchandise_ids(self) -> list[str]:
        return sorted(self.conflicts)


class PersistenceFailed(CheckoutError):
    """Order history could not record a committed receipt.

    The sale is final: stock has been decremented and the cart cleared.
    """

    def __init__(self, receipt: "Receipt", reason: Optional[str] = None):
        self.receipt = receipt
        self.reason = reason
        detail = f"Order {receipt.order_id} placed but could not be recorded"
        if reason:
            detail = f"{detail}: {reason}"
        super().__init__(detail)


# Order errors

class OrderError(KartShopError):
    """Raised by operations on committed orders"""


class OrderNotFound(OrderError):
    """Order id unknown, or the order belongs to someone else"""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class InvalidOrderTransition(OrderError):
    """Order cannot move from its current status to the requested one"""

    def __init__(self, order_id: str, current: str, requested: str):
        self.order_id = order_id
        self.current = current
        self.requested = requested
        super().__init__(f"Order {order_id} is {current} and cannot become {requested}")
