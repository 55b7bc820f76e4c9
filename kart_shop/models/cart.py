"""Cart models"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


@dataclass
class CartLine:
    """One merchandise entry in a cart"""
    merchandise_id: str
    quantity: int


@dataclass(frozen=True)
class StockLimited:
    """Notice that a requested quantity was clamped to the stock ceiling"""
    merchandise_id: str
    requested: int
    granted: int

    @property
    def message(self) -> str:
        return (
            f"Only {self.granted} left in stock for merchandise "
            f"{self.merchandise_id} (requested {self.requested})"
        )


@dataclass(frozen=True)
class CartUpdate:
    """Outcome of add_item / update_quantity"""
    merchandise_id: str
    name: str
    quantity: int
    stock_limited: Optional[StockLimited] = None

    @property
    def limited(self) -> bool:
        return self.stock_limited is not None


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    merchandise_id: str
    quantity: int = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity"""
    quantity: int


class CartLineView(BaseModel):
    """Cart line priced from the live catalog"""
    merchandise_id: str
    name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class CartView(BaseModel):
    """Shopping cart as shown to the customer"""
    cart_id: str
    lines: list[CartLineView] = []
    line_count: int = 0
    total_units: int = 0
    total_price: Decimal = Decimal("0.00")
    currency: str = "MYR"


class CartResponse(BaseModel):
    """Cart API response"""
    cart: CartView
    message: Optional[str] = None
    warnings: list[str] = []
