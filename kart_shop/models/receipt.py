"""Receipt and checkout models"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class OrderStatus(str, Enum):
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Allowed moves out of each status; cancelled and completed are final
ORDER_TRANSITIONS = {
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


@dataclass(frozen=True)
class ReceiptLine:
    """Committed cart line with the unit price captured at commit time"""
    merchandise_id: str
    name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class Receipt:
    """Immutable record of a completed purchase"""
    order_id: str
    customer: Any
    lines: tuple[ReceiptLine, ...]
    total: Decimal
    currency: str
    created_at: datetime

    @property
    def total_units(self) -> int:
        return sum(line.quantity for line in self.lines)


class CheckoutRequest(BaseModel):
    """Request to checkout"""
    cart_id: str


class ReceiptLineResponse(BaseModel):
    merchandise_id: str
    name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class ReceiptResponse(BaseModel):
    """Receipt as returned by the API"""
    order_id: str
    lines: list[ReceiptLineResponse]
    total: Decimal
    currency: str
    created_at: datetime
    status: OrderStatus = OrderStatus.CONFIRMED

    @classmethod
    def from_receipt(
        cls,
        receipt: Receipt,
        status: OrderStatus = OrderStatus.CONFIRMED,
    ) -> "ReceiptResponse":
        return cls(
            order_id=receipt.order_id,
            status=status,
            lines=[
                ReceiptLineResponse(
                    merchandise_id=line.merchandise_id,
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    total_price=line.total_price,
                )
                for line in receipt.lines
            ],
            total=receipt.total,
            currency=receipt.currency,
            created_at=receipt.created_at,
        )


class CheckoutResponse(BaseModel):
    """Response from checkout"""
    success: bool
    receipt: Optional[ReceiptResponse] = None
    recorded: bool = True
    message: Optional[str] = None


class OrderStatusRequest(BaseModel):
    """Move an order along its lifecycle"""
    status: OrderStatus


class OrderStatistics(BaseModel):
    """Sales report over a window of orders"""
    total_orders: int
    total_revenue: Decimal
    average_order_value: Decimal
    orders_by_status: dict[str, int] = Field(default_factory=dict)
    top_items: dict[str, int] = Field(default_factory=dict)
