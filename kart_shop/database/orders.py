"""Order history storage"""

import logging
import threading
from datetime import datetime
from typing import Any, Optional

from ..models.receipt import ORDER_TRANSITIONS, OrderStatus, Receipt

logger = logging.getLogger(__name__)


class OrderDatabase:
    """In-memory order history.

    Receipts are immutable, so they are stored as-is and never updated.
    The lifecycle status of each order is kept next to its receipt.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.orders: dict[str, Receipt] = {}
        self.statuses: dict[str, OrderStatus] = {}

    def record(self, receipt: Receipt) -> bool:
        """Store a committed receipt; False if the order id is already taken"""
        with self._lock:
            if receipt.order_id in self.orders:
                logger.error(f"Duplicate order id {receipt.order_id}")
                return False
            self.orders[receipt.order_id] = receipt
            self.statuses[receipt.order_id] = OrderStatus.CONFIRMED
        return True

    def get_order(self, order_id: str) -> Optional[Receipt]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def status_of(self, order_id: str) -> Optional[OrderStatus]:
        return self.statuses.get(order_id)

    def update_status(self, order_id: str, status: OrderStatus) -> bool:
        """
        Move an order to a new status.

        Returns:
            True if the move was allowed, False if the order is unknown or
            its current status does not lead to ``status``
        """
        with self._lock:
            current = self.statuses.get(order_id)
            if current is None or status not in ORDER_TRANSITIONS[current]:
                return False
            self.statuses[order_id] = status

        logger.info(f"Order {order_id}: {current.value} -> {status.value}")
        return True

    def list_orders(
        self,
        customer: Any = None,
        status: Optional[OrderStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = 50,
    ) -> list[Receipt]:
        """List recent orders, newest first, with optional filters"""
        orders = [
            order for order in self.orders.values()
            if (customer is None or order.customer == customer)
            and (status is None or self.statuses.get(order.order_id) == status)
            and (start is None or order.created_at >= start)
            and (end is None or order.created_at <= end)
        ]
        orders.sort(key=lambda o: o.created_at, reverse=True)
        return orders if limit is None else orders[:limit]

    def reset(self) -> None:
        with self._lock:
            self.orders.clear()
            self.statuses.clear()


# Singleton instance
order_db = OrderDatabase()
