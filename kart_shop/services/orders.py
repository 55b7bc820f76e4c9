"""Order lifecycle: status changes, cancellation and sales statistics"""

import logging
from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from ..core.errors import InvalidOrderTransition, OrderNotFound
from ..core.money import to_money
from ..database.orders import OrderDatabase
from ..models.receipt import OrderStatistics, OrderStatus, Receipt
from .cart_store import CatalogProvider
from .checkout import StockLockManager

logger = logging.getLogger(__name__)


class OrderService:
    """
    Operations on orders after checkout.

    Shares the checkout's stock locks, so returning stock on cancellation
    never interleaves with a checkout revalidating the same items.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        orders: OrderDatabase,
        locks: StockLockManager,
    ):
        self.catalog = catalog
        self.orders = orders
        self.locks = locks

    def get_order(self, order_id: str, customer: Any = None) -> Receipt:
        """Order by id; with a customer, only that customer's orders are visible"""
        receipt = self.orders.get_order(order_id)
        if receipt is None or (customer is not None and receipt.customer != customer):
            raise OrderNotFound(order_id)
        return receipt

    def update_status(self, order_id: str, status: OrderStatus) -> Receipt:
        """Move an order forward; cancelling goes through cancel()"""
        if status == OrderStatus.CANCELLED:
            return self.cancel(order_id)

        receipt = self.get_order(order_id)
        if not self.orders.update_status(order_id, status):
            raise InvalidOrderTransition(
                order_id, self.orders.status_of(order_id).value, status.value
            )
        return receipt

    def cancel(self, order_id: str, customer: Any = None) -> Receipt:
        """
        Cancel a confirmed order and put its units back in stock.

        Raises:
            OrderNotFound: unknown order, or not the customer's
            InvalidOrderTransition: the order is past the point of cancelling
        """
        receipt = self.get_order(order_id, customer)

        with self.locks.hold(line.merchandise_id for line in receipt.lines):
            if not self.orders.update_status(order_id, OrderStatus.CANCELLED):
                raise InvalidOrderTransition(
                    order_id,
                    self.orders.status_of(order_id).value,
                    OrderStatus.CANCELLED.value,
                )

            for line in receipt.lines:
                if not self.catalog.adjust_stock(line.merchandise_id, line.quantity):
                    logger.warning(
                        f"Order {order_id}: merchandise {line.merchandise_id} "
                        f"left the catalog, {line.quantity} unit(s) not restocked"
                    )
                    continue
                self.catalog.record_sale(line.merchandise_id, -line.quantity)

        logger.info(f"Order {order_id} cancelled, {receipt.total_units} unit(s) restocked")
        return receipt

    def statistics(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> OrderStatistics:
        """
        Sales report for orders created in [start, end].

        Cancelled orders are counted by status but add nothing to revenue
        or to the top items.
        """
        orders = self.orders.list_orders(start=start, end=end, limit=None)

        by_status = Counter()
        top_items = Counter()
        revenue = Decimal("0")
        sold = 0
        for receipt in orders:
            status = self.orders.status_of(receipt.order_id)
            by_status[status.value] += 1
            if status == OrderStatus.CANCELLED:
                continue
            sold += 1
            revenue += receipt.total
            for line in receipt.lines:
                top_items[line.name] += line.quantity

        return OrderStatistics(
            total_orders=len(orders),
            total_revenue=to_money(revenue),
            average_order_value=to_money(revenue / sold) if sold else to_money(0),
            orders_by_status=dict(by_status),
            top_items=dict(top_items.most_common()),
        )
