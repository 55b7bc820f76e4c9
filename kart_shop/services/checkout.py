"""Checkout: turn a cart into a committed order"""

import logging
import threading
import uuid
from contextlib import ExitStack, contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterable, Iterator, Optional, Protocol

from ..core.errors import EmptyCart, NotAuthenticated, PersistenceFailed, StockConflict
from ..core.money import line_total, to_money
from ..models.receipt import Receipt, ReceiptLine
from .cart_store import CartStore, CatalogProvider

logger = logging.getLogger(__name__)


class OrderHistory(Protocol):
    """Sink for committed receipts"""

    def record(self, receipt: Receipt) -> bool: ...


class StockLockManager:
    """
    Mutual exclusion per merchandise id.

    Locks for a set of ids are always taken in sorted order, so two
    checkouts touching overlapping items cannot deadlock.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, merchandise_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(merchandise_id)
            if lock is None:
                lock = self._locks[merchandise_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, merchandise_ids: Iterable[str]) -> Iterator[None]:
        with ExitStack() as stack:
            for merchandise_id in sorted(set(merchandise_ids)):
                stack.enter_context(self._lock_for(merchandise_id))
            yield


def generate_order_id() -> str:
    return f"ORD-{uuid.uuid4().hex[:8].upper()}"


class CheckoutProcessor:
    """
    Validates a cart against live stock and commits it.

    The revalidate-then-commit sequence runs while holding the stock locks
    of every item in the cart plus the cart's own lock, and the order
    history write happens inside the same section. Stock that was
    decremented is never restored if only the history write fails.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        order_history: OrderHistory,
        locks: Optional[StockLockManager] = None,
        currency: str = "MYR",
    ):
        self.catalog = catalog
        self.order_history = order_history
        self.locks = locks or StockLockManager()
        self.currency = currency

    def checkout(self, cart: CartStore, user_context: Any) -> Receipt:
        """
        Place an order for everything in the cart.

        Raises:
            EmptyCart: the cart has no lines
            NotAuthenticated: no user context was supplied
            StockConflict: some line exceeds live stock; nothing is changed
            PersistenceFailed: the sale went through but the receipt was
                not recorded; the receipt is attached to the error
        """
        if cart.line_count() == 0:
            raise EmptyCart()

        if user_context is None:
            raise NotAuthenticated()

        with cart.lock:
            lines = cart.lines()
            if not lines:
                raise EmptyCart()

            with self.locks.hold(line.merchandise_id for line in lines):
                snapshots = self._revalidate(lines)
                receipt_lines = self._commit(lines, snapshots)

                receipt = Receipt(
                    order_id=generate_order_id(),
                    customer=user_context,
                    lines=tuple(receipt_lines),
                    total=to_money(
                        sum((line.total_price for line in receipt_lines), Decimal("0"))
                    ),
                    currency=self.currency,
                    created_at=datetime.utcnow(),
                )
                cart.clear()

                logger.info(
                    f"Order {receipt.order_id} committed: {receipt.currency} {receipt.total} "
                    f"for {receipt.total_units} unit(s)"
                )
                self._record(receipt)

        return receipt

    def _revalidate(self, lines):
        snapshots = {}
        conflicts = {}
        for line in lines:
            ref = self.catalog.lookup(line.merchandise_id)
            available = ref.stock_quantity if ref and ref.is_active else 0
            if line.quantity > available:
                conflicts[line.merchandise_id] = available
            else:
                snapshots[line.merchandise_id] = ref

        if conflicts:
            logger.warning(f"Checkout rejected, stock conflict: {conflicts}")
            raise StockConflict(conflicts)
        return snapshots

    def _commit(self, lines, snapshots) -> list[ReceiptLine]:
        applied = []
        receipt_lines = []
        for line in lines:
            if not self.catalog.adjust_stock(line.merchandise_id, -line.quantity):
                # Undo what was already taken so nothing is left half-applied
                for merchandise_id, quantity in applied:
                    self.catalog.adjust_stock(merchandise_id, quantity)
                ref = self.catalog.lookup(line.merchandise_id)
                raise StockConflict({line.merchandise_id: ref.stock_quantity if ref else 0})
            applied.append((line.merchandise_id, line.quantity))

            ref = snapshots[line.merchandise_id]
            receipt_lines.append(
                ReceiptLine(
                    merchandise_id=ref.id,
                    name=ref.name,
                    quantity=line.quantity,
                    unit_price=ref.unit_price,
                    total_price=line_total(ref.unit_price, line.quantity),
                )
            )

        for merchandise_id, quantity in applied:
            self.catalog.record_sale(merchandise_id, quantity)

        return receipt_lines

    def _record(self, receipt: Receipt) -> None:
        try:
            recorded = self.order_history.record(receipt)
        except Exception as exc:
            logger.error(f"Order {receipt.order_id} not recorded: {exc}")
            raise PersistenceFailed(receipt, str(exc)) from exc

        if not recorded:
            logger.error(f"Order {receipt.order_id} not recorded: order history refused it")
            raise PersistenceFailed(receipt, "order history refused the receipt")
