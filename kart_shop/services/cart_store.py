"""Per-session shopping cart"""

import logging
import threading
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from ..core.errors import (
    CatalogLookupFailed,
    InvalidQuantity,
    ItemUnavailable,
    StockExhausted,
)
from ..core.money import line_total, to_money
from ..models.cart import CartLine, CartUpdate, StockLimited
from ..models.merchandise import MerchandiseRef

logger = logging.getLogger(__name__)


class CatalogProvider(Protocol):
    """What a cart needs from the catalog"""

    def lookup(self, merchandise_id: str) -> Optional[MerchandiseRef]: ...

    def adjust_stock(self, merchandise_id: str, delta: int) -> bool: ...

    def record_sale(self, merchandise_id: str, quantity: int) -> bool: ...


class CartStore:
    """
    Line items for one session.

    Lines keep insertion order and never share a merchandise id. Quantities
    are clamped to the live stock ceiling whenever they are set. Prices are
    never cached: totals always use the catalog's current unit price.
    The catalog is only read here.

    A cart created by a logged-in session is owned by that user and
    session. An anonymous cart has no owner until a user claims it.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        cart_id: Optional[str] = None,
        owner: Optional[str] = None,
        session_id: Optional[str] = None,
    ):
        self.cart_id = cart_id or str(uuid.uuid4())
        self.catalog = catalog
        self.owner = owner
        self.session_id = session_id
        self.created_at = datetime.utcnow()
        self.updated_at = self.created_at
        self._lines: dict[str, CartLine] = {}
        # Held by checkout while it commits, so the cart and stock change together
        self.lock = threading.RLock()

    def accessible_by(self, user: Optional[str]) -> bool:
        """Anonymous carts are open to their holder; owned carts only to the owner"""
        return self.owner is None or self.owner == user

    def claim(self, user: str, session_id: Optional[str] = None) -> bool:
        """Bind an anonymous cart to a user; False if someone else owns it"""
        with self.lock:
            if self.owner is not None:
                return self.owner == user
            self.owner = user
            self.session_id = session_id
            self.updated_at = datetime.utcnow()
        logger.info(f"Cart {self.cart_id} claimed by {user}")
        return True

    def _available(self, merchandise_id: str) -> MerchandiseRef:
        ref = self.catalog.lookup(merchandise_id)
        if ref is None or not ref.is_active:
            raise ItemUnavailable(merchandise_id)
        return ref

    def _set_quantity(self, ref: MerchandiseRef, requested: int) -> CartUpdate:
        granted = min(requested, ref.stock_quantity)
        notice = None
        if granted < requested:
            notice = StockLimited(
                merchandise_id=ref.id,
                requested=requested,
                granted=granted,
            )
            logger.info(notice.message)

        line = self._lines.get(ref.id)
        if line:
            line.quantity = granted
        else:
            self._lines[ref.id] = CartLine(merchandise_id=ref.id, quantity=granted)

        self.updated_at = datetime.utcnow()
        return CartUpdate(
            merchandise_id=ref.id,
            name=ref.name,
            quantity=granted,
            stock_limited=notice,
        )

    def add_item(self, merchandise_id: str, quantity: int = 1) -> CartUpdate:
        """
        Add units of an item, merging with an existing line.

        Raises:
            InvalidQuantity: quantity is not positive
            ItemUnavailable: unknown or inactive merchandise
            StockExhausted: the line already holds every unit in stock
        """
        if quantity <= 0:
            raise InvalidQuantity(quantity)

        with self.lock:
            ref = self._available(merchandise_id)
            current = self.quantity_of(merchandise_id)
            if current >= ref.stock_quantity:
                raise StockExhausted(merchandise_id, ref.stock_quantity)
            return self._set_quantity(ref, current + quantity)

    def update_quantity(self, merchandise_id: str, quantity: int) -> CartUpdate:
        """Set a line's quantity, adding the line if it is missing.

        Use remove_item to drop a line; zero is rejected here.
        """
        if quantity <= 0:
            raise InvalidQuantity(quantity)

        with self.lock:
            ref = self._available(merchandise_id)
            if ref.stock_quantity == 0:
                raise StockExhausted(merchandise_id, 0)
            return self._set_quantity(ref, quantity)

    def remove_item(self, merchandise_id: str) -> None:
        with self.lock:
            if self._lines.pop(merchandise_id, None) is not None:
                self.updated_at = datetime.utcnow()

    def clear(self) -> None:
        with self.lock:
            self._lines.clear()
            self.updated_at = datetime.utcnow()

    def lines(self) -> list[CartLine]:
        """Snapshot of the lines in insertion order"""
        with self.lock:
            return [
                CartLine(merchandise_id=line.merchandise_id, quantity=line.quantity)
                for line in self._lines.values()
            ]

    def quantity_of(self, merchandise_id: str) -> int:
        line = self._lines.get(merchandise_id)
        return line.quantity if line else 0

    def is_empty(self) -> bool:
        return not self._lines

    def line_count(self) -> int:
        """Distinct lines, for the cart badge"""
        return len(self._lines)

    def total_units(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def priced_lines(self) -> list[tuple[CartLine, MerchandiseRef]]:
        """Lines paired with a fresh catalog snapshot"""
        priced = []
        for line in self.lines():
            ref = self.catalog.lookup(line.merchandise_id)
            if ref is None:
                raise CatalogLookupFailed(line.merchandise_id)
            priced.append((line, ref))
        return priced

    def total_price(self) -> Decimal:
        """Sum of quantity x current unit price, rounded half-up to cents"""
        total = sum(
            (ref.unit_price * line.quantity for line, ref in self.priced_lines()),
            Decimal("0"),
        )
        return to_money(total)

    def reconcile(self) -> list[StockLimited]:
        """
        Bring every line back under the live stock ceiling.

        Lines whose item vanished, was deactivated or sold out are dropped.
        Returns a notice for each line that was reduced or dropped.
        """
        notices = []
        with self.lock:
            for line in list(self._lines.values()):
                ref = self.catalog.lookup(line.merchandise_id)
                available = ref.stock_quantity if ref and ref.is_active else 0
                if line.quantity <= available:
                    continue

                notices.append(
                    StockLimited(
                        merchandise_id=line.merchandise_id,
                        requested=line.quantity,
                        granted=available,
                    )
                )
                if available == 0:
                    del self._lines[line.merchandise_id]
                else:
                    line.quantity = available

            if notices:
                self.updated_at = datetime.utcnow()
        return notices

    def summary(self) -> dict:
        """Display-ready view of the cart"""
        lines = [
            {
                "merchandise_id": line.merchandise_id,
                "name": ref.name,
                "quantity": line.quantity,
                "unit_price": ref.unit_price,
                "total_price": line_total(ref.unit_price, line.quantity),
            }
            for line, ref in self.priced_lines()
        ]
        return {
            "cart_id": self.cart_id,
            "lines": lines,
            "line_count": len(lines),
            "total_units": sum(line["quantity"] for line in lines),
            "total_price": to_money(sum((line["total_price"] for line in lines), Decimal("0"))),
        }
