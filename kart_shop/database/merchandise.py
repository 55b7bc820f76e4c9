"""Mock merchandise catalog"""

import threading
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.config import settings
from ..core.money import to_money
from ..models.merchandise import (
    Merchandise,
    MerchandiseCategory,
    MerchandiseRef,
    MerchandiseSortField,
    SortOrder,
)


def sort_merchandise(
    items: list[Merchandise],
    sort_by: MerchandiseSortField,
    sort_order: SortOrder = SortOrder.ASC,
) -> list[Merchandise]:
    """Stable sort on one catalog field"""
    field = MerchandiseSortField(sort_by).value

    def key(item: Merchandise):
        value = getattr(item, field)
        return value.lower() if isinstance(value, str) else value

    return sorted(items, key=key, reverse=SortOrder(sort_order) == SortOrder.DESC)


def _seed_catalog() -> dict[str, Merchandise]:
    items = [
        Merchandise(
            id="1",
            name="Kuching ART T-Shirt",
            description="Official Kuching ART branded t-shirt made from premium cotton",
            price=Decimal("25.00"),
            category=MerchandiseCategory.CLOTHING,
            stock_quantity=50,
            image_url="/static/images/art-tshirt.jpg",
        ),
        Merchandise(
            id="2",
            name="ART Coffee Mug",
            description="Ceramic coffee mug with ART logo, perfect for your morning coffee",
            price=Decimal("12.00"),
            category=MerchandiseCategory.ACCESSORIES,
            stock_quantity=30,
            image_url="/static/images/art-mug.jpg",
        ),
        Merchandise(
            id="3",
            name="Kuching Keychain",
            description="Souvenir keychain featuring Kuching landmarks and ART branding",
            price=Decimal("8.00"),
            category=MerchandiseCategory.SOUVENIRS,
            stock_quantity=100,
            image_url="/static/images/keychain.jpg",
        ),
        Merchandise(
            id="4",
            name="ART Water Bottle",
            description="Eco-friendly water bottle with ART logo",
            price=Decimal("15.00"),
            category=MerchandiseCategory.ACCESSORIES,
            stock_quantity=25,
            image_url="/static/images/water-bottle.jpg",
        ),
    ]
    return {item.id: item for item in items}


class MerchandiseDatabase:
    """In-memory merchandise catalog.

    Acts as the catalog provider for carts and checkout: ``lookup`` hands
    out read-only snapshots and ``adjust_stock`` is the only way stock
    levels change during a sale.
    """

    def __init__(self, seed: bool = True):
        self._seed = seed
        self._lock = threading.RLock()
        self.items: dict[str, Merchandise] = _seed_catalog() if seed else {}

    def reset(self) -> None:
        """Reload the seed catalog"""
        with self._lock:
            self.items = _seed_catalog() if self._seed else {}

    def add_merchandise(self, item: Merchandise) -> Merchandise:
        with self._lock:
            self.items[item.id] = item
        return item

    def get_merchandise(self, merchandise_id: str) -> Optional[Merchandise]:
        """Get a merchandise item by ID"""
        return self.items.get(merchandise_id)

    def lookup(self, merchandise_id: str) -> Optional[MerchandiseRef]:
        """Snapshot of price, stock and availability for a cart"""
        with self._lock:
            item = self.items.get(merchandise_id)
            return item.to_ref() if item else None

    def get_all_merchandise(self) -> list[Merchandise]:
        return list(self.items.values())

    def search(
        self,
        query: Optional[str] = None,
        category: Optional[MerchandiseCategory] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        in_stock_only: bool = True,
        sort_by: Optional[MerchandiseSortField] = None,
        sort_order: SortOrder = SortOrder.ASC,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Merchandise], int]:
        """
        Search active merchandise with filters.

        Without ``sort_by`` items keep catalog order. Names sort
        case-insensitively; ties keep catalog order in either direction.

        Returns:
            Tuple of (matching items, total count)
        """
        results = [item for item in self.items.values() if item.is_active]

        if query:
            query_lower = query.lower()
            results = [
                item for item in results
                if query_lower in item.name.lower()
                or query_lower in item.description.lower()
                or query_lower in item.category.value
            ]

        if category:
            results = [item for item in results if item.category == category]

        if min_price is not None:
            results = [item for item in results if item.price >= min_price]
        if max_price is not None:
            results = [item for item in results if item.price <= max_price]

        if in_stock_only:
            results = [item for item in results if item.stock_quantity > 0]

        if sort_by:
            results = sort_merchandise(results, sort_by, sort_order)

        total = len(results)
        return results[offset : offset + limit], total

    def adjust_stock(self, merchandise_id: str, delta: int) -> bool:
        """
        Change stock level.

        Args:
            merchandise_id: Item to update
            delta: Positive to add, negative to remove

        Returns:
            True if successful, False if the item is unknown or stock
            would drop below zero
        """
        with self._lock:
            item = self.items.get(merchandise_id)
            if not item:
                return False

            new_quantity = item.stock_quantity + delta
            if new_quantity < 0:
                return False

            item.stock_quantity = new_quantity
            item.last_updated = datetime.utcnow()
            return True

    def record_sale(self, merchandise_id: str, quantity: int) -> bool:
        with self._lock:
            item = self.items.get(merchandise_id)
            if not item:
                return False
            item.sales_count += quantity
            return True

    def restock(self, merchandise_id: str, quantity: int) -> bool:
        if quantity <= 0:
            return False
        return self.adjust_stock(merchandise_id, quantity)

    def update_merchandise(self, merchandise_id: str, **changes) -> Optional[Merchandise]:
        """Apply a partial update; ``None`` values are ignored"""
        with self._lock:
            item = self.items.get(merchandise_id)
            if not item:
                return None

            for name, value in changes.items():
                if value is None:
                    continue
                if name == "price":
                    value = to_money(value)
                setattr(item, name, value)

            item.last_updated = datetime.utcnow()
            return item

    def activate(self, merchandise_id: str) -> bool:
        return self.update_merchandise(merchandise_id, is_active=True) is not None

    def deactivate(self, merchandise_id: str) -> bool:
        return self.update_merchandise(merchandise_id, is_active=False) is not None

    def add_rating(self, merchandise_id: str, rating: int) -> Optional[Merchandise]:
        """Fold a 1-5 rating into the running average"""
        if not 1 <= rating <= 5:
            return None

        with self._lock:
            item = self.items.get(merchandise_id)
            if not item:
                return None

            total_rating = item.average_rating * item.review_count + rating
            item.review_count += 1
            item.average_rating = float(
                to_money(Decimal(str(total_rating)) / item.review_count)
            )
            return item

    def discounted_price(self, merchandise_id: str, percent: Decimal) -> Optional[Decimal]:
        item = self.items.get(merchandise_id)
        if not item:
            return None
        if 0 < percent <= 100:
            return to_money(item.price * (1 - Decimal(str(percent)) / 100))
        return item.price

    def get_low_stock(self, threshold: int = 10) -> list[Merchandise]:
        """Active items at or below the threshold, lowest stock first"""
        low = [
            item for item in self.items.values()
            if item.is_active and item.stock_quantity <= threshold
        ]
        low.sort(key=lambda item: item.stock_quantity)
        return low


# Singleton instance
merchandise_db = MerchandiseDatabase(seed=settings.seed_demo_catalog)
