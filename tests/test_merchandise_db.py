from decimal import Decimal

from kart_shop.database.merchandise import MerchandiseDatabase
from kart_shop.models.merchandise import MerchandiseCategory, MerchandiseSortField, SortOrder

from .conftest import make_item


def test_seed_catalog():
    db = MerchandiseDatabase()
    ref = db.lookup("1")

    assert ref.name == "Kuching ART T-Shirt"
    assert ref.unit_price == Decimal("25.00")
    assert ref.stock_quantity == 50
    assert ref.is_active
    assert db.lookup("missing") is None


def test_adjust_stock_never_goes_negative(catalog):
    assert catalog.adjust_stock("3", -1)
    assert not catalog.adjust_stock("3", -1)
    assert catalog.get_merchandise("3").stock_quantity == 0
    assert not catalog.adjust_stock("missing", 1)


def test_restock_only_adds(catalog):
    assert not catalog.restock("1", 0)
    assert catalog.restock("1", 5)
    assert catalog.get_merchandise("1").stock_quantity == 15


def test_lookup_is_a_snapshot(catalog):
    ref = catalog.lookup("1")
    catalog.adjust_stock("1", -4)

    assert ref.stock_quantity == 10
    assert catalog.lookup("1").stock_quantity == 6


def test_deactivate_hides_from_search(catalog):
    catalog.deactivate("2")
    items, total = catalog.search()
    assert "2" not in {item.id for item in items}

    catalog.activate("2")
    _, total_after = catalog.search()
    assert total_after == total + 1


def test_search_paginates(catalog):
    items, total = catalog.search(in_stock_only=False, limit=2, offset=1)
    assert total == 4
    assert [item.id for item in items] == ["2", "3"]


def test_stock_status_bands(catalog):
    catalog.add_merchandise(make_item("big", "1.00", 21))
    catalog.add_merchandise(make_item("mid", "1.00", 20))
    catalog.add_merchandise(make_item("low", "1.00", 5))
    catalog.add_merchandise(make_item("none", "1.00", 0))

    statuses = {
        item_id: catalog.get_merchandise(item_id).stock_status
        for item_id in ("big", "mid", "low", "none")
    }
    assert statuses == {
        "big": "In Stock",
        "mid": "Limited Stock",
        "low": "Low Stock",
        "none": "Out of Stock",
    }


def test_ratings_keep_running_average(catalog):
    for rating in (5, 4, 4):
        catalog.add_rating("1", rating)
    item = catalog.get_merchandise("1")

    assert item.review_count == 3
    assert item.average_rating == 4.33
    assert catalog.add_rating("1", 0) is None
    assert catalog.get_merchandise("1").review_count == 3


def test_discounted_price(catalog):
    assert catalog.discounted_price("1", Decimal("10")) == Decimal("22.50")
    assert catalog.discounted_price("2", Decimal("33")) == Decimal("8.04")
    assert catalog.discounted_price("2", Decimal("0")) == Decimal("12.00")
    assert catalog.discounted_price("missing", Decimal("10")) is None


def test_update_merchandise_ignores_none(catalog):
    item = catalog.update_merchandise(
        "1", name=None, price=Decimal("19.5"), category=MerchandiseCategory.APPAREL
    )
    assert item.name == "Kuching ART T-Shirt"
    assert item.price == Decimal("19.50")
    assert item.category == MerchandiseCategory.APPAREL
    assert catalog.update_merchandise("missing", name="x") is None


def test_low_stock_sorted(catalog):
    catalog.adjust_stock("1", -2)
    low = catalog.get_low_stock(threshold=8)
    assert [item.id for item in low] == ["3", "4", "1"]


def test_discount_accepts_float_percent(catalog):
    # 25.00 less 0.1% is exactly 24.975, which rounds half-up
    assert catalog.discounted_price("1", 0.1) == Decimal("24.98")
    assert catalog.discounted_price("1", 2.1) == Decimal("24.48")
    assert catalog.discounted_price("2", 10.0) == Decimal("10.80")


def test_search_sorts_by_price(catalog):
    items, _ = catalog.search(sort_by=MerchandiseSortField.PRICE)
    assert [item.id for item in items] == ["3", "2", "4", "1"]

    items, _ = catalog.search(
        sort_by=MerchandiseSortField.PRICE, sort_order=SortOrder.DESC, limit=2
    )
    assert [item.id for item in items] == ["1", "4"]


def test_search_sorts_names_case_insensitively(catalog):
    catalog.add_merchandise(make_item("5", "3.00", 4, name="art poster"))

    items, _ = catalog.search(sort_by=MerchandiseSortField.NAME)
    assert [item.name for item in items] == [
        "ART Coffee Mug",
        "art poster",
        "ART Water Bottle",
        "Kuching ART T-Shirt",
        "Kuching Keychain",
    ]


def test_sort_ties_keep_catalog_order(catalog):
    items, _ = catalog.search(
        sort_by=MerchandiseSortField.STOCK_QUANTITY, sort_order=SortOrder.DESC
    )
    assert [item.id for item in items] == ["1", "2", "3", "4"]
