import random
from decimal import Decimal

import pytest

from kart_shop.core.errors import (
    CatalogLookupFailed,
    InvalidQuantity,
    ItemUnavailable,
    StockExhausted,
)
from kart_shop.core.money import to_money


def test_add_one_of_each_totals(cart):
    cart.add_item("1")
    cart.add_item("2")

    assert cart.line_count() == 2
    assert cart.total_units() == 2
    assert cart.total_price() == Decimal("37.00")
    assert str(cart.total_price()) == "37.00"


def test_adding_same_item_merges_lines(cart):
    cart.add_item("1")
    cart.add_item("2")
    update = cart.add_item("1", 2)

    assert update.quantity == 3
    assert cart.line_count() == 2
    assert cart.total_units() == 4
    assert [line.merchandise_id for line in cart.lines()] == ["1", "2"]


def test_add_clamps_to_stock_with_notice(cart):
    update = cart.add_item("3", 2)

    assert update.quantity == 1
    assert update.limited
    assert update.stock_limited.requested == 2
    assert update.stock_limited.granted == 1
    assert cart.quantity_of("3") == 1


def test_add_at_stock_ceiling_is_rejected_without_change(cart):
    cart.add_item("3")

    with pytest.raises(StockExhausted) as excinfo:
        cart.add_item("3")

    assert excinfo.value.available == 1
    assert cart.quantity_of("3") == 1
    assert cart.total_units() == 1


def test_add_out_of_stock_item(cart, catalog):
    catalog.adjust_stock("3", -1)

    with pytest.raises(StockExhausted):
        cart.add_item("3")
    assert cart.line_count() == 0


def test_add_unknown_item(cart):
    with pytest.raises(ItemUnavailable):
        cart.add_item("missing")


def test_add_inactive_item(cart, catalog):
    catalog.deactivate("1")

    with pytest.raises(ItemUnavailable):
        cart.add_item("1")


@pytest.mark.parametrize("quantity", [0, -1])
def test_add_rejects_non_positive_quantity(cart, quantity):
    with pytest.raises(InvalidQuantity):
        cart.add_item("1", quantity)


def test_update_quantity_sets_and_clamps(cart):
    cart.add_item("1")

    update = cart.update_quantity("1", 4)
    assert update.quantity == 4
    assert not update.limited

    update = cart.update_quantity("1", 50)
    assert update.quantity == 10
    assert update.stock_limited.requested == 50
    assert cart.total_units() == 10


def test_update_quantity_adds_missing_line(cart):
    cart.update_quantity("2", 3)
    assert cart.quantity_of("2") == 3


@pytest.mark.parametrize("quantity", [0, -5])
def test_update_quantity_rejects_zero_and_negative(cart, quantity):
    cart.add_item("1", 2)

    with pytest.raises(InvalidQuantity):
        cart.update_quantity("1", quantity)
    assert cart.quantity_of("1") == 2


def test_remove_item_and_absent_remove_is_noop(cart):
    cart.add_item("1")
    cart.add_item("2")

    cart.remove_item("1")
    cart.remove_item("1")
    cart.remove_item("never-added")

    assert cart.line_count() == 1
    assert cart.total_price() == Decimal("12.00")


def test_clear_is_idempotent(cart):
    cart.add_item("1", 3)
    cart.clear()
    cart.clear()

    assert cart.total_units() == 0
    assert cart.total_price() == Decimal("0")
    assert cart.is_empty()


def test_total_uses_current_catalog_price(cart, catalog):
    cart.add_item("1", 2)
    catalog.update_merchandise("1", price=Decimal("19.99"))

    assert cart.total_price() == Decimal("39.98")


def test_total_fails_when_item_left_catalog(cart, catalog):
    cart.add_item("2")
    del catalog.items["2"]

    with pytest.raises(CatalogLookupFailed):
        cart.total_price()


def test_cart_never_mutates_catalog(cart, catalog):
    cart.add_item("1", 5)
    cart.update_quantity("1", 7)
    cart.remove_item("1")

    assert catalog.get_merchandise("1").stock_quantity == 10


def test_reconcile_clamps_and_drops(cart, catalog):
    cart.add_item("1", 8)
    cart.add_item("2", 2)
    cart.add_item("4")
    catalog.adjust_stock("1", -5)
    catalog.deactivate("4")

    notices = cart.reconcile()

    assert {n.merchandise_id: n.granted for n in notices} == {"1": 5, "4": 0}
    assert cart.quantity_of("1") == 5
    assert cart.quantity_of("2") == 2
    assert cart.quantity_of("4") == 0
    assert cart.line_count() == 2


def test_summary_is_display_ready(cart):
    cart.add_item("1", 2)
    summary = cart.summary()

    assert summary["line_count"] == 1
    assert summary["lines"][0]["total_price"] == Decimal("50.00")
    assert summary["total_price"] == Decimal("50.00")


def test_random_operations_keep_aggregates_consistent(cart, catalog):
    rng = random.Random(1234)
    ids = ["1", "2", "3", "4"]

    for _ in range(300):
        merchandise_id = rng.choice(ids)
        action = rng.choice(["add", "remove", "update"])
        try:
            if action == "add":
                cart.add_item(merchandise_id, rng.randint(1, 4))
            elif action == "update":
                cart.update_quantity(merchandise_id, rng.randint(1, 12))
            else:
                cart.remove_item(merchandise_id)
        except StockExhausted:
            pass

        lines = cart.lines()
        assert cart.total_units() == sum(line.quantity for line in lines)
        expected = sum(
            (catalog.lookup(line.merchandise_id).unit_price * line.quantity for line in lines),
            Decimal("0"),
        )
        assert cart.total_price() == to_money(expected)
        for line in lines:
            assert 1 <= line.quantity <= catalog.lookup(line.merchandise_id).stock_quantity


def test_money_rounds_half_up():
    assert to_money(Decimal("0.125")) == Decimal("0.13")
    assert to_money(Decimal("0.135")) == Decimal("0.14")
    assert to_money(2.675) == Decimal("2.68")
    assert str(to_money(37)) == "37.00"
