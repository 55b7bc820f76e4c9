import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from kart_shop.core.errors import InvalidOrderTransition, OrderNotFound
from kart_shop.models.receipt import OrderStatus
from kart_shop.services.cart_store import CartStore
from kart_shop.services.checkout import CheckoutProcessor, StockLockManager
from kart_shop.services.orders import OrderService


@pytest.fixture
def locks():
    return StockLockManager()


@pytest.fixture
def service(catalog, orders, locks):
    return OrderService(catalog=catalog, orders=orders, locks=locks)


@pytest.fixture
def place_order(catalog, orders, locks):
    processor = CheckoutProcessor(catalog=catalog, order_history=orders, locks=locks)

    def place(quantities, customer="user-1"):
        cart = CartStore(catalog)
        for merchandise_id, quantity in quantities.items():
            cart.add_item(merchandise_id, quantity)
        return processor.checkout(cart, customer)

    return place


def test_recorded_orders_start_confirmed(orders, place_order):
    receipt = place_order({"1": 2})
    assert orders.status_of(receipt.order_id) == OrderStatus.CONFIRMED


def test_cancel_restocks_and_reverses_sales(catalog, orders, service, place_order):
    receipt = place_order({"1": 2, "3": 1})
    assert catalog.get_merchandise("1").stock_quantity == 8

    cancelled = service.cancel(receipt.order_id, customer="user-1")

    assert cancelled is receipt
    assert orders.status_of(receipt.order_id) == OrderStatus.CANCELLED
    assert catalog.get_merchandise("1").stock_quantity == 10
    assert catalog.get_merchandise("3").stock_quantity == 1
    assert catalog.get_merchandise("1").sales_count == 0


def test_cancel_twice_is_rejected(catalog, service, place_order):
    receipt = place_order({"2": 3})
    service.cancel(receipt.order_id)

    with pytest.raises(InvalidOrderTransition, match="cancelled"):
        service.cancel(receipt.order_id)
    assert catalog.get_merchandise("2").stock_quantity == 10


def test_cancel_someone_elses_order(catalog, service, place_order):
    receipt = place_order({"1": 1}, customer="alice")

    with pytest.raises(OrderNotFound):
        service.cancel(receipt.order_id, customer="bob")
    with pytest.raises(OrderNotFound):
        service.cancel("ORD-MISSING")
    assert catalog.get_merchandise("1").stock_quantity == 9


def test_cannot_cancel_once_processing(service, place_order):
    receipt = place_order({"1": 1})
    service.update_status(receipt.order_id, OrderStatus.PROCESSING)

    with pytest.raises(InvalidOrderTransition):
        service.cancel(receipt.order_id)

    service.update_status(receipt.order_id, OrderStatus.COMPLETED)
    with pytest.raises(InvalidOrderTransition, match="completed"):
        service.update_status(receipt.order_id, OrderStatus.PROCESSING)


def test_status_update_to_cancelled_restocks(catalog, service, place_order):
    receipt = place_order({"4": 1})
    service.update_status(receipt.order_id, OrderStatus.CANCELLED)
    assert catalog.get_merchandise("4").stock_quantity == 1


def test_cancel_skips_merchandise_gone_from_catalog(catalog, orders, service, place_order):
    receipt = place_order({"1": 1, "2": 1})
    del catalog.items["2"]

    service.cancel(receipt.order_id)

    assert orders.status_of(receipt.order_id) == OrderStatus.CANCELLED
    assert catalog.get_merchandise("1").stock_quantity == 10


def test_concurrent_cancels_restock_once(catalog, service, place_order):
    receipt = place_order({"2": 4})
    barrier = threading.Barrier(4)

    def attempt():
        barrier.wait()
        try:
            service.cancel(receipt.order_id)
            return True
        except InvalidOrderTransition:
            return False

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: attempt(), range(4)))

    assert results.count(True) == 1
    assert catalog.get_merchandise("2").stock_quantity == 10


def test_statistics(service, place_order):
    first = place_order({"1": 1, "2": 1})
    place_order({"2": 2}, customer="user-2")
    cancelled = place_order({"3": 1})
    service.cancel(cancelled.order_id)

    stats = service.statistics()

    assert first.total == Decimal("37.00")
    assert stats.total_orders == 3
    assert stats.total_revenue == Decimal("61.00")
    assert stats.average_order_value == Decimal("30.50")
    assert stats.orders_by_status == {"confirmed": 2, "cancelled": 1}
    assert stats.top_items == {"ART Coffee Mug": 3, "Kuching ART T-Shirt": 1}


def test_statistics_window(service, place_order):
    place_order({"1": 1})
    later = datetime.utcnow() + timedelta(minutes=5)

    assert service.statistics(start=later).total_orders == 0
    empty = service.statistics(end=datetime.utcnow() - timedelta(days=1))
    assert empty.total_revenue == Decimal("0.00")
    assert empty.average_order_value == Decimal("0.00")
