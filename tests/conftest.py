from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from kart_shop.core.config import settings
from kart_shop.core.session import session_manager
from kart_shop.database import cart_db, merchandise_db, order_db, ticket_desk, user_db
from kart_shop.database.merchandise import MerchandiseDatabase
from kart_shop.database.orders import OrderDatabase
from kart_shop.models.merchandise import Merchandise, MerchandiseCategory
from kart_shop.services.cart_store import CartStore
from kart_shop.services.checkout import CheckoutProcessor


def make_item(item_id, price, stock, name=None, active=True):
    return Merchandise(
        id=item_id,
        name=name or f"Item {item_id}",
        description=f"Test merchandise {item_id}",
        price=Decimal(price),
        category=MerchandiseCategory.SOUVENIRS,
        stock_quantity=stock,
        is_active=active,
    )


@pytest.fixture(autouse=True)
def reset_singletons():
    merchandise_db.reset()
    cart_db.reset()
    order_db.reset()
    user_db.reset()
    session_manager.reset()
    ticket_desk.reset()
    yield


@pytest.fixture
def catalog():
    db = MerchandiseDatabase(seed=False)
    db.add_merchandise(make_item("1", "25.00", 10, name="Kuching ART T-Shirt"))
    db.add_merchandise(make_item("2", "12.00", 10, name="ART Coffee Mug"))
    db.add_merchandise(make_item("3", "5.00", 1, name="Kuching Keychain"))
    db.add_merchandise(make_item("4", "15.00", 1, name="ART Water Bottle"))
    return db


@pytest.fixture
def orders():
    return OrderDatabase()


@pytest.fixture
def cart(catalog):
    return CartStore(catalog)


@pytest.fixture
def processor(catalog, orders):
    return CheckoutProcessor(catalog=catalog, order_history=orders)


@pytest.fixture
def client():
    from kart_shop.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    response = client.post(
        "/api/auth/login",
        json={"email": "test@example.com", "password": "password123"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client):
    response = client.post(
        "/api/auth/login",
        json={"email": settings.admin_emails[0], "password": "password123"},
    )
    assert response.status_code == 200
    assert response.json()["user"]["is_admin"] is True
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
