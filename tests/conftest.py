import pytest
from datetime import date, timedelta

from fastapi.testclient import TestClient

from cart_engine import Cart, InMemoryPromotionCatalog, Promotion
from cart_service.database.carts import CartDatabase
from cart_service.database.promotions import PromotionDatabase
from cart_service.dependencies import get_cart_database, get_promotion_catalog, get_today
from cart_service.main import app

TODAY = date(2024, 7, 1)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def catalog(today) -> InMemoryPromotionCatalog:
    """Engine-level catalog mirroring the promotions the service seeds."""
    month_ago = today - timedelta(days=30)
    month_later = today + timedelta(days=30)
    catalog = InMemoryPromotionCatalog([
        Promotion.percentage("SAVE20", "Save 20%", 20, month_ago, month_later, combinable=True),
        Promotion.percentage("SUMMER10", "Summer 10%", 10, month_ago, month_later, combinable=True),
        Promotion.percentage("SUMMER25", "Summer 25%", 25, month_ago, month_later, combinable=True),
        Promotion.percentage("SALE30", "Sale 30%", 30, month_ago, month_later, combinable=False),
        Promotion.percentage("BUNDLE20", "Bundle 20%", 20, month_ago, month_later, combinable=False),
        Promotion.fixed_amount(
            "TENOFF", "$10 off", 10, month_ago, month_later,
            combinable=True, incompatible_codes={"SUMMER25"},
        ),
        Promotion.fixed_amount("BIGOFF", "$500 off", 500, month_ago, month_later, combinable=True),
        Promotion.percentage(
            "EXPIRED21", "Expired 21%", 21, month_ago, today - timedelta(days=7), combinable=True
        ),
        Promotion.percentage(
            "SEASONAL22", "Seasonal 22%", 22, today + timedelta(days=7), month_later, combinable=True
        ),
    ])
    catalog.register_unresolvable("INVALID123")
    return catalog


@pytest.fixture
def cart() -> Cart:
    return Cart()


@pytest.fixture
def cart_database() -> CartDatabase:
    return CartDatabase()


@pytest.fixture
def api_app(cart_database, today):
    """The service app wired to a fresh cart store and a catalog pinned to TODAY."""
    promotions = PromotionDatabase.seeded(today)
    app.dependency_overrides[get_cart_database] = lambda: cart_database
    app.dependency_overrides[get_promotion_catalog] = lambda: promotions
    app.dependency_overrides[get_today] = lambda: today
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(api_app):
    with TestClient(api_app) as test_client:
        yield test_client


@pytest.fixture
def new_cart(client):
    """Create a cart through the API and return its id."""
    def _create(*items):
        response = client.post("/api/cart", json={"customerId": "customer-1"})
        assert response.status_code == 201
        cart_id = response.json()["id"]
        for product_id, quantity, price in items:
            added = client.post(
                f"/api/cart/{cart_id}/items",
                json={"productId": product_id, "quantity": quantity, "price": price},
            )
            assert added.status_code == 200
        return cart_id
    return _create
