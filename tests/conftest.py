"""
Shared fixtures: every test gets its own SQLite file database.
"""

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from fresh_laundry.core.config import Settings
from fresh_laundry.main import create_app
from fresh_laundry.models.schemas import OrderItemIn
from fresh_laundry.models.tables import Order
from fresh_laundry.services.accounts_service import USER


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'laundry.db'}",
        SECRET_KEY="test-secret",
        BCRYPT_ROUNDS=4,
        ENFORCE_ADMIN_AUTH=False,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def accounts_service(app):
    return app.state.accounts_service


@pytest.fixture
def orders_service(app):
    return app.state.orders_service


@pytest.fixture
def stats_service(app):
    return app.state.stats_service


@pytest.fixture
def customer(accounts_service):
    return accounts_service.register(USER, "Jane Doe", "jane@example.com", "s3cret")


@pytest.fixture
def count_orders(app):
    def _count():
        with app.state.database.session() as session:
            return session.execute(select(func.count()).select_from(Order)).scalar_one()

    return _count


def build_items(n=2):
    return [
        OrderItemIn(categoryId=k % 3 + 1, id=100 + k, title=f"Shirt {k}", quantity=k + 1, pricePerUnit=2.5 * (k + 1))
        for k in range(n)
    ]


@pytest.fixture
def place(orders_service, customer):
    def _place(total_price=20.0, items=None):
        return orders_service.place_order(
            customer["id"],
            date(2026, 10, 20),
            "09:00 - 11:00",
            "standard",
            total_price,
            build_items() if items is None else items,
        )

    return _place


@pytest.fixture
def make_items():
    return build_items
