"""Pytest fixtures for shopcore tests."""

import tempfile
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

from shopcore.catalog import Catalog
from shopcore.models import ProductCategory
from shopcore.order_store import OrderStore
from shopcore.product_store import ProductStore
from shopcore.user_store import UserStore


class FakeClock:
    """Returns a new instant, one second later, on every call."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def temp_dir():
    """Create a temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock(monkeypatch):
    """Replace the model clock so every timestamp is strictly later than the last."""
    fake = FakeClock()
    monkeypatch.setattr("shopcore.models._utc_now", fake)
    return fake


@pytest.fixture
def user_store():
    return UserStore()


@pytest.fixture
def product_store():
    return ProductStore()


@pytest.fixture
def order_store():
    return OrderStore()


@pytest.fixture
def catalog():
    return Catalog()


@pytest.fixture
def alice(user_store):
    """A stored user."""
    return user_store.create("alice", "alice@example.com", "Alice", "Smith")


@pytest.fixture
def widget(product_store):
    """A stored product with 10 units on hand."""
    return product_store.create(
        "Widget", "WID-001", Decimal("29.99"), ProductCategory.ELECTRONICS, stock_quantity=10
    )
