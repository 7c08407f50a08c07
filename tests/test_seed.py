"""Tests for seed document loading."""

import json
from decimal import Decimal

import pytest

from shopcore.errors import DuplicateKeyError, InsufficientStockError, SeedError
from shopcore.models import OrderStatus, UserStatus
from shopcore.seed import apply_seed, load_seed_file, parse_seed


def seed_data():
    return {
        "users": [
            {"username": "alice", "email": "alice@example.com", "first_name": "Alice", "last_name": "Smith"},
            {"username": "bob", "email": "bob@example.com", "first_name": "Bob", "last_name": "Jones",
             "status": "suspended"},
        ],
        "products": [
            {"name": "Widget", "sku": "WID-1", "price": "10.00", "category": "ELECTRONICS", "stock": 5},
            {"name": "Novel", "sku": "BK-1", "price": "12.50", "category": "books", "stock": 2,
             "active": False},
        ],
        "orders": [
            {
                "customer": "alice",
                "order_number": "SEED-1",
                "shipping_amount": "4.00",
                "lines": [{"sku": "wid-1", "quantity": 3}, {"sku": "BK-1", "quantity": 1, "unit_price": "10.00"}],
                "status": "shipped",
                "reserve_stock": True,
            },
            {"customer": "bob", "lines": [{"sku": "WID-1", "quantity": 1}]},
        ],
    }


def write_seed(temp_dir, data, name="seed.json"):
    path = temp_dir / name
    path.write_text(json.dumps(data))
    return path


class TestLoadSeedFile:
    def test_load_valid_file(self, temp_dir):
        document = load_seed_file(write_seed(temp_dir, seed_data()))

        assert [u.username for u in document.users] == ["alice", "bob"]
        assert document.products[0].price == Decimal("10.00")
        assert document.orders[0].lines[1].unit_price == Decimal("10.00")

    def test_missing_file(self, temp_dir):
        with pytest.raises(SeedError) as exc_info:
            load_seed_file(temp_dir / "absent.json")
        assert "cannot read" in str(exc_info.value)

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json")

        with pytest.raises(SeedError) as exc_info:
            load_seed_file(path)

        assert "invalid JSON" in str(exc_info.value)
        assert exc_info.value.code == "INVALID_SEED"

    def test_schema_mismatch_names_location(self):
        data = seed_data()
        del data["products"][0]["price"]

        with pytest.raises(SeedError) as exc_info:
            parse_seed(data, "inline")

        assert "products.0.price" in str(exc_info.value)
        assert str(exc_info.value).startswith("inline:")

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda d: d["products"][0].update(stock=-1),
            lambda d: d["orders"][0]["lines"][0].update(quantity=0),
            lambda d: d["orders"][0].update(status="lost"),
            lambda d: d["orders"][0].update(tax_amount="-1"),
        ],
    )
    def test_schema_constraints(self, mutate):
        data = seed_data()
        mutate(data)
        with pytest.raises(SeedError):
            parse_seed(data)

    def test_empty_document(self):
        document = parse_seed({})
        assert document.users == []
        assert document.orders == []


class TestApplySeed:
    def test_apply_builds_catalog(self, catalog):
        orders = apply_seed(catalog, parse_seed(seed_data()))

        assert catalog.summary() == {"users": 2, "products": 2, "orders": 2}
        assert catalog.users.find_by_username("bob").status is UserStatus.SUSPENDED

        novel = catalog.products.find_by_sku("bk-1")
        assert novel.active is False
        assert novel.stock_quantity == 1

        widget = catalog.products.find_by_sku("WID-1")
        assert widget.stock_quantity == 2

        first, second = orders
        assert first.order_number == "SEED-1"
        assert first.status is OrderStatus.SHIPPED
        assert first.shipped_date is not None
        assert first.subtotal == Decimal("40.00")
        assert first.total_amount == Decimal("44.00")
        assert second.order_number == "ORD-000002"
        assert second.is_pending
        assert catalog.orders.find_by_order_number("seed-1") is first

    def test_unknown_customer(self, catalog):
        data = seed_data()
        data["orders"][0]["customer"] = "mallory"

        with pytest.raises(SeedError) as exc_info:
            apply_seed(catalog, parse_seed(data))

        assert "mallory" in str(exc_info.value)
        assert catalog.orders.count() == 0

    def test_unknown_sku_creates_no_order(self, catalog):
        data = seed_data()
        data["orders"][0]["lines"].append({"sku": "NOPE", "quantity": 1})

        with pytest.raises(SeedError):
            apply_seed(catalog, parse_seed(data))

        assert catalog.orders.count() == 0

    def test_store_errors_propagate(self, catalog):
        data = seed_data()
        data["products"][1]["sku"] = "wid-1"

        with pytest.raises(DuplicateKeyError):
            apply_seed(catalog, parse_seed(data))

    def test_reserving_more_than_stock(self, catalog):
        data = seed_data()
        data["orders"][0]["lines"][0]["quantity"] = 9

        with pytest.raises(InsufficientStockError):
            apply_seed(catalog, parse_seed(data))

        assert catalog.products.find_by_sku("WID-1").stock_quantity == 5
