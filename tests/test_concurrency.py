"""Tests for store behaviour under concurrent callers."""

import threading
from concurrent.futures import ThreadPoolExecutor

from shopcore.errors import DuplicateKeyError, InsufficientStockError
from shopcore.models import ProductCategory


def run_concurrently(func, count, workers=16):
    """Call func(i) for i in range(count) from a thread pool, all released at once."""
    barrier = threading.Barrier(min(count, workers))

    def call(i):
        if i < workers:
            barrier.wait(timeout=10)
        try:
            return func(i), None
        except Exception as e:
            return None, e

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(call, range(count)))


class TestConcurrentCreate:
    def test_same_sku_created_once(self, product_store):
        results = run_concurrently(
            lambda i: product_store.create(f"Widget {i}", "WID-001" if i % 2 else "wid-001", 10, ProductCategory.OTHER),
            count=64,
        )

        created = [r for r, e in results if r is not None]
        errors = [e for r, e in results if e is not None]

        assert len(created) == 1
        assert len(errors) == 63
        assert all(isinstance(e, DuplicateKeyError) for e in errors)
        assert product_store.count() == 1
        assert created[0].id == 1

    def test_same_username_created_once(self, user_store):
        results = run_concurrently(
            lambda i: user_store.create("alice", f"alice{i}@example.com", "Alice", "Smith"),
            count=32,
        )

        assert sum(1 for r, _ in results if r is not None) == 1
        assert user_store.count() == 1
        # Only the winner's email made it into the index
        indexed = [i for i in range(32) if user_store.find_by_email(f"alice{i}@example.com")]
        assert len(indexed) == 1

    def test_distinct_creates_get_unique_ids(self, user_store):
        results = run_concurrently(
            lambda i: user_store.create(f"user{i:03d}", f"user{i}@example.com", "U", "Ser"),
            count=100,
        )

        ids = sorted(r.id for r, _ in results)
        assert ids == list(range(1, 101))
        assert all(user_store.find_by_id(i) is not None for i in ids)


class TestConcurrentStockRemoval:
    def test_removals_never_overdraw(self, product_store):
        product = product_store.create("Widget", "WID-001", 10, ProductCategory.OTHER, stock_quantity=100)

        results = run_concurrently(lambda i: product_store.remove_stock(product.id, 3), count=50)

        succeeded = [r for r, e in results if e is None]
        errors = [e for r, e in results if e is not None]

        assert len(succeeded) == 33
        assert all(isinstance(e, InsufficientStockError) for e in errors)
        assert product.stock_quantity == 1

    def test_mixed_add_and_remove(self, product_store):
        product = product_store.create("Widget", "WID-001", 10, ProductCategory.OTHER, stock_quantity=0)

        def step(i):
            if i % 2:
                return product_store.remove_stock(product.id, 1)
            return product_store.add_stock(product.id, 1)

        results = run_concurrently(step, count=200)

        removed = sum(1 for i, (r, e) in enumerate(results) if i % 2 and e is None)
        assert product.stock_quantity == 100 - removed
        assert product.stock_quantity >= 0
