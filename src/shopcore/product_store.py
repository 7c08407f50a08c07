"""Product storage for shopcore."""

import logging
import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator

from .config import DEFAULT_ACTOR
from .errors import (
    DuplicateKeyError,
    InsufficientStockError,
    InvalidFieldError,
    InvalidQuantityError,
    NotFoundError,
)
from .identity import IdAllocator
from .models import Product, ProductCategory
from .validation import as_quantity, enum_member, is_not_empty, is_positive, to_decimal

logger = logging.getLogger(__name__)


def _key(sku: str) -> str:
    return sku.lower()


def _checked_quantity(quantity, minimum: int, reason: str) -> int:
    """Return quantity as an int, or raise InvalidQuantityError below minimum or if fractional."""
    value = as_quantity(quantity)
    if value is None or value < minimum:
        raise InvalidQuantityError(quantity, reason)
    return value


class ProductStore:
    """In-memory products indexed by ID and SKU."""

    def __init__(self, actor: str = DEFAULT_ACTOR):
        """
        Initialize ProductStore.

        Args:
            actor: Name recorded as created_by/updated_by on every write.
        """
        self.actor = actor
        self._ids = IdAllocator()
        self._products: dict[int, Product] = {}
        self._by_sku: dict[str, Product] = {}
        self._mutex = threading.RLock()

    @contextmanager
    def _lock(self) -> Iterator[None]:
        """Hold the store lock for a check-then-write sequence."""
        with self._mutex:
            yield

    def __len__(self) -> int:
        return len(self._products)

    def count(self) -> int:
        return len(self._products)

    def create(
        self,
        name: str,
        sku: str,
        price: Decimal | int | str,
        category: ProductCategory | str,
        description: str | None = None,
        stock_quantity: int = 0,
    ) -> Product:
        """
        Create and store a new product.

        Args:
            name: Display name.
            sku: Stock keeping unit, unique regardless of case.
            price: Unit price, must be positive.
            category: A ProductCategory or its name.
            description: Optional free text.
            stock_quantity: Initial stock, must not be negative.

        Returns:
            The created Product, active and with a freshly allocated ID.

        Raises:
            InvalidFieldError: If a field fails validation.
            DuplicateKeyError: If the SKU is already taken.
        """
        logger.info("Creating product with name: %s, sku: %s", name, sku)

        if not is_not_empty(name):
            raise InvalidFieldError("name", "Product name cannot be empty")
        if not is_not_empty(sku):
            raise InvalidFieldError("sku", "Product SKU cannot be empty")
        if not is_positive(price):
            raise InvalidFieldError("price", "Product price must be positive")
        resolved_category = enum_member(ProductCategory, category)
        if resolved_category is None:
            raise InvalidFieldError("category", "Product category cannot be null")
        stock = _checked_quantity(
            stock_quantity, 0, "Stock quantity must be a whole number and cannot be negative"
        )

        with self._lock():
            if _key(sku) in self._by_sku:
                raise DuplicateKeyError("sku", sku, label="SKU")

            product = Product(
                name=name,
                sku=sku,
                price=to_decimal(price),
                category=resolved_category,
                description=description,
                stock_quantity=stock,
            )
            product.id = self._ids.next_id()
            product.lifecycle.stamp(self.actor)

            self._products[product.id] = product
            self._by_sku[_key(sku)] = product

        logger.info("Product created successfully with ID: %s", product.id)
        return product

    def find_by_id(self, product_id: int | None) -> Product | None:
        if product_id is None:
            return None
        return self._products.get(product_id)

    def find_by_sku(self, sku: str | None) -> Product | None:
        if not is_not_empty(sku):
            return None
        return self._by_sku.get(_key(sku))

    def get(self, product_id: int | None) -> Product:
        """
        Get a product by ID.

        Raises:
            NotFoundError: If the product doesn't exist.
        """
        product = self.find_by_id(product_id)
        if product is None:
            raise NotFoundError("product", product_id)
        return product

    def update(
        self,
        product_id: int,
        name: str | None = None,
        description: str | None = None,
        price: Decimal | int | str | None = None,
    ) -> Product:
        """
        Update a product's name, description and price.

        A blank name is ignored; an empty description clears it.

        Raises:
            NotFoundError: If the product doesn't exist.
            InvalidFieldError: If price isn't positive. Nothing is changed in
                that case.
        """
        with self._lock():
            product = self.get(product_id)

            if price is not None and not is_positive(price):
                raise InvalidFieldError("price", "Price must be positive")

            if is_not_empty(name):
                product.name = name
            if description is not None:
                product.description = description
            if price is not None:
                product.price = to_decimal(price)

            product.lifecycle.touch(self.actor)

        logger.info("Product updated successfully: %s", product.id)
        return product

    def set_stock(self, product_id: int, quantity: int) -> Product:
        """
        Replace the stock on hand.

        Raises:
            NotFoundError: If the product doesn't exist.
            InvalidQuantityError: If quantity is negative or not a whole number.
        """
        with self._lock():
            product = self.get(product_id)
            quantity = _checked_quantity(
                quantity, 0, "Stock quantity must be a whole number and cannot be negative"
            )

            product.stock_quantity = quantity
            product.lifecycle.touch(self.actor)

        logger.info("Stock updated for product %s: new quantity = %s", product_id, quantity)
        return product

    def add_stock(self, product_id: int, quantity: int) -> Product:
        """
        Add units to the stock on hand.

        Raises:
            NotFoundError: If the product doesn't exist.
            InvalidQuantityError: If quantity isn't a positive whole number.
        """
        with self._lock():
            product = self.get(product_id)
            quantity = _checked_quantity(quantity, 1, "Quantity to add must be a positive whole number")

            product.add_stock(quantity)
            product.lifecycle.touch(self.actor)

        logger.info(
            "Added %s units to product %s: new quantity = %s",
            quantity,
            product_id,
            product.stock_quantity,
        )
        return product

    def remove_stock(self, product_id: int, quantity: int) -> Product:
        """
        Take units out of the stock on hand.

        The sufficiency check and the decrement happen under the store lock,
        so concurrent removals can't overdraw stock.

        Raises:
            NotFoundError: If the product doesn't exist.
            InvalidQuantityError: If quantity isn't a positive whole number.
            InsufficientStockError: If fewer than quantity units are on hand.
                Stock is left unchanged.
        """
        with self._lock():
            product = self.get(product_id)
            quantity = _checked_quantity(
                quantity, 1, "Quantity to remove must be a positive whole number"
            )

            if not product.remove_stock(quantity):
                logger.warning(
                    "Rejected removal of %s units from product %s: %s on hand",
                    quantity,
                    product_id,
                    product.stock_quantity,
                )
                raise InsufficientStockError(product_id, product.stock_quantity, quantity)
            product.lifecycle.touch(self.actor)

        logger.info(
            "Removed %s units from product %s: new quantity = %s",
            quantity,
            product_id,
            product.stock_quantity,
        )
        return product

    def activate(self, product_id: int) -> Product:
        with self._lock():
            product = self.get(product_id)
            product.activate()
            product.lifecycle.touch(self.actor)

        logger.info("Product activated: %s", product_id)
        return product

    def deactivate(self, product_id: int) -> Product:
        with self._lock():
            product = self.get(product_id)
            product.deactivate()
            product.lifecycle.touch(self.actor)

        logger.info("Product deactivated: %s", product_id)
        return product

    def list_products(self) -> list[Product]:
        return list(self._products.values())

    def list_active(self) -> list[Product]:
        return [p for p in self._products.values() if p.active]

    def list_available(self) -> list[Product]:
        """Products that are active and in stock."""
        return [p for p in self._products.values() if p.available]

    def list_by_category(self, category: ProductCategory | str | None) -> list[Product]:
        wanted = enum_member(ProductCategory, category)
        if wanted is None:
            return []
        return [p for p in self._products.values() if p.category is wanted]
