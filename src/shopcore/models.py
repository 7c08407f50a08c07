"""Data models for shopcore."""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from .validation import to_decimal

ZERO = Decimal("0")


def _utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


def _isoformat(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def _money(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def _same_identity(entity: Any, other: Any) -> bool:
    """
    Compare two entities of the same type by ID.

    Both IDs unset counts as equal: nothing has been stored yet, so there is
    no identity to tell them apart.
    """
    if entity.id is None and other.id is None:
        return True
    return entity.id is not None and entity.id == other.id


class UserStatus(Enum):
    """Status of a user account."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"  # deactivated by the user
    SUSPENDED = "SUSPENDED"  # e.g. policy violation
    PENDING = "PENDING"  # awaiting activation


class ProductCategory(Enum):
    ELECTRONICS = "ELECTRONICS"
    CLOTHING = "CLOTHING"
    BOOKS = "BOOKS"
    HOME_GARDEN = "HOME_GARDEN"
    SPORTS = "SPORTS"
    HEALTH_BEAUTY = "HEALTH_BEAUTY"
    TOYS_GAMES = "TOYS_GAMES"
    FOOD_BEVERAGES = "FOOD_BEVERAGES"
    AUTOMOTIVE = "AUTOMOTIVE"
    OTHER = "OTHER"


class OrderStatus(Enum):
    """Status of an order. CANCELLED can be entered from any state."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


@dataclass
class Lifecycle:
    """Creation/update timestamps and attribution shared by every entity."""

    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None

    def __post_init__(self) -> None:
        if self.created_at is None:
            self.created_at = _utc_now()
        if self.updated_at is None:
            self.updated_at = self.created_at

    def touch(self, actor: str | None = None) -> None:
        """Advance updated_at, and updated_by when an actor is given."""
        self.updated_at = _utc_now()
        if actor is not None:
            self.updated_by = actor

    def stamp(self, actor: str) -> None:
        """Attribute creation to actor."""
        self.created_by = actor
        self.updated_by = actor

    def to_dict(self) -> dict[str, Any]:
        return {
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
            "created_by": self.created_by,
            "updated_by": self.updated_by,
        }


class User:
    """A registered user of the shop."""

    def __init__(
        self,
        username: str,
        email: str,
        first_name: str | None = None,
        last_name: str | None = None,
        phone_number: str | None = None,
        password_hash: str | None = None,
    ):
        self.id: int | None = None
        self.lifecycle = Lifecycle()
        self.username = username
        self.email = email
        self.first_name = first_name
        self.last_name = last_name
        self.phone_number = phone_number
        self.password_hash = password_hash
        self._status = UserStatus.ACTIVE

    @property
    def status(self) -> UserStatus:
        return self._status

    @status.setter
    def status(self, value: UserStatus) -> None:
        self._status = value
        self.lifecycle.touch()

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p is not None]
        if not parts:
            return self.username
        return " ".join(parts)

    @property
    def is_active(self) -> bool:
        return self._status is UserStatus.ACTIVE

    def activate(self) -> None:
        self.status = UserStatus.ACTIVE

    def deactivate(self) -> None:
        self.status = UserStatus.INACTIVE

    def suspend(self) -> None:
        self.status = UserStatus.SUSPENDED

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return _same_identity(self, other)

    def __hash__(self) -> int:
        return hash(("User", self.id))

    def __repr__(self) -> str:
        return (
            f"User(id={self.id}, username={self.username!r}, email={self.email!r}, "
            f"full_name={self.full_name!r}, status={self._status.value})"
        )

    def to_dict(self) -> dict[str, Any]:
        # password_hash is deliberately left out
        result: dict[str, Any] = {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "status": self._status.value,
        }
        if self.phone_number is not None:
            result["phone_number"] = self.phone_number
        result.update(self.lifecycle.to_dict())
        return result


class Product:
    """A catalog product with stock on hand."""

    def __init__(
        self,
        name: str,
        sku: str,
        price: Decimal,
        category: ProductCategory,
        description: str | None = None,
        stock_quantity: int | None = 0,
    ):
        self.id: int | None = None
        self.lifecycle = Lifecycle()
        self.name = name
        self.description = description
        self.sku = sku
        self.price = price
        self.category = category
        self.stock_quantity = stock_quantity
        self.active = True

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity is not None and self.stock_quantity > 0

    @property
    def available(self) -> bool:
        return self.active and self.in_stock

    def add_stock(self, quantity: int) -> None:
        """Add quantity to stock. Non-positive quantities are ignored."""
        if quantity > 0:
            self.stock_quantity = (self.stock_quantity or 0) + quantity
            self.lifecycle.touch()

    def remove_stock(self, quantity: int) -> bool:
        """
        Take quantity out of stock.

        Returns:
            False, leaving stock untouched, if quantity isn't positive or
            exceeds what is on hand; True otherwise.
        """
        if quantity <= 0 or self.stock_quantity is None or self.stock_quantity < quantity:
            return False
        self.stock_quantity -= quantity
        self.lifecycle.touch()
        return True

    def activate(self) -> None:
        self.active = True
        self.lifecycle.touch()

    def deactivate(self) -> None:
        self.active = False
        self.lifecycle.touch()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Product):
            return NotImplemented
        return _same_identity(self, other)

    def __hash__(self) -> int:
        return hash(("Product", self.id))

    def __repr__(self) -> str:
        return (
            f"Product(id={self.id}, name={self.name!r}, sku={self.sku!r}, "
            f"price={self.price}, category={self.category.value}, "
            f"stock_quantity={self.stock_quantity}, active={self.active})"
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "sku": self.sku,
            "price": _money(self.price),
            "category": self.category.value,
            "stock_quantity": self.stock_quantity,
            "active": self.active,
            "available": self.available,
        }
        if self.description is not None:
            result["description"] = self.description
        result.update(self.lifecycle.to_dict())
        return result


@dataclass(frozen=True, eq=False)
class OrderLine:
    """
    A product line within an order.

    Lines are immutable once priced; use with_price or with_quantity for a
    re-priced copy. The product name and SKU are snapshots taken when the
    line is priced.

    Lines are identified by (product_id, product_sku) alone, so two lines for
    the same product are interchangeable whatever their price or quantity.
    """

    product_id: int | None
    product_name: str | None
    product_sku: str | None
    unit_price: Decimal | None
    quantity: int | None

    def __post_init__(self) -> None:
        if self.unit_price is not None:
            object.__setattr__(self, "unit_price", to_decimal(self.unit_price))

    @property
    def total_price(self) -> Decimal:
        if self.unit_price is None or self.quantity is None:
            return ZERO
        return self.unit_price * self.quantity

    @classmethod
    def for_product(cls, product: Product, quantity: int) -> "OrderLine":
        """Price a line from the product's current name, SKU and price."""
        return cls(
            product_id=product.id,
            product_name=product.name,
            product_sku=product.sku,
            unit_price=product.price,
            quantity=quantity,
        )

    def with_price(self, unit_price: Decimal | int | str) -> "OrderLine":
        return replace(self, unit_price=unit_price)

    def with_quantity(self, quantity: int) -> "OrderLine":
        return replace(self, quantity=quantity)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderLine):
            return NotImplemented
        return (self.product_id, self.product_sku) == (other.product_id, other.product_sku)

    def __hash__(self) -> int:
        return hash((self.product_id, self.product_sku))

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "product_sku": self.product_sku,
            "unit_price": _money(self.unit_price),
            "quantity": self.quantity,
            "total_price": _money(self.total_price),
        }


class Order:
    """
    A customer order.

    total_amount is derived: it is recomputed from the lines, tax and
    shipping whenever any of them changes and can't be assigned directly.

    Status transitions are not guarded. Any order may move to any status,
    including cancelling one that was already delivered.
    """

    def __init__(
        self,
        order_number: str | None = None,
        customer_id: int | None = None,
        tax_amount: Decimal | int | str = ZERO,
        shipping_amount: Decimal | int | str = ZERO,
        shipping_address: str | None = None,
        billing_address: str | None = None,
    ):
        self.id: int | None = None
        self.lifecycle = Lifecycle()
        self.order_number = order_number
        self.customer_id = customer_id
        self.shipping_address = shipping_address
        self.billing_address = billing_address
        self.order_date = self.lifecycle.created_at
        self.shipped_date: datetime | None = None
        self.delivered_date: datetime | None = None
        self._status = OrderStatus.PENDING
        self._items: list[OrderLine] = []
        self._tax_amount = to_decimal(tax_amount)
        self._shipping_amount = to_decimal(shipping_amount)
        self._total_amount = ZERO
        self._recalculate_total()

    @property
    def status(self) -> OrderStatus:
        return self._status

    @status.setter
    def status(self, value: OrderStatus) -> None:
        self._status = value
        self.lifecycle.touch()

    @property
    def tax_amount(self) -> Decimal:
        return self._tax_amount

    @tax_amount.setter
    def tax_amount(self, value: Decimal | int | str) -> None:
        self._tax_amount = to_decimal(value)
        self._recalculate_total()
        self.lifecycle.touch()

    @property
    def shipping_amount(self) -> Decimal:
        return self._shipping_amount

    @shipping_amount.setter
    def shipping_amount(self, value: Decimal | int | str) -> None:
        self._shipping_amount = to_decimal(value)
        self._recalculate_total()
        self.lifecycle.touch()

    @property
    def total_amount(self) -> Decimal:
        return self._total_amount

    @property
    def items(self) -> list[OrderLine]:
        """A copy of the order lines."""
        return list(self._items)

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def subtotal(self) -> Decimal:
        return sum((line.total_price for line in self._items), ZERO)

    def set_items(self, items: list[OrderLine] | None) -> None:
        self._items = list(items) if items is not None else []
        self._recalculate_total()
        self.lifecycle.touch()

    def add_item(self, item: OrderLine | None) -> None:
        if item is None:
            return
        self._items.append(item)
        self._recalculate_total()
        self.lifecycle.touch()

    def remove_item(self, item: OrderLine | None) -> None:
        """Remove the first line equal to item; a line not present is ignored."""
        if item is None or item not in self._items:
            return
        self._items.remove(item)
        self._recalculate_total()
        self.lifecycle.touch()

    def confirm(self) -> None:
        self.status = OrderStatus.CONFIRMED

    def ship(self) -> None:
        self.shipped_date = _utc_now()
        self.status = OrderStatus.SHIPPED

    def deliver(self) -> None:
        self.delivered_date = _utc_now()
        self.status = OrderStatus.DELIVERED

    def cancel(self) -> None:
        self.status = OrderStatus.CANCELLED

    @property
    def is_pending(self) -> bool:
        return self._status is OrderStatus.PENDING

    @property
    def is_confirmed(self) -> bool:
        return self._status is OrderStatus.CONFIRMED

    @property
    def is_shipped(self) -> bool:
        return self._status is OrderStatus.SHIPPED

    @property
    def is_delivered(self) -> bool:
        return self._status is OrderStatus.DELIVERED

    @property
    def is_cancelled(self) -> bool:
        return self._status is OrderStatus.CANCELLED

    def _recalculate_total(self) -> None:
        self._total_amount = self.subtotal + self._tax_amount + self._shipping_amount

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Order):
            return NotImplemented
        return _same_identity(self, other)

    def __hash__(self) -> int:
        return hash(("Order", self.id))

    def __repr__(self) -> str:
        return (
            f"Order(id={self.id}, order_number={self.order_number!r}, "
            f"customer_id={self.customer_id}, status={self._status.value}, "
            f"total_amount={self._total_amount}, item_count={self.item_count})"
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": self.id,
            "order_number": self.order_number,
            "customer_id": self.customer_id,
            "status": self._status.value,
            "items": [line.to_dict() for line in self._items],
            "subtotal": _money(self.subtotal),
            "tax_amount": _money(self._tax_amount),
            "shipping_amount": _money(self._shipping_amount),
            "total_amount": _money(self._total_amount),
            "order_date": _isoformat(self.order_date),
            "shipped_date": _isoformat(self.shipped_date),
            "delivered_date": _isoformat(self.delivered_date),
        }
        if self.shipping_address is not None:
            result["shipping_address"] = self.shipping_address
        if self.billing_address is not None:
            result["billing_address"] = self.billing_address
        result.update(self.lifecycle.to_dict())
        return result
