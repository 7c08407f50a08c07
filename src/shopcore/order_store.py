"""Order storage for shopcore."""

import logging
import threading
from contextlib import contextmanager
from decimal import Decimal
from typing import Callable, Iterator

from .config import DEFAULT_ACTOR, DEFAULT_ORDER_PREFIX
from .errors import DuplicateKeyError, InvalidFieldError, NotFoundError
from .identity import IdAllocator
from .models import Order, OrderLine, OrderStatus
from .validation import enum_member, is_non_negative, is_not_empty, to_decimal

logger = logging.getLogger(__name__)

Amount = Decimal | int | str


def _key(order_number: str) -> str:
    return order_number.lower()


class OrderStore:
    """In-memory orders indexed by ID and order number."""

    def __init__(self, actor: str = DEFAULT_ACTOR, order_prefix: str = DEFAULT_ORDER_PREFIX):
        """
        Initialize OrderStore.

        Args:
            actor: Name recorded as created_by/updated_by on every write.
            order_prefix: Prefix for generated order numbers.
        """
        self.actor = actor
        self.order_prefix = order_prefix
        self._ids = IdAllocator()
        self._orders: dict[int, Order] = {}
        self._by_number: dict[str, Order] = {}
        self._mutex = threading.RLock()

    @contextmanager
    def _lock(self) -> Iterator[None]:
        """Hold the store lock for a check-then-write sequence."""
        with self._mutex:
            yield

    def __len__(self) -> int:
        return len(self._orders)

    def count(self) -> int:
        return len(self._orders)

    def create(
        self,
        customer_id: int,
        order_number: str | None = None,
        shipping_address: str | None = None,
        billing_address: str | None = None,
        tax_amount: Amount = 0,
        shipping_amount: Amount = 0,
    ) -> Order:
        """
        Create and store a new PENDING order with no lines.

        Args:
            customer_id: ID of the ordering user. Not checked against a
                UserStore.
            order_number: Unique order number. Generated from the prefix and
                the allocated ID (e.g. ORD-000042) when omitted.

        Raises:
            InvalidFieldError: If customer_id is missing, order_number is
                blank, or an amount is negative.
            DuplicateKeyError: If order_number is already taken.
        """
        if customer_id is None:
            raise InvalidFieldError("customer_id", "Customer ID is required", "INVALID_CUSTOMER")
        if order_number is not None and not is_not_empty(order_number):
            raise InvalidFieldError("order_number", "Order number cannot be blank")
        for field_name, amount in (("tax_amount", tax_amount), ("shipping_amount", shipping_amount)):
            if not is_non_negative(amount):
                raise InvalidFieldError(
                    field_name, f"{field_name} must not be negative", "INVALID_AMOUNT"
                )

        with self._lock():
            if order_number is not None and _key(order_number) in self._by_number:
                raise DuplicateKeyError("order_number", order_number)

            order_id = self._ids.next_id()
            number = order_number or self._generate_number(order_id)

            order = Order(
                order_number=number,
                customer_id=customer_id,
                tax_amount=tax_amount,
                shipping_amount=shipping_amount,
                shipping_address=shipping_address,
                billing_address=billing_address,
            )
            order.id = order_id
            order.lifecycle.stamp(self.actor)

            self._orders[order.id] = order
            self._by_number[_key(number)] = order

        logger.info("Order %s created for customer %s with ID: %s", number, customer_id, order.id)
        return order

    def _generate_number(self, order_id: int) -> str:
        """Build a free order number from the ID, suffixed if a caller already holds it."""
        base = f"{self.order_prefix}-{order_id:06d}"
        number = base
        attempt = 1
        while _key(number) in self._by_number:
            attempt += 1
            number = f"{base}-{attempt}"
        return number

    def find_by_id(self, order_id: int | None) -> Order | None:
        if order_id is None:
            return None
        return self._orders.get(order_id)

    def find_by_order_number(self, order_number: str | None) -> Order | None:
        if not is_not_empty(order_number):
            return None
        return self._by_number.get(_key(order_number))

    def get(self, order_id: int | None) -> Order:
        """
        Get an order by ID.

        Raises:
            NotFoundError: If the order doesn't exist.
        """
        order = self.find_by_id(order_id)
        if order is None:
            raise NotFoundError("order", order_id)
        return order

    def add_item(self, order_id: int, line: OrderLine | None) -> Order:
        with self._lock():
            order = self.get(order_id)
            order.add_item(line)
            order.lifecycle.touch(self.actor)
        return order

    def remove_item(self, order_id: int, line: OrderLine | None) -> Order:
        """Remove a line; a line not on the order is ignored."""
        with self._lock():
            order = self.get(order_id)
            order.remove_item(line)
            order.lifecycle.touch(self.actor)
        return order

    def set_charges(
        self,
        order_id: int,
        tax_amount: Amount | None = None,
        shipping_amount: Amount | None = None,
    ) -> Order:
        """
        Change tax and/or shipping; the total is recomputed.

        Raises:
            NotFoundError: If the order doesn't exist.
            InvalidFieldError: If an amount is negative. Nothing is changed
                in that case.
        """
        with self._lock():
            order = self.get(order_id)
            for field_name, amount in (
                ("tax_amount", tax_amount),
                ("shipping_amount", shipping_amount),
            ):
                if amount is not None and not is_non_negative(amount):
                    raise InvalidFieldError(
                        field_name, f"{field_name} must not be negative", "INVALID_AMOUNT"
                    )

            if tax_amount is not None:
                order.tax_amount = to_decimal(tax_amount)
            if shipping_amount is not None:
                order.shipping_amount = to_decimal(shipping_amount)
            order.lifecycle.touch(self.actor)

        logger.info("Charges updated for order %s: total = %s", order_id, order.total_amount)
        return order

    def _transition(self, order_id: int, action: Callable[[Order], None]) -> Order:
        with self._lock():
            order = self.get(order_id)
            old_status = order.status
            action(order)
            order.lifecycle.touch(self.actor)

        logger.info(
            "Order status changed from %s to %s for order ID: %s",
            old_status.value,
            order.status.value,
            order_id,
        )
        return order

    def confirm(self, order_id: int) -> Order:
        return self._transition(order_id, Order.confirm)

    def ship(self, order_id: int) -> Order:
        return self._transition(order_id, Order.ship)

    def deliver(self, order_id: int) -> Order:
        return self._transition(order_id, Order.deliver)

    def cancel(self, order_id: int) -> Order:
        return self._transition(order_id, Order.cancel)

    def list_orders(self) -> list[Order]:
        return list(self._orders.values())

    def list_by_customer(self, customer_id: int | None) -> list[Order]:
        if customer_id is None:
            return []
        return [o for o in self._orders.values() if o.customer_id == customer_id]

    def list_by_status(self, status: OrderStatus | str | None) -> list[Order]:
        wanted = enum_member(OrderStatus, status)
        if wanted is None:
            return []
        return [o for o in self._orders.values() if o.status is wanted]
