"""Load seed documents into a Catalog."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from .catalog import Catalog
from .errors import SeedError
from .models import Order, OrderLine, Product
from .schemas import OrderSeed, SeedDocument

logger = logging.getLogger(__name__)

# Transitions replayed, in order, to bring a seeded order to its status
_STATUS_PATH = {
    "confirmed": ("confirm",),
    "shipped": ("confirm", "ship"),
    "delivered": ("confirm", "ship", "deliver"),
    "cancelled": ("cancel",),
}


def load_seed_file(path: str | Path) -> SeedDocument:
    """
    Read and validate a seed document.

    Raises:
        SeedError: If the file can't be read, isn't JSON, or doesn't match
            the schema.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SeedError(f"cannot read file ({e.strerror})", str(path)) from e
    except json.JSONDecodeError as e:
        raise SeedError(f"invalid JSON ({e.msg} at line {e.lineno})", str(path)) from e

    return parse_seed(data, str(path))


def parse_seed(data: object, source: str | None = None) -> SeedDocument:
    """
    Validate already-decoded seed data.

    Raises:
        SeedError: If data doesn't match the schema.
    """
    try:
        return SeedDocument.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise SeedError(f"schema mismatch ({problems})", source) from e


def apply_seed(catalog: Catalog, document: SeedDocument) -> list[Order]:
    """
    Create the document's users, products and orders in catalog.

    Everything goes through the store contracts, so store validation and
    uniqueness rules apply. A failure stops the load; entities created
    before it stay in the catalog.

    Returns:
        The created orders, in document order.

    Raises:
        ShopcoreError: Any store error, or SeedError for dangling references.
    """
    for entry in document.users:
        user = catalog.users.create(
            username=entry.username,
            email=entry.email,
            first_name=entry.first_name,
            last_name=entry.last_name,
            phone_number=entry.phone_number,
        )
        if entry.status is not None:
            catalog.users.change_status(user.id, entry.status)

    for entry in document.products:
        product = catalog.products.create(
            name=entry.name,
            sku=entry.sku,
            price=entry.price,
            category=entry.category,
            description=entry.description,
            stock_quantity=entry.stock,
        )
        if not entry.active:
            catalog.products.deactivate(product.id)

    orders = [_apply_order(catalog, entry) for entry in document.orders]

    logger.info("Seed loaded: %s", catalog.summary())
    return orders


def _apply_order(catalog: Catalog, entry: OrderSeed) -> Order:
    customer = catalog.users.find_by_username(entry.customer)
    if customer is None:
        raise SeedError(f"order references unknown customer '{entry.customer}'")

    # Resolve every SKU before creating anything for this order
    products: list[Product] = []
    for line in entry.lines:
        product = catalog.products.find_by_sku(line.sku)
        if product is None:
            raise SeedError(f"order line references unknown SKU '{line.sku}'")
        products.append(product)

    order = catalog.orders.create(
        customer_id=customer.id,
        order_number=entry.order_number,
        shipping_address=entry.shipping_address,
        billing_address=entry.billing_address,
        tax_amount=entry.tax_amount,
        shipping_amount=entry.shipping_amount,
    )

    for line, product in zip(entry.lines, products):
        order_line = OrderLine.for_product(product, line.quantity)
        if line.unit_price is not None:
            order_line = order_line.with_price(line.unit_price)
        catalog.orders.add_item(order.id, order_line)
        if entry.reserve_stock:
            catalog.products.remove_stock(product.id, line.quantity)

    if entry.status is not None:
        for step in _STATUS_PATH[entry.status]:
            getattr(catalog.orders, step)(order.id)

    return order
