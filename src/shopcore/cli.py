"""Command-line interface for shopcore."""

import argparse
import json
import logging
import sys
from decimal import Decimal

from . import __version__
from .catalog import Catalog
from .config import Settings
from .errors import ShopcoreError
from .models import Order, OrderLine, ProductCategory
from .seed import apply_seed, load_seed_file


def configure_logging(level: str) -> None:
    """Send log records to stderr at the given level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def format_order(order: Order) -> str:
    """Format an order for display."""
    lines = [
        f"{order.order_number}  customer={order.customer_id}  "
        f"{order.status.value}  total={order.total_amount}"
    ]
    for item in order.items:
        lines.append(
            f"  {item.product_sku}  {item.product_name}  "
            f"{item.quantity} x {item.unit_price} = {item.total_price}"
        )
    return "\n".join(lines)


def cmd_seed(args: argparse.Namespace, settings: Settings) -> int:
    """Load a seed document into a fresh catalog and report what it holds."""
    try:
        document = load_seed_file(args.path)
        catalog = Catalog(settings=settings)
        orders = apply_seed(catalog, document)

        if args.json:
            data = {
                "users": [u.to_dict() for u in catalog.users.list_users()],
                "products": [p.to_dict() for p in catalog.products.list_products()],
                "orders": [o.to_dict() for o in orders],
            }
            print(json.dumps(data, indent=2))
        else:
            summary = catalog.summary()
            print(f"Loaded {args.path}")
            print(f"  Users: {summary['users']}")
            print(f"  Products: {summary['products']} "
                  f"({len(catalog.products.list_available())} available)")
            print(f"  Orders: {summary['orders']}")
            for order in orders:
                print(format_order(order))

        return 0

    except ShopcoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_demo(args: argparse.Namespace, settings: Settings) -> int:
    """Walk one order from creation to shipment against a fresh catalog."""
    try:
        catalog = Catalog(settings=settings)

        user = catalog.users.create("alice", "alice@example.com", "Alice", "Smith")
        product = catalog.products.create(
            "Widget", "SKU1", Decimal("10.00"), ProductCategory.OTHER, stock_quantity=5
        )
        order = catalog.orders.create(customer_id=user.id)
        catalog.orders.add_item(order.id, OrderLine.for_product(product, 3))
        catalog.orders.confirm(order.id)
        catalog.products.remove_stock(product.id, 3)
        catalog.orders.ship(order.id)

        if args.json:
            data = {
                "user": user.to_dict(),
                "product": product.to_dict(),
                "order": order.to_dict(),
            }
            print(json.dumps(data, indent=2))
        else:
            print(f"User: {user.username} ({user.full_name})")
            print(f"Product: {product.sku} stock={product.stock_quantity}")
            print(format_order(order))

        return 0

    except ShopcoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shopcore",
        description="In-memory user, product and order catalog",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--log-level", help="Logging level (default: SHOPCORE_LOG_LEVEL or WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # seed
    seed_parser = subparsers.add_parser(
        "seed", help="Load a JSON seed document and summarize the catalog"
    )
    seed_parser.add_argument("path", help="Path to the seed document")
    seed_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # demo
    demo_parser = subparsers.add_parser("demo", help="Run a sample order workflow")
    demo_parser.add_argument("--json", action="store_true", help="Output as JSON")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    settings = Settings.from_env()
    configure_logging(args.log_level or settings.log_level)

    commands = {
        "seed": cmd_seed,
        "demo": cmd_demo,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args, settings)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
