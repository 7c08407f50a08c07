"""In-memory user, product and order catalog."""

__version__ = "0.1.0"

from .catalog import Catalog
from .errors import (
    DuplicateKeyError,
    InsufficientStockError,
    InvalidFieldError,
    InvalidQuantityError,
    NotFoundError,
    SeedError,
    ShopcoreError,
)
from .models import (
    Lifecycle,
    Order,
    OrderLine,
    OrderStatus,
    Product,
    ProductCategory,
    User,
    UserStatus,
)
from .order_store import OrderStore
from .product_store import ProductStore
from .user_store import UserStore

__all__ = [
    "Catalog",
    "DuplicateKeyError",
    "InsufficientStockError",
    "InvalidFieldError",
    "InvalidQuantityError",
    "Lifecycle",
    "NotFoundError",
    "Order",
    "OrderLine",
    "OrderStatus",
    "OrderStore",
    "Product",
    "ProductCategory",
    "ProductStore",
    "SeedError",
    "ShopcoreError",
    "User",
    "UserStatus",
    "UserStore",
]
