"""Composition root holding one store per entity type."""

from dataclasses import dataclass, field

from .config import Settings
from .order_store import OrderStore
from .product_store import ProductStore
from .user_store import UserStore


@dataclass
class Catalog:
    """The user, product and order stores of one shop, created together."""

    settings: Settings = field(default_factory=Settings)
    users: UserStore = field(init=False)
    products: ProductStore = field(init=False)
    orders: OrderStore = field(init=False)

    def __post_init__(self) -> None:
        self.users = UserStore(actor=self.settings.actor)
        self.products = ProductStore(actor=self.settings.actor)
        self.orders = OrderStore(
            actor=self.settings.actor, order_prefix=self.settings.order_prefix
        )

    @classmethod
    def from_env(cls) -> "Catalog":
        return cls(settings=Settings.from_env())

    def summary(self) -> dict[str, int]:
        return {
            "users": self.users.count(),
            "products": self.products.count(),
            "orders": self.orders.count(),
        }
