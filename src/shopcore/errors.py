"""Custom exceptions for shopcore."""


class ShopcoreError(Exception):
    """Base exception for all shopcore errors.

    Every error carries a machine-readable ``code`` next to its message.
    """

    code = "SHOPCORE_ERROR"

    def __init__(self, message: str, code: str | None = None):
        if code is not None:
            self.code = code
        self.message = message
        super().__init__(message)


class InvalidFieldError(ShopcoreError):
    """Raised when a field fails its validity predicate."""

    def __init__(self, field: str, reason: str, code: str | None = None):
        self.field = field
        self.reason = reason
        super().__init__(reason, code or f"INVALID_{field.upper()}")


class InvalidQuantityError(InvalidFieldError):
    """Raised when a stock quantity is zero, negative or otherwise unusable."""

    def __init__(self, quantity: int | None, reason: str):
        self.quantity = quantity
        super().__init__("quantity", reason, "INVALID_QUANTITY")


class DuplicateKeyError(ShopcoreError):
    """Raised when a uniqueness index already holds the (normalized) value."""

    def __init__(
        self, field: str, value: str, code: str | None = None, label: str | None = None
    ):
        self.field = field
        self.value = value
        label = label or field.replace("_", " ").capitalize()
        super().__init__(f"{label} already exists: {value}", code or f"{field.upper()}_EXISTS")


class NotFoundError(ShopcoreError):
    """Raised when an entity ID doesn't exist in its store."""

    def __init__(self, entity: str, entity_id: int | None, code: str | None = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity.capitalize()} not found with ID: {entity_id}",
            code or f"{entity.upper()}_NOT_FOUND",
        )


class InsufficientStockError(ShopcoreError):
    """Raised when a stock removal exceeds the quantity on hand."""

    def __init__(self, product_id: int, available: int | None, requested: int):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock. Available: {available}, Requested: {requested}",
            "INSUFFICIENT_STOCK",
        )


class SeedError(ShopcoreError):
    """Raised when a seed document can't be read or doesn't match the schema."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message, "INVALID_SEED")
