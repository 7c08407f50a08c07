"""Validation predicates used by the stores before any mutation."""

import re
from decimal import Decimal, InvalidOperation

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9_+&*-]+(?:\.[a-zA-Z0-9_+&*-]+)*@(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,7}$"
)

# Optional leading +, no leading zero, 9 to 15 digits in total
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{8,14}$")


def is_not_empty(value: str | None) -> bool:
    """Return True if value is a string with at least one non-blank character."""
    return isinstance(value, str) and bool(value.strip())


def is_valid_email(email: str | None) -> bool:
    return is_not_empty(email) and EMAIL_PATTERN.match(email) is not None


def is_valid_phone_number(phone_number: str | None) -> bool:
    return is_not_empty(phone_number) and PHONE_PATTERN.match(phone_number) is not None


def _as_decimal(number) -> Decimal | None:
    if number is None or isinstance(number, bool):
        return None
    try:
        value = Decimal(str(number))
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def is_positive(number) -> bool:
    value = _as_decimal(number)
    return value is not None and value > 0


def is_non_negative(number) -> bool:
    value = _as_decimal(number)
    return value is not None and value >= 0


def as_quantity(number) -> int | None:
    """
    Return number as an int if it is a whole count of units.

    Accepts int and Decimal values without a fractional part. Returns None
    for bools, floats, strings and fractional Decimals.
    """
    if isinstance(number, bool):
        return None
    if isinstance(number, int):
        return number
    if isinstance(number, Decimal) and number.is_finite() and number == number.to_integral_value():
        return int(number)
    return None


def has_min_length(value: str | None, min_length: int) -> bool:
    return is_not_empty(value) and len(value) >= min_length


def has_max_length(value: str | None, max_length: int) -> bool:
    """A missing value never exceeds the maximum."""
    return value is None or len(value) <= max_length


def length_in_range(value: str | None, min_length: int, max_length: int) -> bool:
    return has_min_length(value, min_length) and has_max_length(value, max_length)


def to_decimal(number) -> Decimal:
    """
    Convert a price or amount to Decimal.

    Accepts Decimal, int, float and numeric strings. Floats go through str()
    so 29.99 stays 29.99 instead of its binary expansion.

    Raises:
        ValueError: If the value isn't a finite number.
    """
    value = _as_decimal(number)
    if value is None:
        raise ValueError(f"Not a number: {number!r}")
    return value


def enum_member(enum_cls, value):
    """
    Resolve value to a member of enum_cls.

    Accepts a member, or its value/name as a case-insensitive string.
    Returns None for anything else.
    """
    if isinstance(value, enum_cls):
        return value
    if not is_not_empty(value):
        return None
    key = value.strip().upper()
    for member in enum_cls:
        if member.value == key or member.name == key:
            return member
    return None
