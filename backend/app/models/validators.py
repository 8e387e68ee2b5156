"""Model-level validation utilities for data integrity.

Reusable validators that enforce business rules at the ORM level, so
invalid data is rejected regardless of which endpoint or service writes it.
"""

from decimal import Decimal


def non_negative(key: str, value):
    """Validate that a numeric value is >= 0."""
    if value is not None:
        v = Decimal(str(value)) if not isinstance(value, Decimal) else value
        if v < 0:
            raise ValueError(f"{key} cannot be negative, got {value}")
    return value


def positive(key: str, value):
    """Validate that a numeric value is > 0."""
    if value is not None:
        v = Decimal(str(value)) if not isinstance(value, Decimal) else value
        if v <= 0:
            raise ValueError(f"{key} must be positive, got {value}")
    return value


def star_rating(key: str, value):
    """Validate an integer star rating between 1 and 5."""
    if value is not None:
        if int(value) != value or not 1 <= value <= 5:
            raise ValueError(f"{key} must be an integer between 1 and 5, got {value}")
    return value


def aggregate_rating(key: str, value):
    """Validate an averaged rating between 0 and 5."""
    if value is not None:
        v = float(value)
        if v < 0 or v > 5:
            raise ValueError(f"{key} must be between 0 and 5, got {value}")
    return value
