from __future__ import annotations

from decimal import Decimal, InvalidOperation

PRICE_PLACES = 2

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive integer")
    if number != value and str(number) != str(value).strip():
        raise ValidationError(f"{field_name} must be a positive integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return number


def require_positive_decimal(value, field_name: str) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive number")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a positive number")
    if not number.is_finite() or number <= 0:
        raise ValidationError(f"{field_name} must be a positive number")
    if number.as_tuple().exponent < -PRICE_PLACES:
        raise ValidationError(f"{field_name} must have at most {PRICE_PLACES} decimal places")
    return number
