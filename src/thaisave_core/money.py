"""Decimal helpers for baht amounts."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .exceptions import ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")


def round_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up (0.005 -> 0.01)."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any, field: str) -> Decimal:
    """Coerce a numeric input to a finite Decimal.

    Floats go through ``str`` so that 0.1 becomes Decimal("0.1") rather
    than its binary expansion.

    Raises:
        ValidationError: If the value is not numeric or not finite.
    """
    if isinstance(value, bool):
        raise ValidationError(
            f"{field} must be a number", field=field, value=value
        )
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationError(
            f"{field} must be a number", field=field, value=value
        ) from exc
    if not result.is_finite():
        raise ValidationError(
            f"{field} must be a finite number",
            field=field,
            value=value,
            constraint="finite",
        )
    return result
