"""Decimal-as-string money helpers.

Prices travel as strings ("12500.00") so that JSON clients never see binary
floating point. All arithmetic happens on ``Decimal`` and is quantized to two
places on the way out.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from protean.exceptions import ValidationError

CENTS = Decimal("0.01")


def parse_amount(value, field: str = "price") -> Decimal:
    """Parse a non-negative monetary amount, raising ValidationError otherwise."""
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError({field: [f"'{value}' is not a valid amount"]})

    if not amount.is_finite():
        raise ValidationError({field: [f"'{value}' is not a valid amount"]})
    if amount < 0:
        raise ValidationError({field: ["Amount cannot be negative"]})
    return amount


def format_amount(amount: Decimal) -> str:
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def normalize_amount(value, field: str = "price") -> str:
    """Parse then format, e.g. ``"12500"`` becomes ``"12500.00"``."""
    return format_amount(parse_amount(value, field))


def line_total(unit_price, quantity: int) -> str:
    return format_amount(parse_amount(unit_price) * quantity)
