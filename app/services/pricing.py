"""
Pricing rules for catalog items.

All amounts are Decimal and kept at full precision. Rounding to cents
happens only when a value is rendered (see `round_money`), never before
line subtotals are summed into an order total.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Literal

MeasurementType = Literal["unit", "weight"]

MEASUREMENT_TYPES: tuple[str, ...] = ("unit", "weight")

GRAMS_PER_KILOGRAM = Decimal(1000)

# Quick-pick quantities offered for weight products (grams)
WEIGHT_PRESETS_GRAMS: tuple[int, ...] = (250, 500, 1000, 2000)

CENT = Decimal("0.01")

# Storage precision: quantity NUMERIC(12,3), subtotal/total NUMERIC(18,8)
QUANTITY_STEP = Decimal("0.001")
MAX_QUANTITY = Decimal("999999")
MAX_AMOUNT = Decimal("9999999999")


class InvalidQuantityError(ValueError):
    """Quantity is not valid for the product's measurement type."""


def validate_quantity(measurement_type: str, quantity: Decimal) -> Decimal:
    """
    Check a requested quantity and return it as Decimal.

    - unit   : positive whole number of units
    - weight : positive number of grams, at most 3 decimal places

    Both are capped at MAX_QUANTITY.
    """
    quantity = Decimal(quantity)

    if not quantity.is_finite() or quantity <= 0:
        raise InvalidQuantityError("Quantity must be greater than zero")

    if quantity > MAX_QUANTITY:
        raise InvalidQuantityError(f"Quantity must not exceed {MAX_QUANTITY}")

    if quantity != quantity.quantize(QUANTITY_STEP):
        raise InvalidQuantityError("Quantity must have at most 3 decimal places")

    if measurement_type == "unit":
        if quantity != quantity.to_integral_value():
            raise InvalidQuantityError("Unit products must be ordered in whole units")
    elif measurement_type != "weight":
        raise InvalidQuantityError(f"Unknown measurement type: {measurement_type}")

    return quantity


def line_subtotal(price: Decimal, measurement_type: str, quantity: Decimal) -> Decimal:
    """
    Price one line.

    unit:   price * quantity
    weight: price is per kg and quantity is grams, so price * grams / 1000
    """
    quantity = validate_quantity(measurement_type, quantity)
    price = Decimal(price)

    if measurement_type == "weight":
        return price * quantity / GRAMS_PER_KILOGRAM
    return price * quantity


def order_total(subtotals: Iterable[Decimal]) -> Decimal:
    """Exact sum of line subtotals."""
    return sum((Decimal(s) for s in subtotals), Decimal(0))


def apply_tax(amount: Decimal, percentage: Decimal) -> Decimal:
    """Tax amount for `amount` at `percentage` (e.g. 16 for 16%)."""
    return Decimal(amount) * Decimal(percentage) / Decimal(100)


def convert_currency(amount: Decimal, rate: Decimal | None) -> Decimal | None:
    """Convert using an exchange rate; None when no rate is known."""
    if rate is None:
        return None
    return Decimal(amount) * Decimal(rate)


def round_money(amount: Decimal) -> Decimal:
    """Round to cents (half up). Display/serialization only."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
