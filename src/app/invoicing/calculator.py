"""Invoice Calculator

Pure derivations of item totals, subtotal, tax, discount and grand total.
These functions are the only source of every displayed or exported amount.
"""

from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Union
from src.domain.invoice import DiscountConfig, TaxConfig
from src.domain.line_item import LineItem

Number = Union[Decimal, int, float, str, None]

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_amount(value: Number) -> Decimal:
    """Coerce to a finite, non-negative Decimal; anything else becomes 0"""
    if isinstance(value, Decimal):
        amount = value
    elif value is None or isinstance(value, bool):
        return ZERO
    else:
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return ZERO

    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


def clamp(value: Number, lower: Decimal, upper: Decimal) -> Decimal:
    return min(max(to_amount(value), lower), upper)


def percent_to_rate(percent: Number) -> Decimal:
    """Convert a user-entered tax percentage (0-100) to the stored fraction (0-1)"""
    return clamp(percent, ZERO, HUNDRED) / HUNDRED


def compute_item_total(quantity: Number, unit_price: Number) -> Decimal:
    return to_amount(quantity) * to_amount(unit_price)


def compute_subtotal(items: Iterable[LineItem]) -> Decimal:
    """Sum of recomputed item totals; stored item totals are not trusted"""
    return sum(
        (compute_item_total(item.quantity, item.unit_price) for item in items),
        ZERO,
    )


def compute_tax(subtotal: Number, tax: Optional[TaxConfig]) -> Decimal:
    """subtotal * rate for an enabled tax, rate being a fraction clamped to [0, 1]"""
    if tax is None or not tax.enabled:
        return ZERO
    return to_amount(subtotal) * clamp(tax.rate, ZERO, ONE)


def compute_discount(subtotal: Number, discount: Optional[DiscountConfig]) -> Decimal:
    """
    subtotal * rate / 100, rate being a percentage clamped to [0, 100]

    The discount keeps the legacy percentage convention of stored records,
    unlike the fractional tax rate.
    """
    if discount is None:
        return ZERO
    return to_amount(subtotal) * clamp(discount.rate, ZERO, HUNDRED) / HUNDRED


def compute_grand_total(subtotal: Number, tax_amount: Number, discount_amount: Number) -> Decimal:
    return to_amount(subtotal) - to_amount(discount_amount) + to_amount(tax_amount)
