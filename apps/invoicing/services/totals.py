"""
Document totals.

Every amount is a Decimal rounded to cents with ROUND_HALF_UP::

    line_total = quantity * unit_price
    subtotal   = sum(line_total)
    discount   = subtotal * discount% / 100
    taxable    = subtotal - discount
    tax        = taxable * tax% / 100
    total      = taxable + tax

Line totals are rounded before they are summed, so the subtotal always
equals the sum of the printed line totals and ``total == subtotal -
discount + tax`` holds exactly on stored values.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from apps.exchange.money import quantize_money, to_decimal
from .exceptions import InvalidPercentageError

HUNDRED = Decimal('100')


@dataclass(frozen=True)
class DocumentTotals:
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal

    def as_model_fields(self):
        return {
            'subtotal_amount': self.subtotal,
            'discount_amount': self.discount,
            'tax_amount': self.tax,
            'total_amount': self.total,
        }


def validate_percentage(value, field_name: str = 'percentage') -> Decimal:
    """
    Raises:
        InvalidPercentageError: If value is outside 0..100
    """
    percentage = to_decimal(value if value is not None else 0)
    if percentage < 0 or percentage > HUNDRED:
        raise InvalidPercentageError(f"{field_name} must be between 0 and 100, got {percentage}")
    return percentage


def calculate_line_total(quantity, unit_price) -> Decimal:
    return quantize_money(to_decimal(quantity) * to_decimal(unit_price))


def calculate_totals(
    line_totals: Iterable[Decimal],
    discount_percentage=Decimal('0'),
    tax_percentage=Decimal('0'),
) -> DocumentTotals:
    """
    Run the totals pipeline over already-rounded line totals.

    Raises:
        InvalidPercentageError: If either percentage is outside 0..100
    """
    discount_pct = validate_percentage(discount_percentage, 'discount_percentage')
    tax_pct = validate_percentage(tax_percentage, 'tax_percentage')

    subtotal = quantize_money(sum((to_decimal(t) for t in line_totals), Decimal('0')))
    discount = quantize_money(subtotal * discount_pct / HUNDRED)
    taxable = subtotal - discount
    tax = quantize_money(taxable * tax_pct / HUNDRED)

    return DocumentTotals(
        subtotal=subtotal,
        discount=discount,
        tax=tax,
        total=taxable + tax,
    )
