"""Decimal helpers shared by pricing, document totals and reporting."""

from decimal import Decimal, ROUND_HALF_UP

from .constants import CURRENCY_SYMBOLS

MONEY_QUANT = Decimal('0.01')
RATE_QUANT = Decimal('0.000001')


def to_decimal(value) -> Decimal:
    """Coerce ints, strings and Decimals; floats go through str() to keep their repr."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def quantize_rate(value) -> Decimal:
    return to_decimal(value).quantize(RATE_QUANT, rounding=ROUND_HALF_UP)


def currency_symbol(currency_code: str) -> str:
    return CURRENCY_SYMBOLS.get((currency_code or '').upper(), '$')


def format_money(amount, currency_code: str) -> str:
    """
    Render an amount for documents, e.g. ``$1,234.50`` or ``-£5.00``.

    The sign goes in front of the symbol so negative totals stay readable
    in PDF tables.
    """
    value = quantize_money(amount)
    sign = '-' if value < 0 else ''
    return f"{sign}{currency_symbol(currency_code)}{abs(value):,.2f}"
