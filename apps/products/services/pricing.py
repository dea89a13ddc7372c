"""Product pricing in a document currency."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from apps.exchange.money import quantize_money
from apps.exchange.services import get_exchange_rate, normalize_currency
from ..models import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PricedAmount:
    """Unit price in a currency; ``fx_rate`` is set only when it was converted."""

    amount: Decimal
    currency: str
    fx_rate: Optional[Decimal] = None


def price_for_currency(product: Product, currency: str) -> PricedAmount:
    """
    Unit price of ``product`` in ``currency``.

    Resolution order:
        1. A fixed additional price in that currency
        2. The base price, when the currency is the product's base currency
        3. The base price converted at the current base -> currency rate

    Raises:
        UnsupportedCurrencyError: If ``currency`` is not supported
        ExchangeRateUnavailableError: If conversion is needed and no rate is available
    """
    code = normalize_currency(currency)

    for additional in product.additional_prices.all():
        if additional.currency_code == code:
            return PricedAmount(amount=quantize_money(additional.price), currency=code)

    if code == product.base_currency:
        return PricedAmount(amount=quantize_money(product.base_price), currency=code)

    rate = get_exchange_rate(product.base_currency, code)
    logger.debug("Converted %s price %s -> %s at %s", product.sku, product.base_currency, code, rate)
    return PricedAmount(
        amount=quantize_money(product.base_price * rate),
        currency=code,
        fx_rate=rate,
    )
