"""Currency conversion used by pricing, documents and the dashboard."""

import logging
from decimal import Decimal

from django.db import transaction

from ..constants import ALLOWED_CURRENCIES
from ..models import ExchangeRate
from ..money import quantize_money, quantize_rate, to_decimal
from .exceptions import InvalidRateOverrideError, UnsupportedCurrencyError
from .resolver import ResolvedRate, get_resolver

logger = logging.getLogger(__name__)


def normalize_currency(code) -> str:
    """Upper-case ``code`` and check it against the allowed list."""
    normalized = (code or '').strip().upper()
    if normalized not in ALLOWED_CURRENCIES:
        raise UnsupportedCurrencyError(f"Unsupported currency: {code or '(empty)'}")
    return normalized


def lookup_exchange_rate(from_currency: str, to_currency: str) -> ResolvedRate:
    """
    Resolve a rate, preferring the newest manual override for the exact pair.

    Raises:
        UnsupportedCurrencyError: If either code is not supported
        ExchangeRateUnavailableError: If the feed is down and nothing is cached
    """
    source_code = normalize_currency(from_currency)
    target_code = normalize_currency(to_currency)

    if source_code == target_code:
        return ResolvedRate(rate=Decimal('1'), observation_date=None)

    override = (
        ExchangeRate.objects
        .filter(from_currency=source_code, to_currency=target_code)
        .order_by('-created_at')
        .first()
    )
    if override is not None:
        return ResolvedRate(
            rate=quantize_rate(override.rate),
            observation_date=override.created_at.date(),
        )

    return get_resolver().resolve(source_code, target_code)


def get_exchange_rate(from_currency: str, to_currency: str) -> Decimal:
    return lookup_exchange_rate(from_currency, to_currency).rate


def convert_amount(amount, from_currency: str, to_currency: str) -> Decimal:
    """
    Convert ``amount`` and round to cents.

    Same-currency conversion only rounds; no rate is looked up.
    """
    value = to_decimal(amount)
    if (from_currency or '').upper() == (to_currency or '').upper():
        return quantize_money(value)
    return quantize_money(value * get_exchange_rate(from_currency, to_currency))


def get_base_currency() -> str:
    """The system reporting currency, as stored in AppSettings."""
    from apps.company.services import get_app_settings

    return get_app_settings().base_currency


@transaction.atomic
def create_rate_override(
    *,
    from_currency: str,
    to_currency: str,
    rate,
    note: str = '',
    created_by=None,
) -> ExchangeRate:
    """
    Record a manual rate that wins over the feed for this exact pair.

    Raises:
        UnsupportedCurrencyError: If either code is not supported
        InvalidRateOverrideError: If currencies match or the rate is not positive
    """
    source_code = normalize_currency(from_currency)
    target_code = normalize_currency(to_currency)

    if source_code == target_code:
        raise InvalidRateOverrideError("Override currencies must differ")

    value = to_decimal(rate)
    if value <= 0:
        raise InvalidRateOverrideError("Rate must be greater than zero")

    override = ExchangeRate.objects.create(
        from_currency=source_code,
        to_currency=target_code,
        rate=quantize_rate(value),
        note=note,
        created_by=created_by,
    )
    logger.info("Rate override recorded: %s", override)
    return override


def delete_rate_override(*, override_id) -> bool:
    deleted, _ = ExchangeRate.objects.filter(id=override_id).delete()
    return deleted > 0
