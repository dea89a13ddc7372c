"""Services for currency conversion."""

from .exceptions import (
    ExchangeServiceError,
    UnsupportedCurrencyError,
    RateSourceError,
    ExchangeRateUnavailableError,
    InvalidRateOverrideError,
)
from .rate_sources import (
    RateSnapshot,
    RateSource,
    ECBRateSource,
)
from .resolver import (
    CachedRate,
    ResolvedRate,
    ExchangeRateResolver,
    get_resolver,
    reset_resolver,
)
from .conversion import (
    normalize_currency,
    lookup_exchange_rate,
    get_exchange_rate,
    convert_amount,
    get_base_currency,
    create_rate_override,
    delete_rate_override,
)

__all__ = [
    # Exceptions
    'ExchangeServiceError',
    'UnsupportedCurrencyError',
    'RateSourceError',
    'ExchangeRateUnavailableError',
    'InvalidRateOverrideError',
    # Rate sources
    'RateSnapshot',
    'RateSource',
    'ECBRateSource',
    # Resolver
    'CachedRate',
    'ResolvedRate',
    'ExchangeRateResolver',
    'get_resolver',
    'reset_resolver',
    # Conversion
    'normalize_currency',
    'lookup_exchange_rate',
    'get_exchange_rate',
    'convert_amount',
    'get_base_currency',
    'create_rate_override',
    'delete_rate_override',
]
