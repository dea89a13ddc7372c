"""
Exchange rate resolver.

Turns a (from, to) currency pair into a multiplicative rate using a
pivot-quoted source, caching each pivot rate on its own.

Cache layout::

    {('EUR', 'USD'): CachedRate(rate=Decimal('1.0842'), observation_date=..., fetched_at=...),
     ('EUR', 'GBP'): CachedRate(...)}

Every entry carries its own fetch time, so a USD rate fetched an hour ago
expires an hour before a GBP rate fetched just now. Reading an entry never
refreshes it.

Example:
    Cross rate through EUR::

        resolver = ExchangeRateResolver(ECBRateSource(settings.FX_ECB_API_URL))
        resolver.get_rate('USD', 'GBP')   # R[GBP] / R[USD]
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Dict, Iterable, Optional, Tuple

from django.conf import settings

from ..constants import ALLOWED_CURRENCIES, PIVOT_CURRENCY
from ..money import quantize_rate
from .exceptions import (
    ExchangeRateUnavailableError,
    RateSourceError,
    UnsupportedCurrencyError,
)
from .rate_sources import ECBRateSource, RateSource

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 4 * 60 * 60


@dataclass(frozen=True)
class CachedRate:
    rate: Decimal
    observation_date: Optional[date]
    fetched_at: float

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.fetched_at < ttl_seconds


@dataclass(frozen=True)
class ResolvedRate:
    """Rate to multiply a ``from`` amount by, plus the feed date it is based on."""

    rate: Decimal
    observation_date: Optional[date]


class ExchangeRateResolver:
    """Pivot-triangulating, TTL-cached rate lookup."""

    def __init__(
        self,
        source: RateSource,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        supported_currencies: Iterable[str] = ALLOWED_CURRENCIES,
    ):
        self.source = source
        self.pivot = getattr(source, 'pivot', PIVOT_CURRENCY)
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.supported_currencies = frozenset(supported_currencies)
        self._cache: Dict[Tuple[str, str], CachedRate] = {}
        self._lock = threading.Lock()

    def resolve(self, from_currency: str, to_currency: str) -> ResolvedRate:
        """
        Resolve the rate for converting ``from_currency`` into ``to_currency``.

        Args:
            from_currency: ISO code of the amount's currency
            to_currency: ISO code of the wanted currency

        Returns:
            ResolvedRate with the rate rounded to 6 decimal places. For a
            same-currency pair the rate is 1 and no observation date is set.

        Raises:
            UnsupportedCurrencyError: If either code is not supported
            ExchangeRateUnavailableError: If a needed rate is neither cached
                nor obtainable from the source
        """
        source_code = (from_currency or '').upper()
        target_code = (to_currency or '').upper()

        if source_code == target_code and source_code:
            return ResolvedRate(rate=Decimal('1'), observation_date=None)

        for code in (source_code, target_code):
            if code not in self.supported_currencies:
                raise UnsupportedCurrencyError(f"Unsupported currency: {code or '(empty)'}")

        needed = [c for c in (source_code, target_code) if c != self.pivot]
        entries = self._get_entries(needed)

        if source_code == self.pivot:
            rate = entries[target_code].rate
        elif target_code == self.pivot:
            rate = Decimal('1') / entries[source_code].rate
        else:
            rate = entries[target_code].rate / entries[source_code].rate

        dates = [e.observation_date for e in entries.values() if e.observation_date]
        return ResolvedRate(
            rate=quantize_rate(rate),
            observation_date=min(dates) if dates else None,
        )

    def get_rate(self, from_currency: str, to_currency: str) -> Decimal:
        return self.resolve(from_currency, to_currency).rate

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def cached_currencies(self):
        """Currencies with a fresh cache entry right now."""
        now = self.clock()
        with self._lock:
            return sorted(
                currency for (_, currency), entry in self._cache.items()
                if entry.is_fresh(now, self.ttl_seconds)
            )

    def _get_entries(self, currencies) -> Dict[str, CachedRate]:
        with self._lock:
            now = self.clock()
            entries = {}
            missing = []
            for currency in currencies:
                entry = self._cache.get((self.pivot, currency))
                if entry is not None and entry.is_fresh(now, self.ttl_seconds):
                    entries[currency] = entry
                else:
                    missing.append(currency)

            if not missing:
                return entries

            logger.debug("Rate cache miss for %s", ','.join(missing))
            try:
                snapshot = self.source.fetch_rates(missing)
            except RateSourceError as e:
                raise ExchangeRateUnavailableError(
                    f"Exchange rate unavailable for {', '.join(missing)}: {e}"
                ) from e

            fetched_at = self.clock()
            for currency in missing:
                rate = snapshot.rates.get(currency)
                if rate is None:
                    raise ExchangeRateUnavailableError(
                        f"Exchange rate unavailable for {currency}"
                    )
                entry = CachedRate(
                    rate=rate,
                    observation_date=snapshot.observation_date,
                    fetched_at=fetched_at,
                )
                self._cache[(self.pivot, currency)] = entry
                entries[currency] = entry

            return entries


_default_resolver = None
_default_resolver_lock = threading.Lock()


def get_resolver() -> ExchangeRateResolver:
    """Process-wide resolver configured from Django settings."""
    global _default_resolver
    with _default_resolver_lock:
        if _default_resolver is None:
            source = ECBRateSource(
                base_url=settings.FX_ECB_API_URL,
                timeout=settings.FX_REQUEST_TIMEOUT,
            )
            _default_resolver = ExchangeRateResolver(
                source,
                ttl_seconds=settings.FX_CACHE_TTL_SECONDS,
            )
        return _default_resolver


def reset_resolver() -> None:
    """Drop the process-wide resolver so the next call rebuilds it from settings."""
    global _default_resolver
    with _default_resolver_lock:
        _default_resolver = None
