"""
Unit tests for ExchangeRateResolver.

Tests cover:
- Identity conversion
- Triangulation through EUR
- Per-entry cache expiry
- Failure handling
"""

import threading
from datetime import date
from decimal import Decimal

import pytest

from apps.exchange.money import quantize_rate
from apps.exchange.services import (
    ExchangeRateResolver,
    ExchangeRateUnavailableError,
    UnsupportedCurrencyError,
)
from apps.exchange.tests.fakes import FakeRateSource

HOUR = 60 * 60


# =============================================================================
# Identity
# =============================================================================

class TestSameCurrency:

    def test_same_currency_is_one(self, resolver, rate_source):
        resolved = resolver.resolve('USD', 'USD')

        assert resolved.rate == Decimal('1')
        assert resolved.observation_date is None
        assert rate_source.calls == []

    def test_same_currency_does_not_touch_cache(self, resolver, rate_source):
        rate_source.fail = True

        assert resolver.get_rate('GBP', 'gbp') == Decimal('1')
        assert resolver.cached_currencies() == []

    def test_same_pivot_currency(self, resolver, rate_source):
        assert resolver.get_rate('EUR', 'EUR') == Decimal('1')
        assert rate_source.calls == []


# =============================================================================
# Triangulation
# =============================================================================

class TestTriangulation:

    def test_from_pivot_uses_rate_directly(self, resolver):
        assert resolver.get_rate('EUR', 'USD') == Decimal('1.084200')

    def test_to_pivot_inverts_once(self, resolver):
        expected = quantize_rate(Decimal('1') / Decimal('1.0842'))

        assert resolver.get_rate('USD', 'EUR') == expected
        assert expected == Decimal('0.922339')

    def test_cross_rate_divides_target_by_source(self, resolver):
        expected = quantize_rate(Decimal('0.8530') / Decimal('1.0842'))

        assert resolver.get_rate('USD', 'GBP') == expected

    def test_cross_rate_is_reciprocal_within_rounding(self, resolver):
        forward = resolver.get_rate('GBP', 'JPY')
        backward = resolver.get_rate('JPY', 'GBP')

        assert abs(forward * backward - 1) < Decimal('0.0001')

    def test_pivot_side_is_never_requested(self, resolver, rate_source):
        resolver.get_rate('EUR', 'GBP')
        resolver.get_rate('CHF', 'EUR')

        assert rate_source.calls == [['GBP'], ['CHF']]

    def test_rates_have_six_decimal_places(self, resolver):
        rate = resolver.get_rate('JPY', 'USD')

        assert rate.as_tuple().exponent == -6

    def test_lowercase_codes_accepted(self, resolver):
        assert resolver.get_rate('eur', 'usd') == Decimal('1.084200')

    def test_observation_date_reported(self, resolver):
        resolved = resolver.resolve('USD', 'GBP')

        assert resolved.observation_date == date(2024, 5, 21)


# =============================================================================
# Caching
# =============================================================================

class TestCaching:

    def test_second_lookup_is_served_from_cache(self, resolver, rate_source):
        resolver.get_rate('USD', 'GBP')
        resolver.get_rate('GBP', 'USD')

        assert rate_source.calls == [['GBP', 'USD']]

    def test_only_missing_currencies_are_fetched(self, resolver, rate_source):
        resolver.get_rate('EUR', 'USD')
        resolver.get_rate('USD', 'GBP')

        assert rate_source.calls == [['USD'], ['GBP']]

    def test_entry_expires_after_ttl(self, resolver, rate_source, clock):
        resolver.get_rate('EUR', 'USD')
        clock.advance(4 * HOUR)
        resolver.get_rate('EUR', 'USD')

        assert rate_source.calls == [['USD'], ['USD']]

    def test_entry_fresh_just_before_ttl(self, resolver, rate_source, clock):
        resolver.get_rate('EUR', 'USD')
        clock.advance(4 * HOUR - 1)
        resolver.get_rate('EUR', 'USD')

        assert rate_source.calls == [['USD']]

    def test_reads_do_not_extend_lifetime(self, resolver, rate_source, clock):
        resolver.get_rate('EUR', 'USD')
        for _ in range(3):
            clock.advance(HOUR + 10 * 60)
            resolver.get_rate('EUR', 'USD')

        # 3h30m elapsed: still one fetch
        assert rate_source.calls == [['USD']]

        clock.advance(31 * 60)
        resolver.get_rate('EUR', 'USD')
        assert rate_source.calls == [['USD'], ['USD']]

    def test_entries_expire_independently(self, resolver, rate_source, clock):
        resolver.get_rate('EUR', 'USD')       # USD fetched at t0
        clock.advance(2 * HOUR)
        resolver.get_rate('EUR', 'GBP')       # GBP fetched at t0+2h
        clock.advance(2 * HOUR + 1)

        # USD is stale, GBP still has ~2h left
        resolver.get_rate('USD', 'GBP')

        assert rate_source.calls == [['USD'], ['GBP'], ['USD']]

    def test_refetch_picks_up_new_rate(self, resolver, rate_source, clock):
        assert resolver.get_rate('EUR', 'USD') == Decimal('1.084200')

        rate_source.rates['USD'] = Decimal('1.1000')
        assert resolver.get_rate('EUR', 'USD') == Decimal('1.084200')

        clock.advance(4 * HOUR)
        assert resolver.get_rate('EUR', 'USD') == Decimal('1.100000')

    def test_clear_forces_refetch(self, resolver, rate_source):
        resolver.get_rate('EUR', 'USD')
        resolver.clear()
        resolver.get_rate('EUR', 'USD')

        assert len(rate_source.calls) == 2

    def test_cached_currencies_lists_fresh_entries(self, resolver, clock):
        resolver.get_rate('USD', 'GBP')
        assert resolver.cached_currencies() == ['GBP', 'USD']

        clock.advance(4 * HOUR)
        assert resolver.cached_currencies() == []

    def test_concurrent_lookups_share_one_fetch(self, resolver, rate_source):
        results = []

        def lookup():
            results.append(resolver.get_rate('USD', 'GBP'))

        threads = [threading.Thread(target=lookup) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(set(results)) == 1
        assert rate_source.calls == [['GBP', 'USD']]


# =============================================================================
# Errors
# =============================================================================

class TestErrors:

    def test_unsupported_currency(self, resolver, rate_source):
        with pytest.raises(UnsupportedCurrencyError):
            resolver.get_rate('USD', 'XYZ')
        assert rate_source.calls == []

    def test_empty_currency(self, resolver):
        with pytest.raises(UnsupportedCurrencyError):
            resolver.get_rate('', '')

    def test_feed_failure_without_cache(self, resolver, rate_source):
        rate_source.fail = True

        with pytest.raises(ExchangeRateUnavailableError):
            resolver.get_rate('USD', 'GBP')

    def test_feed_failure_after_expiry_is_not_masked(self, resolver, rate_source, clock):
        resolver.get_rate('EUR', 'USD')
        clock.advance(4 * HOUR)
        rate_source.fail = True

        with pytest.raises(ExchangeRateUnavailableError):
            resolver.get_rate('EUR', 'USD')

    def test_fresh_entries_survive_feed_failure(self, resolver, rate_source):
        resolver.get_rate('EUR', 'USD')
        rate_source.fail = True

        assert resolver.get_rate('EUR', 'USD') == Decimal('1.084200')

    def test_currency_missing_from_feed(self, clock):
        source = FakeRateSource(rates={'USD': Decimal('1.0842')})
        resolver = ExchangeRateResolver(source, clock=clock)

        with pytest.raises(ExchangeRateUnavailableError):
            resolver.get_rate('USD', 'NZD')
