"""In-memory stand-ins for the ECB feed, shared by tests across apps."""

from datetime import date
from decimal import Decimal

from apps.exchange.services import RateSnapshot, RateSource, RateSourceError


# Units per 1 EUR
SAMPLE_RATES = {
    'USD': Decimal('1.0842'),
    'GBP': Decimal('0.8530'),
    'JPY': Decimal('169.45'),
    'CHF': Decimal('0.9876'),
}
SAMPLE_OBSERVATION_DATE = date(2024, 5, 21)


class FakeRateSource(RateSource):
    """Serves fixed pivot rates and records every fetch."""

    def __init__(self, rates=None, observation_date=SAMPLE_OBSERVATION_DATE):
        self.rates = dict(SAMPLE_RATES if rates is None else rates)
        self.observation_date = observation_date
        self.calls = []
        self.fail = False

    def fetch_rates(self, currencies):
        requested = sorted(currencies)
        self.calls.append(requested)
        if self.fail:
            raise RateSourceError("feed down")
        return RateSnapshot(
            rates={c: self.rates[c] for c in requested if c in self.rates},
            observation_date=self.observation_date,
        )


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
