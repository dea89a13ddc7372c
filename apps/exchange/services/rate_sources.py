"""
Exchange rate sources.

A source answers one question: how many units of each requested currency
buy one unit of the pivot currency. Cross rates and caching are the
resolver's job.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Optional

import requests

from ..constants import PIVOT_CURRENCY
from .exceptions import RateSourceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateSnapshot:
    """Rates quoted against the pivot currency on one observation date."""

    rates: Dict[str, Decimal] = field(default_factory=dict)
    observation_date: Optional[date] = None


class RateSource(ABC):
    """Interface for pivot-quoted rate feeds."""

    pivot = PIVOT_CURRENCY

    @abstractmethod
    def fetch_rates(self, currencies: Iterable[str]) -> RateSnapshot:
        """
        Fetch the latest rates for ``currencies`` against the pivot.

        Raises:
            RateSourceError: If the feed is unreachable or the payload is invalid
        """
        raise NotImplementedError


class ECBRateSource(RateSource):
    """
    European Central Bank reference rates via the SDMX data API.

    One request covers every requested currency:
    ``{base_url}/D.USD+GBP.EUR.SP00.A?format=jsondata&lastNObservations=1``
    """

    pivot = 'EUR'

    def __init__(self, base_url: str, timeout: int = 10):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    def build_url(self, codes) -> str:
        return f"{self.base_url}/D.{'+'.join(codes)}.{self.pivot}.SP00.A"

    def fetch_rates(self, currencies: Iterable[str]) -> RateSnapshot:
        codes = sorted({c.upper() for c in currencies if c.upper() != self.pivot})
        if not codes:
            return RateSnapshot()

        url = self.build_url(codes)
        try:
            response = requests.get(
                url,
                params={'format': 'jsondata', 'lastNObservations': 1},
                headers={'Accept': 'application/json'},
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.Timeout as e:
            logger.warning("Timeout calling ECB for %s", ','.join(codes))
            raise RateSourceError("Exchange rate service timed out") from e
        except requests.exceptions.RequestException as e:
            logger.warning("ECB request failed for %s: %s", ','.join(codes), e)
            raise RateSourceError(f"Exchange rate service unavailable: {e}") from e
        except ValueError as e:
            raise RateSourceError("Exchange rate service returned invalid JSON") from e

        snapshot = self.parse(payload, codes)
        logger.info(
            "Fetched ECB rates for %s (observation %s)",
            ','.join(sorted(snapshot.rates)),
            snapshot.observation_date,
        )
        return snapshot

    def parse(self, payload, codes) -> RateSnapshot:
        """
        Extract rates from an SDMX-JSON data message.

        The CURRENCY series dimension lists the currencies in the order their
        series keys use; every other series dimension has a single value, so
        its key position is always 0.
        """
        try:
            structure = payload['structure']
            observation_values = structure['dimensions']['observation'][0]['values']
            last_observation = len(observation_values) - 1
            observation_date = date.fromisoformat(
                observation_values[last_observation]['id'][:10]
            )

            series_dimensions = structure['dimensions']['series']
            currency_position = next(
                i for i, dim in enumerate(series_dimensions) if dim['id'] == 'CURRENCY'
            )
            currency_values = series_dimensions[currency_position]['values']
            series = payload['dataSets'][0]['series']
        except (KeyError, IndexError, TypeError, ValueError, StopIteration) as e:
            raise RateSourceError("Malformed ECB response") from e

        rates = {}
        for index, value in enumerate(currency_values):
            code = value.get('id')
            if code not in codes:
                continue

            key_parts = ['0'] * len(series_dimensions)
            key_parts[currency_position] = str(index)
            key = ':'.join(key_parts)

            try:
                raw = series[key]['observations'][str(last_observation)][0]
                rate = Decimal(str(raw))
            except (KeyError, IndexError, TypeError, InvalidOperation):
                logger.warning("ECB response has no observation for %s", code)
                continue

            if rate <= 0:
                logger.warning("ECB returned non-positive rate %s for %s", rate, code)
                continue
            rates[code] = rate

        return RateSnapshot(rates=rates, observation_date=observation_date)
