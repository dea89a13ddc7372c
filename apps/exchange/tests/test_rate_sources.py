from datetime import date
from decimal import Decimal
from unittest.mock import Mock, patch

import pytest
import requests

from apps.exchange.services import ECBRateSource, RateSourceError


@pytest.fixture
def source():
    return ECBRateSource(base_url='https://ecb.test/service/data/EXR/', timeout=5)


@pytest.fixture
def mock_requests_get():
    with patch('apps.exchange.services.rate_sources.requests.get') as mocked:
        yield mocked


def _response(payload):
    response = Mock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


class TestECBRateSource:

    def test_fetch_rates_success(self, source, mock_requests_get, ecb_payload):
        mock_requests_get.return_value = _response(ecb_payload)

        snapshot = source.fetch_rates(['USD', 'GBP'])

        assert snapshot.rates == {'GBP': Decimal('0.853'), 'USD': Decimal('1.0842')}
        assert snapshot.observation_date == date(2024, 5, 21)

    def test_request_shape(self, source, mock_requests_get, ecb_payload):
        mock_requests_get.return_value = _response(ecb_payload)

        source.fetch_rates(['usd', 'GBP'])

        mock_requests_get.assert_called_once()
        args, kwargs = mock_requests_get.call_args
        assert args[0] == 'https://ecb.test/service/data/EXR/D.GBP+USD.EUR.SP00.A'
        assert kwargs['params'] == {'format': 'jsondata', 'lastNObservations': 1}
        assert kwargs['timeout'] == 5

    def test_pivot_is_not_requested(self, source, mock_requests_get, ecb_payload):
        mock_requests_get.return_value = _response(ecb_payload)

        source.fetch_rates(['EUR', 'USD'])

        assert mock_requests_get.call_args[0][0].endswith('/D.USD.EUR.SP00.A')

    def test_only_pivot_requested_skips_http(self, source, mock_requests_get):
        snapshot = source.fetch_rates(['EUR'])

        assert snapshot.rates == {}
        mock_requests_get.assert_not_called()

    def test_unrequested_currencies_are_dropped(self, source, mock_requests_get, ecb_payload):
        mock_requests_get.return_value = _response(ecb_payload)

        snapshot = source.fetch_rates(['USD'])

        assert list(snapshot.rates) == ['USD']

    def test_series_without_observation_is_skipped(self, source, mock_requests_get, ecb_payload):
        del ecb_payload['dataSets'][0]['series']['0:0:0:0:0']
        mock_requests_get.return_value = _response(ecb_payload)

        snapshot = source.fetch_rates(['USD', 'GBP'])

        assert 'GBP' not in snapshot.rates
        assert snapshot.rates['USD'] == Decimal('1.0842')

    def test_timeout_raises(self, source, mock_requests_get):
        mock_requests_get.side_effect = requests.exceptions.Timeout()

        with pytest.raises(RateSourceError):
            source.fetch_rates(['USD'])

    def test_http_error_raises(self, source, mock_requests_get):
        response = Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError('503 Server Error')
        mock_requests_get.return_value = response

        with pytest.raises(RateSourceError):
            source.fetch_rates(['USD'])

    def test_invalid_json_raises(self, source, mock_requests_get):
        response = Mock()
        response.raise_for_status.return_value = None
        response.json.side_effect = ValueError('No JSON object could be decoded')
        mock_requests_get.return_value = response

        with pytest.raises(RateSourceError):
            source.fetch_rates(['USD'])

    def test_malformed_payload_raises(self, source, mock_requests_get):
        mock_requests_get.return_value = _response({'dataSets': []})

        with pytest.raises(RateSourceError):
            source.fetch_rates(['USD'])

    def test_missing_currency_dimension_raises(self, source, mock_requests_get, ecb_payload):
        ecb_payload['structure']['dimensions']['series'][1]['id'] = 'SOMETHING_ELSE'
        mock_requests_get.return_value = _response(ecb_payload)

        with pytest.raises(RateSourceError):
            source.fetch_rates(['USD'])
