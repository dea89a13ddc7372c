import pytest
from unittest.mock import patch
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.exchange.services import ExchangeRateResolver
from apps.exchange.tests.fakes import FakeClock, FakeRateSource


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='fx@example.com',
        password='TestPass123!',
        display_name='FX User',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def rate_source():
    return FakeRateSource()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def resolver(rate_source, clock):
    """Resolver over the fake feed with a 4 hour TTL."""
    return ExchangeRateResolver(rate_source, ttl_seconds=4 * 60 * 60, clock=clock)


@pytest.fixture
def patched_resolver(resolver):
    """Route conversion services through the fake-feed resolver."""
    with patch('apps.exchange.services.conversion.get_resolver', return_value=resolver):
        yield resolver


@pytest.fixture
def ecb_payload():
    """SDMX-JSON data message as returned for D.GBP+USD.EUR.SP00.A."""
    return {
        'header': {'id': 'test', 'prepared': '2024-05-22T10:00:00.000+02:00'},
        'dataSets': [{
            'action': 'Replace',
            'series': {
                '0:0:0:0:0': {'attributes': [0], 'observations': {'0': [0.853, 0, 0, None, None]}},
                '0:1:0:0:0': {'attributes': [0], 'observations': {'0': [1.0842, 0, 0, None, None]}},
            },
        }],
        'structure': {
            'dimensions': {
                'series': [
                    {'id': 'FREQ', 'values': [{'id': 'D', 'name': 'Daily'}]},
                    {'id': 'CURRENCY', 'values': [
                        {'id': 'GBP', 'name': 'UK pound sterling'},
                        {'id': 'USD', 'name': 'US dollar'},
                    ]},
                    {'id': 'CURRENCY_DENOM', 'values': [{'id': 'EUR', 'name': 'Euro'}]},
                    {'id': 'EXR_TYPE', 'values': [{'id': 'SP00', 'name': 'Spot'}]},
                    {'id': 'EXR_SUFFIX', 'values': [{'id': 'A', 'name': 'Average'}]},
                ],
                'observation': [
                    {'id': 'TIME_PERIOD', 'values': [
                        {'id': '2024-05-21', 'name': '2024-05-21',
                         'start': '2024-05-21T00:00:00.000+02:00'},
                    ]},
                ],
            },
        },
    }
