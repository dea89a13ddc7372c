import pytest
from decimal import Decimal
from unittest.mock import patch
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.exchange.services import ExchangeRateResolver
from apps.exchange.tests.fakes import FakeClock, FakeRateSource
from apps.products.models import Product, ProductPrice


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='catalogue@example.com',
        password='TestPass123!',
        display_name='Catalogue',
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
def patched_resolver(rate_source):
    """Route FX lookups through the fake feed."""
    resolver = ExchangeRateResolver(rate_source, clock=FakeClock())
    with patch('apps.exchange.services.conversion.get_resolver', return_value=resolver):
        yield resolver


@pytest.fixture
def product(db):
    """USD-based widget with a fixed GBP price."""
    product = Product.objects.create(
        sku='PR-WDG42',
        name='Widget',
        description='Standard widget',
        unit='pc',
        base_price=Decimal('10.00'),
        base_currency='USD',
    )
    ProductPrice.objects.create(product=product, currency_code='GBP', price=Decimal('8.50'))
    return product


@pytest.fixture
def service_product(db):
    return Product.objects.create(
        sku='PR-HRS77',
        name='Consulting hour',
        unit='hr',
        base_price=Decimal('150.00'),
        base_currency='USD',
    )


@pytest.fixture
def deleted_product(db):
    from django.utils import timezone

    return Product.objects.create(
        sku='PR-OLD99',
        name='Discontinued gadget',
        base_price=Decimal('5.00'),
        base_currency='USD',
        deleted_at=timezone.now(),
    )
