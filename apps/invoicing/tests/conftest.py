import pytest
from decimal import Decimal
from unittest.mock import patch
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.company.models import AppSettings, IssuingEntity, PaymentSource
from apps.customers.models import Customer
from apps.exchange.services import ExchangeRateResolver
from apps.exchange.tests.fakes import FakeClock, FakeRateSource
from apps.invoicing.services import create_invoice, create_quote
from apps.products.models import Product, ProductPrice


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='billing@example.com',
        password='TestPass123!',
        display_name='Billing',
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
def app_settings(db):
    return AppSettings.objects.create(
        base_currency='USD',
        default_tax_percentage=Decimal('20.00'),
        default_quote_expiry_days=14,
        default_invoice_payment_terms_days=30,
        default_quote_notes='Prices valid for 14 days.',
        default_invoice_notes='Thank you for your business.',
    )


@pytest.fixture
def entity(db):
    return IssuingEntity.objects.create(
        entity_name='Acme Trading Ltd',
        address='1 High Street\nLondon',
        email='billing@acme.test',
        is_primary=True,
    )


@pytest.fixture
def payment_source(entity):
    return PaymentSource.objects.create(
        name='Chase USD',
        currency_code='USD',
        issuing_entity=entity,
        bank_name='Chase',
        account_number='000123456',
        routing_number_us='021000021',
        is_primary_for_entity=True,
    )


@pytest.fixture
def other_entity(db):
    return IssuingEntity.objects.create(entity_name='Acme Asia Pte')


@pytest.fixture
def other_payment_source(other_entity):
    return PaymentSource.objects.create(
        name='DBS SGD',
        currency_code='SGD',
        issuing_entity=other_entity,
        is_primary_for_entity=True,
    )


@pytest.fixture
def customer(db):
    return Customer.objects.create(
        public_customer_id='7K3B9',
        company_contact_name='Globex Corp',
        email='hank@globex.test',
        preferred_currency='USD',
    )


@pytest.fixture
def gbp_customer(db):
    return Customer.objects.create(
        public_customer_id='2MM45',
        company_contact_name='Initech Ltd',
        preferred_currency='GBP',
    )


@pytest.fixture
def deleted_customer(db):
    return Customer.objects.create(
        public_customer_id='9ZZ88',
        company_contact_name='Vandelay Industries',
        deleted_at=timezone.now(),
    )


@pytest.fixture
def product(db):
    """USD 10.00 widget with a fixed GBP price of 8.50."""
    product = Product.objects.create(
        sku='PR-WDG42',
        name='Widget',
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
def parties(app_settings, entity, payment_source, customer, product, service_product):
    """Everything needed to issue a USD document without FX."""
    return {
        'entity': entity,
        'payment_source': payment_source,
        'customer': customer,
        'product': product,
        'service_product': service_product,
    }


@pytest.fixture
def quote(parties):
    """Draft USD quote: 3 widgets + 2 hours, 20% tax."""
    return create_quote(
        public_customer_id='7K3B9',
        line_items=[
            {'sku': 'PR-WDG42', 'quantity': 3},
            {'sku': 'PR-HRS77', 'quantity': 2},
        ],
    )


@pytest.fixture
def invoice(parties):
    """Draft USD invoice: 3 widgets + 2 hours, 20% tax."""
    return create_invoice(
        public_customer_id='7K3B9',
        line_items=[
            {'sku': 'PR-WDG42', 'quantity': 3},
            {'sku': 'PR-HRS77', 'quantity': 2},
        ],
    )
