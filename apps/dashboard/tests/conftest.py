import itertools
import pytest
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.company.models import AppSettings, IssuingEntity, PaymentSource
from apps.customers.models import Customer
from apps.exchange.services import ExchangeRateResolver
from apps.exchange.tests.fakes import FakeClock, FakeRateSource
from apps.invoicing.models import Invoice, InvoiceLineItem, Quote
from apps.products.models import Product

TODAY = date(2024, 6, 15)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='owner@example.com',
        password='TestPass123!',
        display_name='Owner',
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
    return AppSettings.objects.create(base_currency='USD')


@pytest.fixture
def entity(db):
    return IssuingEntity.objects.create(entity_name='Acme Trading Ltd', is_primary=True)


@pytest.fixture
def payment_source(entity):
    return PaymentSource.objects.create(
        name='Chase USD',
        currency_code='USD',
        issuing_entity=entity,
        is_primary_for_entity=True,
    )


@pytest.fixture
def customer(db):
    return Customer.objects.create(
        public_customer_id='7K3B9',
        company_contact_name='Globex Corp',
        preferred_currency='USD',
    )


@pytest.fixture
def product(db):
    return Product.objects.create(
        sku='PR-WDG42',
        name='Widget',
        base_price=Decimal('10.00'),
        base_currency='USD',
    )


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
def make_invoice(app_settings, entity, payment_source, customer, patched_resolver):
    """
    Factory for invoices with fixed totals.

    Totals are written directly so each test controls the amounts it sums.
    """
    numbers = itertools.count(1)

    def _make(status='Sent', total='100.00', currency='USD', issue_date=TODAY, due_date=None, **extra):
        return Invoice.objects.create(
            invoice_number=f'INV-{issue_date.year}-{next(numbers):04d}',
            issuing_entity=entity,
            customer=customer,
            payment_source=payment_source,
            currency_code=currency,
            issue_date=issue_date,
            due_date=due_date or issue_date + timedelta(days=30),
            status=status,
            subtotal_amount=Decimal(total),
            total_amount=Decimal(total),
            **extra
        )
    return _make


@pytest.fixture
def make_quote(app_settings, entity, customer, patched_resolver):
    """Factory for quotes with fixed totals."""
    numbers = itertools.count(1)

    def _make(status='Sent', total='100.00', currency='USD', issue_date=TODAY, expiry_date=None, **extra):
        return Quote.objects.create(
            quote_number=f'Q-{issue_date.year}-{next(numbers):04d}',
            issuing_entity=entity,
            customer=customer,
            currency_code=currency,
            issue_date=issue_date,
            expiry_date=expiry_date or issue_date + timedelta(days=14),
            status=status,
            subtotal_amount=Decimal(total),
            total_amount=Decimal(total),
            **extra
        )
    return _make


@pytest.fixture
def add_line():
    """Attach a line item with a given total to an invoice."""
    def _add(invoice, product, quantity, line_total):
        return InvoiceLineItem.objects.create(
            invoice=invoice,
            product=product,
            description=product.name,
            quantity=quantity,
            unit_price=Decimal(line_total) / quantity,
            line_total=Decimal(line_total),
        )
    return _add
