import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.company.models import IssuingEntity, PaymentSource
from apps.customers.models import Customer
from apps.invoicing.models import Invoice


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
def issuing_entity(db):
    """Primary issuing entity."""
    return IssuingEntity.objects.create(
        entity_name='Acme Trading Ltd',
        registration_number='12345678',
        address='1 High Street\nLondon',
        email='billing@acme.test',
        is_primary=True,
    )


@pytest.fixture
def second_entity(db):
    return IssuingEntity.objects.create(
        entity_name='Acme Asia Pte',
        registration_number='SG-998877',
    )


@pytest.fixture
def payment_source(db, issuing_entity):
    """Primary GBP account of the primary entity."""
    return PaymentSource.objects.create(
        name='Barclays GBP',
        currency_code='GBP',
        issuing_entity=issuing_entity,
        bank_name='Barclays',
        account_holder_name='Acme Trading Ltd',
        account_number='12345678',
        sort_code_uk='20-00-00',
        is_primary_for_entity=True,
    )


@pytest.fixture
def payment_source_invoice(db, issuing_entity, payment_source):
    """Draft invoice of the primary entity paid into payment_source."""
    customer = Customer.objects.create(
        public_customer_id='4M2QX',
        company_contact_name='Northwind Ltd',
        email='ap@northwind.test',
    )
    return Invoice.objects.create(
        invoice_number='INV-2024-0001',
        issuing_entity=issuing_entity,
        customer=customer,
        payment_source=payment_source,
        currency_code='GBP',
        issue_date=date(2024, 6, 1),
        due_date=date(2024, 6, 30),
    )
