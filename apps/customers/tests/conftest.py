import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.customers.models import Customer


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='sales@example.com',
        password='TestPass123!',
        display_name='Sales',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def customer(db):
    return Customer.objects.create(
        public_customer_id='7K3B9',
        company_contact_name='Globex Corp / Hank Scorpio',
        email='hank@globex.test',
        phone='+1 555 0100',
        preferred_currency='USD',
        address='1 Cypress Creek',
    )


@pytest.fixture
def gbp_customer(db):
    return Customer.objects.create(
        public_customer_id='2MM45',
        company_contact_name='Initech Ltd',
        email='bill@initech.test',
        preferred_currency='GBP',
    )


@pytest.fixture
def deleted_customer(db):
    from django.utils import timezone

    return Customer.objects.create(
        public_customer_id='9ZZ88',
        company_contact_name='Vandelay Industries',
        email='art@vandelay.test',
        deleted_at=timezone.now(),
    )
