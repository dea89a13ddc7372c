"""Customer CRUD operations service."""

from typing import Any, Dict, Optional

from django.db import transaction
from django.db.models import Q, QuerySet

from ..models import Customer
from .exceptions import CustomerNotFoundError, DuplicateCustomerEmailError
from .id_generation import generate_public_customer_id

CUSTOMER_FIELDS = [
    'company_contact_name', 'email', 'phone', 'preferred_currency', 'address', 'notes',
]


def _normalize_email(email: Optional[str]) -> Optional[str]:
    email = (email or '').strip().lower()
    return email or None


def _check_email_available(email: Optional[str], exclude_id=None) -> None:
    if not email:
        return
    clash = Customer.objects.active().filter(email__iexact=email)
    if exclude_id:
        clash = clash.exclude(id=exclude_id)
    if clash.exists():
        raise DuplicateCustomerEmailError(f"A customer with email '{email}' already exists")


@transaction.atomic
def create_customer(
    *,
    company_contact_name: str,
    email: Optional[str] = None,
    phone: str = '',
    preferred_currency: str = 'USD',
    address: str = '',
    notes: str = '',
) -> Customer:
    """
    Create a customer with a freshly generated public ID.

    Args:
        company_contact_name: Company and/or contact name
        email: Contact email, unique among active customers
        phone: Phone number
        preferred_currency: Default currency for new documents
        address: Postal address (multi-line)
        notes: Internal notes

    Returns:
        Created Customer instance

    Raises:
        DuplicateCustomerEmailError: If email is taken
        CustomerIdGenerationError: If no public ID could be generated
    """
    email = _normalize_email(email)
    _check_email_available(email)

    return Customer.objects.create(
        public_customer_id=generate_public_customer_id(),
        company_contact_name=company_contact_name.strip(),
        email=email,
        phone=phone,
        preferred_currency=preferred_currency,
        address=address,
        notes=notes,
    )


def get_customer_by_public_id(*, public_customer_id: str) -> Customer:
    """
    Raises:
        CustomerNotFoundError: If no active customer has that ID
    """
    try:
        return Customer.objects.active().get(public_customer_id=public_customer_id.upper())
    except Customer.DoesNotExist:
        raise CustomerNotFoundError(f"Customer {public_customer_id} not found")


@transaction.atomic
def update_customer(*, public_customer_id: str, data: Dict[str, Any]) -> Customer:
    """
    Update an active customer.

    Raises:
        CustomerNotFoundError: If customer doesn't exist or was deleted
        DuplicateCustomerEmailError: If the new email is taken
    """
    try:
        customer = (
            Customer.objects
            .active()
            .select_for_update()
            .get(public_customer_id=public_customer_id.upper())
        )
    except Customer.DoesNotExist:
        raise CustomerNotFoundError(f"Customer {public_customer_id} not found")

    if 'email' in data:
        data = {**data, 'email': _normalize_email(data['email'])}
        _check_email_available(data['email'], exclude_id=customer.id)

    for field, value in data.items():
        if field in CUSTOMER_FIELDS:
            setattr(customer, field, value)

    customer.save()
    return customer


@transaction.atomic
def soft_delete_customer(*, public_customer_id: str) -> None:
    """
    Mark a customer deleted. Existing documents keep pointing at it.

    Raises:
        CustomerNotFoundError: If customer doesn't exist or was already deleted
    """
    customer = get_customer_by_public_id(public_customer_id=public_customer_id)
    customer.soft_delete()


def search_customers(*, search: Optional[str] = None, currency: Optional[str] = None) -> QuerySet:
    """
    Active customers matching ``search`` in name, email or public ID.

    Args:
        search: Free text
        currency: Preferred currency filter
    """
    queryset = Customer.objects.active()

    if search:
        queryset = queryset.filter(
            Q(company_contact_name__icontains=search) |
            Q(email__icontains=search) |
            Q(public_customer_id__iexact=search)
        )

    if currency:
        queryset = queryset.filter(preferred_currency=currency.upper())

    return queryset
