"""Services for customer business logic."""

from .exceptions import (
    CustomersServiceError,
    CustomerNotFoundError,
    DuplicateCustomerEmailError,
    CustomerIdGenerationError,
)
from .id_generation import (
    generate_public_customer_id,
    ID_DIGITS,
    ID_LETTERS,
)
from .customer_management import (
    create_customer,
    get_customer_by_public_id,
    update_customer,
    soft_delete_customer,
    search_customers,
)

__all__ = [
    # Exceptions
    'CustomersServiceError',
    'CustomerNotFoundError',
    'DuplicateCustomerEmailError',
    'CustomerIdGenerationError',
    # ID generation
    'generate_public_customer_id',
    'ID_DIGITS',
    'ID_LETTERS',
    # Customer management
    'create_customer',
    'get_customer_by_public_id',
    'update_customer',
    'soft_delete_customer',
    'search_customers',
]
