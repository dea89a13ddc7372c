"""Services for company settings."""

from .exceptions import (
    CompanyServiceError,
    IssuingEntityNotFoundError,
    EntityInUseError,
    PaymentSourceNotFoundError,
    PaymentSourceInUseError,
)
from .app_settings import (
    get_app_settings,
    update_app_settings,
)
from .issuing_entities import (
    create_issuing_entity,
    get_issuing_entity,
    get_primary_issuing_entity,
    update_issuing_entity,
    delete_issuing_entity,
)
from .payment_sources import (
    list_payment_sources,
    create_payment_source,
    update_payment_source,
    delete_payment_source,
)

__all__ = [
    # Exceptions
    'CompanyServiceError',
    'IssuingEntityNotFoundError',
    'EntityInUseError',
    'PaymentSourceNotFoundError',
    'PaymentSourceInUseError',
    # App settings
    'get_app_settings',
    'update_app_settings',
    # Issuing entities
    'create_issuing_entity',
    'get_issuing_entity',
    'get_primary_issuing_entity',
    'update_issuing_entity',
    'delete_issuing_entity',
    # Payment sources
    'list_payment_sources',
    'create_payment_source',
    'update_payment_source',
    'delete_payment_source',
]
