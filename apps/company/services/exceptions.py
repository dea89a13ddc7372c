"""Domain-specific exceptions for company settings services."""


class CompanyServiceError(Exception):
    """Base exception for company settings services."""
    pass


class IssuingEntityNotFoundError(CompanyServiceError):
    """Raised when issuing entity does not exist."""
    pass


class EntityInUseError(CompanyServiceError):
    """Raised when deleting an entity that documents still reference."""
    pass


class PaymentSourceNotFoundError(CompanyServiceError):
    """Raised when payment source does not exist."""
    pass


class PaymentSourceInUseError(CompanyServiceError):
    """Raised when deleting a payment source that documents still reference."""
    pass
