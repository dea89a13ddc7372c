"""Domain-specific exceptions for customer services."""


class CustomersServiceError(Exception):
    """Base exception for customer services."""
    pass


class CustomerNotFoundError(CustomersServiceError):
    """Raised when customer does not exist or was deleted."""
    pass


class DuplicateCustomerEmailError(CustomersServiceError):
    """Raised when another active customer already uses the email."""
    pass


class CustomerIdGenerationError(CustomersServiceError):
    """Raised when no free public customer ID was found."""
    pass
