"""Domain-specific exceptions for exchange services."""


class ExchangeServiceError(Exception):
    """Base exception for exchange services."""
    pass


class UnsupportedCurrencyError(ExchangeServiceError):
    """Raised when a currency code is not in the allowed list."""
    pass


class RateSourceError(ExchangeServiceError):
    """Raised when the upstream rate feed fails or returns garbage."""
    pass


class ExchangeRateUnavailableError(ExchangeServiceError):
    """Raised when no fresh rate is cached and the feed cannot supply one."""
    pass


class InvalidRateOverrideError(ExchangeServiceError):
    """Raised when a manual rate override is malformed."""
    pass
