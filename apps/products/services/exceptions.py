"""Custom exceptions for product services."""


class ProductsServiceError(Exception):
    """Base exception for product services."""
    pass


class ProductNotFoundError(ProductsServiceError):
    """Raised when product doesn't exist or was deleted."""
    pass


class SkuGenerationError(ProductsServiceError):
    """Raised when no unused SKU could be generated."""
    pass


class InvalidAdditionalPriceError(ProductsServiceError):
    """Raised when an additional price repeats a currency or uses the base currency."""
    pass
