"""Services for product business logic."""

from .exceptions import (
    ProductsServiceError,
    ProductNotFoundError,
    SkuGenerationError,
    InvalidAdditionalPriceError,
)
from .sku_generation import (
    generate_sku,
    SKU_PREFIX,
    SKU_ALPHABET,
)
from .product_management import (
    create_product,
    get_product_by_sku,
    update_product,
    soft_delete_product,
    search_products,
)
from .pricing import (
    PricedAmount,
    price_for_currency,
)

__all__ = [
    # Exceptions
    'ProductsServiceError',
    'ProductNotFoundError',
    'SkuGenerationError',
    'InvalidAdditionalPriceError',
    # SKU generation
    'generate_sku',
    'SKU_PREFIX',
    'SKU_ALPHABET',
    # Product management
    'create_product',
    'get_product_by_sku',
    'update_product',
    'soft_delete_product',
    'search_products',
    # Pricing
    'PricedAmount',
    'price_for_currency',
]
