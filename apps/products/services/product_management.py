"""Product CRUD operations service."""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import Q, QuerySet

from apps.exchange.money import quantize_money
from apps.exchange.services import get_base_currency
from ..models import Product, ProductPrice, ProductStatus, ProductUnit
from .exceptions import InvalidAdditionalPriceError, ProductNotFoundError
from .sku_generation import generate_sku

PRODUCT_FIELDS = ['name', 'description', 'unit', 'base_price', 'status']


def _validate_additional_prices(base_currency: str, prices: List[Dict[str, Any]]) -> None:
    seen = set()
    for entry in prices:
        code = entry['currency_code'].upper()
        if code == base_currency:
            raise InvalidAdditionalPriceError(
                f"{code} is the base currency; set base_price instead"
            )
        if code in seen:
            raise InvalidAdditionalPriceError(f"Duplicate additional price for {code}")
        seen.add(code)


def _replace_additional_prices(product: Product, prices: List[Dict[str, Any]]) -> None:
    """Upsert the given currencies and drop the ones no longer listed."""
    wanted = {entry['currency_code'].upper(): quantize_money(entry['price']) for entry in prices}

    product.additional_prices.exclude(currency_code__in=wanted.keys()).delete()
    for code, price in wanted.items():
        ProductPrice.objects.update_or_create(
            product=product,
            currency_code=code,
            defaults={'price': price},
        )


@transaction.atomic
def create_product(
    *,
    name: str,
    base_price: Decimal,
    description: str = '',
    unit: str = ProductUnit.PIECE,
    status: str = ProductStatus.ACTIVE,
    additional_prices: Optional[List[Dict[str, Any]]] = None,
) -> Product:
    """
    Create a product priced in the current base currency.

    Args:
        name: Product name
        base_price: Price in the base currency
        description: Free text
        unit: One of ProductUnit
        status: Active or Inactive
        additional_prices: ``[{'currency_code': 'GBP', 'price': Decimal('9.50')}]``

    Returns:
        Created Product instance

    Raises:
        InvalidAdditionalPriceError: If a price uses the base currency or repeats one
        SkuGenerationError: If no SKU could be generated
    """
    base_currency = get_base_currency()
    additional_prices = additional_prices or []
    _validate_additional_prices(base_currency, additional_prices)

    product = Product.objects.create(
        sku=generate_sku(),
        name=name.strip(),
        description=description,
        unit=unit,
        base_price=quantize_money(base_price),
        base_currency=base_currency,
        status=status,
    )
    _replace_additional_prices(product, additional_prices)
    return product


def get_product_by_sku(*, sku: str) -> Product:
    """
    Raises:
        ProductNotFoundError: If no active product has that SKU
    """
    try:
        return Product.objects.active().prefetch_related('additional_prices').get(sku=sku.upper())
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {sku} not found")


@transaction.atomic
def update_product(*, sku: str, data: Dict[str, Any]) -> Product:
    """
    Update a product. ``base_currency`` never changes.

    When ``additional_prices`` is present it replaces the stored set:
    listed currencies are updated or inserted, the rest removed.

    Raises:
        ProductNotFoundError: If product doesn't exist or was deleted
        InvalidAdditionalPriceError: If a price uses the base currency or repeats one
    """
    try:
        product = Product.objects.active().select_for_update().get(sku=sku.upper())
    except Product.DoesNotExist:
        raise ProductNotFoundError(f"Product {sku} not found")

    additional_prices = data.get('additional_prices')
    if additional_prices is not None:
        _validate_additional_prices(product.base_currency, additional_prices)

    for field, value in data.items():
        if field in PRODUCT_FIELDS:
            if field == 'base_price':
                value = quantize_money(value)
            setattr(product, field, value)
    product.save()

    if additional_prices is not None:
        _replace_additional_prices(product, additional_prices)

    return product


@transaction.atomic
def soft_delete_product(*, sku: str) -> None:
    """
    Mark a product deleted. Line items already using it are untouched.

    Raises:
        ProductNotFoundError: If product doesn't exist or was already deleted
    """
    product = get_product_by_sku(sku=sku)
    product.soft_delete()


def search_products(*, search: Optional[str] = None, status: Optional[str] = None) -> QuerySet:
    """Active products matching ``search`` in name, SKU or description."""
    queryset = Product.objects.active().prefetch_related('additional_prices')

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) |
            Q(sku__icontains=search) |
            Q(description__icontains=search)
        )

    if status:
        queryset = queryset.filter(status=status)

    return queryset
