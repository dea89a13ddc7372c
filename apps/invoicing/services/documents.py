"""Helpers shared by the quote and invoice services."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from apps.company.models import IssuingEntity, PaymentSource
from apps.customers.models import Customer
from apps.exchange.money import quantize_money, quantize_rate, to_decimal
from apps.products.models import Product
from apps.products.services import price_for_currency
from .exceptions import InvalidLineItemError, InvalidPartiesError
from .totals import DocumentTotals, calculate_line_total, calculate_totals

logger = logging.getLogger(__name__)


def resolve_issuing_entity(issuing_entity_id=None) -> IssuingEntity:
    """The given entity, or the primary one when no ID is passed."""
    if issuing_entity_id is None:
        entity = IssuingEntity.objects.filter(is_primary=True).first()
        if entity is None:
            raise InvalidPartiesError("No issuing entity given and no primary entity configured")
        return entity

    try:
        return IssuingEntity.objects.get(id=issuing_entity_id)
    except IssuingEntity.DoesNotExist:
        raise InvalidPartiesError(f"Issuing entity {issuing_entity_id} not found")


def resolve_customer(public_customer_id: str) -> Customer:
    """Only active customers can be put on a document."""
    try:
        return Customer.objects.active().get(public_customer_id=public_customer_id.upper())
    except Customer.DoesNotExist:
        raise InvalidPartiesError(f"Customer {public_customer_id} not found or deleted")


def resolve_payment_source(
    entity: IssuingEntity,
    payment_source_id=None,
    *,
    required: bool,
) -> Optional[PaymentSource]:
    """
    The given payment source, checked against ``entity``.

    Without an ID the entity's primary source is used when one is required.

    Raises:
        InvalidPartiesError: If the source is unknown, belongs to another
            entity, or is required and none can be found
    """
    if payment_source_id is None:
        if not required:
            return None
        source = entity.payment_sources.filter(is_primary_for_entity=True).first()
        if source is None:
            raise InvalidPartiesError(
                f"No payment source given and '{entity.entity_name}' has no primary payment source"
            )
        return source

    try:
        source = PaymentSource.objects.get(id=payment_source_id)
    except PaymentSource.DoesNotExist:
        raise InvalidPartiesError(f"Payment source {payment_source_id} not found")

    if source.issuing_entity_id != entity.id:
        raise InvalidPartiesError(
            f"Payment source '{source.name}' does not belong to '{entity.entity_name}'"
        )
    return source


def _resolve_product(sku: str, allow_deleted_id=None) -> Product:
    try:
        product = Product.objects.prefetch_related('additional_prices').get(sku=sku.upper())
    except Product.DoesNotExist:
        raise InvalidLineItemError(f"Product {sku} not found")

    if product.deleted_at is not None and product.id != allow_deleted_id:
        raise InvalidLineItemError(f"Product {sku} has been deleted")
    return product


def prepare_line_items(
    items: List[Dict[str, Any]],
    currency_code: str,
    existing: Optional[Dict[Any, Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Turn line item input into model field values, in input order.

    Items without ``unit_price`` are priced through ``price_for_currency``
    and keep the rate that was used. A deleted product is only accepted on
    an existing line that already referenced it.

    Args:
        items: ``[{'sku', 'quantity', 'id'?, 'description'?, 'unit_price'?, 'fx_rate'?}]``
        currency_code: Document currency
        existing: Stored line items of the document by ID

    Raises:
        InvalidLineItemError: If the list is empty, a product is unknown
            or deleted, or an ID is not a line of this document
        ExchangeRateUnavailableError: If a price needs a rate that is unavailable
    """
    if not items:
        raise InvalidLineItemError("At least one line item is required")

    existing = existing or {}
    prepared = []
    for position, item in enumerate(items):
        item_id = item.get('id')
        current = None
        if item_id is not None:
            current = existing.get(item_id)
            if current is None:
                raise InvalidLineItemError(f"Line item {item_id} does not belong to this document")

        product = _resolve_product(
            item['sku'],
            allow_deleted_id=current.product_id if current is not None else None,
        )

        quantity = int(item['quantity'])
        if quantity < 1:
            raise InvalidLineItemError("Quantity must be at least 1")

        if item.get('unit_price') is not None:
            unit_price = quantize_money(item['unit_price'])
            fx_rate = item.get('fx_rate')
            fx_rate = quantize_rate(fx_rate) if fx_rate is not None else None
        else:
            priced = price_for_currency(product, currency_code)
            unit_price, fx_rate = priced.amount, priced.fx_rate

        if unit_price < 0:
            raise InvalidLineItemError("Unit price cannot be negative")
        if fx_rate is not None and fx_rate <= 0:
            raise InvalidLineItemError("FX rate must be greater than zero")

        prepared.append({
            'id': item_id,
            'product': product,
            'description': (item.get('description') or '').strip() or product.name,
            'quantity': quantity,
            'unit_price': unit_price,
            'fx_rate': fx_rate,
            'line_total': calculate_line_total(quantity, unit_price),
            'position': position,
        })

    return prepared


def sync_line_items(document, prepared: List[Dict[str, Any]]) -> None:
    """
    Make the stored line items match ``prepared``.

    Items with an ``id`` are updated, items without one are inserted and
    stored items that are not listed are deleted.
    """
    manager = document.line_items
    keep_ids = [item['id'] for item in prepared if item['id'] is not None]
    removed, _ = manager.exclude(id__in=keep_ids).delete()

    for item in prepared:
        fields = {key: value for key, value in item.items() if key != 'id'}
        if item['id'] is None:
            manager.create(**fields)
        else:
            manager.filter(id=item['id']).update(**fields)

    logger.debug(
        "Synced line items of %s: %d kept, %d new, %d removed",
        document, len(keep_ids), len(prepared) - len(keep_ids), removed,
    )


def apply_totals(document, line_totals, discount_percentage, tax_percentage) -> DocumentTotals:
    """Recompute and set the stored amounts on ``document`` (not saved)."""
    totals = calculate_totals(line_totals, discount_percentage, tax_percentage)
    for field, value in totals.as_model_fields().items():
        setattr(document, field, value)
    return totals


def split_line_items(data: Dict[str, Any]) -> Tuple[Dict[str, Any], Optional[List[Dict[str, Any]]]]:
    """Separate ``line_items`` from the rest of an update payload."""
    data = dict(data)
    return data, data.pop('line_items', None)


def to_percentage(value, default):
    return to_decimal(default if value is None else value)
