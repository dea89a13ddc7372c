"""Quote operations service."""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.company.services import get_app_settings
from apps.exchange.services import normalize_currency
from ..models import Quote, QuoteStatus
from .documents import (
    apply_totals,
    prepare_line_items,
    resolve_customer,
    resolve_issuing_entity,
    resolve_payment_source,
    split_line_items,
    sync_line_items,
    to_percentage,
)
from .exceptions import (
    DocumentLockedError,
    InvalidDocumentDatesError,
    InvalidLineItemError,
    InvalidStatusError,
    QuoteNotFoundError,
)
from .numbering import save_quote_with_number
from .totals import validate_percentage

logger = logging.getLogger(__name__)


def _quotes():
    return Quote.objects.active().select_related(
        'issuing_entity', 'customer', 'payment_source', 'converted_invoice'
    )


def get_quote_by_id(*, quote_id) -> Quote:
    """
    Raises:
        QuoteNotFoundError: If quote doesn't exist or was deleted
    """
    try:
        return _quotes().prefetch_related('line_items__product').get(id=quote_id)
    except Quote.DoesNotExist:
        raise QuoteNotFoundError(f"Quote {quote_id} not found")


def list_quotes(
    *,
    status: Optional[str] = None,
    customer: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> QuerySet:
    """Active quotes, filtered by status, customer public ID and issue date range."""
    queryset = _quotes()
    if status:
        queryset = queryset.filter(status=status)
    if customer:
        queryset = queryset.filter(customer__public_customer_id=customer.upper())
    if date_from:
        queryset = queryset.filter(issue_date__gte=date_from)
    if date_to:
        queryset = queryset.filter(issue_date__lte=date_to)
    return queryset


@transaction.atomic
def create_quote(
    *,
    public_customer_id: str,
    line_items: List[Dict[str, Any]],
    issuing_entity_id=None,
    payment_source_id=None,
    currency_code: Optional[str] = None,
    issue_date: Optional[date] = None,
    expiry_date: Optional[date] = None,
    discount_percentage=None,
    tax_percentage=None,
    notes: Optional[str] = None,
) -> Quote:
    """
    Create a draft quote with its line items and totals.

    Unset values come from AppSettings: tax percentage, expiry date
    (issue date + default expiry days) and notes. The currency defaults to
    the customer's preferred currency and the entity to the primary one.

    Args:
        public_customer_id: Customer to address the quote to
        line_items: ``[{'sku', 'quantity', 'description'?, 'unit_price'?, 'fx_rate'?}]``
        issuing_entity_id: Issuing entity UUID
        payment_source_id: Optional payment source of that entity
        currency_code: Document currency
        issue_date: Defaults to today
        expiry_date: Defaults to issue_date + default_quote_expiry_days
        discount_percentage: 0..100, defaults to 0
        tax_percentage: 0..100, defaults to the settings value
        notes: Defaults to default_quote_notes

    Returns:
        Created Quote instance

    Raises:
        InvalidPartiesError: If a party is unknown, deleted or mismatched
        InvalidLineItemError: If the line items are invalid
        InvalidPercentageError: If a percentage is outside 0..100
        ExchangeRateUnavailableError: If pricing needs an unavailable rate
    """
    app_settings = get_app_settings()

    entity = resolve_issuing_entity(issuing_entity_id)
    customer = resolve_customer(public_customer_id)
    payment_source = resolve_payment_source(entity, payment_source_id, required=False)

    currency = normalize_currency(currency_code or customer.preferred_currency)
    issue_date = issue_date or timezone.localdate()
    discount = validate_percentage(to_percentage(discount_percentage, 0), 'discount_percentage')
    tax = validate_percentage(
        to_percentage(tax_percentage, app_settings.default_tax_percentage), 'tax_percentage'
    )

    prepared = prepare_line_items(line_items, currency)

    quote = Quote(
        issuing_entity=entity,
        customer=customer,
        payment_source=payment_source,
        issue_date=issue_date,
        expiry_date=expiry_date or issue_date + timedelta(days=app_settings.default_quote_expiry_days),
        currency_code=currency,
        discount_percentage=discount,
        tax_percentage=tax,
        notes=app_settings.default_quote_notes if notes is None else notes,
        status=QuoteStatus.DRAFT,
    )
    apply_totals(quote, [item['line_total'] for item in prepared], discount, tax)
    save_quote_with_number(quote)
    sync_line_items(quote, prepared)

    logger.info("Created quote %s for %s: %s %s",
                quote.quote_number, customer.public_customer_id, quote.total_amount, currency)
    return quote


@transaction.atomic
def update_quote(*, quote_id, data: Dict[str, Any]) -> Quote:
    """
    Update an editable quote and resync its line items.

    Only keys present in ``data`` change. When ``line_items`` is present the
    stored items are replaced by it (matching on ``id``). Changing the
    currency requires resubmitting the line items.

    Raises:
        QuoteNotFoundError: If quote doesn't exist or was deleted
        DocumentLockedError: If the quote is accepted or already converted
        InvalidPartiesError: If a party is unknown, deleted or mismatched
        InvalidLineItemError: If the line items are invalid
        InvalidStatusError: If ``status`` is not a quote status
        InvalidPercentageError: If a percentage is outside 0..100
    """
    try:
        quote = Quote.objects.active().select_for_update().get(id=quote_id)
    except Quote.DoesNotExist:
        raise QuoteNotFoundError(f"Quote {quote_id} not found")

    if quote.is_locked:
        raise DocumentLockedError(f"Quote {quote.quote_number} can no longer be edited")

    data, line_items = split_line_items(data)

    if 'issuing_entity_id' in data:
        quote.issuing_entity = resolve_issuing_entity(data['issuing_entity_id'])
    if 'public_customer_id' in data and data['public_customer_id'].upper() != quote.customer.public_customer_id:
        quote.customer = resolve_customer(data['public_customer_id'])
    if 'payment_source_id' in data or 'issuing_entity_id' in data:
        quote.payment_source = resolve_payment_source(
            quote.issuing_entity,
            data.get('payment_source_id', quote.payment_source_id),
            required=False,
        )

    if 'currency_code' in data:
        currency = normalize_currency(data['currency_code'])
        if currency != quote.currency_code and line_items is None:
            raise InvalidLineItemError("Line items must be resubmitted when the currency changes")
        quote.currency_code = currency

    for field in ('issue_date', 'expiry_date', 'notes'):
        if field in data:
            setattr(quote, field, data[field])
    if quote.expiry_date < quote.issue_date:
        raise InvalidDocumentDatesError("Expiry date cannot be before the issue date")

    if 'discount_percentage' in data:
        quote.discount_percentage = validate_percentage(data['discount_percentage'], 'discount_percentage')
    if 'tax_percentage' in data:
        quote.tax_percentage = validate_percentage(data['tax_percentage'], 'tax_percentage')

    if 'status' in data:
        quote.status = _validated_status(data['status'])

    if line_items is not None:
        existing = {item.id: item for item in quote.line_items.all()}
        prepared = prepare_line_items(line_items, quote.currency_code, existing)
        sync_line_items(quote, prepared)

    line_totals = quote.line_items.values_list('line_total', flat=True)
    apply_totals(quote, list(line_totals), quote.discount_percentage, quote.tax_percentage)
    quote.save()
    return quote


def _validated_status(value: str) -> str:
    if value not in QuoteStatus.values:
        raise InvalidStatusError(
            f"Invalid quote status '{value}'. Allowed: {', '.join(QuoteStatus.values)}"
        )
    return value


@transaction.atomic
def update_quote_status(*, quote_id, status: str) -> Quote:
    """
    Raises:
        QuoteNotFoundError: If quote doesn't exist or was deleted
        InvalidStatusError: If ``status`` is not a quote status
        DocumentLockedError: If the quote was already converted
    """
    status = _validated_status(status)
    try:
        quote = Quote.objects.active().select_for_update().get(id=quote_id)
    except Quote.DoesNotExist:
        raise QuoteNotFoundError(f"Quote {quote_id} not found")

    if quote.converted_invoice_id is not None:
        raise DocumentLockedError(f"Quote {quote.quote_number} was converted to an invoice")

    previous = quote.status
    quote.status = status
    quote.save(update_fields=['status', 'updated_at'])
    logger.info("Quote %s status %s -> %s", quote.quote_number, previous, status)
    return quote


@transaction.atomic
def soft_delete_quote(*, quote_id) -> None:
    """
    Raises:
        QuoteNotFoundError: If quote doesn't exist or was already deleted
    """
    try:
        quote = Quote.objects.active().select_for_update().get(id=quote_id)
    except Quote.DoesNotExist:
        raise QuoteNotFoundError(f"Quote {quote_id} not found")

    quote.soft_delete()
    logger.info("Deleted quote %s", quote.quote_number)
