"""Invoice operations service."""

import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.company.services import get_app_settings
from apps.exchange.services import normalize_currency
from ..models import Invoice, InvoiceStatus
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
    InvoiceNotFoundError,
)
from .numbering import save_invoice_with_number
from .totals import validate_percentage

logger = logging.getLogger(__name__)


def _invoices():
    return Invoice.objects.active().select_related(
        'issuing_entity', 'customer', 'payment_source', 'source_quote'
    )


def get_invoice_by_id(*, invoice_id) -> Invoice:
    """
    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or was deleted
    """
    try:
        return _invoices().prefetch_related('line_items__product').get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")


def list_invoices(
    *,
    status: Optional[str] = None,
    customer: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> QuerySet:
    """Active invoices, filtered by status, customer public ID and issue date range."""
    queryset = _invoices()
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
def create_invoice(
    *,
    public_customer_id: str,
    line_items: List[Dict[str, Any]],
    issuing_entity_id=None,
    payment_source_id=None,
    currency_code: Optional[str] = None,
    issue_date: Optional[date] = None,
    due_date: Optional[date] = None,
    discount_percentage=None,
    tax_percentage=None,
    notes: Optional[str] = None,
    source_quote=None,
) -> Invoice:
    """
    Create a draft invoice with its line items and totals.

    Unset values come from AppSettings: tax percentage, due date (issue
    date + payment terms) and notes. Without ``payment_source_id`` the
    entity's primary payment source is used.

    Args:
        public_customer_id: Customer to bill
        line_items: ``[{'sku', 'quantity', 'description'?, 'unit_price'?, 'fx_rate'?}]``
        issuing_entity_id: Issuing entity UUID, defaults to the primary entity
        payment_source_id: Payment source of that entity
        currency_code: Defaults to the customer's preferred currency
        issue_date: Defaults to today
        due_date: Defaults to issue_date + default_invoice_payment_terms_days
        discount_percentage: 0..100, defaults to 0
        tax_percentage: 0..100, defaults to the settings value
        notes: Defaults to default_invoice_notes
        source_quote: Quote this invoice was converted from

    Returns:
        Created Invoice instance

    Raises:
        InvalidPartiesError: If a party is unknown, deleted or mismatched
        InvalidLineItemError: If the line items are invalid
        InvalidPercentageError: If a percentage is outside 0..100
        ExchangeRateUnavailableError: If pricing needs an unavailable rate
    """
    app_settings = get_app_settings()

    entity = resolve_issuing_entity(issuing_entity_id)
    customer = resolve_customer(public_customer_id)
    payment_source = resolve_payment_source(entity, payment_source_id, required=True)

    currency = normalize_currency(currency_code or customer.preferred_currency)
    issue_date = issue_date or timezone.localdate()
    discount = validate_percentage(to_percentage(discount_percentage, 0), 'discount_percentage')
    tax = validate_percentage(
        to_percentage(tax_percentage, app_settings.default_tax_percentage), 'tax_percentage'
    )

    prepared = prepare_line_items(line_items, currency)

    invoice = Invoice(
        issuing_entity=entity,
        customer=customer,
        payment_source=payment_source,
        issue_date=issue_date,
        due_date=due_date or issue_date + timedelta(days=app_settings.default_invoice_payment_terms_days),
        currency_code=currency,
        discount_percentage=discount,
        tax_percentage=tax,
        notes=app_settings.default_invoice_notes if notes is None else notes,
        status=InvoiceStatus.DRAFT,
        source_quote=source_quote,
    )
    apply_totals(invoice, [item['line_total'] for item in prepared], discount, tax)
    save_invoice_with_number(invoice)
    sync_line_items(invoice, prepared)

    logger.info("Created invoice %s for %s: %s %s",
                invoice.invoice_number, customer.public_customer_id, invoice.total_amount, currency)
    return invoice


@transaction.atomic
def update_invoice(*, invoice_id, data: Dict[str, Any]) -> Invoice:
    """
    Update an editable invoice and resync its line items.

    Only keys present in ``data`` change. When ``line_items`` is present the
    stored items are replaced by it (matching on ``id``).

    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or was deleted
        DocumentLockedError: If the invoice is paid or cancelled
        InvalidPartiesError: If a party is unknown, deleted or mismatched
        InvalidLineItemError: If the line items are invalid
        InvalidStatusError: If ``status`` is not an invoice status
        InvalidPercentageError: If a percentage is outside 0..100
    """
    try:
        invoice = Invoice.objects.active().select_for_update().get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")

    if invoice.is_locked:
        raise DocumentLockedError(
            f"Invoice {invoice.invoice_number} is {invoice.status.lower()} and can no longer be edited"
        )

    data, line_items = split_line_items(data)

    if 'issuing_entity_id' in data:
        invoice.issuing_entity = resolve_issuing_entity(data['issuing_entity_id'])
    if 'public_customer_id' in data and data['public_customer_id'].upper() != invoice.customer.public_customer_id:
        invoice.customer = resolve_customer(data['public_customer_id'])
    if 'payment_source_id' in data or 'issuing_entity_id' in data:
        invoice.payment_source = resolve_payment_source(
            invoice.issuing_entity,
            data.get('payment_source_id', invoice.payment_source_id),
            required=True,
        )

    if 'currency_code' in data:
        currency = normalize_currency(data['currency_code'])
        if currency != invoice.currency_code and line_items is None:
            raise InvalidLineItemError("Line items must be resubmitted when the currency changes")
        invoice.currency_code = currency

    for field in ('issue_date', 'due_date', 'notes'):
        if field in data:
            setattr(invoice, field, data[field])
    if invoice.due_date < invoice.issue_date:
        raise InvalidDocumentDatesError("Due date cannot be before the issue date")

    if 'discount_percentage' in data:
        invoice.discount_percentage = validate_percentage(data['discount_percentage'], 'discount_percentage')
    if 'tax_percentage' in data:
        invoice.tax_percentage = validate_percentage(data['tax_percentage'], 'tax_percentage')

    if 'status' in data:
        invoice.status = _validated_status(data['status'])

    if line_items is not None:
        existing = {item.id: item for item in invoice.line_items.all()}
        prepared = prepare_line_items(line_items, invoice.currency_code, existing)
        sync_line_items(invoice, prepared)

    line_totals = invoice.line_items.values_list('line_total', flat=True)
    apply_totals(invoice, list(line_totals), invoice.discount_percentage, invoice.tax_percentage)
    invoice.save()
    return invoice


def _validated_status(value: str) -> str:
    if value not in InvoiceStatus.values:
        raise InvalidStatusError(
            f"Invalid invoice status '{value}'. Allowed: {', '.join(InvoiceStatus.values)}"
        )
    return value


@transaction.atomic
def update_invoice_status(*, invoice_id, status: str) -> Invoice:
    """
    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or was deleted
        InvalidStatusError: If ``status`` is not an invoice status
    """
    status = _validated_status(status)
    try:
        invoice = Invoice.objects.active().select_for_update().get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")

    previous = invoice.status
    invoice.status = status
    invoice.save(update_fields=['status', 'updated_at'])
    logger.info("Invoice %s status %s -> %s", invoice.invoice_number, previous, status)
    return invoice


@transaction.atomic
def soft_delete_invoice(*, invoice_id) -> None:
    """
    Raises:
        InvoiceNotFoundError: If invoice doesn't exist or was already deleted
    """
    try:
        invoice = Invoice.objects.active().select_for_update().get(id=invoice_id)
    except Invoice.DoesNotExist:
        raise InvoiceNotFoundError(f"Invoice {invoice_id} not found")

    invoice.soft_delete()
    logger.info("Deleted invoice %s", invoice.invoice_number)
