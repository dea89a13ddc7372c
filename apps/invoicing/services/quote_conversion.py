"""Quote to invoice conversion."""

import logging

from django.db import transaction

from ..models import Invoice, Quote, QuoteStatus
from .exceptions import InvalidLineItemError, QuoteConversionError, QuoteNotFoundError
from .invoices import create_invoice

logger = logging.getLogger(__name__)


@transaction.atomic
def convert_quote_to_invoice(*, quote_id) -> Invoice:
    """
    Turn an accepted quote into a draft invoice.

    Parties, currency, percentages, notes and line items (with their prices
    and rates) are copied. The invoice is issued today and due after the
    default payment terms. Both documents are linked afterwards.

    Args:
        quote_id: Quote UUID

    Returns:
        The new Invoice

    Raises:
        QuoteNotFoundError: If quote doesn't exist or was deleted
        QuoteConversionError: If the quote is not accepted, was already
            converted, or a product on it has since been deleted
        InvalidPartiesError: If the customer was deleted or no payment
            source can be found for the entity
    """
    try:
        quote = Quote.objects.active().select_for_update().get(id=quote_id)
    except Quote.DoesNotExist:
        raise QuoteNotFoundError(f"Quote {quote_id} not found")

    if quote.status != QuoteStatus.ACCEPTED:
        raise QuoteConversionError(
            f"Only accepted quotes can be converted; {quote.quote_number} is {quote.status}"
        )
    if quote.converted_invoice_id is not None:
        raise QuoteConversionError(f"Quote {quote.quote_number} was already converted")

    line_items = [
        {
            'sku': item.product.sku,
            'description': item.description,
            'quantity': item.quantity,
            'unit_price': item.unit_price,
            'fx_rate': item.fx_rate,
        }
        for item in quote.line_items.select_related('product').order_by('position')
    ]

    try:
        invoice = create_invoice(
            public_customer_id=quote.customer.public_customer_id,
            line_items=line_items,
            issuing_entity_id=quote.issuing_entity_id,
            payment_source_id=quote.payment_source_id,
            currency_code=quote.currency_code,
            discount_percentage=quote.discount_percentage,
            tax_percentage=quote.tax_percentage,
            notes=quote.notes,
            source_quote=quote,
        )
    except InvalidLineItemError as e:
        raise QuoteConversionError(f"Quote {quote.quote_number} cannot be converted: {e}") from e

    quote.converted_invoice = invoice
    quote.save(update_fields=['converted_invoice', 'updated_at'])

    logger.info("Converted quote %s to invoice %s", quote.quote_number, invoice.invoice_number)
    return invoice
