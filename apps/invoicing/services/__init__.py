"""Services for quotes and invoices."""

from .exceptions import (
    InvoicingServiceError,
    QuoteNotFoundError,
    InvoiceNotFoundError,
    InvalidPartiesError,
    InvalidLineItemError,
    InvalidPercentageError,
    InvalidStatusError,
    DocumentLockedError,
    InvalidDocumentDatesError,
    DocumentNumberError,
    QuoteConversionError,
)
from .totals import (
    DocumentTotals,
    calculate_line_total,
    calculate_totals,
    validate_percentage,
)
from .numbering import (
    save_quote_with_number,
    save_invoice_with_number,
)
from .quotes import (
    create_quote,
    get_quote_by_id,
    list_quotes,
    update_quote,
    update_quote_status,
    soft_delete_quote,
)
from .invoices import (
    create_invoice,
    get_invoice_by_id,
    list_invoices,
    update_invoice,
    update_invoice_status,
    soft_delete_invoice,
)
from .quote_conversion import convert_quote_to_invoice
from .status_sweeps import (
    overdue_invoice_candidates,
    expired_quote_candidates,
    mark_overdue_invoices,
    expire_quotes,
)
from .pdf_export import (
    render_invoice_pdf,
    render_quote_pdf,
)

__all__ = [
    # Exceptions
    'InvoicingServiceError',
    'QuoteNotFoundError',
    'InvoiceNotFoundError',
    'InvalidPartiesError',
    'InvalidLineItemError',
    'InvalidPercentageError',
    'InvalidStatusError',
    'InvalidDocumentDatesError',
    'DocumentNumberError',
    'DocumentLockedError',
    'QuoteConversionError',
    # Totals
    'DocumentTotals',
    'calculate_line_total',
    'calculate_totals',
    'validate_percentage',
    # Numbering
    'save_quote_with_number',
    'save_invoice_with_number',
    # Quotes
    'create_quote',
    'get_quote_by_id',
    'list_quotes',
    'update_quote',
    'update_quote_status',
    'soft_delete_quote',
    # Invoices
    'create_invoice',
    'get_invoice_by_id',
    'list_invoices',
    'update_invoice',
    'update_invoice_status',
    'soft_delete_invoice',
    # Conversion
    'convert_quote_to_invoice',
    # Status sweeps
    'overdue_invoice_candidates',
    'expired_quote_candidates',
    'mark_overdue_invoices',
    'expire_quotes',
    # PDF export
    'render_invoice_pdf',
    'render_quote_pdf',
]
