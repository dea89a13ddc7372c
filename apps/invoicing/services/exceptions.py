"""Custom exceptions for invoicing services."""


class InvoicingServiceError(Exception):
    """Base exception for invoicing services."""
    pass


class QuoteNotFoundError(InvoicingServiceError):
    """Raised when quote doesn't exist or was deleted."""
    pass


class InvoiceNotFoundError(InvoicingServiceError):
    """Raised when invoice doesn't exist or was deleted."""
    pass


class InvalidPartiesError(InvoicingServiceError):
    """Raised when entity, customer or payment source cannot be used together."""
    pass


class InvalidLineItemError(InvoicingServiceError):
    """Raised when a line item is missing, references an unknown product or belongs elsewhere."""
    pass


class InvalidPercentageError(InvoicingServiceError):
    """Raised when a discount or tax percentage is outside 0..100."""
    pass


class InvalidStatusError(InvoicingServiceError):
    """Raised when a status value is not valid for the document type."""
    pass


class DocumentLockedError(InvoicingServiceError):
    """Raised when editing a paid/cancelled invoice or an accepted/converted quote."""
    pass


class QuoteConversionError(InvoicingServiceError):
    """Raised when a quote cannot be converted into an invoice."""
    pass


class InvalidDocumentDatesError(InvoicingServiceError):
    """Raised when a due or expiry date falls before the issue date."""
    pass


class DocumentNumberError(InvoicingServiceError):
    """Raised when no free document number could be allocated."""
    pass
