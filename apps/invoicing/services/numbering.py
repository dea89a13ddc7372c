"""Sequential document numbers, e.g. ``Q-2024-0007`` and ``INV-2024-0123``."""

import logging
import re

from django.db import IntegrityError, transaction

from ..models import Invoice, Quote
from .exceptions import DocumentNumberError

logger = logging.getLogger(__name__)

QUOTE_PREFIX = 'Q'
INVOICE_PREFIX = 'INV'
MAX_ATTEMPTS = 5


def _next_number(model, field: str, prefix: str, year: int) -> str:
    # Deleted documents keep their numbers, so they count too
    stem = f"{prefix}-{year}-"
    pattern = re.compile(rf'^{re.escape(stem)}(\d+)$')

    highest = 0
    for number in model.objects.filter(**{f'{field}__startswith': stem}).values_list(field, flat=True):
        match = pattern.match(number)
        if match:
            highest = max(highest, int(match.group(1)))

    return f"{stem}{highest + 1:04d}"


def _save_with_number(document, field: str, prefix: str):
    """
    Insert a new document under the next free number for its issue year.

    A concurrent create may take the same number between the read and the
    insert; the insert then runs again with a fresh number.

    Raises:
        DocumentNumberError: If every attempt collided
    """
    model = type(document)
    for attempt in range(1, MAX_ATTEMPTS + 1):
        number = _next_number(model, field, prefix, document.issue_date.year)
        setattr(document, field, number)
        try:
            with transaction.atomic():
                document.save()
            return document
        except IntegrityError:
            if not model.objects.filter(**{field: number}).exists():
                raise
            logger.debug("Document number collision on attempt %d: %s", attempt, number)

    logger.error("Could not allocate a %s number after %d attempts", prefix, MAX_ATTEMPTS)
    raise DocumentNumberError(f"Could not allocate a {prefix} number, please retry")


def save_quote_with_number(quote: Quote) -> Quote:
    return _save_with_number(quote, 'quote_number', QUOTE_PREFIX)


def save_invoice_with_number(invoice: Invoice) -> Invoice:
    return _save_with_number(invoice, 'invoice_number', INVOICE_PREFIX)
