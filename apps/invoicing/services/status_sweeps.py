"""Date-driven status changes for sent documents."""

import logging
from datetime import date
from typing import Optional

from django.db import transaction
from django.utils import timezone

from ..models import Invoice, InvoiceStatus, Quote, QuoteStatus

logger = logging.getLogger(__name__)


def overdue_invoice_candidates(today: Optional[date] = None):
    today = today or timezone.localdate()
    return Invoice.objects.active().filter(status=InvoiceStatus.SENT, due_date__lt=today)


def expired_quote_candidates(today: Optional[date] = None):
    today = today or timezone.localdate()
    return Quote.objects.active().filter(status=QuoteStatus.SENT, expiry_date__lt=today)


@transaction.atomic
def mark_overdue_invoices(*, today: Optional[date] = None) -> int:
    """Sent invoices past their due date become Overdue. Returns the count changed."""
    updated = overdue_invoice_candidates(today).update(
        status=InvoiceStatus.OVERDUE,
        updated_at=timezone.now(),
    )
    if updated:
        logger.info("Marked %d invoice(s) overdue", updated)
    return updated


@transaction.atomic
def expire_quotes(*, today: Optional[date] = None) -> int:
    """Sent quotes past their expiry date become Expired. Returns the count changed."""
    updated = expired_quote_candidates(today).update(
        status=QuoteStatus.EXPIRED,
        updated_at=timezone.now(),
    )
    if updated:
        logger.info("Expired %d quote(s)", updated)
    return updated
