"""
Management command to apply date-driven document statuses.

Sent invoices past their due date become Overdue and sent quotes past their
expiry date become Expired. Meant to run daily (cron or similar).

Usage:
    python manage.py refresh_document_statuses
    python manage.py refresh_document_statuses --dry-run
    python manage.py refresh_document_statuses --date 2024-06-01
"""

from datetime import date

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from apps.invoicing.services import (
    expire_quotes,
    expired_quote_candidates,
    mark_overdue_invoices,
    overdue_invoice_candidates,
)


class Command(BaseCommand):
    help = 'Mark overdue invoices and expire quotes'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )
        parser.add_argument(
            '--date',
            help='Treat this ISO date as today (default: current date)',
        )

    def handle(self, *args, **options):
        today = timezone.localdate()
        if options['date']:
            try:
                today = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f"Invalid date '{options['date']}', expected YYYY-MM-DD")

        if options['dry_run']:
            invoices = overdue_invoice_candidates(today)
            quotes = expired_quote_candidates(today)

            for invoice in invoices:
                self.stdout.write(f'  - {invoice.invoice_number} | due {invoice.due_date} -> Overdue')
            for quote in quotes:
                self.stdout.write(f'  - {quote.quote_number} | expired {quote.expiry_date} -> Expired')

            self.stdout.write(
                self.style.WARNING(
                    f'\n--dry-run mode: {invoices.count()} invoice(s) and '
                    f'{quotes.count()} quote(s) would change. No changes made.'
                )
            )
            return

        overdue = mark_overdue_invoices(today=today)
        expired = expire_quotes(today=today)

        self.stdout.write(
            self.style.SUCCESS(f'Marked {overdue} invoice(s) overdue and expired {expired} quote(s).')
        )
