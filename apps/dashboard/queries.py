"""
Dashboard Module
================

Read-only queries behind the dashboard: KPI cards, the overdue and
expiring lists, the revenue chart and the recently-updated feed.

Classes:
    DashboardQueries: Static methods for each dashboard panel.

Money KPIs are reported in the base currency. Amounts are summed per
document currency in SQL, each per-currency total is converted once, and
the converted totals are added up::

    SELECT currency_code, SUM(total_amount) ... GROUP BY currency_code
    -> {'USD': 1200.00, 'GBP': 300.00}
    -> 1200.00 + convert_amount(300.00, 'GBP', 'USD')

Example:
    Getting the KPI cards::

        from apps.dashboard.queries import DashboardQueries

        kpis = DashboardQueries.kpis()
        print(f"Outstanding: {kpis['outstanding_amount']} {kpis['base_currency']}")

Note:
    Conversion errors are not swallowed. If a rate for one of the document
    currencies is unavailable, ExchangeRateUnavailableError propagates.
"""

import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Sum
from django.db.models.functions import TruncMonth
from django.utils import timezone

from apps.customers.models import Customer
from apps.exchange.money import format_money, quantize_money
from apps.exchange.services import convert_amount, get_base_currency
from apps.invoicing.models import Invoice, InvoiceLineItem, InvoiceStatus, Quote, QuoteStatus
from apps.products.models import Product, ProductStatus

logger = logging.getLogger(__name__)

EXPIRING_WINDOW_DAYS = 7
ACCEPTED_WINDOW_DAYS = 30

STATUS_ACTIONS = {
    'Draft': 'drafted',
    'Sent': 'sent',
    'Paid': 'marked as paid',
    'Overdue': 'marked as overdue',
    'Cancelled': 'cancelled',
    'Accepted': 'accepted',
    'Rejected': 'rejected',
    'Expired': 'expired',
}


def _shift_month(day, months):
    """First day of the month ``months`` away from ``day``'s month."""
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _normalize(per_currency, base_currency):
    """Convert ``{currency: amount}`` into one base-currency amount."""
    total = Decimal('0')
    for currency_code, amount in per_currency.items():
        total += convert_amount(amount, currency_code, base_currency)
    return quantize_money(total)


def _sum_by_currency(queryset, field='total_amount'):
    rows = (
        queryset.order_by()
        .values('currency_code')
        .annotate(amount=Sum(field))
    )
    return {row['currency_code']: row['amount'] for row in rows if row['amount'] is not None}


class DashboardQueries:
    """
    Aggregations for dashboard endpoints.

    Every method takes an optional ``today`` so callers (and tests) can pin
    the reference date; it defaults to the local date.

    Methods:
        kpis: Money KPI cards plus the top product.
        overdue_invoices: Unpaid invoices past their due date.
        expiring_quotes: Sent quotes expiring within a week.
        monthly_revenue: Paid revenue per month for the chart.
        recently_updated: Latest changes across documents, customers, products.
        summary: All of the above in one payload.
    """

    @staticmethod
    def total_sent_mtd(today=None, base_currency=None):
        """Invoices with status Sent issued in the current month."""
        today = today or timezone.localdate()
        base_currency = base_currency or get_base_currency()
        month_start = today.replace(day=1)
        next_month = _shift_month(today, 1)

        invoices = Invoice.objects.active().filter(
            status=InvoiceStatus.SENT,
            issue_date__gte=month_start,
            issue_date__lt=next_month,
        )
        return _normalize(_sum_by_currency(invoices), base_currency)

    @staticmethod
    def outstanding_amount(base_currency=None):
        """Invoices still awaiting payment (Sent or Overdue)."""
        base_currency = base_currency or get_base_currency()
        invoices = Invoice.objects.active().filter(
            status__in=[InvoiceStatus.SENT, InvoiceStatus.OVERDUE]
        )
        return _normalize(_sum_by_currency(invoices), base_currency)

    @staticmethod
    def accepted_quotes_30d(today=None, base_currency=None):
        """Accepted quotes issued in the last 30 days."""
        today = today or timezone.localdate()
        base_currency = base_currency or get_base_currency()
        quotes = Quote.objects.active().filter(
            status=QuoteStatus.ACCEPTED,
            issue_date__gte=today - timedelta(days=ACCEPTED_WINDOW_DAYS),
        )
        return _normalize(_sum_by_currency(quotes), base_currency)

    @staticmethod
    def top_product(base_currency=None):
        """
        Product with the highest revenue on paid invoices.

        Returns:
            dict | None: ``sku``, ``name``, ``revenue`` (base currency) and
            ``quantity`` sold, or None when nothing has been paid yet.
        """
        base_currency = base_currency or get_base_currency()
        rows = (
            InvoiceLineItem.objects
            .filter(
                invoice__status=InvoiceStatus.PAID,
                invoice__deleted_at__isnull=True,
                product__deleted_at__isnull=True,
            )
            .order_by()
            .values('product_id', 'invoice__currency_code')
            .annotate(revenue=Sum('line_total'), quantity=Sum('quantity'))
        )

        revenue_by_product = defaultdict(dict)
        quantity_by_product = defaultdict(int)
        for row in rows:
            revenue_by_product[row['product_id']][row['invoice__currency_code']] = row['revenue']
            quantity_by_product[row['product_id']] += row['quantity']

        if not revenue_by_product:
            return None

        normalized = {
            product_id: _normalize(per_currency, base_currency)
            for product_id, per_currency in revenue_by_product.items()
        }
        products = Product.objects.in_bulk(list(normalized))
        best_id = max(normalized, key=lambda pid: (normalized[pid], products[pid].name))
        best = products[best_id]

        return {
            'sku': best.sku,
            'name': best.name,
            'revenue': normalized[best_id],
            'quantity': quantity_by_product[best_id],
        }

    @staticmethod
    def kpis(today=None):
        """
        Compute the KPI cards.

        Returns:
            dict: ``base_currency``, ``total_sent_mtd``, ``outstanding_amount``,
            ``accepted_quotes_30d`` and ``top_product``.

        Raises:
            ExchangeRateUnavailableError: If a document currency cannot be
                converted into the base currency
        """
        today = today or timezone.localdate()
        base_currency = get_base_currency()
        return {
            'base_currency': base_currency,
            'total_sent_mtd': DashboardQueries.total_sent_mtd(today, base_currency),
            'outstanding_amount': DashboardQueries.outstanding_amount(base_currency),
            'accepted_quotes_30d': DashboardQueries.accepted_quotes_30d(today, base_currency),
            'top_product': DashboardQueries.top_product(base_currency),
        }

    @staticmethod
    def overdue_invoices(today=None):
        """Invoices not Paid or Cancelled whose due date has passed, oldest due first."""
        today = today or timezone.localdate()
        invoices = (
            Invoice.objects.active()
            .exclude(status__in=[InvoiceStatus.PAID, InvoiceStatus.CANCELLED])
            .filter(due_date__lt=today)
            .select_related('customer')
            .order_by('due_date', 'invoice_number')
        )
        return [
            {
                'id': invoice.id,
                'number': invoice.invoice_number,
                'customer': invoice.customer.company_contact_name,
                'issue_date': invoice.issue_date,
                'due_date': invoice.due_date,
                'total_amount': invoice.total_amount,
                'currency_code': invoice.currency_code,
                'total_display': format_money(invoice.total_amount, invoice.currency_code),
                'status': invoice.status,
            }
            for invoice in invoices
        ]

    @staticmethod
    def expiring_quotes(today=None):
        """Sent quotes expiring between today and a week from now, soonest first."""
        today = today or timezone.localdate()
        quotes = (
            Quote.objects.active()
            .filter(
                status=QuoteStatus.SENT,
                expiry_date__gte=today,
                expiry_date__lte=today + timedelta(days=EXPIRING_WINDOW_DAYS),
            )
            .select_related('customer')
            .order_by('expiry_date', 'quote_number')
        )
        return [
            {
                'id': quote.id,
                'number': quote.quote_number,
                'customer': quote.customer.company_contact_name,
                'issue_date': quote.issue_date,
                'expiry_date': quote.expiry_date,
                'total_amount': quote.total_amount,
                'currency_code': quote.currency_code,
                'total_display': format_money(quote.total_amount, quote.currency_code),
                'status': quote.status,
            }
            for quote in quotes
        ]

    @staticmethod
    def monthly_revenue(months=6, today=None):
        """
        Paid invoice revenue per month, oldest month first.

        Args:
            months (int): Number of months ending with the current one.
            today (date, optional): Reference date.

        Returns:
            list[dict]: ``month`` ('Jan'), ``month_full`` ('January 2025'),
            ``start`` (first day) and ``revenue`` in whole base-currency units.
        """
        today = today or timezone.localdate()
        base_currency = get_base_currency()
        first_month = _shift_month(today, -(months - 1))
        end = _shift_month(today, 1)

        rows = (
            Invoice.objects.active()
            .filter(status=InvoiceStatus.PAID, issue_date__gte=first_month, issue_date__lt=end)
            .annotate(month=TruncMonth('issue_date'))
            .order_by()
            .values('month', 'currency_code')
            .annotate(amount=Sum('total_amount'))
        )

        per_month = defaultdict(dict)
        for row in rows:
            per_month[row['month']][row['currency_code']] = row['amount']

        result = []
        for offset in range(months):
            month_start = _shift_month(first_month, offset)
            revenue = _normalize(per_month.get(month_start, {}), base_currency)
            result.append({
                'month': month_start.strftime('%b'),
                'month_full': month_start.strftime('%B %Y'),
                'start': month_start,
                'revenue': int(revenue.quantize(Decimal('1'), rounding=ROUND_HALF_UP)),
            })
        return result

    @staticmethod
    def recently_updated(limit=10):
        """
        Latest changes across invoices, quotes, customers and products.

        Each entity type contributes its ``limit`` newest rows; the merged
        feed is sorted by ``updated_at`` and cut to ``limit``.
        """
        items = []

        for invoice in Invoice.objects.active().select_related('customer').order_by('-updated_at')[:limit]:
            items.append({
                'type': 'invoice',
                'id': str(invoice.id),
                'title': f"Invoice {invoice.invoice_number} for {invoice.customer.company_contact_name}",
                'action': STATUS_ACTIONS.get(invoice.status, 'updated'),
                'timestamp': invoice.updated_at,
            })

        for quote in Quote.objects.active().select_related('customer').order_by('-updated_at')[:limit]:
            items.append({
                'type': 'quote',
                'id': str(quote.id),
                'title': f"Quote {quote.quote_number} for {quote.customer.company_contact_name}",
                'action': STATUS_ACTIONS.get(quote.status, 'updated'),
                'timestamp': quote.updated_at,
            })

        for customer in Customer.objects.active().order_by('-updated_at')[:limit]:
            items.append({
                'type': 'customer',
                'id': customer.public_customer_id,
                'title': customer.company_contact_name,
                'action': 'updated',
                'timestamp': customer.updated_at,
            })

        for product in Product.objects.active().order_by('-updated_at')[:limit]:
            items.append({
                'type': 'product',
                'id': product.sku,
                'title': product.name,
                'action': 'activated' if product.status == ProductStatus.ACTIVE else 'deactivated',
                'timestamp': product.updated_at,
            })

        items.sort(key=lambda item: item['timestamp'], reverse=True)
        return items[:limit]

    @staticmethod
    def summary(today=None):
        """Everything the dashboard page renders, in one call."""
        today = today or timezone.localdate()
        logger.debug("Building dashboard summary for %s", today)
        return {
            'kpis': DashboardQueries.kpis(today),
            'overdue_invoices': DashboardQueries.overdue_invoices(today),
            'expiring_quotes': DashboardQueries.expiring_quotes(today),
            'monthly_revenue': DashboardQueries.monthly_revenue(today=today),
            'recently_updated': DashboardQueries.recently_updated(),
        }
