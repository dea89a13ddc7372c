"""
Serializers for dashboard app.

Input Serializers:
    RevenueQuerySerializer - Validates ?months=
    RecentQuerySerializer - Validates ?limit=

Response Serializers:
    KpiSerializer, DocumentDueSerializer, MonthlyRevenueSerializer,
    RecentItemSerializer, DashboardSummarySerializer
"""

from rest_framework import serializers


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class RevenueQuerySerializer(serializers.Serializer):
    months = serializers.IntegerField(min_value=1, max_value=24, default=6)


class RecentQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=50, default=10)


# =============================================================================
# Response Serializers
# =============================================================================

class TopProductSerializer(serializers.Serializer):
    sku = serializers.CharField()
    name = serializers.CharField()
    revenue = serializers.DecimalField(max_digits=15, decimal_places=2)
    quantity = serializers.IntegerField()


class KpiSerializer(serializers.Serializer):
    """KPI cards; every amount is in ``base_currency``."""

    base_currency = serializers.CharField()
    total_sent_mtd = serializers.DecimalField(max_digits=15, decimal_places=2)
    outstanding_amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    accepted_quotes_30d = serializers.DecimalField(max_digits=15, decimal_places=2)
    top_product = TopProductSerializer(allow_null=True)


class DocumentDueSerializer(serializers.Serializer):
    """Row of the overdue-invoice and expiring-quote tables."""

    id = serializers.UUIDField()
    number = serializers.CharField()
    customer = serializers.CharField()
    issue_date = serializers.DateField()
    due_date = serializers.DateField(required=False)
    expiry_date = serializers.DateField(required=False)
    total_amount = serializers.DecimalField(max_digits=15, decimal_places=2)
    currency_code = serializers.CharField()
    total_display = serializers.CharField()
    status = serializers.CharField()


class MonthlyRevenueSerializer(serializers.Serializer):
    month = serializers.CharField()
    month_full = serializers.CharField()
    start = serializers.DateField()
    revenue = serializers.IntegerField()


class RecentItemSerializer(serializers.Serializer):
    type = serializers.CharField()
    id = serializers.CharField()
    title = serializers.CharField()
    action = serializers.CharField()
    timestamp = serializers.DateTimeField()


class DashboardSummarySerializer(serializers.Serializer):
    kpis = KpiSerializer()
    overdue_invoices = DocumentDueSerializer(many=True)
    expiring_quotes = DocumentDueSerializer(many=True)
    monthly_revenue = MonthlyRevenueSerializer(many=True)
    recently_updated = RecentItemSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
