from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
import uuid

from apps.exchange.constants import Currency


def default_base_currency():
    return settings.DEFAULT_BASE_CURRENCY


class AppSettings(models.Model):
    """
    System-wide defaults (single row, pk=1).

    Read through ``get_app_settings()`` which creates the row on first use.
    """

    SINGLETON_ID = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_ID, editable=False)

    # Reporting currency for dashboard KPIs and new product prices
    base_currency = models.CharField(
        max_length=3,
        choices=Currency.choices,
        default=default_base_currency
    )

    # Document defaults
    default_tax_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    default_quote_expiry_days = models.PositiveIntegerField(default=30)
    default_invoice_payment_terms_days = models.PositiveIntegerField(default=30)
    default_quote_notes = models.TextField(blank=True, max_length=2000)
    default_invoice_notes = models.TextField(blank=True, max_length=2000)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'app_settings'
        verbose_name = 'app settings'
        verbose_name_plural = 'app settings'

    def __str__(self):
        return f"App settings (base {self.base_currency})"


class IssuingEntity(models.Model):
    """Legal entity that issues quotes and invoices (shown in the From block)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    entity_name = models.CharField(max_length=200)
    registration_number = models.CharField(max_length=100, blank=True)
    address = models.TextField(blank=True)
    website = models.URLField(blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=50, blank=True)
    logo_url = models.URLField(blank=True)
    is_primary = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'issuing_entities'
        verbose_name_plural = 'issuing entities'
        ordering = ['entity_name']
        constraints = [
            models.UniqueConstraint(
                fields=['is_primary'],
                condition=models.Q(is_primary=True),
                name='single_primary_issuing_entity',
            ),
        ]

    def __str__(self):
        return self.entity_name


class PaymentSource(models.Model):
    """Bank account (or similar) printed on invoices for the customer to pay into."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120)
    currency_code = models.CharField(max_length=3, choices=Currency.choices)
    issuing_entity = models.ForeignKey(
        IssuingEntity,
        on_delete=models.CASCADE,
        related_name='payment_sources'
    )

    # Bank details
    bank_name = models.CharField(max_length=120, blank=True)
    account_holder_name = models.CharField(max_length=120, blank=True)
    account_number = models.CharField(max_length=64, blank=True)
    iban = models.CharField(max_length=34, blank=True)
    swift_bic = models.CharField(max_length=11, blank=True)
    routing_number_us = models.CharField(max_length=9, blank=True)
    sort_code_uk = models.CharField(max_length=8, blank=True)
    additional_details = models.TextField(blank=True)

    is_primary_for_entity = models.BooleanField(default=False)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payment_sources'
        indexes = [
            models.Index(fields=['issuing_entity', 'currency_code']),
        ]
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['issuing_entity'],
                condition=models.Q(is_primary_for_entity=True),
                name='single_primary_payment_source_per_entity',
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.currency_code})"

    def bank_detail_lines(self):
        """Non-empty bank details as (label, value) pairs, in print order."""
        labels = [
            ('Bank', self.bank_name),
            ('Account holder', self.account_holder_name),
            ('Account number', self.account_number),
            ('IBAN', self.iban),
            ('SWIFT/BIC', self.swift_bic),
            ('Routing number', self.routing_number_us),
            ('Sort code', self.sort_code_uk),
        ]
        return [(label, value) for label, value in labels if value]
