from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import uuid

from apps.exchange.constants import Currency

PERCENTAGE_VALIDATORS = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]


class QuoteStatus(models.TextChoices):
    DRAFT = 'Draft', 'Draft'
    SENT = 'Sent', 'Sent'
    ACCEPTED = 'Accepted', 'Accepted'
    REJECTED = 'Rejected', 'Rejected'
    EXPIRED = 'Expired', 'Expired'


class InvoiceStatus(models.TextChoices):
    DRAFT = 'Draft', 'Draft'
    SENT = 'Sent', 'Sent'
    PAID = 'Paid', 'Paid'
    OVERDUE = 'Overdue', 'Overdue'
    CANCELLED = 'Cancelled', 'Cancelled'


class DocumentQuerySet(models.QuerySet):

    def active(self):
        return self.filter(deleted_at__isnull=True)


class FinancialDocument(models.Model):
    """Fields shared by quotes and invoices."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Parties
    issuing_entity = models.ForeignKey(
        'company.IssuingEntity',
        on_delete=models.PROTECT,
        related_name='%(class)ss'
    )
    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.PROTECT,
        related_name='%(class)ss'
    )

    issue_date = models.DateField(default=timezone.localdate)
    currency_code = models.CharField(max_length=3, choices=Currency.choices)

    # Percentages
    discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=PERCENTAGE_VALIDATORS
    )
    tax_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=PERCENTAGE_VALIDATORS
    )

    # Stored totals, recomputed on every save through the services
    subtotal_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    discount_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    tax_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0.00'))

    notes = models.TextField(blank=True, max_length=2000)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = DocumentQuerySet.as_manager()

    class Meta:
        abstract = True

    def soft_delete(self):
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at', 'updated_at'])

    @property
    def is_deleted(self):
        return self.deleted_at is not None


class Invoice(FinancialDocument):
    """Invoice sent to a customer, payable into a payment source."""

    invoice_number = models.CharField(max_length=20, unique=True, editable=False)
    payment_source = models.ForeignKey(
        'company.PaymentSource',
        on_delete=models.PROTECT,
        related_name='invoices'
    )
    due_date = models.DateField()
    status = models.CharField(
        max_length=10,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.DRAFT
    )
    source_quote = models.ForeignKey(
        'invoicing.Quote',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='generated_invoices'
    )

    LOCKED_STATUSES = (InvoiceStatus.PAID, InvoiceStatus.CANCELLED)

    class Meta:
        db_table = 'invoices'
        indexes = [
            models.Index(fields=['status', 'due_date']),
            models.Index(fields=['customer', 'issue_date']),
            models.Index(fields=['issue_date']),
            models.Index(fields=['deleted_at']),
        ]
        ordering = ['-issue_date', '-created_at']

    def __str__(self):
        return f"{self.invoice_number} ({self.status})"

    @property
    def number(self):
        return self.invoice_number

    @property
    def is_locked(self):
        return self.status in self.LOCKED_STATUSES


class Quote(FinancialDocument):
    """Price offer to a customer; an accepted quote can become an invoice."""

    quote_number = models.CharField(max_length=20, unique=True, editable=False)
    payment_source = models.ForeignKey(
        'company.PaymentSource',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='quotes'
    )
    expiry_date = models.DateField()
    status = models.CharField(
        max_length=10,
        choices=QuoteStatus.choices,
        default=QuoteStatus.DRAFT
    )
    converted_invoice = models.OneToOneField(
        Invoice,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='converted_from_quote'
    )

    class Meta:
        db_table = 'quotes'
        indexes = [
            models.Index(fields=['status', 'expiry_date']),
            models.Index(fields=['customer', 'issue_date']),
            models.Index(fields=['issue_date']),
            models.Index(fields=['deleted_at']),
        ]
        ordering = ['-issue_date', '-created_at']

    def __str__(self):
        return f"{self.quote_number} ({self.status})"

    @property
    def number(self):
        return self.quote_number

    @property
    def is_locked(self):
        return self.status == QuoteStatus.ACCEPTED or self.converted_invoice_id is not None


class LineItem(models.Model):
    """Product row of a document. Prices are in the document currency."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(
        'products.Product',
        on_delete=models.PROTECT,
        related_name='%(class)ss'
    )
    description = models.TextField(max_length=1000)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    # Product base currency -> document currency rate the unit price was converted at
    fx_rate = models.DecimalField(max_digits=18, decimal_places=6, null=True, blank=True)
    line_total = models.DecimalField(max_digits=15, decimal_places=2)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True
        ordering = ['position']

    def __str__(self):
        return f"{self.quantity} x {self.description[:40]}"


class InvoiceLineItem(LineItem):
    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='line_items'
    )

    class Meta(LineItem.Meta):
        db_table = 'invoice_line_items'


class QuoteLineItem(LineItem):
    quote = models.ForeignKey(
        Quote,
        on_delete=models.CASCADE,
        related_name='line_items'
    )

    class Meta(LineItem.Meta):
        db_table = 'quote_line_items'
