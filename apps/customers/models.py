from django.db import models
from django.utils import timezone
import uuid

from apps.exchange.constants import Currency


class CustomerQuerySet(models.QuerySet):

    def active(self):
        return self.filter(deleted_at__isnull=True)


class Customer(models.Model):
    """Customer (company + contact) that quotes and invoices are addressed to."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Short human-friendly ID, e.g. "7K3B9"; used in URLs and on documents
    public_customer_id = models.CharField(max_length=5, unique=True, editable=False)

    company_contact_name = models.CharField(max_length=120)
    email = models.EmailField(max_length=255, null=True, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    preferred_currency = models.CharField(
        max_length=3,
        choices=Currency.choices,
        default=Currency.USD
    )
    address = models.TextField(blank=True)
    notes = models.TextField(blank=True, max_length=2000)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = CustomerQuerySet.as_manager()

    class Meta:
        db_table = 'customers'
        indexes = [
            models.Index(fields=['company_contact_name']),
            models.Index(fields=['deleted_at']),
        ]
        ordering = ['company_contact_name']
        constraints = [
            models.UniqueConstraint(
                fields=['email'],
                condition=models.Q(deleted_at__isnull=True),
                name='unique_active_customer_email',
            ),
        ]

    def __str__(self):
        return f"{self.company_contact_name} ({self.public_customer_id})"

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def soft_delete(self):
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at', 'updated_at'])
