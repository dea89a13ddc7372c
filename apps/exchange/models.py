from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
import uuid

from .constants import Currency


class ExchangeRate(models.Model):
    """
    Manually entered exchange rate.

    The newest row for a currency pair takes precedence over the ECB feed,
    e.g. to lock in the rate a bank actually applied.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    from_currency = models.CharField(max_length=3, choices=Currency.choices)
    to_currency = models.CharField(max_length=3, choices=Currency.choices)
    rate = models.DecimalField(
        max_digits=18,
        decimal_places=6,
        validators=[MinValueValidator(Decimal('0.000001'))]
    )
    note = models.CharField(max_length=200, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='exchange_rate_overrides'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'exchange_rates'
        indexes = [
            models.Index(fields=['from_currency', 'to_currency', 'created_at']),
        ]
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                check=~models.Q(from_currency=models.F('to_currency')),
                name='exchange_rate_distinct_currencies',
            ),
        ]

    def __str__(self):
        return f"1 {self.from_currency} = {self.rate} {self.to_currency}"
