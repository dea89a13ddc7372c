from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from decimal import Decimal
import uuid

from apps.exchange.constants import Currency


class ProductUnit(models.TextChoices):
    PIECE = 'pc', 'Piece'
    BOX = 'box', 'Box'
    KIT = 'kit', 'Kit'
    KILOGRAM = 'kg', 'Kilogram'
    HOUR = 'hr', 'Hour'


class ProductStatus(models.TextChoices):
    ACTIVE = 'Active', 'Active'
    INACTIVE = 'Inactive', 'Inactive'


class ProductQuerySet(models.QuerySet):

    def active(self):
        return self.filter(deleted_at__isnull=True)


class Product(models.Model):
    """Catalogue item priced in a base currency, with optional fixed prices in others."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sku = models.CharField(max_length=8, unique=True, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, max_length=2000)
    unit = models.CharField(
        max_length=3,
        choices=ProductUnit.choices,
        default=ProductUnit.PIECE
    )

    # Pricing
    base_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )
    base_currency = models.CharField(max_length=3, choices=Currency.choices, editable=False)

    status = models.CharField(
        max_length=10,
        choices=ProductStatus.choices,
        default=ProductStatus.ACTIVE
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = 'products'
        indexes = [
            models.Index(fields=['name']),
            models.Index(fields=['status']),
            models.Index(fields=['deleted_at']),
        ]
        ordering = ['name']

    def __str__(self):
        return f"{self.sku} {self.name}"

    def soft_delete(self):
        self.deleted_at = timezone.now()
        self.save(update_fields=['deleted_at', 'updated_at'])


class ProductPrice(models.Model):
    """Fixed price of a product in a currency other than its base currency."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='additional_prices'
    )
    currency_code = models.CharField(max_length=3, choices=Currency.choices)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0'))]
    )

    class Meta:
        db_table = 'product_prices'
        ordering = ['currency_code']
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'currency_code'],
                name='unique_product_price_currency',
            ),
        ]

    def __str__(self):
        return f"{self.product.sku} {self.currency_code} {self.price}"
