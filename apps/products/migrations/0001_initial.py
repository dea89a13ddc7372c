# Generated manually for products and per-currency prices

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion

CURRENCY_CHOICES = [('USD', 'US Dollar'), ('GBP', 'British Pound'), ('EUR', 'Euro'), ('CHF', 'Swiss Franc'), ('SGD', 'Singapore Dollar'), ('HKD', 'Hong Kong Dollar'), ('CNY', 'Chinese Yuan'), ('JPY', 'Japanese Yen'), ('CAD', 'Canadian Dollar'), ('AUD', 'Australian Dollar'), ('NZD', 'New Zealand Dollar')]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('sku', models.CharField(editable=False, max_length=8, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, max_length=2000)),
                ('unit', models.CharField(choices=[('pc', 'Piece'), ('box', 'Box'), ('kit', 'Kit'), ('kg', 'Kilogram'), ('hr', 'Hour')], default='pc', max_length=3)),
                ('base_price', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0'))])),
                ('base_currency', models.CharField(choices=CURRENCY_CHOICES, editable=False, max_length=3)),
                ('status', models.CharField(choices=[('Active', 'Active'), ('Inactive', 'Inactive')], default='Active', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'db_table': 'products',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['name'], name='products_name_6f9890_idx'),
                    models.Index(fields=['status'], name='products_status_a30e64_idx'),
                    models.Index(fields=['deleted_at'], name='products_deleted_c3f9ae_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProductPrice',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('currency_code', models.CharField(choices=CURRENCY_CHOICES, max_length=3)),
                ('price', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0'))])),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='additional_prices', to='products.product')),
            ],
            options={
                'db_table': 'product_prices',
                'ordering': ['currency_code'],
                'constraints': [models.UniqueConstraint(fields=('product', 'currency_code'), name='unique_product_price_currency')],
            },
        ),
    ]
