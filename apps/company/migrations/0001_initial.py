# Generated manually for settings, issuing entities and payment sources

import uuid
from decimal import Decimal
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import apps.company.models

CURRENCY_CHOICES = [('USD', 'US Dollar'), ('GBP', 'British Pound'), ('EUR', 'Euro'), ('CHF', 'Swiss Franc'), ('SGD', 'Singapore Dollar'), ('HKD', 'Hong Kong Dollar'), ('CNY', 'Chinese Yuan'), ('JPY', 'Japanese Yen'), ('CAD', 'Canadian Dollar'), ('AUD', 'Australian Dollar'), ('NZD', 'New Zealand Dollar')]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='AppSettings',
            fields=[
                ('id', models.PositiveSmallIntegerField(default=1, editable=False, primary_key=True, serialize=False)),
                ('base_currency', models.CharField(choices=CURRENCY_CHOICES, default=apps.company.models.default_base_currency, max_length=3)),
                ('default_tax_percentage', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5, validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))])),
                ('default_quote_expiry_days', models.PositiveIntegerField(default=30)),
                ('default_invoice_payment_terms_days', models.PositiveIntegerField(default=30)),
                ('default_quote_notes', models.TextField(blank=True, max_length=2000)),
                ('default_invoice_notes', models.TextField(blank=True, max_length=2000)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'app_settings',
                'verbose_name': 'app settings',
                'verbose_name_plural': 'app settings',
            },
        ),
        migrations.CreateModel(
            name='IssuingEntity',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('entity_name', models.CharField(max_length=200)),
                ('registration_number', models.CharField(blank=True, max_length=100)),
                ('address', models.TextField(blank=True)),
                ('website', models.URLField(blank=True)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('phone', models.CharField(blank=True, max_length=50)),
                ('logo_url', models.URLField(blank=True)),
                ('is_primary', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'issuing_entities',
                'verbose_name_plural': 'issuing entities',
                'ordering': ['entity_name'],
                'constraints': [models.UniqueConstraint(condition=models.Q(('is_primary', True)), fields=('is_primary',), name='single_primary_issuing_entity')],
            },
        ),
        migrations.CreateModel(
            name='PaymentSource',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=120)),
                ('currency_code', models.CharField(choices=CURRENCY_CHOICES, max_length=3)),
                ('bank_name', models.CharField(blank=True, max_length=120)),
                ('account_holder_name', models.CharField(blank=True, max_length=120)),
                ('account_number', models.CharField(blank=True, max_length=64)),
                ('iban', models.CharField(blank=True, max_length=34)),
                ('swift_bic', models.CharField(blank=True, max_length=11)),
                ('routing_number_us', models.CharField(blank=True, max_length=9)),
                ('sort_code_uk', models.CharField(blank=True, max_length=8)),
                ('additional_details', models.TextField(blank=True)),
                ('is_primary_for_entity', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('issuing_entity', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payment_sources', to='company.issuingentity')),
            ],
            options={
                'db_table': 'payment_sources',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['issuing_entity', 'currency_code'], name='payment_sou_issuing_47935d_idx')],
                'constraints': [models.UniqueConstraint(condition=models.Q(('is_primary_for_entity', True)), fields=('issuing_entity',), name='single_primary_payment_source_per_entity')],
            },
        ),
    ]
