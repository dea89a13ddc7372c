# Generated manually for quotes, invoices and their line items

import uuid
from decimal import Decimal
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone

CURRENCY_CHOICES = [('USD', 'US Dollar'), ('GBP', 'British Pound'), ('EUR', 'Euro'), ('CHF', 'Swiss Franc'), ('SGD', 'Singapore Dollar'), ('HKD', 'Hong Kong Dollar'), ('CNY', 'Chinese Yuan'), ('JPY', 'Japanese Yen'), ('CAD', 'Canadian Dollar'), ('AUD', 'Australian Dollar'), ('NZD', 'New Zealand Dollar')]

PERCENTAGE_VALIDATORS = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]


def document_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('issue_date', models.DateField(default=django.utils.timezone.localdate)),
        ('currency_code', models.CharField(choices=CURRENCY_CHOICES, max_length=3)),
        ('discount_percentage', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5, validators=PERCENTAGE_VALIDATORS)),
        ('tax_percentage', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5, validators=PERCENTAGE_VALIDATORS)),
        ('subtotal_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
        ('discount_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
        ('tax_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
        ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=15)),
        ('notes', models.TextField(blank=True, max_length=2000)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('deleted_at', models.DateTimeField(blank=True, null=True)),
    ]


def line_item_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('description', models.TextField(max_length=1000)),
        ('quantity', models.PositiveIntegerField(validators=[MinValueValidator(1)])),
        ('unit_price', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0'))])),
        ('fx_rate', models.DecimalField(blank=True, decimal_places=6, max_digits=18, null=True)),
        ('line_total', models.DecimalField(decimal_places=2, max_digits=15)),
        ('position', models.PositiveIntegerField(default=0)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('company', '0001_initial'),
        ('customers', '0001_initial'),
        ('products', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Invoice',
            fields=document_fields() + [
                ('invoice_number', models.CharField(editable=False, max_length=20, unique=True)),
                ('due_date', models.DateField()),
                ('status', models.CharField(choices=[('Draft', 'Draft'), ('Sent', 'Sent'), ('Paid', 'Paid'), ('Overdue', 'Overdue'), ('Cancelled', 'Cancelled')], default='Draft', max_length=10)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='invoices', to='customers.customer')),
                ('issuing_entity', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='invoices', to='company.issuingentity')),
                ('payment_source', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='invoices', to='company.paymentsource')),
            ],
            options={
                'db_table': 'invoices',
                'ordering': ['-issue_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'due_date'], name='invoices_status_73cf28_idx'),
                    models.Index(fields=['customer', 'issue_date'], name='invoices_custome_6dc241_idx'),
                    models.Index(fields=['issue_date'], name='invoices_issue_d_6fe766_idx'),
                    models.Index(fields=['deleted_at'], name='invoices_deleted_2180db_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Quote',
            fields=document_fields() + [
                ('quote_number', models.CharField(editable=False, max_length=20, unique=True)),
                ('expiry_date', models.DateField()),
                ('status', models.CharField(choices=[('Draft', 'Draft'), ('Sent', 'Sent'), ('Accepted', 'Accepted'), ('Rejected', 'Rejected'), ('Expired', 'Expired')], default='Draft', max_length=10)),
                ('converted_invoice', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='converted_from_quote', to='invoicing.invoice')),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='quotes', to='customers.customer')),
                ('issuing_entity', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='quotes', to='company.issuingentity')),
                ('payment_source', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='quotes', to='company.paymentsource')),
            ],
            options={
                'db_table': 'quotes',
                'ordering': ['-issue_date', '-created_at'],
                'indexes': [
                    models.Index(fields=['status', 'expiry_date'], name='quotes_status_02a5d4_idx'),
                    models.Index(fields=['customer', 'issue_date'], name='quotes_custome_7469e0_idx'),
                    models.Index(fields=['issue_date'], name='quotes_issue_d_c3ab72_idx'),
                    models.Index(fields=['deleted_at'], name='quotes_deleted_f08098_idx'),
                ],
            },
        ),
        migrations.AddField(
            model_name='invoice',
            name='source_quote',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='generated_invoices', to='invoicing.quote'),
        ),
        migrations.CreateModel(
            name='InvoiceLineItem',
            fields=line_item_fields() + [
                ('invoice', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='line_items', to='invoicing.invoice')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='invoicelineitems', to='products.product')),
            ],
            options={
                'db_table': 'invoice_line_items',
                'ordering': ['position'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='QuoteLineItem',
            fields=line_item_fields() + [
                ('quote', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='line_items', to='invoicing.quote')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='quotelineitems', to='products.product')),
            ],
            options={
                'db_table': 'quote_line_items',
                'ordering': ['position'],
                'abstract': False,
            },
        ),
    ]
