# Generated manually for customers

import uuid
from django.db import migrations, models

CURRENCY_CHOICES = [('USD', 'US Dollar'), ('GBP', 'British Pound'), ('EUR', 'Euro'), ('CHF', 'Swiss Franc'), ('SGD', 'Singapore Dollar'), ('HKD', 'Hong Kong Dollar'), ('CNY', 'Chinese Yuan'), ('JPY', 'Japanese Yen'), ('CAD', 'Canadian Dollar'), ('AUD', 'Australian Dollar'), ('NZD', 'New Zealand Dollar')]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('public_customer_id', models.CharField(editable=False, max_length=5, unique=True)),
                ('company_contact_name', models.CharField(max_length=120)),
                ('email', models.EmailField(blank=True, max_length=255, null=True)),
                ('phone', models.CharField(blank=True, max_length=50)),
                ('preferred_currency', models.CharField(choices=CURRENCY_CHOICES, default='USD', max_length=3)),
                ('address', models.TextField(blank=True)),
                ('notes', models.TextField(blank=True, max_length=2000)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('deleted_at', models.DateTimeField(blank=True, null=True)),
            ],
            options={
                'db_table': 'customers',
                'ordering': ['company_contact_name'],
                'indexes': [
                    models.Index(fields=['company_contact_name'], name='customers_company_b18090_idx'),
                    models.Index(fields=['deleted_at'], name='customers_deleted_508df4_idx'),
                ],
                'constraints': [models.UniqueConstraint(condition=models.Q(('deleted_at__isnull', True)), fields=('email',), name='unique_active_customer_email')],
            },
        ),
    ]
