# Generated manually for manual exchange rate overrides

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion

CURRENCY_CHOICES = [('USD', 'US Dollar'), ('GBP', 'British Pound'), ('EUR', 'Euro'), ('CHF', 'Swiss Franc'), ('SGD', 'Singapore Dollar'), ('HKD', 'Hong Kong Dollar'), ('CNY', 'Chinese Yuan'), ('JPY', 'Japanese Yen'), ('CAD', 'Canadian Dollar'), ('AUD', 'Australian Dollar'), ('NZD', 'New Zealand Dollar')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ExchangeRate',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('from_currency', models.CharField(choices=CURRENCY_CHOICES, max_length=3)),
                ('to_currency', models.CharField(choices=CURRENCY_CHOICES, max_length=3)),
                ('rate', models.DecimalField(decimal_places=6, max_digits=18, validators=[MinValueValidator(Decimal('0.000001'))])),
                ('note', models.CharField(blank=True, max_length=200)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='exchange_rate_overrides', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'exchange_rates',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['from_currency', 'to_currency', 'created_at'], name='exchange_ra_from_cu_b19635_idx')],
                'constraints': [models.CheckConstraint(check=models.Q(('from_currency', models.F('to_currency')), _negated=True), name='exchange_rate_distinct_currencies')],
            },
        ),
    ]
