"""AppSettings singleton access."""

import logging
from typing import Any, Dict

from django.db import transaction

from ..models import AppSettings

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = [
    'base_currency',
    'default_tax_percentage',
    'default_quote_expiry_days',
    'default_invoice_payment_terms_days',
    'default_quote_notes',
    'default_invoice_notes',
]


def get_app_settings() -> AppSettings:
    """Return the settings row, creating it with defaults on first access."""
    app_settings, created = AppSettings.objects.get_or_create(pk=AppSettings.SINGLETON_ID)
    if created:
        logger.info("Created default app settings (base currency %s)", app_settings.base_currency)
    return app_settings


@transaction.atomic
def update_app_settings(*, data: Dict[str, Any]) -> AppSettings:
    """
    Update allowed settings fields.

    Changing ``base_currency`` only affects products created afterwards and
    how the dashboard reports; stored prices are never rewritten.
    """
    get_app_settings()
    app_settings = AppSettings.objects.select_for_update().get(pk=AppSettings.SINGLETON_ID)

    previous_base = app_settings.base_currency
    for field, value in data.items():
        if field in UPDATABLE_FIELDS:
            setattr(app_settings, field, value)

    app_settings.save()

    if app_settings.base_currency != previous_base:
        logger.info("Base currency changed %s -> %s", previous_base, app_settings.base_currency)
    return app_settings
