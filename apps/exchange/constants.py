from django.db import models


class Currency(models.TextChoices):
    USD = 'USD', 'US Dollar'
    GBP = 'GBP', 'British Pound'
    EUR = 'EUR', 'Euro'
    CHF = 'CHF', 'Swiss Franc'
    SGD = 'SGD', 'Singapore Dollar'
    HKD = 'HKD', 'Hong Kong Dollar'
    CNY = 'CNY', 'Chinese Yuan'
    JPY = 'JPY', 'Japanese Yen'
    CAD = 'CAD', 'Canadian Dollar'
    AUD = 'AUD', 'Australian Dollar'
    NZD = 'NZD', 'New Zealand Dollar'


ALLOWED_CURRENCIES = tuple(Currency.values)

# ECB publishes every reference rate as units of currency per 1 EUR
PIVOT_CURRENCY = Currency.EUR.value

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'JPY': '¥',
    'AUD': 'A$',
    'CAD': 'C$',
    'CHF': 'CHF',
    'CNY': '¥',
    'SGD': 'S$',
    'HKD': 'HK$',
    'NZD': 'NZ$',
}
