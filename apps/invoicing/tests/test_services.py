from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.utils import timezone

from apps.company.services import (
    delete_issuing_entity,
    delete_payment_source,
    EntityInUseError,
    PaymentSourceInUseError,
)
from apps.exchange.services import ExchangeRateUnavailableError
from apps.invoicing.models import Invoice, InvoiceStatus, Quote, QuoteStatus
from apps.invoicing.services import numbering
from apps.invoicing.services import (
    create_invoice,
    create_quote,
    get_invoice_by_id,
    get_quote_by_id,
    list_quotes,
    soft_delete_quote,
    update_invoice,
    update_invoice_status,
    update_quote,
    update_quote_status,
    DocumentNumberError,
    DocumentLockedError,
    InvalidDocumentDatesError,
    InvalidLineItemError,
    InvalidPartiesError,
    InvalidPercentageError,
    InvalidStatusError,
    QuoteNotFoundError,
)


def _year():
    return timezone.localdate().year


# =============================================================================
# Quote creation
# =============================================================================

@pytest.mark.django_db
class TestCreateQuote:

    def test_defaults_from_app_settings(self, quote, entity):
        today = timezone.localdate()

        assert quote.quote_number == f'Q-{_year()}-0001'
        assert quote.status == QuoteStatus.DRAFT
        assert quote.issuing_entity == entity
        assert quote.currency_code == 'USD'
        assert quote.issue_date == today
        assert quote.expiry_date == today + timedelta(days=14)
        assert quote.tax_percentage == Decimal('20.00')
        assert quote.notes == 'Prices valid for 14 days.'

    def test_totals(self, quote):
        assert quote.subtotal_amount == Decimal('330.00')
        assert quote.discount_amount == Decimal('0.00')
        assert quote.tax_amount == Decimal('66.00')
        assert quote.total_amount == Decimal('396.00')

    def test_line_items_priced_and_ordered(self, quote):
        items = list(quote.line_items.all())

        assert [i.product.sku for i in items] == ['PR-WDG42', 'PR-HRS77']
        assert [i.position for i in items] == [0, 1]
        assert items[0].description == 'Widget'
        assert items[0].unit_price == Decimal('10.00')
        assert items[0].line_total == Decimal('30.00')
        assert items[0].fx_rate is None

    def test_numbers_are_sequential(self, quote, parties):
        second = create_quote(public_customer_id='7K3B9', line_items=[{'sku': 'PR-WDG42', 'quantity': 1}])

        assert second.quote_number == f'Q-{_year()}-0002'

    def test_numbering_restarts_per_year(self, quote, parties):
        older = create_quote(
            public_customer_id='7K3B9',
            issue_date=date(2020, 3, 1),
            line_items=[{'sku': 'PR-WDG42', 'quantity': 1}],
        )

        assert older.quote_number == 'Q-2020-0001'
        assert older.expiry_date == date(2020, 3, 15)

    def test_deleted_numbers_are_not_reused(self, quote, parties):
        soft_delete_quote(quote_id=quote.id)

        second = create_quote(public_customer_id='7K3B9', line_items=[{'sku': 'PR-WDG42', 'quantity': 1}])

        assert second.quote_number == f'Q-{_year()}-0002'

    def test_number_taken_meanwhile_is_retried(self, quote, parties):
        allocate = numbering._next_number
        stale = iter([quote.quote_number])

        def racing_allocate(*args):
            return next(stale, None) or allocate(*args)

        with patch('apps.invoicing.services.numbering._next_number', side_effect=racing_allocate):
            second = create_quote(public_customer_id='7K3B9', line_items=[{'sku': 'PR-WDG42', 'quantity': 1}])

        assert second.quote_number == f'Q-{_year()}-0002'
        assert second.line_items.count() == 1

    def test_gives_up_when_number_keeps_colliding(self, quote, parties):
        with patch('apps.invoicing.services.numbering._next_number', return_value=quote.quote_number):
            with pytest.raises(DocumentNumberError):
                create_quote(public_customer_id='7K3B9', line_items=[{'sku': 'PR-WDG42', 'quantity': 1}])

        assert Quote.objects.count() == 1

    def test_currency_defaults_to_customer_preference(self, parties, gbp_customer, patched_resolver):
        quote = create_quote(
            public_customer_id='2mm45',
            line_items=[
                {'sku': 'PR-WDG42', 'quantity': 2},
                {'sku': 'PR-HRS77', 'quantity': 1},
            ],
        )

        widget, hours = quote.line_items.all()
        assert quote.currency_code == 'GBP'
        # fixed GBP price
        assert widget.unit_price == Decimal('8.50')
        assert widget.fx_rate is None
        # 150 USD at 0.853 / 1.0842
        assert hours.fx_rate == Decimal('0.786755')
        assert hours.unit_price == Decimal('118.01')
        assert quote.subtotal_amount == Decimal('135.01')

    def test_explicit_values_win(self, parties):
        quote = create_quote(
            public_customer_id='7K3B9',
            discount_percentage=Decimal('10'),
            tax_percentage=Decimal('0'),
            notes='',
            line_items=[{
                'sku': 'PR-WDG42', 'quantity': 4, 'unit_price': Decimal('9.99'),
                'description': 'Widget (bulk rate)',
            }],
        )

        item = quote.line_items.get()
        assert item.unit_price == Decimal('9.99')
        assert item.description == 'Widget (bulk rate)'
        assert quote.discount_amount == Decimal('4.00')
        assert quote.total_amount == Decimal('35.96')
        assert quote.notes == ''

    def test_deleted_customer_rejected(self, parties, deleted_customer):
        with pytest.raises(InvalidPartiesError):
            create_quote(public_customer_id='9ZZ88', line_items=[{'sku': 'PR-WDG42', 'quantity': 1}])

    def test_payment_source_of_other_entity_rejected(self, parties, other_payment_source):
        with pytest.raises(InvalidPartiesError):
            create_quote(
                public_customer_id='7K3B9',
                payment_source_id=other_payment_source.id,
                line_items=[{'sku': 'PR-WDG42', 'quantity': 1}],
            )

    def test_empty_line_items_rejected(self, parties):
        with pytest.raises(InvalidLineItemError):
            create_quote(public_customer_id='7K3B9', line_items=[])

    def test_deleted_product_rejected(self, parties, product):
        product.soft_delete()

        with pytest.raises(InvalidLineItemError):
            create_quote(public_customer_id='7K3B9', line_items=[{'sku': 'PR-WDG42', 'quantity': 1}])

    def test_invalid_percentage_rejected(self, parties):
        with pytest.raises(InvalidPercentageError):
            create_quote(
                public_customer_id='7K3B9',
                discount_percentage=Decimal('120'),
                line_items=[{'sku': 'PR-WDG42', 'quantity': 1}],
            )

    def test_unavailable_rate_creates_nothing(self, parties, patched_resolver, rate_source):
        rate_source.fail = True

        with pytest.raises(ExchangeRateUnavailableError):
            create_quote(
                public_customer_id='7K3B9',
                currency_code='CHF',
                line_items=[{'sku': 'PR-HRS77', 'quantity': 1}],
            )

        assert not Quote.objects.exists()


# =============================================================================
# Quote updates
# =============================================================================

@pytest.mark.django_db
class TestUpdateQuote:

    def test_sync_line_items(self, quote):
        widget_line, hours_line = quote.line_items.all()

        update_quote(quote_id=quote.id, data={
            'line_items': [
                {'id': hours_line.id, 'sku': 'PR-HRS77', 'quantity': 1},
                {'sku': 'PR-WDG42', 'quantity': 10, 'unit_price': Decimal('8.00')},
            ],
        })

        items = list(get_quote_by_id(quote_id=quote.id).line_items.all())
        assert len(items) == 2
        assert items[0].id == hours_line.id
        assert items[0].quantity == 1
        assert items[1].unit_price == Decimal('8.00')
        assert not quote.line_items.filter(id=widget_line.id).exists()

        quote.refresh_from_db()
        assert quote.subtotal_amount == Decimal('230.00')
        assert quote.total_amount == Decimal('276.00')

    def test_percentage_change_recomputes_totals(self, quote):
        update_quote(quote_id=quote.id, data={'discount_percentage': Decimal('50')})

        quote.refresh_from_db()
        assert quote.discount_amount == Decimal('165.00')
        assert quote.total_amount == Decimal('198.00')
        assert quote.line_items.count() == 2

    def test_foreign_line_item_rejected(self, quote, invoice):
        foreign = invoice.line_items.first()

        with pytest.raises(InvalidLineItemError):
            update_quote(quote_id=quote.id, data={
                'line_items': [{'id': foreign.id, 'sku': 'PR-WDG42', 'quantity': 1}],
            })

    def test_existing_line_may_keep_deleted_product(self, quote, product):
        widget_line = quote.line_items.get(product=product)
        product.soft_delete()

        update_quote(quote_id=quote.id, data={
            'line_items': [{'id': widget_line.id, 'sku': 'PR-WDG42', 'quantity': 5, 'unit_price': Decimal('10')}],
        })

        assert quote.line_items.get().quantity == 5

    def test_currency_change_requires_line_items(self, quote):
        with pytest.raises(InvalidLineItemError):
            update_quote(quote_id=quote.id, data={'currency_code': 'EUR'})

    def test_expiry_before_stored_issue_date_rejected(self, quote):
        with pytest.raises(InvalidDocumentDatesError):
            update_quote(quote_id=quote.id, data={'expiry_date': quote.issue_date - timedelta(days=1)})

        quote.refresh_from_db()
        assert quote.expiry_date >= quote.issue_date

    def test_issue_date_after_stored_expiry_rejected(self, quote):
        with pytest.raises(InvalidDocumentDatesError):
            update_quote(quote_id=quote.id, data={'issue_date': quote.expiry_date + timedelta(days=1)})

    def test_status_only_changes_when_given(self, quote):
        update_quote(quote_id=quote.id, data={'notes': 'Updated'})
        quote.refresh_from_db()
        assert quote.status == QuoteStatus.DRAFT

        update_quote(quote_id=quote.id, data={'status': 'Sent'})
        quote.refresh_from_db()
        assert quote.status == QuoteStatus.SENT

    def test_accepted_quote_is_locked(self, quote):
        update_quote_status(quote_id=quote.id, status='Accepted')

        with pytest.raises(DocumentLockedError):
            update_quote(quote_id=quote.id, data={'notes': 'too late'})

    def test_invalid_status(self, quote):
        with pytest.raises(InvalidStatusError):
            update_quote_status(quote_id=quote.id, status='Paid')

    def test_soft_deleted_quote_is_hidden(self, quote):
        soft_delete_quote(quote_id=quote.id)

        with pytest.raises(QuoteNotFoundError):
            get_quote_by_id(quote_id=quote.id)
        assert not list_quotes().filter(id=quote.id).exists()
        assert Quote.objects.filter(id=quote.id).exists()


# =============================================================================
# Invoices
# =============================================================================

@pytest.mark.django_db
class TestInvoices:

    def test_create_uses_primary_payment_source(self, invoice, payment_source):
        today = timezone.localdate()

        assert invoice.invoice_number == f'INV-{_year()}-0001'
        assert invoice.payment_source == payment_source
        assert invoice.due_date == today + timedelta(days=30)
        assert invoice.notes == 'Thank you for your business.'
        assert invoice.total_amount == Decimal('396.00')

    def test_entity_without_payment_source_rejected(self, parties, other_entity):
        with pytest.raises(InvalidPartiesError):
            create_invoice(
                public_customer_id='7K3B9',
                issuing_entity_id=other_entity.id,
                line_items=[{'sku': 'PR-WDG42', 'quantity': 1}],
            )

    def test_explicit_payment_source_must_match_entity(self, parties, other_payment_source):
        with pytest.raises(InvalidPartiesError):
            create_invoice(
                public_customer_id='7K3B9',
                payment_source_id=other_payment_source.id,
                line_items=[{'sku': 'PR-WDG42', 'quantity': 1}],
            )

    @pytest.mark.parametrize('locked_status', ['Paid', 'Cancelled'])
    def test_paid_and_cancelled_are_locked(self, invoice, locked_status):
        update_invoice_status(invoice_id=invoice.id, status=locked_status)

        with pytest.raises(DocumentLockedError):
            update_invoice(invoice_id=invoice.id, data={'notes': 'edit'})

    def test_overdue_invoice_can_still_be_edited(self, invoice):
        update_invoice_status(invoice_id=invoice.id, status='Overdue')

        updated = update_invoice(invoice_id=invoice.id, data={'tax_percentage': Decimal('0')})

        assert updated.total_amount == Decimal('330.00')

    def test_invalid_status(self, invoice):
        with pytest.raises(InvalidStatusError):
            update_invoice_status(invoice_id=invoice.id, status='Accepted')

    def test_due_date_before_stored_issue_date_rejected(self, invoice):
        with pytest.raises(InvalidDocumentDatesError):
            update_invoice(invoice_id=invoice.id, data={'due_date': invoice.issue_date - timedelta(days=1)})

        invoice.refresh_from_db()
        assert invoice.due_date >= invoice.issue_date

    def test_get_prefetches_line_items(self, invoice, django_assert_max_num_queries):
        loaded = get_invoice_by_id(invoice_id=invoice.id)

        with django_assert_max_num_queries(0):
            assert [i.product.sku for i in loaded.line_items.all()] == ['PR-WDG42', 'PR-HRS77']


# =============================================================================
# Protected parties
# =============================================================================

@pytest.mark.django_db
class TestPartiesInUse:

    def test_entity_with_documents_cannot_be_deleted(self, invoice, entity):
        with pytest.raises(EntityInUseError):
            delete_issuing_entity(entity_id=entity.id)

    def test_payment_source_on_invoice_cannot_be_deleted(self, invoice, payment_source):
        with pytest.raises(PaymentSourceInUseError):
            delete_payment_source(source_id=payment_source.id)

    def test_customer_and_product_survive_soft_delete(self, invoice, customer, product):
        customer.soft_delete()
        product.soft_delete()

        loaded = Invoice.objects.get(id=invoice.id)
        assert loaded.customer == customer
        assert loaded.line_items.filter(product=product).exists()
        assert loaded.status == InvoiceStatus.DRAFT
