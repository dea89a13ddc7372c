import pytest
from datetime import timedelta
from django.urls import reverse
from rest_framework import status
from apps.invoicing.models import Invoice, Quote
from apps.invoicing.services import update_quote_status, update_invoice_status


def _quote_payload(**overrides):
    payload = {
        'customer': '7K3B9',
        'line_items': [
            {'sku': 'PR-WDG42', 'quantity': 3},
            {'sku': 'PR-HRS77', 'quantity': 2},
        ],
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Quotes
# =============================================================================

@pytest.mark.django_db
class TestQuoteCreate:
    """Tests for POST /api/invoicing/quotes/"""

    def test_create_quote(self, authenticated_client, parties):
        url = reverse('invoicing:quote-list')
        response = authenticated_client.post(url, _quote_payload(), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['quote_number'].startswith('Q-')
        assert response.data['status'] == 'Draft'
        assert response.data['customer'] == '7K3B9'
        assert response.data['total_amount'] == '396.00'
        assert [li['sku'] for li in response.data['line_items']] == ['PR-WDG42', 'PR-HRS77']

    def test_empty_line_items(self, authenticated_client, parties):
        url = reverse('invoicing:quote-list')
        response = authenticated_client.post(url, _quote_payload(line_items=[]), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'line_items' in response.data

    def test_percentage_out_of_range(self, authenticated_client, parties):
        url = reverse('invoicing:quote-list')
        response = authenticated_client.post(url, _quote_payload(tax_percentage='101'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'tax_percentage' in response.data

    def test_expiry_before_issue(self, authenticated_client, parties):
        url = reverse('invoicing:quote-list')
        response = authenticated_client.post(
            url, _quote_payload(issue_date='2024-06-10', expiry_date='2024-06-01'), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'expiry_date' in response.data

    def test_deleted_customer(self, authenticated_client, parties, deleted_customer):
        url = reverse('invoicing:quote-list')
        response = authenticated_client.post(url, _quote_payload(customer='9ZZ88'), format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_rate_unavailable(self, authenticated_client, parties, patched_resolver, rate_source):
        rate_source.fail = True
        url = reverse('invoicing:quote-list')
        response = authenticated_client.post(url, _quote_payload(currency_code='JPY'), format='json')

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert not Quote.objects.exists()

    def test_requires_authentication(self, api_client):
        response = api_client.post(reverse('invoicing:quote-list'), _quote_payload(), format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestQuoteList:
    """Tests for GET /api/invoicing/quotes/"""

    def test_filters(self, authenticated_client, quote):
        url = reverse('invoicing:quote-list')

        assert authenticated_client.get(url, {'status': 'Draft'}).data['count'] == 1
        assert authenticated_client.get(url, {'status': 'Sent'}).data['count'] == 0
        assert authenticated_client.get(url, {'customer': '7k3b9'}).data['count'] == 1
        assert authenticated_client.get(url, {'date_to': '2000-01-01'}).data['count'] == 0

    def test_invalid_date_range(self, authenticated_client, quote):
        url = reverse('invoicing:quote-list')
        response = authenticated_client.get(url, {'date_from': '2024-06-02', 'date_to': '2024-06-01'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_invalid_status_filter(self, authenticated_client, quote):
        response = authenticated_client.get(reverse('invoicing:quote-list'), {'status': 'Paid'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_deleted_quotes_hidden(self, authenticated_client, quote):
        quote.soft_delete()

        response = authenticated_client.get(reverse('invoicing:quote-list'))

        assert response.data['count'] == 0


@pytest.mark.django_db
class TestQuoteDetail:
    """Tests for /api/invoicing/quotes/{id}/"""

    def test_retrieve(self, authenticated_client, quote):
        url = reverse('invoicing:quote-detail', kwargs={'pk': quote.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['quote_number'] == quote.quote_number
        assert len(response.data['line_items']) == 2

    def test_patch_line_items(self, authenticated_client, quote):
        hours_line = quote.line_items.get(product__sku='PR-HRS77')
        url = reverse('invoicing:quote-detail', kwargs={'pk': quote.id})

        response = authenticated_client.patch(url, {
            'line_items': [{'id': str(hours_line.id), 'sku': 'PR-HRS77', 'quantity': 1}],
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['line_items']) == 1
        assert response.data['subtotal_amount'] == '150.00'
        assert response.data['total_amount'] == '180.00'

    def test_patch_locked_quote(self, authenticated_client, quote):
        update_quote_status(quote_id=quote.id, status='Accepted')
        url = reverse('invoicing:quote-detail', kwargs={'pk': quote.id})

        response = authenticated_client.patch(url, {'notes': 'x'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_delete_is_soft(self, authenticated_client, quote):
        url = reverse('invoicing:quote-detail', kwargs={'pk': quote.id})

        assert authenticated_client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        assert authenticated_client.get(url).status_code == status.HTTP_404_NOT_FOUND
        assert Quote.objects.filter(id=quote.id).exists()

    def test_status_action(self, authenticated_client, quote):
        url = reverse('invoicing:quote-status', kwargs={'pk': quote.id})

        response = authenticated_client.post(url, {'status': 'Sent'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'Sent'

    def test_status_action_rejects_invoice_status(self, authenticated_client, quote):
        url = reverse('invoicing:quote-status', kwargs={'pk': quote.id})

        response = authenticated_client.post(url, {'status': 'Paid'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_convert_action(self, authenticated_client, quote):
        update_quote_status(quote_id=quote.id, status='Accepted')
        url = reverse('invoicing:quote-convert', kwargs={'pk': quote.id})

        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['invoice_number'].startswith('INV-')
        assert response.data['source_quote'] == str(quote.id)

    def test_convert_draft_quote(self, authenticated_client, quote):
        url = reverse('invoicing:quote-convert', kwargs={'pk': quote.id})

        response = authenticated_client.post(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Invoice.objects.exists()

    def test_pdf(self, authenticated_client, quote):
        url = reverse('invoicing:quote-pdf', kwargs={'pk': quote.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'application/pdf'
        assert response['Content-Disposition'] == f'inline; filename="{quote.quote_number}.pdf"'
        assert response.content.startswith(b'%PDF')


# =============================================================================
# Invoices
# =============================================================================

@pytest.mark.django_db
class TestInvoiceEndpoints:
    """Tests for /api/invoicing/invoices/"""

    def test_create_invoice(self, authenticated_client, parties, payment_source):
        url = reverse('invoicing:invoice-list')
        response = authenticated_client.post(url, _quote_payload(due_date='2099-01-31'), format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['invoice_number'].startswith('INV-')
        assert response.data['due_date'] == '2099-01-31'
        assert response.data['payment_source'] == str(payment_source.id)

    def test_mismatched_payment_source(self, authenticated_client, parties, other_payment_source):
        url = reverse('invoicing:invoice-list')
        response = authenticated_client.post(
            url, _quote_payload(payment_source=str(other_payment_source.id)), format='json'
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_list_filters_by_status(self, authenticated_client, invoice):
        update_invoice_status(invoice_id=invoice.id, status='Sent')
        url = reverse('invoicing:invoice-list')

        assert authenticated_client.get(url, {'status': 'Sent'}).data['count'] == 1
        assert authenticated_client.get(url, {'status': 'Paid'}).data['count'] == 0

    def test_paid_invoice_is_locked(self, authenticated_client, invoice):
        update_invoice_status(invoice_id=invoice.id, status='Paid')
        url = reverse('invoicing:invoice-detail', kwargs={'pk': invoice.id})

        response = authenticated_client.patch(url, {'tax_percentage': '0'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_patch_due_date_before_issue_date(self, authenticated_client, invoice):
        url = reverse('invoicing:invoice-detail', kwargs={'pk': invoice.id})
        earlier = (invoice.issue_date - timedelta(days=1)).isoformat()

        response = authenticated_client.patch(url, {'due_date': earlier}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_status_action(self, authenticated_client, invoice):
        url = reverse('invoicing:invoice-status', kwargs={'pk': invoice.id})

        response = authenticated_client.post(url, {'status': 'Paid'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'Paid'

    def test_pdf(self, authenticated_client, invoice):
        url = reverse('invoicing:invoice-pdf', kwargs={'pk': invoice.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'application/pdf'
        assert invoice.invoice_number in response['Content-Disposition']

    def test_pdf_of_deleted_invoice(self, authenticated_client, invoice):
        invoice.soft_delete()
        url = reverse('invoicing:invoice-pdf', kwargs={'pk': invoice.id})

        assert authenticated_client.get(url).status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Totals preview
# =============================================================================

@pytest.mark.django_db
class TestPreviewTotals:
    """Tests for POST /api/invoicing/totals/"""

    def test_preview(self, authenticated_client):
        url = reverse('invoicing:preview-totals')
        response = authenticated_client.post(url, {
            'line_items': [
                {'quantity': 3, 'unit_price': '10.00'},
                {'quantity': 2, 'unit_price': '150.00'},
            ],
            'discount_percentage': '10',
            'tax_percentage': '20',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['line_totals'] == ['30.00', '300.00']
        assert response.data['subtotal'] == '330.00'
        assert response.data['discount'] == '33.00'
        assert response.data['tax'] == '59.40'
        assert response.data['total'] == '356.40'

    def test_defaults_to_no_discount_or_tax(self, authenticated_client):
        url = reverse('invoicing:preview-totals')
        response = authenticated_client.post(url, {
            'line_items': [{'quantity': 1, 'unit_price': '9.99'}],
        }, format='json')

        assert response.data['total'] == '9.99'

    def test_rejects_bad_percentage(self, authenticated_client):
        url = reverse('invoicing:preview-totals')
        response = authenticated_client.post(url, {
            'line_items': [], 'discount_percentage': '-5',
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
