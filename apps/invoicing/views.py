from django.http import HttpResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.exchange.services import ExchangeServiceError, ExchangeRateUnavailableError
from .models import Invoice, Quote
from .serializers import (
    QuoteSerializer,
    QuoteListSerializer,
    QuoteCreateSerializer,
    QuoteUpdateSerializer,
    QuoteStatusSerializer,
    QuoteFilterSerializer,
    InvoiceSerializer,
    InvoiceListSerializer,
    InvoiceCreateSerializer,
    InvoiceUpdateSerializer,
    InvoiceStatusSerializer,
    InvoiceFilterSerializer,
    TotalsPreviewSerializer,
    TotalsResponseSerializer,
)
from .services import (
    create_quote,
    get_quote_by_id,
    list_quotes,
    update_quote,
    update_quote_status,
    soft_delete_quote,
    convert_quote_to_invoice,
    create_invoice,
    get_invoice_by_id,
    list_invoices,
    update_invoice,
    update_invoice_status,
    soft_delete_invoice,
    calculate_line_total,
    calculate_totals,
    render_quote_pdf,
    render_invoice_pdf,
    InvoicingServiceError,
    QuoteNotFoundError,
    InvoiceNotFoundError,
)

DOCUMENT_FILTER_PARAMETERS = [
    OpenApiParameter('status', OpenApiTypes.STR, description='Filter by status'),
    OpenApiParameter('customer', OpenApiTypes.STR, description='Customer public ID'),
    OpenApiParameter('date_from', OpenApiTypes.DATE, description='Issued on or after'),
    OpenApiParameter('date_to', OpenApiTypes.DATE, description='Issued on or before'),
]


def _error_response(error):
    """Map a service error to an HTTP status."""
    if isinstance(error, (QuoteNotFoundError, InvoiceNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ExchangeRateUnavailableError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(error)}, status=code)


def _pdf_response(pdf_bytes, number):
    response = HttpResponse(pdf_bytes, content_type='application/pdf')
    response['Content-Disposition'] = f'inline; filename="{number}.pdf"'
    return response


class DocumentPagination(PageNumberPagination):
    """Custom pagination for quotes and invoices."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class QuoteViewSet(viewsets.ModelViewSet):
    """
    ViewSet for quotes.

    list: Active quotes (?status=&customer=&date_from=&date_to=)
    create: Create a draft quote
    retrieve: Get a quote with line items
    update / partial_update: Edit a quote and sync its line items
    destroy: Soft delete a quote
    status: Change the status
    convert: Turn an accepted quote into an invoice
    pdf: Download the quote as PDF
    """

    queryset = Quote.objects.active()
    serializer_class = QuoteSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = DocumentPagination
    lookup_value_regex = '[0-9a-f-]{36}'

    @extend_schema(parameters=DOCUMENT_FILTER_PARAMETERS)
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = QuoteFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return list_quotes(**filter_serializer.validated_data)

    def get_serializer_class(self):
        if self.action == 'list':
            return QuoteListSerializer
        if self.action == 'create':
            return QuoteCreateSerializer
        if self.action in ['update', 'partial_update']:
            return QuoteUpdateSerializer
        if self.action == 'change_status':
            return QuoteStatusSerializer
        return QuoteSerializer

    def retrieve(self, request, *args, **kwargs):
        try:
            quote = get_quote_by_id(quote_id=kwargs['pk'])
        except QuoteNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(QuoteSerializer(quote).data)

    @extend_schema(request=QuoteCreateSerializer, responses={201: QuoteSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            quote = create_quote(**serializer.validated_data)
        except (InvoicingServiceError, ExchangeServiceError) as e:
            return _error_response(e)

        return Response(
            QuoteSerializer(get_quote_by_id(quote_id=quote.id)).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=QuoteUpdateSerializer, responses={200: QuoteSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            quote = update_quote(quote_id=kwargs['pk'], data=serializer.validated_data)
        except (InvoicingServiceError, ExchangeServiceError) as e:
            return _error_response(e)

        return Response(QuoteSerializer(get_quote_by_id(quote_id=quote.id)).data)

    def destroy(self, request, *args, **kwargs):
        """Soft delete a quote."""
        try:
            soft_delete_quote(quote_id=kwargs['pk'])
        except QuoteNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=QuoteStatusSerializer, responses={200: QuoteSerializer})
    @action(detail=True, methods=['post'], url_path='status', url_name='status')
    def change_status(self, request, pk=None):
        serializer = QuoteStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            quote = update_quote_status(quote_id=pk, status=serializer.validated_data['status'])
        except InvoicingServiceError as e:
            return _error_response(e)

        return Response(QuoteSerializer(get_quote_by_id(quote_id=quote.id)).data)

    @extend_schema(request=None, responses={201: InvoiceSerializer})
    @action(detail=True, methods=['post'])
    def convert(self, request, pk=None):
        """Create an invoice from an accepted quote."""
        try:
            invoice = convert_quote_to_invoice(quote_id=pk)
        except (InvoicingServiceError, ExchangeServiceError) as e:
            return _error_response(e)

        return Response(
            InvoiceSerializer(get_invoice_by_id(invoice_id=invoice.id)).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(responses={(200, 'application/pdf'): OpenApiTypes.BINARY})
    @action(detail=True, methods=['get'])
    def pdf(self, request, pk=None):
        try:
            quote = get_quote_by_id(quote_id=pk)
        except QuoteNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return _pdf_response(render_quote_pdf(quote), quote.quote_number)


class InvoiceViewSet(viewsets.ModelViewSet):
    """
    ViewSet for invoices.

    list: Active invoices (?status=&customer=&date_from=&date_to=)
    create: Create a draft invoice
    retrieve: Get an invoice with line items
    update / partial_update: Edit an invoice and sync its line items
    destroy: Soft delete an invoice
    status: Change the status
    pdf: Download the invoice as PDF
    """

    queryset = Invoice.objects.active()
    serializer_class = InvoiceSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = DocumentPagination
    lookup_value_regex = '[0-9a-f-]{36}'

    @extend_schema(parameters=DOCUMENT_FILTER_PARAMETERS)
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = InvoiceFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return list_invoices(**filter_serializer.validated_data)

    def get_serializer_class(self):
        if self.action == 'list':
            return InvoiceListSerializer
        if self.action == 'create':
            return InvoiceCreateSerializer
        if self.action in ['update', 'partial_update']:
            return InvoiceUpdateSerializer
        if self.action == 'change_status':
            return InvoiceStatusSerializer
        return InvoiceSerializer

    def retrieve(self, request, *args, **kwargs):
        try:
            invoice = get_invoice_by_id(invoice_id=kwargs['pk'])
        except InvoiceNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(InvoiceSerializer(invoice).data)

    @extend_schema(request=InvoiceCreateSerializer, responses={201: InvoiceSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            invoice = create_invoice(**serializer.validated_data)
        except (InvoicingServiceError, ExchangeServiceError) as e:
            return _error_response(e)

        return Response(
            InvoiceSerializer(get_invoice_by_id(invoice_id=invoice.id)).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=InvoiceUpdateSerializer, responses={200: InvoiceSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            invoice = update_invoice(invoice_id=kwargs['pk'], data=serializer.validated_data)
        except (InvoicingServiceError, ExchangeServiceError) as e:
            return _error_response(e)

        return Response(InvoiceSerializer(get_invoice_by_id(invoice_id=invoice.id)).data)

    def destroy(self, request, *args, **kwargs):
        """Soft delete an invoice."""
        try:
            soft_delete_invoice(invoice_id=kwargs['pk'])
        except InvoiceNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=InvoiceStatusSerializer, responses={200: InvoiceSerializer})
    @action(detail=True, methods=['post'], url_path='status', url_name='status')
    def change_status(self, request, pk=None):
        serializer = InvoiceStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            invoice = update_invoice_status(invoice_id=pk, status=serializer.validated_data['status'])
        except InvoicingServiceError as e:
            return _error_response(e)

        return Response(InvoiceSerializer(get_invoice_by_id(invoice_id=invoice.id)).data)

    @extend_schema(responses={(200, 'application/pdf'): OpenApiTypes.BINARY})
    @action(detail=True, methods=['get'])
    def pdf(self, request, pk=None):
        try:
            invoice = get_invoice_by_id(invoice_id=pk)
        except InvoiceNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return _pdf_response(render_invoice_pdf(invoice), invoice.invoice_number)


@extend_schema(
    request=TotalsPreviewSerializer,
    responses={200: TotalsResponseSerializer},
    description="Compute document totals for unsaved line items.",
    tags=['invoicing'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def preview_totals(request):
    serializer = TotalsPreviewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    line_totals = [
        calculate_line_total(line['quantity'], line['unit_price'])
        for line in data['line_items']
    ]
    totals = calculate_totals(line_totals, data['discount_percentage'], data['tax_percentage'])

    return Response(TotalsResponseSerializer({
        'line_totals': line_totals,
        'subtotal': totals.subtotal,
        'discount': totals.discount,
        'tax': totals.tax,
        'total': totals.total,
    }).data)
