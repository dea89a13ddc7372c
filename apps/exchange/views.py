from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .models import ExchangeRate
from .serializers import (
    RateQuerySerializer,
    ConvertQuerySerializer,
    ExchangeRateOverrideCreateSerializer,
    RateResponseSerializer,
    ConvertResponseSerializer,
    ExchangeRateSerializer,
    ErrorSerializer,
)
from .services import (
    lookup_exchange_rate,
    create_rate_override,
    delete_rate_override,
    ExchangeRateUnavailableError,
    UnsupportedCurrencyError,
    InvalidRateOverrideError,
)
from .money import quantize_money


def _rate_payload(base, target, resolved):
    return {
        'base': base,
        'target': target,
        'rate': resolved.rate,
        'date': resolved.observation_date or timezone.localdate(),
    }


@extend_schema(
    parameters=[
        OpenApiParameter('base', OpenApiTypes.STR, required=True, description='Currency to convert from'),
        OpenApiParameter('target', OpenApiTypes.STR, required=True, description='Currency to convert to'),
    ],
    responses={
        200: RateResponseSerializer,
        400: ErrorSerializer,
        503: ErrorSerializer,
    },
    description="Get the exchange rate from base to target (ECB reference rates, 6 dp).",
    tags=['fx'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def exchange_rate(request):
    """Rate lookup - thin HTTP handler."""
    query = RateQuerySerializer(data=request.query_params)
    if not query.is_valid():
        return Response(
            {'error': 'Missing or unsupported currency', 'details': query.errors},
            status=status.HTTP_400_BAD_REQUEST
        )
    base = query.validated_data['base']
    target = query.validated_data['target']

    try:
        resolved = lookup_exchange_rate(base, target)
    except UnsupportedCurrencyError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except ExchangeRateUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(RateResponseSerializer(_rate_payload(base, target, resolved)).data)


@extend_schema(
    parameters=[
        OpenApiParameter('base', OpenApiTypes.STR, required=True),
        OpenApiParameter('target', OpenApiTypes.STR, required=True),
        OpenApiParameter('amount', OpenApiTypes.DECIMAL, required=True),
    ],
    responses={
        200: ConvertResponseSerializer,
        400: ErrorSerializer,
        503: ErrorSerializer,
    },
    description="Convert an amount between currencies, rounded to cents.",
    tags=['fx'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def convert(request):
    """Amount conversion - thin HTTP handler."""
    query = ConvertQuerySerializer(data=request.query_params)
    if not query.is_valid():
        return Response(
            {'error': 'Missing or invalid conversion parameters', 'details': query.errors},
            status=status.HTTP_400_BAD_REQUEST
        )
    params = query.validated_data

    try:
        resolved = lookup_exchange_rate(params['base'], params['target'])
    except ExchangeRateUnavailableError as e:
        return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

    payload = _rate_payload(params['base'], params['target'], resolved)
    payload['amount'] = params['amount']
    payload['converted'] = quantize_money(params['amount'] * resolved.rate)
    return Response(ConvertResponseSerializer(payload).data)


class OverridePagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ExchangeRateOverrideViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Manual exchange rates that take precedence over the ECB feed.

    list: All overrides, newest first (filter with ?from_currency=&to_currency=)
    create: Record a new override
    retrieve: Get one override
    destroy: Remove an override
    """

    queryset = ExchangeRate.objects.select_related('created_by')
    serializer_class = ExchangeRateSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = OverridePagination
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_queryset(self):
        queryset = super().get_queryset()
        from_currency = self.request.query_params.get('from_currency')
        to_currency = self.request.query_params.get('to_currency')
        if from_currency:
            queryset = queryset.filter(from_currency=from_currency.upper())
        if to_currency:
            queryset = queryset.filter(to_currency=to_currency.upper())
        return queryset

    def get_serializer_class(self):
        if self.action == 'create':
            return ExchangeRateOverrideCreateSerializer
        return ExchangeRateSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            override = create_rate_override(
                created_by=request.user,
                **serializer.validated_data
            )
        except (UnsupportedCurrencyError, InvalidRateOverrideError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            ExchangeRateSerializer(override).data,
            status=status.HTTP_201_CREATED
        )

    def destroy(self, request, *args, **kwargs):
        if not delete_rate_override(override_id=kwargs.get('pk')):
            return Response({'error': 'Override not found'}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)
