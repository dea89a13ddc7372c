from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.exchange.services import ExchangeRateUnavailableError
from .queries import DashboardQueries
from .serializers import (
    # Input serializers
    RevenueQuerySerializer,
    RecentQuerySerializer,
    # Response serializers
    KpiSerializer,
    DocumentDueSerializer,
    MonthlyRevenueSerializer,
    RecentItemSerializer,
    DashboardSummarySerializer,
    ErrorSerializer,
)


def _rate_unavailable(error):
    return Response({'error': str(error)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@extend_schema(
    responses={200: KpiSerializer, 503: ErrorSerializer},
    description="KPI cards normalized into the base currency.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def kpis(request):
    try:
        data = DashboardQueries.kpis()
    except ExchangeRateUnavailableError as e:
        return _rate_unavailable(e)

    return Response(KpiSerializer(data).data)


@extend_schema(
    responses={200: DocumentDueSerializer(many=True)},
    description="Unpaid invoices past their due date, oldest first.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def overdue_invoices(request):
    data = DashboardQueries.overdue_invoices()
    return Response(DocumentDueSerializer(data, many=True).data)


@extend_schema(
    responses={200: DocumentDueSerializer(many=True)},
    description="Sent quotes expiring within the next 7 days.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def expiring_quotes(request):
    data = DashboardQueries.expiring_quotes()
    return Response(DocumentDueSerializer(data, many=True).data)


@extend_schema(
    parameters=[
        OpenApiParameter('months', OpenApiTypes.INT, description='Number of months', default=6),
    ],
    responses={200: MonthlyRevenueSerializer(many=True), 503: ErrorSerializer},
    description="Paid invoice revenue per month in the base currency.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def monthly_revenue(request):
    query_serializer = RevenueQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        data = DashboardQueries.monthly_revenue(months=query_serializer.validated_data['months'])
    except ExchangeRateUnavailableError as e:
        return _rate_unavailable(e)

    return Response(MonthlyRevenueSerializer(data, many=True).data)


@extend_schema(
    parameters=[
        OpenApiParameter('limit', OpenApiTypes.INT, description='Number of items', default=10),
    ],
    responses={200: RecentItemSerializer(many=True)},
    description="Most recently updated invoices, quotes, customers and products.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def recently_updated(request):
    query_serializer = RecentQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    data = DashboardQueries.recently_updated(limit=query_serializer.validated_data['limit'])
    return Response(RecentItemSerializer(data, many=True).data)


@extend_schema(
    responses={200: DashboardSummarySerializer, 503: ErrorSerializer},
    description="All dashboard panels in one response.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def summary(request):
    """Everything the dashboard page needs."""
    try:
        data = DashboardQueries.summary()
    except ExchangeRateUnavailableError as e:
        return _rate_unavailable(e)

    return Response(DashboardSummarySerializer(data).data)
