from rest_framework import viewsets, status
from rest_framework.decorators import api_view, permission_classes, action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .models import IssuingEntity, PaymentSource
from .serializers import (
    AppSettingsSerializer,
    IssuingEntitySerializer,
    IssuingEntityCreateSerializer,
    PaymentSourceSerializer,
    PaymentSourceWriteSerializer,
    PaymentSourceFilterSerializer,
)
from .services import (
    get_app_settings,
    update_app_settings,
    create_issuing_entity,
    update_issuing_entity,
    delete_issuing_entity,
    list_payment_sources,
    create_payment_source,
    update_payment_source,
    delete_payment_source,
    IssuingEntityNotFoundError,
    EntityInUseError,
    PaymentSourceNotFoundError,
    PaymentSourceInUseError,
)


@extend_schema(
    request=AppSettingsSerializer,
    responses={200: AppSettingsSerializer},
    description="Read or update system-wide defaults (base currency, tax, terms, notes).",
    tags=['settings'],
)
@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsAuthenticated])
def app_settings(request):
    """AppSettings singleton - PUT behaves like PATCH."""
    current = get_app_settings()
    if request.method == 'GET':
        return Response(AppSettingsSerializer(current).data)

    serializer = AppSettingsSerializer(current, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    updated = update_app_settings(data=serializer.validated_data)
    return Response(AppSettingsSerializer(updated).data)


class IssuingEntityViewSet(viewsets.ModelViewSet):
    """
    ViewSet for issuing entities.

    list: All entities, alphabetical
    create: Create an entity (first one becomes primary)
    retrieve / update / partial_update: Manage an entity
    destroy: Delete an entity unless documents use it
    """

    queryset = IssuingEntity.objects.prefetch_related('payment_sources')
    serializer_class = IssuingEntitySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return IssuingEntityCreateSerializer
        return IssuingEntitySerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        entity = create_issuing_entity(**serializer.validated_data)
        return Response(
            IssuingEntitySerializer(entity).data,
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            entity = update_issuing_entity(entity_id=instance.id, data=serializer.validated_data)
        except IssuingEntityNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(IssuingEntitySerializer(entity).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_issuing_entity(entity_id=kwargs.get('pk'))
        except IssuingEntityNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except EntityInUseError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: PaymentSourceSerializer(many=True)})
    @action(detail=True, methods=['get'], url_path='payment-sources')
    def payment_sources(self, request, pk=None):
        """
        Payment sources of one entity.

        GET /api/settings/entities/{id}/payment-sources/
        """
        entity = self.get_object()
        sources = list_payment_sources(entity_id=entity.id)
        return Response(PaymentSourceSerializer(sources, many=True).data)


class PaymentSourceViewSet(viewsets.ModelViewSet):
    """
    ViewSet for payment sources.

    list: All sources (filter with ?entity=<uuid>)
    create: Create a source (first per entity becomes primary)
    retrieve / update / partial_update: Manage a source
    destroy: Delete a source unless documents use it
    """

    queryset = PaymentSource.objects.select_related('issuing_entity')
    serializer_class = PaymentSourceSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None
    lookup_value_regex = '[0-9a-f-]{36}'

    @extend_schema(
        parameters=[OpenApiParameter('entity', OpenApiTypes.UUID, description='Issuing entity ID')]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = PaymentSourceFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return list_payment_sources(entity_id=filter_serializer.validated_data.get('entity'))

    def get_serializer_class(self):
        if self.action in ['create', 'update', 'partial_update']:
            return PaymentSourceWriteSerializer
        return PaymentSourceSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            source = create_payment_source(**serializer.validated_data)
        except IssuingEntityNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            PaymentSourceSerializer(source).data,
            status=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            source = update_payment_source(source_id=instance.id, data=serializer.validated_data)
        except PaymentSourceNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PaymentSourceInUseError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PaymentSourceSerializer(source).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_payment_source(source_id=kwargs.get('pk'))
        except PaymentSourceNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except PaymentSourceInUseError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(status=status.HTTP_204_NO_CONTENT)
