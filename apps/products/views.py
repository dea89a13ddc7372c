from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.exchange.services import ExchangeRateUnavailableError
from .models import Product
from .serializers import (
    ProductSerializer,
    ProductListSerializer,
    ProductWriteSerializer,
    ProductFilterSerializer,
    PriceQuerySerializer,
    PriceResponseSerializer,
    NextSkuSerializer,
)
from .services import (
    create_product,
    update_product,
    soft_delete_product,
    search_products,
    generate_sku,
    price_for_currency,
    ProductNotFoundError,
    SkuGenerationError,
    InvalidAdditionalPriceError,
)


class ProductPagination(PageNumberPagination):
    """Custom pagination for products."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class ProductViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Product CRUD operations, addressed by SKU.

    list: Active products (?search=, ?status=)
    create: Create a product in the current base currency
    retrieve: Get a product with its additional prices
    update / partial_update: Update a product
    destroy: Soft delete a product
    price: Unit price in a given currency
    next_sku: Preview an unused SKU
    """

    queryset = Product.objects.active().prefetch_related('additional_prices')
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = ProductPagination
    lookup_field = 'sku'

    @extend_schema(
        parameters=[
            OpenApiParameter('search', OpenApiTypes.STR, description='Name, SKU or description'),
            OpenApiParameter('status', OpenApiTypes.STR, description='Active or Inactive'),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = ProductFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return search_products(**filter_serializer.validated_data)

    def get_object(self):
        self.kwargs[self.lookup_field] = self.kwargs[self.lookup_field].upper()
        return super().get_object()

    def get_serializer_class(self):
        if self.action == 'list':
            return ProductListSerializer
        if self.action in ['create', 'update', 'partial_update']:
            return ProductWriteSerializer
        return ProductSerializer

    @extend_schema(request=ProductWriteSerializer, responses={201: ProductSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            product = create_product(**serializer.validated_data)
        except InvalidAdditionalPriceError as e:
            return Response({'additional_prices': [str(e)]}, status=status.HTTP_400_BAD_REQUEST)
        except SkuGenerationError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(
            ProductSerializer(product).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=ProductWriteSerializer, responses={200: ProductSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            product = update_product(sku=kwargs[self.lookup_field], data=serializer.validated_data)
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InvalidAdditionalPriceError as e:
            return Response({'additional_prices': [str(e)]}, status=status.HTTP_400_BAD_REQUEST)

        return Response(ProductSerializer(product).data)

    def destroy(self, request, *args, **kwargs):
        """Soft delete a product."""
        try:
            soft_delete_product(sku=kwargs[self.lookup_field])
        except ProductNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        parameters=[OpenApiParameter('currency', OpenApiTypes.STR, required=True)],
        responses={200: PriceResponseSerializer}
    )
    @action(detail=True, methods=['get'])
    def price(self, request, sku=None):
        """Unit price of the product in ?currency=."""
        product = self.get_object()

        query = PriceQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(
                {'error': 'Invalid currency', 'details': query.errors},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            priced = price_for_currency(product, query.validated_data['currency'])
        except ExchangeRateUnavailableError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(PriceResponseSerializer({
            'sku': product.sku,
            'currency': priced.currency,
            'amount': priced.amount,
            'fx_rate': priced.fx_rate,
        }).data)

    @extend_schema(responses={200: NextSkuSerializer})
    @action(detail=False, methods=['get'], url_path='next-sku')
    def next_sku(self, request):
        """An unused SKU; it is not reserved."""
        try:
            sku = generate_sku()
        except SkuGenerationError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({'sku': sku})
