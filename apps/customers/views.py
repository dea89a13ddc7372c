from rest_framework import viewsets, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from .models import Customer
from .serializers import (
    CustomerSerializer,
    CustomerListSerializer,
    CustomerWriteSerializer,
    CustomerFilterSerializer,
)
from .services import (
    create_customer,
    update_customer,
    soft_delete_customer,
    search_customers,
    CustomerNotFoundError,
    DuplicateCustomerEmailError,
    CustomerIdGenerationError,
)


class CustomerPagination(PageNumberPagination):
    """Custom pagination for customers."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class CustomerViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Customer CRUD operations, addressed by public customer ID.

    list: Active customers (search by name, email or ID)
    create: Create a customer
    retrieve: Get a customer
    update / partial_update: Update a customer
    destroy: Soft delete a customer
    """

    queryset = Customer.objects.active()
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = CustomerPagination
    lookup_field = 'public_customer_id'

    @extend_schema(
        parameters=[
            OpenApiParameter('search', OpenApiTypes.STR, description='Name, email or public ID'),
            OpenApiParameter('currency', OpenApiTypes.STR, description='Preferred currency'),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def get_queryset(self):
        if self.action != 'list':
            return super().get_queryset()

        filter_serializer = CustomerFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return search_customers(**filter_serializer.validated_data)

    def get_object(self):
        key = self.kwargs[self.lookup_field].upper()
        self.kwargs[self.lookup_field] = key
        return super().get_object()

    def get_serializer_class(self):
        if self.action == 'list':
            return CustomerListSerializer
        if self.action in ['create', 'update', 'partial_update']:
            return CustomerWriteSerializer
        return CustomerSerializer

    @extend_schema(request=CustomerWriteSerializer, responses={201: CustomerSerializer})
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            customer = create_customer(**serializer.validated_data)
        except DuplicateCustomerEmailError as e:
            return Response({'email': [str(e)]}, status=status.HTTP_400_BAD_REQUEST)
        except CustomerIdGenerationError as e:
            return Response({'error': str(e)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response(
            CustomerSerializer(customer).data,
            status=status.HTTP_201_CREATED
        )

    @extend_schema(request=CustomerWriteSerializer, responses={200: CustomerSerializer})
    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        try:
            customer = update_customer(
                public_customer_id=kwargs[self.lookup_field],
                data=serializer.validated_data
            )
        except CustomerNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except DuplicateCustomerEmailError as e:
            return Response({'email': [str(e)]}, status=status.HTTP_400_BAD_REQUEST)

        return Response(CustomerSerializer(customer).data)

    def destroy(self, request, *args, **kwargs):
        """Soft delete a customer."""
        try:
            soft_delete_customer(public_customer_id=kwargs[self.lookup_field])
        except CustomerNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(status=status.HTTP_204_NO_CONTENT)
