from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsNGOStaffOrReadOnly
from apps.common.exceptions import LedgerError
from apps.common.responses import ledger_error_response
from apps.inventory.serializers import WarehouseStockItemSerializer

from .models import MarketplaceAllocation
from .serializers import (
    AllocationCreateSerializer,
    AllocationFilterSerializer,
    AllocationUpdateSerializer,
    ClaimInputSerializer,
    MarketplaceAllocationSerializer,
)
from .services import (
    delete_allocation,
    edit_allocation,
    post_allocation,
    record_claim,
    record_view,
)


class AllocationPagination(PageNumberPagination):
    """Custom pagination for marketplace allocations."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class MarketplaceAllocationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    ViewSet for marketplace allocations.

    Any authenticated user can browse allocations and record claims and
    views; posting, editing and deleting are for NGO staff.

    list: Get allocations (optional ?status=, ?machine=)
    create: Post stock to a machine
    retrieve: Get a specific allocation
    update/partial_update: Edit quantity, machine or details
    destroy: Remove an allocation and return unclaimed units to stock
    """

    serializer_class = MarketplaceAllocationSerializer
    permission_classes = [IsAuthenticated, IsNGOStaffOrReadOnly]
    pagination_class = AllocationPagination

    def get_queryset(self):
        queryset = MarketplaceAllocation.objects.select_related(
            'stock_item', 'machine', 'posted_by'
        )
        if self.action != 'list':
            return queryset

        filters = AllocationFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        if 'status' in filters.validated_data:
            queryset = queryset.with_derived_status(filters.validated_data['status'])
        if 'machine' in filters.validated_data:
            queryset = queryset.filter(machine_id=filters.validated_data['machine'])
        return queryset

    def get_permissions(self):
        # Claims and views come from machine users, not staff
        if self.action in ['claim', 'mark_viewed']:
            return [IsAuthenticated()]
        return super().get_permissions()

    @extend_schema(
        parameters=[
            OpenApiParameter(name='status', type=str, required=False),
            OpenApiParameter(name='machine', type=str, required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=AllocationCreateSerializer, responses={201: MarketplaceAllocationSerializer})
    def create(self, request):
        serializer = AllocationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            allocation = post_allocation(
                stock_item_id=data['stock_item'],
                machine_id=data['machine'],
                quantity=data['quantity'],
                description=data.get('description', ''),
                expiration_date=data.get('expiration_date'),
                posted_by=request.user,
            )
        except LedgerError as e:
            return ledger_error_response(e)

        return Response(
            MarketplaceAllocationSerializer(allocation).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(request=AllocationUpdateSerializer, responses={200: MarketplaceAllocationSerializer})
    def update(self, request, pk=None, partial=False):
        allocation = self.get_object()
        serializer = AllocationUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            allocation = edit_allocation(
                allocation_id=allocation.id,
                quantity=data.get('quantity'),
                machine_id=data.get('machine'),
                description=data.get('description'),
                expiration_date=data.get('expiration_date'),
                edited_by=request.user,
            )
        except LedgerError as e:
            return ledger_error_response(e)

        return Response(MarketplaceAllocationSerializer(allocation).data)

    @extend_schema(request=AllocationUpdateSerializer, responses={200: MarketplaceAllocationSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @extend_schema(responses={200: WarehouseStockItemSerializer})
    def destroy(self, request, pk=None):
        """Delete the allocation and return the updated source stock item."""
        allocation = self.get_object()

        try:
            result = delete_allocation(allocation_id=allocation.id, deleted_by=request.user)
        except LedgerError as e:
            return ledger_error_response(e)

        return Response({
            'returned_quantity': result.returned_quantity,
            'stock_item': WarehouseStockItemSerializer(result.stock_item).data,
        })

    @extend_schema(request=ClaimInputSerializer, responses={200: MarketplaceAllocationSerializer})
    @action(detail=True, methods=['post'])
    def claim(self, request, pk=None):
        """Record units taken from the machine."""
        allocation = self.get_object()
        serializer = ClaimInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            allocation = record_claim(
                allocation_id=allocation.id,
                amount=serializer.validated_data['amount'],
            )
        except LedgerError as e:
            return ledger_error_response(e)

        return Response(MarketplaceAllocationSerializer(allocation).data)

    @extend_schema(request=None, responses={200: MarketplaceAllocationSerializer})
    @action(detail=True, methods=['post'], url_path='view', url_name='view')
    def mark_viewed(self, request, pk=None):
        """Count one more look at the allocation."""
        allocation = self.get_object()

        try:
            allocation = record_view(allocation_id=allocation.id)
        except LedgerError as e:
            return ledger_error_response(e)

        return Response(MarketplaceAllocationSerializer(allocation).data)
