from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from apps.accounts.permissions import IsNGOStaff
from apps.common.exceptions import LedgerError
from apps.common.responses import ledger_error_response

from .models import WarehouseStockItem
from .serializers import (
    ConsistencyResponseSerializer,
    DistributeInputSerializer,
    StockItemFilterSerializer,
    StockMovementSerializer,
    WarehouseStockItemSerializer,
)
from .services import check_stock_item_consistency, debit_for_distribution


class StockPagination(PageNumberPagination):
    """Custom pagination for stock items and movements."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class WarehouseStockItemViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Warehouse stock, visible to NGO staff.

    Stock items are created by verification and changed only through
    the ledger actions below.

    list: Get stock items (optional ?status=, ?category=)
    retrieve: Get a specific stock item
    """

    serializer_class = WarehouseStockItemSerializer
    permission_classes = [IsAuthenticated, IsNGOStaff]
    pagination_class = StockPagination

    def get_queryset(self):
        queryset = WarehouseStockItem.objects.all()
        if self.action != 'list':
            return queryset

        filters = StockItemFilterSerializer(data=self.request.query_params)
        filters.is_valid(raise_exception=True)
        if 'status' in filters.validated_data:
            queryset = queryset.with_derived_status(filters.validated_data['status'])
        if 'category' in filters.validated_data:
            queryset = queryset.filter(category=filters.validated_data['category'])
        return queryset

    @extend_schema(
        parameters=[
            OpenApiParameter(name='status', type=str, required=False),
            OpenApiParameter(name='category', type=str, required=False),
        ],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(
        request=DistributeInputSerializer,
        responses={200: WarehouseStockItemSerializer},
    )
    @action(detail=True, methods=['post'])
    def distribute(self, request, pk=None):
        """Hand stock out directly and decrement the available balance."""
        serializer = DistributeInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            item = debit_for_distribution(
                item_id=pk,
                quantity=serializer.validated_data['quantity'],
                note=serializer.validated_data.get('note', ''),
                performed_by=request.user,
            )
        except LedgerError as e:
            return ledger_error_response(e)

        return Response(WarehouseStockItemSerializer(item).data)

    @extend_schema(responses={200: StockMovementSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def movements(self, request, pk=None):
        """Movement ledger of a stock item, newest first."""
        item = self.get_object()
        movements = item.movements.select_related('performed_by')

        page = self.paginate_queryset(movements)
        if page is not None:
            serializer = StockMovementSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(StockMovementSerializer(movements, many=True).data)

    @extend_schema(responses={200: ConsistencyResponseSerializer})
    @action(detail=True, methods=['get'])
    def consistency(self, request, pk=None):
        """Reconcile the item's balances against its movements."""
        item = self.get_object()
        issues = check_stock_item_consistency(item)
        return Response({'consistent': not issues, 'issues': issues})
