from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.accounts.permissions import IsNGOStaff

from .aggregates import DashboardQueries
from .serializers import (
    DonorSummarySerializer,
    InventorySummarySerializer,
    MarketplaceQuerySerializer,
    MarketplaceSummarySerializer,
    NGOOverviewSerializer,
)


@extend_schema(
    responses={200: NGOOverviewSerializer},
    description="Review queue, stock and marketplace counts for NGO staff.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsNGOStaff])
def ngo_overview(request):
    """NGO overview - thin HTTP handler."""
    return Response(DashboardQueries.ngo_overview())


@extend_schema(
    responses={200: DonorSummarySerializer},
    description="Summary of the current user's donation requests.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def donor_summary(request):
    """Donor summary for the current user - thin HTTP handler."""
    return Response(DashboardQueries.donor_summary(request.user))


@extend_schema(
    parameters=[
        OpenApiParameter('machine', OpenApiTypes.STR, description='Machine ID'),
    ],
    responses={200: MarketplaceSummarySerializer},
    description="Allocation counts by status with claim and view totals.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def marketplace_summary(request):
    """Marketplace summary - thin HTTP handler."""
    query_serializer = MarketplaceQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    data = DashboardQueries.marketplace_summary(
        machine_id=query_serializer.validated_data.get('machine'),
    )
    return Response(data)


@extend_schema(
    responses={200: InventorySummarySerializer},
    description="Ledger column totals and the conservation check.",
    tags=['dashboard'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsNGOStaff])
def inventory_summary(request):
    """Inventory summary - thin HTTP handler."""
    return Response(DashboardQueries.inventory_summary())
