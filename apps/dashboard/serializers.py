"""
Serializers for the dashboard app.

Input Serializers:
    MarketplaceQuerySerializer - Validates the optional machine filter

Response Serializers:
    NGOOverviewSerializer - Review queue, stock and marketplace panels
    DonorSummarySerializer - A donor's own requests
    MarketplaceSummarySerializer - Allocation statuses, claims and views
    InventorySummarySerializer - Ledger totals and conservation check
"""

from rest_framework import serializers


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class MarketplaceQuerySerializer(serializers.Serializer):
    """
    Query Parameters:
        machine (str): Restrict figures to one machine
    """

    machine = serializers.CharField(max_length=64, required=False)


# =============================================================================
# Response Serializers (API Documentation)
# =============================================================================

class StatusCountsField(serializers.DictField):
    """Mapping of status value to row count."""

    child = serializers.IntegerField()


class MarketplaceFiguresSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    by_status = StatusCountsField()
    total_claims = serializers.IntegerField()
    total_views = serializers.IntegerField()


class MarketplaceSummarySerializer(MarketplaceFiguresSerializer):
    machine = serializers.CharField(allow_null=True)


class StockFiguresSerializer(serializers.Serializer):
    by_status = StatusCountsField()
    total_available = serializers.IntegerField()


class NGOOverviewSerializer(serializers.Serializer):
    requests = StatusCountsField()
    stock = StockFiguresSerializer()
    marketplace = MarketplaceFiguresSerializer()


class DonorSummarySerializer(serializers.Serializer):
    total_donations = serializers.IntegerField()
    by_status = StatusCountsField()
    active = serializers.IntegerField()
    verified_quantity = serializers.IntegerField()
    estimated_meals = serializers.IntegerField()


class InventorySummarySerializer(serializers.Serializer):
    total = serializers.IntegerField()
    available = serializers.IntegerField()
    distributed = serializers.IntegerField()
    allocated = serializers.IntegerField()
    conservation_holds = serializers.BooleanField()
    by_status = StatusCountsField()
