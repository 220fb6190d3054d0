from rest_framework import serializers
from apps.accounts.serializers import UserMinimalSerializer
from .models import FoodCategory, StockMovement, StockStatus, WarehouseStockItem


# =============================================================================
# Input Serializers
# =============================================================================

class StockItemFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for stock item listing.

    Query Parameters:
        status (str): Derived status (available, low, expired)
        category (str): Food category
    """

    status = serializers.ChoiceField(choices=StockStatus.choices, required=False)
    category = serializers.ChoiceField(choices=FoodCategory.choices, required=False)


class DistributeInputSerializer(serializers.Serializer):
    """Validate input for a direct distribution."""

    quantity = serializers.IntegerField(min_value=1)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================

class WarehouseStockItemSerializer(serializers.ModelSerializer):
    """Stock item with its derived status."""

    status = serializers.CharField(read_only=True)

    class Meta:
        model = WarehouseStockItem
        fields = [
            'id',
            'food_name',
            'category',
            'units',
            'total_quantity',
            'available_quantity',
            'distributed_quantity',
            'allocated_quantity',
            'expiration_date',
            'donor_name',
            'location',
            'status',
            'date_added',
            'updated_at',
        ]
        read_only_fields = fields


class StockMovementSerializer(serializers.ModelSerializer):
    performed_by = UserMinimalSerializer(read_only=True)

    class Meta:
        model = StockMovement
        fields = [
            'id',
            'kind',
            'quantity',
            'balance_after',
            'donation_request',
            'allocation_ref',
            'note',
            'performed_by',
            'created_at',
        ]
        read_only_fields = fields


class ConsistencyResponseSerializer(serializers.Serializer):
    consistent = serializers.BooleanField()
    issues = serializers.ListField(child=serializers.CharField())
