from rest_framework import serializers
from apps.accounts.serializers import UserMinimalSerializer
from apps.machines.models import Machine
from .models import AllocationStatus, MarketplaceAllocation


# =============================================================================
# Input Serializers
# =============================================================================

class AllocationFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for allocation listing.

    Query Parameters:
        status (str): Derived status (active, low-stock, out-of-stock, expired)
        machine (str): Machine ID
    """

    status = serializers.ChoiceField(choices=AllocationStatus.choices, required=False)
    machine = serializers.CharField(max_length=64, required=False)


class AllocationCreateSerializer(serializers.Serializer):
    """Validate input for posting stock to a machine."""

    stock_item = serializers.UUIDField()
    machine = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(min_value=1)
    description = serializers.CharField(required=False, allow_blank=True)
    expiration_date = serializers.DateField(required=False, allow_null=True)


class AllocationUpdateSerializer(serializers.Serializer):
    """
    Validate input for editing an allocation.

    Every field is optional; omitted fields keep their current value.
    """

    quantity = serializers.IntegerField(min_value=0, required=False)
    machine = serializers.CharField(max_length=64, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    expiration_date = serializers.DateField(required=False)


class ClaimInputSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1, default=1)


# =============================================================================
# Output Serializers
# =============================================================================

class MachineMinimalSerializer(serializers.ModelSerializer):
    class Meta:
        model = Machine
        fields = ['id', 'name', 'location', 'status']


class MarketplaceAllocationSerializer(serializers.ModelSerializer):
    """Allocation with its derived status and source stock details."""

    machine = MachineMinimalSerializer(read_only=True)
    posted_by = UserMinimalSerializer(read_only=True)
    food_name = serializers.CharField(source='stock_item.food_name', read_only=True)
    category = serializers.CharField(source='stock_item.category', read_only=True)
    units = serializers.CharField(source='stock_item.units', read_only=True)
    remaining = serializers.IntegerField(read_only=True)
    status = serializers.CharField(read_only=True)

    class Meta:
        model = MarketplaceAllocation
        fields = [
            'id',
            'stock_item',
            'food_name',
            'category',
            'units',
            'machine',
            'quantity',
            'claimed_count',
            'remaining',
            'view_count',
            'description',
            'expiration_date',
            'status',
            'posted_by',
            'date_posted',
            'updated_at',
        ]
        read_only_fields = fields
