from rest_framework import serializers
from apps.accounts.serializers import UserMinimalSerializer
from apps.inventory.models import FoodCategory
from apps.inventory.serializers import WarehouseStockItemSerializer
from .models import DeliveryMethod, DonationAuditEntry, DonationRequest, DonationStatus


# =============================================================================
# Input Serializers
# =============================================================================

class DonationSubmitSerializer(serializers.Serializer):
    """Validate input for a new donation request."""

    food_name = serializers.CharField(max_length=200)
    category = serializers.ChoiceField(choices=FoodCategory.choices)
    quantity = serializers.IntegerField(min_value=1)
    units = serializers.CharField(max_length=50)
    pickup_date = serializers.DateField()
    expiration_date = serializers.DateField(required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True)
    estimated_meals = serializers.IntegerField(min_value=0, required=False, allow_null=True)
    delivery_method = serializers.ChoiceField(
        choices=DeliveryMethod.choices,
        default=DeliveryMethod.DROP_OFF,
    )
    drop_off_location = serializers.CharField(max_length=255, required=False, allow_blank=True)


class DonationFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for donation listing.

    Query Parameters:
        status (str): Filter by status
        active (bool): Only requests still awaiting review or verification
    """

    status = serializers.ChoiceField(choices=DonationStatus.choices, required=False)
    active = serializers.BooleanField(required=False, allow_null=True, default=None)


class DenyInputSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=1000, allow_blank=True)


class VerifyInputSerializer(serializers.Serializer):
    proof_image = serializers.CharField(max_length=500, allow_blank=True)


# =============================================================================
# Output Serializers
# =============================================================================

class DonationRequestSerializer(serializers.ModelSerializer):
    """Full donation request for detail and list views."""

    donor = UserMinimalSerializer(read_only=True)
    reviewed_by = UserMinimalSerializer(read_only=True)
    verified_by = UserMinimalSerializer(read_only=True)
    is_active = serializers.BooleanField(read_only=True)

    class Meta:
        model = DonationRequest
        fields = [
            'id',
            'donor',
            'donor_name',
            'food_name',
            'category',
            'quantity',
            'units',
            'expiration_date',
            'pickup_date',
            'description',
            'estimated_meals',
            'delivery_method',
            'drop_off_location',
            'status',
            'is_active',
            'rejection_reason',
            'proof_image',
            'reviewed_by',
            'reviewed_at',
            'verified_by',
            'verified_at',
            'stock_item',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class DonationAuditEntrySerializer(serializers.ModelSerializer):
    actor = UserMinimalSerializer(read_only=True)

    class Meta:
        model = DonationAuditEntry
        fields = ['id', 'from_status', 'to_status', 'actor', 'note', 'created_at']
        read_only_fields = fields


class VerificationResponseSerializer(serializers.Serializer):
    donation = DonationRequestSerializer()
    stock_item = WarehouseStockItemSerializer()
    item_created = serializers.BooleanField()
    already_verified = serializers.BooleanField()
