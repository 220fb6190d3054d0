from rest_framework import serializers
from .models import Machine, MachineStatus


class MachineSerializer(serializers.ModelSerializer):
    """Machine directory entry."""

    stock_level = serializers.IntegerField(read_only=True)
    accepts_postings = serializers.BooleanField(read_only=True)

    class Meta:
        model = Machine
        fields = [
            'id',
            'name',
            'location',
            'status',
            'max_capacity',
            'food_amount',
            'stock_level',
            'accepts_postings',
            'last_seen_at',
        ]
        read_only_fields = fields


class MachineFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for machine listing.

    Query Parameters:
        status (str): Filter by machine status
        accepting (bool): Only machines that accept postings
    """

    status = serializers.ChoiceField(
        choices=MachineStatus.choices,
        required=False,
    )
    accepting = serializers.BooleanField(required=False)
