from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
import uuid

from apps.inventory.models import FoodCategory


class DonationStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    APPROVED_PENDING_VERIFICATION = 'approved-pending-verification', 'Approved, pending verification'
    VERIFIED = 'verified', 'Verified'
    REJECTED = 'rejected', 'Rejected'


class DeliveryMethod(models.TextChoices):
    DROP_OFF = 'drop-off', 'Drop-off'
    PICKUP = 'pickup', 'Pickup'


ACTIVE_DONATION_STATUSES = (
    DonationStatus.PENDING,
    DonationStatus.APPROVED_PENDING_VERIFICATION,
)


class DonationRequestQuerySet(models.QuerySet):

    def active(self):
        """Requests still waiting on NGO review or verification."""
        return self.filter(status__in=ACTIVE_DONATION_STATUSES)


class DonationRequest(models.Model):
    """
    A donor's unverified pledge of food.

    Status changes only through apply_transition(). Verified and rejected
    requests leave the pending queue but are kept as the permanent
    record of the donation.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    donor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='donation_requests',
    )
    donor_name = models.CharField(max_length=200)

    # What is being donated
    food_name = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=FoodCategory.choices)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    units = models.CharField(max_length=50)
    expiration_date = models.DateField(null=True, blank=True)
    description = models.TextField(blank=True)
    estimated_meals = models.PositiveIntegerField(null=True, blank=True)

    # Hand-over
    pickup_date = models.DateField()
    delivery_method = models.CharField(
        max_length=20,
        choices=DeliveryMethod.choices,
        default=DeliveryMethod.DROP_OFF,
    )
    drop_off_location = models.CharField(max_length=255, blank=True)

    # Lifecycle
    status = models.CharField(
        max_length=40,
        choices=DonationStatus.choices,
        default=DonationStatus.PENDING,
    )
    rejection_reason = models.TextField(blank=True)
    proof_image = models.CharField(max_length=500, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_donations',
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='verified_donations',
    )
    verified_at = models.DateTimeField(null=True, blank=True)
    stock_item = models.ForeignKey(
        'inventory.WarehouseStockItem',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='donation_requests',
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = DonationRequestQuerySet.as_manager()

    class Meta:
        db_table = 'donation_requests'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='donation_status_created_idx'),
            models.Index(fields=['donor', 'status'], name='donation_donor_status_idx'),
        ]

    def __str__(self):
        return f"{self.food_name} x{self.quantity} {self.units} ({self.status})"

    @property
    def is_active(self):
        return self.status in ACTIVE_DONATION_STATUSES


class DonationAuditEntry(models.Model):
    """One step in a donation request's history. Never modified."""

    request = models.ForeignKey(
        DonationRequest,
        on_delete=models.CASCADE,
        related_name='audit_entries',
    )
    from_status = models.CharField(max_length=40, choices=DonationStatus.choices, blank=True)
    to_status = models.CharField(max_length=40, choices=DonationStatus.choices)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='donation_audit_entries',
    )
    note = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'donation_audit_entries'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.from_status or 'new'} → {self.to_status}"
