from django.conf import settings
from django.db import models
from django.db.models import Case, F, Q, Value, When
from django.utils import timezone
import uuid


class AllocationStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    LOW_STOCK = 'low-stock', 'Low stock'
    OUT_OF_STOCK = 'out-of-stock', 'Out of stock'
    EXPIRED = 'expired', 'Expired'


def compute_allocation_status(remaining, expiration_date=None, today=None, low_threshold=None):
    """
    Derive an allocation's status from its unclaimed quantity.

    Expiration wins over quantity: an expired allocation is expired even
    when units remain.
    """
    if today is None:
        today = timezone.localdate()
    if low_threshold is None:
        low_threshold = settings.ALLOCATION_LOW_THRESHOLD

    if expiration_date is not None and expiration_date < today:
        return AllocationStatus.EXPIRED
    if remaining <= 0:
        return AllocationStatus.OUT_OF_STOCK
    if remaining <= low_threshold:
        return AllocationStatus.LOW_STOCK
    return AllocationStatus.ACTIVE


class MarketplaceAllocationQuerySet(models.QuerySet):

    def with_status(self, today=None):
        """Annotate ``remaining_quantity`` and ``derived_status`` in SQL."""
        if today is None:
            today = timezone.localdate()
        return self.annotate(
            remaining_quantity=F('quantity') - F('claimed_count'),
        ).annotate(
            derived_status=Case(
                When(expiration_date__lt=today, then=Value(AllocationStatus.EXPIRED.value)),
                When(remaining_quantity__lte=0, then=Value(AllocationStatus.OUT_OF_STOCK.value)),
                When(
                    remaining_quantity__lte=settings.ALLOCATION_LOW_THRESHOLD,
                    then=Value(AllocationStatus.LOW_STOCK.value),
                ),
                default=Value(AllocationStatus.ACTIVE.value),
                output_field=models.CharField(),
            )
        )

    def with_derived_status(self, status, today=None):
        return self.with_status(today).filter(derived_status=status)


class MarketplaceAllocation(models.Model):
    """
    Stock earmarked for a distribution machine.

    Quantity left the warehouse when the allocation was posted. Claims
    consume it at the machine; edits and deletion return the unclaimed
    part to the source stock item.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    stock_item = models.ForeignKey(
        'inventory.WarehouseStockItem',
        on_delete=models.PROTECT,
        related_name='allocations',
    )
    machine = models.ForeignKey(
        'machines.Machine',
        on_delete=models.PROTECT,
        related_name='allocations',
    )

    quantity = models.PositiveIntegerField()
    claimed_count = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)

    description = models.TextField(blank=True)
    expiration_date = models.DateField(null=True, blank=True)
    posted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='posted_allocations',
    )

    # Timestamps
    date_posted = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = MarketplaceAllocationQuerySet.as_manager()

    class Meta:
        db_table = 'marketplace_allocations'
        ordering = ['-date_posted']
        indexes = [
            models.Index(fields=['machine', 'date_posted'], name='allocation_machine_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(claimed_count__lte=F('quantity')),
                name='allocation_claimed_lte_quantity',
            ),
        ]

    def __str__(self):
        return f"{self.quantity} {self.stock_item.units} {self.stock_item.food_name} → {self.machine_id}"

    @property
    def remaining(self):
        return self.quantity - self.claimed_count

    @property
    def status(self):
        return compute_allocation_status(self.remaining, self.expiration_date)

    @property
    def is_expired(self):
        return (
            self.expiration_date is not None
            and self.expiration_date < timezone.localdate()
        )
