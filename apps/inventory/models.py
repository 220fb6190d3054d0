from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Case, F, Q, Value, When
from django.utils import timezone
import uuid


class FoodCategory(models.TextChoices):
    PERISHABLE = 'perishable', 'Perishable'
    NON_PERISHABLE = 'non-perishable', 'Non-perishable'
    COOKED = 'cooked', 'Cooked'
    PACKAGED = 'packaged', 'Packaged'


class StockStatus(models.TextChoices):
    AVAILABLE = 'available', 'Available'
    LOW = 'low', 'Low'
    EXPIRED = 'expired', 'Expired'


def compute_stock_status(available_quantity, expiration_date=None, today=None, low_threshold=None):
    """
    Derive a stock item's status from its balance and expiration date.

    An item is expired when nothing is left or its expiration date has
    passed, low when at most ``low_threshold`` units remain, and
    available otherwise.
    """
    if today is None:
        today = timezone.localdate()
    if low_threshold is None:
        low_threshold = settings.STOCK_LOW_THRESHOLD

    if available_quantity <= 0:
        return StockStatus.EXPIRED
    if expiration_date is not None and expiration_date < today:
        return StockStatus.EXPIRED
    if available_quantity <= low_threshold:
        return StockStatus.LOW
    return StockStatus.AVAILABLE


def build_item_key(*, food_name, category, units, expiration_date=None):
    """Merge key under which verified donations accumulate into one stock item."""
    name = ' '.join(food_name.lower().split())
    expires = expiration_date.isoformat() if expiration_date else 'none'
    return f"{category}:{name}:{units.strip().lower()}:{expires}"


class WarehouseStockItemQuerySet(models.QuerySet):

    def with_status(self, today=None):
        """Annotate ``derived_status`` using the same rules as compute_stock_status."""
        if today is None:
            today = timezone.localdate()
        return self.annotate(
            derived_status=Case(
                When(available_quantity__lte=0, then=Value(StockStatus.EXPIRED.value)),
                When(expiration_date__lt=today, then=Value(StockStatus.EXPIRED.value)),
                When(
                    available_quantity__lte=settings.STOCK_LOW_THRESHOLD,
                    then=Value(StockStatus.LOW.value),
                ),
                default=Value(StockStatus.AVAILABLE.value),
                output_field=models.CharField(),
            )
        )

    def with_derived_status(self, status, today=None):
        return self.with_status(today).filter(derived_status=status)


class WarehouseStockItem(models.Model):
    """
    Trusted, debitable inventory created only through verification.

    Quantities move between three buckets: available, distributed, and
    allocated to machines. Their sum always equals total_quantity.
    Items are never deleted; empty items remain as history.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item_key = models.CharField(max_length=400, unique=True)

    food_name = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=FoodCategory.choices)
    units = models.CharField(max_length=50)
    expiration_date = models.DateField(null=True, blank=True)
    donor_name = models.CharField(max_length=200, blank=True)
    location = models.CharField(max_length=255, blank=True)

    # Ledger balances
    total_quantity = models.PositiveIntegerField(default=0)
    available_quantity = models.PositiveIntegerField(default=0)
    distributed_quantity = models.PositiveIntegerField(default=0)
    allocated_quantity = models.PositiveIntegerField(default=0)

    # Timestamps
    date_added = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = WarehouseStockItemQuerySet.as_manager()

    class Meta:
        db_table = 'warehouse_stock_items'
        ordering = ['-date_added']
        indexes = [
            models.Index(fields=['category'], name='stock_category_idx'),
            models.Index(fields=['expiration_date'], name='stock_expiration_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(available_quantity__lte=F('total_quantity')),
                name='stock_available_lte_total',
            ),
            models.CheckConstraint(
                condition=Q(
                    total_quantity=(
                        F('available_quantity')
                        + F('distributed_quantity')
                        + F('allocated_quantity')
                    )
                ),
                name='stock_quantity_conserved',
            ),
        ]

    def __str__(self):
        return f"{self.food_name} ({self.available_quantity}/{self.total_quantity} {self.units})"

    @property
    def status(self):
        return compute_stock_status(self.available_quantity, self.expiration_date)

    @property
    def is_expired(self):
        return (
            self.expiration_date is not None
            and self.expiration_date < timezone.localdate()
        )


class MovementKind(models.TextChoices):
    CREDIT = 'credit', 'Credit'
    DISTRIBUTION = 'distribution', 'Distribution'
    ALLOCATION = 'allocation', 'Allocation'
    ALLOCATION_RETURN = 'allocation_return', 'Allocation return'


class StockMovement(models.Model):
    """Append-only ledger entry recording one change to a stock item."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    stock_item = models.ForeignKey(
        WarehouseStockItem,
        on_delete=models.PROTECT,
        related_name='movements',
    )
    kind = models.CharField(max_length=20, choices=MovementKind.choices)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    balance_after = models.PositiveIntegerField()

    # Origin of the movement
    donation_request = models.ForeignKey(
        'donations.DonationRequest',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='stock_movements',
    )
    allocation_ref = models.UUIDField(null=True, blank=True, db_index=True)
    note = models.TextField(blank=True)
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='stock_movements',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stock_movements'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['stock_item', 'kind'], name='movement_item_kind_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['donation_request'],
                condition=Q(kind='credit'),
                name='one_credit_per_donation',
            ),
        ]

    def __str__(self):
        return f"{self.get_kind_display()} {self.quantity} → {self.stock_item.food_name}"
