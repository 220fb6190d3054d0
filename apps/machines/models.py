from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class MachineStatus(models.TextChoices):
    ONLINE = 'online', 'Online'
    OFFLINE = 'offline', 'Offline'
    MAINTENANCE = 'maintenance', 'Maintenance'


class Machine(models.Model):
    """
    A distribution machine that receives marketplace allocations.

    Rows are maintained by the telemetry feed; the ledger only reads them.
    """

    id = models.CharField(primary_key=True, max_length=64)
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=255)
    status = models.CharField(
        max_length=20,
        choices=MachineStatus.choices,
        default=MachineStatus.OFFLINE,
        db_index=True,
    )

    # Capacity as reported by telemetry
    max_capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    food_amount = models.PositiveIntegerField(default=0)
    last_seen_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'machines'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.location})"

    @property
    def stock_level(self):
        """Current load as a whole percentage of capacity."""
        if not self.max_capacity:
            return 100
        return round(self.food_amount * 100 / self.max_capacity)

    @property
    def is_full(self):
        return self.stock_level >= settings.MACHINE_FULL_THRESHOLD

    @property
    def accepts_postings(self):
        return self.status == MachineStatus.ONLINE and not self.is_full
