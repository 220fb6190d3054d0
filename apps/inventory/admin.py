from django.contrib import admin
from django.utils.html import format_html
from .models import StockMovement, StockStatus, WarehouseStockItem


STATUS_COLORS = {
    StockStatus.AVAILABLE: ('#6B8E5E', 'white'),
    StockStatus.LOW: ('#E5C49A', '#2C1810'),
    StockStatus.EXPIRED: ('#B85C5C', 'white'),
}


class StockMovementInline(admin.TabularInline):
    """Read-only movement history within a stock item."""
    model = StockMovement
    extra = 0
    fields = ['kind', 'quantity', 'balance_after', 'donation_request', 'allocation_ref', 'performed_by', 'created_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        """Movements are written by the ledger services only."""
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WarehouseStockItem)
class WarehouseStockItemAdmin(admin.ModelAdmin):
    """
    Admin interface for warehouse stock.

    Balances are read-only here; they change only through the ledger
    services so that every change has a movement.
    """

    list_display = [
        'food_name',
        'category',
        'available_quantity',
        'total_quantity',
        'units',
        'status_badge',
        'expiration_date',
        'date_added',
    ]
    list_filter = ['category', 'expiration_date', 'date_added']
    search_fields = ['food_name', 'donor_name', 'location']
    readonly_fields = [
        'item_key',
        'total_quantity',
        'available_quantity',
        'distributed_quantity',
        'allocated_quantity',
        'date_added',
        'updated_at',
    ]
    inlines = [StockMovementInline]

    def status_badge(self, obj):
        """Display derived stock status as colored badge."""
        bg, fg = STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.status.label
        )
    status_badge.short_description = 'Status'

    def has_delete_permission(self, request, obj=None):
        """Stock items are kept as history."""
        return False
