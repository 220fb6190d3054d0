from django.contrib import admin
from django.utils.html import format_html
from .models import AllocationStatus, MarketplaceAllocation


STATUS_COLORS = {
    AllocationStatus.ACTIVE: ('#6B8E5E', 'white'),
    AllocationStatus.LOW_STOCK: ('#E5C49A', '#2C1810'),
    AllocationStatus.OUT_OF_STOCK: ('#8B8B8B', 'white'),
    AllocationStatus.EXPIRED: ('#B85C5C', 'white'),
}


@admin.register(MarketplaceAllocation)
class MarketplaceAllocationAdmin(admin.ModelAdmin):
    """
    Admin interface for marketplace allocations.

    Quantities are read-only; posting and editing go through the
    allocation services so stock balances follow.
    """

    list_display = [
        'stock_item',
        'machine',
        'quantity',
        'claimed_count',
        'view_count',
        'status_badge',
        'date_posted',
    ]
    list_filter = ['machine', 'date_posted']
    search_fields = ['stock_item__food_name', 'machine__name', 'description']
    readonly_fields = [
        'stock_item',
        'machine',
        'quantity',
        'claimed_count',
        'view_count',
        'posted_by',
        'date_posted',
        'updated_at',
    ]

    def status_badge(self, obj):
        """Display derived allocation status as colored badge."""
        bg, fg = STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.status.label
        )
    status_badge.short_description = 'Status'

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
