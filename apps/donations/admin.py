from django.contrib import admin
from django.utils.html import format_html
from .models import DonationAuditEntry, DonationRequest, DonationStatus


STATUS_COLORS = {
    DonationStatus.PENDING: ('#E5C49A', '#2C1810'),
    DonationStatus.APPROVED_PENDING_VERIFICATION: ('#3C6E91', 'white'),
    DonationStatus.VERIFIED: ('#6B8E5E', 'white'),
    DonationStatus.REJECTED: ('#B85C5C', 'white'),
}


class DonationAuditEntryInline(admin.TabularInline):
    """Read-only audit trail within a donation request."""
    model = DonationAuditEntry
    extra = 0
    fields = ['from_status', 'to_status', 'actor', 'note', 'created_at']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(DonationRequest)
class DonationRequestAdmin(admin.ModelAdmin):
    """
    Admin interface for donation requests.

    Status and ledger links are read-only; review happens through the
    API so that every transition is audited.
    """

    list_display = [
        'food_name',
        'donor_name',
        'quantity',
        'units',
        'category',
        'status_badge',
        'pickup_date',
        'created_at',
    ]
    list_filter = ['status', 'category', 'delivery_method', 'created_at']
    search_fields = ['food_name', 'donor_name', 'donor__email']
    date_hierarchy = 'created_at'
    readonly_fields = [
        'status',
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
    inlines = [DonationAuditEntryInline]

    def status_badge(self, obj):
        """Display status as colored badge."""
        bg, fg = STATUS_COLORS.get(obj.status, ('#ccc', '#666'))
        return format_html(
            '<span style="background: {}; color: {}; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, fg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'
