from django.contrib import admin
from .models import Machine


@admin.register(Machine)
class MachineAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'location', 'status', 'food_amount', 'max_capacity', 'stock_level', 'last_seen_at']
    list_filter = ['status']
    search_fields = ['id', 'name', 'location']
    readonly_fields = ['created_at', 'updated_at']
