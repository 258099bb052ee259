"""Stock admin - ledger is view-only."""
from django.contrib import admin

from .models import StockChange


@admin.register(StockChange)
class StockChangeAdmin(admin.ModelAdmin):
    list_display = [
        'created_at', 'product_name', 'change_type',
        'quantity', 'previous_qty', 'new_qty', 'changed_by'
    ]
    list_filter = ['change_type', 'created_at']
    search_fields = ['product_name', 'product__sku', 'reason', 'changed_by']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Movement Details', {
            'fields': ('product', 'product_name', 'change_type', 'quantity', 'previous_qty', 'new_qty')
        }),
        ('Reference', {
            'fields': ('sale', 'reason'),
        }),
        ('Audit', {
            'fields': ('created_at', 'changed_by'),
        }),
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
