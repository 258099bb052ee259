"""Sales admin - sales are view-only."""
from django.contrib import admin

from .models import Sale


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = [
        'created_at', 'product_name', 'quantity', 'unit_price',
        'total_amount', 'sale_type', 'payment_status', 'sold_by'
    ]
    list_filter = ['sale_type', 'payment_status', 'created_at']
    search_fields = ['product_name', 'product__sku', 'sold_by']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Sale', {
            'fields': ('product', 'product_name', 'quantity', 'unit_price', 'total_amount', 'sale_type')
        }),
        ('Customer', {
            'fields': ('customer_name', 'customer_phone', 'customer_type'),
            'classes': ('collapse',)
        }),
        ('Payment', {
            'fields': ('payment_status', 'amount_paid', 'amount_owing')
        }),
        ('Audit', {
            'fields': ('sold_by', 'sold_by_role', 'created_at'),
            'classes': ('collapse',)
        }),
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
