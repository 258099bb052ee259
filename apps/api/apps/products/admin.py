from django.contrib import admin

from .models import PriceCorrection, Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['sku', 'name', 'category', 'retail_price', 'wholesale_price', 'current_qty', 'is_active']
    list_filter = ['is_active', 'category']
    search_fields = ['name', 'sku']
    readonly_fields = ['current_qty', 'created_at', 'updated_at']


@admin.register(PriceCorrection)
class PriceCorrectionAdmin(admin.ModelAdmin):
    list_display = ['sku', 'old_retail', 'new_retail', 'old_wholesale', 'new_wholesale', 'created_at']
    search_fields = ['sku', 'product__name']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
