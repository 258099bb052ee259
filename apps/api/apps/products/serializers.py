"""Product serializers."""
from rest_framework import serializers

from .models import PriceCorrection, Product


class ProductSerializer(serializers.ModelSerializer):
    """
    Product with its effective prices.

    retail_price / wholesale_price are what a sale would charge now
    (authoritative list for listed SKUs); stored_* are the database values.
    """
    is_low_stock = serializers.ReadOnlyField()
    price_source = serializers.SerializerMethodField()
    retail_price = serializers.SerializerMethodField()
    wholesale_price = serializers.SerializerMethodField()
    stored_retail_price = serializers.IntegerField(source='retail_price', read_only=True)
    stored_wholesale_price = serializers.IntegerField(source='wholesale_price', read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'sku', 'name', 'category',
            'retail_price', 'wholesale_price',
            'stored_retail_price', 'stored_wholesale_price', 'price_source',
            'current_qty', 'min_qty', 'is_low_stock', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def _priced(self, obj):
        catalog = self.context.get('catalog')
        return catalog.apply(obj) if catalog is not None else obj

    def get_price_source(self, obj):
        return getattr(self._priced(obj), 'price_source', 'stored')

    def get_retail_price(self, obj):
        return self._priced(obj).retail_price

    def get_wholesale_price(self, obj):
        return self._priced(obj).wholesale_price


class PriceCorrectionSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = PriceCorrection
        fields = [
            'id', 'product', 'product_name', 'sku',
            'old_retail', 'new_retail', 'old_wholesale', 'new_wholesale',
            'reason', 'created_at',
        ]
        read_only_fields = fields
