"""Stock serializers."""
from rest_framework import serializers

from .models import StockChange


class StockChangeSerializer(serializers.ModelSerializer):
    """Read-only view of a stock ledger entry."""

    product_sku = serializers.CharField(source='product.sku', read_only=True)

    class Meta:
        model = StockChange
        fields = [
            'id', 'product', 'product_sku', 'product_name', 'change_type',
            'quantity', 'previous_qty', 'new_qty',
            'changed_by', 'reason', 'sale', 'created_at',
        ]
        read_only_fields = fields


class AddStockSerializer(serializers.Serializer):
    """Input for POST /api/stock/changes/add-stock/."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=200, required=False, default='Stock addition')


class OverridePricesSerializer(serializers.Serializer):
    """Input for POST /api/stock/changes/override-prices/."""

    product_id = serializers.UUIDField()
    retail_price = serializers.IntegerField(min_value=1)
    wholesale_price = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(max_length=120, required=False, default='Manual price override')

    def validate(self, attrs):
        if attrs['wholesale_price'] > attrs['retail_price']:
            raise serializers.ValidationError({
                'wholesale_price': 'Wholesale price cannot exceed retail price.'
            })
        return attrs
