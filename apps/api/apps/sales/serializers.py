"""Sales serializers."""
from rest_framework import serializers

from apps.stock.models import StockChange

from .models import CustomerTypeChoices, PaymentStatusChoices, Sale


class SaleSerializer(serializers.ModelSerializer):
    """Read-only sale record."""

    product_sku = serializers.CharField(source='product.sku', read_only=True)

    class Meta:
        model = Sale
        fields = [
            'id', 'product', 'product_sku', 'product_name',
            'quantity', 'unit_price', 'total_amount', 'sale_type',
            'customer_name', 'customer_phone', 'customer_type',
            'payment_status', 'amount_paid', 'amount_owing',
            'sold_by', 'sold_by_role', 'created_at',
        ]
        read_only_fields = fields


class RecordSaleSerializer(serializers.Serializer):
    """
    Input for POST /api/sales/sales/record/.

    Prices are never accepted from the client; they are resolved server-side.
    """

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)

    customer_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    customer_phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    customer_type = serializers.ChoiceField(
        choices=CustomerTypeChoices.choices, required=False, allow_blank=True, default=''
    )

    payment_status = serializers.ChoiceField(
        choices=PaymentStatusChoices.choices, required=False, default=PaymentStatusChoices.PAID
    )
    amount_paid = serializers.IntegerField(min_value=0, required=False)
    amount_owing = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs):
        status = attrs['payment_status']
        if status != PaymentStatusChoices.PAID and 'amount_paid' not in attrs:
            raise serializers.ValidationError({
                'amount_paid': 'Required when payment status is partial or owing.'
            })
        return attrs


class QuoteSerializer(serializers.Serializer):
    """Input for POST /api/sales/quote/."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class ActivitySerializer(serializers.ModelSerializer):
    """Stock ledger entry as shown in the dashboard activity feed."""

    class Meta:
        model = StockChange
        fields = [
            'id', 'product', 'product_name', 'change_type',
            'quantity', 'previous_qty', 'new_qty',
            'changed_by', 'reason', 'sale', 'created_at',
        ]
        read_only_fields = fields
