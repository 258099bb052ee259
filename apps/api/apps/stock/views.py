"""Stock views - ledger listing, stock additions and price overrides."""
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.context import Actor
from apps.core.errors import POSError
from apps.core.permissions import IsPriceAdmin, IsSalesStaff

from .models import StockChange
from .serializers import AddStockSerializer, OverridePricesSerializer, StockChangeSerializer
from . import services


class StockChangeViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Stock ledger (append-only).

    Entries are created as a side effect of sales, stock additions and
    price overrides; there is no direct create/update/delete.
    """
    queryset = StockChange.objects.select_related('product').all()
    serializer_class = StockChangeSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['product_name', 'product__sku', 'reason']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = super().get_queryset()
        product = self.request.query_params.get('product')
        if product:
            queryset = queryset.filter(product_id=product)
        change_type = self.request.query_params.get('change_type')
        if change_type:
            queryset = queryset.filter(change_type=change_type)
        return queryset

    @action(detail=False, methods=['post'], url_path='add-stock', permission_classes=[IsSalesStaff])
    def add_stock(self, request):
        """
        Add received units to a product.

        Request body: {"product_id": "...", "quantity": 48, "reason": "Delivery"}
        """
        serializer = AddStockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            adjustment = services.add_stock(
                product_id=data['product_id'],
                quantity=data['quantity'],
                actor=Actor.from_user(request.user),
                reason=data['reason'],
            )
        except POSError as e:
            return Response(e.to_dict(), status=e.http_status)

        return Response(
            {
                'product_id': str(adjustment.product.pk),
                'previous_qty': adjustment.previous_qty,
                'new_qty': adjustment.new_qty,
                'change': StockChangeSerializer(adjustment.change).data,
            },
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['post'], url_path='override-prices', permission_classes=[IsPriceAdmin])
    def override_prices(self, request):
        """
        Set stored prices for a product not on the authoritative price list.

        Request body: {"product_id": "...", "retail_price": 2500, "wholesale_price": 2300}
        """
        serializer = OverridePricesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            change = services.override_prices(
                product_id=data['product_id'],
                retail=data['retail_price'],
                wholesale=data['wholesale_price'],
                actor=Actor.from_user(request.user),
                reason=data['reason'],
            )
        except POSError as e:
            return Response(e.to_dict(), status=e.http_status)

        return Response(StockChangeSerializer(change).data, status=status.HTTP_201_CREATED)
