"""Product views."""
from django.db.models import F
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.permissions import IsPriceAdmin

from .catalog import PriceCatalog
from .models import PriceCorrection, Product
from .serializers import PriceCorrectionSerializer, ProductSerializer


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Products are read-only over the API.

    Quantities change through stock additions and sales; prices through
    the override endpoint or reconciliation.
    """
    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'sku', 'category']
    ordering_fields = ['name', 'current_qty', 'category']
    ordering = ['name']

    def get_queryset(self):
        queryset = super().get_queryset()
        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.filter(category=category)
        if self.request.query_params.get('low_stock') == 'true':
            queryset = queryset.filter(current_qty__lte=F('min_qty'))
        return queryset

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['catalog'] = PriceCatalog.from_settings()
        return context

    @action(
        detail=False,
        methods=['post'],
        url_path='reconcile-prices',
        permission_classes=[IsPriceAdmin],
    )
    def reconcile_prices(self, request):
        """
        Correct stored prices that drifted from the authoritative price list.

        Returns the corrections made (empty when everything already matches).
        """
        corrections = PriceCatalog.from_settings().reconcile()
        return Response(
            {
                'corrected': len(corrections),
                'corrections': PriceCorrectionSerializer(corrections, many=True).data,
            },
            status=status.HTTP_200_OK
        )


class PriceCorrectionViewSet(viewsets.ReadOnlyModelViewSet):
    """Audit trail of reconciliation corrections."""
    queryset = PriceCorrection.objects.select_related('product').all()
    serializer_class = PriceCorrectionSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['sku', 'product__name']
    ordering = ['-created_at']
