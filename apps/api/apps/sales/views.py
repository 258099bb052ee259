"""Sales views."""
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.context import Actor
from apps.core.errors import POSError
from apps.core.permissions import IsSalesStaff
from apps.stock.storage import CustomerInfo, PaymentInfo

from .dashboard import get_dashboard_stats, get_recent_activities
from .models import Sale
from .serializers import (
    ActivitySerializer,
    QuoteSerializer,
    RecordSaleSerializer,
    SaleSerializer,
)
from .services import quote_sale, record_sale


class SaleViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Sales history plus the record endpoint.

    Sales are immutable: there is no update or delete.

    Additional endpoints:
    - POST /sales/record/ - Record a sale
    """
    queryset = Sale.objects.select_related('product').all()
    serializer_class = SaleSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['product_name', 'product__sku']
    ordering_fields = ['created_at', 'total_amount']
    ordering = ['-created_at']

    def get_queryset(self):
        queryset = super().get_queryset()
        sale_type = self.request.query_params.get('sale_type')
        if sale_type:
            queryset = queryset.filter(sale_type=sale_type)
        product = self.request.query_params.get('product')
        if product:
            queryset = queryset.filter(product_id=product)
        return queryset

    @action(detail=False, methods=['post'], url_path='record', permission_classes=[IsSalesStaff])
    def record(self, request):
        """
        Record a sale.

        POST /api/sales/sales/record/
        {
            "product_id": "...",
            "quantity": 30,
            "customer_name": "Mama Tunde",      // optional
            "payment_status": "paid"            // optional
        }

        Returns:
        - 201: {"sale": {...}, "price_info": {...}, "attempts": 1}
        - 400: Invalid input
        - 404: Product not found
        - 409: Insufficient stock or unresolved conflict
        - 422: Product price configuration error
        - 500: Persistence or partial failure
        """
        serializer = RecordSaleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        outcome = record_sale(
            product_id=data['product_id'],
            quantity=data['quantity'],
            actor=Actor.from_user(request.user),
            customer=CustomerInfo(
                name=data['customer_name'],
                phone=data['customer_phone'],
                customer_type=data['customer_type'],
            ),
            payment=PaymentInfo(
                status=data['payment_status'],
                amount_paid=data.get('amount_paid'),
                amount_owing=data.get('amount_owing'),
            ),
        )

        if not outcome.ok:
            return Response(outcome.error.to_dict(), status=outcome.error.http_status)

        return Response(
            {
                'sale': SaleSerializer(outcome.result.sale).data,
                'price_info': outcome.result.price_info.to_dict(),
                'attempts': outcome.attempts,
            },
            status=status.HTTP_201_CREATED
        )


class QuoteView(APIView):
    """
    Price preview for the sale form. Writes nothing.

    POST /api/sales/quote/ {"product_id": "...", "quantity": 24}
    """
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = QuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            quote = quote_sale(
                serializer.validated_data['product_id'],
                serializer.validated_data['quantity'],
            )
        except POSError as e:
            return Response(e.to_dict(), status=e.http_status)

        return Response(quote)


class DashboardView(APIView):
    """Today's sales total, stock value and low-stock list."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(get_dashboard_stats())


class RecentActivitiesView(APIView):
    """Latest stock ledger entries (?limit=N, default 5, max 50)."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        try:
            limit = int(request.query_params.get('limit', 5))
        except ValueError:
            limit = 5
        limit = max(1, min(limit, 50))

        activities = get_recent_activities(limit=limit)
        return Response(ActivitySerializer(activities, many=True).data)
