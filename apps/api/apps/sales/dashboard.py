"""
Dashboard aggregates for the POS home screen.
"""
from django.db.models import Sum
from django.utils import timezone

from apps.products.catalog import PriceCatalog
from apps.stock.models import StockChange
from apps.stock.storage import DjangoInventoryStore

from .models import Sale


def get_dashboard_stats(day=None, store=None, catalog=None):
    """
    Summary figures for one calendar day (local time, default today).

    total_stock_value uses authoritative wholesale prices for listed SKUs,
    so it never reflects stale stored prices.
    """
    store = store or DjangoInventoryStore()
    catalog = catalog or PriceCatalog.from_settings(store=store)
    day = day or timezone.localdate()

    today_sales = Sale.objects.filter(created_at__date=day).aggregate(
        total=Sum('total_amount')
    )['total'] or 0

    products = [catalog.apply(product) for product in store.list_products(active_only=True)]
    low_stock = [product for product in products if product.is_low_stock]

    return {
        'date': day.isoformat(),
        'today_sales': today_sales,
        'total_stock_value': sum(product.stock_value for product in products),
        'total_items': sum(product.current_qty for product in products),
        'low_stock_count': len(low_stock),
        'low_stock_items': [
            {
                'id': str(product.pk),
                'sku': product.sku,
                'name': product.name,
                'current_qty': product.current_qty,
                'min_qty': product.min_qty,
            }
            for product in low_stock
        ],
        'total_products': len(products),
    }


def get_recent_activities(limit=5):
    """Latest stock ledger entries, newest first."""
    return list(StockChange.objects.order_by('-created_at')[:limit])
