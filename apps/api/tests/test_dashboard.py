"""
Dashboard aggregate tests.

Test coverage:
1. today_sales sums only today's sale totals
2. total_stock_value uses authoritative wholesale prices
3. Low-stock list honours min_qty
4. Recent activities are the newest ledger entries
5. API endpoints
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.products.models import Product
from apps.sales.dashboard import get_dashboard_stats, get_recent_activities
from apps.sales.models import Sale
from apps.sales.services import record_sale
from apps.stock.services import add_stock


@pytest.mark.django_db
class TestDashboardStats:

    def test_empty_store(self):
        stats = get_dashboard_stats()

        assert stats['today_sales'] == 0
        assert stats['total_stock_value'] == 0
        assert stats['total_products'] == 0
        assert stats['low_stock_items'] == []

    def test_today_sales_sums_totals(self, dubic_can, pepsi_rgb, sales_actor):
        record_sale(dubic_can.id, 30, sales_actor)
        record_sale(pepsi_rgb.id, 23, sales_actor)

        stats = get_dashboard_stats()

        assert stats['today_sales'] == 330000 + 103500

    def test_other_days_are_excluded(self, dubic_can, sales_actor):
        record_sale(dubic_can.id, 1, sales_actor)

        yesterday = timezone.localdate() - timedelta(days=1)
        stats = get_dashboard_stats(day=yesterday)

        assert stats['today_sales'] == 0
        assert stats['date'] == yesterday.isoformat()

    def test_stock_value_uses_authoritative_wholesale(self, local_juice):
        Product.objects.create(
            sku='DUBIC-CAN', name='Dubic Can', category='can',
            retail_price=9000, wholesale_price=8000, current_qty=10,
        )

        stats = get_dashboard_stats()

        assert stats['total_stock_value'] == 10 * 11000 + 40 * 1200
        assert stats['total_items'] == 50
        assert stats['total_products'] == 2

    def test_low_stock_items(self, dubic_can, local_juice):
        Product.objects.filter(pk=local_juice.pk).update(current_qty=10, min_qty=10)

        stats = get_dashboard_stats()

        assert stats['low_stock_count'] == 1
        assert stats['low_stock_items'][0]['sku'] == 'LOCAL-ZOBO'

    def test_inactive_products_are_ignored(self, local_juice):
        Product.objects.filter(pk=local_juice.pk).update(is_active=False)

        assert get_dashboard_stats()['total_products'] == 0


@pytest.mark.django_db
class TestRecentActivities:

    def test_newest_first_and_limited(self, pepsi_rgb, sales_actor):
        for quantity in range(1, 8):
            add_stock(pepsi_rgb.id, quantity, sales_actor)

        activities = get_recent_activities(limit=5)

        assert len(activities) == 5
        assert [a.quantity for a in activities] == [7, 6, 5, 4, 3]


@pytest.mark.django_db
class TestDashboardEndpoints:

    def test_dashboard_endpoint(self, sales_client, dubic_can, sales_actor):
        record_sale(dubic_can.id, 2, sales_actor)

        response = sales_client.get('/api/sales/dashboard/')

        assert response.status_code == 200
        assert response.data['today_sales'] == 24000
        assert Sale.objects.count() == 1

    def test_activities_endpoint(self, sales_client, pepsi_rgb, sales_actor):
        add_stock(pepsi_rgb.id, 3, sales_actor)

        response = sales_client.get('/api/sales/dashboard/activities/', {'limit': 'x'})

        assert response.status_code == 200
        assert response.data[0]['change_type'] == 'ADD_STOCK'
