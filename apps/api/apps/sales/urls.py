"""Sales URLs."""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DashboardView, QuoteView, RecentActivitiesView, SaleViewSet

router = DefaultRouter()
router.register(r'sales', SaleViewSet, basename='sale')

urlpatterns = [
    path('quote/', QuoteView.as_view(), name='sale-quote'),
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('dashboard/activities/', RecentActivitiesView.as_view(), name='dashboard-activities'),
    path('', include(router.urls)),
]
