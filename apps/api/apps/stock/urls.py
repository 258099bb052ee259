"""Stock URLs."""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import StockChangeViewSet

router = DefaultRouter()
router.register(r'changes', StockChangeViewSet, basename='stock-change')

urlpatterns = [
    path('', include(router.urls)),
]
