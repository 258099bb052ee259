"""Product URLs."""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import PriceCorrectionViewSet, ProductViewSet

router = DefaultRouter()
router.register(r'products', ProductViewSet, basename='product')
router.register(r'price-corrections', PriceCorrectionViewSet, basename='price-correction')

urlpatterns = [
    path('', include(router.urls)),
]
