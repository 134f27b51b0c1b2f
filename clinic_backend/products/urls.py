# products/urls.py

"""
PRODUCTS URLS

Purpose:
- Register catalog routes under /api/products/
- Includes viewset actions like:
    /products/products/alerts/low-stock/
    /products/products/alerts/overstock/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import CategoryViewSet, ProductViewSet

router = DefaultRouter()

router.register(r"categories", CategoryViewSet, basename="categories")
router.register(r"products", ProductViewSet, basename="products")

urlpatterns = [
    path("", include(router.urls)),
]
