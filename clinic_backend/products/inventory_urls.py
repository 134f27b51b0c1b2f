# products/inventory_urls.py

"""
INVENTORY URLS

Stock ledger routes under /api/inventory/:
    /inventory/movements/
    /inventory/movements/entry/ | exit/ | adjustment/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from products.views import StockMovementViewSet

router = DefaultRouter()

router.register(r"movements", StockMovementViewSet, basename="stock-movements")

urlpatterns = [
    path("", include(router.urls)),
]
