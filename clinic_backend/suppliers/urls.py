# suppliers/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from suppliers.views import SupplierViewSet

router = SimpleRouter()
router.register(r"", SupplierViewSet, basename="suppliers")

urlpatterns = [
    path("", include(router.urls)),
]
