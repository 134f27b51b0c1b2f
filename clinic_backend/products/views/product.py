# products/views/product.py

"""
PRODUCT VIEWSET

Purpose:
- Staff product catalog endpoints (CRUD + stock alerts)

Key rules:
- stock_current is read-only here; stock moves only through
  /api/inventory/movements/
- DELETE deactivates; movements must keep resolving their product
- Alerts are advisory (stock_min / stock_max never block a movement)
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Q
from drf_spectacular.utils import (
    OpenApiResponse,
    extend_schema,
)
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import CAP_INVENTORY_EDIT, CAP_INVENTORY_VIEW, HasCapability
from products.models import Product
from products.serializers.product import ProductSerializer
from products.services.registry import low_stock_products, overstocked_products


READ_ACTIONS = {"list", "retrieve", "low_stock_alerts", "overstock_alerts"}


def _truthy(value) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product endpoints.

    - CRUD (inventory.edit for writes)
    - GET alerts/low-stock/   stock_current <= stock_min
    - GET alerts/overstock/   stock_current > stock_max
    """

    serializer_class = ProductSerializer
    required_capability = None

    def get_permissions(self):
        if self.action in READ_ACTIONS:
            self.required_capability = CAP_INVENTORY_VIEW
        else:
            self.required_capability = CAP_INVENTORY_EDIT
        return [IsAuthenticated(), HasCapability()]

    def get_queryset(self):
        qs = Product.objects.select_related("category")

        if self.action == "list":
            if not _truthy(self.request.query_params.get("include_inactive")):
                qs = qs.filter(is_active=True)

            q = (self.request.query_params.get("q") or "").strip()
            if q:
                qs = qs.filter(Q(name__icontains=q) | Q(code__icontains=q))

        return qs.order_by("name")

    # -----------------------------
    # Writes: surface model guards as 400
    # -----------------------------
    def perform_create(self, serializer):
        try:
            serializer.save()
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict if hasattr(exc, "error_dict") else exc.messages)

    def perform_update(self, serializer):
        try:
            serializer.save()
        except DjangoValidationError as exc:
            raise serializers.ValidationError(exc.message_dict if hasattr(exc, "error_dict") else exc.messages)

    def destroy(self, request, *args, **kwargs):
        product = self.get_object()
        if product.is_active:
            product.is_active = False
            product.save(update_fields=["is_active", "updated_at"])
        return Response(status=status.HTTP_204_NO_CONTENT)

    # -----------------------------
    # Alerts
    # -----------------------------
    @extend_schema(
        responses={200: OpenApiResponse(response=ProductSerializer(many=True))},
        description="Active products at or below their stock_min.",
    )
    @action(detail=False, methods=["get"], url_path="alerts/low-stock")
    def low_stock_alerts(self, request):
        """
        GET /api/products/products/alerts/low-stock/
        """
        data = self.get_serializer(low_stock_products().order_by("name"), many=True).data
        return Response({"count": len(data), "results": data})

    @extend_schema(
        responses={200: OpenApiResponse(response=ProductSerializer(many=True))},
        description="Active products above their stock_max.",
    )
    @action(detail=False, methods=["get"], url_path="alerts/overstock")
    def overstock_alerts(self, request):
        """
        GET /api/products/products/alerts/overstock/
        """
        data = self.get_serializer(overstocked_products().order_by("name"), many=True).data
        return Response({"count": len(data), "results": data})
