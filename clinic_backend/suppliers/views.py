# suppliers/views.py

"""
SUPPLIER VIEWSET

Policy:
- Reads require inventory.view
- Writes require inventory.edit
- DELETE deactivates (is_active=False); suppliers referenced by the stock
  ledger must keep resolving
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import (
    CAP_INVENTORY_EDIT,
    CAP_INVENTORY_VIEW,
    HasCapability,
)
from suppliers.models import Supplier
from suppliers.serializers import SupplierSerializer


class SupplierViewSet(viewsets.ModelViewSet):
    serializer_class = SupplierSerializer
    required_capability = None

    def get_permissions(self):
        if self.action in {"list", "retrieve"}:
            self.required_capability = CAP_INVENTORY_VIEW
        else:
            self.required_capability = CAP_INVENTORY_EDIT
        return [IsAuthenticated(), HasCapability()]

    def get_queryset(self):
        qs = Supplier.objects.all().order_by("name")

        if self.action == "list":
            include_inactive = (
                self.request.query_params.get("include_inactive") or ""
            ).strip().lower() in ("1", "true", "yes")
            if not include_inactive:
                qs = qs.filter(is_active=True)

            q = (self.request.query_params.get("q") or "").strip()
            if q:
                qs = qs.filter(name__icontains=q)

        return qs

    @extend_schema(
        parameters=[
            OpenApiParameter(name="q", type=str, required=False),
            OpenApiParameter(name="include_inactive", type=bool, required=False),
        ]
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        supplier = self.get_object()
        if supplier.is_active:
            supplier.is_active = False
            supplier.save(update_fields=["is_active", "updated_at"])
        return Response(status=status.HTTP_204_NO_CONTENT)
