# products/views/stock_movement.py

"""
======================================================
PATH: products/views/stock_movement.py
======================================================
STOCK MOVEMENT API (/api/inventory/movements/)

Reads:
- GET  /                         list (filters: product, movement_type, date_from, date_to)
- GET  /<id>/                    retrieve
- GET  /product/<product_id>/    movements of one product
- GET  /type/<movement_type>/    movements of one type
- GET  /date-range/?date_from=&date_to=
- GET  /history/?product_id=&date_from=&date_to=

Writes (the acting user is always request.user):
- POST /entry/        ENTRY       (inventory.receive)
- POST /exit/         EXIT        (inventory.consume)
- POST /adjustment/   ADJUSTMENT  (inventory.adjust)

Errors use the canonical body {"error": {"code", "message"}}.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from permissions.roles import (
    CAP_INVENTORY_ADJUST,
    CAP_INVENTORY_CONSUME,
    CAP_INVENTORY_RECEIVE,
    CAP_INVENTORY_VIEW,
    HasCapability,
)
from products.filters import StockMovementFilter
from products.models import StockMovement
from products.serializers.stock_movement import (
    AdjustmentRequestSerializer,
    EntryRequestSerializer,
    ExitRequestSerializer,
    StockMovementSerializer,
)
from products.services import movement_queries, stock_ledger
from products.services.exceptions import StockLedgerError
from products.views.errors import ledger_error_response


ACTION_CAPABILITIES = {
    "entry": CAP_INVENTORY_RECEIVE,
    "exit": CAP_INVENTORY_CONSUME,
    "adjustment": CAP_INVENTORY_ADJUST,
}

DATE_PARAMS = [
    OpenApiParameter(name="date_from", type=str, required=True, description="ISO date or datetime (inclusive)"),
    OpenApiParameter(name="date_to", type=str, required=True, description="ISO date or datetime (inclusive)"),
]


class StockMovementViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = StockMovementSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = StockMovementFilter
    required_capability = None

    def get_permissions(self):
        self.required_capability = ACTION_CAPABILITIES.get(self.action, CAP_INVENTORY_VIEW)
        return [IsAuthenticated(), HasCapability()]

    def get_queryset(self):
        return StockMovement.objects.select_related(
            "product", "performed_by", "supplier"
        ).newest_first()

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = StockMovementSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(StockMovementSerializer(queryset, many=True).data)

    # =====================================================
    # QUERIES
    # =====================================================

    @action(detail=False, methods=["get"], url_path=r"product/(?P<product_id>[^/.]+)")
    def by_product(self, request, product_id=None):
        try:
            qs = movement_queries.by_product(product_id)
        except StockLedgerError as exc:
            return ledger_error_response(exc)
        return self._paginated(qs)

    @action(detail=False, methods=["get"], url_path=r"type/(?P<movement_type>[^/.]+)")
    def by_type(self, request, movement_type=None):
        try:
            qs = movement_queries.by_type(movement_type)
        except StockLedgerError as exc:
            return ledger_error_response(exc)
        return self._paginated(qs)

    @extend_schema(parameters=DATE_PARAMS)
    @action(detail=False, methods=["get"], url_path="date-range")
    def date_range(self, request):
        try:
            qs = movement_queries.by_date_range(
                request.query_params.get("date_from"),
                request.query_params.get("date_to"),
            )
        except StockLedgerError as exc:
            return ledger_error_response(exc)
        return self._paginated(qs)

    @extend_schema(
        parameters=[OpenApiParameter(name="product_id", type=str, required=True), *DATE_PARAMS]
    )
    @action(detail=False, methods=["get"], url_path="history")
    def history(self, request):
        try:
            qs = movement_queries.by_product_and_date_range(
                request.query_params.get("product_id"),
                request.query_params.get("date_from"),
                request.query_params.get("date_to"),
            )
        except StockLedgerError as exc:
            return ledger_error_response(exc)
        return self._paginated(qs)

    # =====================================================
    # COMMANDS
    # =====================================================

    def _record(self, func, **kwargs):
        try:
            movement = func(actor_id=self.request.user.pk, **kwargs)
        except StockLedgerError as exc:
            return ledger_error_response(exc)
        return Response(StockMovementSerializer(movement).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        request=EntryRequestSerializer,
        responses={
            201: StockMovementSerializer,
            400: OpenApiResponse(description="BUSINESS_RULE_VIOLATION"),
            404: OpenApiResponse(description="NOT_FOUND"),
            503: OpenApiResponse(description="PERSISTENCE_FAILURE"),
        },
    )
    @action(detail=False, methods=["post"], url_path="entry")
    def entry(self, request):
        serializer = EntryRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return self._record(
            stock_ledger.record_entry,
            product_id=data["product_id"],
            quantity=data["quantity"],
            supplier_id=data.get("supplier_id"),
            unit_price=data.get("unit_price"),
            reason=data.get("reason", ""),
            notes=data.get("notes", ""),
        )

    @extend_schema(
        request=ExitRequestSerializer,
        responses={
            201: StockMovementSerializer,
            400: OpenApiResponse(description="BUSINESS_RULE_VIOLATION"),
            404: OpenApiResponse(description="NOT_FOUND"),
            409: OpenApiResponse(description="INSUFFICIENT_STOCK"),
            503: OpenApiResponse(description="PERSISTENCE_FAILURE"),
        },
    )
    @action(detail=False, methods=["post"], url_path="exit")
    def exit(self, request):
        serializer = ExitRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return self._record(
            stock_ledger.record_exit,
            product_id=data["product_id"],
            quantity=data["quantity"],
            reason=data.get("reason", ""),
            notes=data.get("notes", ""),
        )

    @extend_schema(
        request=AdjustmentRequestSerializer,
        responses={
            201: StockMovementSerializer,
            400: OpenApiResponse(description="BUSINESS_RULE_VIOLATION"),
            404: OpenApiResponse(description="NOT_FOUND"),
            503: OpenApiResponse(description="PERSISTENCE_FAILURE"),
        },
    )
    @action(detail=False, methods=["post"], url_path="adjustment")
    def adjustment(self, request):
        serializer = AdjustmentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return self._record(
            stock_ledger.record_adjustment,
            product_id=data["product_id"],
            new_quantity=data["quantity"],
            reason=data.get("reason", ""),
            notes=data.get("notes", ""),
        )
