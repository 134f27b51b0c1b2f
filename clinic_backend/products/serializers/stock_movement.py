# products/serializers/stock_movement.py

"""
STOCK MOVEMENT SERIALIZERS

- StockMovementSerializer: read-only ledger rows
- Entry/Exit/Adjustment command serializers: request shape only;
  every business rule lives in products.services.stock_ledger
"""

from rest_framework import serializers

from products.models import StockMovement


class StockMovementSerializer(serializers.ModelSerializer):
    product_code = serializers.CharField(source="product.code", read_only=True)
    product_name = serializers.CharField(source="product.name", read_only=True)
    performed_by_username = serializers.CharField(
        source="performed_by.username", read_only=True
    )
    supplier_name = serializers.CharField(
        source="supplier.name", read_only=True, default=None
    )

    class Meta:
        model = StockMovement
        fields = [
            "id",
            "product",
            "product_code",
            "product_name",
            "movement_type",
            "quantity",
            "quantity_delta",
            "unit_price",
            "reason",
            "notes",
            "performed_by",
            "performed_by_username",
            "supplier",
            "supplier_name",
            "stock_before",
            "stock_after",
            "created_at",
        ]
        read_only_fields = fields


class _MovementCommandSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    # decimals are parsed by the ledger so that range errors share one code path
    quantity = serializers.CharField()
    reason = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class EntryRequestSerializer(_MovementCommandSerializer):
    supplier_id = serializers.UUIDField(required=False, allow_null=True)
    unit_price = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ExitRequestSerializer(_MovementCommandSerializer):
    pass


class AdjustmentRequestSerializer(_MovementCommandSerializer):
    """quantity is the counted (target) stock, not a delta."""
