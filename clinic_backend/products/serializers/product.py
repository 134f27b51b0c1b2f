# products/serializers/product.py

"""
PRODUCT SERIALIZER

stock_current is read-only: it only moves through the stock ledger
(POST /api/inventory/movements/entry|exit|adjustment/).
"""

from decimal import Decimal

from rest_framework import serializers

from products.models import Category, Product


class ProductSerializer(serializers.ModelSerializer):
    category = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), required=False, allow_null=True
    )
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)

    is_low_stock = serializers.BooleanField(read_only=True)
    is_overstocked = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "code",
            "name",
            "description",
            "category",
            "category_name",
            "unit_of_measure",
            "stock_current",
            "stock_min",
            "stock_max",
            "cost",
            "sale_price",
            "is_low_stock",
            "is_overstocked",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "category_name",
            "stock_current",
            "is_low_stock",
            "is_overstocked",
            "created_at",
            "updated_at",
        ]

    def validate_code(self, value):
        value = (value or "").strip().upper()
        if not value:
            raise serializers.ValidationError("code is required")
        return value

    def validate(self, attrs):
        for field in ("stock_min", "stock_max", "cost", "sale_price"):
            value = attrs.get(field)
            if value is not None and value < Decimal("0.00"):
                raise serializers.ValidationError({field: f"{field} must be non-negative"})

        stock_min = attrs.get("stock_min", getattr(self.instance, "stock_min", None))
        stock_max = attrs.get("stock_max", getattr(self.instance, "stock_max", None))
        if stock_min is not None and stock_max is not None and stock_min > stock_max:
            raise serializers.ValidationError({"stock_max": "stock_max must be >= stock_min"})
        return attrs
