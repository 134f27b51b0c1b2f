# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules (ledger-safe):

- Products are created with stock 0; stock_current is read-only here.
- Stock changes go through the API (/api/inventory/movements/), never the admin.
- StockMovement rows are view-only audit artifacts: no add, change or delete.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Category, Product, StockMovement


# =====================================================
# CATEGORY
# =====================================================

@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name",)
    ordering = ("name",)


# =====================================================
# MOVEMENT INLINE (READ-ONLY)
# =====================================================

class StockMovementInline(admin.TabularInline):
    model = StockMovement
    fk_name = "product"
    extra = 0
    can_delete = False
    show_change_link = True
    ordering = ("-created_at",)

    fields = (
        "created_at",
        "movement_type",
        "quantity",
        "stock_before",
        "stock_after",
        "performed_by",
        "supplier",
    )
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


# =====================================================
# PRODUCT
# =====================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "category",
        "stock_current",
        "stock_min",
        "stock_max",
        "is_low_stock",
        "is_active",
    )
    list_filter = ("is_active", "category")
    search_fields = ("code", "name")
    ordering = ("name",)
    readonly_fields = ("stock_current", "created_at", "updated_at")

    inlines = [StockMovementInline]

    @admin.display(boolean=True, description="Low stock")
    def is_low_stock(self, obj):
        return obj.is_low_stock

    def has_delete_permission(self, request, obj=None):
        # deactivate instead; movements reference products with PROTECT
        return False


# =====================================================
# STOCK MOVEMENT (VIEW-ONLY LIST)
# =====================================================

@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    """
    View-only ledger list for audit visibility.
    """

    list_display = (
        "created_at",
        "product",
        "movement_type",
        "quantity",
        "quantity_delta",
        "stock_before",
        "stock_after",
        "performed_by",
        "supplier",
    )
    list_filter = ("movement_type", "created_at")
    search_fields = ("product__code", "product__name", "reason")
    ordering = ("-created_at",)
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
