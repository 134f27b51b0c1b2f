# products/models/stock_movement.py

"""
CANONICAL INVENTORY LEDGER

Immutable inventory ledger entry: one row per stock change.

GUARANTEES:
- Append-only (no updates, no deletes; the default manager refuses bulk ones too)
- stock_after == stock_before + quantity_delta
- quantity == abs(quantity_delta)
- stock_after >= 0
- supplier only on ENTRY movements

Rows are written ONLY by products.services.stock_ledger.record_movement(),
in the same transaction that moves Product.stock_current to stock_after.

ADJUSTMENT encoding:
- quantity keeps the magnitude of the correction
- quantity_delta keeps the signed change (direction)
- stock_before / stock_after remain the source of truth
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from suppliers.models import Supplier

from .product import Product


class StockMovementQuerySet(models.QuerySet):
    def delete(self):
        raise ValidationError("StockMovement records are immutable and cannot be deleted")

    def update(self, **kwargs):
        raise ValidationError("StockMovement records are immutable")

    def newest_first(self):
        return self.order_by("-created_at", "-id")


class StockMovement(models.Model):
    class MovementType(models.TextChoices):
        ENTRY = "ENTRY", "Entry"
        EXIT = "EXIT", "Exit"
        ADJUSTMENT = "ADJUSTMENT", "Adjustment"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="stock_movements"
    )

    movement_type = models.CharField(max_length=20, choices=MovementType.choices)

    quantity = models.DecimalField(max_digits=10, decimal_places=2)
    quantity_delta = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Signed stock change (stock_after - stock_before).",
    )

    unit_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )

    reason = models.CharField(max_length=500, blank=True, default="")
    notes = models.CharField(max_length=1000, blank=True, default="")

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="stock_movements",
    )

    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="stock_movements",
    )

    stock_before = models.DecimalField(max_digits=10, decimal_places=2)
    stock_after = models.DecimalField(max_digits=10, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = StockMovementQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["product", "created_at"], name="movement_product_created_idx"),
            models.Index(fields=["movement_type", "created_at"], name="movement_type_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(stock_after__gte=0),
                name="chk_movement_stock_after_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(supplier__isnull=True) | Q(movement_type="ENTRY"),
                name="chk_movement_supplier_entry_only",
            ),
        ]

    def clean(self):
        quantity = Decimal(self.quantity)
        delta = Decimal(self.quantity_delta)
        before = Decimal(self.stock_before)
        after = Decimal(self.stock_after)

        if quantity < 0:
            raise ValidationError({"quantity": "quantity cannot be negative"})

        if quantity != abs(delta):
            raise ValidationError({"quantity": "quantity must equal abs(quantity_delta)"})

        if after != before + delta:
            raise ValidationError("stock_after must equal stock_before + quantity_delta")

        if after < 0:
            raise ValidationError({"stock_after": "stock_after cannot be negative"})

        if self.unit_price is not None and Decimal(self.unit_price) < 0:
            raise ValidationError({"unit_price": "unit_price cannot be negative"})

        if self.movement_type == self.MovementType.ENTRY:
            if not self.supplier_id:
                raise ValidationError({"supplier": "supplier required for entry"})
            if delta <= 0:
                raise ValidationError("ENTRY must increase stock")
        else:
            if self.supplier_id:
                raise ValidationError({"supplier": "supplier only allowed for entry"})
            if self.movement_type == self.MovementType.EXIT and delta >= 0:
                raise ValidationError("EXIT must decrease stock")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("StockMovement records are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "StockMovement records are immutable and cannot be deleted"
        )

    @property
    def is_increase(self) -> bool:
        return Decimal(self.quantity_delta) > 0

    def __str__(self):
        product_name = getattr(self.product, "name", "Product")
        return (
            f"{product_name} | {self.movement_type} | {self.quantity} "
            f"({self.stock_before} -> {self.stock_after})"
        )
