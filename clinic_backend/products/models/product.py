# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from .category import Category


class ProductQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def low_stock(self):
        """Products at or below their reorder threshold (stock_min)."""
        return self.filter(stock_min__isnull=False, stock_current__lte=F("stock_min"))

    def overstocked(self):
        """Products above their advisory ceiling (stock_max)."""
        return self.filter(stock_max__isnull=False, stock_current__gt=F("stock_max"))


class Product(models.Model):
    """
    Represents a stocked clinic product (medicine, supply, food...).

    STOCK MODEL (IMPORTANT):
    - stock_current is OWNED BY THE STOCK LEDGER
    - a product is created with stock 0; stock arrives through movements
    - save() refuses to change stock_current on an existing row; the only
      writer is products.services.registry.set_current_stock(), called from
      the ledger commit path
    - stock_min / stock_max are advisory (alerts only), never blocking
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    code = models.CharField(max_length=50, unique=True, db_index=True)
    name = models.CharField(max_length=200, db_index=True)
    description = models.CharField(max_length=1000, blank=True, default="")

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
    )

    unit_of_measure = models.CharField(max_length=20, default="unit")

    stock_current = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="On-hand quantity (ledger-managed only).",
    )
    stock_min = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    stock_max = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )

    cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    sale_price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(stock_current__gte=0),
                name="chk_product_stock_current_gte_zero",
            ),
            models.CheckConstraint(
                condition=Q(cost__gte=0),
                name="chk_product_cost_gte_zero",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"

    def clean(self):
        self.code = (self.code or "").strip().upper()
        if not self.code:
            raise ValidationError({"code": "code is required"})

        if not (self.name or "").strip():
            raise ValidationError({"name": "name is required"})

        for field in ("stock_min", "stock_max", "cost", "sale_price"):
            value = getattr(self, field)
            if value is not None and Decimal(value) < Decimal("0.00"):
                raise ValidationError({field: f"{field} cannot be negative"})

        if (
            self.stock_min is not None
            and self.stock_max is not None
            and Decimal(self.stock_min) > Decimal(self.stock_max)
        ):
            raise ValidationError({"stock_max": "stock_max must be >= stock_min"})

    # -------------------------------------------------
    # LEDGER OWNERSHIP OF stock_current
    # -------------------------------------------------

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._loaded_stock = instance.__dict__.get("stock_current")
        return instance

    def refresh_from_db(self, *args, **kwargs):
        super().refresh_from_db(*args, **kwargs)
        self._loaded_stock = self.__dict__.get("stock_current")

    def _stock_changed_by_caller(self, update_fields) -> bool:
        if update_fields is not None and "stock_current" in update_fields:
            return True
        loaded = getattr(self, "_loaded_stock", None)
        return loaded is not None and Decimal(loaded) != Decimal(self.stock_current)

    def save(self, *args, **kwargs):
        if self._state.adding:
            if Decimal(self.stock_current or 0) != Decimal("0.00"):
                raise ValidationError(
                    {"stock_current": "Products start at 0; record an ENTRY or ADJUSTMENT movement."}
                )
        else:
            update_fields = kwargs.get("update_fields")
            if self._stock_changed_by_caller(update_fields):
                raise ValidationError(
                    {"stock_current": "stock_current is managed by the stock ledger"}
                )

            # a stale instance may carry an old value; the column is never written here
            if update_fields is None:
                update_fields = [
                    f.name
                    for f in self._meta.concrete_fields
                    if not f.primary_key and f.name != "stock_current"
                ]
            kwargs["update_fields"] = update_fields

        self.full_clean()
        super().save(*args, **kwargs)

        stored = (
            Product.objects.filter(pk=self.pk)
            .values_list("stock_current", flat=True)
            .first()
        )
        if stored is not None:
            self.stock_current = stored
        self._loaded_stock = self.stock_current

    # -------------------------------------------------
    # ADVISORY HELPERS
    # -------------------------------------------------

    @property
    def is_low_stock(self) -> bool:
        if self.stock_min is None:
            return False
        return Decimal(self.stock_current) <= Decimal(self.stock_min)

    @property
    def is_overstocked(self) -> bool:
        if self.stock_max is None:
            return False
        return Decimal(self.stock_current) > Decimal(self.stock_max)
