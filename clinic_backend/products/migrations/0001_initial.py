"""
MIGRATION: CREATE Category, Product, StockMovement (stock ledger)
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("suppliers", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=100, unique=True)),
                ("description", models.CharField(blank=True, default="", max_length=500)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("code", models.CharField(db_index=True, max_length=50, unique=True)),
                ("name", models.CharField(db_index=True, max_length=200)),
                ("description", models.CharField(blank=True, default="", max_length=1000)),
                ("unit_of_measure", models.CharField(default="unit", max_length=20)),
                (
                    "stock_current",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="On-hand quantity (ledger-managed only).",
                        max_digits=10,
                    ),
                ),
                ("stock_min", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("stock_max", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("sale_price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "category",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="products",
                        to="products.category",
                    ),
                ),
            ],
            options={
                "ordering": ["name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(stock_current__gte=0),
                        name="chk_product_stock_current_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(cost__gte=0),
                        name="chk_product_cost_gte_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "movement_type",
                    models.CharField(
                        choices=[
                            ("ENTRY", "Entry"),
                            ("EXIT", "Exit"),
                            ("ADJUSTMENT", "Adjustment"),
                        ],
                        max_length=20,
                    ),
                ),
                ("quantity", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "quantity_delta",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Signed stock change (stock_after - stock_before).",
                        max_digits=10,
                    ),
                ),
                ("unit_price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("reason", models.CharField(blank=True, default="", max_length=500)),
                ("notes", models.CharField(blank=True, default="", max_length=1000)),
                ("stock_before", models.DecimalField(decimal_places=2, max_digits=10)),
                ("stock_after", models.DecimalField(decimal_places=2, max_digits=10)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="products.product",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="stock_movements",
                        to="suppliers.supplier",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["product", "created_at"], name="movement_product_created_idx"),
                    models.Index(fields=["movement_type", "created_at"], name="movement_type_created_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(stock_after__gte=0),
                        name="chk_movement_stock_after_gte_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(supplier__isnull=True) | models.Q(movement_type="ENTRY"),
                        name="chk_movement_supplier_entry_only",
                    ),
                ],
            },
        ),
    ]
