# products/services/registry.py

"""
PRODUCT REGISTRY

Read/lock access to products and the single writer of Product.stock_current.

Rules:
- set_current_stock() is called ONLY by the stock ledger commit path,
  inside the same transaction that appends the StockMovement.
- It writes with a queryset UPDATE so Product.save() guards never run
  against the ledger itself.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError

from products.models import Product
from products.services.exceptions import ReferenceNotFound


def get_product(product_id, *, for_update: bool = False) -> Product:
    """
    Resolve a product by id.

    for_update=True takes a row lock (SELECT ... FOR UPDATE) and must be
    called inside transaction.atomic().
    """
    if product_id in (None, ""):
        raise ReferenceNotFound("Product", product_id)

    qs = Product.objects.all()
    if for_update:
        qs = qs.select_for_update()

    try:
        return qs.get(pk=product_id)
    except (Product.DoesNotExist, ValidationError, ValueError):
        raise ReferenceNotFound("Product", product_id)


def set_current_stock(product: Product, new_stock: Decimal) -> Product:
    if new_stock < Decimal("0.00"):
        raise ValidationError("stock_current cannot be negative")

    updated = Product.objects.filter(pk=product.pk).update(stock_current=new_stock)
    if updated != 1:
        raise ReferenceNotFound("Product", product.pk)

    product.stock_current = new_stock
    product._loaded_stock = new_stock
    return product


def low_stock_products():
    return Product.objects.active().low_stock().select_related("category")


def overstocked_products():
    return Product.objects.active().overstocked().select_related("category")
