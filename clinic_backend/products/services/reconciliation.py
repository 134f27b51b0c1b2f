# products/services/reconciliation.py

"""
STOCK RECONCILIATION

Checks, per product:
- stock_current == stock_after of the latest movement (0 with no movements)
- the snapshot chain: each movement starts where the previous one ended
  (first movement starts at 0)

Read-only. Used by `manage.py verify_stock_ledger`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from products.models import Product, StockMovement


@dataclass
class StockDiscrepancy:
    product_id: str
    product_code: str
    stock_current: Decimal
    ledger_stock: Decimal
    broken_links: list[str] = field(default_factory=list)

    @property
    def stock_mismatch(self) -> bool:
        return self.stock_current != self.ledger_stock


def check_product_stock(product: Product) -> StockDiscrepancy | None:
    movements = (
        StockMovement.objects.filter(product=product)
        .order_by("created_at", "id")
        .values_list("id", "stock_before", "stock_after")
    )

    # created_at ties are not ordered by insertion, so the chain is walked
    # by matching each stock_before to the running balance when possible.
    running = Decimal("0.00")
    broken: list[str] = []
    pending = list(movements)
    while pending:
        index = next(
            (i for i, (_, before, _) in enumerate(pending) if Decimal(before) == running),
            None,
        )
        if index is None:
            movement_id, before, after = pending.pop(0)
            broken.append(str(movement_id))
        else:
            movement_id, before, after = pending.pop(index)
        running = Decimal(after)

    current = Decimal(product.stock_current)
    if current == running and not broken:
        return None

    return StockDiscrepancy(
        product_id=str(product.pk),
        product_code=product.code,
        stock_current=current,
        ledger_stock=running,
        broken_links=broken,
    )


def find_stock_discrepancies(queryset=None) -> list[StockDiscrepancy]:
    products = queryset if queryset is not None else Product.objects.all()
    found = []
    for product in products.order_by("code"):
        discrepancy = check_product_stock(product)
        if discrepancy is not None:
            found.append(discrepancy)
    return found
