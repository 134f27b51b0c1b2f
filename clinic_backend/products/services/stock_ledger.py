# products/services/stock_ledger.py

"""
======================================================
PATH: products/services/stock_ledger.py
======================================================
STOCK LEDGER ENGINE

Purpose:
- The ONLY way stock changes: validate a request, append one StockMovement
  and move Product.stock_current to the movement's stock_after, atomically.

Rules:
- ENTRY:      after = before + quantity (supplier required)
- EXIT:       after = before - quantity (never below zero)
- ADJUSTMENT: quantity is the counted target; after = quantity
- No movement row without the matching stock update, and vice versa.
- Same-product requests are serialized (process lock + row lock).

Validation order:
  type/number parsing -> product -> actor -> supplier rules
  -> supplier lookup -> quantity/price rules -> stock check
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction

from products.models import StockMovement
from products.services.audit import record_audit
from products.services.exceptions import (
    BusinessRuleViolation,
    InsufficientStock,
    PersistenceFailure,
)
from products.services.locks import product_lock
from products.services.registry import get_product, set_current_stock
from suppliers.services.directory import get_supplier
from users.services.directory import get_actor


logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
MAX_STOCK = Decimal("99999999.99")

MovementType = StockMovement.MovementType


# =====================================================
# INPUT NORMALIZATION
# =====================================================

def _normalize_type(movement_type) -> str:
    value = (str(movement_type or "")).strip().upper()
    if value not in MovementType.values:
        raise BusinessRuleViolation(f"invalid movement type: {movement_type}")
    return value


def _to_decimal(value, *, field_name: str) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise BusinessRuleViolation(f"{field_name} is required")
    try:
        d = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise BusinessRuleViolation(f"{field_name} must be a valid decimal")

    if not d.is_finite():
        raise BusinessRuleViolation(f"{field_name} must be a valid decimal")
    if abs(d) > MAX_STOCK:
        raise BusinessRuleViolation(f"{field_name} is too large")
    if d != d.quantize(TWOPLACES):
        raise BusinessRuleViolation(f"{field_name} allows at most 2 decimal places")
    return d.quantize(TWOPLACES)


def _validate_amounts(movement_type: str, quantity: Decimal, unit_price) -> None:
    if movement_type == MovementType.ADJUSTMENT:
        if quantity < 0:
            raise BusinessRuleViolation("quantity cannot be negative for adjustment")
    elif quantity <= 0:
        raise BusinessRuleViolation("quantity must be greater than zero")

    if unit_price is not None and unit_price < 0:
        raise BusinessRuleViolation("unit_price cannot be negative")


def _transition(movement_type: str, *, product, before: Decimal, quantity: Decimal):
    """
    Returns (stored_quantity, delta, after) for the requested movement.
    """
    if movement_type == MovementType.ENTRY:
        after = before + quantity
        if after > MAX_STOCK:
            raise BusinessRuleViolation("resulting stock exceeds the storable maximum")
        return quantity, quantity, after

    if movement_type == MovementType.EXIT:
        after = before - quantity
        if after < 0:
            logger.warning(
                "Rejected exit: insufficient stock",
                extra={
                    "product_id": str(product.pk),
                    "available": str(before),
                    "requested": str(quantity),
                },
            )
            raise InsufficientStock(product.pk, available=before, requested=quantity)
        return quantity, -quantity, after

    # a count that confirms the stock is recorded with a zero delta
    delta = quantity - before
    return abs(delta), delta, quantity


# =====================================================
# PUBLIC API
# =====================================================

def record_movement(
    *,
    product_id,
    movement_type,
    quantity,
    actor_id,
    unit_price=None,
    reason: str = "",
    supplier_id=None,
    notes: str = "",
) -> StockMovement:
    """
    Validate and commit one stock movement.

    Raises:
    - ReferenceNotFound: product, actor or supplier id does not resolve
    - BusinessRuleViolation: bad type, amount or supplier usage
    - InsufficientStock: EXIT larger than the stock on hand
    - PersistenceFailure: storage error or lock timeout (retryable)
    """
    mtype = _normalize_type(movement_type)
    qty = _to_decimal(quantity, field_name="quantity")
    price = None
    if unit_price not in (None, ""):
        price = _to_decimal(unit_price, field_name="unit_price")

    with product_lock(product_id):
        try:
            movement = _commit(
                product_id=product_id,
                movement_type=mtype,
                quantity=qty,
                unit_price=price,
                actor_id=actor_id,
                supplier_id=supplier_id,
                reason=reason,
                notes=notes,
            )
        except ValidationError as exc:
            raise BusinessRuleViolation("; ".join(exc.messages)) from exc
        except DatabaseError as exc:
            logger.exception(
                "Stock movement persistence failed",
                extra={"product_id": str(product_id), "movement_type": mtype},
            )
            raise PersistenceFailure(f"could not persist stock movement: {exc}") from exc

    logger.info(
        "Stock movement recorded",
        extra={
            "movement_id": str(movement.id),
            "product_id": str(movement.product_id),
            "movement_type": mtype,
            "stock_before": str(movement.stock_before),
            "stock_after": str(movement.stock_after),
        },
    )
    return movement


def _commit(*, product_id, movement_type, quantity, unit_price, actor_id, supplier_id, reason, notes):
    """
    Resolve references, apply the transition and persist. Caller holds the product lock.
    """
    product = get_product(product_id)
    actor = get_actor(actor_id)

    has_supplier = supplier_id not in (None, "")
    if movement_type == MovementType.ENTRY and not has_supplier:
        raise BusinessRuleViolation("supplier required for entry")
    if movement_type != MovementType.ENTRY and has_supplier:
        raise BusinessRuleViolation("supplier only allowed for entry")

    supplier = get_supplier(supplier_id) if has_supplier else None

    _validate_amounts(movement_type, quantity, unit_price)

    with transaction.atomic():
        locked = get_product(product.pk, for_update=True)
        before = Decimal(locked.stock_current)

        stored_qty, delta, after = _transition(
            movement_type, product=locked, before=before, quantity=quantity
        )

        movement = StockMovement(
            product=locked,
            movement_type=movement_type,
            quantity=stored_qty,
            quantity_delta=delta,
            unit_price=unit_price,
            reason=(reason or "").strip(),
            notes=(notes or "").strip(),
            performed_by=actor,
            supplier=supplier,
            stock_before=before,
            stock_after=after,
        )
        movement.save()
        set_current_stock(locked, after)

        transaction.on_commit(lambda: record_audit(movement, "created"))

    return movement


def record_entry(*, product_id, quantity, actor_id, supplier_id, unit_price=None, reason="", notes=""):
    return record_movement(
        product_id=product_id,
        movement_type=MovementType.ENTRY,
        quantity=quantity,
        actor_id=actor_id,
        unit_price=unit_price,
        reason=reason,
        supplier_id=supplier_id,
        notes=notes,
    )


def record_exit(*, product_id, quantity, actor_id, reason="", notes=""):
    return record_movement(
        product_id=product_id,
        movement_type=MovementType.EXIT,
        quantity=quantity,
        actor_id=actor_id,
        reason=reason,
        notes=notes,
    )


def record_adjustment(*, product_id, new_quantity, actor_id, reason="", notes=""):
    return record_movement(
        product_id=product_id,
        movement_type=MovementType.ADJUSTMENT,
        quantity=new_quantity,
        actor_id=actor_id,
        reason=reason,
        notes=notes,
    )
