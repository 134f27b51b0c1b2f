# products/services/audit.py

"""
STOCK MOVEMENT AUDIT

Runs after the ledger transaction commits:
- one structured line on the "audit" logger
- stock_movement_recorded signal, sent robustly

Receiver failures are logged and never reach the caller; the movement is
already committed at this point.
"""

from __future__ import annotations

import logging

from products.signals import stock_movement_recorded


audit_logger = logging.getLogger("audit")
logger = logging.getLogger(__name__)


def _audit_payload(movement, action: str) -> dict:
    return {
        "action": action,
        "movement_id": str(movement.id),
        "product_id": str(movement.product_id),
        "movement_type": movement.movement_type,
        "quantity": str(movement.quantity),
        "quantity_delta": str(movement.quantity_delta),
        "stock_before": str(movement.stock_before),
        "stock_after": str(movement.stock_after),
        "performed_by": str(movement.performed_by_id),
        "supplier_id": str(movement.supplier_id) if movement.supplier_id else None,
    }


def record_audit(movement, action: str = "created") -> None:
    payload = _audit_payload(movement, action)
    audit_logger.info(
        "stock_movement %s:%s", action, payload["movement_id"], extra={"audit": payload}
    )

    responses = stock_movement_recorded.send_robust(
        sender=movement.__class__, movement=movement, action=action
    )
    for receiver, response in responses:
        if isinstance(response, Exception):
            logger.error(
                "Audit receiver %r failed for movement %s",
                receiver,
                payload["movement_id"],
                exc_info=(type(response), response, response.__traceback__),
            )
