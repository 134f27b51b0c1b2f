# products/services/exceptions.py

"""
STOCK LEDGER SERVICE ERRORS

Centralized domain errors for inventory services.

Every failure of a ledger operation is one of these; callers (views,
management commands) map them to responses without inspecting messages.
"""

from __future__ import annotations

from decimal import Decimal


class StockLedgerError(Exception):
    """Base exception for all stock ledger failures."""

    code = "STOCK_LEDGER_ERROR"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ReferenceNotFound(StockLedgerError):
    """Raised when a product, user or supplier id does not resolve."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class BusinessRuleViolation(StockLedgerError):
    """Raised when a request breaks a ledger rule (bad quantity, supplier rule...)."""

    code = "BUSINESS_RULE_VIOLATION"


class InsufficientStock(StockLedgerError):
    """Raised when an EXIT would take stock below zero."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id, available: Decimal, requested: Decimal):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"insufficient stock: available {available}, requested {requested}"
        )


class PersistenceFailure(StockLedgerError):
    """Raised when storage fails or the product lock cannot be acquired in time."""

    code = "PERSISTENCE_FAILURE"
    retryable = True
