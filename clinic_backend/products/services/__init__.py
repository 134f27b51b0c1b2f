# products/services/__init__.py
#
# Only the error types are re-exported here: users/suppliers directories import
# them, and the ledger itself imports those directories.

from .exceptions import (
    BusinessRuleViolation,
    InsufficientStock,
    PersistenceFailure,
    ReferenceNotFound,
    StockLedgerError,
)

__all__ = [
    "StockLedgerError",
    "ReferenceNotFound",
    "BusinessRuleViolation",
    "InsufficientStock",
    "PersistenceFailure",
]
