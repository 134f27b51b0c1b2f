# products/views/errors.py

"""
Canonical API error responses for inventory endpoints.

Body shape: {"error": {"code": ..., "message": ...}}
"""

from rest_framework import status
from rest_framework.response import Response

from products.services.exceptions import (
    BusinessRuleViolation,
    InsufficientStock,
    PersistenceFailure,
    ReferenceNotFound,
    StockLedgerError,
)


def error_response(*, code: str, message: str, http_status: int, **details):
    """
    Canonical API error response.
    """
    body = {"code": code, "message": message}
    body.update(details)
    return Response({"error": body}, status=http_status)


def ledger_error_response(exc: StockLedgerError):
    if isinstance(exc, ReferenceNotFound):
        return error_response(
            code=exc.code, message=exc.message, http_status=status.HTTP_404_NOT_FOUND
        )

    if isinstance(exc, InsufficientStock):
        return error_response(
            code=exc.code,
            message=exc.message,
            http_status=status.HTTP_409_CONFLICT,
            available=str(exc.available),
            requested=str(exc.requested),
        )

    if isinstance(exc, BusinessRuleViolation):
        return error_response(
            code=exc.code, message=exc.message, http_status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, PersistenceFailure):
        return error_response(
            code=exc.code,
            message=exc.message,
            http_status=status.HTTP_503_SERVICE_UNAVAILABLE,
            retryable=True,
        )

    return error_response(
        code=exc.code,
        message=exc.message,
        http_status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
