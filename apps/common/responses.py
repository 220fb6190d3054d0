"""Helpers for turning domain exceptions into API responses."""

from rest_framework.response import Response

from .exceptions import InsufficientStockError, LedgerError


def ledger_error_response(exc: LedgerError) -> Response:
    """Build the JSON error response for a domain exception."""
    body = {'error': str(exc)}
    if isinstance(exc, InsufficientStockError):
        body['available'] = exc.available
        body['requested'] = exc.requested
    return Response(body, status=exc.status_code)
