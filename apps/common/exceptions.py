"""
Domain exceptions shared by the ledger apps.

These exceptions represent business rule violations raised by the
services layer. Views catch them and convert them to HTTP responses
using the ``status_code`` each class carries.

Exception Hierarchy:
    LedgerError (base)
    ├── ValidationError
    ├── InvalidTransitionError
    ├── InsufficientStockError
    ├── InvalidMachineError
    ├── NotFoundError
    └── PermissionDeniedError

Usage:
    from apps.common.exceptions import InsufficientStockError

    if quantity > item.available_quantity:
        raise InsufficientStockError(
            available=item.available_quantity,
            requested=quantity,
        )
"""


class LedgerError(Exception):
    """
    Base exception for all ledger service errors.

    Catching this class in a view covers every domain failure:

        try:
            approve_donation(request_id=pk, reviewer=request.user)
        except LedgerError as e:
            return ledger_error_response(e)
    """

    status_code = 400


class ValidationError(LedgerError):
    """Raised when input is malformed, missing or non-positive."""

    status_code = 400


class InvalidTransitionError(LedgerError):
    """
    Raised when a donation request cannot move to the requested status.

    Example:
        raise InvalidTransitionError(
            "Cannot move donation request from 'rejected' to 'approved-pending-verification'"
        )
    """

    status_code = 409

    def __init__(self, message, *, current=None, target=None):
        super().__init__(message)
        self.current = current
        self.target = target


class InsufficientStockError(LedgerError):
    """
    Raised when a requested quantity exceeds the available balance.

    The message always reports the available quantity so the caller
    can correct the request immediately.
    """

    status_code = 409

    def __init__(self, *, available, requested, message=None):
        self.available = available
        self.requested = requested
        if message is None:
            message = (
                f"Insufficient stock: requested {requested}, "
                f"only {available} available"
            )
        super().__init__(message)


class InvalidMachineError(LedgerError):
    """Raised when a target machine is unknown, offline, in maintenance or full."""

    status_code = 400


class NotFoundError(LedgerError):
    """Raised when an entity does not exist."""

    status_code = 404


class PermissionDeniedError(LedgerError):
    """Raised when the acting user may not trigger an operation."""

    status_code = 403
