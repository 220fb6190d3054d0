"""
Exceptions raised by the accounts services.

They extend LedgerError so auth views answer with the same
``{'error': ...}`` body and ``status_code`` as the ledger apps.

Exception Hierarchy:
    AccountsServiceError
    ├── UserRegistrationError   (400)
    ├── InvalidCredentialsError (401)
    ├── InactiveAccountError    (403)
    └── RoleMismatchError       (403)
"""

from apps.common.exceptions import LedgerError


class AccountsServiceError(LedgerError):
    """Base exception for accounts services."""

    status_code = 400


class UserRegistrationError(AccountsServiceError):
    """Raised when the email is taken or the role is unknown."""

    status_code = 400


class InvalidCredentialsError(AccountsServiceError):
    """Raised for an unknown email or a wrong password."""

    status_code = 401


class InactiveAccountError(AccountsServiceError):
    status_code = 403


class RoleMismatchError(AccountsServiceError):
    """
    Raised when a login asks for a role the account does not hold,
    e.g. a donor signing in through the NGO staff console.
    """

    status_code = 403

    def __init__(self, *, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(f"This account is not registered as {expected}")
