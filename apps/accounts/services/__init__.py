"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    RoleMismatchError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, issue_tokens

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'RoleMismatchError',
    # Services
    'register_user',
    'authenticate_user',
    'issue_tokens',
]
