"""
Login and token issuing.

Access tokens carry the account's role so clients can pick the donor
or NGO staff console without an extra round trip to /api/auth/user/.
Permissions never trust these claims; they re-read the user row.
"""

import logging
from typing import Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import UserRole

from .exceptions import InactiveAccountError, InvalidCredentialsError, RoleMismatchError

User = get_user_model()
logger = logging.getLogger(__name__)

ROLE_LABELS = dict(UserRole.choices)


@transaction.atomic
def authenticate_user(*, email: str, password: str, role: Optional[str] = None) -> User:
    """
    Check credentials and record the login.

    Args:
        email: Account email, matched case-insensitively
        password: Plain-text password
        role: When given, the login is refused unless the account holds
            this role

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: The account is deactivated
        RoleMismatchError: ``role`` differs from the account's role
    """
    try:
        user = User.objects.select_for_update().get(email__iexact=email)
    except User.DoesNotExist:
        logger.info("Login failed for unknown email")
        raise InvalidCredentialsError("Invalid email or password")

    if not user.check_password(password):
        logger.info("Login failed for account %s: wrong password", user.id)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    if role is not None and role != user.role:
        logger.warning(
            "Refused %s login for account %s holding role %s",
            role, user.id, user.role,
        )
        raise RoleMismatchError(expected=ROLE_LABELS.get(role, role), actual=user.role)

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    logger.info("Account %s logged in as %s", user.id, user.role)
    return user


def issue_tokens(user: User) -> dict:
    """Return a refresh/access pair whose claims describe the account."""
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    refresh['is_ngo_staff'] = user.is_ngo_staff
    refresh['display_name'] = user.get_display_name()
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }
