"""User registration service."""

import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from apps.accounts.models import UserRole

from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    role: str = UserRole.DONOR,
    organization_name: str = "",
) -> User:
    """
    Register a new donor or NGO staff account.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name
        role: 'donor' or 'ngo_staff'
        organization_name: Optional NGO or business name

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken or the role is unknown
    """
    if role not in UserRole.values:
        raise UserRegistrationError(f"Unknown role: {role}")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name,
            role=role,
            organization_name=organization_name,
        )
    except IntegrityError:
        raise UserRegistrationError("A user with this email already exists")

    logger.info("Registered %s account %s", role, user.id)
    return user
