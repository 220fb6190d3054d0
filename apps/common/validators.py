"""Input checks shared by the ledger services."""

from .exceptions import ValidationError


def require_positive_int(value, field='quantity'):
    """Return ``value`` if it is a positive integer, else raise ValidationError."""
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return value


def require_non_negative_int(value, field='quantity'):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < 0:
        raise ValidationError(f"{field} cannot be negative")
    return value


def require_text(value, field):
    """Return the stripped string, or raise ValidationError if it is blank."""
    if value is None:
        raise ValidationError(f"{field} is required")
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    text = value.strip()
    if not text:
        raise ValidationError(f"{field} is required")
    return text
