"""
Input shape rules for credentials and profile fields.

Each validator returns a list of messages (empty when valid). Keys used in
the field-error maps are the camelCase names clients send.
"""

from typing import List, Optional

from pydantic.networks import validate_email

from src.domain.errors import FieldErrors

EMAIL_MAX_LENGTH = 255
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
# bcrypt only reads this many bytes; longer input would be silently cut
PASSWORD_MAX_BYTES = 72
DISPLAY_NAME_MAX_LENGTH = 100
AVATAR_REF_MAX_LENGTH = 500


def email_errors(email: Optional[str]) -> List[str]:
    if email is None or not email.strip():
        return ["Email is required"]
    if len(email.strip()) > EMAIL_MAX_LENGTH:
        return [f"Email cannot exceed {EMAIL_MAX_LENGTH} characters"]
    try:
        validate_email(email.strip())
    except ValueError:
        return ["Invalid email format"]
    return []


def password_errors(password: Optional[str]) -> List[str]:
    if not password or not password.strip():
        return ["Password is required"]
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(
            f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
        )
    if len(password) > PASSWORD_MAX_LENGTH:
        errors.append(f"Password cannot exceed {PASSWORD_MAX_LENGTH} characters")
    elif len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append(f"Password cannot exceed {PASSWORD_MAX_BYTES} bytes")
    if not any(ch.isalpha() for ch in password):
        errors.append("Password must contain at least one letter")
    if not any(ch.isdigit() for ch in password):
        errors.append("Password must contain at least one digit")
    return errors


def max_length_errors(value: Optional[str], label: str, limit: int) -> List[str]:
    if value is not None and len(value.strip()) > limit:
        return [f"{label} cannot exceed {limit} characters"]
    return []


def collect(**fields: List[str]) -> FieldErrors:
    """Drop fields without messages"""
    return {name: messages for name, messages in fields.items() if messages}


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim; blank becomes None"""
    if value is None:
        return None
    return value.strip() or None
