"""Field checks and sanitizing for auth requests.

Every value is trimmed before it is checked. Each field reports at most one
error, the first rule it breaks. Values handed on to the workflow are
HTML-escaped.
"""

import html
import re

from email_validator import EmailNotValidError, validate_email

from domain.model.errors import FieldError

MIN_PASSWORD_LENGTH = 6

_ALPHANUMERIC = re.compile(r'^[0-9A-Za-z]+$')


def clean(value: str | None) -> str:
    return (value or '').strip()


def sanitize(value: str) -> str:
    """Escape HTML-significant characters in an already trimmed value."""
    escaped = html.escape(value, quote=True)
    return escaped.replace('/', '&#x2F;').replace('\\', '&#x5C;').replace('`', '&#96;')


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def check_name(field: str, label: str, value: str) -> FieldError | None:
    if not value:
        return FieldError(field, f"{label} must be specified.")
    if not _ALPHANUMERIC.match(value):
        return FieldError(field, f"{label} has non-alphanumeric characters.")
    return None


def check_email(value: str, field: str = 'email') -> FieldError | None:
    if not value:
        return FieldError(field, "Email must be specified.")
    if not is_valid_email(value):
        return FieldError(field, "Email must be a valid email address.")
    return None


def check_new_password(value: str, field: str = 'password') -> FieldError | None:
    if len(value) < MIN_PASSWORD_LENGTH:
        return FieldError(field, f"Password must be {MIN_PASSWORD_LENGTH} characters or greater.")
    return None


def check_required(field: str, message: str, value: str) -> FieldError | None:
    if not value:
        return FieldError(field, message)
    return None


def collect(*results: FieldError | None) -> list[FieldError]:
    return [error for error in results if error is not None]
