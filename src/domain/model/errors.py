"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map them to response envelopes.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single failing input field."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {'field': self.field, 'message': self.message}


class DomainError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str = ''):
        self.message = message
        super().__init__(message)


class ValidationError(DomainError):
    """One or more input fields failed validation."""

    def __init__(self, message: str = 'Validation Error.', errors: list[FieldError] | None = None):
        self.errors = list(errors or [])
        super().__init__(message)


class UnauthorizedError(DomainError):
    """Credentials or account state do not allow the requested action."""


class InvalidTokenError(UnauthorizedError):
    """Session token is malformed, expired or carries a bad signature."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class DependencyError(DomainError):
    """An external collaborator (store, mail transport) failed."""


class StoreError(DependencyError):
    """The user store could not complete a read or write."""


class MailDeliveryError(DependencyError):
    """The mail transport rejected or failed to send a message."""
