from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations raise StoreError when the backing store fails and
    DuplicateError when an email is already taken.
    """
    def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        confirm_otp: str,
    ) -> User:
        """Create a new unconfirmed, active user and return it."""
        ...

    def exists_by_email(self, email: str) -> bool:
        """Return True if any user holds this email."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def mark_confirmed(self, user_id: str) -> bool:
        """Confirm an unconfirmed user and clear its OTP.

        Return False if the user does not exist or is already confirmed.
        """
        ...

    def set_confirm_otp(self, user_id: str, otp: str) -> bool:
        """Store a fresh OTP on an unconfirmed user.

        Return False if the user does not exist or is already confirmed.
        """
        ...
