from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Domain model representing a registered account."""
    id: str
    first_name: str
    last_name: str
    email: str
    password_hash: str
    created_at: datetime
    updated_at: datetime
    is_confirmed: bool = False
    confirm_otp: str | None = None
    status: bool = True

    def claims(self) -> 'SessionClaims':
        return SessionClaims(
            id=self.id,
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
        )

    def to_public_dict(self) -> dict:
        """Public profile fields. Never includes the hash or the OTP."""
        return self.claims().to_dict()


@dataclass(frozen=True)
class SessionClaims:
    """Identity carried inside a signed session token."""
    id: str
    first_name: str
    last_name: str
    email: str

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> 'SessionClaims':
        """Build claims from a decoded token payload.

        Raises:
            KeyError: a required claim is missing
        """
        return cls(
            id=payload['id'],
            first_name=payload['firstName'],
            last_name=payload['lastName'],
            email=payload['email'],
        )


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""
    user: User
    token: str

    def to_dict(self) -> dict:
        return {**self.user.to_public_dict(), 'token': self.token}
