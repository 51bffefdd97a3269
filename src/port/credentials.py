"""Port definition for password hashing and session tokens."""

from typing import Protocol

from domain.model.user import SessionClaims


class CredentialCodec(Protocol):
    def hash_password(self, password: str) -> str: ...
    def verify_password(self, password: str, password_hash: str) -> bool: ...
    def issue_token(self, claims: SessionClaims) -> str: ...
    def verify_token(self, token: str) -> SessionClaims:
        """Decode a token. Raise InvalidTokenError if it is not acceptable."""
        ...
