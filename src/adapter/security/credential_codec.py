"""bcrypt password hashing and JWT session tokens."""

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from domain.model.errors import InvalidTokenError
from domain.model.user import SessionClaims

logger = logging.getLogger(__name__)

# bcrypt configuration
# 10 rounds (2^10 iterations) by default; tests lower it to keep hashing fast
BCRYPT_ROUNDS = 10
# bcrypt only reads the first 72 bytes of a password; newer releases raise past it
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


class BcryptJwtCodec:
    def __init__(
        self,
        secret: str,
        expiry_seconds: int,
        algorithm: str = "HS256",
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ):
        if not secret:
            raise ValueError("A token signing secret is required")
        self._secret = secret
        self._expiry = timedelta(seconds=expiry_seconds)
        self._algorithm = algorithm
        self._rounds = bcrypt_rounds

    def hash_password(self, password: str) -> str:
        """Hash password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hashed password as string
        """
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode('utf-8')

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Constant-time comparison against a bcrypt hash."""
        try:
            return bcrypt.checkpw(_password_bytes(password), password_hash.encode('utf-8'))
        except (ValueError, TypeError):
            return False

    def issue_token(self, claims: SessionClaims) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            **claims.to_dict(),
            "sub": claims.id,
            "iat": now,
            "exp": now + self._expiry,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify_token(self, token: str) -> SessionClaims:
        """Verify JWT token and extract its claims.

        Raises:
            InvalidTokenError: bad signature, expired token or missing claim
        """
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            return SessionClaims.from_dict(payload)
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise InvalidTokenError("Invalid authentication credentials") from e
        except KeyError as e:
            logger.debug(f"JWT missing claim: {e}")
            raise InvalidTokenError("Invalid authentication credentials") from e
