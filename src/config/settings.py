"""Application settings loaded from environment variables.

A ``.env`` file in the working directory is loaded first, so local
development does not need exported variables.
"""

import os
import re
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

_DURATION_PATTERN = re.compile(r'^\s*(\d+)\s*([smhd]?)\s*$', re.IGNORECASE)
_DURATION_UNITS = {'': 1, 's': 1, 'm': 60, 'h': 3600, 'd': 86400}


def parse_duration(value: str) -> int:
    """Convert a token lifetime such as ``"2h"``, ``"30m"`` or ``"3600"`` to seconds.

    Raises:
        ValueError: value is not a positive duration
    """
    match = _DURATION_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    seconds = int(amount) * _DURATION_UNITS[unit.lower()]
    if seconds <= 0:
        raise ValueError(f"Duration must be positive: {value!r}")
    return seconds


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class Settings:
    jwt_secret: str | None = None
    jwt_algorithm: str = 'HS256'
    jwt_expiry_seconds: int = 7200
    bcrypt_rounds: int = 10

    mongodb_url: str | None = None
    mongodb_database: str = 'rest_auth'

    confirm_email_from: str = 'no-reply@test-app.com'
    smtp_host: str = 'localhost'
    smtp_port: int = 587
    smtp_username: str = ''
    smtp_password: str = ''
    smtp_secure: bool = False
    smtp_timeout: float = 10.0

    cors_origins: str = '*'
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> 'Settings':
        return cls(
            jwt_secret=os.getenv('JWT_SECRET') or None,
            jwt_algorithm=os.getenv('JWT_ALGORITHM', 'HS256'),
            jwt_expiry_seconds=parse_duration(os.getenv('JWT_TIMEOUT_DURATION', '2h')),
            bcrypt_rounds=int(os.getenv('BCRYPT_ROUNDS', '10')),
            mongodb_url=os.getenv('MONGODB_URL') or None,
            mongodb_database=os.getenv('MONGODB_DATABASE', 'rest_auth'),
            confirm_email_from=os.getenv('CONFIRM_EMAIL_FROM', 'no-reply@test-app.com'),
            smtp_host=os.getenv('EMAIL_SMTP_HOST', 'localhost'),
            smtp_port=int(os.getenv('EMAIL_SMTP_PORT', '587')),
            smtp_username=os.getenv('EMAIL_SMTP_USERNAME', ''),
            smtp_password=os.getenv('EMAIL_SMTP_PASSWORD', ''),
            smtp_secure=_env_bool('EMAIL_SMTP_SECURE'),
            smtp_timeout=float(os.getenv('EMAIL_SMTP_TIMEOUT', '10')),
            cors_origins=os.getenv('CORS_ORIGINS', '*'),
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
        )

    def require_jwt_secret(self) -> str:
        if not self.jwt_secret:
            raise ValueError(
                "JWT_SECRET environment variable is required. "
                "Generate a secure key with: openssl rand -hex 32"
            )
        return self.jwt_secret
