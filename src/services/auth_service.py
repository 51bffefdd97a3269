"""Auth service — registration, login and email OTP confirmation.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to response envelopes.

Blocking collaborators (store, bcrypt, SMTP) run in worker threads so each
step is an await point on the event loop. Steps within one operation always
run in the order written here.
"""

import asyncio
import logging
import secrets

from domain.model.errors import (
    DuplicateError,
    FieldError,
    UnauthorizedError,
    ValidationError,
)
from domain.model.user import LoginResult, User
from port.credentials import CredentialCodec
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services import auth_validation as v

logger = logging.getLogger(__name__)

OTP_LENGTH = 4
CONFIRM_SUBJECT = "Confirm Account"

EMAIL_IN_USE = "E-mail already in use"
BAD_CREDENTIALS = "Email or Password wrong."
NOT_CONFIRMED = "Account is not confirmed. Please confirm your account."
NOT_ACTIVE = "Account is not active. Please contact admin."
EMAIL_NOT_FOUND = "Specified email not found."
ALREADY_CONFIRMED = "Account already confirmed."
OTP_MISMATCH = "Otp does not match."


def generate_otp(length: int = OTP_LENGTH) -> str:
    """Random numeric code of exactly ``length`` digits (no leading zero)."""
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


def confirmation_html(otp: str) -> str:
    return f"<p>Please Confirm your Account.</p><p>OTP: {otp}</p>"


class AuthService:
    def __init__(
        self,
        repo: UserRepository,
        mailer: MailerPort,
        codec: CredentialCodec,
        confirm_from: str,
    ):
        self._repo = repo
        self._mailer = mailer
        self._codec = codec
        self._confirm_from = confirm_from

    async def _send_confirmation(self, email: str, otp: str) -> None:
        await asyncio.to_thread(
            self._mailer.send,
            self._confirm_from,
            email,
            CONFIRM_SUBJECT,
            confirmation_html(otp),
        )

    async def _find_unconfirmed(self, email: str) -> User:
        user = await asyncio.to_thread(self._repo.get_by_email, email)
        if not user:
            raise UnauthorizedError(EMAIL_NOT_FOUND)
        if user.is_confirmed:
            raise UnauthorizedError(ALREADY_CONFIRMED)
        return user

    async def register(self, first_name: str, last_name: str, email: str, password: str) -> User:
        """Register a new user and mail them a confirmation OTP.

        The mail goes out before the record is written, so a failed send
        leaves no account behind.

        Raises:
            ValidationError: bad fields or email already registered
            MailDeliveryError: confirmation mail could not be sent
            StoreError: user could not be persisted
        """
        first_name, last_name = v.clean(first_name), v.clean(last_name)
        email, password = v.clean(email), v.clean(password)

        email_error = v.check_email(email)
        if email_error is None and await asyncio.to_thread(self._repo.exists_by_email, email):
            email_error = FieldError('email', EMAIL_IN_USE)

        errors = v.collect(
            v.check_name('firstName', "First name", first_name),
            v.check_name('lastName', "Last name", last_name),
            email_error,
            v.check_new_password(password),
        )
        if errors:
            raise ValidationError("Validation Error.", errors)

        first_name, last_name = v.sanitize(first_name), v.sanitize(last_name)
        email, password = v.sanitize(email), v.sanitize(password)

        otp = generate_otp()
        password_hash = await asyncio.to_thread(self._codec.hash_password, password)
        await self._send_confirmation(email, otp)

        try:
            user = await asyncio.to_thread(
                self._repo.create,
                first_name=first_name,
                last_name=last_name,
                email=email,
                password_hash=password_hash,
                confirm_otp=otp,
            )
        except DuplicateError:
            # Lost a race with a concurrent registration for the same address
            raise ValidationError("Validation Error.", [FieldError('email', EMAIL_IN_USE)])

        logger.info("User registered", extra={"userId": user.id, "email": user.email})
        return user

    async def login(self, email: str, password: str) -> LoginResult:
        """Check credentials, then account state, and issue a session token.

        Raises:
            ValidationError: missing or malformed fields
            UnauthorizedError: wrong credentials, unconfirmed or inactive account
        """
        email, password = v.clean(email), v.clean(password)
        errors = v.collect(
            v.check_email(email),
            v.check_required('password', "Password must be specified.", password),
        )
        if errors:
            raise ValidationError("Validation Error.", errors)
        email, password = v.sanitize(email), v.sanitize(password)

        user = await asyncio.to_thread(self._repo.get_by_email, email)
        if not user:
            raise UnauthorizedError(BAD_CREDENTIALS)

        matches = await asyncio.to_thread(self._codec.verify_password, password, user.password_hash)
        if not matches:
            raise UnauthorizedError(BAD_CREDENTIALS)
        if not user.is_confirmed:
            raise UnauthorizedError(NOT_CONFIRMED)
        if not user.status:
            raise UnauthorizedError(NOT_ACTIVE)

        token = self._codec.issue_token(user.claims())
        logger.info("User logged in", extra={"userId": user.id, "email": user.email})
        return LoginResult(user=user, token=token)

    async def verify_otp(self, email: str, otp: str) -> None:
        """Confirm an account with the OTP it was mailed.

        Raises:
            ValidationError: missing or malformed fields
            UnauthorizedError: unknown email, already confirmed or wrong OTP
            StoreError: confirmation could not be saved
        """
        email, otp = v.clean(email), v.clean(otp)
        errors = v.collect(
            v.check_email(email),
            v.check_required('otp', "OTP must be specified.", otp),
        )
        if errors:
            raise ValidationError("Validation Error.", errors)
        email, otp = v.sanitize(email), v.sanitize(otp)

        user = await self._find_unconfirmed(email)
        if not secrets.compare_digest(str(user.confirm_otp or '').encode('utf-8'), otp.encode('utf-8')):
            raise UnauthorizedError(OTP_MISMATCH)

        if not await asyncio.to_thread(self._repo.mark_confirmed, user.id):
            raise UnauthorizedError(ALREADY_CONFIRMED)
        logger.info("Account confirmed", extra={"userId": user.id})

    async def resend_otp(self, email: str) -> None:
        """Mail a fresh OTP to an unconfirmed account, replacing the old one.

        The stored OTP only changes after the mail has gone out.

        Raises:
            ValidationError: missing or malformed email
            UnauthorizedError: unknown email or already confirmed
            MailDeliveryError: confirmation mail could not be sent
            StoreError: new OTP could not be saved
        """
        email = v.clean(email)
        errors = v.collect(v.check_email(email))
        if errors:
            raise ValidationError("Validation Error.", errors)
        email = v.sanitize(email)

        user = await self._find_unconfirmed(email)
        otp = generate_otp()
        await self._send_confirmation(email, otp)

        if not await asyncio.to_thread(self._repo.set_confirm_otp, user.id, otp):
            raise UnauthorizedError(ALREADY_CONFIRMED)
        logger.info("Confirm otp resent", extra={"userId": user.id})
