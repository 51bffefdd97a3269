"""In-memory implementation of UserRepository for testing."""

import uuid
from datetime import datetime, timezone
from domain.model.errors import DuplicateError
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        confirm_otp: str,
    ) -> User:
        if self.exists_by_email(email):
            raise DuplicateError("E-mail already in use")

        now = datetime.now(timezone.utc)
        user = User(
            id=uuid.uuid4().hex,
            first_name=first_name,
            last_name=last_name,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
            is_confirmed=False,
            confirm_otp=confirm_otp,
            status=True,
        )
        self.store[user.id] = user
        return user

    def mark_confirmed(self, user_id: str) -> bool:
        user = self.store.get(user_id)
        if not user or user.is_confirmed:
            return False

        user.is_confirmed = True
        user.confirm_otp = None
        user.updated_at = datetime.now(timezone.utc)
        return True

    def set_confirm_otp(self, user_id: str, otp: str) -> bool:
        user = self.store.get(user_id)
        if not user or user.is_confirmed:
            return False

        user.confirm_otp = otp
        user.updated_at = datetime.now(timezone.utc)
        return True

    # ── read operations ──────────────────────────────────────

    def exists_by_email(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def get_by_email(self, email: str) -> User | None:
        for user in self.store.values():
            if user.email == email:
                return user
        return None

    def get_by_id(self, user_id: str) -> User | None:
        return self.store.get(user_id)
