"""MongoDB implementation of UserRepository."""

import uuid
from datetime import datetime, timezone
from logging import getLogger
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError
from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import ensure_index
from domain.model.errors import DuplicateError, StoreError
from domain.model.user import User

logger = getLogger(__name__)


class MongoUserRepository:
    def __init__(self, db: Database):
        self.collection = db[USERS_COLLECTION_NAME]

    def ensure_indexes(self) -> bool:
        """Create indexes for users collection.

        The unique email index is what actually prevents two concurrent
        registrations from both inserting the same address.
        """
        try:
            return all([
                ensure_index(self.collection, [('email', 1)], 'idx_users_email', unique=True),
                ensure_index(self.collection, [('created_at', -1)], 'idx_users_created_at'),
            ])
        except Exception as e:
            logger.error("Failed to create users indexes", extra={"error": str(e)})
            return False

    def _to_domain(self, doc: dict) -> User:
        """Convert MongoDB document to User domain model."""
        return User(
            id=doc['_id'],
            first_name=doc['first_name'],
            last_name=doc['last_name'],
            email=doc['email'],
            password_hash=doc['password_hash'],
            created_at=doc['created_at'],
            updated_at=doc['updated_at'],
            is_confirmed=bool(doc.get('is_confirmed', False)),
            confirm_otp=doc.get('confirm_otp'),
            status=bool(doc.get('status', True)),
        )

    def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
        confirm_otp: str,
    ) -> User:
        """Insert a new unconfirmed user and return the User object."""
        user_id = uuid.uuid4().hex
        now = datetime.now(timezone.utc)
        user_doc = {
            '_id': user_id,
            'first_name': first_name,
            'last_name': last_name,
            'email': email,
            'password_hash': password_hash,
            'is_confirmed': False,
            'confirm_otp': confirm_otp,
            'status': True,
            'created_at': now,
            'updated_at': now,
        }
        try:
            self.collection.insert_one(user_doc)
        except DuplicateKeyError:
            logger.warning("User creation failed: email already exists", extra={"email": email})
            raise DuplicateError("E-mail already in use")
        except PyMongoError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise StoreError(str(e)) from e

        logger.info("User created", extra={"userId": user_id, "email": email})
        return self._to_domain(user_doc)

    def exists_by_email(self, email: str) -> bool:
        try:
            return self.collection.count_documents({'email': email}, limit=1) > 0
        except PyMongoError as e:
            logger.error("Failed to check user email", extra={"email": email, "error": str(e)})
            raise StoreError(str(e)) from e

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'email': email})
        except PyMongoError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise StoreError(str(e)) from e
        return self._to_domain(doc) if doc else None

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            doc = self.collection.find_one({'_id': user_id})
        except PyMongoError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise StoreError(str(e)) from e
        return self._to_domain(doc) if doc else None

    def mark_confirmed(self, user_id: str) -> bool:
        """Confirm the user if it is still unconfirmed. Return True if a record changed."""
        return self._update_unconfirmed(
            user_id,
            {'is_confirmed': True, 'confirm_otp': None},
            action="confirm user",
        )

    def set_confirm_otp(self, user_id: str, otp: str) -> bool:
        """Replace the pending OTP of an unconfirmed user."""
        return self._update_unconfirmed(
            user_id,
            {'is_confirmed': False, 'confirm_otp': otp},
            action="store confirm otp",
        )

    def _update_unconfirmed(self, user_id: str, fields: dict, action: str) -> bool:
        try:
            result = self.collection.update_one(
                {'_id': user_id, 'is_confirmed': False},
                {'$set': {**fields, 'updated_at': datetime.now(timezone.utc)}},
            )
        except PyMongoError as e:
            logger.error(f"Failed to {action}", extra={"userId": user_id, "error": str(e)})
            raise StoreError(str(e)) from e

        if result.matched_count == 0:
            logger.warning(f"Could not {action}: no unconfirmed user", extra={"userId": user_id})
            return False
        logger.debug(f"Updated user: {action}", extra={"userId": user_id})
        return True
