"""Request-scoped wiring.

Long-lived handles (MongoDB client, mailer, credential codec, settings) are
created once in the application lifespan and kept on ``app.state``. These
dependencies read them from there and assemble the per-request objects.
"""

import json
import logging

from fastapi import Depends, HTTPException, Request
from pymongo.database import Database

from adapter.mongodb.user_repository import MongoUserRepository
from config.settings import Settings
from port.credentials import CredentialCodec
from port.mailer import MailerPort
from port.user_repository import UserRepository
from services.auth_service import AuthService

logger = logging.getLogger(__name__)

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return value


def get_settings(request: Request) -> Settings:
    return _state(request, "settings")


def get_db(request: Request, settings: Settings = Depends(get_settings)) -> Database:
    """Get MongoDB database, raising 503 if unavailable."""
    client = getattr(request.app.state, "mongo_client", None)
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[settings.mongodb_database]


def get_user_repo(db: Database = Depends(get_db)) -> UserRepository:
    return MongoUserRepository(db)


def get_mailer(request: Request) -> MailerPort:
    return _state(request, "mailer")


def get_credential_codec(request: Request) -> CredentialCodec:
    return _state(request, "codec")


def get_auth_service(
    repo: UserRepository = Depends(get_user_repo),
    mailer: MailerPort = Depends(get_mailer),
    codec: CredentialCodec = Depends(get_credential_codec),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(repo=repo, mailer=mailer, codec=codec, confirm_from=settings.confirm_email_from)


async def read_body(request: Request) -> dict:
    """Read a JSON or form body as a flat dict.

    Anything unreadable becomes an empty dict, so missing fields surface as
    ordinary field errors.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError):
        logger.debug("Ignoring unreadable request body", extra={"path": request.url.path})
        return {}
    return data if isinstance(data, dict) else {}
