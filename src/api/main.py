"""FastAPI application entry point."""

import logging
import os
import sys
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

# Add src to path
# main.py is at /app/src/api/main.py
# src is at /app/src, so we go up 2 levels
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from adapter.mongodb.connection import create_mongodb_client
from adapter.mongodb.user_repository import MongoUserRepository
from adapter.security.credential_codec import BcryptJwtCodec
from adapter.smtp.mailer import SmtpMailer
from api.middleware.request_logging import register_request_logging
from api.responses import error_response, http_error_response
from api.routes import auth, health
from config.settings import Settings
from utils.logging import setup_structured_logging

SERVICE_NAME = "REST Auth API"

settings = Settings.from_env()

setup_structured_logging(settings.log_level, service=SERVICE_NAME)

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
try:
    with open(_project_root / "pyproject.toml", "rb") as f:
        VERSION = tomllib.load(f)["project"]["version"]
except FileNotFoundError:
    VERSION = "0.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the long-lived handles, and release them on shutdown."""
    app.state.settings = settings
    app.state.codec = BcryptJwtCodec(
        secret=settings.require_jwt_secret(),
        expiry_seconds=settings.jwt_expiry_seconds,
        algorithm=settings.jwt_algorithm,
        bcrypt_rounds=settings.bcrypt_rounds,
    )
    app.state.mailer = SmtpMailer(
        host=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        secure=settings.smtp_secure,
        timeout=settings.smtp_timeout,
    )

    client = create_mongodb_client(settings.mongodb_url)
    app.state.mongo_client = client
    if client:
        if MongoUserRepository(client[settings.mongodb_database]).ensure_indexes():
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, auth endpoints will answer 503")

    yield  # App runs here

    if client:
        client.close()
        logger.info("MongoDB client closed")


app = FastAPI(
    title=SERVICE_NAME,
    description="User registration, login and email OTP account confirmation",
    version=VERSION,
    lifespan=lifespan,
)

# When using JWT authentication with Authorization header:
# - If CORS_ORIGINS="*": allow_credentials must be False (browsers don't support credentials with wildcard)
# - If CORS_ORIGINS is a specific list: allow_credentials can be True
if settings.cors_origins == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    cors_origins = [origin.strip() for origin in settings.cors_origins.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_request_logging(app)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes, rejected tokens and unavailable dependencies keep the envelope shape."""
    return http_error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error", extra={"path": request.url.path})
    return error_response("An unexpected error occurred.")


# Register routes; the auth routes are served both at the root and under /api
app.include_router(auth.router)
app.include_router(auth.router, prefix="/api", include_in_schema=False)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False  # request logging middleware already covers this
    )
