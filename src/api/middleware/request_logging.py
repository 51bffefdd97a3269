"""Per-request access log line."""

import logging
import time

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def register_request_logging(app: FastAPI) -> None:
    """Log method, path, status and duration for every request.

    A request whose handler raises is logged as 500 before the exception
    reaches the app's error handler.
    """

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                f"{request.method} {request.url.path} {status_code}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "statusCode": status_code,
                    "durationMs": round(elapsed_ms, 2),
                },
            )
