"""Uniform JSON response envelopes.

Every endpoint answers with ``{"success": bool, "message": str}`` and,
where there is a payload, a ``data`` key.
"""

from typing import Any

from fastapi import status
from fastapi.responses import JSONResponse


def _envelope(status_code: int, success: bool, message: str, data: Any = None,
              headers: dict | None = None) -> JSONResponse:
    content: dict[str, Any] = {"success": success, "message": message}
    if data is not None:
        content["data"] = data
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def success_response(message: str) -> JSONResponse:
    return _envelope(status.HTTP_200_OK, True, message)


def success_response_with_data(message: str, data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return _envelope(status_code, True, message, data)


def validation_error_with_data(message: str, data: list) -> JSONResponse:
    return _envelope(status.HTTP_400_BAD_REQUEST, False, message, data)


def unauthorized_response(message: str, headers: dict | None = None) -> JSONResponse:
    return _envelope(status.HTTP_401_UNAUTHORIZED, False, message, headers=headers)


def not_found_response(message: str = "Page not found") -> JSONResponse:
    return _envelope(status.HTTP_404_NOT_FOUND, False, message)


def error_response(message: str) -> JSONResponse:
    return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, False, message)


def service_unavailable_response(message: str) -> JSONResponse:
    return _envelope(status.HTTP_503_SERVICE_UNAVAILABLE, False, message)


def http_error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    """Envelope for framework-level HTTP errors (unknown route, bad method, ...)."""
    if status_code == status.HTTP_404_NOT_FOUND:
        return not_found_response()
    if status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        return service_unavailable_response(message)
    return _envelope(status_code, False, message, headers=headers)
