"""
API Exception Handlers

Translates store and framework errors into JSON error responses:

- InvalidArgumentError / RequestValidationError -> 400
- SessionNotFoundError                          -> 404
- Unknown route                                 -> 404 "Endpoint not found"
- StorageUnavailableError / unexpected errors   -> 500

500 responses include a formatted traceback under ``stack`` unless the
service runs in production.
"""

import traceback
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from chat_sessions.core.config import Settings, get_settings
from chat_sessions.core.exceptions import (
    InvalidArgumentError,
    SessionNotFoundError,
    StorageUnavailableError,
)
from chat_sessions.observability.logging import get_logger


logger = get_logger(__name__)

_STORAGE_ERRORS = {
    "create": "Failed to create session",
    "list": "Failed to get sessions",
    "get": "Failed to get session",
    "update": "Failed to update session",
    "delete": "Failed to delete session",
}


def _error_response(
    status_code: int,
    error: str,
    message: Optional[str] = None,
    exc: Optional[BaseException] = None,
    settings: Optional[Settings] = None,
) -> JSONResponse:
    body: dict[str, Any] = {"error": error}
    if message is not None:
        body["message"] = message
    if exc is not None and not (settings or get_settings()).is_production:
        body["stack"] = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
    return JSONResponse(status_code=status_code, content=body)


def _app_settings(request: Request) -> Optional[Settings]:
    return getattr(request.app.state, "settings", None)


def _describe_validation_errors(exc: RequestValidationError) -> tuple[str, str]:
    """Summarize pydantic errors as (error, message) strings."""
    missing: list[str] = []
    details: list[str] = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path"))
        if err.get("type") == "missing":
            missing.append(location)
        details.append(f"{location or 'body'}: {err.get('msg')}")

    if missing:
        return f"Missing required fields: {', '.join(missing)}", "; ".join(details)
    return "Invalid request", "; ".join(details)


# =============================================================================
# Handlers
# =============================================================================


async def invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error, message = _describe_validation_errors(exc)
    return _error_response(status.HTTP_400_BAD_REQUEST, error, message)


async def session_not_found_handler(request: Request, exc: SessionNotFoundError) -> JSONResponse:
    # Deliberately identical for unknown ids and sessions of other users
    return _error_response(status.HTTP_404_NOT_FOUND, "Session not found")


async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError) -> JSONResponse:
    error = _STORAGE_ERRORS.get(exc.operation, "Session storage unavailable")
    logger.error(
        "storage_unavailable",
        operation=exc.operation,
        path=request.url.path,
        error=exc.message,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        error,
        exc.message,
        exc,
        _app_settings(request),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error_response(
            status.HTTP_404_NOT_FOUND,
            "Endpoint not found",
            f"Cannot {request.method} {request.url.path}",
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        error=f"{type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Internal Server Error",
        str(exc) or type(exc).__name__,
        exc,
        _app_settings(request),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install all error handlers on ``app``."""
    app.add_exception_handler(InvalidArgumentError, invalid_argument_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SessionNotFoundError, session_not_found_handler)
    app.add_exception_handler(StorageUnavailableError, storage_unavailable_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
