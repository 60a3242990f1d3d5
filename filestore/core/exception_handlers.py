"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Maps domain and framework
exceptions to HTTP responses.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from filestore.core.config import get_settings
from filestore.domain.exceptions import FileStoreException

logger = logging.getLogger(__name__)

# Map domain error_code to HTTP status; unlisted codes answer 400.
_ERROR_CODE_STATUS: dict[str, int] = {
    "RESOURCE_NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "ACCESS_DENIED": 403,
    "FILE_TOO_LARGE": 413,
    "REMOTE_FETCH_ERROR": 502,
    "NO_PROVIDER_CONFIGURED": 503,
    "SERVICE_UNAVAILABLE": 503,
    "UNSUPPORTED_PROVIDER_TYPE": 500,
    "PROVIDER_CONFIG_ERROR": 500,
    "STORAGE_UPLOAD_ERROR": 500,
    "STORAGE_DELETE_ERROR": 500,
    "STORAGE_PERMISSION_ERROR": 500,
}


def status_for_error_code(error_code: str) -> int:
    """HTTP status for a FileStoreException error_code."""
    return _ERROR_CODE_STATUS.get(error_code, 400)


def _filestore_exception_handler(
    request: Request, exc: FileStoreException
) -> JSONResponse:
    """Return JSON from FileStoreException.to_dict() with appropriate status code."""
    status = status_for_error_code(exc.error_code)
    if status >= 500:
        logger.error("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return JSONResponse(
        status_code=status,
        content=exc.to_dict(),
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": jsonable_errors(exc),
        },
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """exc.errors() with non-JSON ctx values (e.g. exceptions) stringified."""
    errors = []
    for err in exc.errors():
        err = dict(err)
        if "ctx" in err:
            err["ctx"] = {k: str(v) for k, v in err["ctx"].items()}
        errors.append(err)
    return errors


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP_ERROR", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": detail},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: FileStoreException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(FileStoreException, _filestore_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
