"""Exception handlers producing catalog-shaped JSON error bodies.

Every error response carries the same keys: error_code, message,
user_message, suggestion and retry_allowed. Exception text is never echoed
to the client, and only logged in debug mode, because it can contain
merchant names, file names or SQL parameters.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from ledger_import.config import settings
from ledger_import.core.errors import get_error
from ledger_import.core.exceptions import ImportProcessingError

logger = logging.getLogger(__name__)

_DUPLICATE_BODY = {
    "error_code": "DB_002",
    "message": "Resource already exists",
    "user_message": "This record already exists",
    "suggestion": "Refresh and edit the existing record instead",
    "retry_allowed": False,
}

_INTERNAL_BODY = {
    "error_code": "SYS_001",
    "message": "Internal server error",
    "user_message": "An unexpected error occurred",
    "suggestion": "Please try again later",
    "retry_allowed": True,
}


def _catalog_body(error_code: str, message: str | None = None) -> dict:
    definition = get_error(error_code)
    return {
        "error_code": error_code,
        "message": message or definition["message"],
        "user_message": definition["user_message"],
        "suggestion": definition["suggestion"],
        "retry_allowed": definition["retry_allowed"],
    }


def _request_context(request: Request) -> dict:
    return {
        "path": request.url.path,
        "method": request.method,
        "request_id": getattr(request.state, "request_id", None),
    }


async def handle_import_processing_error(
    request: Request, exc: ImportProcessingError
) -> JSONResponse:
    """Map an ImportProcessingError to its catalog entry and HTTP status."""
    extra = {"error_code": exc.error_code, **_request_context(request)}
    if settings.debug:
        extra["details"] = exc.details

    # Client-side problems (bad file, state conflicts) are warnings, not errors.
    level = logging.WARNING if exc.http_status < 500 else logging.ERROR
    logger.log(level, f"Import processing error: {exc.error_code}", extra=extra)

    return JSONResponse(status_code=exc.http_status, content=_catalog_body(exc.error_code))


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as VAL_001 with per-field messages."""
    errors = exc.errors()
    messages = [
        f"{'.'.join(str(part) for part in error.get('loc', []))}: {error.get('msg', 'Invalid value')}"
        for error in errors
    ]

    extra = _request_context(request)
    if settings.debug:
        extra["errors"] = errors
    logger.warning(f"Validation error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_catalog_body("VAL_001", " | ".join(messages) or None),
    )


async def handle_integrity_error(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique violations become 409 DB_002; anything else is a 500 DB_001."""
    if settings.debug:
        logger.exception("Database integrity error", extra=_request_context(request))
    else:
        # str(exc) includes SQL and bound parameters.
        logger.error("Database integrity error", extra=_request_context(request))

    error_msg = str(exc.orig).lower() if exc.orig is not None else ""
    if "unique" in error_msg or "duplicate" in error_msg:
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=_DUPLICATE_BODY)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_catalog_body("DB_001")
    )


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    extra = {"error_type": type(exc).__name__, **_request_context(request)}
    if settings.debug:
        logger.exception(f"Unexpected error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Unexpected error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_INTERNAL_BODY
    )
