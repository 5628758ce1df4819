"""Request logging middleware with PII filtering.

This module provides structured logging for all API requests with:
- Unique request IDs for tracing (echoed in ``X-Request-ID``)
- Request duration tracking
- Family context from the ``X-Family-ID`` header
- PII filtering so statement contents never reach the logs verbatim
"""

import json
import logging
import re
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# Order matters: resident numbers and phone numbers before the looser card pattern.
PII_PATTERNS = [
    # Korean resident registration numbers (YYMMDD-NNNNNNN)
    (re.compile(r"\b\d{6}-[1-8]\d{6}\b"), "[RRN]"),
    # Korean mobile numbers (010-1234-5678, 01012345678)
    (re.compile(r"\b01[016789][-\s]?\d{3,4}[-\s]?\d{4}\b"), "[PHONE]"),
    # Card numbers, including masked exports like 1234-56**-****-7890
    (re.compile(r"\b\d{4}[\s-]?[\d*]{4}[\s-]?[\d*]{4}[\s-]?\d{3,4}\b"), "[CARD]"),
    # Email addresses
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "[EMAIL]"),
]

# Fields copied from ``extra={...}`` into the JSON payload when present.
STRUCTURED_FIELDS = (
    "request_id",
    "family_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "error_code",
    "error_type",
    "import_id",
    "provider",
    "rows",
    "total_rows",
    "matched_rows",
    "transactions_created",
)


def filter_pii(text: str) -> str:
    """Replace PII in text with placeholders."""
    if not text:
        return text

    filtered = text
    for pattern, replacement in PII_PATTERNS:
        filtered = pattern.sub(replacement, filtered)
    return filtered


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with a request id and duration."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        context = {
            "request_id": request_id,
            "family_id": request.headers.get("x-family-id"),
            "method": request.method,
            "path": filter_pii(request.url.path),
        }
        logger.info("Request started", extra=context)

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed",
                extra={
                    **context,
                    "duration_ms": int((time.time() - start_time) * 1000),
                    "error_type": type(exc).__name__,
                },
            )
            raise

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "Request completed",
            extra={
                **context,
                "status_code": response.status_code,
                "duration_ms": int((time.time() - start_time) * 1000),
            },
        )
        return response


class JSONLogFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": filter_pii(record.getMessage()),
        }

        for field in STRUCTURED_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = filter_pii(self.formatException(record.exc_info))

        return json.dumps(log_data, ensure_ascii=False, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Install the JSON formatter on the root logger."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONLogFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())
