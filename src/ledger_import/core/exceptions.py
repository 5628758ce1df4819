"""Custom exception classes for statement import and review.

Each exception carries an error_code from errors.py and the HTTP status
the API layer should answer with. Row-level parse problems never surface
here; they are handled inside the parsers by dropping the row.
"""

from typing import Any


class ImportProcessingError(Exception):
    """Base exception for all statement import errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "PARSE_005")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return
    """

    http_status_default = 500

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status or self.http_status_default
        super().__init__(error_code)


class WorkbookExtractionError(ImportProcessingError):
    """Raised when the uploaded bytes cannot be opened as a workbook (PARSE_002)."""

    http_status_default = 400


class UnsupportedProviderError(ImportProcessingError):
    """Raised when an explicit provider hint names no known parser (PARSE_001)."""

    http_status_default = 400


class EmptyParseResultError(ImportProcessingError):
    """Raised when every sheet yielded zero rows (PARSE_005).

    No Import is created when this is raised.
    """

    http_status_default = 400


class ResourceNotFoundError(ImportProcessingError):
    """Raised when a referenced import, row, category or rule does not exist
    for the requesting family."""

    http_status_default = 404


class ImportLockedError(ImportProcessingError):
    """Raised when a row mutation or delete targets an import that is no
    longer under review (IMP_004)."""

    http_status_default = 403


class ImportConflictError(ImportProcessingError):
    """Raised when confirm is called on an import that is not reviewing (IMP_005).

    Callers must refresh the import before retrying.
    """

    http_status_default = 409


class InvalidImportStateError(ImportProcessingError):
    """Raised when confirm finds no non-excluded rows (IMP_006)."""

    http_status_default = 422


class RuleValidationError(ImportProcessingError):
    """Raised when a mapping rule fails validation (RULE_002)."""

    http_status_default = 400


class UploadValidationError(ImportProcessingError):
    """Raised when the upload body is rejected before parsing
    (API_001 content type, API_002 size, API_005 signature)."""

    http_status_default = 400
