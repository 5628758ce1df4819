"""Error codes and user-friendly messages.

This module defines the error catalog for statement import and review.
Each error has:
- code: Unique identifier (PARSE_*, IMP_*, RULE_*, API_*, DB_*, VAL_*)
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    "PARSE_001": {
        "code": "PARSE_001",
        "message": "Unsupported card provider requested",
        "user_message": "We don't have a parser for that card provider.",
        "suggestion": "Choose Samsung Card, KB Card, or 'other' to let us detect the layout.",
        "retry_allowed": False,
    },
    "PARSE_002": {
        "code": "PARSE_002",
        "message": "Workbook extraction failed: corrupted or unsupported file",
        "user_message": "This spreadsheet could not be opened.",
        "suggestion": "Download the statement again as an .xlsx file and retry.",
        "retry_allowed": True,
    },
    "PARSE_005": {
        "code": "PARSE_005",
        "message": "No transaction rows could be parsed from any sheet",
        "user_message": "No transactions could be parsed from this file.",
        "suggestion": "Check the file format. The sheet needs date, merchant and amount columns.",
        "retry_allowed": False,
    },
    "IMP_001": {
        "code": "IMP_001",
        "message": "Import not found",
        "user_message": "We couldn't find this statement upload.",
        "suggestion": "Refresh the upload list and try again.",
        "retry_allowed": False,
    },
    "IMP_002": {
        "code": "IMP_002",
        "message": "Import row not found",
        "user_message": "We couldn't find this row.",
        "suggestion": "Refresh the review screen and try again.",
        "retry_allowed": False,
    },
    "IMP_003": {
        "code": "IMP_003",
        "message": "Category not found",
        "user_message": "That category doesn't exist.",
        "suggestion": "Choose a category from the list.",
        "retry_allowed": False,
    },
    "IMP_004": {
        "code": "IMP_004",
        "message": "Import is no longer under review",
        "user_message": "This upload has already been finalized and can't be changed.",
        "suggestion": "Edit the ledger transactions directly instead.",
        "retry_allowed": False,
    },
    "IMP_005": {
        "code": "IMP_005",
        "message": "Import confirm attempted outside the reviewing state",
        "user_message": "This upload has already been confirmed.",
        "suggestion": "Refresh the upload to see its current state.",
        "retry_allowed": False,
    },
    "IMP_006": {
        "code": "IMP_006",
        "message": "Import has no eligible rows to confirm",
        "user_message": "There are no transactions left to confirm.",
        "suggestion": "Include at least one row, or delete this upload.",
        "retry_allowed": False,
    },
    "RULE_001": {
        "code": "RULE_001",
        "message": "Mapping rule not found",
        "user_message": "We couldn't find this rule.",
        "suggestion": "Refresh the rule list and try again.",
        "retry_allowed": False,
    },
    "RULE_002": {
        "code": "RULE_002",
        "message": "Mapping rule keyword is empty",
        "user_message": "A rule needs a keyword.",
        "suggestion": "Enter part of the merchant name to match.",
        "retry_allowed": False,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database transaction failed during import persistence",
        "user_message": "We couldn't save your changes due to a database error.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request data failed validation",
        "user_message": "Invalid input data",
        "suggestion": "Please check your input and try again",
        "retry_allowed": True,
    },
    # API-specific errors
    "API_001": {
        "code": "API_001",
        "message": "Invalid file type uploaded",
        "user_message": "Only Excel (.xlsx) statements are supported.",
        "suggestion": "Export the statement from your card company's site as Excel.",
        "retry_allowed": False,
    },
    "API_002": {
        "code": "API_002",
        "message": "File size exceeds maximum limit",
        "user_message": "The file is too large.",
        "suggestion": "Upload a single statement file at a time.",
        "retry_allowed": False,
    },
    "API_005": {
        "code": "API_005",
        "message": "Invalid workbook signature",
        "user_message": "This file doesn't look like an Excel workbook.",
        "suggestion": "Make sure you're uploading the original .xlsx file, not a renamed one.",
        "retry_allowed": False,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Unknown codes resolve to a generic definition instead of raising.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]
