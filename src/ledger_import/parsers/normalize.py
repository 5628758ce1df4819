"""Cell value normalizers shared by every statement parser.

Statement exports mix typed cells (openpyxl hands back ``datetime`` and
numbers) with text cells in a handful of Korean card-company styles. These
helpers turn one raw cell into a canonical ``date`` or a non-negative
integer amount in won.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta
from typing import Any

# Spreadsheet serial day 0. Serial 25569 is 1970-01-01.
EXCEL_EPOCH = date(1899, 12, 30)

_SERIAL_RE = re.compile(r"^\d{5}$")
_FULL_DATE_RE = re.compile(r"(\d{4})[.\-/](\d{1,2})[.\-/](\d{1,2})")
_SHORT_DATE_RE = re.compile(r"^(\d{1,2})[.\-/](\d{1,2})$")
_COMPACT_DATE_RE = re.compile(r"^(\d{4})(\d{2})(\d{2})$")

_AMOUNT_STRIP_RE = re.compile(r"[,\s원()]")
_AMOUNT_LEADING_INT_RE = re.compile(r"^[+-]?\d+")

# Largest value a BIGINT amount column holds.
MAX_AMOUNT = 2**63 - 1


class UnparseableValueError(ValueError):
    """A single cell could not be normalized.

    Parsers catch this and drop the row; it never aborts an import.
    """


def normalize_date(value: Any, today: date | None = None) -> date:
    """Normalize a raw date cell.

    Accepted, first match wins:
        - ``date``/``datetime`` cells (typed spreadsheet dates)
        - spreadsheet serial numbers (five digits)
        - ``YYYY-MM-DD``, ``YYYY.MM.DD``, ``YYYY/MM/DD`` (time suffix allowed)
        - ``MM/DD``, ``MM.DD``, ``MM-DD``: year defaults to today's year
        - ``YYYYMMDD``

    The bare month/day form assumes the current calendar year, so a
    December statement uploaded in January is dated a year late. Pass
    ``today`` to pin the reference date.

    Raises:
        UnparseableValueError: If no pattern matches or the date is invalid.
    """
    if value is None or value == "":
        raise UnparseableValueError("Could not parse date: empty value")

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if float(value).is_integer():
            text = str(int(value))
        else:
            text = str(value)
    else:
        text = str(value).strip()

    if _SERIAL_RE.match(text):
        return EXCEL_EPOCH + timedelta(days=int(text))

    full = _FULL_DATE_RE.search(text)
    if full:
        return _build_date(full.group(1), full.group(2), full.group(3), text)

    short = _SHORT_DATE_RE.match(text)
    if short:
        year = (today or date.today()).year
        return _build_date(str(year), short.group(1), short.group(2), text)

    compact = _COMPACT_DATE_RE.match(text)
    if compact:
        return _build_date(compact.group(1), compact.group(2), compact.group(3), text)

    raise UnparseableValueError(f"Could not parse date: {text}")


def _build_date(year: str, month: str, day: str, original: str) -> date:
    try:
        return date(int(year), int(month), int(day))
    except ValueError as e:
        raise UnparseableValueError(f"Could not parse date: {original}") from e


def normalize_amount(value: Any) -> int:
    """Normalize a raw amount cell to a non-negative whole number of won.

    Thousands separators, whitespace, the ``원`` suffix and accounting
    parentheses are stripped; the sign is dropped because refunds and
    cancellations are flagged elsewhere on the statement. Anything after
    the leading integer (decimals, currency codes) is ignored.

    Returns:
        The absolute amount, or 0 when nothing numeric is present or the
        value exceeds MAX_AMOUNT. Callers treat 0 as "drop this row".
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return 0
        amount = abs(int(value))
    else:
        text = _AMOUNT_STRIP_RE.sub("", str(value))
        match = _AMOUNT_LEADING_INT_RE.match(text)
        if not match:
            return 0
        digits = match.group(0).lstrip("+-").lstrip("0")
        if len(digits) > len(str(MAX_AMOUNT)):
            return 0
        amount = int(digits or "0")

    return amount if amount <= MAX_AMOUNT else 0


def cell_text(value: Any) -> str:
    """Render a cell as trimmed text for header and marker matching."""
    if value is None:
        return ""
    return str(value).strip()


def json_safe(value: Any) -> Any:
    """Convert a raw cell into something the JSON column can store."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)
