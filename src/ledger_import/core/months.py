"""Calendar-month helpers for statement and budget months."""

from __future__ import annotations

import calendar
import re
from datetime import date

# Request-validation pattern for YYYY-MM; year 0000 has no calendar date.
MONTH_PATTERN = r"^(?:[1-9]\d{3}|0[1-9]\d{2}|00[1-9]\d|000[1-9])-(?:0[1-9]|1[0-2])$"

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_month(value: str) -> date:
    """Parse ``YYYY-MM`` into the first day of that month.

    Raises:
        ValueError: If the text is not a valid year-month.
    """
    match = _MONTH_RE.match((value or "").strip())
    if not match:
        raise ValueError(f"Invalid month: {value!r}")
    year, month = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {value!r}")
    return date(year, month, 1)


def month_bounds(month: date) -> tuple[date, date]:
    """First and last day of the month containing ``month``."""
    last_day = calendar.monthrange(month.year, month.month)[1]
    return month.replace(day=1), month.replace(day=last_day)


def format_month(value: date | None) -> str:
    return value.strftime("%Y-%m") if value else ""
