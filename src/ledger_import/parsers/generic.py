"""Generic card statement sheet parser.

This module provides the GenericParser class, which holds the row-walking
algorithm shared by every provider:

1. Scan the first ``header_scan_rows`` rows for a header row in which a
   date, a merchant and an amount column can each be matched by the
   parser's header regex tables (first match per role, left to right).
2. Walk every following row, drop cancelled rows and rows whose date,
   merchant or amount do not normalize, and emit ``ParsedCardRow``s.

Provider refinements inherit from this and override only the regex
tables and the cancellation check.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Sequence

from ledger_import.config import settings
from ledger_import.core.providers import PROVIDER_OTHER
from ledger_import.parsers.normalize import (
    UnparseableValueError,
    cell_text,
    json_safe,
    normalize_amount,
    normalize_date,
)
from ledger_import.schemas.internal import ParsedCardRow

logger = logging.getLogger(__name__)

Grid = Sequence[Sequence[Any]]


@dataclass(frozen=True)
class HeaderLayout:
    """Column positions discovered in a sheet's header row."""

    header_index: int
    date_col: int
    merchant_col: int
    amount_col: int
    cancel_col: int | None = None
    is_overseas: bool = False


class GenericParser:
    """Provider-agnostic parser and fallback for unrecognized layouts.

    Subclasses override:
        - ``provider_code``
        - ``DETECT_PATTERNS``: groups of regexes that must all match one
          joined row for ``detect`` to succeed
        - ``DATE_HEADERS`` / ``MERCHANT_HEADERS`` / ``AMOUNT_HEADERS``
        - ``CANCEL_HEADERS`` and ``_is_cancel_marker`` for cancellation columns
        - ``CHECK_TRAILING_CANCEL`` to skip rows whose text ends in 취소
        - ``OVERSEAS_AMOUNT_HEADER`` for foreign-currency amount columns

    Example:
        >>> parser = GenericParser()
        >>> rows = parser.parse(sheet.rows)
    """

    provider_code: str = PROVIDER_OTHER

    DETECT_PATTERNS: list[tuple[re.Pattern, ...]] = []

    DATE_HEADERS: list[re.Pattern] = [re.compile(r"이용일|거래일|승인일|일자")]
    MERCHANT_HEADERS: list[re.Pattern] = [re.compile(r"가맹점|이용처|상호")]
    AMOUNT_HEADERS: list[re.Pattern] = [re.compile(r"이용금액|거래금액|승인금액|금액")]
    CANCEL_HEADERS: list[re.Pattern] = []
    OVERSEAS_AMOUNT_HEADER: re.Pattern | None = None

    # A row whose joined text ends with this is a cancellation line
    # (only checked when CHECK_TRAILING_CANCEL is set).
    TRAILING_CANCEL_MARKER = re.compile(r"취소$")
    CHECK_TRAILING_CANCEL: bool = False

    def __init__(self, header_scan_rows: int | None = None):
        self.header_scan_rows = header_scan_rows or settings.header_scan_rows

    def detect(self, grid: Grid) -> bool:
        """Return True if the first rows carry this provider's header tokens.

        The generic parser has no distinctive tokens and always matches, which
        makes it the fallback at the end of the detection order.
        """
        if not self.DETECT_PATTERNS:
            return True

        for row in list(grid)[: self.header_scan_rows]:
            if not row:
                continue
            joined = " ".join(cell_text(c) for c in row)
            for group in self.DETECT_PATTERNS:
                if all(pattern.search(joined) for pattern in group):
                    return True
        return False

    def parse(self, grid: Grid) -> list[ParsedCardRow]:
        """Parse transaction rows from one sheet.

        Returns an empty list when no header row is found; that is not an
        error, it lets the dispatcher try other sheets.
        """
        layout = self._find_header(grid)
        if layout is None:
            logger.debug("No header row found", extra={"provider": self.provider_code})
            return []

        rows: list[ParsedCardRow] = []
        skipped_cancelled = 0
        skipped_invalid = 0
        for raw in list(grid)[layout.header_index + 1 :]:
            if not raw:
                continue

            if self._is_cancelled(raw, layout):
                skipped_cancelled += 1
                continue

            parsed = self._build_row(raw, layout)
            if parsed is None:
                skipped_invalid += 1
                continue
            rows.append(parsed)

        logger.info(
            "Parsed sheet",
            extra={
                "provider": self.provider_code,
                "rows": len(rows),
                "skipped_cancelled": skipped_cancelled,
                "skipped_invalid": skipped_invalid,
            },
        )
        return rows

    def _find_header(self, grid: Grid) -> HeaderLayout | None:
        """Locate the first row where date, merchant and amount columns all match."""
        for index, row in enumerate(list(grid)[: self.header_scan_rows]):
            if not row:
                continue

            date_col = merchant_col = amount_col = cancel_col = None
            is_overseas = False
            for col, value in enumerate(row):
                text = cell_text(value)
                if not text:
                    continue
                if date_col is None and self._matches(self.DATE_HEADERS, text):
                    date_col = col
                if merchant_col is None and self._matches(self.MERCHANT_HEADERS, text):
                    merchant_col = col
                if amount_col is None and self._matches(self.AMOUNT_HEADERS, text):
                    amount_col = col
                    if self.OVERSEAS_AMOUNT_HEADER and self.OVERSEAS_AMOUNT_HEADER.search(text):
                        is_overseas = True
                if cancel_col is None and self._matches(self.CANCEL_HEADERS, text):
                    cancel_col = col

            if date_col is not None and merchant_col is not None and amount_col is not None:
                return HeaderLayout(
                    header_index=index,
                    date_col=date_col,
                    merchant_col=merchant_col,
                    amount_col=amount_col,
                    cancel_col=cancel_col,
                    is_overseas=is_overseas,
                )
        return None

    def _is_cancelled(self, row: Sequence[Any], layout: HeaderLayout) -> bool:
        """Check the cancellation column and the trailing row marker.

        The generic layout defines neither, so it never cancels.
        """
        if layout.cancel_col is not None:
            if self._is_cancel_marker(self._cell(row, layout.cancel_col)):
                return True

        if not self.CHECK_TRAILING_CANCEL:
            return False
        joined = " ".join(cell_text(c) for c in row).strip()
        return bool(self.TRAILING_CANCEL_MARKER.search(joined))

    def _is_cancel_marker(self, value: Any) -> bool:
        return False

    def _build_row(self, row: Sequence[Any], layout: HeaderLayout) -> ParsedCardRow | None:
        merchant = cell_text(self._cell(row, layout.merchant_col))
        amount = normalize_amount(self._cell(row, layout.amount_col))
        if not merchant or amount <= 0:
            return None

        try:
            transaction_date = normalize_date(self._cell(row, layout.date_col))
        except UnparseableValueError:
            return None

        return ParsedCardRow(
            transaction_date=transaction_date,
            merchant_name=merchant,
            amount=amount,
            is_overseas=layout.is_overseas,
            original_data={str(i): json_safe(v) for i, v in enumerate(row)},
        )

    @staticmethod
    def _cell(row: Sequence[Any], col: int) -> Any:
        return row[col] if col < len(row) else None

    @staticmethod
    def _matches(patterns: list[re.Pattern], text: str) -> bool:
        return any(pattern.search(text) for pattern in patterns)
