"""Workbook extraction wrapper using openpyxl.

This module turns uploaded workbook bytes into plain cell grids so the
parsers never touch openpyxl objects. All processing happens in-memory
without creating temporary files.
"""

import io
import logging
import zipfile

from openpyxl import load_workbook

from ledger_import.core.exceptions import WorkbookExtractionError
from ledger_import.schemas.internal import SheetData

logger = logging.getLogger(__name__)

# .xlsx files are zip containers.
XLSX_MAGIC_BYTES = b"PK\x03\x04"


class WorkbookExtractor:
    """Reads every worksheet of an .xlsx workbook into a ``SheetData`` grid.

    Cells are read with ``data_only=True`` so formula cells yield their cached
    values. Trailing empty rows are dropped; empty rows in the middle are kept
    as empty lists so row positions stay meaningful for header discovery.

    Example:
        >>> extractor = WorkbookExtractor()
        >>> sheets = extractor.extract(xlsx_bytes)
        >>> [s.name for s in sheets]
        ['국내이용내역', '해외이용내역']
    """

    def extract(self, data: bytes) -> list[SheetData]:
        """Extract all worksheets from workbook bytes.

        Raises:
            WorkbookExtractionError: If the bytes are empty or not a readable workbook
        """
        if not data:
            raise WorkbookExtractionError("PARSE_002", {"reason": "empty"})

        try:
            workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        except (zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
            logger.warning("Workbook could not be opened", extra={"error_type": type(e).__name__})
            raise WorkbookExtractionError("PARSE_002", {"reason": type(e).__name__}) from e

        try:
            sheets = [
                SheetData(name=worksheet.title, rows=self._read_rows(worksheet))
                for worksheet in workbook.worksheets
            ]
        finally:
            workbook.close()

        logger.info("Extracted workbook", extra={"sheet_count": len(sheets)})
        return sheets

    def _read_rows(self, worksheet) -> list[list]:
        rows: list[list] = []
        for values in worksheet.iter_rows(values_only=True):
            row = list(values)
            while row and row[-1] is None:
                row.pop()
            rows.append(row)
        while rows and not rows[-1]:
            rows.pop()
        return rows
