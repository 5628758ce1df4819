"""Card provider detection from sheet header tokens.

This module identifies which card company's layout a worksheet follows
by looking for provider-distinctive header combinations in its first rows.
"""

from ledger_import.parsers.generic import GenericParser, Grid
from ledger_import.parsers.refinements import KBCardParser, SamsungCardParser


class ProviderDetector:
    """Picks the parser whose header tokens appear in a sheet.

    Parsers are tried in a fixed priority order and the first whose
    ``detect`` succeeds wins. GenericParser always detects, so it is kept
    last as the fallback.

    Example:
        >>> detector = ProviderDetector()
        >>> parser = detector.detect(sheet.rows)
        >>> parser.provider_code
        'samsung'
    """

    DEFAULT_ORDER: tuple[type[GenericParser], ...] = (SamsungCardParser, KBCardParser)

    def __init__(self, parser_classes: list[type[GenericParser]] | None = None):
        classes = parser_classes if parser_classes is not None else list(self.DEFAULT_ORDER)
        self._parsers: list[GenericParser] = [cls() for cls in classes]
        self._fallback = GenericParser()

    def detect(self, grid: Grid) -> GenericParser:
        """Return the first parser that recognizes the sheet, else the generic one."""
        for parser in self._parsers:
            if parser.detect(grid):
                return parser
        return self._fallback
