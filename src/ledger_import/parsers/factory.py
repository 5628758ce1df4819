"""Parser factory for routing statement workbooks to provider parsers.

This module orchestrates the parsing workflow:
1. Extract sheet grids using WorkbookExtractor
2. Pick a parser per sheet (explicit provider hint, else ProviderDetector)
3. Parse every sheet and keep the one yielding the most rows
"""

import logging

from ledger_import.core.exceptions import UnsupportedProviderError
from ledger_import.core.providers import PROVIDER_OTHER, normalize_provider
from ledger_import.parsers.detector import ProviderDetector
from ledger_import.parsers.generic import GenericParser
from ledger_import.parsers.refinements import KBCardParser, SamsungCardParser
from ledger_import.parsers.workbook import WorkbookExtractor
from ledger_import.schemas.internal import ParsedStatement, SheetData

logger = logging.getLogger(__name__)


class ParserFactory:
    """Factory for parsing card statement workbooks.

    An explicit provider hint is authoritative: its parser runs on every
    sheet and an empty result is returned as-is, without falling back to
    detection. Without a hint each sheet is routed through the detector.
    Across sheets the parse with the most rows wins; on a tie the earlier
    sheet is kept.

    Example:
        >>> factory = ParserFactory()
        >>> statement = factory.parse(xlsx_bytes, provider="samsung")
        >>> print(statement.provider, len(statement.rows))
    """

    def __init__(
        self,
        extractor: WorkbookExtractor | None = None,
        detector: ProviderDetector | None = None,
    ):
        self.extractor = extractor or WorkbookExtractor()
        self.detector = detector or ProviderDetector()

        # Format: {"provider_code": ParserClass}
        self._refinements: dict[str, type[GenericParser]] = {}

    def parse(self, data: bytes, provider: str | None = None) -> ParsedStatement:
        """Parse a statement workbook from bytes.

        Raises:
            WorkbookExtractionError: If the workbook cannot be opened
            UnsupportedProviderError: If the hint names no registered parser
        """
        sheets = self.extractor.extract(data)
        return self.parse_sheets(sheets, provider=provider)

    def parse_sheets(
        self, sheets: list[SheetData], provider: str | None = None
    ) -> ParsedStatement:
        """Parse already-extracted sheets.

        ``provider`` of None or "other" means auto-detect.
        """
        hint = normalize_provider(provider)
        hinted_parser: GenericParser | None = None
        if hint is not None:
            hinted_parser = self._get_parser_class(hint)()

        best = ParsedStatement(
            provider=hinted_parser.provider_code if hinted_parser else PROVIDER_OTHER,
            rows=[],
        )
        for sheet in sheets:
            parser = hinted_parser or self.detector.detect(sheet.rows)
            rows = parser.parse(sheet.rows)
            logger.debug(
                "Sheet parsed",
                extra={"sheet": sheet.name, "provider": parser.provider_code, "rows": len(rows)},
            )
            if len(rows) > len(best.rows):
                best = ParsedStatement(
                    provider=parser.provider_code, rows=rows, sheet_name=sheet.name
                )

        logger.info(
            "Statement parsed",
            extra={
                "provider_hint": hint,
                "provider": best.provider,
                "sheet_count": len(sheets),
                "rows": len(best.rows),
            },
        )
        return best

    def register_refinement(self, provider: str, parser_class: type[GenericParser]):
        """Register a parser class for an explicit provider hint.

        Raises:
            ValueError: If parser_class does not inherit from GenericParser
        """
        if not issubclass(parser_class, GenericParser):
            raise ValueError(
                f"Parser class must inherit from GenericParser, got {parser_class}"
            )
        self._refinements[provider] = parser_class

    def get_registered_providers(self) -> list[str]:
        return list(self._refinements.keys())

    def _get_parser_class(self, provider: str) -> type[GenericParser]:
        parser_class = self._refinements.get(provider)
        if parser_class is None:
            raise UnsupportedProviderError(
                "PARSE_001",
                {"provider": provider, "supported": self.get_registered_providers()},
            )
        return parser_class


_factory_instance: ParserFactory | None = None


def get_parser_factory() -> ParserFactory:
    """Get or create the global ParserFactory instance."""
    global _factory_instance
    if _factory_instance is None:
        _factory_instance = ParserFactory()
        _factory_instance.register_refinement(SamsungCardParser.provider_code, SamsungCardParser)
        _factory_instance.register_refinement(KBCardParser.provider_code, KBCardParser)
    return _factory_instance
