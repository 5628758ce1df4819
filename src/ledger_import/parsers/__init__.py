"""Card statement workbook parsing.

- WorkbookExtractor turns .xlsx bytes into sheet grids
- GenericParser holds the shared header discovery and row walking
- Provider refinements override header regex tables and cancellation rules
- ParserFactory dispatches sheets and keeps the best-scoring parse
"""

from ledger_import.parsers.detector import ProviderDetector
from ledger_import.parsers.factory import ParserFactory, get_parser_factory
from ledger_import.parsers.generic import GenericParser
from ledger_import.parsers.workbook import WorkbookExtractor

__all__ = [
    "WorkbookExtractor",
    "ProviderDetector",
    "GenericParser",
    "ParserFactory",
    "get_parser_factory",
]
