"""Card statement ingestion and review pipeline for the family ledger."""

__version__ = "0.1.0"
