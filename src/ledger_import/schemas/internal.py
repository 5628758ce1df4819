"""Internal data schemas for parsed statement data.

These models carry rows from the parsers to categorization and persistence.
Amounts are whole won (KRW has no minor unit).
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, Field, field_validator


class SheetData(BaseModel):
    """One worksheet as a grid of untyped cell values."""

    name: str = Field(..., description="Worksheet title")
    rows: list[list[Any]] = Field(default_factory=list, description="Cell values, row-major")


class ParsedCardRow(BaseModel):
    """A single transaction row extracted from a statement sheet."""

    transaction_date: date = Field(..., description="Transaction (approval) date")
    merchant_name: str = Field(..., description="Merchant text as printed on the statement")
    amount: int = Field(..., gt=0, description="Amount in won, always positive")
    is_overseas: bool = Field(default=False, description="True for foreign-currency sheets")
    original_data: dict[str, Any] = Field(
        default_factory=dict, description="Raw cells keyed by column index (audit only)"
    )

    @field_validator("merchant_name")
    @classmethod
    def merchant_not_empty(cls, v: str) -> str:
        """Ensure merchant name is not empty."""
        if not v or not v.strip():
            raise ValueError("Merchant name cannot be empty")
        return v.strip()


class ParsedStatement(BaseModel):
    """Result of dispatching a workbook to a provider parser."""

    provider: str = Field(..., description="Provider code of the parser actually used")
    rows: list[ParsedCardRow] = Field(default_factory=list)
    sheet_name: str | None = Field(None, description="Sheet the rows came from")
