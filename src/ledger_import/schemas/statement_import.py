"""Pydantic schemas for statement upload, review and confirmation.

This module defines request/response models for the card import service
and API endpoints.
"""

from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# Request schemas


class RowCategoryUpdate(BaseModel):
    """Assign a category to a review row."""

    category_id: UUID = Field(description="Category to assign")


class RowExclusionUpdate(BaseModel):
    """Toggle whether a row is converted on confirm."""

    excluded: bool = Field(description="True to leave this row out of the ledger")


# Shared schemas


class MoneyMeta(BaseModel):
    """Metadata describing how monetary amounts are represented."""

    currency: str = Field(description="ISO currency code (e.g., KRW)")
    minor_unit: int = Field(description="Number of decimal places for the currency (0 for won)")


# Response schemas


class ImportUploadResult(BaseModel):
    """Result of a successful statement upload."""

    import_id: UUID = Field(description="ID of the created import")
    provider: str = Field(description="Provider whose parser produced the rows")
    sheet_name: str | None = Field(None, description="Sheet the rows were taken from")
    statement_month: date = Field(description="Statement month (first day)")
    total_rows: int = Field(description="Rows stored for review")
    matched_rows: int = Field(description="Rows categorized by mapping rules")
    processing_time_ms: int = Field(description="Time to parse and store the upload")


class ImportRowResponse(BaseModel):
    id: UUID
    import_id: UUID
    transaction_date: date
    merchant_name: str
    amount: int
    category_id: UUID | None = None
    is_matched: bool
    is_excluded: bool
    is_overseas: bool
    original_data: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)


class ImportSummary(BaseModel):
    """One import in the upload history list."""

    id: UUID
    card_provider: str
    person_type: str
    statement_month: date
    file_name: str
    total_rows: int
    matched_rows: int
    status: str
    uploaded_by: UUID | None = None
    created_at: datetime
    confirmed_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class ImportDetail(ImportSummary):
    """Import header with its rows, for the review screen."""

    rows: list[ImportRowResponse] = Field(default_factory=list)
    money: MoneyMeta


class ImportListResult(BaseModel):
    imports: list[ImportSummary]


class ConfirmResult(BaseModel):
    """Result of confirming an import."""

    import_id: UUID
    status: str
    confirmed_at: datetime
    transactions_created: int = Field(description="Ledger transactions created")
