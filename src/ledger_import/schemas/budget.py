"""Schemas for the recurring-charge generator."""

from uuid import UUID

from pydantic import BaseModel, Field

from ledger_import.core.months import MONTH_PATTERN


class RecurringRequest(BaseModel):
    """Target month (YYYY-MM) and the budget items to turn into transactions."""

    month: str = Field(pattern=MONTH_PATTERN, examples=["2024-03"])
    item_ids: list[UUID] = Field(default_factory=list)


class DuplicateCheckResult(BaseModel):
    duplicate_ids: list[UUID] = Field(description="Items already generated for the month")
    new_ids: list[UUID] = Field(description="Items that would be generated")


class GenerateResult(BaseModel):
    created: int
    skipped: int
