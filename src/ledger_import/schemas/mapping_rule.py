"""Schemas for keyword mapping rules."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class MappingRuleCreate(BaseModel):
    keyword: str = Field(min_length=1, max_length=255)
    category_id: UUID
    priority: int | None = Field(None, description="Higher is checked first; defaults to 10")


class MappingRuleUpdate(BaseModel):
    keyword: str | None = Field(None, min_length=1, max_length=255)
    category_id: UUID | None = None
    priority: int | None = None


class RuleFromRowRequest(BaseModel):
    """Save a review row's merchant text as a rule for future uploads."""

    merchant_name: str = Field(min_length=1, max_length=255)
    category_id: UUID


class MappingRuleResponse(BaseModel):
    id: UUID
    keyword: str
    category_id: UUID
    priority: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MappingRuleListResult(BaseModel):
    rules: list[MappingRuleResponse]
