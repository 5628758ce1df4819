"""Mapping rule endpoints."""

from uuid import UUID

from fastapi import APIRouter, Response, status

from ledger_import.api.deps import DbSession, FamilyId
from ledger_import.schemas.mapping_rule import (
    MappingRuleCreate,
    MappingRuleListResult,
    MappingRuleResponse,
    MappingRuleUpdate,
    RuleFromRowRequest,
)
from ledger_import.services.mapping_rule import MappingRuleService

router = APIRouter(prefix="/rules", tags=["rules"])


@router.get("", response_model=MappingRuleListResult)
async def list_rules(db: DbSession, family_id: FamilyId) -> MappingRuleListResult:
    rules = await MappingRuleService(db).list_rules(family_id)
    return MappingRuleListResult(rules=[MappingRuleResponse.model_validate(r) for r in rules])


@router.post("", response_model=MappingRuleResponse, status_code=status.HTTP_201_CREATED)
async def create_rule(
    payload: MappingRuleCreate, db: DbSession, family_id: FamilyId
) -> MappingRuleResponse:
    rule = await MappingRuleService(db).create_rule(
        family_id, payload.keyword, payload.category_id, payload.priority
    )
    return MappingRuleResponse.model_validate(rule)


@router.post(
    "/from-row",
    response_model=MappingRuleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a review row's merchant as a rule",
    description="Applies to future uploads only; the row itself keeps its category.",
)
async def save_rule_from_row(
    payload: RuleFromRowRequest, db: DbSession, family_id: FamilyId
) -> MappingRuleResponse:
    rule = await MappingRuleService(db).save_from_row(
        family_id, payload.merchant_name, payload.category_id
    )
    return MappingRuleResponse.model_validate(rule)


@router.patch("/{rule_id}", response_model=MappingRuleResponse)
async def update_rule(
    rule_id: UUID, payload: MappingRuleUpdate, db: DbSession, family_id: FamilyId
) -> MappingRuleResponse:
    rule = await MappingRuleService(db).update_rule(
        family_id,
        rule_id,
        keyword=payload.keyword,
        category_id=payload.category_id,
        priority=payload.priority,
    )
    return MappingRuleResponse.model_validate(rule)


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rule(rule_id: UUID, db: DbSession, family_id: FamilyId) -> Response:
    await MappingRuleService(db).delete_rule(family_id, rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
