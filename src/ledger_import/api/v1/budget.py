"""Recurring-charge generation endpoints."""

from fastapi import APIRouter

from ledger_import.api.deps import DbSession, FamilyId, UserId
from ledger_import.core.months import parse_month
from ledger_import.schemas.budget import DuplicateCheckResult, GenerateResult, RecurringRequest
from ledger_import.services.recurring import RecurringChargeService

router = APIRouter(prefix="/budget", tags=["budget"])


@router.post("/duplicates", response_model=DuplicateCheckResult)
async def check_duplicates(
    payload: RecurringRequest, db: DbSession, family_id: FamilyId
) -> DuplicateCheckResult:
    duplicate_ids, new_ids = await RecurringChargeService(db).check_duplicates(
        family_id, parse_month(payload.month), payload.item_ids
    )
    return DuplicateCheckResult(duplicate_ids=duplicate_ids, new_ids=new_ids)


@router.post("/generate", response_model=GenerateResult)
async def generate(
    payload: RecurringRequest, db: DbSession, family_id: FamilyId, user_id: UserId
) -> GenerateResult:
    result = await RecurringChargeService(db).generate(
        family_id, parse_month(payload.month), payload.item_ids, created_by=user_id
    )
    return GenerateResult(**result)
