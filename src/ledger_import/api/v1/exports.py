"""CSV export endpoints."""

from datetime import date

from fastapi import APIRouter, Response

from ledger_import.api.deps import DbSession, FamilyId
from ledger_import.services.export import ExportService

router = APIRouter(prefix="/exports", tags=["exports"])


def _csv_response(content: str, prefix: str) -> Response:
    filename = f"{prefix}_{date.today().isoformat()}.csv"
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename=\"{filename}\""},
    )


@router.get("/transactions.csv")
async def export_transactions(db: DbSession, family_id: FamilyId) -> Response:
    return _csv_response(await ExportService(db).transactions_csv(family_id), "transactions")


@router.get("/budget.csv")
async def export_budget(db: DbSession, family_id: FamilyId) -> Response:
    return _csv_response(await ExportService(db).budget_csv(family_id), "budget")
