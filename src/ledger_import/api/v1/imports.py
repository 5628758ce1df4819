"""Statement import endpoints: upload, review, confirm and delete."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Request, Response, status

from ledger_import.api.deps import DbSession, FamilyId, UserId
from ledger_import.config import settings
from ledger_import.core.exceptions import UploadValidationError
from ledger_import.core.months import MONTH_PATTERN, parse_month
from ledger_import.parsers.workbook import XLSX_MAGIC_BYTES
from ledger_import.schemas.statement_import import (
    ConfirmResult,
    ImportDetail,
    ImportListResult,
    ImportRowResponse,
    ImportSummary,
    ImportUploadResult,
    MoneyMeta,
    RowCategoryUpdate,
    RowExclusionUpdate,
)
from ledger_import.services.card_import import CardImportService

router = APIRouter(prefix="/imports", tags=["imports"])

ALLOWED_CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/octet-stream",
}


async def _read_body(request: Request) -> bytes:
    """Read the raw request body in memory with a strict size cap."""
    content_type = (request.headers.get("content-type") or "").split(";")[0].strip().lower()
    if content_type not in ALLOWED_CONTENT_TYPES:
        raise UploadValidationError("API_001", {"content_type": content_type})

    max_bytes = settings.workbook_max_size_mb * 1024 * 1024
    buf = bytearray()
    async for chunk in request.stream():
        if not chunk:
            continue
        if len(buf) + len(chunk) > max_bytes:
            raise UploadValidationError("API_002", {"max_mb": settings.workbook_max_size_mb})
        buf.extend(chunk)

    data = bytes(buf)
    if not data.startswith(XLSX_MAGIC_BYTES):
        raise UploadValidationError("API_005")
    return data


@router.post(
    "/upload",
    response_model=ImportUploadResult,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a card statement workbook",
    description="""
    Parse an .xlsx card statement and store its rows for review.

    The request body is the raw workbook (`Content-Type` xlsx or
    `application/octet-stream`). `provider` is `samsung`, `kb` or `other`
    (auto-detect).

    ## Error Codes
    - API_001 / API_002 / API_005: rejected upload
    - PARSE_001: unknown provider
    - PARSE_002: workbook could not be opened
    - PARSE_005: no transactions found
    """,
)
async def upload_statement(
    request: Request,
    db: DbSession,
    family_id: FamilyId,
    user_id: UserId,
    person_type: Annotated[str, Query(min_length=1, max_length=20)],
    statement_month: Annotated[str, Query(pattern=MONTH_PATTERN, examples=["2024-03"])],
    file_name: Annotated[str, Query(min_length=1, max_length=255)],
    provider: Annotated[str, Query(max_length=20)] = "other",
) -> ImportUploadResult:
    data = await _read_body(request)
    service = CardImportService(db)
    return await service.upload(
        family_id=family_id,
        data=data,
        file_name=file_name,
        provider=provider,
        person_type=person_type,
        statement_month=parse_month(statement_month),
        uploaded_by=user_id,
    )


@router.get("", response_model=ImportListResult, summary="Recent statement imports")
async def list_imports(
    db: DbSession,
    family_id: FamilyId,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> ImportListResult:
    imports = await CardImportService(db).list_imports(family_id, limit)
    return ImportListResult(imports=[ImportSummary.model_validate(i) for i in imports])


@router.get("/{import_id}", response_model=ImportDetail, summary="Import with its review rows")
async def get_import(import_id: UUID, db: DbSession, family_id: FamilyId) -> ImportDetail:
    statement_import, rows = await CardImportService(db).get_import_detail(family_id, import_id)
    summary = ImportSummary.model_validate(statement_import)
    return ImportDetail(
        **summary.model_dump(),
        rows=[ImportRowResponse.model_validate(r) for r in rows],
        money=MoneyMeta(currency=settings.currency, minor_unit=settings.currency_minor_unit),
    )


@router.patch("/{import_id}/rows/{row_id}/category", response_model=ImportRowResponse)
async def set_row_category(
    import_id: UUID,
    row_id: UUID,
    payload: RowCategoryUpdate,
    db: DbSession,
    family_id: FamilyId,
) -> ImportRowResponse:
    row = await CardImportService(db).set_row_category(
        family_id, import_id, row_id, payload.category_id
    )
    return ImportRowResponse.model_validate(row)


@router.patch("/{import_id}/rows/{row_id}/exclusion", response_model=ImportRowResponse)
async def set_row_exclusion(
    import_id: UUID,
    row_id: UUID,
    payload: RowExclusionUpdate,
    db: DbSession,
    family_id: FamilyId,
) -> ImportRowResponse:
    row = await CardImportService(db).set_row_excluded(
        family_id, import_id, row_id, payload.excluded
    )
    return ImportRowResponse.model_validate(row)


@router.post(
    "/{import_id}/confirm",
    response_model=ConfirmResult,
    responses={409: {"description": "Import is not under review"}},
)
async def confirm_import(
    import_id: UUID, db: DbSession, family_id: FamilyId, user_id: UserId
) -> ConfirmResult:
    return await CardImportService(db).confirm_import(family_id, import_id, user_id)


@router.delete(
    "/{import_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"description": "Confirmed imports cannot be deleted"}},
)
async def delete_import(import_id: UUID, db: DbSession, family_id: FamilyId) -> Response:
    await CardImportService(db).delete_import(family_id, import_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
