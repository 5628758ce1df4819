"""Card statement import service.

This module orchestrates the review workflow for uploaded statements:
1. Parse the workbook (provider hint or detection, best sheet wins)
2. Categorize rows with the family's mapping rules
3. Persist the import and its rows for review
4. Apply reviewer edits (category, exclusion) while reviewing
5. Confirm: convert non-excluded rows into ledger transactions exactly once

Each write operation commits once; any failure rolls the session back so no
partial import or half-confirmed batch is left behind.
"""

import logging
import time
from datetime import date, datetime, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.categorization import categorize, order_rules
from ledger_import.config import settings
from ledger_import.core.exceptions import (
    EmptyParseResultError,
    ImportConflictError,
    ImportLockedError,
    InvalidImportStateError,
    ResourceNotFoundError,
)
from ledger_import.core.providers import STATUS_REVIEWING
from ledger_import.models.import_row import ImportRow
from ledger_import.models.statement_import import StatementImport
from ledger_import.models.transaction import TRANSACTION_EXPENSE, Transaction
from ledger_import.parsers.factory import get_parser_factory
from ledger_import.repositories.category import CategoryRepository
from ledger_import.repositories.import_row import ImportRowRepository
from ledger_import.repositories.mapping_rule import MappingRuleRepository
from ledger_import.repositories.statement_import import StatementImportRepository
from ledger_import.repositories.transaction import TransactionRepository
from ledger_import.schemas.internal import ParsedStatement
from ledger_import.schemas.statement_import import ConfirmResult, ImportUploadResult

logger = logging.getLogger(__name__)


class CardImportService:
    """Service for uploading, reviewing and confirming card statements.

    All operations take the family id explicitly; nothing is resolved from
    session state.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.parser_factory = get_parser_factory()
        self.import_repo = StatementImportRepository(db)
        self.row_repo = ImportRowRepository(db)
        self.rule_repo = MappingRuleRepository(db)
        self.category_repo = CategoryRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def upload(
        self,
        family_id: UUID,
        data: bytes,
        file_name: str,
        provider: str | None,
        person_type: str,
        statement_month: date,
        uploaded_by: UUID | None = None,
    ) -> ImportUploadResult:
        """Parse a statement workbook and store it for review.

        Raises:
            WorkbookExtractionError: If the workbook cannot be opened
            UnsupportedProviderError: If ``provider`` names no known parser
            EmptyParseResultError: If no sheet yielded any rows
        """
        start_time = time.time()

        parsed = self.parser_factory.parse(data, provider=provider)
        if not parsed.rows:
            raise EmptyParseResultError(
                "PARSE_005", {"provider": parsed.provider, "file_name": file_name}
            )

        try:
            statement_import = await self._persist_import(
                family_id=family_id,
                parsed=parsed,
                file_name=file_name,
                person_type=person_type,
                statement_month=statement_month.replace(day=1),
                uploaded_by=uploaded_by,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(
            "Statement import stored",
            extra={
                "import_id": str(statement_import.id),
                "provider": parsed.provider,
                "total_rows": statement_import.total_rows,
                "matched_rows": statement_import.matched_rows,
            },
        )
        return ImportUploadResult(
            import_id=statement_import.id,
            provider=parsed.provider,
            sheet_name=parsed.sheet_name,
            statement_month=statement_import.statement_month,
            total_rows=statement_import.total_rows,
            matched_rows=statement_import.matched_rows,
            processing_time_ms=int((time.time() - start_time) * 1000),
        )

    async def _persist_import(
        self,
        family_id: UUID,
        parsed: ParsedStatement,
        file_name: str,
        person_type: str,
        statement_month: date,
        uploaded_by: UUID | None,
    ) -> StatementImport:
        rules = order_rules(await self.rule_repo.get_for_matching(family_id))

        rows: list[ImportRow] = []
        for parsed_row in parsed.rows:
            row = ImportRow(
                family_id=family_id,
                transaction_date=parsed_row.transaction_date,
                merchant_name=parsed_row.merchant_name,
                amount=parsed_row.amount,
                is_excluded=False,
                is_overseas=parsed_row.is_overseas,
                original_data=parsed_row.original_data,
            )
            row.assign_category(categorize(parsed_row.merchant_name, rules))
            rows.append(row)

        statement_import = StatementImport(
            family_id=family_id,
            card_provider=parsed.provider,
            person_type=person_type,
            statement_month=statement_month,
            file_name=file_name,
            total_rows=len(rows),
            matched_rows=sum(1 for r in rows if r.is_matched),
            status=STATUS_REVIEWING,
            uploaded_by=uploaded_by,
        )
        await self.import_repo.add(statement_import)

        for row in rows:
            row.import_id = statement_import.id
        await self.row_repo.add_many(rows)
        return statement_import

    async def list_imports(self, family_id: UUID, limit: int | None = None) -> list[StatementImport]:
        return await self.import_repo.get_recent(family_id, limit or settings.import_history_limit)

    async def get_import_detail(
        self, family_id: UUID, import_id: UUID
    ) -> tuple[StatementImport, list[ImportRow]]:
        """Import header plus rows ordered by transaction date.

        Raises:
            ResourceNotFoundError: If the import does not exist for this family
        """
        statement_import = await self._get_import(family_id, import_id)
        rows = await self.row_repo.get_by_import(family_id, import_id)
        return statement_import, rows

    async def set_row_category(
        self, family_id: UUID, import_id: UUID, row_id: UUID, category_id: UUID
    ) -> ImportRow:
        """Assign a category to a review row and mark it matched.

        Raises:
            ResourceNotFoundError: Import, row or category does not exist
            ImportLockedError: Import is no longer reviewing
        """
        try:
            row = await self._get_editable_row(family_id, import_id, row_id)
            category = await self.category_repo.get_by_id(family_id, category_id)
            if category is None:
                raise ResourceNotFoundError("IMP_003", {"category_id": str(category_id)})

            row.assign_category(category.id)
            await self.db.flush()
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return row

    async def set_row_excluded(
        self, family_id: UUID, import_id: UUID, row_id: UUID, excluded: bool
    ) -> ImportRow:
        """Toggle whether a row is converted on confirm.

        Raises:
            ResourceNotFoundError: Import or row does not exist
            ImportLockedError: Import is no longer reviewing
        """
        try:
            row = await self._get_editable_row(family_id, import_id, row_id)
            row.is_excluded = excluded
            await self.db.flush()
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return row

    async def delete_import(self, family_id: UUID, import_id: UUID) -> None:
        """Delete a reviewing import together with its rows.

        Raises:
            ResourceNotFoundError: Import does not exist
            ImportLockedError: Import was already confirmed (history is immutable)
        """
        try:
            statement_import = await self._get_import(family_id, import_id)
            if statement_import.status != STATUS_REVIEWING:
                raise ImportLockedError(
                    "IMP_004", {"import_id": str(import_id), "status": statement_import.status}
                )
            await self.import_repo.delete_with_rows(family_id, import_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        logger.info("Statement import deleted", extra={"import_id": str(import_id)})

    async def confirm_import(
        self, family_id: UUID, import_id: UUID, confirmed_by: UUID | None = None
    ) -> ConfirmResult:
        """Convert the import's non-excluded rows into ledger transactions.

        The ledger insert and the status flip share one transaction. The flip
        is a conditional update on ``status = 'reviewing'``; if another
        request confirmed first, this one rolls back with a conflict.

        Raises:
            ResourceNotFoundError: Import does not exist
            ImportConflictError: Import is not reviewing
            InvalidImportStateError: Every row is excluded
        """
        try:
            statement_import = await self._get_import(family_id, import_id)
            if statement_import.status != STATUS_REVIEWING:
                raise ImportConflictError(
                    "IMP_005", {"import_id": str(import_id), "status": statement_import.status}
                )

            rows = await self.row_repo.get_included(family_id, import_id)
            if not rows:
                raise InvalidImportStateError("IMP_006", {"import_id": str(import_id)})

            transactions = [
                Transaction(
                    family_id=family_id,
                    type=TRANSACTION_EXPENSE,
                    category_id=row.category_id,
                    person_type=statement_import.person_type,
                    description=row.merchant_name,
                    amount=row.amount,
                    transaction_date=row.transaction_date,
                    is_emergency=False,
                    card_provider=statement_import.card_provider,
                    card_statement_row_id=row.id,
                    created_by=confirmed_by,
                )
                for row in rows
            ]
            await self.transaction_repo.add_many(transactions)

            confirmed_at = datetime.now(timezone.utc)
            if not await self.import_repo.mark_confirmed(family_id, import_id, confirmed_at):
                raise ImportConflictError("IMP_005", {"import_id": str(import_id)})

            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(statement_import)
        logger.info(
            "Statement import confirmed",
            extra={"import_id": str(import_id), "transactions_created": len(transactions)},
        )
        return ConfirmResult(
            import_id=statement_import.id,
            status=statement_import.status,
            confirmed_at=statement_import.confirmed_at or confirmed_at,
            transactions_created=len(transactions),
        )

    async def _get_import(self, family_id: UUID, import_id: UUID) -> StatementImport:
        statement_import = await self.import_repo.get_by_id(family_id, import_id)
        if statement_import is None:
            raise ResourceNotFoundError("IMP_001", {"import_id": str(import_id)})
        return statement_import

    async def _get_editable_row(self, family_id: UUID, import_id: UUID, row_id: UUID) -> ImportRow:
        statement_import = await self._get_import(family_id, import_id)
        row = await self.row_repo.get_in_import(family_id, import_id, row_id)
        if row is None:
            raise ResourceNotFoundError("IMP_002", {"row_id": str(row_id)})
        if statement_import.status != STATUS_REVIEWING:
            raise ImportLockedError(
                "IMP_004", {"import_id": str(import_id), "status": statement_import.status}
            )
        return row
