"""Statement import repository."""
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.core.providers import STATUS_CONFIRMED, STATUS_REVIEWING
from ledger_import.models.import_row import ImportRow
from ledger_import.models.statement_import import StatementImport
from ledger_import.repositories.base import BaseRepository


class StatementImportRepository(BaseRepository[StatementImport]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, StatementImport)

    async def get_recent(self, family_id: UUID, limit: int = 20) -> list[StatementImport]:
        """Newest imports first."""
        result = await self.db.execute(
            select(StatementImport)
            .where(StatementImport.family_id == family_id)
            .order_by(StatementImport.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def mark_confirmed(self, family_id: UUID, import_id: UUID, confirmed_at: datetime) -> bool:
        """Flip status to confirmed only if the import is still reviewing.

        Returns:
            True if this call performed the transition.
        """
        result = await self.db.execute(
            update(StatementImport)
            .where(
                StatementImport.id == import_id,
                StatementImport.family_id == family_id,
                StatementImport.status == STATUS_REVIEWING,
            )
            .values(status=STATUS_CONFIRMED, confirmed_at=confirmed_at, updated_at=confirmed_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def delete_with_rows(self, family_id: UUID, import_id: UUID) -> None:
        """Delete an import and its rows with SQL DELETEs.

        Rows are removed explicitly as well as through ON DELETE CASCADE so
        backends without enforced foreign keys end in the same state.
        """
        await self.db.execute(
            delete(ImportRow).where(ImportRow.import_id == import_id, ImportRow.family_id == family_id)
        )
        await self.db.execute(
            delete(StatementImport).where(
                StatementImport.id == import_id, StatementImport.family_id == family_id
            )
        )
