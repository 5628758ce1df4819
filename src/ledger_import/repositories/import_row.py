"""Import row repository."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.models.import_row import ImportRow
from ledger_import.repositories.base import BaseRepository


class ImportRowRepository(BaseRepository[ImportRow]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, ImportRow)

    async def get_in_import(self, family_id: UUID, import_id: UUID, row_id: UUID) -> ImportRow | None:
        """Get a row only if it belongs to the given import and family."""
        result = await self.db.execute(
            select(ImportRow).where(
                ImportRow.id == row_id,
                ImportRow.import_id == import_id,
                ImportRow.family_id == family_id,
            )
        )
        return result.unique().scalar_one_or_none()

    async def get_by_import(self, family_id: UUID, import_id: UUID) -> list[ImportRow]:
        """All rows of an import, by transaction date then insertion."""
        result = await self.db.execute(
            select(ImportRow)
            .where(ImportRow.import_id == import_id, ImportRow.family_id == family_id)
            .order_by(ImportRow.transaction_date, ImportRow.created_at)
        )
        return list(result.unique().scalars().all())

    async def get_included(self, family_id: UUID, import_id: UUID) -> list[ImportRow]:
        """Rows not excluded by the reviewer."""
        result = await self.db.execute(
            select(ImportRow)
            .where(
                ImportRow.import_id == import_id,
                ImportRow.family_id == family_id,
                ImportRow.is_excluded.is_(False),
            )
            .order_by(ImportRow.transaction_date, ImportRow.created_at)
        )
        return list(result.unique().scalars().all())
