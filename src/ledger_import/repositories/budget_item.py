"""Budget item repository."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.models.budget_item import BudgetItem
from ledger_import.repositories.base import BaseRepository


class BudgetItemRepository(BaseRepository[BudgetItem]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, BudgetItem)

    async def get_by_ids(self, family_id: UUID, item_ids: list[UUID]) -> list[BudgetItem]:
        if not item_ids:
            return []
        result = await self.db.execute(
            select(BudgetItem)
            .where(BudgetItem.family_id == family_id, BudgetItem.id.in_(item_ids))
            .order_by(BudgetItem.created_at)
        )
        return list(result.unique().scalars().all())

    async def get_all_for_export(self, family_id: UUID) -> list[BudgetItem]:
        result = await self.db.execute(
            select(BudgetItem)
            .where(BudgetItem.family_id == family_id, BudgetItem.is_active.is_(True))
            .order_by(BudgetItem.type, BudgetItem.person_type, BudgetItem.created_at)
        )
        return list(result.unique().scalars().all())
