"""Ledger transaction repository."""
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.models.transaction import Transaction
from ledger_import.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def get_budget_item_ids_in_range(
        self, family_id: UUID, item_ids: list[UUID], start_date: date, end_date: date
    ) -> set[UUID]:
        """Budget item ids that already have a ledger entry dated in the range."""
        if not item_ids:
            return set()
        result = await self.db.execute(
            select(Transaction.budget_item_id).where(
                Transaction.family_id == family_id,
                Transaction.budget_item_id.in_(item_ids),
                Transaction.transaction_date >= start_date,
                Transaction.transaction_date <= end_date,
            )
        )
        return {row_id for row_id in result.scalars().all() if row_id is not None}

    async def get_for_export(self, family_id: UUID) -> list[Transaction]:
        """All transactions, newest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.family_id == family_id)
            .order_by(Transaction.transaction_date.desc(), Transaction.created_at.desc())
        )
        return list(result.unique().scalars().all())
