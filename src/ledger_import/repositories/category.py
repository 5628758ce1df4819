"""Expense category repository."""
from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.models.category import ExpenseCategory
from ledger_import.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[ExpenseCategory]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, ExpenseCategory)
