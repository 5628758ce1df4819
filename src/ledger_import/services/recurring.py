"""Recurring-charge generator.

Turns budget items into ledger transactions for a target month, never twice
for the same (item, month) pair. An item counts as already generated when a
ledger transaction back-references it with a date inside that month.
"""

import logging
from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.core.months import month_bounds
from ledger_import.models.transaction import TRANSACTION_EXPENSE, Transaction
from ledger_import.repositories.budget_item import BudgetItemRepository
from ledger_import.repositories.transaction import TransactionRepository

logger = logging.getLogger(__name__)

AUTO_GENERATED_MEMO = "고정지출 자동생성"


class RecurringChargeService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.budget_repo = BudgetItemRepository(db)
        self.transaction_repo = TransactionRepository(db)

    async def check_duplicates(
        self, family_id: UUID, month: date, item_ids: list[UUID]
    ) -> tuple[list[UUID], list[UUID]]:
        """Split item ids into (already generated for the month, not yet generated).

        Input order is preserved in both lists.
        """
        start, end = month_bounds(month)
        existing = await self.transaction_repo.get_budget_item_ids_in_range(
            family_id, item_ids, start, end
        )
        duplicates = [item_id for item_id in item_ids if item_id in existing]
        new = [item_id for item_id in item_ids if item_id not in existing]
        return duplicates, new

    async def generate(
        self,
        family_id: UUID,
        month: date,
        item_ids: list[UUID],
        created_by: UUID | None = None,
    ) -> dict[str, int]:
        """Create one expense transaction per active expense item not yet generated.

        Transactions are dated the first of the month. Items that are inactive,
        not expenses, or already generated count as skipped.

        Returns:
            {"created": n, "skipped": m}
        """
        month = month.replace(day=1)
        _, new_ids = await self.check_duplicates(family_id, month, item_ids)
        items = await self.budget_repo.get_by_ids(family_id, new_ids)
        eligible = [i for i in items if i.is_active and i.type == TRANSACTION_EXPENSE]

        try:
            await self.transaction_repo.add_many(
                [
                    Transaction(
                        family_id=family_id,
                        type=TRANSACTION_EXPENSE,
                        category_id=item.category_id,
                        person_type=item.person_type,
                        description=item.name,
                        amount=item.amount,
                        transaction_date=month,
                        is_emergency=False,
                        budget_item_id=item.id,
                        memo=AUTO_GENERATED_MEMO,
                        created_by=created_by,
                    )
                    for item in eligible
                ]
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        result = {"created": len(eligible), "skipped": len(item_ids) - len(eligible)}
        logger.info("Recurring charges generated", extra={"month": month.isoformat(), **result})
        return result
