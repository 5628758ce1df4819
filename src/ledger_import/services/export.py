"""CSV export of ledger transactions and budget items.

Column order and Korean headers are fixed; spreadsheet tools and the
re-import feature rely on them. Text columns are quoted with inner quotes
doubled, lines are joined with ``\\n`` and the content is prefixed with a
UTF-8 byte-order mark so Excel picks the right encoding.
"""

from typing import Iterable
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ledger_import.core.months import format_month
from ledger_import.models.budget_item import RECURRENCE_MONTHLY, BudgetItem
from ledger_import.models.transaction import TRANSACTION_INCOME, Transaction
from ledger_import.repositories.budget_item import BudgetItemRepository
from ledger_import.repositories.transaction import TransactionRepository

BOM = "﻿"

TRANSACTION_HEADER = "날짜,유형,인물,카테고리,설명,금액,비상지출,카드사,메모"
BUDGET_HEADER = "유형,인물,카테고리,항목명,금액,반복,시작월,종료월,메모"


def quote(value: str | None) -> str:
    return '"' + (value or "").replace('"', '""') + '"'


def type_label(value: str) -> str:
    return "수입" if value == TRANSACTION_INCOME else "지출"


def _category_name(obj: Transaction | BudgetItem) -> str:
    return obj.category.name if obj.category is not None else ""


def transaction_line(txn: Transaction) -> str:
    return ",".join(
        [
            txn.transaction_date.isoformat(),
            type_label(txn.type),
            txn.person_type,
            quote(_category_name(txn)),
            quote(txn.description),
            str(txn.amount),
            "Y" if txn.is_emergency else "N",
            txn.card_provider or "",
            quote(txn.memo),
        ]
    )


def budget_line(item: BudgetItem) -> str:
    return ",".join(
        [
            type_label(item.type),
            item.person_type,
            quote(_category_name(item)),
            quote(item.name),
            str(item.amount),
            "매월" if item.recurrence == RECURRENCE_MONTHLY else "일회성",
            format_month(item.effective_from),
            format_month(item.effective_until),
            quote(item.memo),
        ]
    )


def render_csv(header: str, lines: Iterable[str]) -> str:
    return BOM + "\n".join([header, *lines])


class ExportService:
    def __init__(self, db: AsyncSession):
        self.transaction_repo = TransactionRepository(db)
        self.budget_repo = BudgetItemRepository(db)

    async def transactions_csv(self, family_id: UUID) -> str:
        transactions = await self.transaction_repo.get_for_export(family_id)
        return render_csv(TRANSACTION_HEADER, (transaction_line(t) for t in transactions))

    async def budget_csv(self, family_id: UUID) -> str:
        """Active budget items only."""
        items = await self.budget_repo.get_all_for_export(family_id)
        return render_csv(BUDGET_HEADER, (budget_line(i) for i in items))
