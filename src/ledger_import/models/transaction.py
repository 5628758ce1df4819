"""Ledger transaction model."""
from datetime import date
from uuid import UUID

from sqlalchemy import BigInteger, Boolean, Date, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_import.models.base import BaseModel

TRANSACTION_INCOME = "income"
TRANSACTION_EXPENSE = "expense"


class Transaction(BaseModel):
    """A permanent ledger entry.

    Entries created from a confirmed statement back-reference their source
    row; entries created by the recurring generator back-reference their
    budget item.
    """

    __tablename__ = "transactions"

    family_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("expense_categories.id", ondelete="SET NULL"), nullable=True
    )
    person_type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    is_emergency: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    card_provider: Mapped[str | None] = mapped_column(String(20), nullable=True)
    card_statement_row_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("card_statement_rows.id", ondelete="SET NULL"), nullable=True, index=True
    )
    budget_item_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("budget_items.id", ondelete="SET NULL"), nullable=True
    )
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[UUID | None] = mapped_column(nullable=True)

    __table_args__ = (
        Index("ix_transactions_family_budget_item_date", "family_id", "budget_item_id", "transaction_date"),
    )

    category: Mapped["ExpenseCategory"] = relationship("ExpenseCategory", lazy="joined")

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, type={self.type}, amount={self.amount})>"
