"""Budget item model: recurring or one-off planned income/expense."""
from datetime import date
from uuid import UUID

from sqlalchemy import BigInteger, Boolean, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_import.models.base import BaseModel

RECURRENCE_MONTHLY = "monthly"
RECURRENCE_ONCE = "once"


class BudgetItem(BaseModel):
    """Template the recurring generator turns into ledger transactions."""

    __tablename__ = "budget_items"

    family_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    person_type: Mapped[str] = mapped_column(String(20), nullable=False)
    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("expense_categories.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    recurrence: Mapped[str] = mapped_column(String(10), default=RECURRENCE_MONTHLY, nullable=False)
    effective_from: Mapped[date | None] = mapped_column(Date, nullable=True)
    effective_until: Mapped[date | None] = mapped_column(Date, nullable=True)
    memo: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    auto_generate: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    category: Mapped["ExpenseCategory"] = relationship("ExpenseCategory", lazy="joined")

    def __repr__(self) -> str:
        return f"<BudgetItem(id={self.id}, name={self.name}, amount={self.amount})>"
