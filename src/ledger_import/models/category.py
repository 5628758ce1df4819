"""Expense category model (maintained by the household's category screens)."""
from uuid import UUID

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from ledger_import.models.base import BaseModel


class ExpenseCategory(BaseModel):
    __tablename__ = "expense_categories"

    family_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    person_type: Mapped[str | None] = mapped_column(String(20), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<ExpenseCategory(id={self.id}, name={self.name})>"
