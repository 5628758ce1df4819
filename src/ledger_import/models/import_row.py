"""Import row model: one candidate transaction parsed from a statement."""
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, BigInteger, Boolean, Date, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_import.models.base import BaseModel


class ImportRow(BaseModel):
    """A parsed statement row awaiting review.

    ``is_matched`` mirrors ``category_id is not None``; every write path
    sets both together.
    """

    __tablename__ = "card_statement_rows"

    import_id: Mapped[UUID] = mapped_column(
        ForeignKey("card_statement_imports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    family_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    merchant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("expense_categories.id", ondelete="SET NULL"), nullable=True
    )
    is_matched: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_excluded: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_overseas: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    original_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    statement_import: Mapped["StatementImport"] = relationship(
        "StatementImport", back_populates="rows", lazy="joined"
    )

    def assign_category(self, category_id: UUID | None) -> None:
        self.category_id = category_id
        self.is_matched = category_id is not None

    def __repr__(self) -> str:
        return f"<ImportRow(id={self.id}, date={self.transaction_date}, amount={self.amount})>"
