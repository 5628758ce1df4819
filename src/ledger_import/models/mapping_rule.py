"""Mapping rule model: merchant keyword -> category."""
from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_import.models.base import BaseModel


class MappingRule(BaseModel):
    """Keyword rule consumed by categorization on every future upload."""

    __tablename__ = "mapping_rules"
    __table_args__ = (UniqueConstraint("family_id", "keyword", name="uq_mapping_rule_family_keyword"),)

    family_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    keyword: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("expense_categories.id", ondelete="CASCADE"), nullable=False
    )
    priority: Mapped[int] = mapped_column(Integer, default=10, nullable=False)

    category: Mapped["ExpenseCategory"] = relationship("ExpenseCategory", lazy="joined")

    def __repr__(self) -> str:
        return f"<MappingRule(id={self.id}, keyword={self.keyword}, priority={self.priority})>"
