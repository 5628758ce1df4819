"""Statement import model: one uploaded card statement under review."""
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ledger_import.core.providers import IMPORT_STATUSES, STATUS_REVIEWING
from ledger_import.models.base import BaseModel


class StatementImport(BaseModel):
    """Batch metadata for one statement upload.

    Status moves reviewing -> confirmed exactly once. Rows are editable only
    while reviewing; a reviewing import can be deleted together with its rows.
    """

    __tablename__ = "card_statement_imports"
    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in IMPORT_STATUSES) + ")",
            name="ck_card_statement_imports_status",
        ),
    )

    family_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    card_provider: Mapped[str] = mapped_column(String(20), nullable=False)
    person_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # First day of the statement month.
    statement_month: Mapped[date] = mapped_column(Date, nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_rows: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    matched_rows: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=STATUS_REVIEWING,
        server_default=text(f"'{STATUS_REVIEWING}'"),
        index=True,
    )
    uploaded_by: Mapped[UUID | None] = mapped_column(nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Rely on DB-level ON DELETE CASCADE; prevent SQLAlchemy from NULLing FKs on delete.
    rows: Mapped[list["ImportRow"]] = relationship(
        "ImportRow",
        back_populates="statement_import",
        lazy="selectin",
        passive_deletes="all",
    )

    def __repr__(self) -> str:
        return (
            f"<StatementImport(id={self.id}, provider={self.card_provider}, "
            f"month={self.statement_month}, status={self.status})>"
        )
