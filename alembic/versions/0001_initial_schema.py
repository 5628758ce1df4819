"""Initial schema: categories, statement imports and rows, rules, ledger, budget items.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "expense_categories",
        sa.Column("family_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("person_type", sa.String(length=20), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_expense_categories_family_id", "expense_categories", ["family_id"])

    op.create_table(
        "card_statement_imports",
        sa.Column("family_id", sa.Uuid(), nullable=False),
        sa.Column("card_provider", sa.String(length=20), nullable=False),
        sa.Column("person_type", sa.String(length=20), nullable=False),
        sa.Column("statement_month", sa.Date(), nullable=False),
        sa.Column("file_name", sa.String(length=255), nullable=False),
        sa.Column("total_rows", sa.Integer(), nullable=False),
        sa.Column("matched_rows", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default=sa.text("'reviewing'"), nullable=False),
        sa.Column("uploaded_by", sa.Uuid(), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        *_audit_columns(),
        sa.CheckConstraint(
            "status IN ('reviewing', 'confirmed', 'cancelled')",
            name="ck_card_statement_imports_status",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_card_statement_imports_family_id", "card_statement_imports", ["family_id"])
    op.create_index("ix_card_statement_imports_status", "card_statement_imports", ["status"])

    op.create_table(
        "card_statement_rows",
        sa.Column("import_id", sa.Uuid(), nullable=False),
        sa.Column("family_id", sa.Uuid(), nullable=False),
        sa.Column("transaction_date", sa.Date(), nullable=False),
        sa.Column("merchant_name", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("category_id", sa.Uuid(), nullable=True),
        sa.Column("is_matched", sa.Boolean(), nullable=False),
        sa.Column("is_excluded", sa.Boolean(), nullable=False),
        sa.Column("is_overseas", sa.Boolean(), nullable=False),
        sa.Column("original_data", sa.JSON(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["import_id"], ["card_statement_imports.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["category_id"], ["expense_categories.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_card_statement_rows_import_id", "card_statement_rows", ["import_id"])
    op.create_index("ix_card_statement_rows_family_id", "card_statement_rows", ["family_id"])

    op.create_table(
        "mapping_rules",
        sa.Column("family_id", sa.Uuid(), nullable=False),
        sa.Column("keyword", sa.String(length=255), nullable=False),
        sa.Column("category_id", sa.Uuid(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["category_id"], ["expense_categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("family_id", "keyword", name="uq_mapping_rule_family_keyword"),
    )
    op.create_index("ix_mapping_rules_family_id", "mapping_rules", ["family_id"])

    op.create_table(
        "budget_items",
        sa.Column("family_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=10), nullable=False),
        sa.Column("person_type", sa.String(length=20), nullable=False),
        sa.Column("category_id", sa.Uuid(), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("recurrence", sa.String(length=10), nullable=False),
        sa.Column("effective_from", sa.Date(), nullable=True),
        sa.Column("effective_until", sa.Date(), nullable=True),
        sa.Column("memo", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("auto_generate", sa.Boolean(), nullable=False),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["category_id"], ["expense_categories.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_budget_items_family_id", "budget_items", ["family_id"])

    op.create_table(
        "transactions",
        sa.Column("family_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=10), nullable=False),
        sa.Column("category_id", sa.Uuid(), nullable=True),
        sa.Column("person_type", sa.String(length=20), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=True),
        sa.Column("amount", sa.BigInteger(), nullable=False),
        sa.Column("transaction_date", sa.Date(), nullable=False),
        sa.Column("is_emergency", sa.Boolean(), nullable=False),
        sa.Column("card_provider", sa.String(length=20), nullable=True),
        sa.Column("card_statement_row_id", sa.Uuid(), nullable=True),
        sa.Column("budget_item_id", sa.Uuid(), nullable=True),
        sa.Column("memo", sa.Text(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        *_audit_columns(),
        sa.ForeignKeyConstraint(["category_id"], ["expense_categories.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["card_statement_row_id"], ["card_statement_rows.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["budget_item_id"], ["budget_items.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_transactions_family_id", "transactions", ["family_id"])
    op.create_index("ix_transactions_transaction_date", "transactions", ["transaction_date"])
    op.create_index("ix_transactions_card_statement_row_id", "transactions", ["card_statement_row_id"])
    op.create_index(
        "ix_transactions_family_budget_item_date",
        "transactions",
        ["family_id", "budget_item_id", "transaction_date"],
    )


def downgrade() -> None:
    op.drop_table("transactions")
    op.drop_table("budget_items")
    op.drop_table("mapping_rules")
    op.drop_table("card_statement_rows")
    op.drop_table("card_statement_imports")
    op.drop_table("expense_categories")
