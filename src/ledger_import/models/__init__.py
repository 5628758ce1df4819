"""Database models."""
from ledger_import.models.base import Base, BaseModel
from ledger_import.models.budget_item import BudgetItem
from ledger_import.models.category import ExpenseCategory
from ledger_import.models.import_row import ImportRow
from ledger_import.models.mapping_rule import MappingRule
from ledger_import.models.statement_import import StatementImport
from ledger_import.models.transaction import Transaction

__all__ = [
    "Base",
    "BaseModel",
    "BudgetItem",
    "ExpenseCategory",
    "ImportRow",
    "MappingRule",
    "StatementImport",
    "Transaction",
]
