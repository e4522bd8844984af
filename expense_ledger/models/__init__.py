"""
Data Models Package

This package contains all Pydantic models used by the expense ledger.
All ledger state flowing through the system conforms to these schemas.
"""

from expense_ledger.models.ledger import (
    CATEGORIES,
    CURRENCIES,
    DEFAULT_CURRENCY,
    Budget,
    BudgetStatus,
    CategoryName,
    Currency,
    CurrencyCode,
    Expense,
    ExpenseCategory,
    ExpenseId,
    LedgerState,
    Outcome,
    User,
    UserId,
)
from expense_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "CATEGORIES",
    "CURRENCIES",
    "DEFAULT_CURRENCY",
    "Budget",
    "BudgetStatus",
    "CategoryName",
    "Currency",
    "CurrencyCode",
    "Expense",
    "ExpenseCategory",
    "ExpenseId",
    "LedgerState",
    "Outcome",
    "User",
    "UserId",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
