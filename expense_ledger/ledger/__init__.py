"""Ledger state management package."""

from expense_ledger.ledger.controller import ExpenseLedger, create_ledger
from expense_ledger.ledger.derivations import derive, recompute_budgets, relabel_currency

__all__ = [
    "ExpenseLedger",
    "create_ledger",
    "derive",
    "recompute_budgets",
    "relabel_currency",
]
