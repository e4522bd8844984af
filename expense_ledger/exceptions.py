"""Domain exceptions for the ledger core.

Only genuine precondition violations raise. Editing or deleting something
that does not exist is reported as ``Outcome.NOT_FOUND`` instead.
"""

from typing import Any


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvalidAmountError(LedgerError, ValueError):
    """An amount or limit could not be read as a usable number."""

    def __init__(self, value: Any, reason: str = "not a number"):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid amount {value!r}: {reason}")


class DuplicateBudgetCategoryError(LedgerError):
    """A budget already exists for this category."""

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"A budget for category {category!r} already exists")
