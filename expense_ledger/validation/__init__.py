"""Input validation package."""

from expense_ledger.validation.amounts import (
    AmountInput,
    normalize_split,
    parse_amount,
    parse_limit,
)

__all__ = [
    "AmountInput",
    "normalize_split",
    "parse_amount",
    "parse_limit",
]
