"""Read-side summaries package."""

from expense_ledger.queries.summary import (
    UNKNOWN_USER_NAME,
    available_budget_categories,
    budget_percentage,
    budget_progress,
    budget_status,
    category_spent,
    category_totals,
    currency_symbol,
    split_share,
    total_spent,
    user_name,
)

__all__ = [
    "UNKNOWN_USER_NAME",
    "available_budget_categories",
    "budget_percentage",
    "budget_progress",
    "budget_status",
    "category_spent",
    "category_totals",
    "currency_symbol",
    "split_share",
    "total_spent",
    "user_name",
]
