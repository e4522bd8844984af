"""
Ledger Summaries

Read-only values computed from the ledger state for display: totals,
per-person shares and budget health. Everything here is a pure function of
its arguments and never touches storage.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Union

from expense_ledger.models.ledger import (
    CATEGORIES,
    CURRENCIES,
    Budget,
    BudgetStatus,
    CategoryName,
    Expense,
    User,
    UserId,
)


UNKNOWN_USER_NAME = "Unknown"

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")

Percent = Union[Decimal, float, int]


def total_spent(expenses: Iterable[Expense]) -> Decimal:
    """Sum of every expense amount, regardless of category or currency."""
    return sum((expense.amount for expense in expenses), _ZERO)


def split_share(expense: Expense) -> Decimal:
    """What each participant owes for an expense, split equally."""
    return expense.amount / len(expense.split_between)


def category_totals(expenses: Iterable[Expense]) -> dict[CategoryName, Decimal]:
    """Total spent per category, for categories that have any expenses."""
    totals: dict[CategoryName, Decimal] = defaultdict(lambda: _ZERO)
    for expense in expenses:
        totals[expense.category] += expense.amount
    return dict(totals)


def category_spent(expenses: Iterable[Expense], category: CategoryName) -> Decimal:
    """Total spent in one category (zero if nothing matches)."""
    return sum(
        (expense.amount for expense in expenses if expense.category == category),
        _ZERO,
    )


def budget_percentage(budget: Budget) -> Decimal:
    """
    How much of the limit has been spent, in percent.

    Not capped: an overspent budget reports more than 100. A limit of zero
    or less reports 100, matching the progress bar.
    """
    if budget.limit <= 0:
        return _HUNDRED
    return budget.spent / budget.limit * _HUNDRED


def budget_progress(budget: Budget) -> Decimal:
    """Percentage for a progress bar: between 0 and 100."""
    return min(budget_percentage(budget), _HUNDRED)


def budget_status(
    budget: Budget,
    near_percent: Percent = 80,
    exceeded_percent: Percent = 100,
) -> BudgetStatus:
    """
    Classify a budget by how much of its limit is spent.

    Each band includes its lower bound, so exactly 80% is near the limit and
    exactly 100% is exceeded. A limit of zero or less is always exceeded.
    """
    if budget.limit <= 0:
        return BudgetStatus.EXCEEDED

    percentage = budget_percentage(budget)
    if percentage >= Decimal(str(exceeded_percent)):
        return BudgetStatus.EXCEEDED
    if percentage >= Decimal(str(near_percent)):
        return BudgetStatus.NEAR_LIMIT
    return BudgetStatus.NORMAL


def currency_symbol(code: str) -> str:
    """Display symbol for a currency code; unknown codes display as-is."""
    for currency in CURRENCIES:
        if currency.code == code:
            return currency.symbol
    return code


def user_name(users: Iterable[User], user_id: UserId) -> str:
    """Name of a user, or ``"Unknown"`` if the id matches nobody."""
    for user in users:
        if user.id == user_id:
            return user.name
    return UNKNOWN_USER_NAME


def available_budget_categories(budgets: Iterable[Budget]) -> list[CategoryName]:
    """Categories that do not have a budget yet, in vocabulary order."""
    taken = {budget.category for budget in budgets}
    return [category for category in CATEGORIES if category not in taken]
