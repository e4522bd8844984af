"""
Ledger State Transitions

Each operation takes the current ``LedgerState`` and returns the next one.
Inputs are never mutated: entities are frozen and every change builds new
tuples.

Expense operations return the base state only. Budget ``spent`` values are
brought up to date by ``derive`` afterwards, which the controller always runs
before the new state becomes visible.

Misses are not errors: editing or deleting something that does not exist
returns the input state with ``Outcome.NOT_FOUND``.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional
from uuid import uuid4

from expense_ledger.exceptions import DuplicateBudgetCategoryError
from expense_ledger.ledger.derivations import derive
from expense_ledger.models.ledger import (
    Budget,
    CategoryName,
    Expense,
    ExpenseId,
    LedgerState,
    Outcome,
    User,
    UserId,
)
from expense_ledger.queries.summary import category_spent
from expense_ledger.validation.amounts import (
    AmountInput,
    normalize_split,
    parse_amount,
    parse_limit,
)


def new_id() -> str:
    """Opaque unique identifier for a new entity."""
    return str(uuid4())


def add_user(state: LedgerState, name: str) -> tuple[LedgerState, User]:
    """Append a new user. Duplicate names are allowed."""
    user = User(id=UserId(new_id()), name=name)
    return state.model_copy(update={"users": state.users + (user,)}), user


def add_expense(
    state: LedgerState,
    *,
    amount: AmountInput,
    category: str,
    description: str,
    paid_by: str,
    split_between: Iterable[str] = (),
    now: Optional[datetime] = None,
) -> tuple[LedgerState, Expense]:
    """
    Record a new expense at the head of the list.

    The expense is dated ``now`` (current UTC time by default) and stamped
    with the selected currency.

    Raises:
        InvalidAmountError: if ``amount`` is not a positive number
    """
    parsed = parse_amount(amount)
    payer = UserId(paid_by)
    expense = Expense(
        id=ExpenseId(new_id()),
        amount=parsed,
        category=CategoryName(category),
        description=description,
        date=now or datetime.now(timezone.utc),
        currency=state.currency,
        paid_by=payer,
        split_between=normalize_split((UserId(m) for m in split_between), payer),
    )
    return state.model_copy(update={"expenses": (expense,) + state.expenses}), expense


def edit_expense(
    state: LedgerState,
    expense_id: str,
    *,
    amount: AmountInput,
    category: str,
    description: str,
    paid_by: str,
    split_between: Iterable[str] = (),
) -> tuple[LedgerState, Outcome]:
    """
    Replace the editable fields of an expense.

    ``id`` and ``date`` are kept; the currency is re-stamped with the
    current selection. The expense keeps its position in the list.

    Raises:
        InvalidAmountError: if ``amount`` is not a positive number
    """
    parsed = parse_amount(amount)
    existing = state.find_expense(ExpenseId(expense_id))
    if existing is None:
        return state, Outcome.NOT_FOUND

    payer = UserId(paid_by)
    updated = Expense(
        id=existing.id,
        date=existing.date,
        amount=parsed,
        category=CategoryName(category),
        description=description,
        currency=state.currency,
        paid_by=payer,
        split_between=normalize_split((UserId(m) for m in split_between), payer),
    )
    expenses = tuple(
        updated if expense.id == existing.id else expense
        for expense in state.expenses
    )
    return state.model_copy(update={"expenses": expenses}), Outcome.APPLIED


def delete_expense(state: LedgerState, expense_id: str) -> tuple[LedgerState, Outcome]:
    """Remove an expense."""
    if state.find_expense(ExpenseId(expense_id)) is None:
        return state, Outcome.NOT_FOUND

    expenses = tuple(e for e in state.expenses if e.id != expense_id)
    return state.model_copy(update={"expenses": expenses}), Outcome.APPLIED


def add_budget(
    state: LedgerState,
    category: str,
    limit: AmountInput,
) -> tuple[LedgerState, Budget]:
    """
    Create a budget for a category that has none.

    ``spent`` starts at the total of the expenses already in the category.

    Raises:
        InvalidAmountError: if ``limit`` is not a number
        DuplicateBudgetCategoryError: if the category already has a budget
    """
    parsed = parse_limit(limit)
    name = CategoryName(category)
    if state.find_budget(name) is not None:
        raise DuplicateBudgetCategoryError(name)

    budget = Budget(
        category=name,
        limit=parsed,
        spent=category_spent(state.expenses, name),
        currency=state.currency,
    )
    return state.model_copy(update={"budgets": state.budgets + (budget,)}), budget


def edit_budget(
    state: LedgerState,
    category: str,
    limit: AmountInput,
) -> tuple[LedgerState, Outcome]:
    """
    Change a budget's limit. ``spent`` is left as it is.

    Raises:
        InvalidAmountError: if ``limit`` is not a number
    """
    parsed = parse_limit(limit)
    if state.find_budget(CategoryName(category)) is None:
        return state, Outcome.NOT_FOUND

    budgets = tuple(
        budget.model_copy(update={"limit": parsed}) if budget.category == category else budget
        for budget in state.budgets
    )
    return state.model_copy(update={"budgets": budgets}), Outcome.APPLIED


def delete_budget(state: LedgerState, category: str) -> tuple[LedgerState, Outcome]:
    """Remove a budget. Confirmation is the caller's job."""
    if state.find_budget(CategoryName(category)) is None:
        return state, Outcome.NOT_FOUND

    budgets = tuple(b for b in state.budgets if b.category != category)
    return state.model_copy(update={"budgets": budgets}), Outcome.APPLIED


def set_currency(state: LedgerState, code: str) -> LedgerState:
    """
    Select a currency and relabel every expense and budget with it.

    Both happen in the returned state; amounts are not converted.
    """
    selected = state.model_copy(update={"currency": code})
    return derive(selected, currency_changed=True)
