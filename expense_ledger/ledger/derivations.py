"""
Derivation Passes

Two values in the ledger are never set directly by a user action:

- a budget's ``spent``, which always equals the total of the expenses in its
  category
- the ``currency`` stamped on every expense and budget, which always equals
  the selected currency

``derive`` runs whichever passes a transition triggered and returns one new
state, so nobody can observe the base change without its derived fields.
"""

from decimal import Decimal
from typing import Iterable

from expense_ledger.models.ledger import Budget, Expense, LedgerState
from expense_ledger.queries.summary import category_totals


_ZERO = Decimal("0")


def recompute_budgets(
    expenses: Iterable[Expense],
    budgets: Iterable[Budget],
) -> tuple[Budget, ...]:
    """
    Re-derive ``spent`` for every budget from the full expense list.

    Budgets whose category has no expenses are kept with ``spent`` at zero.
    """
    totals = category_totals(expenses)
    return tuple(
        budget.model_copy(update={"spent": max(totals.get(budget.category, _ZERO), _ZERO)})
        for budget in budgets
    )


def relabel_currency(state: LedgerState, code: str) -> LedgerState:
    """
    Select ``code`` and stamp it on every expense and budget.

    Amounts are left untouched: this is a relabel, not a conversion.
    """
    return state.model_copy(update={
        "currency": code,
        "expenses": tuple(
            expense.model_copy(update={"currency": code}) for expense in state.expenses
        ),
        "budgets": tuple(
            budget.model_copy(update={"currency": code}) for budget in state.budgets
        ),
    })


def derive(
    state: LedgerState,
    *,
    expenses_changed: bool = False,
    currency_changed: bool = False,
) -> LedgerState:
    """Run the derivation passes a transition triggered."""
    if currency_changed:
        state = relabel_currency(state, state.currency)
    if expenses_changed:
        state = state.model_copy(update={
            "budgets": recompute_budgets(state.expenses, state.budgets),
        })
    return state
