"""Tests for the pure ledger transitions and derivation passes."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from expense_ledger.exceptions import DuplicateBudgetCategoryError, InvalidAmountError
from expense_ledger.ledger import operations
from expense_ledger.ledger.derivations import derive, recompute_budgets, relabel_currency
from expense_ledger.models.ledger import Budget, BudgetStatus, LedgerState, Outcome
from expense_ledger.queries.summary import budget_status, split_share, total_spent


WHEN = datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)


def add(state, amount, category="Food", paid_by="u1", split_between=(), **kwargs):
    return operations.add_expense(
        state,
        amount=amount,
        category=category,
        description=kwargs.pop("description", "test"),
        paid_by=paid_by,
        split_between=split_between,
        **kwargs,
    )


@pytest.fixture
def state():
    return LedgerState()


class TestUserOperations:
    """Tests for add_user."""

    def test_add_user_appends(self, state):
        """Test users are appended with fresh ids."""
        state, first = operations.add_user(state, "Asha")
        state, second = operations.add_user(state, "Asha")
        assert [u.name for u in state.users] == ["Asha", "Asha"]
        assert first.id != second.id

    def test_input_state_untouched(self, state):
        """Test the input state is not mutated."""
        operations.add_user(state, "Asha")
        assert state.users == ()


class TestExpenseOperations:
    """Tests for add/edit/delete expense."""

    def test_add_expense_stamps_date_currency_and_split(self, state):
        """Test the new expense gets time, currency and a normalized split."""
        state = state.model_copy(update={"currency": "GBP"})
        state, expense = add(state, "100", split_between=[], now=WHEN)
        assert expense.date == WHEN
        assert expense.currency == "GBP"
        assert expense.split_between == ("u1",)
        assert state.expenses == (expense,)

    def test_add_expense_defaults_date_to_now(self, state):
        """Test the date is the current UTC time when not given."""
        before = datetime.now(timezone.utc)
        _, expense = add(state, 10)
        assert before <= expense.date <= datetime.now(timezone.utc)

    def test_newest_expense_first(self, state):
        """Test expenses are ordered most-recent-first."""
        state, first = add(state, 1)
        state, second = add(state, 2)
        assert [e.id for e in state.expenses] == [second.id, first.id]

    def test_add_expense_invalid_amount(self, state):
        """Test malformed amounts raise before anything changes."""
        with pytest.raises(InvalidAmountError):
            add(state, "ten")

    def test_edit_expense_replaces_fields(self, state):
        """Test edit replaces the editable fields and keeps id/date."""
        state, original = add(state, 10, now=WHEN)
        state = state.model_copy(update={"currency": "INR"})
        state, outcome = operations.edit_expense(
            state,
            original.id,
            amount="25",
            category="Bills",
            description="Power",
            paid_by="u2",
            split_between=[],
        )
        assert outcome is Outcome.APPLIED
        edited = state.find_expense(original.id)
        assert edited.id == original.id
        assert edited.date == WHEN
        assert edited.amount == Decimal("25")
        assert edited.category == "Bills"
        assert edited.description == "Power"
        assert edited.paid_by == "u2"
        assert edited.split_between == ("u2",)
        assert edited.currency == "INR"

    def test_edit_keeps_position(self, state):
        """Test an edited expense stays where it was in the list."""
        state, first = add(state, 1)
        state, second = add(state, 2)
        state, _ = operations.edit_expense(
            state, first.id, amount=3, category="Food", description="", paid_by="u1",
        )
        assert [e.id for e in state.expenses] == [second.id, first.id]

    def test_edit_missing_expense_is_noop(self, state):
        """Test editing an unknown id changes nothing."""
        state, _ = add(state, 1)
        new_state, outcome = operations.edit_expense(
            state, "missing", amount=5, category="Food", description="", paid_by="u1",
        )
        assert outcome is Outcome.NOT_FOUND
        assert new_state is state

    def test_edit_invalid_amount(self, state):
        """Test edit rejects malformed amounts."""
        state, expense = add(state, 1)
        with pytest.raises(InvalidAmountError):
            operations.edit_expense(
                state, expense.id, amount="", category="Food", description="", paid_by="u1",
            )

    def test_delete_expense(self, state):
        """Test delete removes only the matching expense."""
        state, keep = add(state, 1)
        state, drop = add(state, 2)
        state, outcome = operations.delete_expense(state, drop.id)
        assert outcome is Outcome.APPLIED
        assert state.expenses == (keep,)

    def test_delete_missing_expense_is_noop(self, state):
        """Test deleting an unknown id changes nothing."""
        new_state, outcome = operations.delete_expense(state, "missing")
        assert outcome is Outcome.NOT_FOUND
        assert new_state is state


class TestBudgetOperations:
    """Tests for add/edit/delete budget."""

    def test_add_budget_seeds_spent_from_history(self, state):
        """Test a new budget starts at what the category already spent."""
        state, _ = add(state, 30, category="Food")
        state, _ = add(state, 20, category="Food")
        state, _ = add(state, 99, category="Bills")
        state, budget = operations.add_budget(state, "Food", "100")
        assert budget.spent == Decimal("50")
        assert budget.limit == Decimal("100")
        assert budget.currency == state.currency

    def test_add_budget_without_history(self, state):
        """Test a budget for an unused category starts at zero."""
        _, budget = operations.add_budget(state, "Shopping", 40)
        assert budget.spent == Decimal("0")

    def test_add_duplicate_budget_rejected(self, state):
        """Test a second budget for the same category is refused."""
        state, _ = operations.add_budget(state, "Food", 100)
        with pytest.raises(DuplicateBudgetCategoryError) as exc_info:
            operations.add_budget(state, "Food", 50)
        assert exc_info.value.category == "Food"
        assert len(state.budgets) == 1

    def test_add_budget_invalid_limit(self, state):
        """Test malformed limits raise InvalidAmountError."""
        with pytest.raises(InvalidAmountError):
            operations.add_budget(state, "Food", "much")

    def test_edit_budget_changes_only_limit(self, state):
        """Test edit leaves spent alone."""
        state, _ = add(state, 30)
        state, _ = operations.add_budget(state, "Food", 100)
        state, outcome = operations.edit_budget(state, "Food", "200")
        budget = state.find_budget("Food")
        assert outcome is Outcome.APPLIED
        assert budget.limit == Decimal("200")
        assert budget.spent == Decimal("30")

    def test_edit_missing_budget_is_noop(self, state):
        """Test editing an unknown category changes nothing."""
        new_state, outcome = operations.edit_budget(state, "Food", 10)
        assert outcome is Outcome.NOT_FOUND
        assert new_state is state

    def test_delete_budget(self, state):
        """Test delete removes the budget unconditionally."""
        state, _ = operations.add_budget(state, "Food", 100)
        state, _ = operations.add_budget(state, "Bills", 100)
        state, outcome = operations.delete_budget(state, "Food")
        assert outcome is Outcome.APPLIED
        assert [b.category for b in state.budgets] == ["Bills"]

    def test_delete_missing_budget_is_noop(self, state):
        """Test deleting an unknown category changes nothing."""
        new_state, outcome = operations.delete_budget(state, "Food")
        assert outcome is Outcome.NOT_FOUND
        assert new_state is state


class TestCurrency:
    """Tests for set_currency and the relabel pass."""

    def test_set_currency_relabels_everything(self, state):
        """Test every expense and budget carries the new code."""
        state, _ = add(state, 10, category="Food")
        state, _ = add(state, 20, category="Bills")
        state, _ = operations.add_budget(state, "Food", 100)
        state = operations.set_currency(state, "EUR")
        assert state.currency == "EUR"
        assert {e.currency for e in state.expenses} == {"EUR"}
        assert {b.currency for b in state.budgets} == {"EUR"}

    def test_relabel_does_not_convert(self, state):
        """Test amounts are unchanged by a relabel."""
        state, _ = add(state, "12.34")
        relabeled = relabel_currency(state, "JPY")
        assert relabeled.expenses[0].amount == Decimal("12.34")


class TestDerivations:
    """Tests for recompute_budgets and derive."""

    def test_recompute_matches_category_sums(self, state):
        """Test spent equals the category total for every budget."""
        state, _ = operations.add_budget(state, "Food", 100)
        state, _ = operations.add_budget(state, "Bills", 100)
        state, _ = add(state, 40, category="Food")
        state, _ = add(state, "2.5", category="Food")
        state, _ = add(state, 7, category="Other")
        budgets = recompute_budgets(state.expenses, state.budgets)
        assert [(b.category, b.spent) for b in budgets] == [
            ("Food", Decimal("42.5")),
            ("Bills", Decimal("0")),
        ]

    def test_recompute_keeps_budgets_without_expenses(self):
        """Test budgets are never removed by a recompute."""
        budgets = (Budget(category="Food", limit=Decimal("5"), spent=Decimal("5"), currency="USD"),)
        assert recompute_budgets((), budgets)[0].spent == Decimal("0")

    def test_derive_only_runs_triggered_passes(self, state):
        """Test derive leaves state alone when nothing was triggered."""
        state, _ = operations.add_budget(state, "Food", 100)
        state, _ = add(state, 40)
        assert derive(state) == state
        assert derive(state, expenses_changed=True).budgets[0].spent == Decimal("40")

    def test_delete_then_recompute_reduces_spent(self, state):
        """Test deleting an expense lowers spent by exactly its amount."""
        state, _ = add(state, 40)
        state, drop = add(state, "15.25")
        state, _ = operations.add_budget(state, "Food", 100)
        before = state.find_budget("Food").spent
        state, _ = operations.delete_expense(state, drop.id)
        state = derive(state, expenses_changed=True)
        assert before - state.find_budget("Food").spent == Decimal("15.25")


class TestScenarios:
    """End-to-end walk through the documented example."""

    def test_documented_scenario(self, state):
        """Test split default, seeded budget, exceeded status and relabel."""
        state, expense = add(state, 100, category="Food", paid_by="u1", split_between=[])
        state = derive(state, expenses_changed=True)
        assert expense.split_between == ("u1",)
        assert total_spent(state.expenses) == Decimal("100")

        state, budget = operations.add_budget(state, "Food", 100)
        assert budget.spent == Decimal("100")
        assert budget_status(budget) is BudgetStatus.EXCEEDED

        state, _ = add(state, 50, category="Food")
        state = derive(state, expenses_changed=True)
        food = state.find_budget("Food")
        assert food.spent == Decimal("150")
        assert budget_status(food) is BudgetStatus.EXCEEDED

        assert state.currency == "USD"
        state = operations.set_currency(state, "EUR")
        assert all(e.currency == "EUR" for e in state.expenses)
        assert all(b.currency == "EUR" for b in state.budgets)
        assert [e.amount for e in state.expenses] == [Decimal("50"), Decimal("100")]

    def test_three_way_split(self, state):
        """Test 90 split three ways is 30 each."""
        _, expense = add(state, 90, split_between=["u1", "u2", "u3"])
        assert split_share(expense) == Decimal("30")
