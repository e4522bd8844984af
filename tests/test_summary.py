"""Tests for the read-side ledger summaries."""

import pytest
from datetime import datetime, timezone
from decimal import Decimal

from expense_ledger.models.ledger import Budget, BudgetStatus, Expense, User
from expense_ledger.queries import (
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


def expense(amount, category="Food", currency="USD", split=("u1",)):
    return Expense(
        id=f"e-{amount}-{category}",
        amount=Decimal(str(amount)),
        category=category,
        date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        currency=currency,
        paid_by="u1",
        split_between=split,
    )


def budget(spent, limit="100"):
    return Budget(category="Food", limit=Decimal(limit), spent=Decimal(spent), currency="USD")


class TestTotals:
    """Tests for total and per-category sums."""

    def test_total_spent_ignores_category_and_currency(self):
        """Test every amount counts towards the total."""
        expenses = [expense(10, "Food", "USD"), expense("2.5", "Bills", "EUR")]
        assert total_spent(expenses) == Decimal("12.5")

    def test_total_spent_empty(self):
        """Test an empty ledger totals zero."""
        assert total_spent([]) == Decimal("0")

    def test_category_totals(self):
        """Test sums are grouped by category."""
        expenses = [expense(10, "Food"), expense(5, "Food"), expense(1, "Other")]
        assert category_totals(expenses) == {"Food": Decimal("15"), "Other": Decimal("1")}
        assert category_spent(expenses, "Food") == Decimal("15")
        assert category_spent(expenses, "Bills") == Decimal("0")


class TestSplitShare:
    """Tests for split_share."""

    def test_three_way_split(self):
        """Test 90 split three ways is 30 each."""
        assert split_share(expense(90, split=("u1", "u2", "u3"))) == Decimal("30")

    def test_single_payer(self):
        """Test a one-person split is the whole amount."""
        assert split_share(expense(42)) == Decimal("42")


class TestBudgetStatus:
    """Tests for budget classification."""

    @pytest.mark.parametrize("spent, expected", [
        ("0", BudgetStatus.NORMAL),
        ("79.99", BudgetStatus.NORMAL),
        ("80", BudgetStatus.NEAR_LIMIT),
        ("99.99", BudgetStatus.NEAR_LIMIT),
        ("100", BudgetStatus.EXCEEDED),
        ("150", BudgetStatus.EXCEEDED),
    ])
    def test_bands(self, spent, expected):
        """Test each band includes its lower bound."""
        assert budget_status(budget(spent)) is expected

    @pytest.mark.parametrize("limit", ["0", "-10"])
    def test_non_positive_limit_is_exceeded(self, limit):
        """Test a zero or negative limit always counts as exceeded."""
        assert budget_status(budget("0", limit=limit)) is BudgetStatus.EXCEEDED

    def test_custom_thresholds(self):
        """Test thresholds can be moved."""
        assert budget_status(budget("50"), near_percent=50, exceeded_percent=90) is BudgetStatus.NEAR_LIMIT
        assert budget_status(budget("90"), near_percent=50, exceeded_percent=90) is BudgetStatus.EXCEEDED

    def test_percentage_and_progress(self):
        """Test progress is capped at 100 while the percentage is not."""
        over = budget("150")
        assert budget_percentage(over) == Decimal("150")
        assert budget_progress(over) == Decimal("100")
        assert budget_progress(budget("25")) == Decimal("25")
        assert budget_progress(budget("0", limit="0")) == Decimal("100")

    @pytest.mark.parametrize("limit", ["0", "-10"])
    @pytest.mark.parametrize("spent", ["0", "10"])
    def test_percentage_of_non_positive_limit(self, limit, spent):
        """Test a zero or negative limit reports 100 percent instead of dividing."""
        assert budget_percentage(budget(spent, limit=limit)) == Decimal("100")
        assert budget_progress(budget(spent, limit=limit)) == Decimal("100")


class TestLookups:
    """Tests for display lookups."""

    def test_currency_symbol(self):
        """Test known codes map to symbols and unknown codes pass through."""
        assert currency_symbol("USD") == "$"
        assert currency_symbol("INR") == "₹"
        assert currency_symbol("CHF") == "CHF"

    def test_user_name(self):
        """Test names resolve and unknown ids read as Unknown."""
        users = [User(id="u1", name="Asha"), User(id="u2", name="Ben")]
        assert user_name(users, "u2") == "Ben"
        assert user_name(users, "u9") == "Unknown"

    def test_available_budget_categories(self):
        """Test categories with a budget are not offered again."""
        budgets = [budget("0"), Budget(category="Bills", limit=Decimal("1"), currency="USD")]
        assert available_budget_categories(budgets) == [
            "Transportation", "Shopping", "Entertainment", "Other",
        ]
