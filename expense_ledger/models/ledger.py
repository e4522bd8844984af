"""
Core Data Models for Expense Ledger

These models define the strict schemas for the ledger state.
They are designed to:
1. Enforce the entity invariants at construction time
2. Be immutable, so every transition produces a new state
3. Serialize to the same JSON shape the storage layer has always used

DESIGN DECISION: Identifiers and category names are NewType wrappers over str.
They cost nothing at runtime and keep UserId/ExpenseId/CategoryName from
being mixed up, while staying plain strings on disk.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import NewType, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)

from expense_ledger.validation.amounts import normalize_split


UserId = NewType("UserId", str)
ExpenseId = NewType("ExpenseId", str)
CategoryName = NewType("CategoryName", str)


# =============================================================================
# VOCABULARIES - closed option sets offered by the presentation layer
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Categories an expense or budget can be filed under.

    The core does not reject other values; the presentation layer is
    expected to only offer these.
    """
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    OTHER = "Other"


class CurrencyCode(str, Enum):
    """Supported currency codes, in display order."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    INR = "INR"


class Currency(BaseModel):
    """A currency code with its display symbol."""
    model_config = ConfigDict(frozen=True)

    code: str
    symbol: str


CATEGORIES: tuple[CategoryName, ...] = tuple(
    CategoryName(category.value) for category in ExpenseCategory
)

CURRENCIES: tuple[Currency, ...] = (
    Currency(code=CurrencyCode.USD.value, symbol="$"),
    Currency(code=CurrencyCode.EUR.value, symbol="€"),
    Currency(code=CurrencyCode.GBP.value, symbol="£"),
    Currency(code=CurrencyCode.JPY.value, symbol="¥"),
    Currency(code=CurrencyCode.INR.value, symbol="₹"),
)

DEFAULT_CURRENCY = CURRENCIES[0].code


class Outcome(str, Enum):
    """Result of an edit or delete: misses leave the state untouched."""
    APPLIED = "applied"
    NOT_FOUND = "not_found"


class BudgetStatus(str, Enum):
    """
    How far a budget's spending has progressed towards its limit.

    Ordered from lowest to highest severity.
    """
    NORMAL = "normal"
    NEAR_LIMIT = "near_limit"
    EXCEEDED = "exceeded"

    @property
    def message(self) -> str:
        """Warning text shown next to the budget."""
        return _STATUS_MESSAGES[self]


_STATUS_MESSAGES = {
    BudgetStatus.NORMAL: "",
    BudgetStatus.NEAR_LIMIT: "Near budget limit!",
    BudgetStatus.EXCEEDED: "Budget exceeded!",
}


# =============================================================================
# ENTITIES
# =============================================================================

class User(BaseModel):
    """A person who can pay for or share an expense. Never mutated."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UserId
    name: str = Field(..., min_length=1)


class Expense(BaseModel):
    """
    A single recorded outlay.

    Stored field names are camelCase (``paidBy``, ``splitBetween``); both
    spellings are accepted on input.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: ExpenseId
    amount: Decimal = Field(..., gt=0)
    category: CategoryName
    description: str = ""
    date: datetime
    currency: str
    paid_by: UserId = Field(..., alias="paidBy")
    split_between: tuple[UserId, ...] = Field(
        default=(),
        alias="splitBetween",
        validate_default=True,
        description="Users sharing the cost; never empty once validated"
    )

    @field_validator('split_between')
    @classmethod
    def default_split_to_payer(
        cls,
        v: tuple[UserId, ...],
        info: ValidationInfo,
    ) -> tuple[UserId, ...]:
        """An empty split means the payer carries the whole cost."""
        payer = info.data.get("paid_by")
        if payer is None:
            return v
        return normalize_split(v, payer)


class Budget(BaseModel):
    """
    A spending ceiling for one category.

    ``spent`` is derived from the expenses and never set by a user action.
    """
    model_config = ConfigDict(frozen=True)

    category: CategoryName
    limit: Decimal
    spent: Decimal = Field(default=Decimal("0"), ge=0)
    currency: str


def unique_budget_categories(budgets: tuple[Budget, ...]) -> tuple[Budget, ...]:
    """Reject a budget list holding more than one budget per category."""
    seen: set[str] = set()
    for budget in budgets:
        if budget.category in seen:
            raise ValueError(f"duplicate budget for category {budget.category!r}")
        seen.add(budget.category)
    return budgets


class LedgerState(BaseModel):
    """
    The whole ledger: the four top-level values persisted separately.

    ``expenses`` is ordered most-recent-first.
    """
    model_config = ConfigDict(frozen=True)

    expenses: tuple[Expense, ...] = ()
    users: tuple[User, ...] = ()
    budgets: tuple[Budget, ...] = ()
    currency: str = DEFAULT_CURRENCY

    @model_validator(mode="after")
    def one_budget_per_category(self) -> "LedgerState":
        unique_budget_categories(self.budgets)
        return self

    def find_expense(self, expense_id: ExpenseId) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)

    def find_budget(self, category: CategoryName) -> Optional[Budget]:
        return next((b for b in self.budgets if b.category == category), None)

    def find_user(self, user_id: UserId) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)
