"""
Expense Ledger Controller

This module owns the single ledger state and defines how every change flows:

    validate -> transition -> derive -> swap in -> persist -> audit

DESIGN DECISION: The controller enforces the consistency boundaries:
- Bad input is rejected before anything changes
- Budget totals and currency labels are derived before the new state is
  published, and the new state is published with a single assignment
- Persistence is fire-and-forget: a failed save is audited, never raised

The presentation layer talks only to ``ExpenseLedger``. It owns any
confirmation prompts; the ledger performs deletes unconditionally.
"""

from decimal import Decimal
from typing import Annotated, Any, Iterable, Optional

from pydantic import AfterValidator, TypeAdapter, ValidationError

from expense_ledger.audit import AuditLogger, configure_logging
from expense_ledger.config import LedgerSettings, get_settings
from expense_ledger.exceptions import LedgerError
from expense_ledger.ledger import operations
from expense_ledger.ledger.derivations import derive
from expense_ledger.models.audit import AuditEventBuilder
from expense_ledger.models.ledger import (
    Budget,
    BudgetStatus,
    CategoryName,
    Expense,
    ExpenseId,
    LedgerState,
    Outcome,
    User,
    UserId,
    unique_budget_categories,
)
from expense_ledger.queries import summary
from expense_ledger.services.storage import (
    AuditStorageInterface,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
    StorageError,
    StorageKey,
)
from expense_ledger.validation.amounts import AmountInput


_EXPENSES_ADAPTER = TypeAdapter(tuple[Expense, ...])
_USERS_ADAPTER = TypeAdapter(tuple[User, ...])
_BUDGETS_ADAPTER = TypeAdapter(
    Annotated[tuple[Budget, ...], AfterValidator(unique_budget_categories)]
)
_CURRENCY_ADAPTER = TypeAdapter(str)


def encode_state(state: LedgerState) -> dict[StorageKey, Any]:
    """Serialize the four top-level values to JSON-compatible data."""
    return {
        StorageKey.EXPENSES: [
            expense.model_dump(mode="json", by_alias=True) for expense in state.expenses
        ],
        StorageKey.USERS: [user.model_dump(mode="json") for user in state.users],
        StorageKey.BUDGETS: [budget.model_dump(mode="json") for budget in state.budgets],
        StorageKey.CURRENCY: state.currency,
    }


def _changed_keys(before: LedgerState, after: LedgerState) -> list[StorageKey]:
    changed = []
    if before.expenses != after.expenses:
        changed.append(StorageKey.EXPENSES)
    if before.users != after.users:
        changed.append(StorageKey.USERS)
    if before.budgets != after.budgets:
        changed.append(StorageKey.BUDGETS)
    if before.currency != after.currency:
        changed.append(StorageKey.CURRENCY)
    return changed


class ExpenseLedger:
    """
    Single owner of the ledger state.

    Reads return immutable snapshots; every mutation goes through one of
    the operation methods below.
    """

    def __init__(
        self,
        state: Optional[LedgerState] = None,
        storage: Optional[LedgerStorageInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._settings = settings or get_settings().ledger
        if state is None:
            state = LedgerState(currency=self._settings.default_currency)
        self._state = state
        self._storage = storage
        self._audit = audit_logger or AuditLogger()

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def load(
        cls,
        storage: LedgerStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ) -> "ExpenseLedger":
        """
        Build a ledger from stored data.

        Each key falls back to its default independently when missing or
        unreadable. Both derivations run on the loaded data, and any value
        they corrected is written back.
        """
        ledger = cls(storage=storage, audit_logger=audit_logger, settings=settings)
        default = ledger._state

        loaded = LedgerState(
            expenses=ledger._decode(StorageKey.EXPENSES, _EXPENSES_ADAPTER, default.expenses),
            users=ledger._decode(StorageKey.USERS, _USERS_ADAPTER, default.users),
            budgets=ledger._decode(StorageKey.BUDGETS, _BUDGETS_ADAPTER, default.budgets),
            currency=ledger._decode(StorageKey.CURRENCY, _CURRENCY_ADAPTER, default.currency),
        )
        derived = derive(loaded, expenses_changed=True, currency_changed=True)
        ledger._state = derived
        ledger._persist(loaded, derived)

        ledger._audit.log(AuditEventBuilder.state_loaded(
            expenses=len(derived.expenses),
            users=len(derived.users),
            budgets=len(derived.budgets),
            currency=derived.currency,
        ))
        return ledger

    def _decode(self, key: StorageKey, adapter: TypeAdapter, default: Any) -> Any:
        try:
            raw = self._storage.load(key, None)
        except StorageError as e:
            self._audit.log_storage_load_failed(key.value, str(e))
            return default
        if raw is None:
            return default
        try:
            return adapter.validate_python(raw)
        except ValidationError as e:
            dropped = len(raw) if isinstance(raw, list) else None
            self._audit.log_storage_load_failed(key.value, str(e), dropped=dropped)
            return default

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """Expenses, most recent first."""
        return self._state.expenses

    @property
    def users(self) -> tuple[User, ...]:
        return self._state.users

    @property
    def budgets(self) -> tuple[Budget, ...]:
        return self._state.budgets

    @property
    def currency(self) -> str:
        return self._state.currency

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self._state.find_expense(ExpenseId(expense_id))

    def get_budget(self, category: str) -> Optional[Budget]:
        return self._state.find_budget(CategoryName(category))

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def add_user(self, name: str) -> User:
        try:
            state, user = operations.add_user(self._state, name)
        except ValidationError as e:
            self._audit.log_operation_rejected("add_user", str(e), "user")
            raise
        self._commit(state)
        self._audit.log(AuditEventBuilder.user_added(user.id, user.name))
        return user

    def add_expense(
        self,
        amount: AmountInput,
        category: str,
        description: str,
        paid_by: str,
        split_between: Iterable[str] = (),
    ) -> Expense:
        """
        Record an expense, stamped with the current time and currency.

        Raises:
            InvalidAmountError: if ``amount`` is not a positive number
        """
        try:
            state, expense = operations.add_expense(
                self._state,
                amount=amount,
                category=category,
                description=description,
                paid_by=paid_by,
                split_between=split_between,
            )
        except LedgerError as e:
            self._audit.log_operation_rejected("add_expense", str(e), "expense")
            raise
        self._commit(state, expenses_changed=True)
        self._audit.log(AuditEventBuilder.expense_added(
            expense_id=expense.id,
            category=expense.category,
            amount=str(expense.amount),
            currency=expense.currency,
        ))
        return self.get_expense(expense.id)

    def edit_expense(
        self,
        expense_id: str,
        amount: AmountInput,
        category: str,
        description: str,
        paid_by: str,
        split_between: Iterable[str] = (),
    ) -> Outcome:
        """
        Replace an expense's editable fields.

        Returns ``Outcome.NOT_FOUND`` (and changes nothing) for an unknown id.

        Raises:
            InvalidAmountError: if ``amount`` is not a positive number
        """
        try:
            state, outcome = operations.edit_expense(
                self._state,
                expense_id,
                amount=amount,
                category=category,
                description=description,
                paid_by=paid_by,
                split_between=split_between,
            )
        except LedgerError as e:
            self._audit.log_operation_rejected("edit_expense", str(e), "expense", expense_id)
            raise
        if outcome is Outcome.NOT_FOUND:
            self._audit.log_operation_missed("edit_expense", "expense", expense_id)
            return outcome

        self._commit(state, expenses_changed=True)
        updated = self.get_expense(expense_id)
        self._audit.log(AuditEventBuilder.expense_updated(
            expense_id=updated.id,
            category=updated.category,
            amount=str(updated.amount),
        ))
        return outcome

    def delete_expense(self, expense_id: str) -> Outcome:
        existing = self.get_expense(expense_id)
        state, outcome = operations.delete_expense(self._state, expense_id)
        if outcome is Outcome.NOT_FOUND:
            self._audit.log_operation_missed("delete_expense", "expense", expense_id)
            return outcome

        self._commit(state, expenses_changed=True)
        self._audit.log(AuditEventBuilder.expense_deleted(
            expense_id=existing.id,
            category=existing.category,
            amount=str(existing.amount),
        ))
        return outcome

    def add_budget(self, category: str, limit: AmountInput) -> Budget:
        """
        Create a budget, seeded with what the category has already spent.

        Raises:
            InvalidAmountError: if ``limit`` is not a number
            DuplicateBudgetCategoryError: if the category already has a budget
        """
        try:
            state, budget = operations.add_budget(self._state, category, limit)
        except LedgerError as e:
            self._audit.log_operation_rejected("add_budget", str(e), "budget", category)
            raise
        self._commit(state)
        self._audit.log(AuditEventBuilder.budget_added(
            category=budget.category,
            limit=str(budget.limit),
            spent=str(budget.spent),
        ))
        return budget

    def edit_budget(self, category: str, limit: AmountInput) -> Outcome:
        try:
            state, outcome = operations.edit_budget(self._state, category, limit)
        except LedgerError as e:
            self._audit.log_operation_rejected("edit_budget", str(e), "budget", category)
            raise
        if outcome is Outcome.NOT_FOUND:
            self._audit.log_operation_missed("edit_budget", "budget", category)
            return outcome

        self._commit(state)
        self._audit.log(AuditEventBuilder.budget_updated(
            category=category,
            limit=str(self.get_budget(category).limit),
        ))
        return outcome

    def delete_budget(self, category: str) -> Outcome:
        state, outcome = operations.delete_budget(self._state, category)
        if outcome is Outcome.NOT_FOUND:
            self._audit.log_operation_missed("delete_budget", "budget", category)
            return outcome

        self._commit(state)
        self._audit.log(AuditEventBuilder.budget_deleted(category))
        return outcome

    def set_currency(self, code: str) -> None:
        """Select a currency; every expense and budget is relabeled with it."""
        previous = self._state.currency
        self._commit(operations.set_currency(self._state, code))
        if previous != code:
            self._audit.log(AuditEventBuilder.currency_changed(
                previous=previous,
                current=code,
                relabeled=len(self._state.expenses) + len(self._state.budgets),
            ))

    # -------------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------------

    def total_spent(self) -> Decimal:
        return summary.total_spent(self._state.expenses)

    def split_share(self, expense: Expense) -> Decimal:
        return summary.split_share(expense)

    def budget_status(self, budget: Budget) -> BudgetStatus:
        return summary.budget_status(
            budget,
            near_percent=self._settings.near_limit_percent,
            exceeded_percent=self._settings.exceeded_percent,
        )

    def budget_progress(self, budget: Budget) -> Decimal:
        return summary.budget_progress(budget)

    def currency_symbol(self, code: Optional[str] = None) -> str:
        """Symbol for ``code``, or for the selected currency."""
        return summary.currency_symbol(code or self._state.currency)

    def user_name(self, user_id: str) -> str:
        return summary.user_name(self._state.users, UserId(user_id))

    def available_budget_categories(self) -> list[CategoryName]:
        return summary.available_budget_categories(self._state.budgets)

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def _commit(
        self,
        state: LedgerState,
        *,
        expenses_changed: bool = False,
        currency_changed: bool = False,
    ) -> None:
        previous = self._state
        self._state = derive(
            state,
            expenses_changed=expenses_changed,
            currency_changed=currency_changed,
        )
        self._persist(previous, self._state)

    def _persist(self, before: LedgerState, after: LedgerState) -> None:
        if self._storage is None:
            return
        changed = _changed_keys(before, after)
        if not changed:
            return
        encoded = encode_state(after)
        for key in changed:
            try:
                self._storage.save(key, encoded[key])
            except Exception as e:
                self._audit.log_storage_save_failed(key.value, str(e))


def create_ledger(
    storage: Optional[LedgerStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> ExpenseLedger:
    """
    Factory function to create a ledger from configuration.

    Args:
        storage: Storage adapter to use; built from settings if None
        audit_storage: Where audit events are kept; local logging only if None

    Returns:
        A loaded ``ExpenseLedger``
    """
    settings = get_settings()
    ledger_settings = settings.ledger
    configure_logging(ledger_settings.debug_mode)

    if storage is None:
        storage_settings = settings.storage
        if storage_settings.backend == "memory":
            storage = InMemoryLedgerStorage()
        else:
            storage = JsonFileLedgerStorage(
                data_dir=storage_settings.data_dir,
                write_attempts=storage_settings.write_attempts,
            )

    return ExpenseLedger.load(
        storage,
        audit_logger=AuditLogger(audit_storage),
        settings=ledger_settings,
    )
