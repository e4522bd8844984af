"""
Audit Models for Expense Ledger

Every state change in the ledger is logged for audit purposes.
This provides:
1. Traceability of who changed what and when
2. Debugging information when storage misbehaves
3. A record of requests that were rejected or missed their target

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Users
    USER_ADDED = "user_added"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"

    # Budgets
    BUDGET_ADDED = "budget_added"
    BUDGET_UPDATED = "budget_updated"
    BUDGET_DELETED = "budget_deleted"

    # Currency selection
    CURRENCY_CHANGED = "currency_changed"

    # Requests that changed nothing
    OPERATION_MISSED = "operation_missed"
    OPERATION_REJECTED = "operation_rejected"

    # Persistence
    STATE_LOADED = "state_loaded"
    STORAGE_LOAD_FAILED = "storage_load_failed"
    STORAGE_SAVE_FAILED = "storage_save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every ledger transition creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'budget', 'storage')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Expense id, user id, budget category or storage key"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(expense_id, "Food", "12.50")
        event = AuditEventBuilder.operation_missed("delete_expense", "expense", expense_id)
    """

    @staticmethod
    def user_added(user_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_ADDED,
            entity_type="user",
            entity_id=user_id,
            description=f"User added: {name}",
            details={"name": name},
        )

    @staticmethod
    def expense_added(
        expense_id: str,
        category: str,
        amount: str,
        currency: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense added: {amount} {currency} in {category}",
            details={
                "category": category,
                "amount": amount,
                "currency": currency,
            },
        )

    @staticmethod
    def expense_updated(expense_id: str, category: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense updated: {amount} in {category}",
            details={"category": category, "amount": amount},
        )

    @staticmethod
    def expense_deleted(expense_id: str, category: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=expense_id,
            description=f"Expense deleted: {amount} in {category}",
            details={"category": category, "amount": amount},
        )

    @staticmethod
    def budget_added(category: str, limit: str, spent: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_ADDED,
            entity_type="budget",
            entity_id=category,
            description=f"Budget added for {category}: limit {limit}",
            details={"limit": limit, "spent": spent},
        )

    @staticmethod
    def budget_updated(category: str, limit: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_UPDATED,
            entity_type="budget",
            entity_id=category,
            description=f"Budget limit for {category} set to {limit}",
            details={"limit": limit},
        )

    @staticmethod
    def budget_deleted(category: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_DELETED,
            entity_type="budget",
            entity_id=category,
            description=f"Budget deleted for {category}",
        )

    @staticmethod
    def currency_changed(previous: str, current: str, relabeled: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CURRENCY_CHANGED,
            entity_type="currency",
            entity_id=current,
            description=f"Currency changed from {previous} to {current}",
            details={
                "previous": previous,
                "current": current,
                "relabeled_records": relabeled,
            },
        )

    @staticmethod
    def operation_missed(operation: str, entity_type: str, entity_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_MISSED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{operation}: no {entity_type} {entity_id!r}, nothing changed",
            details={"operation": operation},
        )

    @staticmethod
    def operation_rejected(
        operation: str,
        reason: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"{operation} rejected",
            error_message=reason,
            details={"operation": operation},
        )

    @staticmethod
    def state_loaded(expenses: int, users: int, budgets: int, currency: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_LOADED,
            entity_type="storage",
            description="Ledger state loaded",
            details={
                "expenses": expenses,
                "users": users,
                "budgets": budgets,
                "currency": currency,
            },
        )

    @staticmethod
    def storage_load_failed(
        key: str,
        error_message: str,
        dropped: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="storage",
            entity_id=key,
            description=f"Stored {key} unreadable, using default",
            details={} if dropped is None else {"dropped_records": dropped},
            error_message=error_message,
        )

    @staticmethod
    def storage_save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            description=f"Could not save {key}",
            error_message=error_message,
        )
