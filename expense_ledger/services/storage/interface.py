"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through a tiny key-value interface.
This allows us to:
1. Keep the same four keys the data has always been stored under
2. Use in-memory storage for testing
3. Swap the JSON files for another store without touching ledger logic

The interface is intentionally simple: four keys, load and save.
Values are JSON-compatible (dicts, lists, strings, numbers).
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from expense_ledger.models.audit import AuditEvent


class StorageKey(str, Enum):
    """The top-level values the ledger persists, one per key."""
    EXPENSES = "expenses"
    USERS = "users"
    BUDGETS = "budgets"
    CURRENCY = "currency"


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self, key: StorageKey, default: Any) -> Any:
        """
        Load a previously saved value.

        Args:
            key: Which top-level value to read
            default: Returned when nothing usable is stored

        Returns:
            The stored JSON-compatible value, or ``default`` if the key
            is absent or its contents cannot be parsed
        """
        pass

    @abstractmethod
    def save(self, key: StorageKey, value: Any) -> None:
        """
        Save a JSON-compatible value under a key.

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data exists but could not be read."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written."""
    pass
