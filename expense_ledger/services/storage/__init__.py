"""
Storage Services Package

Provides the abstract storage interface and concrete implementations.
The JSON file store is the default backend; the in-memory store serves tests
and throwaway sessions.
"""

from expense_ledger.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
    StorageError,
    StorageKey,
    StorageReadError,
    StorageWriteError,
)
from expense_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
)
from expense_ledger.services.storage.json_file import JsonFileLedgerStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    "StorageKey",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
]
