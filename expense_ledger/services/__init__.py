"""Services package."""

from expense_ledger.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
    StorageError,
    StorageKey,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "LedgerStorageInterface",
    "StorageError",
    "StorageKey",
    "StorageReadError",
    "StorageWriteError",
]
