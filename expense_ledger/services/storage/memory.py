"""
In-Memory Storage Implementation

Used by tests and by callers that do not want anything written to disk.
Values go through a JSON round-trip on the way in and out, so what comes
back has exactly the shape a file-backed store would return.
"""

import json
from typing import Any, Optional

from expense_ledger.models.audit import AuditEvent
from expense_ledger.services.storage.interface import (
    AuditStorageInterface,
    LedgerStorageInterface,
    StorageKey,
    StorageWriteError,
)


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Dict-backed ledger storage holding serialized JSON text per key."""

    def __init__(self, initial: Optional[dict[StorageKey, Any]] = None):
        self._data: dict[StorageKey, str] = {}
        for key, value in (initial or {}).items():
            self.save(StorageKey(key), value)

    def load(self, key: StorageKey, default: Any) -> Any:
        raw = self._data.get(StorageKey(key))
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return default

    def save(self, key: StorageKey, value: Any) -> None:
        try:
            self._data[StorageKey(key)] = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StorageWriteError(f"Value for {key} is not JSON serializable: {e}") from e

    def put_raw(self, key: StorageKey, raw: str) -> None:
        """Store text as-is, bypassing serialization."""
        self._data[StorageKey(key)] = raw

    def raw(self, key: StorageKey) -> Optional[str]:
        return self._data.get(StorageKey(key))

    def __contains__(self, key: object) -> bool:
        return key in self._data


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only in-memory audit trail."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
