"""
JSON File Storage Implementation

DESIGN DECISION: Each top-level key is stored in its own ``<key>.json`` file
inside one data directory, mirroring the key-value layout the ledger has
always been persisted in. This means:
1. Users can inspect or back up their data with any text editor
2. A corrupt file only loses one key, never the whole ledger
3. No database setup required

TRADEOFFS:
- Single writer only (no locking)
- Whole value rewritten on every save (fine at personal-ledger scale)

Writes are atomic: data goes to a temporary file in the same directory
which then replaces the target via ``os.replace``.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_ledger.config import get_settings
from expense_ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageKey,
    StorageWriteError,
)


logger = structlog.get_logger(__name__)


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    Ledger storage backed by one JSON file per key.

    Transient write failures (``OSError``) are retried with exponential
    backoff before a ``StorageWriteError`` is raised.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        write_attempts: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._data_dir = Path(data_dir if data_dir is not None else settings.data_dir)
        self._write_attempts = write_attempts or settings.write_attempts

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: StorageKey) -> Path:
        return self._data_dir / f"{StorageKey(key).value}.json"

    def load(self, key: StorageKey, default: Any) -> Any:
        path = self.path_for(key)
        if not path.exists():
            return default

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("storage_read_failed", key=str(path.name), error=str(e))
            return default

        if not text.strip():
            return default

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning("storage_corrupt_json", key=str(path.name), error=str(e))
            return default

    def save(self, key: StorageKey, value: Any) -> None:
        try:
            content = json.dumps(value, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise StorageWriteError(f"Value for {key} is not JSON serializable: {e}") from e

        path = self.path_for(key)
        retrying = Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=0.05, max=1),
            retry=retry_if_exception_type(OSError),
        )
        try:
            for attempt in retrying:
                with attempt:
                    self._atomic_write(path, content)
        except RetryError as e:
            error = e.last_attempt.exception()
            raise StorageWriteError(f"Could not write {path}: {error}") from error

    def _atomic_write(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=path.parent,
                prefix=f"{path.name}-",
                suffix=".tmp",
                delete=False,
            ) as tf:
                temp_name = tf.name
                tf.write(content)
                tf.flush()
                os.fsync(tf.fileno())
            os.replace(temp_name, path)
        except OSError:
            if temp_name and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise
