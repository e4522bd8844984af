"""
Audit Logger

DESIGN DECISION: Every ledger transition is logged.
This provides:
1. Complete traceability of changes to expenses, budgets and currency
2. Debugging capability when stored data turns out to be unreadable
3. Visibility into requests that were rejected or hit nothing

The audit logger:
- Is synchronous, like the ledger itself
- Gracefully handles failures (never crashes the ledger if logging fails)
"""

import logging
from typing import Optional

import structlog

from expense_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(debug: bool = False) -> None:
    """Route stdlib logging (and therefore structlog) to stderr."""
    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if debug else logging.INFO,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit store, if one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("expense_ledger.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_operation_missed(self, operation: str, entity_type: str, entity_id: str) -> None:
        self.log(AuditEventBuilder.operation_missed(operation, entity_type, entity_id))

    def log_operation_rejected(
        self,
        operation: str,
        reason: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.operation_rejected(
            operation=operation,
            reason=reason,
            entity_type=entity_type,
            entity_id=entity_id,
        ))

    def log_storage_load_failed(
        self,
        key: str,
        error_message: str,
        dropped: Optional[int] = None,
    ) -> None:
        """Record a stored value that was replaced by its default."""
        self.log(AuditEventBuilder.storage_load_failed(key, error_message, dropped))

    def log_storage_save_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_save_failed(key, error_message))
