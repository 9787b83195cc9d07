"""
Activity Logger

DESIGN DECISION: Every state change in the ledger is logged.
This provides:
1. Traceability of what happened to the user's money records
2. Debugging capability when a snapshot goes wrong
3. A short in-process history the UI can show

The activity logger:
- Is synchronous, like every ledger operation
- Gracefully handles failures (never crashes the app if logging fails)
- Only writes locally; nothing leaves the machine
"""

import logging
from collections import deque
from typing import Optional

import structlog

from expense_tracker.config.settings import LoggingSettings
from expense_tracker.models.activity import ActivityEvent, ActivityEventBuilder, ActivitySeverity


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Configure structlog on top of the standard library logger."""
    settings = settings or LoggingSettings()

    logging.basicConfig(format="%(message)s", level=settings.level)
    logging.getLogger().setLevel(settings.level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )

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
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ActivityLogger:
    """
    Central activity logging service.

    Logs events to the structured local log and keeps the most recent ones
    in memory.
    """

    def __init__(self, history_limit: int = 100):
        """
        Initialize activity logger.

        Args:
            history_limit: How many recent events to keep in memory.
                           0 disables the history.
        """
        self._logger = structlog.get_logger("expense_tracker.activity")
        self._history: deque[ActivityEvent] = deque(maxlen=history_limit)

    @property
    def recent_events(self) -> list[ActivityEvent]:
        """Recent events, oldest first."""
        return list(self._history)

    def log(self, event: ActivityEvent) -> bool:
        """
        Log an activity event.

        Returns False if the log call itself failed. Never raises.
        """
        if self._history.maxlen:
            self._history.append(event)

        try:
            log_dict = event.to_log_dict()
            if event.severity is ActivitySeverity.ERROR:
                self._logger.error("activity_event", **log_dict)
            elif event.severity is ActivitySeverity.WARNING:
                self._logger.warning("activity_event", **log_dict)
            elif event.severity is ActivitySeverity.DEBUG:
                self._logger.debug("activity_event", **log_dict)
            else:
                self._logger.info("activity_event", **log_dict)
        except Exception:
            # Logging failures never propagate
            return False
        return True

    def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: str,
        status: str,
    ) -> None:
        """Log a new transaction."""
        self.log(ActivityEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            status=status,
        ))

    def log_transaction_updated(self, transaction_id: str, changed_fields: list[str]) -> None:
        self.log(ActivityEventBuilder.transaction_updated(transaction_id, changed_fields))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(ActivityEventBuilder.transaction_deleted(transaction_id))

    def log_status_toggled(self, transaction_id: str, new_status: str) -> None:
        self.log(ActivityEventBuilder.status_toggled(transaction_id, new_status))

    def log_ledger_cleared(self, removed_count: int) -> None:
        self.log(ActivityEventBuilder.ledger_cleared(removed_count))

    def log_validation_rejected(
        self,
        issues: list[dict],
        transaction_id: Optional[str] = None,
    ) -> None:
        """Log rejected input together with the issues found."""
        self.log(ActivityEventBuilder.validation_rejected(issues, transaction_id))

    def log_transaction_not_found(self, transaction_id: str, operation: str) -> None:
        self.log(ActivityEventBuilder.transaction_not_found(transaction_id, operation))

    def log_month_selected(self, year: int, month: int) -> None:
        self.log(ActivityEventBuilder.month_selected(year, month))

    def log_more_groups_loaded(self, visible_group_count: int) -> None:
        self.log(ActivityEventBuilder.more_groups_loaded(visible_group_count))

    def log_preferences_updated(self, changes: dict[str, str]) -> None:
        self.log(ActivityEventBuilder.preferences_updated(changes))

    def log_snapshot_loaded(self, transaction_count: int, source: str) -> None:
        self.log(ActivityEventBuilder.snapshot_loaded(transaction_count, source))

    def log_snapshot_corrupt(self, source: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.snapshot_corrupt(source, error_message))

    def log_record_skipped(self, index: int, error_message: str) -> None:
        self.log(ActivityEventBuilder.record_skipped(index, error_message))

    def log_duplicate_id_repaired(self, old_id: str, new_id: str) -> None:
        self.log(ActivityEventBuilder.duplicate_id_repaired(old_id, new_id))

    def log_storage_write_failed(self, target: str, error_message: str) -> None:
        """Log a snapshot write that failed after retries."""
        self.log(ActivityEventBuilder.storage_write_failed(target, error_message))
