"""
Activity Event Models for Expense Tracker

Every command that changes the ledger, and every recoverable problem met
while loading or saving it, produces one ActivityEvent for the structured
log. This provides:
1. Debugging information when things go wrong
2. A readable account of what the controller did and why

DESIGN DECISION: Activity events are logged, never stored.
The ledger keeps no history of its own (no versioning, no audit trail).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityEventType(str, Enum):
    """Types of events we log."""
    # Ledger commands
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"
    STATUS_TOGGLED = "status_toggled"
    LEDGER_CLEARED = "ledger_cleared"

    # Rejections
    VALIDATION_REJECTED = "validation_rejected"
    TRANSACTION_NOT_FOUND = "transaction_not_found"

    # Navigation
    MONTH_SELECTED = "month_selected"
    MORE_GROUPS_LOADED = "more_groups_loaded"

    # Preferences
    PREFERENCES_UPDATED = "preferences_updated"

    # Persistence
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_CORRUPT = "snapshot_corrupt"
    RECORD_SKIPPED = "record_skipped"
    DUPLICATE_ID_REPAIRED = "duplicate_id_repaired"
    STORAGE_WRITE_FAILED = "storage_write_failed"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ActivityEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    # Which transaction this is about, if any
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.transaction_added(transaction_id, "expense", "12.50")
        event = ActivityEventBuilder.snapshot_corrupt(path, error)
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        amount: str,
        status: str,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_ADDED,
            entity_id=transaction_id,
            description=f"Added {transaction_type} of {amount}",
            details={
                "type": transaction_type,
                "amount": amount,
                "status": status,
            },
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        changed_fields: list[str],
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_UPDATED,
            entity_id=transaction_id,
            description=f"Updated transaction ({len(changed_fields)} field(s) changed)",
            details={"changed_fields": changed_fields},
        )

    @staticmethod
    def transaction_deleted(transaction_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_DELETED,
            entity_id=transaction_id,
            description="Deleted transaction",
        )

    @staticmethod
    def status_toggled(transaction_id: str, new_status: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STATUS_TOGGLED,
            entity_id=transaction_id,
            description=f"Status changed to {new_status}",
            details={"status": new_status},
        )

    @staticmethod
    def ledger_cleared(removed_count: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LEDGER_CLEARED,
            severity=ActivitySeverity.WARNING,
            description=f"Cleared all transactions ({removed_count} removed)",
            details={"removed_count": removed_count},
        )

    @staticmethod
    def validation_rejected(
        issues: list[dict],
        transaction_id: Optional[str] = None,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.VALIDATION_REJECTED,
            severity=ActivitySeverity.WARNING,
            entity_id=transaction_id,
            description=f"Rejected transaction input with {len(issues)} issue(s)",
            details={"issues": issues},
        )

    @staticmethod
    def transaction_not_found(transaction_id: str, operation: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_NOT_FOUND,
            severity=ActivitySeverity.WARNING,
            entity_id=transaction_id,
            description=f"No transaction to {operation}",
            details={"operation": operation},
        )

    @staticmethod
    def month_selected(year: int, month: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.MONTH_SELECTED,
            severity=ActivitySeverity.DEBUG,
            description=f"Reference month set to {year:04d}-{month:02d}",
            details={"year": year, "month": month},
        )

    @staticmethod
    def more_groups_loaded(visible_group_count: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.MORE_GROUPS_LOADED,
            severity=ActivitySeverity.DEBUG,
            description=f"Revealing {visible_group_count} day-groups",
            details={"visible_group_count": visible_group_count},
        )

    @staticmethod
    def preferences_updated(changes: dict[str, str]) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PREFERENCES_UPDATED,
            description="Preferences updated",
            details=changes,
        )

    @staticmethod
    def snapshot_loaded(transaction_count: int, source: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SNAPSHOT_LOADED,
            description=f"Loaded {transaction_count} transaction(s)",
            details={"transaction_count": transaction_count, "source": source},
        )

    @staticmethod
    def snapshot_corrupt(source: str, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.SNAPSHOT_CORRUPT,
            severity=ActivitySeverity.ERROR,
            description="Stored snapshot could not be read; starting empty",
            details={"source": source},
            error_message=error_message,
        )

    @staticmethod
    def record_skipped(index: int, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.RECORD_SKIPPED,
            severity=ActivitySeverity.WARNING,
            description=f"Skipped malformed record at position {index}",
            details={"index": index},
            error_message=error_message,
        )

    @staticmethod
    def duplicate_id_repaired(old_id: str, new_id: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.DUPLICATE_ID_REPAIRED,
            severity=ActivitySeverity.WARNING,
            entity_id=new_id,
            description="Assigned a fresh id to a duplicate record",
            details={"old_id": old_id, "new_id": new_id},
        )

    @staticmethod
    def storage_write_failed(target: str, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.STORAGE_WRITE_FAILED,
            severity=ActivitySeverity.ERROR,
            description=f"Failed to persist {target}",
            details={"target": target},
            error_message=error_message,
        )
