"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep snapshots in local JSON files for the real application
2. Use in-memory storage for testing
3. Keep the ledger logic decoupled from where bytes end up

Semantics are those of a small synchronous key-value store: each key holds
a full snapshot that is overwritten as a whole, never appended to.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from expense_tracker.models.transaction import Transaction, UserPreferences


class SkippedRecord(BaseModel):
    """A record in an otherwise readable snapshot that could not be parsed."""

    index: int = Field(..., ge=0)
    error: str


class LoadedSnapshot(BaseModel):
    """Result of reading the transactions snapshot."""

    transactions: list[Transaction] = Field(default_factory=list)
    skipped: list[SkippedRecord] = Field(default_factory=list)
    source: str = ""


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger persistence.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load_transactions(self) -> LoadedSnapshot:
        """
        Read the transactions snapshot.

        Returns:
            The parsed snapshot; empty if nothing was ever saved

        Raises:
            CorruptSnapshotError: If the stored data cannot be parsed at all
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def save_transactions(self, transactions: Sequence[Transaction]) -> None:
        """
        Overwrite the transactions snapshot.

        Raises:
            StorageWriteError: If the snapshot could not be written
        """
        pass

    @abstractmethod
    def clear_transactions(self) -> None:
        """
        Remove the transactions snapshot entirely.

        Raises:
            StorageWriteError: If the snapshot could not be removed
        """
        pass

    @abstractmethod
    def load_preferences(self) -> Optional[UserPreferences]:
        """
        Read the preferences snapshot.

        Returns:
            The preferences, or None if nothing was ever saved

        Raises:
            CorruptSnapshotError: If the stored data cannot be parsed
        """
        pass

    @abstractmethod
    def save_preferences(self, preferences: UserPreferences) -> None:
        """
        Overwrite the preferences snapshot.

        Raises:
            StorageWriteError: If the snapshot could not be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptSnapshotError(StorageError):
    """Stored data exists but cannot be parsed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Corrupt snapshot in {source}: {reason}")


class StorageWriteError(StorageError):
    """A snapshot could not be written (after retries)."""
    pass
