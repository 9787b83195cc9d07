"""
Storage Services Package

Provides the abstract interface and concrete implementations for ledger
persistence. The application uses JSON files; tests use memory.
"""

from expense_tracker.services.storage.base import (
    PREFERENCES_KEY,
    TRANSACTIONS_KEY,
    KeyValueLedgerStorage,
)
from expense_tracker.services.storage.interface import (
    CorruptSnapshotError,
    LedgerStorageInterface,
    LoadedSnapshot,
    SkippedRecord,
    StorageError,
    StorageWriteError,
)
from expense_tracker.services.storage.json_file import JsonFileStorage
from expense_tracker.services.storage.memory import InMemoryStorage

__all__ = [
    # Interfaces
    "KeyValueLedgerStorage",
    "LedgerStorageInterface",
    "LoadedSnapshot",
    "SkippedRecord",
    "PREFERENCES_KEY",
    "TRANSACTIONS_KEY",
    # Exceptions
    "CorruptSnapshotError",
    "StorageError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
