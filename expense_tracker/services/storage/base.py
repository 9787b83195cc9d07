"""
Key-value backed ledger storage.

Both concrete backends store two opaque text blobs under fixed keys. This
base class owns the snapshot format; subclasses only move text around.
"""

from abc import abstractmethod
from typing import Optional, Sequence

from expense_tracker.models.transaction import Transaction, UserPreferences
from expense_tracker.services.storage.interface import (
    CorruptSnapshotError,
    LedgerStorageInterface,
    LoadedSnapshot,
)
from expense_tracker.services.storage.serialization import (
    deserialize_preferences,
    deserialize_transactions,
    serialize_preferences,
    serialize_transactions,
)

TRANSACTIONS_KEY = "transactions"
PREFERENCES_KEY = "preferences"


class KeyValueLedgerStorage(LedgerStorageInterface):
    """Ledger storage on top of read/write/delete of text by key."""

    @abstractmethod
    def _read(self, key: str) -> Optional[str]:
        """Return the stored text, or None if the key was never written.

        Raises:
            CorruptSnapshotError: If the stored bytes are not valid text
        """
        pass

    @abstractmethod
    def _write(self, key: str, text: str) -> None:
        pass

    @abstractmethod
    def _delete(self, key: str) -> None:
        pass

    def _describe(self, key: str) -> str:
        """Human-readable location of a key, used in error messages."""
        return key

    def _on_corrupt(self, key: str) -> None:
        """Hook called before a CorruptSnapshotError propagates."""
        pass

    def _keep_copy(self, key: str, text: str) -> None:
        """
        Hook called when a snapshot loaded with skipped records.

        The next save writes only the records that could be read, so the
        original text has to be kept somewhere for the rest to be recovered.
        """
        pass

    def load_transactions(self) -> LoadedSnapshot:
        source = self._describe(TRANSACTIONS_KEY)
        try:
            text = self._read(TRANSACTIONS_KEY)
            if text is None or not text.strip():
                return LoadedSnapshot(source=source)
            snapshot = deserialize_transactions(text, source=source)
        except CorruptSnapshotError:
            self._on_corrupt(TRANSACTIONS_KEY)
            raise
        if snapshot.skipped:
            self._keep_copy(TRANSACTIONS_KEY, text)
        return snapshot

    def save_transactions(self, transactions: Sequence[Transaction]) -> None:
        self._write(TRANSACTIONS_KEY, serialize_transactions(transactions))

    def clear_transactions(self) -> None:
        self._delete(TRANSACTIONS_KEY)

    def load_preferences(self) -> Optional[UserPreferences]:
        try:
            text = self._read(PREFERENCES_KEY)
            if text is None or not text.strip():
                return None
            return deserialize_preferences(text, source=self._describe(PREFERENCES_KEY))
        except CorruptSnapshotError:
            self._on_corrupt(PREFERENCES_KEY)
            raise

    def save_preferences(self, preferences: UserPreferences) -> None:
        self._write(PREFERENCES_KEY, serialize_preferences(preferences))
