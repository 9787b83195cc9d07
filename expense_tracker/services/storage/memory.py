"""
In-Memory Storage Implementation

Keeps snapshot text in a dict. Used by tests and by anything that wants a
throwaway ledger. Seeding it with raw text makes it easy to simulate what
an older or damaged snapshot looks like on load.
"""

from typing import Optional

from expense_tracker.services.storage.base import KeyValueLedgerStorage
from expense_tracker.services.storage.interface import StorageWriteError


class InMemoryStorage(KeyValueLedgerStorage):
    """Ledger storage that never touches the disk."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})
        self.fail_writes = False
        self.write_count = 0

    def _read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def _write(self, key: str, text: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Simulated write failure for {key}")
        self.data[key] = text
        self.write_count += 1

    def _delete(self, key: str) -> None:
        if self.fail_writes:
            raise StorageWriteError(f"Simulated delete failure for {key}")
        self.data.pop(key, None)
        self.write_count += 1

    def _keep_copy(self, key: str, text: str) -> None:
        self.data[f"{key}.corrupt"] = text
