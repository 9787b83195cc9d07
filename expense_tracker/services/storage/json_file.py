"""
JSON File Storage Implementation

Persists the ledger as two JSON files in a data directory. Every write
goes to a temporary file in the same directory which then replaces the
target, so a crash mid-write leaves the previous snapshot intact.

Writes are retried with exponential backoff on OSError; once the attempts
are exhausted a StorageWriteError is raised and the caller decides what to
do with its in-memory state.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import structlog
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from expense_tracker.config.settings import StorageSettings
from expense_tracker.services.storage.base import (
    PREFERENCES_KEY,
    TRANSACTIONS_KEY,
    KeyValueLedgerStorage,
)
from expense_tracker.services.storage.interface import (
    CorruptSnapshotError,
    StorageError,
    StorageWriteError,
)

logger = structlog.get_logger(__name__)

CORRUPT_SUFFIX = ".corrupt"


def atomic_write_text(path: Path, content: str) -> None:
    """
    Write `content` to `path` via a temporary sibling and os.replace.

    The temporary file is removed if anything fails before the rename.
    """
    fd, tmp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class JsonFileStorage(KeyValueLedgerStorage):
    """Ledger storage backed by JSON files on the local disk."""

    def __init__(
        self,
        data_dir: Path,
        transactions_filename: str = "transactions.json",
        preferences_filename: str = "preferences.json",
        write_attempts: int = 3,
        retry_wait_multiplier: float = 0.1,
    ):
        self.data_dir = Path(data_dir)
        self._paths = {
            TRANSACTIONS_KEY: self.data_dir / transactions_filename,
            PREFERENCES_KEY: self.data_dir / preferences_filename,
        }
        self._write_attempts = write_attempts
        self._retry_wait_multiplier = retry_wait_multiplier

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> "JsonFileStorage":
        return cls(
            data_dir=settings.data_dir,
            transactions_filename=settings.transactions_filename,
            preferences_filename=settings.preferences_filename,
            write_attempts=settings.write_attempts,
        )

    def path_for(self, key: str) -> Path:
        return self._paths[key]

    def _describe(self, key: str) -> str:
        return str(self.path_for(key))

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._write_attempts),
            wait=wait_exponential(multiplier=self._retry_wait_multiplier, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    def _read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise CorruptSnapshotError(str(path), f"not valid UTF-8: {e}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def _write(self, key: str, text: str) -> None:
        path = self.path_for(key)
        try:
            for attempt in self._retrying():
                with attempt:
                    path.parent.mkdir(parents=True, exist_ok=True)
                    atomic_write_text(path, text)
        except OSError as e:
            raise StorageWriteError(
                f"Failed to write {path} after {self._write_attempts} attempt(s): {e}"
            ) from e

    def _delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            for attempt in self._retrying():
                with attempt:
                    path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Failed to remove {path}: {e}") from e

    def _on_corrupt(self, key: str) -> None:
        """Move the unreadable file aside so the next save cannot destroy it."""
        path = self.path_for(key)
        corrupt_path = path.with_name(path.name + CORRUPT_SUFFIX)
        try:
            os.replace(path, corrupt_path)
        except OSError as e:
            logger.error(
                "corrupt_snapshot_not_preserved",
                path=str(path),
                error=str(e),
            )
            return
        logger.warning(
            "corrupt_snapshot_preserved",
            path=str(path),
            preserved_as=str(corrupt_path),
        )

    def _keep_copy(self, key: str, text: str) -> None:
        """Copy the snapshot to `<name>.corrupt`; the original stays in place."""
        path = self.path_for(key)
        corrupt_path = path.with_name(path.name + CORRUPT_SUFFIX)
        try:
            shutil.copy2(path, corrupt_path)
        except OSError as e:
            logger.error(
                "snapshot_copy_not_kept",
                path=str(path),
                error=str(e),
            )
            return
        logger.warning(
            "snapshot_copy_kept",
            path=str(path),
            copy=str(corrupt_path),
        )
