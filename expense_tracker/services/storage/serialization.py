"""
Snapshot (de)serialization.

The transactions snapshot is a JSON array of flat records:

    [{"id": "...", "type": "expense", "amount": "12.50", "category": "food",
      "date": "2024-01-05", "description": "", "status": "completed"}, ...]

Amounts are written as strings. Older snapshots with numeric amounts,
no status, no type, a "title" instead of "description", or full ISO
timestamps as dates are still read (see Transaction).
"""

import json
from typing import Sequence

from pydantic import ValidationError

from expense_tracker.models.transaction import Transaction, UserPreferences
from expense_tracker.services.storage.interface import (
    CorruptSnapshotError,
    LoadedSnapshot,
    SkippedRecord,
)


def serialize_transactions(transactions: Sequence[Transaction]) -> str:
    return json.dumps(
        [transaction.to_storage_dict() for transaction in transactions],
        ensure_ascii=False,
        indent=2,
    )


def deserialize_transactions(text: str, source: str = "transactions") -> LoadedSnapshot:
    """
    Parse a transactions snapshot.

    A snapshot that is not a JSON array is corrupt as a whole. Inside a valid
    array, records that fail validation are skipped and reported rather
    than failing the load.

    Raises:
        CorruptSnapshotError: If the text is not a JSON array
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptSnapshotError(source, f"invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise CorruptSnapshotError(source, f"expected a JSON array, got {type(data).__name__}")

    transactions = []
    skipped = []
    for index, raw in enumerate(data):
        if not isinstance(raw, dict):
            skipped.append(SkippedRecord(index=index, error="record is not an object"))
            continue
        try:
            transactions.append(Transaction.model_validate(raw))
        except ValidationError as e:
            skipped.append(SkippedRecord(
                index=index,
                error="; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ),
            ))

    return LoadedSnapshot(transactions=transactions, skipped=skipped, source=source)


def serialize_preferences(preferences: UserPreferences) -> str:
    return json.dumps(preferences.model_dump(mode="json"), indent=2)


def deserialize_preferences(text: str, source: str = "preferences") -> UserPreferences:
    """
    Parse a preferences snapshot.

    Raises:
        CorruptSnapshotError: If the text is not a valid preferences object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptSnapshotError(source, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise CorruptSnapshotError(source, f"expected a JSON object, got {type(data).__name__}")

    try:
        return UserPreferences.model_validate(data)
    except ValidationError as e:
        raise CorruptSnapshotError(source, str(e)) from e
