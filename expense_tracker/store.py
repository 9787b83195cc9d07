"""
Transaction Store

The in-memory, ordered collection of transactions. It is the single source
of truth for every derived view.

DESIGN DECISION: The store never hands out its internal list.
Readers get an immutable snapshot (a tuple of frozen Transaction models),
so a view can never change the data another view is computed from.

Ordering: newest-created first. `add` inserts at the head, `update` keeps
the record in place, `remove` closes the gap.
"""

from typing import Iterable, Optional

from expense_tracker.models.transaction import Transaction


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class TransactionNotFoundError(LedgerError):
    """No transaction with the requested id exists. Nothing was changed."""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction not found: {transaction_id}")


class DuplicateTransactionError(LedgerError):
    """A transaction with this id already exists."""

    def __init__(self, transaction_id: str):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction id already in use: {transaction_id}")


class TransactionStore:
    """
    Ordered mapping of transaction id -> Transaction.

    All operations are synchronous and run to completion. Persisting the
    result is the caller's job (see LedgerController).
    """

    def __init__(self, transactions: Optional[Iterable[Transaction]] = None):
        self._transactions: list[Transaction] = []
        for transaction in transactions or ():
            if self._index_of(transaction.id) is not None:
                raise DuplicateTransactionError(transaction.id)
            self._transactions.append(transaction)

    def __len__(self) -> int:
        return len(self._transactions)

    def __contains__(self, transaction_id: object) -> bool:
        return self._index_of(transaction_id) is not None

    def _index_of(self, transaction_id: object) -> Optional[int]:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                return index
        return None

    def _require_index(self, transaction_id: str) -> int:
        index = self._index_of(transaction_id)
        if index is None:
            raise TransactionNotFoundError(transaction_id)
        return index

    def snapshot(self) -> tuple[Transaction, ...]:
        """All transactions in store order."""
        return tuple(self._transactions)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        """Retrieve a transaction by id, None if absent."""
        index = self._index_of(transaction_id)
        return None if index is None else self._transactions[index]

    def add(self, transaction: Transaction) -> Transaction:
        """
        Insert a new transaction at the front.

        Raises:
            DuplicateTransactionError: If the id is already present
        """
        if self._index_of(transaction.id) is not None:
            raise DuplicateTransactionError(transaction.id)
        self._transactions.insert(0, transaction)
        return transaction

    def update(self, transaction: Transaction) -> Transaction:
        """
        Replace the transaction with the same id, keeping its position.

        Returns:
            The transaction that was replaced

        Raises:
            TransactionNotFoundError: If no transaction has that id
        """
        index = self._require_index(transaction.id)
        previous = self._transactions[index]
        self._transactions[index] = transaction
        return previous

    def remove(self, transaction_id: str) -> Transaction:
        """
        Remove a transaction by id.

        Returns:
            The removed transaction

        Raises:
            TransactionNotFoundError: If no transaction has that id
        """
        index = self._require_index(transaction_id)
        return self._transactions.pop(index)

    def toggle_status(self, transaction_id: str) -> Transaction:
        """
        Flip pending <-> completed, leaving every other field untouched.

        Returns:
            The updated transaction

        Raises:
            TransactionNotFoundError: If no transaction has that id
        """
        index = self._require_index(transaction_id)
        toggled = self._transactions[index].with_toggled_status()
        self._transactions[index] = toggled
        return toggled

    def clear(self) -> int:
        """Remove every transaction. Returns how many were removed."""
        removed = len(self._transactions)
        self._transactions = []
        return removed
