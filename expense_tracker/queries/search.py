"""History search and type filter."""

from enum import Enum
from typing import Iterable, Union

from expense_tracker.models.transaction import Transaction, TransactionType


class TypeFilter(str, Enum):
    ALL = "all"
    INCOME = "income"
    EXPENSE = "expense"


def amount_text(transaction: Transaction) -> str:
    """The amount as a plain number string: 1000, 12.5 (no trailing zeros)."""
    normalized = transaction.amount.normalize()
    return format(normalized, "f")


def matches_search(transaction: Transaction, term: str) -> bool:
    """
    Case-insensitive substring match on the description, or a plain
    substring match on the amount's text. An empty term matches everything.
    """
    if not term:
        return True
    term = term.strip().lower()
    return term in transaction.description.lower() or term in amount_text(transaction)


def search_transactions(
    transactions: Iterable[Transaction],
    term: str = "",
    type_filter: Union[TypeFilter, str] = TypeFilter.ALL,
) -> list[Transaction]:
    """Filter by search term and type, keeping the original order."""
    type_filter = TypeFilter(type_filter)
    selected = []
    for transaction in transactions:
        if type_filter is not TypeFilter.ALL and transaction.type is not TransactionType(type_filter.value):
            continue
        if not matches_search(transaction, term):
            continue
        selected.append(transaction)
    return selected
