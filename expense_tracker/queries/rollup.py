"""
Monthly Rollup

Totals per calendar month across the whole history, newest month first.
Unlike every other view this one ignores the reference month; picking an
entry is how the user jumps to a month (see MonthlyTotal.reference_date).
"""

from decimal import Decimal
from typing import Iterable, Optional

from expense_tracker.models.analytics import MonthlyTotal
from expense_tracker.models.transaction import Transaction, TransactionType
from expense_tracker.queries.bucketing import month_key_of, month_key_str


def monthly_rollup(
    transactions: Iterable[Transaction],
    transaction_type: Optional[TransactionType] = None,
) -> list[MonthlyTotal]:
    """
    Sum amounts per (year, month).

    Status is ignored: pending and completed records both count. By default
    every record counts; pass a transaction_type to roll up just income or
    just expense.
    """
    amounts: dict[tuple[int, int], Decimal] = {}
    counts: dict[tuple[int, int], int] = {}

    for transaction in transactions:
        if transaction_type is not None and transaction.type is not transaction_type:
            continue
        key = month_key_of(transaction.date)
        amounts[key] = amounts.get(key, Decimal("0")) + transaction.amount
        counts[key] = counts.get(key, 0) + 1

    rollup = [
        MonthlyTotal(
            month_key=month_key_str(year, month),
            year=year,
            month=month,
            amount=amounts[(year, month)],
            count=counts[(year, month)],
        )
        for year, month in amounts
    ]
    # "YYYY-MM" sorts lexicographically in chronological order
    rollup.sort(key=lambda entry: entry.month_key, reverse=True)
    return rollup
