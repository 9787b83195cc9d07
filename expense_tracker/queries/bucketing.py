"""
Date Bucketing

Pure functions mapping a transaction's date to its month and day buckets.

DESIGN DECISION: Dates are timezone-naive calendar dates.
A transaction dated 2024-01-31 belongs to January 2024 no matter where the
program runs; nothing is ever converted through UTC.
"""

import datetime as dt
from typing import Iterable

from expense_tracker.models.transaction import Transaction


def month_key_of(date: dt.date) -> tuple[int, int]:
    """(year, month) of a calendar date."""
    return date.year, date.month


def month_key_str(year: int, month: int) -> str:
    """Zero-padded "YYYY-MM"; sorts lexicographically in chronological order."""
    return f"{year:04d}-{month:02d}"


def day_key_of(date: dt.date) -> str:
    """Canonical day identity used for grouping: the ISO date string."""
    return date.isoformat()


def is_in_month(transaction: Transaction, year: int, month: int) -> bool:
    """True iff the transaction's date falls in that calendar month."""
    return month_key_of(transaction.date) == (year, month)


def filter_by_month(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> list[Transaction]:
    """Transactions dated in the given month, original relative order kept."""
    return [t for t in transactions if is_in_month(t, year, month)]


def first_of_month(date: dt.date) -> dt.date:
    return date.replace(day=1)


def shift_month(date: dt.date, months: int) -> dt.date:
    """
    First day of the month `months` away from `date`'s month.

    The result is always the 1st, so moving from January 31st lands on
    February 1st rather than overflowing into March.
    """
    index = date.year * 12 + (date.month - 1) + months
    year, month_index = divmod(index, 12)
    return dt.date(year, month_index + 1, 1)
