"""Input validation package."""

from expense_tracker.validation.validator import (
    InvalidTransactionError,
    TransactionValidator,
)

__all__ = [
    "InvalidTransactionError",
    "TransactionValidator",
]
