"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)
from expense_tracker.models.analytics import (
    CategoryBreakdownItem,
    DashboardSummary,
    DayGroup,
    HistoryPage,
    LedgerTotals,
    MonthlyTotal,
    ObligationTotals,
)
from expense_tracker.models.transaction import (
    CATEGORY_CATALOG,
    CURRENCY_SYMBOLS,
    UNKNOWN_CATEGORY_NAME,
    CategoryDefinition,
    Currency,
    Theme,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
    UserPreferences,
    categories_for,
    default_category,
    find_category,
)
from expense_tracker.models.validation import (
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Transaction models
    "CATEGORY_CATALOG",
    "CURRENCY_SYMBOLS",
    "UNKNOWN_CATEGORY_NAME",
    "CategoryDefinition",
    "Currency",
    "Theme",
    "Transaction",
    "TransactionDraft",
    "TransactionStatus",
    "TransactionType",
    "UserPreferences",
    "categories_for",
    "default_category",
    "find_category",
    # Derived views
    "CategoryBreakdownItem",
    "DashboardSummary",
    "DayGroup",
    "HistoryPage",
    "LedgerTotals",
    "MonthlyTotal",
    "ObligationTotals",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Activity events
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
