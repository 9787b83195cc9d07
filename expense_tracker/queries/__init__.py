"""Pure, deterministic views over a transaction snapshot."""

from expense_tracker.queries.aggregation import (
    category_breakdown,
    dashboard_summary,
    obligation_totals,
    percentage_of,
    recent_transactions,
    sum_amounts,
    totals,
)
from expense_tracker.queries.bucketing import (
    day_key_of,
    filter_by_month,
    first_of_month,
    is_in_month,
    month_key_of,
    month_key_str,
    shift_month,
)
from expense_tracker.queries.pagination import (
    DEFAULT_PAGE_SIZE,
    GroupPaginator,
    group_by_day,
    visible_window,
)
from expense_tracker.queries.rollup import monthly_rollup
from expense_tracker.queries.search import (
    TypeFilter,
    matches_search,
    search_transactions,
)

__all__ = [
    # Bucketing
    "day_key_of",
    "filter_by_month",
    "first_of_month",
    "is_in_month",
    "month_key_of",
    "month_key_str",
    "shift_month",
    # Aggregation
    "category_breakdown",
    "dashboard_summary",
    "obligation_totals",
    "percentage_of",
    "recent_transactions",
    "sum_amounts",
    "totals",
    # Pagination
    "DEFAULT_PAGE_SIZE",
    "GroupPaginator",
    "group_by_day",
    "visible_window",
    # Rollup
    "monthly_rollup",
    # Search
    "TypeFilter",
    "matches_search",
    "search_transactions",
]
