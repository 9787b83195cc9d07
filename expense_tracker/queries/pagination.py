"""
Day-Grouped Pagination

History is shown one calendar day per group, newest day first, and revealed
a page of day-groups at a time.

The only state is the cursor: how many day-groups are visible. It starts at
one page, grows by one page per `load_more`, and goes back to one page when
the reference month changes. Adding, editing or deleting transactions never
touches it.
"""

from collections import OrderedDict
from typing import Iterable, Sequence

from expense_tracker.models.analytics import DayGroup, HistoryPage
from expense_tracker.models.transaction import Transaction
from expense_tracker.queries.bucketing import day_key_of

DEFAULT_PAGE_SIZE = 7


def group_by_day(transactions: Iterable[Transaction]) -> list[DayGroup]:
    """
    Group transactions by calendar date.

    Groups are sorted by day, most recent first. Within a group the
    transactions keep their store order.
    """
    buckets: "OrderedDict[str, list[Transaction]]" = OrderedDict()
    for transaction in transactions:
        buckets.setdefault(day_key_of(transaction.date), []).append(transaction)

    groups = [
        DayGroup(day_key=key, date=items[0].date, transactions=tuple(items))
        for key, items in buckets.items()
    ]
    groups.sort(key=lambda group: group.day_key, reverse=True)
    return groups


def visible_window(groups: Sequence[DayGroup], visible_count: int) -> list[DayGroup]:
    """The first `visible_count` groups (slicing past the end is harmless)."""
    return list(groups[:max(visible_count, 0)])


class GroupPaginator:
    """
    Cursor over day-groups for the currently selected month.

    States are 1, 2, 3, ... pages (7, 14, 21, ... groups with the default
    page size). There is no upper bound: once every group is visible,
    further `load_more` calls still advance the cursor but reveal nothing.
    """

    def __init__(self, page_size: int = DEFAULT_PAGE_SIZE):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self._page_size = page_size
        self._visible_count = page_size

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def visible_count(self) -> int:
        return self._visible_count

    def load_more(self) -> int:
        """Reveal one more page. Returns the new cursor."""
        self._visible_count += self._page_size
        return self._visible_count

    def reset(self) -> int:
        """Back to one page (called when the reference month changes)."""
        self._visible_count = self._page_size
        return self._visible_count

    def window(self, groups: Sequence[DayGroup]) -> list[DayGroup]:
        return visible_window(groups, self._visible_count)

    def page(self, transactions: Iterable[Transaction], year: int, month: int) -> HistoryPage:
        """
        Build the visible history for one month.

        `transactions` must already be filtered to that month.
        """
        groups = group_by_day(transactions)
        return HistoryPage(
            year=year,
            month=month,
            groups=tuple(self.window(groups)),
            total_groups=len(groups),
            visible_group_count=self._visible_count,
        )
