"""Tests for date bucketing, pagination, monthly rollup and search."""

import datetime as dt
from decimal import Decimal

import pytest

from expense_tracker.models.transaction import TransactionType
from expense_tracker.queries import (
    DEFAULT_PAGE_SIZE,
    GroupPaginator,
    TypeFilter,
    day_key_of,
    filter_by_month,
    first_of_month,
    group_by_day,
    is_in_month,
    matches_search,
    month_key_of,
    month_key_str,
    monthly_rollup,
    search_transactions,
    shift_month,
    visible_window,
)


def days_in_january(make_transaction, count):
    """One transaction per day, January 1st onwards."""
    return [make_transaction(date=dt.date(2024, 1, day)) for day in range(1, count + 1)]


class TestBucketing:
    """Tests for month and day keys."""

    def test_month_key(self):
        """Test (year, month) extraction."""
        assert month_key_of(dt.date(2024, 12, 31)) == (2024, 12)

    def test_month_key_str_is_zero_padded(self):
        """Test "YYYY-MM" formatting."""
        assert month_key_str(2024, 3) == "2024-03"

    def test_day_key_is_iso(self):
        """Test day identity."""
        assert day_key_of(dt.date(2024, 1, 5)) == "2024-01-05"

    def test_is_in_month_boundaries(self, make_transaction):
        """Test the first and last day of a month."""
        assert is_in_month(make_transaction(date="2024-01-31"), 2024, 1)
        assert is_in_month(make_transaction(date="2024-01-01"), 2024, 1)
        assert not is_in_month(make_transaction(date="2024-02-01"), 2024, 1)
        assert not is_in_month(make_transaction(date="2023-01-15"), 2024, 1)

    def test_filter_keeps_order(self, make_transaction):
        """Test that month filtering preserves relative order."""
        a = make_transaction(date="2024-01-20")
        b = make_transaction(date="2024-02-01")
        c = make_transaction(date="2024-01-02")
        assert filter_by_month([a, b, c], 2024, 1) == [a, c]

    def test_first_of_month(self):
        """Test month normalisation."""
        assert first_of_month(dt.date(2024, 2, 29)) == dt.date(2024, 2, 1)

    @pytest.mark.parametrize(
        "start, months, expected",
        [
            (dt.date(2024, 1, 31), 1, dt.date(2024, 2, 1)),
            (dt.date(2024, 1, 15), -1, dt.date(2023, 12, 1)),
            (dt.date(2024, 12, 1), 1, dt.date(2025, 1, 1)),
            (dt.date(2024, 3, 31), -13, dt.date(2023, 2, 1)),
            (dt.date(2024, 5, 10), 0, dt.date(2024, 5, 1)),
        ],
    )
    def test_shift_month(self, start, months, expected):
        """Test month arithmetic never overflows days."""
        assert shift_month(start, months) == expected


class TestGroupByDay:
    """Tests for day grouping."""

    def test_groups_newest_day_first(self, make_transaction):
        """Test that groups are sorted by day, descending."""
        transactions = [
            make_transaction(date="2024-01-03"),
            make_transaction(date="2024-01-10"),
            make_transaction(date="2024-01-07"),
        ]
        groups = group_by_day(transactions)
        assert [g.day_key for g in groups] == ["2024-01-10", "2024-01-07", "2024-01-03"]

    def test_store_order_within_day(self, make_transaction):
        """Test that items in a day keep their store order."""
        a = make_transaction(id="a", date="2024-01-05")
        b = make_transaction(id="b", date="2024-01-06")
        c = make_transaction(id="c", date="2024-01-05")
        groups = group_by_day([a, b, c])
        assert [t.id for t in groups[1].transactions] == ["a", "c"]

    def test_empty(self):
        """Test grouping nothing."""
        assert group_by_day([]) == []

    def test_visible_window_is_prefix(self, make_transaction):
        """Test the window over groups."""
        groups = group_by_day(days_in_january(make_transaction, 10))
        assert visible_window(groups, 3) == groups[:3]
        assert visible_window(groups, 50) == groups


class TestGroupPaginator:
    """Tests for the load-more cursor."""

    def test_starts_at_one_page(self):
        """Test the initial cursor."""
        assert GroupPaginator().visible_count == DEFAULT_PAGE_SIZE == 7

    def test_page_size_must_be_positive(self):
        """Test that a zero page size is refused."""
        with pytest.raises(ValueError):
            GroupPaginator(page_size=0)

    @pytest.mark.parametrize("loads", [0, 1, 2, 3, 5])
    def test_window_length_after_loads(self, make_transaction, loads):
        """Test visible groups == min(7 + 7k, total groups)."""
        transactions = days_in_january(make_transaction, 20)
        paginator = GroupPaginator()
        for _ in range(loads):
            paginator.load_more()
        page = paginator.page(transactions, 2024, 1)
        assert len(page.groups) == min(7 + 7 * loads, 20)
        assert page.total_groups == 20

    def test_cursor_keeps_growing_past_end(self, make_transaction):
        """Test load_more past the last group is harmless."""
        transactions = days_in_january(make_transaction, 3)
        paginator = GroupPaginator()
        paginator.load_more()
        paginator.load_more()
        assert paginator.visible_count == 21
        page = paginator.page(transactions, 2024, 1)
        assert len(page.groups) == 3
        assert not page.has_more

    def test_reset(self):
        """Test going back to one page."""
        paginator = GroupPaginator()
        paginator.load_more()
        assert paginator.reset() == 7

    def test_has_more(self, make_transaction):
        """Test has_more while groups remain hidden."""
        page = GroupPaginator().page(days_in_january(make_transaction, 8), 2024, 1)
        assert page.has_more
        assert page.groups[0].day_key == "2024-01-08"


class TestMonthlyRollup:
    """Tests for totals per month."""

    def test_sums_per_month_newest_first(self, make_transaction):
        """Test grouping and ordering."""
        transactions = [
            make_transaction(amount="10", date="2023-12-31"),
            make_transaction(amount="5", date="2024-02-01"),
            make_transaction(amount="7", date="2023-12-01"),
            make_transaction(amount="1", date="2024-01-15"),
        ]
        rollup = monthly_rollup(transactions)
        assert [e.month_key for e in rollup] == ["2024-02", "2024-01", "2023-12"]
        assert rollup[2].amount == Decimal("17")
        assert rollup[2].count == 2

    def test_status_agnostic(self, make_transaction):
        """Test that pending and completed both count."""
        transactions = [
            make_transaction(amount="300", status="completed"),
            make_transaction(amount="200", status="pending"),
        ]
        assert monthly_rollup(transactions)[0].amount == Decimal("500")

    def test_type_filter(self, make_transaction):
        """Test rolling up only expenses."""
        transactions = [
            make_transaction(type="income", amount="1000"),
            make_transaction(amount="300"),
        ]
        assert monthly_rollup(transactions)[0].amount == Decimal("1300")
        assert monthly_rollup(transactions, TransactionType.EXPENSE)[0].amount == Decimal("300")

    def test_keys_are_strictly_descending(self, make_transaction):
        """Test that larger keys always come first."""
        transactions = [
            make_transaction(date=dt.date(year, month, 1))
            for year in (2022, 2023, 2024)
            for month in (1, 6, 11)
        ]
        keys = [e.month_key for e in monthly_rollup(transactions)]
        assert keys == sorted(keys, reverse=True)
        assert len(keys) == len(set(keys))

    def test_empty(self):
        """Test rolling up nothing."""
        assert monthly_rollup([]) == []


class TestSearch:
    """Tests for history search and type filter."""

    def test_description_is_case_insensitive(self, make_transaction):
        """Test description matching."""
        transaction = make_transaction(description="Grocery Run")
        assert matches_search(transaction, "grocery")
        assert matches_search(transaction, "RUN")
        assert not matches_search(transaction, "rent")

    def test_amount_text_match(self, make_transaction):
        """Test matching on the amount's digits."""
        transaction = make_transaction(amount="1250.00")
        assert matches_search(transaction, "125")
        assert not matches_search(transaction, "999")

    def test_empty_term_matches_all(self, make_transaction):
        """Test that no search term filters nothing."""
        assert matches_search(make_transaction(), "")
        assert matches_search(make_transaction(), "   ")

    def test_type_filter(self, make_transaction):
        """Test filtering by type, keeping order."""
        income = make_transaction(type="income")
        expense = make_transaction()
        transactions = [expense, income]
        assert search_transactions(transactions, type_filter=TypeFilter.INCOME) == [income]
        assert search_transactions(transactions, type_filter="expense") == [expense]
        assert search_transactions(transactions) == transactions
