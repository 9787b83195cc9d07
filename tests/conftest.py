"""Shared fixtures for Expense Tracker tests."""

import datetime as dt
import itertools
from decimal import Decimal

import pytest

from expense_tracker.activity import ActivityLogger
from expense_tracker.config import LedgerSettings
from expense_tracker.models.transaction import Transaction
from expense_tracker.orchestrator import LedgerController
from expense_tracker.services.storage import InMemoryStorage


@pytest.fixture
def reference_date() -> dt.date:
    """A fixed 'today' in the middle of January 2024."""
    return dt.date(2024, 1, 15)


@pytest.fixture
def make_transaction():
    """Factory for valid transactions with sequential ids."""
    counter = itertools.count(1)

    def _make(
        amount="10",
        type="expense",
        category=None,
        date="2024-01-05",
        status="completed",
        description="",
        id=None,
    ) -> Transaction:
        if category is None:
            category = "salary" if type == "income" else "food"
        return Transaction(
            id=id or f"t{next(counter)}",
            type=type,
            amount=Decimal(str(amount)),
            category=category,
            date=date,
            description=description,
            status=status,
        )

    return _make


@pytest.fixture
def memory_storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def activity_logger() -> ActivityLogger:
    return ActivityLogger()


@pytest.fixture
def ledger_settings() -> LedgerSettings:
    return LedgerSettings(
        page_size=7,
        include_pending_in_totals=False,
        default_currency="USD",
        recent_activity_limit=5,
    )


@pytest.fixture
def id_factory():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def controller(memory_storage, ledger_settings, activity_logger, reference_date, id_factory):
    """A loaded controller over empty in-memory storage, showing January 2024."""
    controller = LedgerController(
        storage=memory_storage,
        settings=ledger_settings,
        activity_logger=activity_logger,
        today=reference_date,
        id_factory=id_factory,
    )
    controller.load()
    return controller
