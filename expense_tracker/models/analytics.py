"""
Derived View Models

Read-only structures produced by the query layer from a snapshot of the
transaction store. None of them is ever persisted; they are rebuilt from
scratch every time a view asks for them.
"""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.transaction import Transaction, TransactionType


class LedgerTotals(BaseModel):
    """
    Income, expense and balance over a set of transactions.

    Under the default policy only completed transactions contribute;
    `include_pending` records which policy produced the numbers.
    """
    model_config = ConfigDict(frozen=True)

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    include_pending: bool = False


class ObligationTotals(BaseModel):
    """
    Expense-only view of money owed.

    `total` counts every amount regardless of status, `paid` the completed
    ones, and `pending` the remainder still to settle.
    """
    model_config = ConfigDict(frozen=True)

    total: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    pending: Decimal = Decimal("0")


class CategoryBreakdownItem(BaseModel):
    """One row of a category breakdown."""
    model_config = ConfigDict(frozen=True)

    category: str = Field(..., description="Category id")
    name: str = Field(..., description="Display name")
    icon: str = ""
    color_key: str = "gray"
    amount: Decimal = Decimal("0")
    count: int = Field(default=0, ge=0)
    percentage: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Share of the breakdown total, rounded half-up"
    )


class DayGroup(BaseModel):
    """All transactions sharing one calendar date, the pagination unit."""
    model_config = ConfigDict(frozen=True)

    day_key: str = Field(..., description="ISO date, e.g. 2024-01-05")
    date: dt.date
    transactions: tuple[Transaction, ...] = ()

    @property
    def count(self) -> int:
        return len(self.transactions)

    @property
    def net(self) -> Decimal:
        """Income minus expense for the day, all statuses."""
        total = Decimal("0")
        for transaction in self.transactions:
            if transaction.type is TransactionType.INCOME:
                total += transaction.amount
            else:
                total -= transaction.amount
        return total


class HistoryPage(BaseModel):
    """The visible prefix of the day-grouped history for one month."""
    model_config = ConfigDict(frozen=True)

    year: int
    month: int
    groups: tuple[DayGroup, ...] = ()
    total_groups: int = Field(default=0, ge=0)
    visible_group_count: int = Field(default=0, ge=0)

    @property
    def has_more(self) -> bool:
        return len(self.groups) < self.total_groups


class MonthlyTotal(BaseModel):
    """Sum of all amounts recorded in one calendar month."""
    model_config = ConfigDict(frozen=True)

    month_key: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    year: int
    month: int = Field(..., ge=1, le=12)
    amount: Decimal = Decimal("0")
    count: int = Field(default=0, ge=0)

    @property
    def reference_date(self) -> dt.date:
        """First day of the month, used to re-enter the day-grouped view."""
        return dt.date(self.year, self.month, 1)


class DashboardSummary(BaseModel):
    """Everything the home screen shows."""
    model_config = ConfigDict(frozen=True)

    reference_month: dt.date
    balance: Decimal = Decimal("0")
    monthly_income: Decimal = Decimal("0")
    monthly_expense: Decimal = Decimal("0")
    monthly_obligations: ObligationTotals = Field(default_factory=ObligationTotals)
    recent: tuple[Transaction, ...] = ()
    include_pending: bool = False
    label: Optional[str] = None
