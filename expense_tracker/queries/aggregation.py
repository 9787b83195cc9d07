"""
Aggregation Engine

DESIGN DECISION: Aggregation is DETERMINISTIC and pure.
Every function here takes a snapshot (any iterable of Transactions) plus
parameters and returns a fresh result model. Nothing is cached, so a
result can never go stale after a mutation.

Two policies for pending money are supported and chosen explicitly:
- include_pending=False (default): only settled money counts toward
  income, expense and balance.
- include_pending=True: pending amounts count as committed money too.
The expense-only obligations view (total / paid / pending) always counts
every amount in `total`, which is what makes it useful next to the
settled-only balance.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from expense_tracker.formatting import month_label
from expense_tracker.models.analytics import (
    CategoryBreakdownItem,
    DashboardSummary,
    LedgerTotals,
    ObligationTotals,
)
from expense_tracker.models.transaction import (
    UNKNOWN_CATEGORY_NAME,
    Transaction,
    TransactionType,
    categories_for,
    find_category,
)
from expense_tracker.queries.bucketing import filter_by_month, first_of_month

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def _counts_toward_totals(transaction: Transaction, include_pending: bool) -> bool:
    return include_pending or not transaction.is_pending


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def percentage_of(amount: Decimal, total: Decimal) -> int:
    """Whole-number share of `total`, rounded half-up; 0 when total is 0."""
    if total == 0:
        return 0
    share = (amount / total * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(share)


def totals(
    transactions: Iterable[Transaction],
    include_pending: bool = False,
) -> LedgerTotals:
    """
    Income, expense and balance (income - expense).

    Args:
        transactions: Records to aggregate, usually already month-filtered
        include_pending: Count pending records too (see module docstring)
    """
    income = ZERO
    expense = ZERO
    for transaction in transactions:
        if not _counts_toward_totals(transaction, include_pending):
            continue
        if transaction.type is TransactionType.INCOME:
            income += transaction.amount
        else:
            expense += transaction.amount

    return LedgerTotals(
        income=income,
        expense=expense,
        balance=income - expense,
        include_pending=include_pending,
    )


def obligation_totals(
    transactions: Iterable[Transaction],
    transaction_type: Optional[TransactionType] = TransactionType.EXPENSE,
) -> ObligationTotals:
    """
    Total, paid and pending over one type of transaction.

    `total` includes pending amounts; `pending = total - paid`.
    Pass transaction_type=None to treat every record as an obligation,
    as the expense-only ledger does.
    """
    total = ZERO
    paid = ZERO
    for transaction in transactions:
        if transaction_type is not None and transaction.type is not transaction_type:
            continue
        total += transaction.amount
        if transaction.is_completed:
            paid += transaction.amount

    return ObligationTotals(total=total, paid=paid, pending=total - paid)


def category_breakdown(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType = TransactionType.EXPENSE,
    include_pending: bool = False,
    include_empty: bool = True,
) -> list[CategoryBreakdownItem]:
    """
    Amount, count and share per category for one transaction type.

    Sorted by amount, largest first; ties keep catalog order. With
    include_empty (the default) every catalog category appears, with
    amount 0 when nothing matched. Ids missing from the catalog (legacy
    data) get their own "Unknown" rows after the catalog entries, so the
    row amounts always add up to the total of the filtered set.
    """
    transaction_type = TransactionType(transaction_type)
    selected = [
        t for t in transactions
        if t.type is transaction_type and _counts_toward_totals(t, include_pending)
    ]
    grand_total = sum_amounts(selected)

    amounts: dict[str, Decimal] = {}
    counts: dict[str, int] = {}
    if include_empty:
        for definition in categories_for(transaction_type):
            amounts[definition.id] = ZERO
            counts[definition.id] = 0

    for transaction in selected:
        amounts[transaction.category] = amounts.get(transaction.category, ZERO) + transaction.amount
        counts[transaction.category] = counts.get(transaction.category, 0) + 1

    # Catalog entries first, unknown ids after, then a stable sort by amount
    catalog_ids = [d.id for d in categories_for(transaction_type)]
    ordered_ids = [c for c in catalog_ids if c in amounts]
    ordered_ids += [c for c in amounts if c not in catalog_ids]

    items = []
    for category_id in ordered_ids:
        definition = find_category(transaction_type, category_id)
        items.append(CategoryBreakdownItem(
            category=category_id,
            name=definition.name if definition else UNKNOWN_CATEGORY_NAME,
            icon=definition.icon if definition else "",
            color_key=definition.color_key if definition else "gray",
            amount=amounts[category_id],
            count=counts[category_id],
            percentage=percentage_of(amounts[category_id], grand_total),
        ))

    items.sort(key=lambda item: item.amount, reverse=True)
    return items


def recent_transactions(
    transactions: Iterable[Transaction],
    limit: int = 5,
) -> list[Transaction]:
    """The first `limit` records in store order (newest-created first)."""
    recent = []
    for transaction in transactions:
        if len(recent) >= limit:
            break
        recent.append(transaction)
    return recent


def dashboard_summary(
    transactions: Iterable[Transaction],
    reference_month: dt.date,
    include_pending: bool = False,
    recent_limit: int = 5,
) -> DashboardSummary:
    """
    Home screen numbers.

    - balance: all-time, over every transaction
    - monthly income / expense: the reference month only
    - monthly obligations: the reference month's expenses, pending included
    - recent: latest records regardless of month
    """
    snapshot = list(transactions)
    reference_month = first_of_month(reference_month)
    month = filter_by_month(snapshot, reference_month.year, reference_month.month)

    all_time = totals(snapshot, include_pending=include_pending)
    monthly = totals(month, include_pending=include_pending)

    return DashboardSummary(
        reference_month=reference_month,
        balance=all_time.balance,
        monthly_income=monthly.income,
        monthly_expense=monthly.expense,
        monthly_obligations=obligation_totals(month),
        recent=tuple(recent_transactions(snapshot, recent_limit)),
        include_pending=include_pending,
        label=month_label(reference_month),
    )
