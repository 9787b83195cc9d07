"""
Display formatting.

Currency symbols and number formatting are applied only here, at the edge
between the ledger and whoever renders it. Stored amounts carry no currency.
"""

import datetime as dt
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from expense_tracker.models.transaction import Currency

Number = Union[Decimal, int, float]


def currency_symbol(code: Union[Currency, str]) -> str:
    """Symbol for a currency code; unknown codes fall back to "$"."""
    try:
        return Currency(str(code).upper()).symbol
    except ValueError:
        return "$"


def format_currency(amount: Number, code: Union[Currency, str] = Currency.USD) -> str:
    """
    Format an amount for display, e.g. "$1,234.50" or "-₱20.00".

    Always two decimals, rounded half-up, comma thousands separators.
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(repr(amount)) if isinstance(amount, float) else Decimal(amount)
    rounded = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{currency_symbol(code)}{abs(rounded):,.2f}"


def format_date(date: dt.date) -> str:
    """Short display date, e.g. "Jan 5, 2024"."""
    return f"{date.strftime('%b')} {date.day}, {date.year}"


def month_label(date: dt.date) -> str:
    """Month heading, e.g. "January 2024"."""
    return date.strftime("%B %Y")


def format_signed(amount: Number, is_income: bool, code: Union[Currency, str] = Currency.USD) -> str:
    """Amount with a leading + for income and - for expense, as list rows show it."""
    return ("+" if is_income else "-") + format_currency(abs(Decimal(str(amount))), code)
