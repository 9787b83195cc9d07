"""
Core Data Models for Expense Tracker

These models define the strict schemas for the one persisted entity
(Transaction) and the small preferences object stored beside it.
They are designed to:
1. Enforce type safety at runtime
2. Read legacy snapshots without crashing (missing status, title, type)
3. Be serializable for storage and logging
4. Never be mutated in place (every change produces a new instance)

DESIGN DECISION: Amounts are Decimal, not float.
Sums of Decimals are exact, so category breakdowns always partition the
totals they are computed from.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a money movement."""
    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    """
    Settlement status of a transaction.

    COMPLETED means the cash movement has cleared.
    PENDING means it is scheduled but not yet settled.
    """
    PENDING = "pending"
    COMPLETED = "completed"

    def toggled(self) -> "TransactionStatus":
        if self is TransactionStatus.PENDING:
            return TransactionStatus.COMPLETED
        return TransactionStatus.PENDING


class Currency(str, Enum):
    """Supported display currencies (ISO 4217 codes)."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    PHP = "PHP"
    INR = "INR"

    @property
    def symbol(self) -> str:
        return CURRENCY_SYMBOLS[self]


CURRENCY_SYMBOLS: dict[Currency, str] = {
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
    Currency.JPY: "¥",
    Currency.PHP: "₱",
    Currency.INR: "₹",
}


class Theme(str, Enum):
    """UI colour scheme."""
    LIGHT = "light"
    DARK = "dark"


# =============================================================================
# CATEGORY CATALOG
# =============================================================================

class CategoryDefinition(BaseModel):
    """
    One entry of the fixed category catalog.

    Income and expense categories are disjoint sets; a transaction's
    category must come from the set matching its type.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    icon: str
    color_key: str


CATEGORY_CATALOG: dict[TransactionType, tuple[CategoryDefinition, ...]] = {
    TransactionType.EXPENSE: (
        CategoryDefinition(id="food", name="Food & Dining", icon="🍔", color_key="orange"),
        CategoryDefinition(id="transport", name="Transportation", icon="🚗", color_key="blue"),
        CategoryDefinition(id="housing", name="Housing", icon="🏠", color_key="indigo"),
        CategoryDefinition(id="shopping", name="Shopping", icon="🛍️", color_key="pink"),
        CategoryDefinition(id="entertainment", name="Entertainment", icon="🎬", color_key="purple"),
        CategoryDefinition(id="health", name="Health", icon="❤️", color_key="red"),
        CategoryDefinition(id="travel", name="Travel", icon="✈️", color_key="sky"),
        CategoryDefinition(id="education", name="Education", icon="📚", color_key="yellow"),
        CategoryDefinition(id="bills", name="Bills & Utilities", icon="💡", color_key="gray"),
        CategoryDefinition(id="other", name="Other", icon="📦", color_key="slate"),
    ),
    TransactionType.INCOME: (
        CategoryDefinition(id="salary", name="Salary", icon="💰", color_key="emerald"),
        CategoryDefinition(id="freelance", name="Freelance", icon="💻", color_key="teal"),
        CategoryDefinition(id="investment", name="Investments", icon="📈", color_key="green"),
        CategoryDefinition(id="gift", name="Gifts", icon="🎁", color_key="rose"),
        CategoryDefinition(id="other_income", name="Other Income", icon="💵", color_key="slate"),
    ),
}

UNKNOWN_CATEGORY_NAME = "Unknown"


def categories_for(transaction_type: TransactionType) -> tuple[CategoryDefinition, ...]:
    """Catalog entries for one transaction type, in display order."""
    return CATEGORY_CATALOG[TransactionType(transaction_type)]


def find_category(
    transaction_type: TransactionType,
    category_id: str,
) -> Optional[CategoryDefinition]:
    """Look up a category id within the catalog of the given type."""
    for definition in categories_for(transaction_type):
        if definition.id == category_id:
            return definition
    return None


def default_category(transaction_type: TransactionType) -> CategoryDefinition:
    """
    The category a form falls back to when the type changes.

    Switching type always resets the category, since the two sets are
    disjoint and the previous choice can never stay valid.
    """
    return categories_for(transaction_type)[0]


# =============================================================================
# TRANSACTION
# =============================================================================

def _calendar_date(value: Any) -> Any:
    """
    Reduce date-time input to its calendar date.

    Dates are timezone-naive calendar dates. A value such as
    "2024-01-05T00:00:00.000Z" is read as 2024-01-05 without passing
    through UTC conversion.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            text = text.split("T", 1)[0]
        return text
    return value


class Transaction(BaseModel):
    """
    A single recorded money movement.

    Only the command boundary (TransactionValidator) guarantees a positive
    amount and a catalog category; this model also has to read whatever an
    older snapshot contains, so it only enforces the structural shape.
    """
    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    id: str = Field(
        ...,
        min_length=1,
        description="Unique, immutable identifier"
    )
    # Records written by the expense-only variant carry no type
    type: TransactionType = Field(
        default=TransactionType.EXPENSE,
        description="Income or expense"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount in the user's display currency"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category id from the catalog for this type"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date, no time-of-day"
    )
    # No length limit here; older snapshots may hold longer text
    description: str = Field(
        default="",
        validation_alias=AliasChoices("description", "title"),
        description="Free text, optional"
    )
    status: TransactionStatus = Field(
        default=TransactionStatus.COMPLETED,
        description="Settlement status; legacy records without one are completed"
    )

    @field_validator("id", mode="before")
    @classmethod
    def numeric_id_to_text(cls, v: Any) -> Any:
        # Timestamp ids from older snapshots may be numbers
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("date", mode="before")
    @classmethod
    def strip_time_of_day(cls, v: Any) -> Any:
        return _calendar_date(v)

    @field_validator("description", mode="before")
    @classmethod
    def default_description(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return TransactionStatus.COMPLETED if v in (None, "") else v

    @property
    def is_pending(self) -> bool:
        return self.status is TransactionStatus.PENDING

    @property
    def is_completed(self) -> bool:
        return self.status is TransactionStatus.COMPLETED

    @property
    def category_definition(self) -> Optional[CategoryDefinition]:
        """Catalog entry for this record, None for legacy unknown ids."""
        return find_category(self.type, self.category)

    def with_toggled_status(self) -> "Transaction":
        """Copy of this record with pending and completed swapped."""
        return self.model_copy(update={"status": self.status.toggled()})

    def to_storage_dict(self) -> dict:
        """
        Convert to the dictionary written into the snapshot file.

        Amounts are written as strings so Decimal values survive the
        round trip exactly.
        """
        return {
            "id": self.id,
            "type": self.type.value,
            "amount": str(self.amount),
            "category": self.category,
            "date": self.date.isoformat(),
            "description": self.description,
            "status": self.status.value,
        }


class TransactionDraft(BaseModel):
    """
    Raw input for creating or replacing a transaction.

    CRITICAL: This is UNVERIFIED form input.
    It MUST go through TransactionValidator before a Transaction is built.
    Every field is loose on purpose, so that bad input is reported as
    validation issues rather than as a pydantic exception.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    type: Optional[str] = None
    amount: Union[Decimal, int, float, str, None] = None
    category: Optional[str] = None
    date: Union[dt.date, dt.datetime, str, None] = None
    description: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionDraft":
        """Pre-fill a draft from an existing record (edit form)."""
        return cls(
            type=transaction.type.value,
            amount=transaction.amount,
            category=transaction.category,
            date=transaction.date,
            description=transaction.description,
            status=transaction.status.value,
        )


# =============================================================================
# PREFERENCES
# =============================================================================

class UserPreferences(BaseModel):
    """Settings persisted next to the transactions: currency and theme."""

    currency: Currency = Field(
        default=Currency.USD,
        description="Display currency"
    )
    theme: Theme = Field(
        default=Theme.LIGHT,
        description="Colour scheme"
    )

    @field_validator("currency", mode="before")
    @classmethod
    def normalize_currency(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def is_dark(self) -> bool:
        return self.theme is Theme.DARK
