"""
Tests for Expense Tracker models

Test strategy:
1. Unit tests for individual components (models, validators, queries)
2. Controller tests over in-memory storage
3. No real filesystem outside tmp_path
"""

import datetime as dt
from decimal import Decimal

import pytest
from pydantic import ValidationError

from expense_tracker.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)
from expense_tracker.models.analytics import DayGroup, HistoryPage, MonthlyTotal
from expense_tracker.models.transaction import (
    CATEGORY_CATALOG,
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
from expense_tracker.models.validation import ValidationIssue, ValidationResult


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        transaction = Transaction(
            id="abc",
            type="income",
            amount=Decimal("1000"),
            category="salary",
            date=dt.date(2024, 1, 5),
            description="January pay",
            status="completed",
        )
        assert transaction.type is TransactionType.INCOME
        assert transaction.status is TransactionStatus.COMPLETED
        assert transaction.is_completed
        assert not transaction.is_pending

    def test_transaction_is_frozen(self, make_transaction):
        """Test that transactions cannot be mutated in place."""
        transaction = make_transaction()
        with pytest.raises(ValidationError):
            transaction.amount = Decimal("99")

    def test_negative_amount_rejected(self):
        """Test that a negative amount is a structural error."""
        with pytest.raises(ValidationError):
            Transaction(id="x", amount="-1", category="food", date="2024-01-05")

    def test_description_whitespace_stripped(self, make_transaction):
        """Test that whitespace is stripped from the description."""
        transaction = make_transaction(description="  Coffee  ")
        assert transaction.description == "Coffee"

    def test_toggled_twice_is_identity(self, make_transaction):
        """Test that toggling status twice returns the original record."""
        transaction = make_transaction(status="pending")
        once = transaction.with_toggled_status()
        assert once.status is TransactionStatus.COMPLETED
        assert once.with_toggled_status() == transaction

    def test_toggle_keeps_other_fields(self, make_transaction):
        """Test that toggling touches nothing but the status."""
        transaction = make_transaction(amount="42.10", description="Taxi", category="transport")
        toggled = transaction.with_toggled_status()
        assert toggled.model_dump(exclude={"status"}) == transaction.model_dump(exclude={"status"})

    def test_storage_dict_keeps_amount_exact(self, make_transaction):
        """Test that amounts are written as strings without losing digits."""
        data = make_transaction(amount="12.50").to_storage_dict()
        assert data["amount"] == "12.50"
        assert data["date"] == "2024-01-05"
        assert data["type"] == "expense"
        assert data["status"] == "completed"

    def test_category_definition_lookup(self, make_transaction):
        """Test resolving the catalog entry of a record."""
        assert make_transaction(category="food").category_definition.name == "Food & Dining"
        assert make_transaction(category="nonexistent").category_definition is None


class TestLegacyRecords:
    """Tests for reading records written by older versions."""

    def test_missing_status_means_completed(self):
        """Test that records without a status are completed."""
        transaction = Transaction.model_validate(
            {"id": "1", "type": "expense", "amount": 5, "category": "food", "date": "2024-01-05"}
        )
        assert transaction.status is TransactionStatus.COMPLETED

    def test_null_status_means_completed(self):
        """Test that an explicit null status is completed too."""
        transaction = Transaction.model_validate(
            {"id": "1", "amount": 5, "category": "food", "date": "2024-01-05", "status": None}
        )
        assert transaction.status is TransactionStatus.COMPLETED

    def test_missing_type_means_expense(self):
        """Test that expense-only records are read as expenses."""
        transaction = Transaction.model_validate(
            {"id": "1", "amount": "5", "category": "bills", "date": "2024-01-05"}
        )
        assert transaction.type is TransactionType.EXPENSE

    def test_title_is_read_as_description(self):
        """Test that the legacy 'title' field populates description."""
        transaction = Transaction.model_validate(
            {"id": "1", "amount": "5", "category": "bills", "date": "2024-01-05", "title": "Power"}
        )
        assert transaction.description == "Power"

    def test_missing_description_is_empty(self):
        """Test that a missing description becomes an empty string."""
        transaction = Transaction.model_validate(
            {"id": "1", "amount": "5", "category": "bills", "date": "2024-01-05", "description": None}
        )
        assert transaction.description == ""

    def test_datetime_string_reduced_to_calendar_date(self):
        """Test that ISO timestamps keep their calendar date, with no UTC shift."""
        transaction = Transaction.model_validate(
            {"id": "1", "amount": "5", "category": "food", "date": "2024-01-31T23:30:00.000Z"}
        )
        assert transaction.date == dt.date(2024, 1, 31)

    def test_numeric_amount_accepted(self):
        """Test that numeric amounts from older snapshots are read."""
        transaction = Transaction.model_validate(
            {"id": "1", "amount": 12.5, "category": "food", "date": "2024-01-05"}
        )
        assert transaction.amount == Decimal("12.5")


class TestCatalog:
    """Tests for the fixed category catalog."""

    def test_income_and_expense_sets_are_disjoint(self):
        """Test that no category id belongs to both types."""
        income = {c.id for c in categories_for(TransactionType.INCOME)}
        expense = {c.id for c in categories_for(TransactionType.EXPENSE)}
        assert income.isdisjoint(expense)

    def test_catalog_contents(self):
        """Test the catalog entries per type."""
        assert [c.id for c in CATEGORY_CATALOG[TransactionType.INCOME]] == [
            "salary", "freelance", "investment", "gift", "other_income",
        ]
        assert len(CATEGORY_CATALOG[TransactionType.EXPENSE]) == 10

    def test_find_category_respects_type(self):
        """Test that an income id is not found among expenses."""
        assert find_category(TransactionType.INCOME, "salary") is not None
        assert find_category(TransactionType.EXPENSE, "salary") is None

    def test_default_category_is_first_entry(self):
        """Test the category a form falls back to."""
        assert default_category(TransactionType.INCOME).id == "salary"
        assert default_category(TransactionType.EXPENSE).id == "food"


class TestPreferences:
    """Tests for user preferences."""

    def test_defaults(self):
        """Test default preferences."""
        preferences = UserPreferences()
        assert preferences.currency is Currency.USD
        assert preferences.theme is Theme.LIGHT
        assert not preferences.is_dark

    def test_currency_code_normalized(self):
        """Test that lowercase currency codes are accepted."""
        assert UserPreferences(currency=" php ").currency is Currency.PHP

    def test_unknown_currency_rejected(self):
        """Test that unsupported currencies are rejected."""
        with pytest.raises(ValidationError):
            UserPreferences(currency="BTC")

    def test_currency_symbols(self):
        """Test currency symbol table."""
        assert Currency.PHP.symbol == "₱"
        assert Currency.INR.symbol == "₹"
        assert Currency.EUR.symbol == "€"


class TestDraftModel:
    """Tests for unverified form input."""

    def test_draft_accepts_anything_loose(self):
        """Test that a draft never rejects bad values itself."""
        draft = TransactionDraft(type="??", amount="abc", date="not a date")
        assert draft.amount == "abc"
        assert draft.date == "not a date"

    def test_draft_from_transaction(self, make_transaction):
        """Test pre-filling an edit form from a record."""
        transaction = make_transaction(amount="7.25", status="pending", description="Bus")
        draft = TransactionDraft.from_transaction(transaction)
        assert draft.type == "expense"
        assert draft.amount == Decimal("7.25")
        assert draft.status == "pending"
        assert draft.description == "Bus"


class TestAnalyticsModels:
    """Tests for derived view models."""

    def test_day_group_net(self, make_transaction):
        """Test net amount of a day: income minus expense, all statuses."""
        group = DayGroup(
            day_key="2024-01-05",
            date=dt.date(2024, 1, 5),
            transactions=(
                make_transaction(type="income", amount="100"),
                make_transaction(amount="30"),
                make_transaction(amount="20", status="pending"),
            ),
        )
        assert group.count == 3
        assert group.net == Decimal("50")

    def test_history_page_has_more(self):
        """Test has_more on a partially visible month."""
        page = HistoryPage(year=2024, month=1, groups=(), total_groups=3, visible_group_count=7)
        assert page.has_more

    def test_monthly_total_reference_date(self):
        """Test hand-off date of a rollup entry."""
        entry = MonthlyTotal(month_key="2023-11", year=2023, month=11, amount=Decimal("5"))
        assert entry.reference_date == dt.date(2023, 11, 1)

    def test_monthly_total_key_format(self):
        """Test that month keys must be zero-padded."""
        with pytest.raises(ValidationError):
            MonthlyTotal(month_key="2023-1", year=2023, month=1)


class TestValidationModels:
    """Tests for validation result models."""

    def test_validation_issue_creation(self):
        """Test ValidationIssue model."""
        issue = ValidationIssue(
            field="amount",
            issue_type="missing",
            message="Amount is required",
        )
        assert issue.severity == "error"

    def test_validation_issue_bad_severity(self):
        """Test that severity is restricted."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="amount", issue_type="x", message="y", severity="fatal")

    def test_validation_result_helpers(self):
        """Test ValidationResult helper properties."""
        result = ValidationResult(
            is_valid=False,
            issues=[
                ValidationIssue(field="amount", issue_type="missing", message="Amount is required"),
                ValidationIssue(
                    field="amount", issue_type="precision", message="Too precise", severity="warning"
                ),
                ValidationIssue(field="category", issue_type="missing", message="Category is required"),
            ],
        )
        assert result.has_errors
        assert result.error_count == 2
        assert result.warnings == ["Too precise"]
        assert len(result.issues_for("amount")) == 2


class TestActivityModels:
    """Tests for activity event models."""

    def test_activity_event_creation(self):
        """Test ActivityEvent model creation."""
        event = ActivityEvent(
            event_type=ActivityEventType.TRANSACTION_DELETED,
            entity_id="abc",
            description="Deleted transaction",
        )
        assert event.event_id is not None
        assert event.severity is ActivitySeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_builder_transaction_added(self):
        """Test building an added event."""
        event = ActivityEventBuilder.transaction_added(
            transaction_id="abc",
            transaction_type="expense",
            amount="12.50",
            status="pending",
        )
        assert event.event_type is ActivityEventType.TRANSACTION_ADDED
        assert event.entity_id == "abc"
        assert event.details["status"] == "pending"

    def test_builder_snapshot_corrupt_is_error(self):
        """Test that corrupt snapshots are logged as errors."""
        event = ActivityEventBuilder.snapshot_corrupt("data/transactions.json", "invalid JSON")
        assert event.severity is ActivitySeverity.ERROR
        assert event.error_message == "invalid JSON"

    def test_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = ActivityEventBuilder.month_selected(2024, 2)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "month_selected"
        assert log_dict["severity"] == "debug"
        assert log_dict["details"] == {"year": 2024, "month": 2}
        assert isinstance(log_dict["event_id"], str)
