"""
Main Orchestrator for Expense Tracker

This module ties together all the components and owns the application
state: the transaction store, the user's preferences, the reference month
and the history pagination cursor.

DESIGN DECISION: The controller enforces the boundaries:
- No record enters the store without passing validation
- Only command entry points persist; read accessors never write
- Every derived view is recomputed from the current store snapshot
- Every command is logged

Views are plain functions in `expense_tracker.queries`; the controller only
decides which snapshot and which parameters they get.
"""

import datetime as dt
from typing import Callable, Optional, Union
from uuid import uuid4

from expense_tracker.activity import ActivityLogger, configure_logging
from expense_tracker.config import LedgerSettings, Settings, get_settings
from expense_tracker.models.analytics import (
    CategoryBreakdownItem,
    DashboardSummary,
    HistoryPage,
    LedgerTotals,
    MonthlyTotal,
    ObligationTotals,
)
from expense_tracker.models.transaction import (
    Currency,
    Theme,
    Transaction,
    TransactionDraft,
    TransactionType,
    UserPreferences,
)
from expense_tracker.formatting import format_currency
from expense_tracker.queries import (
    GroupPaginator,
    TypeFilter,
    category_breakdown,
    dashboard_summary,
    filter_by_month,
    first_of_month,
    monthly_rollup,
    obligation_totals,
    search_transactions,
    shift_month,
    totals,
)
from expense_tracker.services.storage import (
    CorruptSnapshotError,
    JsonFileStorage,
    LedgerStorageInterface,
    LoadedSnapshot,
    StorageError,
)
from expense_tracker.store import LedgerError, TransactionNotFoundError, TransactionStore
from expense_tracker.validation import InvalidTransactionError, TransactionValidator


class ConfirmationRequiredError(LedgerError):
    """A destructive command was issued without explicit confirmation."""
    pass


def _new_id() -> str:
    return uuid4().hex


DraftInput = Union[TransactionDraft, dict]


class LedgerController:
    """
    Owner of all ledger state.

    Usage:
        controller = LedgerController(storage=InMemoryStorage())
        controller.load()
        controller.add_transaction({"type": "expense", "amount": "12.50",
                                    "category": "food", "date": "2024-01-05"})
        summary = controller.dashboard()
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        settings: Optional[LedgerSettings] = None,
        activity_logger: Optional[ActivityLogger] = None,
        validator: Optional[TransactionValidator] = None,
        today: Optional[dt.date] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the controller with an empty store.

        Args:
            storage: Where snapshots are read from and written to
            settings: Ledger behaviour; read from the environment if None
            activity_logger: Event sink; a local-only logger if None
            validator: Command-boundary validator
            today: Initial reference month (any day in it); defaults to today
            id_factory: Produces ids for new transactions
        """
        self._storage = storage
        self._settings = settings or LedgerSettings()
        self._activity = activity_logger or ActivityLogger()
        self._validator = validator or TransactionValidator()
        self._id_factory = id_factory or _new_id

        self._store = TransactionStore()
        self._preferences = UserPreferences(currency=self._settings.default_currency)
        self._reference_month = first_of_month(today or dt.date.today())
        self._paginator = GroupPaginator(self._settings.page_size)
        self.startup_warnings: list[str] = []

    # =========================================================================
    # STARTUP
    # =========================================================================

    def load(self) -> list[str]:
        """
        Replace in-memory state with what storage holds.

        Never raises for bad data: a corrupt snapshot starts an empty ledger,
        malformed records are skipped and duplicate ids get fresh ones. Each
        of those produces a human-readable warning.

        Returns:
            The startup warnings (also kept in `startup_warnings`)
        """
        warnings: list[str] = []

        try:
            snapshot = self._storage.load_transactions()
        except CorruptSnapshotError as e:
            self._activity.log_snapshot_corrupt(e.source, e.reason)
            warnings.append(
                f"Saved transactions in {e.source} could not be read and were set "
                f"aside; starting with an empty ledger ({e.reason})"
            )
            snapshot = LoadedSnapshot(source=e.source)

        for skipped in snapshot.skipped:
            self._activity.log_record_skipped(skipped.index, skipped.error)
            warnings.append(f"Skipped unreadable record #{skipped.index + 1}: {skipped.error}")
        if snapshot.skipped:
            warnings.append(
                f"A copy of the original file was kept beside {snapshot.source} "
                f"so the skipped records can be recovered"
            )

        transactions = self._repair_duplicate_ids(snapshot.transactions, warnings)
        self._store = TransactionStore(transactions)
        self._activity.log_snapshot_loaded(len(self._store), snapshot.source)

        self._preferences = self._load_preferences(warnings)

        self.startup_warnings = warnings
        return warnings

    def _repair_duplicate_ids(
        self,
        transactions: list[Transaction],
        warnings: list[str],
    ) -> list[Transaction]:
        """Keep the first record per id; later duplicates get a fresh id."""
        seen: set[str] = {t.id for t in transactions}
        used: set[str] = set()
        repaired = []
        for transaction in transactions:
            if transaction.id in used:
                new_id = self._id_factory()
                while new_id in seen:
                    new_id = self._id_factory()
                seen.add(new_id)
                self._activity.log_duplicate_id_repaired(transaction.id, new_id)
                warnings.append(f"Duplicate id {transaction.id} replaced with {new_id}")
                transaction = transaction.model_copy(update={"id": new_id})
            used.add(transaction.id)
            repaired.append(transaction)
        return repaired

    def _load_preferences(self, warnings: list[str]) -> UserPreferences:
        defaults = UserPreferences(currency=self._settings.default_currency)
        try:
            preferences = self._storage.load_preferences()
        except CorruptSnapshotError as e:
            self._activity.log_snapshot_corrupt(e.source, e.reason)
            warnings.append(f"Saved preferences could not be read; using defaults ({e.reason})")
            return defaults
        return preferences or defaults

    # =========================================================================
    # READ ACCESSORS
    # =========================================================================

    @property
    def include_pending(self) -> bool:
        return self._settings.include_pending_in_totals

    @property
    def preferences(self) -> UserPreferences:
        return self._preferences

    @property
    def reference_month(self) -> dt.date:
        """First day of the currently selected month."""
        return self._reference_month

    @property
    def visible_group_count(self) -> int:
        return self._paginator.visible_count

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Every transaction, newest-created first."""
        return self._store.snapshot()

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._store.get(transaction_id)

    def transactions_in_month(self, year: int, month: int) -> list[Transaction]:
        return filter_by_month(self._store.snapshot(), year, month)

    def current_month_transactions(self) -> list[Transaction]:
        return self.transactions_in_month(self._reference_month.year, self._reference_month.month)

    def month_totals(self) -> LedgerTotals:
        """Income, expense and balance for the reference month."""
        return totals(self.current_month_transactions(), include_pending=self.include_pending)

    def obligations(self) -> ObligationTotals:
        """Total, paid and pending expenses for the reference month."""
        return obligation_totals(self.current_month_transactions())

    def dashboard(self) -> DashboardSummary:
        return dashboard_summary(
            self._store.snapshot(),
            self._reference_month,
            include_pending=self.include_pending,
            recent_limit=self._settings.recent_activity_limit,
        )

    def category_breakdown(
        self,
        transaction_type: TransactionType = TransactionType.EXPENSE,
    ) -> list[CategoryBreakdownItem]:
        """Per-category amounts for the reference month."""
        return category_breakdown(
            self.current_month_transactions(),
            transaction_type=transaction_type,
            include_pending=self.include_pending,
        )

    def history_page(
        self,
        term: str = "",
        type_filter: Union[TypeFilter, str] = TypeFilter.ALL,
    ) -> HistoryPage:
        """
        Day-grouped history of the reference month.

        Search and type filter apply before grouping, so the cursor counts
        groups of matching records only.
        """
        matching = search_transactions(self.current_month_transactions(), term, type_filter)
        return self._paginator.page(
            matching, self._reference_month.year, self._reference_month.month
        )

    def monthly_rollup(
        self,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[MonthlyTotal]:
        return monthly_rollup(self._store.snapshot(), transaction_type)

    def format_amount(self, amount) -> str:
        """Format an amount in the user's chosen currency."""
        return format_currency(amount, self._preferences.currency)

    # =========================================================================
    # TRANSACTION COMMANDS
    # =========================================================================

    def add_transaction(self, draft: DraftInput) -> Transaction:
        """
        Validate input and insert a new transaction at the front.

        Raises:
            InvalidTransactionError: Input rejected; nothing changed
            StorageWriteError: Stored in memory but not persisted
        """
        draft = self._coerce_draft(draft)
        transaction = self._build(draft, self._generate_id())

        self._store.add(transaction)
        self._activity.log_transaction_added(
            transaction_id=transaction.id,
            transaction_type=transaction.type.value,
            amount=str(transaction.amount),
            status=transaction.status.value,
        )
        self._persist_transactions()
        return transaction

    def update_transaction(self, transaction_id: str, draft: DraftInput) -> Transaction:
        """
        Replace every field of an existing transaction, keeping its id
        and position.

        Raises:
            TransactionNotFoundError: No such id; nothing changed
            InvalidTransactionError: Input rejected; nothing changed
            StorageWriteError: Updated in memory but not persisted
        """
        self._require(transaction_id, "update")
        draft = self._coerce_draft(draft)
        transaction = self._build(draft, transaction_id)

        previous = self._store.update(transaction)
        before = previous.model_dump()
        after = transaction.model_dump()
        changed = [name for name in after if after[name] != before[name]]
        self._activity.log_transaction_updated(transaction_id, changed)
        self._persist_transactions()
        return transaction

    def delete_transaction(self, transaction_id: str) -> Transaction:
        """
        Remove a transaction.

        Raises:
            TransactionNotFoundError: No such id; nothing changed
        """
        self._require(transaction_id, "delete")
        removed = self._store.remove(transaction_id)
        self._activity.log_transaction_deleted(transaction_id)
        self._persist_transactions()
        return removed

    def toggle_status(self, transaction_id: str) -> Transaction:
        """
        Flip a transaction between pending and completed.

        Raises:
            TransactionNotFoundError: No such id; nothing changed
        """
        self._require(transaction_id, "toggle")
        toggled = self._store.toggle_status(transaction_id)
        self._activity.log_status_toggled(transaction_id, toggled.status.value)
        self._persist_transactions()
        return toggled

    def clear_all(self, confirmed: bool = False) -> int:
        """
        Delete every transaction and the stored snapshot.

        Returns:
            How many transactions were removed

        Raises:
            ConfirmationRequiredError: If `confirmed` is not True
        """
        if confirmed is not True:
            raise ConfirmationRequiredError("Clearing all transactions requires confirmation")

        removed = self._store.clear()
        self._activity.log_ledger_cleared(removed)
        try:
            self._storage.clear_transactions()
        except StorageError as e:
            self._activity.log_storage_write_failed("transactions", str(e))
            raise
        return removed

    # =========================================================================
    # NAVIGATION COMMANDS
    # =========================================================================

    def navigate_month(self, direction: int) -> dt.date:
        """Move the reference month by `direction` months (negative = back)."""
        return self._set_reference_month(shift_month(self._reference_month, direction))

    def select_month(self, year: int, month: int) -> dt.date:
        """Jump to a specific month."""
        if not 1 <= month <= 12:
            raise ValueError(f"month must be in 1..12, got {month}")
        return self._set_reference_month(dt.date(year, month, 1))

    def select_monthly_entry(self, entry: MonthlyTotal) -> dt.date:
        """Open the day-grouped view of a month picked from the rollup."""
        return self._set_reference_month(entry.reference_date)

    def load_more(self) -> int:
        """Reveal one more page of day-groups. Returns the new cursor."""
        visible = self._paginator.load_more()
        self._activity.log_more_groups_loaded(visible)
        return visible

    def _set_reference_month(self, date: dt.date) -> dt.date:
        month = first_of_month(date)
        if month != self._reference_month:
            self._reference_month = month
            self._paginator.reset()
        self._activity.log_month_selected(month.year, month.month)
        return month

    # =========================================================================
    # PREFERENCE COMMANDS
    # =========================================================================

    def set_currency(self, currency: Union[Currency, str]) -> UserPreferences:
        """
        Raises:
            ValueError: Unsupported currency code
        """
        preferences = UserPreferences(currency=currency, theme=self._preferences.theme)
        return self._apply_preferences(preferences, {"currency": preferences.currency.value})

    def set_theme(self, theme: Union[Theme, str]) -> UserPreferences:
        preferences = UserPreferences(currency=self._preferences.currency, theme=theme)
        return self._apply_preferences(preferences, {"theme": preferences.theme.value})

    def toggle_theme(self) -> UserPreferences:
        new_theme = Theme.LIGHT if self._preferences.is_dark else Theme.DARK
        return self.set_theme(new_theme)

    def _apply_preferences(self, preferences: UserPreferences, changes: dict[str, str]) -> UserPreferences:
        self._preferences = preferences
        self._activity.log_preferences_updated(changes)
        try:
            self._storage.save_preferences(preferences)
        except StorageError as e:
            self._activity.log_storage_write_failed("preferences", str(e))
            raise
        return preferences

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @staticmethod
    def _coerce_draft(draft: DraftInput) -> TransactionDraft:
        if isinstance(draft, TransactionDraft):
            return draft
        return TransactionDraft.model_validate(draft)

    def _generate_id(self) -> str:
        transaction_id = self._id_factory()
        while transaction_id in self._store:
            transaction_id = self._id_factory()
        return transaction_id

    def _require(self, transaction_id: str, operation: str) -> None:
        if transaction_id not in self._store:
            self._activity.log_transaction_not_found(transaction_id, operation)
            raise TransactionNotFoundError(transaction_id)

    def _build(self, draft: TransactionDraft, transaction_id: str) -> Transaction:
        try:
            return self._validator.build(draft, transaction_id)
        except InvalidTransactionError as e:
            self._activity.log_validation_rejected(
                [issue.model_dump() for issue in e.result.issues],
                transaction_id=transaction_id if transaction_id in self._store else None,
            )
            raise

    def _persist_transactions(self) -> None:
        """Write the full snapshot. Called only from transaction commands."""
        try:
            self._storage.save_transactions(self._store.snapshot())
        except StorageError as e:
            self._activity.log_storage_write_failed("transactions", str(e))
            raise


def create_app_components(
    settings: Optional[Settings] = None,
    storage: Optional[LedgerStorageInterface] = None,
) -> LedgerController:
    """
    Factory function to create a loaded controller.

    Args:
        settings: Application settings; cached environment settings if None
        storage: Storage backend; JSON files under the configured data
                 directory if None

    Returns:
        A controller whose `load()` has already run. Check
        `startup_warnings` for anything that went wrong while reading.
    """
    settings = settings or get_settings()
    configure_logging(settings.logging)

    storage = storage or JsonFileStorage.from_settings(settings.storage)
    controller = LedgerController(
        storage=storage,
        settings=settings.ledger,
        activity_logger=ActivityLogger(),
    )
    controller.load()
    return controller
