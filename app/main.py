"""
Streamlit Frontend for Expense Tracker

This is the user interface for day-to-day bookkeeping: record income and
expenses, see where the month's money went, and page back through history.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything destructive
3. Clear error messages in simple language
4. Visual feedback for all operations
5. The UI never computes totals itself; it asks the controller

The UI only talks to LedgerController: read accessors to render,
command entry points to change anything.
"""

import datetime as dt

import streamlit as st

from expense_tracker.config import validate_all_settings
from expense_tracker.formatting import format_date, format_signed, month_label
from expense_tracker.models.transaction import (
    Currency,
    Transaction,
    TransactionDraft,
    TransactionStatus,
    TransactionType,
    categories_for,
    default_category,
    find_category,
)
from expense_tracker.orchestrator import LedgerController, create_app_components
from expense_tracker.queries import TypeFilter
from expense_tracker.services.storage import StorageError
from expense_tracker.store import TransactionNotFoundError
from expense_tracker.validation import InvalidTransactionError


# Page configuration
st.set_page_config(
    page_title="Expense Tracker",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

LIGHT_CSS = """
<style>
    .stButton>button {
        width: 100%;
    }
    .income { color: #28a745; font-weight: bold; }
    .expense { color: #dc3545; font-weight: bold; }
    .pending-badge {
        padding: 2px 8px;
        background-color: #fff3cd;
        border-radius: 8px;
        font-size: 0.8em;
    }
    .big-number {
        font-size: 2.2em;
        font-weight: bold;
    }
</style>
"""

DARK_CSS = """
<style>
    .stApp { background-color: #0e1117; color: #fafafa; }
    .pending-badge { background-color: #5c4b00; }
</style>
"""


@st.cache_resource
def get_controller() -> LedgerController:
    """Get or create the ledger controller (cached per server process)."""
    return create_app_components()


def main():
    """Main application entry point."""
    controller = get_controller()

    st.markdown(LIGHT_CSS, unsafe_allow_html=True)
    if controller.preferences.is_dark:
        st.markdown(DARK_CSS, unsafe_allow_html=True)

    for warning in controller.startup_warnings:
        st.warning(warning)

    # Sidebar navigation
    st.sidebar.title("💰 Expense Tracker")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["🏠 Dashboard", "📊 Analytics", "📜 History", "📅 Monthly", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    render_month_switcher(controller)

    if page == "🏠 Dashboard":
        render_dashboard_page(controller)
    elif page == "📊 Analytics":
        render_analytics_page(controller)
    elif page == "📜 History":
        render_history_page(controller)
    elif page == "📅 Monthly":
        render_monthly_page(controller)
    elif page == "⚙️ Settings":
        render_settings_page(controller)


def render_month_switcher(controller: LedgerController):
    """Previous / next month buttons in the sidebar."""
    st.sidebar.markdown(f"### {month_label(controller.reference_month)}")
    col1, col2 = st.sidebar.columns(2)
    with col1:
        if st.button("◀ Previous", key="month_prev"):
            controller.navigate_month(-1)
            st.rerun()
    with col2:
        if st.button("Next ▶", key="month_next"):
            controller.navigate_month(1)
            st.rerun()


def run_command(action, success_message: str) -> bool:
    """Run a controller command and translate its errors into messages."""
    try:
        action()
    except InvalidTransactionError as e:
        for issue in e.result.issues:
            if issue.severity == "error":
                st.error(f"{issue.field}: {issue.message}")
        return False
    except TransactionNotFoundError:
        st.error("That transaction no longer exists.")
        return False
    except StorageError as e:
        st.error(f"Saved in this session, but could not be written to disk: {e}")
        return False
    st.success(success_message)
    return True


def render_transaction_form(
    controller: LedgerController,
    key: str,
    existing: Transaction = None,
):
    """Add form, or edit form when `existing` is given."""
    draft = TransactionDraft.from_transaction(existing) if existing else TransactionDraft()
    current_type = TransactionType(draft.type) if draft.type else TransactionType.EXPENSE

    transaction_type = st.radio(
        "Type",
        options=list(TransactionType),
        index=list(TransactionType).index(current_type),
        format_func=lambda t: t.value.title(),
        horizontal=True,
        key=f"{key}_type",
    )
    categories = categories_for(transaction_type)
    category_ids = [c.id for c in categories]
    # Switching type drops a category that belongs to the other type
    selected = draft.category if draft.category in category_ids else default_category(transaction_type).id
    category_index = category_ids.index(selected)

    with st.form(key=f"{key}_form", clear_on_submit=existing is None):
        amount = st.text_input(
            "Amount",
            value="" if draft.amount is None else str(draft.amount),
            placeholder="e.g., 12.50",
        )
        category = st.selectbox(
            "Category",
            options=categories,
            index=category_index,
            format_func=lambda c: f"{c.icon} {c.name}",
        )
        date = st.date_input("Date", value=draft.date or dt.date.today())
        description = st.text_input("Description", value=draft.description or "")
        pending = st.checkbox(
            "Pending (not settled yet)",
            value=draft.status == TransactionStatus.PENDING.value,
        )
        submitted = st.form_submit_button("💾 Save" if existing else "➕ Add", type="primary")

    if submitted:
        new_draft = TransactionDraft(
            type=transaction_type.value,
            amount=amount,
            category=category.id,
            date=date,
            description=description,
            status=(TransactionStatus.PENDING if pending else TransactionStatus.COMPLETED).value,
        )
        if existing:
            ok = run_command(
                lambda: controller.update_transaction(existing.id, new_draft),
                "Transaction updated.",
            )
        else:
            ok = run_command(
                lambda: controller.add_transaction(new_draft),
                "Transaction added.",
            )
        if ok:
            st.rerun()


def render_transaction_row(controller: LedgerController, transaction: Transaction, key: str):
    """One line of history with its actions."""
    currency = controller.preferences.currency
    definition = find_category(transaction.type, transaction.category)
    icon = definition.icon if definition else "❔"
    name = definition.name if definition else "Unknown"
    css_class = "income" if transaction.type is TransactionType.INCOME else "expense"
    badge = ' <span class="pending-badge">pending</span>' if transaction.is_pending else ""

    col1, col2, col3, col4 = st.columns([6, 3, 1, 1])
    with col1:
        st.markdown(
            f"{icon} **{transaction.description or name}**  \n{name}{badge}",
            unsafe_allow_html=True,
        )
    with col2:
        amount = format_signed(
            transaction.amount,
            transaction.type is TransactionType.INCOME,
            currency,
        )
        st.markdown(f'<span class="{css_class}">{amount}</span>', unsafe_allow_html=True)
    with col3:
        label = "✅" if transaction.is_pending else "⏳"
        if st.button(label, key=f"{key}_toggle", help="Toggle pending / completed"):
            if run_command(lambda: controller.toggle_status(transaction.id), "Status changed."):
                st.rerun()
    with col4:
        if st.button("🗑️", key=f"{key}_delete", help="Delete"):
            if run_command(lambda: controller.delete_transaction(transaction.id), "Deleted."):
                st.rerun()

    with st.expander("✏️ Edit"):
        render_transaction_form(controller, key=f"{key}_edit", existing=transaction)


def render_dashboard_page(controller: LedgerController):
    """Render the home page: balance, this month, recent activity."""
    summary = controller.dashboard()
    fmt = controller.format_amount

    st.title("🏠 Dashboard")
    st.caption(
        "Totals include pending transactions."
        if summary.include_pending
        else "Totals count completed transactions only."
    )

    st.markdown("Balance")
    st.markdown(f'<div class="big-number">{fmt(summary.balance)}</div>', unsafe_allow_html=True)

    st.markdown(f"### {summary.label}")
    col1, col2, col3 = st.columns(3)
    col1.metric("Income", fmt(summary.monthly_income))
    col2.metric("Expenses", fmt(summary.monthly_expense))
    col3.metric("Pending bills", fmt(summary.monthly_obligations.pending))

    obligations = summary.monthly_obligations
    if obligations.total > 0:
        st.progress(
            float(obligations.paid / obligations.total),
            text=f"Paid {fmt(obligations.paid)} of {fmt(obligations.total)}",
        )

    st.markdown("---")
    st.markdown("### ➕ Add Transaction")
    render_transaction_form(controller, key="add")

    st.markdown("---")
    st.markdown("### 🕒 Recent Activity")
    if not summary.recent:
        st.info("No transactions yet. Add your first one above.")
    for transaction in summary.recent:
        render_transaction_row(controller, transaction, key=f"recent_{transaction.id}")


def render_analytics_page(controller: LedgerController):
    """Render the category breakdown for the reference month."""
    st.title("📊 Analytics")
    st.markdown(f"Where the money went in **{month_label(controller.reference_month)}**.")

    transaction_type = st.radio(
        "Show",
        options=[TransactionType.EXPENSE, TransactionType.INCOME],
        format_func=lambda t: "Expenses" if t is TransactionType.EXPENSE else "Income",
        horizontal=True,
    )

    breakdown = controller.category_breakdown(transaction_type)
    if not any(item.amount > 0 for item in breakdown):
        st.info("Nothing recorded for this month yet.")
        return

    for item in breakdown:
        col1, col2, col3 = st.columns([4, 2, 1])
        with col1:
            st.markdown(f"{item.icon} **{item.name}** ({item.count})")
            st.progress(item.percentage / 100)
        with col2:
            st.markdown(controller.format_amount(item.amount))
        with col3:
            st.markdown(f"{item.percentage}%")


def render_history_page(controller: LedgerController):
    """Render the day-grouped history of the reference month."""
    st.title("📜 History")

    col1, col2 = st.columns([2, 1])
    with col1:
        term = st.text_input(
            "Search",
            placeholder="Description or amount",
        )
    with col2:
        type_filter = st.selectbox(
            "Type",
            options=list(TypeFilter),
            format_func=lambda f: f.value.title(),
        )

    page = controller.history_page(term=term, type_filter=type_filter)
    st.markdown(f"**{month_label(dt.date(page.year, page.month, 1))}**")

    if not page.groups:
        st.info("No transactions for this month.")
        return

    for group in page.groups:
        net = format_signed(abs(group.net), group.net >= 0, controller.preferences.currency)
        st.markdown(f"#### {format_date(group.date)} · {net}")
        for transaction in group.transactions:
            render_transaction_row(controller, transaction, key=f"hist_{transaction.id}")

    if page.has_more:
        if st.button("⬇️ Load more"):
            controller.load_more()
            st.rerun()


def render_monthly_page(controller: LedgerController):
    """Render totals per month across all history."""
    st.title("📅 Monthly")

    rollup = controller.monthly_rollup()
    if not rollup:
        st.info("No transactions yet.")
        return

    # Income and expense are rolled up separately; their sum means nothing
    income_by_month = {
        entry.month_key: entry.amount
        for entry in controller.monthly_rollup(TransactionType.INCOME)
    }
    expense_by_month = {
        entry.month_key: entry.amount
        for entry in controller.monthly_rollup(TransactionType.EXPENSE)
    }

    header1, header2, header3, _ = st.columns([3, 2, 2, 1])
    header1.caption("Month (transactions)")
    header2.caption("Income")
    header3.caption("Expenses")

    for entry in rollup:
        col1, col2, col3, col4 = st.columns([3, 2, 2, 1])
        with col1:
            st.markdown(f"**{month_label(entry.reference_date)}** ({entry.count})")
        with col2:
            income = income_by_month.get(entry.month_key)
            st.markdown(controller.format_amount(income) if income is not None else "-")
        with col3:
            expense = expense_by_month.get(entry.month_key)
            st.markdown(controller.format_amount(expense) if expense is not None else "-")
        with col4:
            if st.button("Open", key=f"month_{entry.month_key}"):
                controller.select_monthly_entry(entry)
                st.rerun()

    st.markdown("---")
    st.markdown(f"### {month_label(controller.reference_month)}")
    page = controller.history_page()
    for group in page.groups:
        st.markdown(f"**{format_date(group.date)}**")
        for transaction in group.transactions:
            signed = format_signed(
                transaction.amount,
                transaction.type is TransactionType.INCOME,
                controller.preferences.currency,
            )
            st.markdown(f"- {transaction.description or transaction.category}: {signed}")
    if page.has_more:
        st.caption("Open the History page to see older days of this month.")


def render_settings_page(controller: LedgerController):
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Preferences")
    currencies = list(Currency)
    currency = st.selectbox(
        "Currency",
        options=currencies,
        index=currencies.index(controller.preferences.currency),
        format_func=lambda c: f"{c.symbol} {c.value}",
    )
    if currency is not controller.preferences.currency:
        if run_command(lambda: controller.set_currency(currency), "Currency updated."):
            st.rerun()

    dark = st.toggle("Dark mode", value=controller.preferences.is_dark)
    if dark != controller.preferences.is_dark:
        if run_command(controller.toggle_theme, "Theme updated."):
            st.rerun()

    st.markdown("---")
    st.markdown("### Danger Zone")
    confirmed = st.checkbox(
        f"I understand this deletes all {len(controller.transactions)} transaction(s)"
    )
    if st.button("🗑️ Clear All Data", disabled=not confirmed):
        try:
            removed = controller.clear_all(confirmed=confirmed)
        except StorageError as e:
            st.error(f"Cleared in this session, but the saved file could not be removed: {e}")
        else:
            st.success(f"Removed {removed} transaction(s).")

    st.markdown("---")
    st.markdown("### Configuration Status")
    status = validate_all_settings()
    for name in ("storage", "ledger", "logging"):
        if status.get(name, False):
            st.success(f"✅ {name.title()} settings - OK")
        else:
            st.error(f"❌ {name.title()} settings - {status.get(f'{name}_error')}")

    st.markdown(
        "Configuration comes from environment variables or a `.env` file. "
        "See `.env.example` for the available variables."
    )


if __name__ == "__main__":
    main()
