"""
Streamlit Frontend for Finance Tracker

The page the user adds and edits transactions on.

DESIGN PRINCIPLES:
1. One form for adding and editing
2. Every edit goes through the draft; widgets only mirror it
3. Clear error messages next to the field that blocked saving
4. Lists refresh right after a save

Streamlit reruns this script on every interaction. The editor lives in
``st.session_state`` between reruns; widget callbacks write into its
draft before the rerun, and each widget is re-seeded from the draft.
"""

import asyncio
import logging
from datetime import date
from typing import Optional

import streamlit as st

from finance_tracker.config import get_settings, validate_all_settings
from finance_tracker.editor import (
    DraftValidationError,
    EditorHost,
    RecordEditor,
    SubmitInProgressError,
)
from finance_tracker.editor import codec
from finance_tracker.lists import summarize
from finance_tracker.models.transaction import Transaction, TransactionType, YearMonth
from finance_tracker.orchestrator import TrackerSession, create_app_components
from finance_tracker.services.storage import StorageError


HOME = "🏠 Overview"
EDITOR = "➕ Add Transaction"
ALL = "📋 All Transactions"
SETTINGS = "⚙️ Settings"
PAGES = [HOME, EDITOR, ALL, SETTINGS]


# Page configuration
st.set_page_config(
    page_title="Finance Tracker",
    page_icon="💰",
    layout="centered",
    initial_sidebar_state="expanded",
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_session() -> TrackerSession:
    """Get or create the tracker session (cached)."""
    app_settings = get_settings().app
    logging.basicConfig(
        level=logging.DEBUG if app_settings.debug_mode else logging.INFO,
        format="%(message)s",
    )
    session = create_app_components(use_storage=True)
    run_async(session.start())
    return session


class StreamlitEditorHost(EditorHost):
    """Keeps the editing selection and page navigation in session state."""

    @property
    def current_record(self) -> Optional[Transaction]:
        return st.session_state.get("current_transaction")

    def clear_current_record(self) -> None:
        st.session_state.current_transaction = None

    def close(self) -> None:
        editor = st.session_state.pop("editor", None)
        if editor is not None:
            editor.dispose()

    def navigate_back(self) -> None:
        st.session_state.page = st.session_state.pop("previous_page", None) or HOME


def format_amount(transaction: Transaction) -> str:
    return codec.amount_to_masked(transaction.amount_minor_units, transaction.type)


def get_editor(session: TrackerSession) -> RecordEditor:
    """The editor of this browser session, opened on first use."""
    if "editor" not in st.session_state:
        editor = session.new_editor(StreamlitEditorHost())
        run_async(editor.open())
        st.session_state.editor = editor
    st.session_state.editor.period = session.period
    return st.session_state.editor


def start_edit(transaction: Transaction) -> None:
    """Button callback: open the editor on an existing transaction."""
    StreamlitEditorHost().close()
    st.session_state.current_transaction = transaction
    st.session_state.previous_page = st.session_state.get("page", HOME)
    st.session_state.page = EDITOR


def main():
    """Main application entry point."""
    session = get_session()

    st.sidebar.title("💰 Finance Tracker")
    st.sidebar.caption(get_settings().app.app_environment)
    st.sidebar.markdown("---")

    page = st.sidebar.radio("Navigate to:", PAGES, key="page")

    month = st.sidebar.date_input("Month", value=date(session.period.year, session.period.month, 1))
    if month:
        period = YearMonth.of(month)
        if period != session.period:
            session.period = period
            run_async(session.monthly.refresh(period))

    if st.session_state.get("flash"):
        st.success(st.session_state.pop("flash"))

    if page == HOME:
        render_overview_page(session)
    elif page == EDITOR:
        render_editor_page(session)
    elif page == ALL:
        render_all_transactions_page(session)
    elif page == SETTINGS:
        render_settings_page()


def render_transaction_rows(transactions: list[Transaction], key_prefix: str) -> None:
    for transaction in transactions:
        col1, col2, col3 = st.columns([4, 2, 1])
        with col1:
            st.markdown(f"**{transaction.description}**  \n{transaction.category} · {transaction.occurred_date.strftime('%d %b %Y')}")
        with col2:
            st.markdown(format_amount(transaction))
        with col3:
            st.button(
                "✏️",
                key=f"{key_prefix}-edit-{transaction.id}",
                on_click=start_edit,
                args=(transaction,),
                help="Edit this transaction",
            )


def render_overview_page(session: TrackerSession):
    """Month totals and the recent transactions panel."""
    st.title("🏠 Overview")

    monthly = session.monthly
    col1, col2, col3 = st.columns(3)
    col1.metric("Income", codec.amount_to_masked(monthly.income_minor_units, TransactionType.INCOME))
    col2.metric("Expenses", codec.amount_to_masked(monthly.expense_minor_units, TransactionType.EXPENSE))
    col3.metric("Balance", codec.amount_to_masked(abs(monthly.balance_minor_units)))
    st.caption(f"Month: {session.period}")

    summary = summarize(session.recent.items)
    st.subheader(summary.title)
    if summary.empty_message:
        st.info(summary.empty_message)
    else:
        render_transaction_rows(summary.transactions, "recent")


def render_all_transactions_page(session: TrackerSession):
    """Every transaction of the month, optionally filtered by category."""
    st.title("📋 Transactions")

    col1, col2 = st.columns(2)
    with col1:
        type_filter = st.selectbox(
            "Type",
            options=list(TransactionType),
            format_func=lambda t: t.value.title(),
        )
    with col2:
        category_filter = st.selectbox(
            "Category",
            options=[None] + [c.value for c in codec.selectable_categories(session.categories, type_filter)],
            format_func=lambda v: "All Categories" if v is None else v,
        )

    summary = summarize(
        session.monthly.items,
        all_transactions=True,
        category_filter=category_filter,
        type_filter=type_filter,
    )
    if summary.empty_message:
        st.info(summary.empty_message)
    else:
        render_transaction_rows(summary.transactions, "all")


# -----------------------------------------------------------------------------
# Editor page
# -----------------------------------------------------------------------------

def _seed(key: str, value) -> None:
    """Mirror the draft into a widget before the widget is drawn."""
    st.session_state[key] = value


def _on_text(field: str, key: str) -> None:
    st.session_state.editor.draft.set_field(field, st.session_state[key])


def _on_date() -> None:
    value = st.session_state.tx_date
    if value:
        st.session_state.editor.draft.set_field("date", codec.date_to_draft(value))


def _on_type(transaction_type: TransactionType) -> None:
    st.session_state.editor.draft.choose_type(transaction_type)


def _on_submit() -> None:
    editor: RecordEditor = st.session_state.editor
    st.session_state.editor_error = None
    try:
        saved = run_async(editor.submit())
        st.session_state.flash = f"Saved: {saved.description} {format_amount(saved)}"
    except DraftValidationError as e:
        st.session_state.editor_error = (e.field, str(e))
    except SubmitInProgressError as e:
        st.session_state.editor_error = (None, str(e))
    except StorageError as e:
        st.session_state.editor_error = (None, f"Failed to save: {e}")


def _on_cancel() -> None:
    editor: RecordEditor = st.session_state.editor
    st.session_state.editor_error = None
    run_async(editor.cancel())


def _field_error(field: str) -> None:
    error = st.session_state.get("editor_error")
    if error and error[0] == field:
        st.error(error[1])


def render_editor_page(session: TrackerSession):
    """The add/edit transaction form."""
    editor = get_editor(session)
    draft = editor.draft

    st.button("← Back", on_click=_on_cancel)
    st.title(editor.title)

    error = st.session_state.get("editor_error")
    if error and error[0] is None:
        st.error(error[1])

    _seed("tx_description", draft.get("description"))
    st.text_input(
        "How would you like to call this transaction?",
        key="tx_description",
        on_change=_on_text,
        args=("description", "tx_description"),
    )
    _field_error("description")

    st.markdown("How much was it?")
    col1, col2 = st.columns(2)
    col1.button(
        "+ $",
        type="primary" if draft.transaction_type == TransactionType.INCOME else "secondary",
        on_click=_on_type,
        args=(TransactionType.INCOME,),
    )
    col2.button(
        "- $",
        type="primary" if draft.transaction_type == TransactionType.EXPENSE else "secondary",
        on_click=_on_type,
        args=(TransactionType.EXPENSE,),
    )
    _field_error("type")

    _seed("tx_amount", draft.amount_display)
    st.text_input(
        "Amount",
        key="tx_amount",
        on_change=_on_text,
        args=("amount", "tx_amount"),
        placeholder="0.00",
        label_visibility="collapsed",
    )
    _field_error("amount")

    options = [""] + [codec.category_to_draft(c) for c in editor.selectable_categories]
    if draft.get("category") and draft.get("category") not in options:
        options.append(draft.get("category"))
    _seed("tx_category", draft.get("category"))
    st.selectbox(
        "Which category?",
        options=options,
        key="tx_category",
        on_change=_on_text,
        args=("category", "tx_category"),
        format_func=lambda v: codec.category_label(codec.draft_to_category(v)) if v else "",
    )
    if draft.category_description:
        st.caption(draft.category_description)
    _field_error("category")

    try:
        _seed("tx_date", codec.draft_to_date(draft.get("date")))
    except DraftValidationError:
        _seed("tx_date", None)
    st.date_input("Which date?", key="tx_date", on_change=_on_date)
    _field_error("date")

    account_options = [""] + editor.account_names
    if draft.get("account") and draft.get("account") not in account_options:
        account_options.append(draft.get("account"))
    _seed("tx_account", draft.get("account"))
    st.selectbox(
        "Which account?",
        options=account_options,
        key="tx_account",
        on_change=_on_text,
        args=("account", "tx_account"),
    )
    _field_error("account")

    _seed("tx_note", draft.get("note"))
    st.text_area(
        "Notes:",
        key="tx_note",
        on_change=_on_text,
        args=("note", "tx_note"),
        placeholder="(optional) take any notes you may find useful about this transaction.",
    )

    st.button(editor.submit_label, type="primary", on_click=_on_submit, disabled=editor.submitting)


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Application", "app"),
        ("Google Sheets (Storage)", "google_sheets"),
    ]

    for name, key in services:
        if key not in status:
            st.info(f"ℹ️ {name} - Not in use")
        elif status[key]:
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file. "
        "Set `STORAGE_BACKEND=google_sheets` and the `GOOGLE_SHEETS_` "
        "variables to keep transactions in a spreadsheet."
    )


if __name__ == "__main__":
    main()
