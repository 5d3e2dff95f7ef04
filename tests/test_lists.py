"""Tests for transaction fetching, the list caches and the summary panel."""

from datetime import date, datetime, timedelta, timezone

import pytest

from finance_tracker.editor import SessionEditorHost
from finance_tracker.lists import (
    ACCOUNTS_COLLECTION,
    CATEGORIES_COLLECTION,
    MonthlyTransactionsCache,
    RecentTransactionsCache,
    fetch_accounts,
    fetch_categories,
    fetch_transactions,
    summarize,
)
from finance_tracker.lists.summary import EMPTY_MESSAGE
from finance_tracker.models.transaction import Transaction, TransactionType, YearMonth
from finance_tracker.orchestrator import TrackerSession, create_app_components, create_store
from finance_tracker.services.storage import InMemoryDocumentStore

from tests.conftest import OWNER


def make_transaction(description, day, amount=100, type=TransactionType.EXPENSE, category="Food", hour=12):
    return Transaction(
        description=description,
        type=type,
        amount_minor_units=amount,
        category=category,
        occurred_date=day,
        account="Checking",
        created_at=datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc),
    )


async def seed(store, transactions):
    for transaction in transactions:
        await store.create("transactions", OWNER, transaction.to_document(timezone.utc))


class TestFetch:

    @pytest.mark.asyncio
    async def test_fetch_transactions_newest_first(self, store):
        await seed(store, [
            make_transaction("old", date(2024, 1, 5)),
            make_transaction("new", date(2024, 3, 1), hour=8),
            make_transaction("newer same day", date(2024, 3, 1), hour=20),
        ])

        transactions = await fetch_transactions(store, OWNER, timezone.utc)

        assert [t.description for t in transactions] == ["newer same day", "new", "old"]

    @pytest.mark.asyncio
    async def test_malformed_rows_are_skipped(self, store):
        await seed(store, [make_transaction("good", date(2024, 3, 1))])
        await store.create("transactions", OWNER, {"description": "bad", "occurred_at": "never"})

        transactions = await fetch_transactions(store, OWNER, timezone.utc)

        assert [t.description for t in transactions] == ["good"]

    @pytest.mark.asyncio
    async def test_other_owners_are_invisible(self, store):
        await seed(store, [make_transaction("mine", date(2024, 3, 1))])
        assert await fetch_transactions(store, "someone-else", timezone.utc) == []

    @pytest.mark.asyncio
    async def test_fetch_categories_sorted(self, store):
        for value, ordering in (("Zoo", "01"), ("apple", ""), ("Bread", "")):
            await store.create(
                CATEGORIES_COLLECTION,
                OWNER,
                {"value": value, "type": "expense", "ordering": ordering, "description": ""},
            )

        categories = await fetch_categories(store, OWNER)

        assert [c.value for c in categories] == ["apple", "Bread", "Zoo"]

    @pytest.mark.asyncio
    async def test_fetch_accounts(self, store):
        await store.create(ACCOUNTS_COLLECTION, OWNER, {"name": "Checking"})
        accounts = await fetch_accounts(store, OWNER)
        assert [a.name for a in accounts] == ["Checking"]


class TestCaches:

    @pytest.mark.asyncio
    async def test_recent_cache_keeps_the_newest(self, store):
        await seed(store, [make_transaction(f"t{i}", date(2024, 3, i + 1)) for i in range(6)])

        cache = RecentTransactionsCache(store, OWNER, limit=4, tz=timezone.utc)
        await cache.refresh()

        assert [t.description for t in cache.items] == ["t5", "t4", "t3", "t2"]

    @pytest.mark.asyncio
    async def test_monthly_cache_filters_and_totals(self, store):
        await seed(store, [
            make_transaction("rent", date(2024, 3, 1), amount=120000),
            make_transaction("pay", date(2024, 3, 25), amount=300000, type=TransactionType.INCOME, category="Salary"),
            make_transaction("feb", date(2024, 2, 29), amount=999),
        ])

        cache = MonthlyTransactionsCache(store, OWNER, tz=timezone.utc)
        await cache.refresh(YearMonth(year=2024, month=3))

        assert cache.period == YearMonth(year=2024, month=3)
        assert [t.description for t in cache.items] == ["pay", "rent"]
        assert cache.income_minor_units == 300000
        assert cache.expense_minor_units == 120000
        assert cache.balance_minor_units == 180000

    @pytest.mark.asyncio
    async def test_month_boundary_in_far_zone(self, store):
        """A transaction on the 1st stays in its month for a UTC+14 user."""
        tz = timezone(timedelta(hours=14))
        transaction = make_transaction("first", date(2024, 4, 1))
        await store.create("transactions", OWNER, transaction.to_document(tz))

        cache = MonthlyTransactionsCache(store, OWNER, tz=tz)
        await cache.refresh(YearMonth(year=2024, month=4))

        assert [t.occurred_date for t in cache.items] == [date(2024, 4, 1)]


class TestSummary:

    def test_recent_summary_shows_four(self):
        transactions = [make_transaction(f"t{i}", date(2024, 3, 1)) for i in range(6)]
        summary = summarize(transactions)

        assert summary.title == "Recent Transactions"
        assert len(summary.transactions) == 4
        assert summary.show_see_all is True
        assert summary.empty_message is None

    def test_all_summary_with_category_filter(self):
        transactions = [
            make_transaction("food", date(2024, 3, 1)),
            make_transaction("food refund", date(2024, 3, 2), type=TransactionType.INCOME),
            make_transaction("pay", date(2024, 3, 3), type=TransactionType.INCOME, category="Salary"),
        ]

        summary = summarize(
            transactions,
            all_transactions=True,
            category_filter="Food",
            type_filter=TransactionType.EXPENSE,
        )

        assert summary.title == "Transactions"
        assert [t.description for t in summary.transactions] == ["food"]
        assert summary.show_see_all is False

    def test_all_summary_without_filter(self):
        transactions = [make_transaction(f"t{i}", date(2024, 3, 1)) for i in range(6)]
        assert len(summarize(transactions, all_transactions=True).transactions) == 6

    def test_empty(self):
        summary = summarize([])
        assert summary.transactions == []
        assert summary.empty_message == EMPTY_MESSAGE


class TestTrackerSession:

    @pytest.mark.asyncio
    async def test_session_wires_editor_to_caches(self, store, categories):
        for category in categories:
            await store.create(CATEGORIES_COLLECTION, OWNER, category.to_document())
        await store.create(ACCOUNTS_COLLECTION, OWNER, {"name": "Checking"})

        session = TrackerSession(store, OWNER, tz=timezone.utc, period=YearMonth(year=2024, month=3))
        await session.start()
        assert [c.value for c in session.categories] == ["Gift", "Food", "Salary"]
        assert session.recent.items == []

        host = SessionEditorHost()
        editor = session.new_editor(host)
        editor.draft.set_field("description", "Coffee")
        editor.draft.choose_type(TransactionType.EXPENSE)
        editor.draft.set_field("amount", "450")
        editor.draft.select_category(next(c for c in editor.selectable_categories if c.value == "Food"))
        editor.draft.set_field("date", "2024-03-01")
        editor.draft.set_field("account", "Checking")
        await editor.submit()

        assert [t.description for t in session.recent.items] == ["Coffee"]
        assert [t.description for t in session.monthly.items] == ["Coffee"]
        assert host.navigated_back is True

    @pytest.mark.asyncio
    async def test_create_app_components_in_memory(self):
        session = create_app_components(use_storage=False)
        await session.start()

        assert isinstance(session.store, InMemoryDocumentStore)
        assert session.categories == []
        assert session.audit_logger is not None

    def test_unconfigured_sheets_fall_back_to_memory(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "google_sheets")
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)

        assert isinstance(create_store(), InMemoryDocumentStore)
