"""Shared fixtures for the finance tracker tests."""

from datetime import date, datetime, timezone

import pytest

from finance_tracker.config import get_settings
from finance_tracker.editor import SessionEditorHost
from finance_tracker.models.transaction import (
    Account,
    Category,
    CategoryType,
    Transaction,
    TransactionType,
    YearMonth,
)
from finance_tracker.services.storage import InMemoryDocumentStore, StorageError


OWNER = "user-1"
FIXED_NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


class RecordingStore(InMemoryDocumentStore):
    """In-memory store that records every write and can be told to fail."""

    def __init__(self):
        super().__init__()
        self.creates: list[tuple[str, dict]] = []
        self.updates: list[tuple[str, dict]] = []
        self.fail_writes = False

    async def create(self, collection, owner_id, document):
        if self.fail_writes:
            raise StorageError("store unavailable")
        self.creates.append((collection, dict(document)))
        return await super().create(collection, owner_id, document)

    async def update(self, collection, owner_id, document):
        if self.fail_writes:
            raise StorageError("store unavailable")
        self.updates.append((collection, dict(document)))
        await super().update(collection, owner_id, document)


class RefreshRecorder:
    """Stands in for the recent/monthly list refreshers."""

    def __init__(self, fail: bool = False):
        self.calls: list = []
        self.fail = fail

    async def recent(self):
        self.calls.append("recent")
        if self.fail:
            raise StorageError("refresh failed")

    async def for_period(self, period):
        self.calls.append(("period", period))


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def host():
    return SessionEditorHost()


@pytest.fixture
def refresher():
    return RefreshRecorder()


@pytest.fixture
def period():
    return YearMonth(year=2024, month=3)


@pytest.fixture
def categories():
    return [
        Category(id="c1", value="Food", type=CategoryType.EXPENSE, ordering="01", description="Groceries and eating out"),
        Category(id="c2", value="Salary", type=CategoryType.INCOME, ordering="02"),
        Category(id="c3", value="Gift", type=CategoryType.OTHER),
    ]


@pytest.fixture
def accounts():
    return [Account(id="a1", name="Checking"), Account(id="a2", name="Savings")]


@pytest.fixture
def food(categories):
    return categories[0]


@pytest.fixture
def existing_transaction():
    return Transaction(
        id="abc",
        description="Groceries",
        type=TransactionType.EXPENSE,
        amount_minor_units=2599,
        category="Food",
        occurred_date=date(2024, 2, 28),
        account="Checking",
        note="weekly shop",
        created_at=datetime(2024, 2, 28, 18, 0, tzinfo=timezone.utc),
    )
