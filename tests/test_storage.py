"""
Tests for the document stores

The Google Sheets store is tested against an in-process fake worksheet;
no network calls are made.
"""

import pytest

from finance_tracker.services.storage import (
    InMemoryDocumentStore,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.google_sheets import (
    COLLECTION_COLUMNS,
    GoogleSheetsDocumentStore,
    columns_for,
)


TRANSACTION = {
    "description": "Coffee",
    "type": "expense",
    "amount_minor_units": 450,
    "category": "Food",
    "occurred_at": "2024-03-01T00:00:00+00:00",
    "account": "Checking",
    "note": "",
    "created_at": "2024-03-01T09:30:00+00:00",
}


class FakeWorksheet:
    """Just enough of gspread.Worksheet for the store."""

    def __init__(self, header):
        self.rows = [list(header)]

    def append_row(self, row, value_input_option=None):
        self.rows.append([str(v) for v in row])

    def get_all_values(self):
        return [list(r) for r in self.rows]

    def update(self, range_name, values, value_input_option=None):
        index = int(range_name[1:]) - 1
        self.rows[index] = [str(v) for v in values[0]]


class FakeSheetsClient:
    def __init__(self):
        self.sheets = {}

    def get_collection_sheet(self, collection):
        if collection not in self.sheets:
            self.sheets[collection] = FakeWorksheet(columns_for(collection))
        return self.sheets[collection]


class TestInMemoryStore:

    @pytest.mark.asyncio
    async def test_create_assigns_id(self):
        store = InMemoryDocumentStore()
        document_id = await store.create("transactions", "u1", TRANSACTION)

        documents = await store.fetch_all("transactions", "u1")
        assert document_id
        assert documents == [{**TRANSACTION, "id": document_id}]

    @pytest.mark.asyncio
    async def test_documents_are_copies(self):
        store = InMemoryDocumentStore()
        document = dict(TRANSACTION)
        await store.create("transactions", "u1", document)
        document["description"] = "changed"

        fetched = await store.fetch_all("transactions", "u1")
        fetched[0]["description"] = "changed again"

        assert (await store.fetch_all("transactions", "u1"))[0]["description"] == "Coffee"

    @pytest.mark.asyncio
    async def test_update_keeps_created_at(self):
        store = InMemoryDocumentStore()
        document_id = await store.create("transactions", "u1", TRANSACTION)

        await store.update(
            "transactions",
            "u1",
            {**TRANSACTION, "id": document_id, "description": "Tea", "created_at": "2030-01-01T00:00:00+00:00"},
        )

        [stored] = await store.fetch_all("transactions", "u1")
        assert stored["description"] == "Tea"
        assert stored["created_at"] == TRANSACTION["created_at"]

    @pytest.mark.asyncio
    async def test_update_unknown_id(self):
        store = InMemoryDocumentStore()
        with pytest.raises(NotFoundError):
            await store.update("transactions", "u1", {**TRANSACTION, "id": "missing"})

    @pytest.mark.asyncio
    async def test_owners_are_separate(self):
        store = InMemoryDocumentStore()
        document_id = await store.create("transactions", "u1", TRANSACTION)

        assert await store.fetch_all("transactions", "u2") == []
        with pytest.raises(NotFoundError):
            await store.update("transactions", "u2", {**TRANSACTION, "id": document_id})


class TestGoogleSheetsStore:

    def test_columns_for_unknown_collection(self):
        with pytest.raises(StorageError):
            columns_for("bills")

    def test_transaction_columns(self):
        assert columns_for("transactions")[:2] == ["id", "owner_id"]
        assert "occurred_at" in COLLECTION_COLUMNS["transactions"]

    @pytest.mark.asyncio
    async def test_create_appends_one_row(self):
        client = FakeSheetsClient()
        store = GoogleSheetsDocumentStore(client)

        document_id = await store.create("transactions", "u1", TRANSACTION)

        rows = client.sheets["transactions"].rows
        assert len(rows) == 2
        assert rows[1][:3] == [document_id, "u1", "Coffee"]

    @pytest.mark.asyncio
    async def test_fetch_all_filters_by_owner(self):
        client = FakeSheetsClient()
        store = GoogleSheetsDocumentStore(client)
        document_id = await store.create("transactions", "u1", TRANSACTION)
        await store.create("transactions", "u2", TRANSACTION)

        documents = await store.fetch_all("transactions", "u1")

        assert len(documents) == 1
        assert documents[0]["id"] == document_id
        assert documents[0]["amount_minor_units"] == "450"
        assert "owner_id" not in documents[0]

    @pytest.mark.asyncio
    async def test_update_rewrites_row_and_keeps_created_at(self):
        client = FakeSheetsClient()
        store = GoogleSheetsDocumentStore(client)
        document_id = await store.create("transactions", "u1", TRANSACTION)

        await store.update(
            "transactions",
            "u1",
            {**TRANSACTION, "id": document_id, "amount_minor_units": 500, "created_at": ""},
        )

        [stored] = await store.fetch_all("transactions", "u1")
        assert stored["amount_minor_units"] == "500"
        assert stored["created_at"] == TRANSACTION["created_at"]
        assert len(client.sheets["transactions"].rows) == 2

    @pytest.mark.asyncio
    async def test_update_wrong_owner_is_not_found(self):
        client = FakeSheetsClient()
        store = GoogleSheetsDocumentStore(client)
        document_id = await store.create("transactions", "u1", TRANSACTION)

        with pytest.raises(NotFoundError):
            await store.update("transactions", "u2", {**TRANSACTION, "id": document_id})

    @pytest.mark.asyncio
    async def test_backend_errors_are_wrapped(self):
        class BrokenClient:
            def get_collection_sheet(self, collection):
                raise RuntimeError("quota exceeded")

        store = GoogleSheetsDocumentStore(BrokenClient())

        with pytest.raises(StorageError, match="quota exceeded"):
            await store.create("transactions", "u1", TRANSACTION)
