"""
Google Sheets Document Store

DESIGN DECISION: The hosted backend is a spreadsheet the owner can open
and read directly, and that needs no server of its own.

TRADEOFFS:
- A few thousand rows per owner at most
- Each create or update is one row write; there is no multi-row commit
- Every read loads the whole worksheet and filters by owner in Python

Each collection is one worksheet. Every row starts with the document id
and the owner id, followed by the collection's fields in a fixed order.

Connecting and reading are retried. Writes are not: a failed create or
update is reported to the caller, who decides whether to submit again.
"""

from typing import Optional
from uuid import uuid4

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from finance_tracker.config import GoogleSheetsSettings, get_settings
from finance_tracker.services.storage.interface import (
    ConnectionError,
    Document,
    DocumentStore,
    NotFoundError,
    StorageError,
)


KEY_COLUMNS = ["id", "owner_id"]

# Field columns per collection, after the key columns
COLLECTION_COLUMNS = {
    "transactions": [
        "description",
        "type",
        "amount_minor_units",
        "category",
        "occurred_at",
        "account",
        "note",
        "created_at",
    ],
    "categories": [
        "value",
        "type",
        "ordering",
        "description",
    ],
    "accounts": [
        "name",
    ],
    "audit_log": [
        "event_id",
        "timestamp",
        "event_type",
        "severity",
        "entity_type",
        "entity_id",
        "correlation_id",
        "description",
        "details_json",
        "error_message",
        "is_user_action",
    ],
}


def columns_for(collection: str) -> list[str]:
    """Full header row of a collection's worksheet."""
    try:
        return KEY_COLUMNS + COLLECTION_COLUMNS[collection]
    except KeyError:
        raise StorageError(f"Unknown collection: {collection}")


class GoogleSheetsClient:
    """
    Opens the spreadsheet and its worksheets, authenticating once.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Authorize with the service account key file (retried).
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """The spreadsheet named by the settings, opened once."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_collection_sheet(self, collection: str) -> gspread.Worksheet:
        """Get or create the worksheet holding a collection."""
        columns = columns_for(collection)
        title = self._settings.sheet_name_for(collection)
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # First write to this collection: start the sheet with its header row
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet


class GoogleSheetsDocumentStore(DocumentStore):
    """
    Google Sheets implementation of the document store.

    One document per row. Missing trailing cells read back as "".
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _document_to_row(
        self,
        collection: str,
        document_id: str,
        owner_id: str,
        document: Document,
    ) -> list:
        """Convert a document to a spreadsheet row."""
        row = [document_id, owner_id]
        for column in COLLECTION_COLUMNS[collection]:
            value = document.get(column)
            row.append("" if value is None else value)
        return row

    def _row_to_document(self, collection: str, row: list) -> Document:
        """Convert a spreadsheet row to a document (owner column dropped)."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        document = {"id": safe_get(0)}
        for offset, column in enumerate(COLLECTION_COLUMNS[collection], start=len(KEY_COLUMNS)):
            document[column] = safe_get(offset)
        return document

    async def create(
        self,
        collection: str,
        owner_id: str,
        document: Document,
    ) -> str:
        """Append a new document row."""
        columns_for(collection)
        document_id = uuid4().hex
        try:
            sheet = self._client.get_collection_sheet(collection)
            row = self._document_to_row(collection, document_id, owner_id, document)
            sheet.append_row(row, value_input_option="RAW")
            return document_id
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to create document in {collection}: {e}")

    async def update(
        self,
        collection: str,
        owner_id: str,
        document: Document,
    ) -> None:
        """Overwrite an existing document row, keeping its created_at."""
        columns = columns_for(collection)
        document_id = document.get("id")
        try:
            sheet = self._client.get_collection_sheet(collection)
            all_rows = sheet.get_all_values()

            # Find the row with this id (row 1 is the header)
            for idx, row in enumerate(all_rows[1:], start=2):
                if len(row) > 1 and row[0] == document_id and row[1] == owner_id:
                    merged = dict(document)
                    if "created_at" in columns:
                        existing = self._row_to_document(collection, row)
                        if existing.get("created_at"):
                            merged["created_at"] = existing["created_at"]

                    new_row = self._document_to_row(collection, document_id, owner_id, merged)
                    sheet.update(
                        range_name=f"A{idx}",
                        values=[new_row],
                        value_input_option="RAW",
                    )
                    return

            raise NotFoundError(f"Document not found in {collection}: {document_id}")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update document in {collection}: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def fetch_all(
        self,
        collection: str,
        owner_id: str,
    ) -> list[Document]:
        """Read every document of an owner."""
        columns_for(collection)
        try:
            sheet = self._client.get_collection_sheet(collection)
            all_rows = sheet.get_all_values()[1:]  # Skip header

            return [
                self._row_to_document(collection, row)
                for row in all_rows
                if len(row) > 1 and row[0] and row[1] == owner_id
            ]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to fetch {collection}: {e}")
