"""
Catalog and Transaction Fetching

Reads an owner's documents from the store and turns them into models.
Categories and accounts are the read-only lists the editor is given;
transactions feed the list caches.

Rows that no longer fit the schema are skipped with a warning rather
than failing the whole list.
"""

from datetime import tzinfo
from typing import Optional

import structlog
from pydantic import ValidationError

from finance_tracker.models.transaction import Account, Category, Transaction
from finance_tracker.services.storage import DocumentStore


CATEGORIES_COLLECTION = "categories"
ACCOUNTS_COLLECTION = "accounts"

logger = structlog.get_logger(__name__)


async def fetch_transactions(
    store: DocumentStore,
    owner_id: str,
    tz: Optional[tzinfo] = None,
    collection: str = "transactions",
) -> list[Transaction]:
    """All of an owner's transactions, newest first."""
    transactions = []
    for document in await store.fetch_all(collection, owner_id):
        try:
            transactions.append(Transaction.from_document(document, tz))
        except (ValidationError, KeyError, ValueError) as e:
            logger.warning("skipped_malformed_transaction", id=document.get("id"), error=str(e))

    return sort_newest_first(transactions)


def sort_newest_first(transactions: list[Transaction]) -> list[Transaction]:
    """By occurred date, then creation time, newest first."""
    return sorted(
        transactions,
        key=lambda t: (t.occurred_date, t.created_at.timestamp() if t.created_at else 0.0),
        reverse=True,
    )


async def fetch_categories(store: DocumentStore, owner_id: str) -> list[Category]:
    """Categories sorted by ordering hint, then value."""
    categories = []
    for document in await store.fetch_all(CATEGORIES_COLLECTION, owner_id):
        try:
            categories.append(Category.from_document(document))
        except (ValidationError, KeyError, ValueError) as e:
            logger.warning("skipped_malformed_category", id=document.get("id"), error=str(e))

    categories.sort(key=lambda c: (c.ordering or "", c.value.lower()))
    return categories


async def fetch_accounts(store: DocumentStore, owner_id: str) -> list[Account]:
    accounts = []
    for document in await store.fetch_all(ACCOUNTS_COLLECTION, owner_id):
        try:
            accounts.append(Account.from_document(document))
        except (ValidationError, KeyError) as e:
            logger.warning("skipped_malformed_account", id=document.get("id"), error=str(e))
    return accounts
