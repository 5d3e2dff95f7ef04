"""Transaction lists: fetching, caches and the summary panel."""

from finance_tracker.lists.cache import MonthlyTransactionsCache, RecentTransactionsCache
from finance_tracker.lists.catalog import (
    ACCOUNTS_COLLECTION,
    CATEGORIES_COLLECTION,
    fetch_accounts,
    fetch_categories,
    fetch_transactions,
)
from finance_tracker.lists.summary import TransactionsSummary, summarize

__all__ = [
    "ACCOUNTS_COLLECTION",
    "CATEGORIES_COLLECTION",
    "MonthlyTransactionsCache",
    "RecentTransactionsCache",
    "TransactionsSummary",
    "fetch_accounts",
    "fetch_categories",
    "fetch_transactions",
    "summarize",
]
