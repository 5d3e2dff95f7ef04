"""
Transactions Summary

What the summary panel shows. The recent panel shows the first four
transactions with a "see all" link; the full panel shows every
transaction, narrowed to one category and type while a category
filter is active.
"""

from typing import Optional

from pydantic import BaseModel

from finance_tracker.models.transaction import Transaction, TransactionType


RECENT_SUMMARY_SIZE = 4
EMPTY_MESSAGE = "No transactions added yet"


class TransactionsSummary(BaseModel):
    title: str
    transactions: list[Transaction]
    show_see_all: bool
    empty_message: Optional[str] = None


def summarize(
    transactions: list[Transaction],
    all_transactions: bool = False,
    category_filter: Optional[str] = None,
    type_filter: Optional[TransactionType] = None,
) -> TransactionsSummary:
    """
    Build the summary panel for a list of transactions.

    Filters apply only to the full panel. A category filter matches the
    category and the type together.
    """
    if not all_transactions:
        shown = transactions[:RECENT_SUMMARY_SIZE]
    elif category_filter:
        shown = [
            t for t in transactions
            if t.category == category_filter and t.type == type_filter
        ]
    else:
        shown = list(transactions)

    return TransactionsSummary(
        title="Transactions" if all_transactions else "Recent Transactions",
        transactions=shown,
        show_see_all=not all_transactions,
        empty_message=None if shown else EMPTY_MESSAGE,
    )
