"""
Transaction List Caches

The two lists the editor refreshes after every successful submit:
the few most recent transactions, and the transactions of the month
being viewed. Each cache re-reads the store on refresh and keeps its
own copy; the editor never looks inside.
"""

from datetime import tzinfo
from typing import Optional

from finance_tracker.lists.catalog import fetch_transactions
from finance_tracker.models.transaction import Transaction, YearMonth
from finance_tracker.services.storage import DocumentStore


class RecentTransactionsCache:
    """The newest ``limit`` transactions of an owner."""

    def __init__(
        self,
        store: DocumentStore,
        owner_id: str,
        limit: int = 4,
        tz: Optional[tzinfo] = None,
    ):
        self._store = store
        self._owner_id = owner_id
        self._limit = limit
        self._tz = tz
        self.items: list[Transaction] = []

    async def refresh(self) -> None:
        transactions = await fetch_transactions(self._store, self._owner_id, self._tz)
        self.items = transactions[:self._limit]


class MonthlyTransactionsCache:
    """All transactions of an owner dated within one month, newest first."""

    def __init__(
        self,
        store: DocumentStore,
        owner_id: str,
        tz: Optional[tzinfo] = None,
    ):
        self._store = store
        self._owner_id = owner_id
        self._tz = tz
        self.period: Optional[YearMonth] = None
        self.items: list[Transaction] = []

    async def refresh(self, period: YearMonth) -> None:
        transactions = await fetch_transactions(self._store, self._owner_id, self._tz)
        self.period = period
        self.items = [t for t in transactions if period.contains(t.occurred_date)]

    @property
    def income_minor_units(self) -> int:
        return sum(t.amount_minor_units for t in self.items if t.type.value == "income")

    @property
    def expense_minor_units(self) -> int:
        return sum(t.amount_minor_units for t in self.items if t.type.value == "expense")

    @property
    def balance_minor_units(self) -> int:
        return self.income_minor_units - self.expense_minor_units
