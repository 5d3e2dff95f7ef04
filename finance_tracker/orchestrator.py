"""
Main Orchestrator for Finance Tracker

This module ties together all the components for one user's session:
the document store, the audit logger, the category/account lists, the
two list caches and the editors opened on top of them.

DESIGN DECISION: The session hands every editor its context explicitly
(store, owner, lists, refreshers, viewed month). Editors never reach
into the session to find out what they are editing.
"""

from datetime import tzinfo
from typing import Optional

import structlog

from finance_tracker.audit import AuditLogger
from finance_tracker.config import get_settings
from finance_tracker.editor import EditorHost, RecordEditor
from finance_tracker.lists import (
    MonthlyTransactionsCache,
    RecentTransactionsCache,
    fetch_accounts,
    fetch_categories,
)
from finance_tracker.models import local_date
from finance_tracker.models.transaction import Account, Category, YearMonth
from finance_tracker.services.storage import DocumentStore, InMemoryDocumentStore


logger = structlog.get_logger(__name__)


class TrackerSession:
    """
    One owner's view of the tracker.

    Holds the read-only catalog lists and the list caches, and builds
    editors wired to them.
    """

    def __init__(
        self,
        store: DocumentStore,
        owner_id: str,
        audit_logger: Optional[AuditLogger] = None,
        recent_limit: int = 4,
        tz: Optional[tzinfo] = None,
        period: Optional[YearMonth] = None,
    ):
        self.store = store
        self.owner_id = owner_id
        self.audit_logger = audit_logger
        self.tz = tz
        self.period = period or YearMonth.of(local_date.today(tz))
        self.recent = RecentTransactionsCache(store, owner_id, limit=recent_limit, tz=tz)
        self.monthly = MonthlyTransactionsCache(store, owner_id, tz=tz)
        self.categories: list[Category] = []
        self.accounts: list[Account] = []

    async def load_catalog(self) -> None:
        """Fetch the category and account lists."""
        self.categories = await fetch_categories(self.store, self.owner_id)
        self.accounts = await fetch_accounts(self.store, self.owner_id)

    async def refresh_lists(self) -> None:
        await self.recent.refresh()
        await self.monthly.refresh(self.period)

    async def start(self) -> None:
        """Load everything a freshly opened session shows."""
        await self.load_catalog()
        await self.refresh_lists()

    def new_editor(self, host: EditorHost) -> RecordEditor:
        """An editor for the host's current selection (or a new transaction)."""
        return RecordEditor(
            store=self.store,
            owner_id=self.owner_id,
            host=host,
            categories=self.categories,
            accounts=self.accounts,
            refresh_recent=self.recent.refresh,
            refresh_for_period=self.monthly.refresh,
            period=self.period,
            audit_logger=self.audit_logger,
            tz=self.tz,
        )


def create_store(use_storage: bool = True) -> DocumentStore:
    """
    The configured document store.

    Falls back to the in-memory store when Google Sheets is not selected
    or cannot be configured.
    """
    app_settings = get_settings().app
    if not use_storage or app_settings.storage_backend == "memory":
        return InMemoryDocumentStore()

    try:
        from finance_tracker.services.storage.google_sheets import (
            GoogleSheetsClient,
            GoogleSheetsDocumentStore,
        )
        return GoogleSheetsDocumentStore(GoogleSheetsClient())
    except Exception as e:
        # Storage not configured - continue without it
        logger.warning("storage_not_configured", error=str(e))
        return InMemoryDocumentStore()


def create_app_components(use_storage: bool = True) -> TrackerSession:
    """
    Factory function to create the session for the configured owner.

    Args:
        use_storage: Whether to use the configured storage backend.
                     Set to False for an in-memory session.
    """
    app_settings = get_settings().app
    store = create_store(use_storage)
    audit_logger = AuditLogger(store, app_settings.owner_id)

    return TrackerSession(
        store=store,
        owner_id=app_settings.owner_id,
        audit_logger=audit_logger,
        recent_limit=app_settings.recent_transactions_limit,
        tz=app_settings.tzinfo,
    )
