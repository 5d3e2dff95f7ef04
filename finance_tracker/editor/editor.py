"""
Record Editor

One editor instance: one draft, one submit coordinator, one host.
This is what a page or modal holds on to while the form is shown.

Everything the editor needs is passed in at construction: the store and
owner, the host, the category and account lists, the list refreshers and
the month currently shown. Nothing is looked up from shared state.
"""

from datetime import tzinfo
from typing import Iterable, Optional

from finance_tracker.audit import AuditLogger, create_correlation_id
from finance_tracker.editor import codec, loader
from finance_tracker.editor.draft import RecordDraft
from finance_tracker.editor.host import EditorHost
from finance_tracker.editor.submit import (
    CancellationToken,
    RefreshForPeriod,
    RefreshRecent,
    SubmitCoordinator,
    dismiss_editor,
)
from finance_tracker.models.transaction import Account, Category, Transaction, YearMonth
from finance_tracker.services.storage import DocumentStore


class RecordEditor:
    """Create-or-edit form state for a single transaction."""

    def __init__(
        self,
        store: DocumentStore,
        owner_id: str,
        host: EditorHost,
        categories: Iterable[Category],
        accounts: Iterable[Account],
        refresh_recent: RefreshRecent,
        refresh_for_period: RefreshForPeriod,
        period: YearMonth,
        audit_logger: Optional[AuditLogger] = None,
        tz: Optional[tzinfo] = None,
    ):
        self._host = host
        self._tz = tz
        self._audit_logger = audit_logger
        self.categories = list(categories)
        self.accounts = list(accounts)
        self._coordinator = SubmitCoordinator(
            store=store,
            owner_id=owner_id,
            host=host,
            refresh_recent=refresh_recent,
            refresh_for_period=refresh_for_period,
            period=period,
            audit_logger=audit_logger,
            tz=tz,
        )
        self._token = CancellationToken()
        self._correlation_id = create_correlation_id()
        self._editing_id: Optional[str] = None
        self.draft: RecordDraft = self._load()

    def _load(self) -> RecordDraft:
        record: Optional[Transaction] = self._host.current_record
        self._editing_id = record.id if record else None
        return loader.load(record, self.categories, self._tz)

    async def open(self) -> RecordDraft:
        """(Re)load the draft from the host's current selection."""
        self.draft = self._load()
        if self._audit_logger:
            await self._audit_logger.log_editor_opened(
                mode="edit" if self.draft.is_edit else "create",
                entity_id=self._editing_id,
                correlation_id=self._correlation_id,
            )
        return self.draft

    # -------------------------------------------------------------------------
    # Derived view state
    # -------------------------------------------------------------------------

    @property
    def period(self) -> YearMonth:
        return self._coordinator.period

    @period.setter
    def period(self, value: YearMonth) -> None:
        self._coordinator.period = value

    @property
    def title(self) -> str:
        return loader.form_title(self.draft)

    @property
    def submit_label(self) -> str:
        return loader.submit_label(self.draft)

    @property
    def selectable_categories(self) -> list[Category]:
        return codec.selectable_categories(self.categories, self.draft.transaction_type)

    @property
    def account_names(self) -> list[str]:
        return [account.name for account in self.accounts]

    @property
    def submitting(self) -> bool:
        return self._coordinator.is_pending(self.draft)

    @property
    def disposed(self) -> bool:
        return self._token.cancelled

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    async def submit(self) -> Transaction:
        """Create or update; see ``SubmitCoordinator.submit``."""
        saved = await self._coordinator.submit(self.draft, self._editing_id, self._token)
        if not self._token.cancelled:
            self._editing_id = None
        return saved

    async def cancel(self) -> None:
        """Discard the draft and put the editor away without saving."""
        entity_id = self._editing_id
        self.draft.reset()
        self._editing_id = None
        self._host.clear_current_record()
        dismiss_editor(self._host)
        if self._audit_logger:
            await self._audit_logger.log_editor_cancelled(
                entity_id=entity_id,
                correlation_id=self._correlation_id,
            )

    def dispose(self) -> None:
        """The host tore the editor down; in-flight submits skip their effects."""
        self._token.cancel()
