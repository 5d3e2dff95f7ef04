"""
Submit Coordinator

Turns a finished draft into exactly one store call and then runs the
post-commit effects in a fixed order.

FLOW:
1. Validate the draft (no store call when it fails)
2. Encode it into a Transaction
3. Create (no id) or update (id) - never both, never neither
4. After the store call returns: reset draft, clear the host's
   selection, refresh the recent list, refresh the month list,
   dismiss the editor
5. On a store failure the error propagates and the draft is untouched

Nothing is retried. At most one submit per draft is in flight; a second
one is refused instead of racing the first.

DESIGN DECISION: Each submit carries a cancellation token. An editor torn
down mid-submit cancels it; the store call still completes, but step 4 is
skipped so nothing touches an editor that no longer exists.
"""

import weakref
from datetime import datetime, tzinfo
from typing import Awaitable, Callable, Optional

import structlog
from pydantic import ValidationError

from finance_tracker.audit import AuditLogger, create_correlation_id
from finance_tracker.editor import codec
from finance_tracker.editor.draft import RecordDraft, issue_to_error
from finance_tracker.editor.errors import DraftValidationError, SubmitInProgressError
from finance_tracker.editor.host import EditorHost
from finance_tracker.models.transaction import (
    Transaction,
    TransactionType,
    YearMonth,
    utc_now,
)
from finance_tracker.services.storage import DocumentStore


TRANSACTIONS_COLLECTION = "transactions"

# Transaction field name -> draft field name, for error reporting
_DRAFT_FIELD = {
    "amount_minor_units": "amount",
    "occurred_date": "date",
}

RefreshRecent = Callable[[], Awaitable[None]]
RefreshForPeriod = Callable[[YearMonth], Awaitable[None]]

logger = structlog.get_logger(__name__)


class CancellationToken:
    """Set once the editor that started a submit has gone away."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def encode_draft(
    draft: RecordDraft,
    existing_record_id: Optional[str],
    now: datetime,
) -> Transaction:
    """
    Build the storage-shape Transaction from a validated draft.

    New records are stamped with ``now``. Updates carry the id and keep
    the ``created_at`` of the snapshot the draft was loaded from.

    Raises:
        DraftValidationError: If a value passes the required-field check
            but is still rejected by the Transaction model
    """
    values = draft.values

    if existing_record_id is None:
        created_at = now
    else:
        snapshot = draft.snapshot
        created_at = snapshot.created_at if snapshot else None

    try:
        return Transaction(
            id=existing_record_id,
            description=values["description"],
            type=TransactionType(values["type"]),
            amount_minor_units=codec.masked_to_amount(values["amount"]),
            category=codec.draft_to_category(values["category"]).value,
            occurred_date=codec.draft_to_date(values["date"]),
            account=values["account"],
            note=values["note"],
            created_at=created_at,
        )
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error.get("loc") else "record"
        raise DraftValidationError(_DRAFT_FIELD.get(field, field), error["msg"])


def dismiss_editor(host: EditorHost) -> None:
    """Ask the host to put the editor away, whichever way it shows it."""
    host.close()
    host.navigate_back()


class SubmitCoordinator:
    """
    Validates, encodes and commits drafts for one owner's transactions.

    The create-vs-update decision is made here and only here.
    """

    def __init__(
        self,
        store: DocumentStore,
        owner_id: str,
        host: EditorHost,
        refresh_recent: RefreshRecent,
        refresh_for_period: RefreshForPeriod,
        period: YearMonth,
        audit_logger: Optional[AuditLogger] = None,
        tz: Optional[tzinfo] = None,
        clock: Callable[[], datetime] = utc_now,
        collection: str = TRANSACTIONS_COLLECTION,
    ):
        self._store = store
        self._owner_id = owner_id
        self._host = host
        self._refresh_recent = refresh_recent
        self._refresh_for_period = refresh_for_period
        self.period = period
        self._audit_logger = audit_logger
        self._tz = tz
        self._clock = clock
        self._collection = collection
        self._pending: "weakref.WeakSet[RecordDraft]" = weakref.WeakSet()

    def is_pending(self, draft: RecordDraft) -> bool:
        return draft in self._pending

    async def submit(
        self,
        draft: RecordDraft,
        existing_record_id: Optional[str] = None,
        token: Optional[CancellationToken] = None,
    ) -> Transaction:
        """
        Commit a draft.

        Returns:
            The saved Transaction, with its id

        Raises:
            SubmitInProgressError: If this draft is already being submitted
            DraftValidationError: If validation fails (no store call made)
            StorageError: If the store call fails (draft left as it was)
        """
        if draft in self._pending:
            raise SubmitInProgressError("A submit is already in progress for this transaction")

        token = token or CancellationToken()
        correlation_id = create_correlation_id()

        result = draft.validate()
        if not result.is_valid:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    field=result.issue.field,
                    issue_type=result.issue.issue_type,
                    message=result.issue.message,
                    correlation_id=correlation_id,
                )
            raise issue_to_error(result.issue)

        record = encode_draft(draft, existing_record_id, self._clock())

        # Pending until the draft is reset (or left alone when cancelled)
        self._pending.add(draft)
        try:
            try:
                saved = await self._commit(record)
            except Exception as e:
                logger.warning(
                    "transaction_save_failed",
                    transaction_id=existing_record_id,
                    error=str(e),
                )
                if self._audit_logger:
                    await self._audit_logger.log_save_failed(
                        entity_id=existing_record_id,
                        error_message=str(e),
                        correlation_id=correlation_id,
                    )
                raise

            if self._audit_logger:
                await self._audit_logger.log_transaction_saved(
                    transaction_id=saved.id,
                    transaction_type=saved.type.value,
                    amount_minor_units=saved.amount_minor_units,
                    created=existing_record_id is None,
                    correlation_id=correlation_id,
                )

            if token.cancelled:
                if self._audit_logger:
                    await self._audit_logger.log_effects_suppressed(
                        entity_id=saved.id,
                        correlation_id=correlation_id,
                    )
                return saved

            await self._apply_effects(draft)
            return saved
        finally:
            self._pending.discard(draft)

    async def _commit(self, record: Transaction) -> Transaction:
        """The one store call of a submit."""
        document = record.to_document(self._tz)
        if record.id is None:
            document_id = await self._store.create(self._collection, self._owner_id, document)
            return record.model_copy(update={"id": document_id})

        await self._store.update(self._collection, self._owner_id, document)
        return record

    async def _apply_effects(self, draft: RecordDraft) -> None:
        """
        Post-commit effects, strictly in order.

        The record is already saved, so a failing list refresh is logged
        and the remaining effects still run.
        """
        draft.reset()
        self._host.clear_current_record()

        try:
            await self._refresh_recent()
        except Exception as e:
            logger.error("recent_refresh_failed", error=str(e))

        try:
            await self._refresh_for_period(self.period)
        except Exception as e:
            logger.error("period_refresh_failed", period=str(self.period), error=str(e))

        dismiss_editor(self._host)
