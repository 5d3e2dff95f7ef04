"""
Audit Logger

DESIGN DECISION: Every editor action that touches storage is logged.
This provides:
1. Complete traceability of creates and updates
2. Debugging capability when a submit fails
3. User can see history of their edits

The audit logger:
- Is async so it can share the editor's event loop
- Gracefully handles failures (a failed audit write never fails a submit)
- Supports correlation IDs to trace one submit attempt end to end
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_tracker.models.audit import AuditEvent, AuditEventBuilder
from finance_tracker.services.storage import DocumentStore


AUDIT_COLLECTION = "audit_log"


# JSON logs, one object per line
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Records what happened to transactions.

    Every event goes to the structured log; when a store and owner are
    given it is also written to the owner's audit collection.
    """

    def __init__(
        self,
        store: Optional[DocumentStore] = None,
        owner_id: Optional[str] = None,
    ):
        """
        Initialize audit logger.

        Args:
            store: Where audit documents are written.
                   None keeps events in the structured log only.
            owner_id: Owner the audit documents are filed under.
        """
        self._store = store
        self._owner_id = owner_id
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Record one audit event.

        Returns False only when writing it to the store failed.
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._store and self._owner_id:
            try:
                await self._store.create(AUDIT_COLLECTION, self._owner_id, event.to_document())
                return True
            except Exception as e:
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_editor_opened(
        self,
        mode: str,
        entity_id: Optional[str],
        correlation_id: UUID,
    ) -> None:
        """Log the editor being opened for create or edit."""
        await self.log(AuditEventBuilder.editor_opened(
            mode=mode,
            entity_id=entity_id,
            correlation_id=correlation_id,
        ))

    async def log_editor_cancelled(
        self,
        entity_id: Optional[str],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.editor_cancelled(
            entity_id=entity_id,
            correlation_id=correlation_id,
        ))

    async def log_validation_failed(
        self,
        field: str,
        issue_type: str,
        message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a submit blocked by validation."""
        await self.log(AuditEventBuilder.validation_failed(
            field=field,
            issue_type=issue_type,
            message=message,
            correlation_id=correlation_id,
        ))

    async def log_transaction_saved(
        self,
        transaction_id: str,
        transaction_type: str,
        amount_minor_units: int,
        created: bool,
        correlation_id: UUID,
    ) -> None:
        """Log a successful create or update."""
        build = (
            AuditEventBuilder.transaction_created
            if created
            else AuditEventBuilder.transaction_updated
        )
        await self.log(build(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount_minor_units=amount_minor_units,
            correlation_id=correlation_id,
        ))

    async def log_save_failed(
        self,
        entity_id: Optional[str],
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.save_failed(
            entity_id=entity_id,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    async def log_effects_suppressed(
        self,
        entity_id: Optional[str],
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.effects_suppressed(
            entity_id=entity_id,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """New id tying together the events of one editor session or submit."""
    return uuid4()
