"""
Audit Models for Finance Tracker

Every significant editor action is logged for audit purposes.
This provides:
1. Traceability of every create and update
2. Debugging information when a submit goes wrong
3. A history the user can look back on

DESIGN DECISION: Audit events are only ever appended. Editing a
transaction adds an event; it never rewrites an earlier one.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every step of the editor lifecycle has its own event type.
    """
    # Editor lifecycle
    EDITOR_OPENED = "editor_opened"
    EDITOR_CANCELLED = "editor_cancelled"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UPDATED = "transaction_updated"
    SAVE_FAILED = "save_failed"
    EFFECTS_SUPPRESSED = "effects_suppressed"


class AuditSeverity(str, Enum):
    """How loudly an audit event is logged."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    One thing that happened to a transaction or to the editor.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Subject of the event
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Store id of the entity this event relates to"
    )

    # Shared by the events of one editor session or submit
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one submit attempt)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Set on failures only
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Keyword arguments for a structlog call.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_document(self) -> dict[str, Any]:
        """
        Convert to a flat document for the ``audit_log`` collection.

        Details are JSON encoded so every value is a string.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type or "",
            "entity_id": self.entity_id or "",
            "correlation_id": str(self.correlation_id) if self.correlation_id else "",
            "description": self.description,
            "details_json": json.dumps(self.details) if self.details else "",
            "error_message": self.error_message or "",
            "is_user_action": str(self.is_user_action),
        }


class AuditEventBuilder:
    """
    One constructor per editor event, so callers never assemble events by hand.

    Usage:
        event = AuditEventBuilder.editor_opened(mode, correlation_id)
        event = AuditEventBuilder.transaction_created(transaction_id, ...)
    """

    @staticmethod
    def editor_opened(
        mode: str,
        entity_id: Optional[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EDITOR_OPENED,
            entity_type="transaction",
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Transaction editor opened in {mode} mode",
            details={"mode": mode},
            is_user_action=True,
        )

    @staticmethod
    def editor_cancelled(
        entity_id: Optional[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EDITOR_CANCELLED,
            entity_type="transaction",
            entity_id=entity_id,
            correlation_id=correlation_id,
            description="User closed the transaction editor without saving",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        field: str,
        issue_type: str,
        message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            correlation_id=correlation_id,
            description=f"Submit blocked: {field} is {issue_type}",
            details={
                "field": field,
                "issue_type": issue_type,
                "message": message,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_created(
        transaction_id: str,
        transaction_type: str,
        amount_minor_units: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction created: {transaction_type} of {amount_minor_units} cents",
            details={
                "type": transaction_type,
                "amount_minor_units": amount_minor_units,
            },
        )

    @staticmethod
    def transaction_updated(
        transaction_id: str,
        transaction_type: str,
        amount_minor_units: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UPDATED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction updated: {transaction_type} of {amount_minor_units} cents",
            details={
                "type": transaction_type,
                "amount_minor_units": amount_minor_units,
            },
        )

    @staticmethod
    def save_failed(
        entity_id: Optional[str],
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="transaction",
            entity_id=entity_id,
            correlation_id=correlation_id,
            description="Saving the transaction failed",
            error_message=error_message,
        )

    @staticmethod
    def effects_suppressed(
        entity_id: Optional[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EFFECTS_SUPPRESSED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            entity_id=entity_id,
            correlation_id=correlation_id,
            description="Editor closed before the save finished; refresh and reset skipped",
        )

