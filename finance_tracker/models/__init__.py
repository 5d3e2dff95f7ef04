"""
Data Models Package

This package contains all Pydantic models used in the Finance Tracker.
Everything persisted must conform to these schemas.
"""

from finance_tracker.models.transaction import (
    Account,
    Category,
    CategoryType,
    Transaction,
    TransactionType,
    YearMonth,
    utc_now,
)
from finance_tracker.models.validation import ValidationIssue, ValidationResult
from finance_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "Account",
    "Category",
    "CategoryType",
    "Transaction",
    "TransactionType",
    "YearMonth",
    "utc_now",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
