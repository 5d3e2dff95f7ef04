"""
Core Data Models for Finance Tracker

These models define the strict schemas for everything that is persisted:
transactions, the categories they are filed under and the accounts
they move money through.

DESIGN DECISION: Amounts are integer minor units (cents).
Floating point never touches a stored amount.

DESIGN DECISION: Models convert themselves to and from plain
"documents" (JSON-safe dicts). The document store only ever sees
documents, so any store that can hold a dict can hold a transaction.
"""

from datetime import date, datetime, timezone, tzinfo
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from finance_tracker.models import local_date


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class CategoryType(str, Enum):
    """
    Which transactions a category applies to.

    OTHER categories are offered for income and expense alike.
    """
    INCOME = "income"
    EXPENSE = "expense"
    OTHER = "other"


# =============================================================================
# CATALOG MODELS
# =============================================================================

class Category(BaseModel):
    """
    A category a transaction can be filed under.

    ``value`` is the key stored on transactions and used for matching.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Stable category identifier"
    )
    value: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Key used for matching and storage"
    )
    type: CategoryType = Field(
        ...,
        description="Transaction type this category applies to"
    )
    ordering: Optional[str] = Field(
        default=None,
        description="Display-order hint shown before the value"
    )
    description: Optional[str] = Field(
        default=None,
        description="Long text shown when the category is selected"
    )

    def applies_to(self, transaction_type: Optional[TransactionType]) -> bool:
        """Can this category be chosen for the given transaction type?"""
        if transaction_type is None:
            return False
        if self.type == CategoryType.OTHER:
            return True
        return self.type.value == transaction_type.value

    def to_document(self) -> dict[str, Any]:
        return {
            "value": self.value,
            "type": self.type.value,
            "ordering": self.ordering or "",
            "description": self.description or "",
        }

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Category":
        return cls(
            id=str(document["id"]),
            value=document["value"],
            type=CategoryType(document["type"]),
            ordering=document.get("ordering") or None,
            description=document.get("description") or None,
        )


class Account(BaseModel):
    """An account money moves in or out of."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Account label shown in the selector"
    )

    def to_document(self) -> dict[str, Any]:
        return {"name": self.name}

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Account":
        return cls(id=str(document["id"]), name=document["name"])


# =============================================================================
# CORE TRANSACTION MODEL
# =============================================================================

class Transaction(BaseModel):
    """
    A persisted income or expense.

    ``id`` is None until the store has created the record.
    ``created_at`` is stamped once at creation and never changed by edits.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    # Identity
    id: Optional[str] = Field(
        default=None,
        description="Store-assigned identifier, None before creation"
    )

    # REQUIRED fields
    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the transaction was"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    amount_minor_units: int = Field(
        ...,
        ge=0,
        description="Amount in cents"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category value key"
    )
    occurred_date: date = Field(
        ...,
        description="Local calendar date chosen by the user"
    )
    account: str = Field(
        ...,
        min_length=1,
        description="Account label"
    )

    # Optional
    note: str = Field(
        default="",
        max_length=1000,
        description="Free-form user notes"
    )

    # Timestamps
    created_at: Optional[datetime] = Field(
        default=None,
        description="When the transaction was first created"
    )

    @field_validator("occurred_date", mode="before")
    @classmethod
    def instant_to_calendar_date(cls, v: Any) -> Any:
        """Stores may hand back an instant; keep only its local calendar day."""
        if isinstance(v, datetime):
            return local_date.from_instant(v)
        return v

    @field_validator("note", mode="before")
    @classmethod
    def none_note_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    def to_document(self, tz: Optional[tzinfo] = None) -> dict[str, Any]:
        """
        Convert to the storage shape.

        The occurred date is stored as the local-midnight instant of
        that day. The id is included only once the record has one.
        """
        document: dict[str, Any] = {
            "description": self.description,
            "type": self.type.value,
            "amount_minor_units": self.amount_minor_units,
            "category": self.category,
            "occurred_at": local_date.to_instant(self.occurred_date, tz).isoformat(),
            "account": self.account,
            "note": self.note,
            "created_at": self.created_at.isoformat() if self.created_at else "",
        }
        if self.id is not None:
            document["id"] = self.id
        return document

    @classmethod
    def from_document(
        cls,
        document: dict[str, Any],
        tz: Optional[tzinfo] = None,
    ) -> "Transaction":
        """Build a Transaction from a stored document."""
        occurred = document["occurred_at"]
        if isinstance(occurred, str):
            occurred = datetime.fromisoformat(occurred)
        if isinstance(occurred, datetime):
            occurred = local_date.from_instant(occurred, tz)

        created = document.get("created_at") or None
        if isinstance(created, str):
            created = datetime.fromisoformat(created)

        return cls(
            id=str(document["id"]) if document.get("id") else None,
            description=document["description"],
            type=TransactionType(document["type"]),
            amount_minor_units=int(document["amount_minor_units"]),
            category=document["category"],
            occurred_date=occurred,
            account=document["account"],
            note=document.get("note") or "",
            created_at=created,
        )


class YearMonth(BaseModel):
    """The month a monthly transaction list is filtered to."""
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)

    @classmethod
    def of(cls, day: date) -> "YearMonth":
        return cls(year=day.year, month=day.month)

    @classmethod
    def parse(cls, value: str) -> "YearMonth":
        """Parse ``YYYY-MM``."""
        year, _, month = value.partition("-")
        return cls(year=int(year), month=int(month))

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def utc_now() -> datetime:
    """Current instant, timezone aware."""
    return datetime.now(timezone.utc)
