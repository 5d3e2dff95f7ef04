"""
Record Draft

The in-memory, editable form of one transaction. Every field is held as
the raw string the form shows; nothing is converted to its stored type
until submit.

DESIGN DECISION: The amount is never edited as an integer. Whatever the
user types is read back to minor units and immediately re-masked, so the
draft always holds the masked text of a whole number of cents.

DESIGN DECISION: A loaded record is kept only as a value snapshot taken
at load time. Later changes in the store are neither seen nor overwritten
while the draft is open.
"""

from datetime import tzinfo
from typing import Iterable, Optional, Union

from finance_tracker.editor import codec
from finance_tracker.editor.errors import (
    DecodeError,
    DraftValidationError,
    MalformedSelectionError,
)
from finance_tracker.models.transaction import Category, Transaction, TransactionType
from finance_tracker.models.validation import ValidationIssue, ValidationResult


FIELDS = ("description", "type", "amount", "category", "date", "account", "note")

# Checked in this order; the first failure is reported
REQUIRED_FIELDS = ("description", "type", "amount", "category", "date", "account")


class RecordDraft:
    """
    Field-name to draft-value mapping for one transaction being edited.

    Setting a field never validates it; ``validate()`` does that on demand.
    """

    def __init__(self, tz: Optional[tzinfo] = None):
        self._tz = tz
        self._values: dict[str, str] = {}
        self._snapshot: Optional[Transaction] = None
        self.reset()

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def values(self) -> dict[str, str]:
        """Copy of every field's draft value."""
        return dict(self._values)

    def get(self, name: str) -> str:
        return self._values[name]

    @property
    def snapshot(self) -> Optional[Transaction]:
        """Copy of the record this draft was loaded from, if any."""
        return self._snapshot.model_copy(deep=True) if self._snapshot else None

    @property
    def is_edit(self) -> bool:
        return self._snapshot is not None

    @property
    def transaction_type(self) -> Optional[TransactionType]:
        try:
            return TransactionType(self._values["type"])
        except ValueError:
            return None

    @property
    def amount_minor_units(self) -> Optional[int]:
        return codec.masked_to_amount(self._values["amount"])

    @property
    def amount_display(self) -> str:
        """What the amount input shows: the masked amount, or just the prefix."""
        return self._values["amount"] or codec.currency_prefix(self.transaction_type) + " "

    @property
    def category_description(self) -> str:
        """Long description of the selected category, "" when none."""
        if not self._values["category"]:
            return ""
        try:
            return codec.draft_to_category(self._values["category"]).description or ""
        except MalformedSelectionError:
            return ""

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def set_field(self, name: str, value: Union[str, TransactionType, None]) -> None:
        """
        Overwrite one field.

        ``amount`` is re-masked through the codec and ``type`` re-masks
        the amount with the new sign. Other fields are stored as given.

        Raises:
            KeyError: If ``name`` is not a draft field
        """
        if name not in FIELDS:
            raise KeyError(name)

        if isinstance(value, TransactionType):
            value = value.value
        value = "" if value is None else str(value)

        if name == "amount":
            minor_units = codec.masked_to_amount(value)
            self._values["amount"] = (
                "" if minor_units is None
                else codec.amount_to_masked(minor_units, self.transaction_type)
            )
        elif name == "type":
            self._values["type"] = value
            self._remask_amount()
        else:
            self._values[name] = value

    def choose_type(self, transaction_type: TransactionType) -> None:
        """
        Type button behaviour: choosing the active type unsets it.

        The category is cleared either way because the offered
        categories depend on the type.
        """
        if self.transaction_type == transaction_type:
            self.set_field("type", "")
        else:
            self.set_field("type", transaction_type)
        self.set_field("category", "")

    def select_category(self, category: Optional[Category]) -> None:
        self.set_field("category", codec.category_to_draft(category) if category else "")

    def load_from(self, record: Transaction, categories: Iterable[Category]) -> None:
        """
        Populate every field from a stored transaction.

        The category is matched by value. When it no longer exists the
        category stays unset and the rest of the record still loads.
        """
        match = next((c for c in categories if c.value == record.category), None)

        self._values = {
            "description": record.description,
            "type": record.type.value,
            "amount": codec.amount_to_masked(record.amount_minor_units, record.type),
            "category": codec.category_to_draft(match) if match else "",
            "date": codec.date_to_draft(record.occurred_date),
            "account": record.account,
            "note": record.note or "",
        }
        self._snapshot = record.model_copy(deep=True)

    def reset(self) -> None:
        """Back to an empty create-mode draft dated today."""
        self._values = {
            "description": "",
            "type": "",
            "amount": codec.amount_to_masked(0),
            "category": "",
            "date": codec.today_draft(self._tz),
            "account": "",
            "note": "",
        }
        self._snapshot = None

    def _remask_amount(self) -> None:
        minor_units = self.amount_minor_units
        if minor_units is not None:
            self._values["amount"] = codec.amount_to_masked(minor_units, self.transaction_type)

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self) -> ValidationResult:
        """
        Check required fields in form order; report the first problem.

        A zero amount is valid. The note is never required.
        """
        for name in REQUIRED_FIELDS:
            value = self._values[name].strip()
            if not value:
                return ValidationResult.fail(name, "missing", f"{name.capitalize()} is required")

            if name == "type" and self.transaction_type is None:
                return ValidationResult.fail(name, "invalid_value", f"Unknown transaction type: {value}")
            if name == "amount" and self.amount_minor_units is None:
                return ValidationResult.fail(name, "invalid_format", "Amount is not a number")
            if name == "category":
                try:
                    codec.draft_to_category(value)
                except MalformedSelectionError as e:
                    return ValidationResult.fail(name, "malformed_selection", str(e))
            if name == "date":
                try:
                    codec.draft_to_date(value)
                except DecodeError as e:
                    return ValidationResult.fail(name, "invalid_format", str(e))

        return ValidationResult.ok()


def issue_to_error(issue: ValidationIssue) -> DraftValidationError:
    """The exception a failed validation is raised as."""
    if issue.issue_type == "malformed_selection":
        return MalformedSelectionError(issue.field, issue.message)
    if issue.issue_type == "invalid_format":
        return DecodeError(issue.field, issue.message)
    return DraftValidationError(issue.field, issue.message)
