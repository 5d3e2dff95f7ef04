"""
Draft Loader

The single place that decides between create mode and edit mode.
Everything downstream asks the draft (``draft.is_edit``) instead of
tracking the mode itself.
"""

from datetime import tzinfo
from typing import Iterable, Optional

from finance_tracker.editor.draft import RecordDraft
from finance_tracker.models.transaction import Category, Transaction, TransactionType


def load(
    existing: Optional[Transaction],
    categories: Iterable[Category],
    tz: Optional[tzinfo] = None,
) -> RecordDraft:
    """
    Build the draft an editor opens with.

    No record: empty draft dated today, type unset.
    A record: draft populated from it via ``RecordDraft.load_from``.
    """
    draft = RecordDraft(tz=tz)
    if existing is not None:
        draft.load_from(existing, categories)
    return draft


def form_title(draft: RecordDraft) -> str:
    if draft.is_edit:
        return "Update Transaction"
    if draft.transaction_type == TransactionType.INCOME:
        return "Add a new Income"
    if draft.transaction_type == TransactionType.EXPENSE:
        return "Add a new Expense"
    return "Add a new Transaction"


def submit_label(draft: RecordDraft) -> str:
    if draft.is_edit:
        return "Update Transaction"
    if draft.transaction_type == TransactionType.INCOME:
        return "Add Income"
    if draft.transaction_type == TransactionType.EXPENSE:
        return "Add Expense"
    return "Add Transaction"
