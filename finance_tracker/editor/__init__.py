"""
Transaction editor package.

Codecs, the draft, its loader, the submit coordinator and the editor
facade that ties them to a host.
"""

from finance_tracker.editor.draft import RecordDraft
from finance_tracker.editor.editor import RecordEditor
from finance_tracker.editor.errors import (
    DecodeError,
    DraftValidationError,
    EditorError,
    MalformedSelectionError,
    SubmitInProgressError,
)
from finance_tracker.editor.host import EditorHost, SessionEditorHost
from finance_tracker.editor.loader import form_title, load, submit_label
from finance_tracker.editor.submit import (
    TRANSACTIONS_COLLECTION,
    CancellationToken,
    SubmitCoordinator,
    encode_draft,
)

__all__ = [
    "CancellationToken",
    "DecodeError",
    "DraftValidationError",
    "EditorError",
    "EditorHost",
    "MalformedSelectionError",
    "RecordDraft",
    "RecordEditor",
    "SessionEditorHost",
    "SubmitCoordinator",
    "SubmitInProgressError",
    "TRANSACTIONS_COLLECTION",
    "encode_draft",
    "form_title",
    "load",
    "submit_label",
]
