"""Errors raised by the transaction editor."""


class EditorError(Exception):
    """Base exception for editor operations."""
    pass


class DraftValidationError(EditorError):
    """A field required for submission is empty or unusable."""

    def __init__(self, field: str, message: str = ""):
        self.field = field
        super().__init__(message or f"{field} is required")


class MalformedSelectionError(DraftValidationError):
    """The category selection is not a serialized category."""

    def __init__(self, field: str = "category", message: str = ""):
        super().__init__(field, message or "Selected category is no longer available")


class DecodeError(DraftValidationError):
    """An amount or date draft value cannot be parsed."""
    pass


class SubmitInProgressError(EditorError):
    """A submit is already running for this draft."""
    pass
