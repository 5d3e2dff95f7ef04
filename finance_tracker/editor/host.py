"""
Editor Host

Whatever shows the editor (a page, a modal, a test) implements this
interface. The editor asks the host which transaction is being edited,
clears that selection after saving, and asks the host to close.

DESIGN DECISION: The host is passed to the editor explicitly. There is
no module-level "current transaction" the editor reads behind the
caller's back.
"""

from abc import ABC, abstractmethod
from typing import Optional

from finance_tracker.models.transaction import Transaction


class EditorHost(ABC):
    """Abstract interface for the component hosting an editor."""

    @property
    @abstractmethod
    def current_record(self) -> Optional[Transaction]:
        """Transaction selected for editing, None in create mode."""
        pass

    @abstractmethod
    def clear_current_record(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        """Hide the editor (modal hosts)."""
        pass

    @abstractmethod
    def navigate_back(self) -> None:
        """Leave the editor page (page hosts)."""
        pass


class SessionEditorHost(EditorHost):
    """
    Plain in-process host.

    Holds the selection itself and records close/back requests as flags
    so the caller can act on them afterwards.
    """

    def __init__(self, current_record: Optional[Transaction] = None):
        self._current_record = current_record
        self.closed = False
        self.navigated_back = False

    @property
    def current_record(self) -> Optional[Transaction]:
        return self._current_record

    def select(self, record: Optional[Transaction]) -> None:
        """Choose the transaction to edit next."""
        self._current_record = record
        self.closed = False
        self.navigated_back = False

    def clear_current_record(self) -> None:
        self._current_record = None

    def close(self) -> None:
        self.closed = True

    def navigate_back(self) -> None:
        self.navigated_back = True
