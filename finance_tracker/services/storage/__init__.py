"""
Storage Services Package

Provides the abstract document store interface and its implementations.
Google Sheets is the hosted backend; the in-memory store backs tests and
unconfigured runs.
"""

from finance_tracker.services.storage.interface import (
    ConnectionError,
    Document,
    DocumentStore,
    NotFoundError,
    StorageError,
)
from finance_tracker.services.storage.memory import InMemoryDocumentStore

__all__ = [
    # Interface
    "Document",
    "DocumentStore",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "InMemoryDocumentStore",
]
