"""Services package."""

from finance_tracker.services.storage import (
    ConnectionError,
    Document,
    DocumentStore,
    InMemoryDocumentStore,
    NotFoundError,
    StorageError,
)

__all__ = [
    # Storage services
    "ConnectionError",
    "Document",
    "DocumentStore",
    "InMemoryDocumentStore",
    "NotFoundError",
    "StorageError",
]
