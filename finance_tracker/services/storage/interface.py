"""
Abstract Document Store Interface

DESIGN DECISION: The editor talks to storage through three calls only:
create, update and fetch-all, each scoped to a collection and an owner.
This allows us to:
1. Swap Google Sheets for a real document database later
2. Use in-memory storage for testing
3. Keep the editor decoupled from storage implementation

Documents are plain JSON-safe dicts. Models convert themselves
to and from documents; the store never sees a model.
"""

from abc import ABC, abstractmethod
from typing import Any


Document = dict[str, Any]


class DocumentStore(ABC):
    """
    Abstract interface for document storage operations.

    Any storage implementation (Google Sheets, Firestore, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def create(
        self,
        collection: str,
        owner_id: str,
        document: Document,
    ) -> str:
        """
        Create a new document.

        Args:
            collection: Collection name (e.g., 'transactions')
            owner_id: Owner the document belongs to
            document: Document fields; any 'id' key is ignored

        Returns:
            The id assigned by the store

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def update(
        self,
        collection: str,
        owner_id: str,
        document: Document,
    ) -> None:
        """
        Overwrite an existing document.

        The stored 'created_at' is kept as it was.

        Args:
            collection: Collection name
            owner_id: Owner the document belongs to
            document: Document fields including its 'id'

        Raises:
            NotFoundError: If no document with that id exists for the owner
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def fetch_all(
        self,
        collection: str,
        owner_id: str,
    ) -> list[Document]:
        """
        Fetch every document of an owner in a collection.

        Returns:
            Documents with their 'id' included, in insertion order

        Raises:
            StorageError: If the read fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
