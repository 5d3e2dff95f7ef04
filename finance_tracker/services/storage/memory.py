"""
In-Memory Document Store

Process-local implementation of the document store interface.
Used by the tests and when no storage backend is configured.
Nothing survives a restart.
"""

import copy
from collections import defaultdict
from uuid import uuid4

from finance_tracker.services.storage.interface import (
    Document,
    DocumentStore,
    NotFoundError,
)


class InMemoryDocumentStore(DocumentStore):
    """
    Keeps documents in dicts keyed by (collection, owner) then id.

    Documents are deep-copied on the way in and out so callers
    can never mutate stored state through a reference.
    """

    def __init__(self):
        self._collections: dict[tuple[str, str], dict[str, Document]] = defaultdict(dict)

    async def create(
        self,
        collection: str,
        owner_id: str,
        document: Document,
    ) -> str:
        document_id = uuid4().hex
        stored = copy.deepcopy(document)
        stored["id"] = document_id
        self._collections[(collection, owner_id)][document_id] = stored
        return document_id

    async def update(
        self,
        collection: str,
        owner_id: str,
        document: Document,
    ) -> None:
        documents = self._collections[(collection, owner_id)]
        document_id = document.get("id")
        if not document_id or document_id not in documents:
            raise NotFoundError(f"Document not found in {collection}: {document_id}")

        stored = copy.deepcopy(document)
        previous = documents[document_id]
        if "created_at" in previous:
            stored["created_at"] = previous["created_at"]
        documents[document_id] = stored

    async def fetch_all(
        self,
        collection: str,
        owner_id: str,
    ) -> list[Document]:
        documents = self._collections.get((collection, owner_id), {})
        return [copy.deepcopy(doc) for doc in documents.values()]
