"""In-memory document store, used when no database is configured."""

import copy
from typing import Callable, Optional, TypeVar

from finata.database.base import (
    AtomicHandle,
    Collection,
    Document,
    DocumentStore,
    Snapshot,
    SnapshotCallback,
    SnapshotPublisher,
    Unsubscribe,
)
from finata.domain.errors import NotFoundError

T = TypeVar("T")

# Marks a document deleted inside a pending atomic operation.
_DELETED = object()


class MemoryAtomicHandle(AtomicHandle):
    """Stages writes so that a failing operation leaves the store untouched."""

    def __init__(self, store: "MemoryStore"):
        self.store = store
        self.pending: dict[tuple[Collection, str], object] = {}

    def get(self, collection: Collection, doc_id: str) -> Optional[Document]:
        key = (collection, doc_id)
        if key in self.pending:
            staged = self.pending[key]
            return None if staged is _DELETED else copy.deepcopy(staged)
        return self.store.get(collection, doc_id)

    def set(self, collection: Collection, doc_id: str, document: Document) -> None:
        self.pending[(collection, doc_id)] = copy.deepcopy(document)

    def update(self, collection: Collection, doc_id: str, fields: Document) -> None:
        current = self.get(collection, doc_id)
        if current is None:
            raise NotFoundError(f"{collection.value} document {doc_id} not found")
        current.update(copy.deepcopy(fields))
        self.pending[(collection, doc_id)] = current

    def delete(self, collection: Collection, doc_id: str) -> None:
        self.pending[(collection, doc_id)] = _DELETED

    def commit(self) -> "set[Collection]":
        touched = set()
        for (collection, doc_id), staged in self.pending.items():
            documents = self.store.documents[collection]
            if staged is _DELETED:
                documents.pop(doc_id, None)
            else:
                documents[doc_id] = staged
            touched.add(collection)
        return touched


class MemoryStore(DocumentStore):
    """Single-process store backed by dicts.

    There is only one mutator, so operations are applied in call order
    without locking.
    """

    def __init__(self, user_id: str = "local"):
        self.user_id = user_id
        self.documents: dict[Collection, dict[str, Document]] = {
            collection: {} for collection in Collection
        }
        self._publisher = SnapshotPublisher(self.list)

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        pass

    def get(self, collection: Collection, doc_id: str) -> Optional[Document]:
        document = self.documents[collection].get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    def list(self, collection: Collection) -> Snapshot:
        return [
            (doc_id, copy.deepcopy(document))
            for doc_id, document in sorted(self.documents[collection].items())
        ]

    def set(self, collection: Collection, doc_id: str, document: Document) -> None:
        self.run_atomic(lambda handle: handle.set(collection, doc_id, document))

    def update(self, collection: Collection, doc_id: str, fields: Document) -> None:
        self.run_atomic(lambda handle: handle.update(collection, doc_id, fields))

    def delete(self, collection: Collection, doc_id: str) -> None:
        self.run_atomic(lambda handle: handle.delete(collection, doc_id))

    def run_atomic(self, fn: Callable[[AtomicHandle], T]) -> T:
        handle = MemoryAtomicHandle(self)
        result = fn(handle)
        touched = handle.commit()
        self._publisher.publish(touched)
        return result

    def subscribe(self, collection: Collection, callback: SnapshotCallback) -> Unsubscribe:
        return self._publisher.subscribe(collection, callback)
