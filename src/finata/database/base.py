"""Abstract document store interface."""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from finata.domain.errors import DomainError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Document = dict[str, Any]
Snapshot = list[tuple[str, Document]]
SnapshotCallback = Callable[[Snapshot], None]
Unsubscribe = Callable[[], None]


class Collection(str, Enum):
    """Document collections, each namespaced per user."""

    WALLETS = "wallets"
    TRANSACTIONS = "transactions"
    CATEGORIES = "categories"


class StoreError(DomainError):
    """The store could not complete an operation (conflicts exhausted retries)."""


class AtomicHandle(ABC):
    """Reads and writes that commit together inside ``DocumentStore.run_atomic``."""

    @abstractmethod
    def get(self, collection: Collection, doc_id: str) -> Optional[Document]:
        """Read the current stored document, or None if absent."""
        pass

    @abstractmethod
    def set(self, collection: Collection, doc_id: str, document: Document) -> None:
        """Create or replace a document."""
        pass

    @abstractmethod
    def update(self, collection: Collection, doc_id: str, fields: Document) -> None:
        """Overwrite some fields of an existing document."""
        pass

    @abstractmethod
    def delete(self, collection: Collection, doc_id: str) -> None:
        """Remove a document. Removing an absent document is a no-op."""
        pass


class DocumentStore(ABC):
    """Abstract persistence substrate for finata.

    Every store is bound to one user id; all collections it exposes belong
    to that user.
    """

    user_id: str

    @abstractmethod
    def connect(self) -> None:
        """Connect to the store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create whatever structure the store needs before first use."""
        pass

    @abstractmethod
    def get(self, collection: Collection, doc_id: str) -> Optional[Document]:
        """Get a document by id."""
        pass

    @abstractmethod
    def list(self, collection: Collection) -> Snapshot:
        """Return the full collection as ``(doc_id, document)`` pairs."""
        pass

    @abstractmethod
    def set(self, collection: Collection, doc_id: str, document: Document) -> None:
        """Create or replace a document."""
        pass

    @abstractmethod
    def update(self, collection: Collection, doc_id: str, fields: Document) -> None:
        """Overwrite some fields of an existing document.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    def delete(self, collection: Collection, doc_id: str) -> None:
        """Delete a document."""
        pass

    @abstractmethod
    def run_atomic(self, fn: Callable[[AtomicHandle], T]) -> T:
        """Run ``fn`` so that all of its reads and writes commit together.

        If ``fn`` raises, nothing it wrote is kept and the exception
        propagates. Write conflicts are retried a bounded number of times
        before ``StoreError`` is raised.
        """
        pass

    @abstractmethod
    def subscribe(self, collection: Collection, callback: SnapshotCallback) -> Unsubscribe:
        """Deliver full snapshots of ``collection`` to ``callback``.

        The current snapshot is delivered immediately, then again after every
        committed change to the collection. Returns a callable that stops
        the subscription.
        """
        pass


class SnapshotPublisher:
    """Subscriber bookkeeping shared by store implementations.

    Stores call ``publish`` after a commit with the collections it touched.
    A failing callback is logged and does not stop delivery to the others.
    """

    def __init__(self, load_snapshot: Callable[[Collection], Snapshot]):
        self._load_snapshot = load_snapshot
        self._subscribers: dict[Collection, list[SnapshotCallback]] = {}

    def subscribe(self, collection: Collection, callback: SnapshotCallback) -> Unsubscribe:
        callbacks = self._subscribers.setdefault(collection, [])
        callbacks.append(callback)
        self._deliver(collection, callback, self._load_snapshot(collection))

        def unsubscribe() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def subscriber_count(self, collection: Collection) -> int:
        return len(self._subscribers.get(collection, []))

    def publish(self, collections) -> None:
        for collection in collections:
            callbacks = list(self._subscribers.get(collection, []))
            if not callbacks:
                continue
            snapshot = self._load_snapshot(collection)
            for callback in callbacks:
                self._deliver(collection, callback, snapshot)

    @staticmethod
    def _deliver(collection: Collection, callback: SnapshotCallback, snapshot: Snapshot) -> None:
        try:
            callback(list(snapshot))
        except Exception:
            logger.exception("Subscriber for %s failed", collection.value)
