"""Persistence layer for finata application."""

from finata.database.base import AtomicHandle, Collection, DocumentStore, StoreError
from finata.database.factories import create_memory_store, create_sqlite_store

__all__ = [
    "AtomicHandle",
    "Collection",
    "DocumentStore",
    "StoreError",
    "create_memory_store",
    "create_sqlite_store",
]
