"""Mapper functions to convert between documents and SQLAlchemy records.

This layer isolates the conversion logic, so the store can hand out plain
documents while the tables keep typed columns.
"""

from typing import Any

from finata.database.base import Collection, Document
from finata.database.models import RECORD_TYPES

# Columns that identify a record rather than belong to its document.
KEY_COLUMNS = ("user_id", "id")


def document_fields(collection: Collection) -> tuple[str, ...]:
    """Return the document field names stored for ``collection``."""
    record_type = RECORD_TYPES[collection]
    return tuple(
        column.name
        for column in record_type.__table__.columns
        if column.name not in KEY_COLUMNS
    )


def record_to_document(collection: Collection, record: Any) -> Document:
    """Convert a SQLAlchemy record to its document dict."""
    return {name: getattr(record, name) for name in document_fields(collection)}


def new_record(collection: Collection, user_id: str, doc_id: str, document: Document) -> Any:
    """Build a SQLAlchemy record for a document."""
    record_type = RECORD_TYPES[collection]
    record = record_type(user_id=user_id, id=doc_id)
    replace_fields(collection, record, document)
    return record


def replace_fields(collection: Collection, record: Any, document: Document) -> None:
    """Overwrite every document column of ``record``; missing fields become None.

    Columns with a Python-side default keep it instead of being nulled.
    """
    columns = RECORD_TYPES[collection].__table__.columns
    for name in document_fields(collection):
        if name in document:
            setattr(record, name, document[name])
        elif columns[name].default is None:
            setattr(record, name, None)


def update_fields(collection: Collection, record: Any, fields: Document) -> None:
    """Overwrite the given document fields of ``record``.

    Raises:
        ValueError: If a field is not part of the collection's documents
    """
    known = set(document_fields(collection))
    unknown = sorted(set(fields) - known)
    if unknown:
        raise ValueError(f"Unknown {collection.value} field(s): {', '.join(unknown)}")
    for name, value in fields.items():
        setattr(record, name, value)
