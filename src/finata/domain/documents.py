"""Conversion between stored documents and domain entities.

Documents are plain dicts keyed by the snake_case field names of the
entities. Amounts are normalised to ``Decimal`` and timestamps to
``datetime`` on the way in, so entities never see raw store values.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from dateutil import parser as date_parser

from finata.domain.entities import (
    Category,
    CategoryType,
    DEFAULT_WALLET_COLOR,
    Transaction,
    TransactionType,
    Wallet,
    WALLET_TYPES,
    BASE_CURRENCY,
)

logger = logging.getLogger(__name__)


def coerce_timestamp(value: Any) -> datetime:
    """Convert a stored timestamp into a datetime.

    Accepts datetimes, dates and ISO-like strings. Absent or malformed
    values fall back to the current time.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str) and value.strip():
        try:
            return date_parser.parse(value)
        except (ValueError, OverflowError):
            logger.debug("Malformed timestamp %r, using now", value)
    return datetime.now()


def coerce_decimal(value: Any) -> Decimal:
    """Convert a stored amount into a Decimal, treating absent values as zero."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        # str() first so floats keep their shortest repr instead of binary noise
        return Decimal(str(value))
    except InvalidOperation:
        logger.debug("Malformed amount %r, using 0", value)
        return Decimal("0")


def wallet_from_document(doc_id: str, doc: dict[str, Any]) -> Wallet:
    """Build a Wallet entity from its stored document."""
    wallet_type = doc.get("type", "")
    currency = doc.get("currency") or WALLET_TYPES.get(wallet_type, BASE_CURRENCY)
    return Wallet(
        id=doc_id,
        name=doc.get("name", ""),
        type=wallet_type,
        currency=currency,
        balance=coerce_decimal(doc.get("balance")),
        initial_balance=coerce_decimal(doc.get("initial_balance")),
        color=doc.get("color") or DEFAULT_WALLET_COLOR,
        created_at=coerce_timestamp(doc.get("created_at")),
    )


def wallet_to_document(wallet: Wallet) -> dict[str, Any]:
    """Serialize a Wallet entity into a document."""
    return {
        "name": wallet.name,
        "type": wallet.type,
        "currency": wallet.currency,
        "balance": wallet.balance,
        "initial_balance": wallet.initial_balance,
        "color": wallet.color,
        "created_at": wallet.created_at,
    }


def category_from_document(doc_id: str, doc: dict[str, Any]) -> Category:
    """Build a user Category entity from its stored document."""
    return Category(
        id=doc_id,
        name=doc.get("name", ""),
        type=CategoryType(doc.get("type", CategoryType.EXPENSE.value)),
        is_default=False,
    )


def transaction_from_document(doc_id: str, doc: dict[str, Any]) -> Transaction:
    """Build a Transaction entity from its stored document."""
    return Transaction(
        id=doc_id,
        type=TransactionType(doc["type"]),
        amount=coerce_decimal(doc.get("amount")),
        date=coerce_timestamp(doc.get("date")),
        description=doc.get("description"),
        created_at=coerce_timestamp(doc.get("created_at")),
        wallet_id=doc.get("wallet_id"),
        wallet_name=doc.get("wallet_name"),
        currency=doc.get("currency"),
        category_id=doc.get("category_id"),
        category_name=doc.get("category_name"),
        source_wallet_id=doc.get("source_wallet_id"),
        source_wallet_name=doc.get("source_wallet_name"),
        source_currency=doc.get("source_currency"),
        target_wallet_id=doc.get("target_wallet_id"),
        target_wallet_name=doc.get("target_wallet_name"),
        target_currency=doc.get("target_currency"),
    )


def transaction_to_document(transaction: Transaction) -> dict[str, Any]:
    """Serialize a Transaction entity into a document.

    Only the fields that belong to the transaction's type are written.
    """
    doc: dict[str, Any] = {
        "type": transaction.type.value,
        "amount": transaction.amount,
        "date": transaction.date,
        "description": transaction.description,
        "created_at": transaction.created_at,
    }
    if transaction.is_transfer:
        doc.update(
            source_wallet_id=transaction.source_wallet_id,
            source_wallet_name=transaction.source_wallet_name,
            source_currency=transaction.source_currency,
            target_wallet_id=transaction.target_wallet_id,
            target_wallet_name=transaction.target_wallet_name,
            target_currency=transaction.target_currency,
        )
    else:
        doc.update(
            wallet_id=transaction.wallet_id,
            wallet_name=transaction.wallet_name,
            currency=transaction.currency,
            category_id=transaction.category_id,
            category_name=transaction.category_name,
        )
    return doc

