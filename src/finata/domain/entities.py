"""Domain model entities for finata.

These are pure data classes representing business concepts, independent of
how a document store lays them out. Stores hand back plain documents;
``finata.domain.documents`` turns them into these entities.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


BASE_CURRENCY = "TRY"
DEFAULT_WALLET_COLOR = "#3b82f6"
DEFAULT_TRANSFER_DESCRIPTION = "Para Transferi"

# Wallet type -> currency. The currency of a wallet is fixed by its type
# when the wallet is created.
WALLET_TYPES: dict[str, str] = {
    "Nakit": "TRY",
    "Banka Hesabı": "TRY",
    "Kredi Kartı": "TRY",
    "Vadeli Mevduat": "TRY",
    "Euro": "EUR",
    "Altın": "GRAM",
    "Dolar": "USD",
    "Kripto": "USDT",
}


class TransactionType(str, Enum):
    """Kind of ledger event."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class CategoryType(str, Enum):
    """Kind of transaction a category may be attached to."""

    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Wallet:
    """Wallet domain entity.

    ``balance`` is materialized: it is maintained by the ledger engine and
    never recomputed on read.
    """

    id: str
    name: str
    type: str
    currency: str
    balance: Decimal
    initial_balance: Decimal
    color: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: str
    name: str
    type: CategoryType
    is_default: bool = False


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    Income and expense entries use the ``wallet_*``/``category_*`` fields,
    transfers use the ``source_*``/``target_*`` fields. Names and currencies
    are snapshots taken when the transaction was last saved.
    """

    id: str
    type: TransactionType
    amount: Decimal
    date: datetime
    description: Optional[str]
    created_at: datetime
    wallet_id: Optional[str] = None
    wallet_name: Optional[str] = None
    currency: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    source_wallet_id: Optional[str] = None
    source_wallet_name: Optional[str] = None
    source_currency: Optional[str] = None
    target_wallet_id: Optional[str] = None
    target_wallet_name: Optional[str] = None
    target_currency: Optional[str] = None

    @property
    def is_transfer(self) -> bool:
        return self.type == TransactionType.TRANSFER

    def wallet_ids(self) -> tuple[str, ...]:
        """Return the ids of every wallet this transaction touches."""
        if self.is_transfer:
            return tuple(w for w in (self.source_wallet_id, self.target_wallet_id) if w)
        return (self.wallet_id,) if self.wallet_id else ()


@dataclass(frozen=True)
class TransactionDraft:
    """Unsaved transaction request, as produced by a form or by copying."""

    type: TransactionType
    amount: Decimal
    date: Optional[datetime] = None
    description: Optional[str] = None
    wallet_id: Optional[str] = None
    category_id: Optional[str] = None
    source_wallet_id: Optional[str] = None
    target_wallet_id: Optional[str] = None


@dataclass(frozen=True)
class BalanceCheck:
    """Result of comparing a wallet's stored balance with its ledger."""

    wallet_id: str
    stored_balance: Decimal
    expected_balance: Decimal
    transaction_count: int

    @property
    def drift(self) -> Decimal:
        return self.stored_balance - self.expected_balance

    @property
    def is_consistent(self) -> bool:
        return self.drift == 0


@dataclass(frozen=True)
class LedgerTotals:
    """Aggregate figures shown on the dashboard."""

    net_worth: Decimal
    total_income: Decimal
    total_expense: Decimal
    excluded_currencies: tuple[str, ...] = ()
