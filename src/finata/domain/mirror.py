"""Live local copies of the wallet, transaction and category collections."""

import logging
from decimal import Decimal
from typing import Mapping, Optional

from finata.database.base import Collection, DocumentStore, Snapshot, Unsubscribe
from finata.domain.category import merge_categories
from finata.domain.currency import net_worth, to_base
from finata.domain.documents import (
    category_from_document,
    transaction_from_document,
    wallet_from_document,
)
from finata.domain.entities import (
    Category,
    CategoryType,
    LedgerTotals,
    Transaction,
    TransactionType,
    Wallet,
)

logger = logging.getLogger(__name__)


class LedgerMirror:
    """Subscription manager that keeps the latest snapshot of each collection.

    Call ``start`` when a session becomes valid and ``stop`` when it ends;
    the mirror can also be used as a context manager. Readers always see
    the most recent full snapshot delivered by the store.
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self._unsubscribers: list[Unsubscribe] = []
        self._wallets: list[Wallet] = []
        self._transactions: list[Transaction] = []
        self._user_categories: list[Category] = []

    @property
    def running(self) -> bool:
        return bool(self._unsubscribers)

    def start(self) -> "LedgerMirror":
        """Subscribe to all collections. Starting twice is a no-op."""
        if self.running:
            return self
        self._unsubscribers = [
            self.store.subscribe(Collection.WALLETS, self._on_wallets),
            self.store.subscribe(Collection.TRANSACTIONS, self._on_transactions),
            self.store.subscribe(Collection.CATEGORIES, self._on_categories),
        ]
        logger.debug("Mirror started for user %s", self.store.user_id)
        return self

    def stop(self) -> None:
        """Unsubscribe and drop the cached snapshots."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._wallets = []
        self._transactions = []
        self._user_categories = []
        logger.debug("Mirror stopped for user %s", self.store.user_id)

    def __enter__(self) -> "LedgerMirror":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    # Snapshot handlers
    def _on_wallets(self, snapshot: Snapshot) -> None:
        self._wallets = [wallet_from_document(doc_id, doc) for doc_id, doc in snapshot]

    def _on_transactions(self, snapshot: Snapshot) -> None:
        transactions = [transaction_from_document(doc_id, doc) for doc_id, doc in snapshot]
        transactions.sort(key=lambda t: t.date, reverse=True)
        self._transactions = transactions

    def _on_categories(self, snapshot: Snapshot) -> None:
        self._user_categories = [category_from_document(doc_id, doc) for doc_id, doc in snapshot]

    # Readers
    @property
    def wallets(self) -> list[Wallet]:
        self._ensure_running()
        return list(self._wallets)

    @property
    def transactions(self) -> list[Transaction]:
        """All transactions, newest first."""
        self._ensure_running()
        return list(self._transactions)

    def categories(self, category_type: Optional[CategoryType] = None) -> list[Category]:
        """Default categories followed by the user's own."""
        self._ensure_running()
        return merge_categories(self._user_categories, category_type)

    def wallet(self, wallet_id: str) -> Optional[Wallet]:
        self._ensure_running()
        for wallet in self._wallets:
            if wallet.id == wallet_id:
                return wallet
        return None

    def wallet_transactions(self, wallet_id: str) -> list[Transaction]:
        """Entries of the wallet and transfers in or out of it, newest first."""
        return [t for t in self.transactions if wallet_id in t.wallet_ids()]

    def totals(self, rates: Mapping[str, Decimal]) -> LedgerTotals:
        """Net worth and income/expense totals in the base currency.

        Amounts in currencies without a rate are left out of every figure.
        """
        self._ensure_running()
        worth, excluded = net_worth(self._wallets, rates)
        income = Decimal("0")
        expense = Decimal("0")
        skipped = set(excluded)
        for transaction in self._transactions:
            if transaction.type not in (TransactionType.INCOME, TransactionType.EXPENSE):
                continue
            converted = to_base(transaction.amount, transaction.currency or "", rates)
            if converted is None:
                skipped.add(transaction.currency or "?")
                continue
            if transaction.type == TransactionType.INCOME:
                income += converted
            else:
                expense += converted
        return LedgerTotals(
            net_worth=worth,
            total_income=income,
            total_expense=expense,
            excluded_currencies=tuple(sorted(skipped)),
        )

    def _ensure_running(self) -> None:
        if not self.running:
            raise RuntimeError("LedgerMirror is not started; call start() first")
