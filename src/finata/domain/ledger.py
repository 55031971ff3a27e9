"""Ledger reconciliation engine.

Keeps every wallet's stored balance equal to its initial balance plus the
effect of each transaction that references it. Each create, edit and
delete is one atomic store operation: the affected wallets and the
previous version of the transaction are read from the store inside the
operation, the balance deltas are computed from that state, and the new
balances are written together with the transaction record (or its
removal).

Delta rules, with ``effect(income, a) = +a`` and ``effect(expense, a) = -a``:

* income/expense: ``delta = effect(new) - effect(old)``; old is 0 on create.
  If an edit moves the entry to another wallet, the old wallet gets
  ``-effect(old)`` and the new wallet ``+effect(new)``.
* transfer: ``source += old - new``, ``target += new - old``; the
  endpoints of an existing transfer never change.
* delete: the negation of the current effect.
"""

import logging
import uuid
from collections import defaultdict
from datetime import datetime
from decimal import Decimal
from typing import Optional

from finata.database.base import AtomicHandle, Collection, DocumentStore
from finata.domain.category import find_category
from finata.domain.documents import (
    transaction_from_document,
    transaction_to_document,
    wallet_from_document,
)
from finata.domain.entities import (
    BalanceCheck,
    CategoryType,
    DEFAULT_TRANSFER_DESCRIPTION,
    Transaction,
    TransactionDraft,
    TransactionType,
    Wallet,
)
from finata.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    category_type_mismatch,
    invalid_amount,
    same_transfer_wallets,
    transaction_not_found,
    wallet_not_found,
)

logger = logging.getLogger(__name__)

BalanceChanges = dict[str, Decimal]

ENTRY_TYPES = (TransactionType.INCOME, TransactionType.EXPENSE)


def effect(transaction_type: TransactionType, amount: Decimal) -> Decimal:
    """Signed contribution of an income/expense entry to its wallet."""
    if transaction_type == TransactionType.INCOME:
        return amount
    if transaction_type == TransactionType.EXPENSE:
        return -amount
    return Decimal("0")


def application_changes(transaction: Transaction) -> BalanceChanges:
    """Per-wallet effect of a transaction as it currently stands."""
    if transaction.is_transfer:
        return {
            transaction.source_wallet_id: -transaction.amount,
            transaction.target_wallet_id: transaction.amount,
        }
    return {transaction.wallet_id: effect(transaction.type, transaction.amount)}


def reversal_changes(transaction: Transaction) -> BalanceChanges:
    """Per-wallet deltas that undo a transaction's effect."""
    return {wallet_id: -delta for wallet_id, delta in application_changes(transaction).items()}


def entry_changes(
    old: Optional[Transaction], new: Optional[Transaction]
) -> BalanceChanges:
    """Deltas for an income/expense going from ``old`` to ``new``.

    On the same wallet this is ``effect(new) - effect(old)``; when the
    entry moves, the old wallet loses ``effect(old)`` and the new wallet
    gains ``effect(new)``.
    """
    changes: dict[str, Decimal] = defaultdict(Decimal)
    if old is not None:
        changes[old.wallet_id] -= effect(old.type, old.amount)
    if new is not None:
        changes[new.wallet_id] += effect(new.type, new.amount)
    return dict(changes)


def transfer_changes(
    source_wallet_id: str,
    target_wallet_id: str,
    old_amount: Decimal,
    new_amount: Decimal,
) -> BalanceChanges:
    """Deltas for a transfer whose amount goes from ``old_amount`` to ``new_amount``."""
    return {
        source_wallet_id: old_amount - new_amount,
        target_wallet_id: new_amount - old_amount,
    }


def balance_changes(
    old: Optional[Transaction], new: Optional[Transaction]
) -> BalanceChanges:
    """Deltas that take the wallets from ``old``'s effect to ``new``'s.

    ``old`` is None on create and ``new`` is None on delete. Both sides
    are of the same kind, and a transfer keeps its endpoints.
    """
    current = new if new is not None else old
    if current is None:
        return {}
    if current.is_transfer:
        return transfer_changes(
            current.source_wallet_id,
            current.target_wallet_id,
            old.amount if old is not None else Decimal("0"),
            new.amount if new is not None else Decimal("0"),
        )
    return entry_changes(old, new)


def check_amount(amount: object) -> None:
    """Raise ValidationError unless ``amount`` is a finite Decimal above zero."""
    if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= 0:
        raise ValidationError(invalid_amount(amount))


class LedgerEngine:
    """Applies transaction mutations and their balance deltas atomically."""

    def __init__(self, store: DocumentStore):
        """Initialize ledger engine.

        Args:
            store: Document store instance
        """
        self.store = store

    # Income / expense
    def record_entry(self, draft: TransactionDraft) -> Transaction:
        """Create an income or expense entry and apply its effect.

        Raises:
            ValidationError: If the draft is not a valid entry
            NotFoundError: If the wallet or category does not exist
        """
        self._check_entry_draft(draft)
        transaction_id = uuid.uuid4().hex

        def apply(handle: AtomicHandle) -> tuple[Transaction, BalanceChanges]:
            new = self._build_entry(handle, transaction_id, draft, previous=None)
            return new, self._commit(handle, None, new)

        transaction, changes = self.store.run_atomic(apply)
        logger.info("Recorded %s %s: %s", transaction.type.value, transaction.id, changes)
        return transaction

    def revise_entry(self, transaction_id: str, draft: TransactionDraft) -> Transaction:
        """Overwrite an income or expense entry, reversing its old effect first.

        Raises:
            ValidationError: If the draft is not a valid entry or the stored
                transaction is a transfer
            NotFoundError: If the transaction, wallet or category does not exist
        """
        self._check_entry_draft(draft)

        def apply(handle: AtomicHandle) -> tuple[Transaction, BalanceChanges]:
            old = self._require_transaction(handle, transaction_id)
            if old.is_transfer:
                raise ValidationError(
                    f"Transaction {transaction_id} is a transfer and cannot become an {draft.type.value}"
                )
            new = self._build_entry(handle, transaction_id, draft, previous=old)
            return new, self._commit(handle, old, new)

        transaction, changes = self.store.run_atomic(apply)
        logger.info("Revised %s %s: %s", transaction.type.value, transaction.id, changes)
        return transaction

    # Transfers
    def record_transfer(self, draft: TransactionDraft) -> Transaction:
        """Create a transfer between two wallets.

        Raises:
            ValidationError: If the amount is invalid or both endpoints are the same
            NotFoundError: If either wallet does not exist
        """
        check_amount(draft.amount)
        if not draft.source_wallet_id or not draft.target_wallet_id:
            raise ValidationError("Transfer needs a source and a target wallet")
        if draft.source_wallet_id == draft.target_wallet_id:
            raise ValidationError(same_transfer_wallets())
        transaction_id = uuid.uuid4().hex

        def apply(handle: AtomicHandle) -> tuple[Transaction, BalanceChanges]:
            new = self._build_transfer(
                handle,
                transaction_id,
                draft,
                source_id=draft.source_wallet_id,
                target_id=draft.target_wallet_id,
                previous=None,
            )
            return new, self._commit(handle, None, new)

        transaction, changes = self.store.run_atomic(apply)
        logger.info("Recorded transfer %s: %s", transaction.id, changes)
        return transaction

    def revise_transfer(self, transaction_id: str, draft: TransactionDraft) -> Transaction:
        """Change the amount, date or description of a transfer.

        The endpoints come from the stored transfer; a draft naming other
        wallets is rejected, since moving a transfer is a delete plus a create.

        Raises:
            ValidationError: If the amount is invalid, the endpoints differ or
                the stored transaction is not a transfer
            NotFoundError: If the transaction or either wallet does not exist
        """
        check_amount(draft.amount)

        def apply(handle: AtomicHandle) -> tuple[Transaction, BalanceChanges]:
            old = self._require_transaction(handle, transaction_id)
            if not old.is_transfer:
                raise ValidationError(
                    f"Transaction {transaction_id} is an {old.type.value}, not a transfer"
                )
            for requested, stored in (
                (draft.source_wallet_id, old.source_wallet_id),
                (draft.target_wallet_id, old.target_wallet_id),
            ):
                if requested is not None and requested != stored:
                    raise ValidationError(
                        "The wallets of an existing transfer cannot be changed; "
                        "delete it and create a new transfer instead"
                    )
            new = self._build_transfer(
                handle,
                transaction_id,
                draft,
                source_id=old.source_wallet_id,
                target_id=old.target_wallet_id,
                previous=old,
            )
            return new, self._commit(handle, old, new)

        transaction, changes = self.store.run_atomic(apply)
        logger.info("Revised transfer %s: %s", transaction.id, changes)
        return transaction

    # Delete
    def remove(self, transaction_id: str) -> Transaction:
        """Delete a transaction and reverse its effect.

        Wallets that no longer exist are skipped; the record is removed anyway.

        Raises:
            NotFoundError: If the transaction does not exist
        """

        def apply(handle: AtomicHandle) -> tuple[Transaction, BalanceChanges]:
            old = self._require_transaction(handle, transaction_id)
            changes = reversal_changes(old)
            wallets = self._load_wallets(handle, changes, tolerate_missing=True)
            for wallet_id in changes:
                if wallet_id not in wallets:
                    logger.info(
                        "Wallet %s of transaction %s no longer exists, skipping reversal",
                        wallet_id,
                        transaction_id,
                    )
            self._write_balances(handle, changes, wallets)
            handle.delete(Collection.TRANSACTIONS, transaction_id)
            return old, changes

        transaction, changes = self.store.run_atomic(apply)
        logger.info("Removed %s %s: %s", transaction.type.value, transaction.id, changes)
        return transaction

    # Consistency
    def verify(self, wallet_id: str) -> BalanceCheck:
        """Compare a wallet's stored balance with its initial balance plus its transactions.

        Raises:
            NotFoundError: If the wallet does not exist
        """
        doc = self.store.get(Collection.WALLETS, wallet_id)
        if doc is None:
            raise NotFoundError(wallet_not_found(wallet_id))
        wallet = wallet_from_document(wallet_id, doc)

        expected = wallet.initial_balance
        count = 0
        for doc_id, txn_doc in self.store.list(Collection.TRANSACTIONS):
            transaction = transaction_from_document(doc_id, txn_doc)
            delta = application_changes(transaction).get(wallet_id)
            if delta is not None:
                expected += delta
                count += 1

        return BalanceCheck(
            wallet_id=wallet_id,
            stored_balance=wallet.balance,
            expected_balance=expected,
            transaction_count=count,
        )

    def expected_balance(self, wallet_id: str) -> Decimal:
        """Balance the wallet should have according to its transactions."""
        return self.verify(wallet_id).expected_balance

    # Helpers (run inside the atomic operation)
    def _commit(
        self, handle: AtomicHandle, old: Optional[Transaction], new: Transaction
    ) -> BalanceChanges:
        changes = balance_changes(old, new)
        wallets = self._load_wallets(handle, changes, tolerate_missing=False)
        self._write_balances(handle, changes, wallets)
        handle.set(Collection.TRANSACTIONS, new.id, transaction_to_document(new))
        return changes

    def _build_entry(
        self,
        handle: AtomicHandle,
        transaction_id: str,
        draft: TransactionDraft,
        previous: Optional[Transaction],
    ) -> Transaction:
        wallet = self._require_wallet(handle, draft.wallet_id)
        category = find_category(handle, draft.category_id)
        if category is None:
            raise NotFoundError(category_not_found(draft.category_id))
        if category.type != CategoryType(draft.type.value):
            raise ValidationError(
                category_type_mismatch(category.name, category.type.value, draft.type.value)
            )
        now = datetime.now()
        return Transaction(
            id=transaction_id,
            type=draft.type,
            amount=draft.amount,
            date=self._resolve_date(draft, previous, now),
            description=draft.description,
            created_at=previous.created_at if previous else now,
            wallet_id=wallet.id,
            wallet_name=wallet.name,
            currency=wallet.currency,
            category_id=category.id,
            category_name=category.name,
        )

    def _build_transfer(
        self,
        handle: AtomicHandle,
        transaction_id: str,
        draft: TransactionDraft,
        source_id: str,
        target_id: str,
        previous: Optional[Transaction],
    ) -> Transaction:
        source = self._require_wallet(handle, source_id)
        target = self._require_wallet(handle, target_id)
        now = datetime.now()
        return Transaction(
            id=transaction_id,
            type=TransactionType.TRANSFER,
            amount=draft.amount,
            date=self._resolve_date(draft, previous, now),
            description=draft.description or DEFAULT_TRANSFER_DESCRIPTION,
            created_at=previous.created_at if previous else now,
            source_wallet_id=source.id,
            source_wallet_name=source.name,
            source_currency=source.currency,
            target_wallet_id=target.id,
            target_wallet_name=target.name,
            target_currency=target.currency,
        )

    @staticmethod
    def _resolve_date(
        draft: TransactionDraft, previous: Optional[Transaction], now: datetime
    ) -> datetime:
        if draft.date is not None:
            return draft.date
        if previous is not None:
            return previous.date
        return now

    @staticmethod
    def _require_transaction(handle: AtomicHandle, transaction_id: str) -> Transaction:
        doc = handle.get(Collection.TRANSACTIONS, transaction_id)
        if doc is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction_from_document(transaction_id, doc)

    @staticmethod
    def _require_wallet(handle: AtomicHandle, wallet_id: Optional[str]) -> Wallet:
        doc = handle.get(Collection.WALLETS, wallet_id) if wallet_id else None
        if doc is None:
            raise NotFoundError(wallet_not_found(wallet_id))
        return wallet_from_document(wallet_id, doc)

    def _load_wallets(
        self, handle: AtomicHandle, changes: BalanceChanges, tolerate_missing: bool
    ) -> dict[str, Wallet]:
        wallets = {}
        for wallet_id in changes:
            if not wallet_id:
                continue
            if tolerate_missing:
                doc = handle.get(Collection.WALLETS, wallet_id)
                if doc is not None:
                    wallets[wallet_id] = wallet_from_document(wallet_id, doc)
            else:
                wallets[wallet_id] = self._require_wallet(handle, wallet_id)
        return wallets

    @staticmethod
    def _write_balances(
        handle: AtomicHandle, changes: BalanceChanges, wallets: dict[str, Wallet]
    ) -> None:
        for wallet_id, delta in changes.items():
            wallet = wallets.get(wallet_id)
            if wallet is None or delta == 0:
                continue
            handle.update(Collection.WALLETS, wallet_id, {"balance": wallet.balance + delta})

    @staticmethod
    def _check_entry_draft(draft: TransactionDraft) -> None:
        if draft.type not in ENTRY_TYPES:
            raise ValidationError(f"Expected an income or expense, got '{draft.type}'")
        check_amount(draft.amount)
        if not draft.wallet_id:
            raise ValidationError("A wallet is required")
        if not draft.category_id:
            raise ValidationError("A category is required")
