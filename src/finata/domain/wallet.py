"""Wallet domain service."""

import logging
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from finata.database.base import Collection, DocumentStore
from finata.domain.documents import (
    transaction_from_document,
    wallet_from_document,
    wallet_to_document,
)
from finata.domain.entities import (
    BalanceCheck,
    DEFAULT_WALLET_COLOR,
    Transaction,
    Wallet,
    WALLET_TYPES,
)
from finata.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    duplicate_wallet_name,
    wallet_delete_blocked,
    wallet_not_found,
)
from finata.domain.ledger import LedgerEngine

logger = logging.getLogger(__name__)


class WalletService:
    """Service for managing wallets."""

    def __init__(self, store: DocumentStore):
        """Initialize wallet service.

        Args:
            store: Document store instance
        """
        self.store = store
        self.ledger = LedgerEngine(store)

    def create_wallet(
        self,
        name: str,
        wallet_type: str,
        initial_balance: Decimal = Decimal("0"),
        color: Optional[str] = None,
    ) -> str:
        """Create a new wallet.

        The currency is derived from the wallet type and cannot change later.
        The initial balance is only settable here.

        Args:
            name: Wallet name
            wallet_type: One of WALLET_TYPES
            initial_balance: Opening balance (may be negative, e.g. a credit card)
            color: Display color

        Returns:
            Wallet ID

        Raises:
            ValidationError: If the name is empty, the type unknown or the balance invalid
            ConflictError: If wallet name already exists
        """
        name = self._clean_name(name)
        self._check_type(wallet_type)
        if not isinstance(initial_balance, Decimal) or not initial_balance.is_finite():
            raise ValidationError(f"Initial balance must be a number, got '{initial_balance}'")
        self._ensure_unique_name(name)

        wallet = Wallet(
            id=uuid.uuid4().hex,
            name=name,
            type=wallet_type,
            currency=WALLET_TYPES[wallet_type],
            balance=initial_balance,
            initial_balance=initial_balance,
            color=color or DEFAULT_WALLET_COLOR,
            created_at=datetime.now(),
        )
        self.store.set(Collection.WALLETS, wallet.id, wallet_to_document(wallet))
        logger.info("Created wallet %s (%s, %s)", wallet.id, wallet.type, wallet.currency)
        return wallet.id

    def get_wallet(self, wallet_id: str) -> Optional[Wallet]:
        """Get wallet by ID.

        Args:
            wallet_id: Wallet ID

        Returns:
            Wallet entity or None if not found
        """
        doc = self.store.get(Collection.WALLETS, wallet_id)
        if doc is None:
            return None
        return wallet_from_document(wallet_id, doc)

    def require_wallet(self, wallet_id: str) -> Wallet:
        """Get wallet by ID or raise NotFoundError."""
        wallet = self.get_wallet(wallet_id)
        if wallet is None:
            raise NotFoundError(wallet_not_found(wallet_id))
        return wallet

    def list_wallets(self) -> list[Wallet]:
        """List all wallets, ordered by name."""
        wallets = [
            wallet_from_document(doc_id, doc)
            for doc_id, doc in self.store.list(Collection.WALLETS)
        ]
        return sorted(wallets, key=lambda w: w.name.lower())

    def update_wallet(
        self,
        wallet_id: str,
        name: Optional[str] = None,
        wallet_type: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        """Edit wallet metadata. The balance is never touched here.

        Args:
            wallet_id: Wallet ID to update
            name: Optional new name
            wallet_type: Optional new type; must keep the wallet's currency
            color: Optional new color

        Raises:
            NotFoundError: If wallet not found
            ValidationError: If the type is unknown or would change the currency
            ConflictError: If the new name already exists
        """
        wallet = self.require_wallet(wallet_id)
        fields = {}

        if name is not None:
            name = self._clean_name(name)
            self._ensure_unique_name(name, exclude_id=wallet_id)
            fields["name"] = name

        if wallet_type is not None:
            self._check_type(wallet_type)
            if WALLET_TYPES[wallet_type] != wallet.currency:
                raise ValidationError(
                    f"Wallet type '{wallet_type}' uses {WALLET_TYPES[wallet_type]}, "
                    f"but this wallet holds {wallet.currency}; the currency cannot change"
                )
            fields["type"] = wallet_type

        if color is not None:
            fields["color"] = color

        if fields:
            self.store.update(Collection.WALLETS, wallet_id, fields)

    def delete_wallet(self, wallet_id: str, force: bool = False) -> int:
        """Delete a wallet.

        A wallet that transactions still reference is only deleted with
        ``force``; those transactions stay behind as orphans and deleting them
        later reverses nothing on the missing wallet.

        Args:
            wallet_id: Wallet ID to delete
            force: Delete even if transactions reference the wallet

        Returns:
            Number of transactions left referencing the deleted wallet

        Raises:
            NotFoundError: If wallet not found
            DependencyError: If transactions reference the wallet and force is False
        """
        self.require_wallet(wallet_id)
        count = len(self.wallet_transactions(wallet_id))
        if count > 0 and not force:
            raise DependencyError(wallet_delete_blocked(wallet_id, count))

        self.store.delete(Collection.WALLETS, wallet_id)
        if count:
            logger.warning("Deleted wallet %s leaving %d orphaned transaction(s)", wallet_id, count)
        return count

    def wallet_transactions(self, wallet_id: str) -> list[Transaction]:
        """Return every transaction that references the wallet."""
        transactions = (
            transaction_from_document(doc_id, doc)
            for doc_id, doc in self.store.list(Collection.TRANSACTIONS)
        )
        return [t for t in transactions if wallet_id in t.wallet_ids()]

    def check_wallet(self, wallet_id: str) -> BalanceCheck:
        """Compare the stored balance with initial balance plus transactions."""
        return self.ledger.verify(wallet_id)

    def _ensure_unique_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        for wallet in self.list_wallets():
            if wallet.id != exclude_id and wallet.name == name:
                raise ConflictError(duplicate_wallet_name(name))

    @staticmethod
    def _check_type(wallet_type: str) -> None:
        if wallet_type not in WALLET_TYPES:
            raise ValidationError(
                f"Unknown wallet type '{wallet_type}'. Choose one of: {', '.join(WALLET_TYPES)}"
            )

    @staticmethod
    def _clean_name(name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Wallet name is required")
        return name
