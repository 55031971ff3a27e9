"""Transaction domain service.

Validates user requests for income, expense and transfer changes and hands
them to the ledger engine, which is the only code that writes balances.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from finata.database.base import Collection, DocumentStore
from finata.domain.category import CategoryService
from finata.domain.documents import transaction_from_document
from finata.domain.entities import (
    CategoryType,
    Transaction,
    TransactionDraft,
    TransactionType,
)
from finata.domain.errors import (
    NotFoundError,
    ValidationError,
    category_type_mismatch,
    invalid_amount,
    same_transfer_wallets,
    transaction_not_found,
)
from finata.domain.ledger import ENTRY_TYPES, LedgerEngine
from finata.domain.wallet import WalletService
from finata.utils.amount_parser import parse_positive_amount
from finata.utils.date_parser import parse_date, to_datetime

AmountInput = Union[str, int, Decimal]
DateInput = Union[str, date, datetime, None]


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, store: DocumentStore):
        """Initialize transaction service.

        Args:
            store: Document store instance
        """
        self.store = store
        self.ledger = LedgerEngine(store)
        self.wallets = WalletService(store)
        self.categories = CategoryService(store)

    def create_entry(
        self,
        transaction_type: Union[str, TransactionType],
        amount: AmountInput,
        wallet_id: str,
        category_id: str,
        date: DateInput = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """Record an income or expense.

        Args:
            transaction_type: "income" or "expense"
            amount: Positive amount in the wallet's currency
            wallet_id: Wallet the entry belongs to
            category_id: Category of matching type
            date: Transaction date (defaults to now)
            description: Optional description

        Returns:
            The saved transaction

        Raises:
            ValidationError: If the type, amount, date or category type is invalid
            NotFoundError: If the wallet or category doesn't exist
        """
        draft = self._entry_draft(
            transaction_type, amount, wallet_id, category_id, date, description
        )
        return self.ledger.record_entry(draft)

    def update_entry(
        self,
        transaction_id: str,
        transaction_type: Union[str, TransactionType, None] = None,
        amount: Optional[AmountInput] = None,
        wallet_id: Optional[str] = None,
        category_id: Optional[str] = None,
        date: DateInput = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """Edit an income or expense in place.

        Fields left as None keep their stored value. An empty description
        clears it. Switching between income and expense requires a category
        of the new type.

        Raises:
            ValidationError: If the transaction is a transfer or a field is invalid
            NotFoundError: If the transaction, wallet or category doesn't exist
        """
        existing = self.require_transaction(transaction_id)
        if existing.is_transfer:
            raise ValidationError(
                f"Transaction {transaction_id} is a transfer; use update_transfer instead"
            )

        draft = self._entry_draft(
            transaction_type if transaction_type is not None else existing.type,
            amount if amount is not None else existing.amount,
            wallet_id or existing.wallet_id,
            category_id or existing.category_id,
            date if date is not None else existing.date,
            description if description is not None else existing.description,
        )
        return self.ledger.revise_entry(transaction_id, draft)

    def create_transfer(
        self,
        amount: AmountInput,
        source_wallet_id: str,
        target_wallet_id: str,
        date: DateInput = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """Move money from one wallet to another.

        Raises:
            ValidationError: If the amount is invalid or the wallets are the same
            NotFoundError: If either wallet doesn't exist
        """
        if not source_wallet_id or not target_wallet_id:
            raise ValidationError("Transfer needs a source and a target wallet")
        if source_wallet_id == target_wallet_id:
            raise ValidationError(same_transfer_wallets())
        draft = TransactionDraft(
            type=TransactionType.TRANSFER,
            amount=self._amount(amount),
            date=self._date(date),
            description=self._description(description),
            source_wallet_id=self.wallets.require_wallet(source_wallet_id).id,
            target_wallet_id=self.wallets.require_wallet(target_wallet_id).id,
        )
        return self.ledger.record_transfer(draft)

    def update_transfer(
        self,
        transaction_id: str,
        amount: Optional[AmountInput] = None,
        date: DateInput = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """Edit a transfer's amount, date or description.

        The source and target wallets of a transfer cannot be edited.

        Raises:
            ValidationError: If the transaction is not a transfer or a field is invalid
            NotFoundError: If the transaction or its wallets don't exist
        """
        existing = self.require_transaction(transaction_id)
        if not existing.is_transfer:
            raise ValidationError(
                f"Transaction {transaction_id} is an {existing.type.value}; use update_entry instead"
            )
        draft = TransactionDraft(
            type=TransactionType.TRANSFER,
            amount=self._amount(amount if amount is not None else existing.amount),
            date=self._date(date) if date is not None else existing.date,
            description=(
                self._description(description)
                if description is not None
                else existing.description
            ),
            source_wallet_id=existing.source_wallet_id,
            target_wallet_id=existing.target_wallet_id,
        )
        return self.ledger.revise_transfer(transaction_id, draft)

    def delete_transaction(self, transaction_id: str) -> Transaction:
        """Delete a transaction, reversing its effect on the wallets.

        Returns:
            The deleted transaction

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        return self.ledger.remove(transaction_id)

    def copy_transaction(self, transaction_id: str) -> TransactionDraft:
        """Prefill a new, unsaved transaction from an existing one.

        The copy gets today's date and no identity; nothing is written until
        it is passed to ``save_draft``.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        source = self.require_transaction(transaction_id)
        today = to_datetime(date.today())
        if source.is_transfer:
            return TransactionDraft(
                type=TransactionType.TRANSFER,
                amount=source.amount,
                date=today,
                description=source.description,
                source_wallet_id=source.source_wallet_id,
                target_wallet_id=source.target_wallet_id,
            )
        return TransactionDraft(
            type=source.type,
            amount=source.amount,
            date=today,
            description=source.description,
            wallet_id=source.wallet_id,
            category_id=source.category_id,
        )

    def save_draft(self, draft: TransactionDraft) -> Transaction:
        """Create a new transaction from a draft (for example a copy)."""
        if draft.type == TransactionType.TRANSFER:
            return self.create_transfer(
                draft.amount,
                draft.source_wallet_id,
                draft.target_wallet_id,
                date=draft.date,
                description=draft.description,
            )
        return self.create_entry(
            draft.type,
            draft.amount,
            draft.wallet_id,
            draft.category_id,
            date=draft.date,
            description=draft.description,
        )

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        doc = self.store.get(Collection.TRANSACTIONS, transaction_id)
        if doc is None:
            return None
        return transaction_from_document(transaction_id, doc)

    def require_transaction(self, transaction_id: str) -> Transaction:
        """Get transaction by ID or raise NotFoundError."""
        transaction = self.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def list_transactions(
        self,
        wallet_id: Optional[str] = None,
        transaction_type: Union[str, TransactionType, None] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            wallet_id: Only entries of this wallet and transfers touching it
            transaction_type: Only this type
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
        """
        type_filter = TransactionType(transaction_type) if transaction_type else None
        transactions = []
        for doc_id, doc in self.store.list(Collection.TRANSACTIONS):
            transaction = transaction_from_document(doc_id, doc)
            if wallet_id is not None and wallet_id not in transaction.wallet_ids():
                continue
            if type_filter is not None and transaction.type != type_filter:
                continue
            if start_date is not None and transaction.date.date() < start_date:
                continue
            if end_date is not None and transaction.date.date() > end_date:
                continue
            transactions.append(transaction)
        transactions.sort(key=lambda t: (t.date, t.created_at), reverse=True)
        return transactions

    def _entry_draft(
        self,
        transaction_type,
        amount,
        wallet_id: Optional[str],
        category_id: Optional[str],
        date: DateInput,
        description: Optional[str],
    ) -> TransactionDraft:
        entry_type = self._entry_type(transaction_type)
        parsed_amount = self._amount(amount)
        if not wallet_id:
            raise ValidationError("A wallet is required")
        if not category_id:
            raise ValidationError("A category is required")

        wallet = self.wallets.require_wallet(wallet_id)
        category = self.categories.require_category(category_id)
        if category.type != CategoryType(entry_type.value):
            raise ValidationError(
                category_type_mismatch(category.name, category.type.value, entry_type.value)
            )

        return TransactionDraft(
            type=entry_type,
            amount=parsed_amount,
            date=self._date(date),
            description=self._description(description),
            wallet_id=wallet.id,
            category_id=category.id,
        )

    @staticmethod
    def _entry_type(transaction_type) -> TransactionType:
        try:
            entry_type = TransactionType(transaction_type)
        except ValueError:
            raise ValidationError(f"Unknown transaction type '{transaction_type}'")
        if entry_type not in ENTRY_TYPES:
            raise ValidationError("Use create_transfer/update_transfer for transfers")
        return entry_type

    @staticmethod
    def _amount(amount) -> Decimal:
        try:
            return parse_positive_amount(amount)
        except ValueError:
            raise ValidationError(invalid_amount(amount))

    @staticmethod
    def _date(value: DateInput) -> Optional[datetime]:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return to_datetime(value)
        try:
            return to_datetime(parse_date(value))
        except ValueError as e:
            raise ValidationError(str(e))

    @staticmethod
    def _description(description: Optional[str]) -> Optional[str]:
        if description is None:
            return None
        return description.strip() or None
