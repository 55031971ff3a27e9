"""Tests for TransactionService request handling."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from finata.database.base import Collection
from finata.domain.entities import TransactionType
from finata.domain.errors import NotFoundError, ValidationError


def test_create_entry_parses_strings(transaction_service, cash_wallet, balance_of):
    """Amounts and dates may be given as user-entered strings."""
    txn = transaction_service.create_entry(
        "expense", "1.234,56", cash_wallet.id, "default-groceries", date="2024-03-05",
        description="  Market  ",
    )
    assert txn.amount == Decimal("1234.56")
    assert txn.date == datetime(2024, 3, 5)
    assert txn.description == "Market"
    assert txn.category_name == "Market Alışverişi"
    assert txn.currency == "TRY"
    assert balance_of(cash_wallet.id) == Decimal("500") - Decimal("1234.56")


def test_create_entry_defaults_date_to_now(transaction_service, cash_wallet):
    """Without a date the entry is dated now."""
    before = datetime.now()
    txn = transaction_service.create_entry("income", 10, cash_wallet.id, "default-salary")
    assert before <= txn.date <= datetime.now()
    assert txn.description is None


@pytest.mark.parametrize("amount", ["0", "-10", "abc", ""])
def test_create_entry_rejects_bad_amount(transaction_service, store, cash_wallet, amount):
    """Invalid amounts fail before anything is written."""
    with pytest.raises(ValidationError):
        transaction_service.create_entry("expense", amount, cash_wallet.id, "default-bill")
    assert store.list(Collection.TRANSACTIONS) == []


def test_create_entry_rejects_transfer_type(transaction_service, cash_wallet):
    """Transfers go through create_transfer."""
    with pytest.raises(ValidationError):
        transaction_service.create_entry("transfer", "10", cash_wallet.id, "default-bill")


def test_create_entry_rejects_unknown_type(transaction_service, cash_wallet):
    with pytest.raises(ValidationError, match="Unknown transaction type"):
        transaction_service.create_entry("gift", "10", cash_wallet.id, "default-bill")


def test_create_entry_unknown_wallet_and_category(transaction_service, cash_wallet):
    """Missing references raise NotFoundError."""
    with pytest.raises(NotFoundError):
        transaction_service.create_entry("expense", "10", "missing", "default-bill")
    with pytest.raises(NotFoundError):
        transaction_service.create_entry("expense", "10", cash_wallet.id, "missing")


def test_create_entry_category_type_mismatch(transaction_service, cash_wallet):
    with pytest.raises(ValidationError, match="cannot be used for an income"):
        transaction_service.create_entry("income", "10", cash_wallet.id, "default-bill")


def test_create_entry_with_user_category(transaction_service, category_service, cash_wallet):
    """User categories work like defaults."""
    category_id = category_service.create_category("Kırtasiye", "expense")
    txn = transaction_service.create_entry("expense", "12", cash_wallet.id, category_id)
    assert txn.category_name == "Kırtasiye"


def test_update_entry_rejects_transfer(transaction_service, cash_wallet, bank_wallet):
    txn = transaction_service.create_transfer("10", cash_wallet.id, bank_wallet.id)
    with pytest.raises(ValidationError, match="update_transfer"):
        transaction_service.update_entry(txn.id, amount="20")


def test_update_transfer_rejects_entry(transaction_service, cash_wallet):
    txn = transaction_service.create_entry("income", "10", cash_wallet.id, "default-salary")
    with pytest.raises(ValidationError, match="update_entry"):
        transaction_service.update_transfer(txn.id, amount="20")


def test_update_entry_switch_type_needs_matching_category(
    transaction_service, cash_wallet, balance_of
):
    """Switching to expense while keeping an income category is refused."""
    txn = transaction_service.create_entry("income", "150", cash_wallet.id, "default-salary")
    with pytest.raises(ValidationError):
        transaction_service.update_entry(txn.id, transaction_type="expense")
    assert balance_of(cash_wallet.id) == Decimal("650")


def test_update_entry_clears_description(transaction_service, cash_wallet):
    txn = transaction_service.create_entry(
        "expense", "10", cash_wallet.id, "default-bill", description="Elektrik"
    )
    updated = transaction_service.update_entry(txn.id, description="")
    assert updated.description is None


def test_update_missing_transaction(transaction_service):
    with pytest.raises(NotFoundError):
        transaction_service.update_entry("missing", amount="1")
    with pytest.raises(NotFoundError):
        transaction_service.update_transfer("missing", amount="1")
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction("missing")


def test_update_transfer_description_and_date(transaction_service, cash_wallet, bank_wallet):
    txn = transaction_service.create_transfer(
        "10", cash_wallet.id, bank_wallet.id, description="Harçlık"
    )
    updated = transaction_service.update_transfer(txn.id, date="2024-02-01", description="Kira")
    assert updated.date == datetime(2024, 2, 1)
    assert updated.description == "Kira"
    assert updated.amount == Decimal("10")


def test_create_transfer_between_currencies_moves_raw_amount(
    transaction_service, cash_wallet, dollar_wallet, balance_of
):
    """Transfers apply the same number to both sides; no conversion."""
    txn = transaction_service.create_transfer("5", dollar_wallet.id, cash_wallet.id)
    assert balance_of(dollar_wallet.id) == Decimal("5")
    assert balance_of(cash_wallet.id) == Decimal("505")
    assert txn.source_currency == "USD"
    assert txn.target_currency == "TRY"


def test_create_transfer_missing_wallet(transaction_service, cash_wallet):
    with pytest.raises(NotFoundError):
        transaction_service.create_transfer("5", cash_wallet.id, "missing")


def test_copy_entry_is_unsaved_draft(transaction_service, store, cash_wallet):
    """Copying prefills a draft dated today and writes nothing."""
    txn = transaction_service.create_entry(
        "expense", "42", cash_wallet.id, "default-dining", date="2024-01-01", description="Pide"
    )
    draft = transaction_service.copy_transaction(txn.id)

    assert draft.type == TransactionType.EXPENSE
    assert draft.amount == Decimal("42")
    assert draft.wallet_id == cash_wallet.id
    assert draft.category_id == "default-dining"
    assert draft.description == "Pide"
    assert draft.date.date() == date.today()
    assert len(store.list(Collection.TRANSACTIONS)) == 1


def test_save_copied_draft(transaction_service, cash_wallet, bank_wallet, balance_of):
    """Saving a copy of a transfer creates a second transfer."""
    txn = transaction_service.create_transfer("100", cash_wallet.id, bank_wallet.id)
    copied = transaction_service.save_draft(transaction_service.copy_transaction(txn.id))

    assert copied.id != txn.id
    assert copied.type == TransactionType.TRANSFER
    assert balance_of(cash_wallet.id) == Decimal("300")
    assert balance_of(bank_wallet.id) == Decimal("300")


def test_list_transactions_filters(transaction_service, cash_wallet, bank_wallet):
    """Filters by wallet, type and date range; newest first."""
    old = transaction_service.create_entry(
        "income", "10", cash_wallet.id, "default-salary", date="2024-01-01"
    )
    mid = transaction_service.create_transfer(
        "5", bank_wallet.id, cash_wallet.id, date="2024-02-01"
    )
    new = transaction_service.create_entry(
        "expense", "3", bank_wallet.id, "default-bill", date="2024-03-01"
    )

    assert [t.id for t in transaction_service.list_transactions()] == [new.id, mid.id, old.id]
    assert [t.id for t in transaction_service.list_transactions(wallet_id=cash_wallet.id)] == [
        mid.id,
        old.id,
    ]
    assert [t.id for t in transaction_service.list_transactions(transaction_type="transfer")] == [
        mid.id
    ]
    ranged = transaction_service.list_transactions(
        start_date=date(2024, 1, 15), end_date=date(2024, 2, 1)
    )
    assert [t.id for t in ranged] == [mid.id]


def test_list_transactions_relative_date(transaction_service, cash_wallet):
    yesterday = date.today() - timedelta(days=1)
    txn = transaction_service.create_entry(
        "income", "1", cash_wallet.id, "default-salary", date="yesterday"
    )
    assert txn.date.date() == yesterday
    assert transaction_service.list_transactions(start_date=yesterday, end_date=yesterday)
