"""Tests for WalletService."""

from decimal import Decimal

import pytest

from finata.domain.entities import DEFAULT_WALLET_COLOR
from finata.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from finata.utils.wallet_resolver import resolve_wallet


def test_create_wallet_derives_currency(wallet_service):
    """Currency follows the wallet type."""
    wallet_id = wallet_service.create_wallet("Altın Hesabı", "Altın", initial_balance=Decimal("12.5"))
    wallet = wallet_service.require_wallet(wallet_id)

    assert wallet.currency == "GRAM"
    assert wallet.balance == Decimal("12.5")
    assert wallet.initial_balance == Decimal("12.5")
    assert wallet.color == DEFAULT_WALLET_COLOR


def test_create_wallet_negative_opening_balance(wallet_service):
    """Credit cards may start below zero."""
    wallet_id = wallet_service.create_wallet("Kart", "Kredi Kartı", initial_balance=Decimal("-800"))
    assert wallet_service.require_wallet(wallet_id).balance == Decimal("-800")


def test_create_wallet_validation(wallet_service):
    with pytest.raises(ValidationError):
        wallet_service.create_wallet("  ", "Nakit")
    with pytest.raises(ValidationError, match="Unknown wallet type"):
        wallet_service.create_wallet("X", "Bitcoin")


def test_create_wallet_duplicate_name(wallet_service, cash_wallet):
    with pytest.raises(ConflictError, match="already exists"):
        wallet_service.create_wallet("Cüzdan", "Nakit")


def test_list_wallets_sorted_by_name(wallet_service, cash_wallet, bank_wallet, dollar_wallet):
    names = [w.name for w in wallet_service.list_wallets()]
    assert names == ["Cüzdan", "Dolar", "Ziraat"]


def test_update_wallet_metadata_keeps_balance(wallet_service, transaction_service, cash_wallet):
    """Metadata edits never touch the balance."""
    transaction_service.create_entry("income", "25", cash_wallet.id, "default-salary")
    wallet_service.update_wallet(cash_wallet.id, name="Kasa", wallet_type="Banka Hesabı", color="#000000")

    wallet = wallet_service.require_wallet(cash_wallet.id)
    assert wallet.name == "Kasa"
    assert wallet.type == "Banka Hesabı"
    assert wallet.color == "#000000"
    assert wallet.balance == Decimal("525")


def test_update_wallet_rejects_currency_change(wallet_service, cash_wallet):
    with pytest.raises(ValidationError, match="currency cannot change"):
        wallet_service.update_wallet(cash_wallet.id, wallet_type="Euro")
    assert wallet_service.require_wallet(cash_wallet.id).currency == "TRY"


def test_update_wallet_duplicate_name(wallet_service, cash_wallet, bank_wallet):
    with pytest.raises(ConflictError):
        wallet_service.update_wallet(bank_wallet.id, name="Cüzdan")
    # Renaming to its own name is fine
    wallet_service.update_wallet(bank_wallet.id, name="Ziraat")


def test_update_missing_wallet(wallet_service):
    with pytest.raises(NotFoundError):
        wallet_service.update_wallet("missing", name="X")


def test_delete_empty_wallet(wallet_service, cash_wallet):
    assert wallet_service.delete_wallet(cash_wallet.id) == 0
    assert wallet_service.get_wallet(cash_wallet.id) is None


def test_delete_wallet_with_transactions_needs_force(
    wallet_service, transaction_service, cash_wallet, bank_wallet
):
    """Referenced wallets are only deleted with force, leaving orphans."""
    transaction_service.create_entry("expense", "5", cash_wallet.id, "default-bill")
    transaction_service.create_transfer("5", bank_wallet.id, cash_wallet.id)

    with pytest.raises(DependencyError, match="2 transactions"):
        wallet_service.delete_wallet(cash_wallet.id)
    assert wallet_service.get_wallet(cash_wallet.id) is not None

    assert wallet_service.delete_wallet(cash_wallet.id, force=True) == 2
    assert wallet_service.get_wallet(cash_wallet.id) is None
    assert len(transaction_service.list_transactions()) == 2


def test_check_wallet(wallet_service, transaction_service, cash_wallet):
    transaction_service.create_entry("expense", "100", cash_wallet.id, "default-bill")
    check = wallet_service.check_wallet(cash_wallet.id)
    assert check.is_consistent
    assert check.expected_balance == Decimal("400")
    assert check.transaction_count == 1


def test_check_missing_wallet(wallet_service):
    with pytest.raises(NotFoundError):
        wallet_service.check_wallet("missing")


def test_resolve_wallet_by_name_id_and_prefix(wallet_service, cash_wallet, bank_wallet):
    assert resolve_wallet(wallet_service, "Cüzdan") == cash_wallet.id
    assert resolve_wallet(wallet_service, cash_wallet.id) == cash_wallet.id
    assert resolve_wallet(wallet_service, bank_wallet.id[:8]) == bank_wallet.id


def test_resolve_wallet_not_found(wallet_service, cash_wallet):
    with pytest.raises(NotFoundError):
        resolve_wallet(wallet_service, "Nowhere")
    # Too short to be treated as an id prefix
    with pytest.raises(NotFoundError):
        resolve_wallet(wallet_service, cash_wallet.id[:3])
