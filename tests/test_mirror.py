"""Tests for the live ledger mirror."""

from decimal import Decimal

import pytest

from finata.domain.entities import CategoryType
from finata.domain.mirror import LedgerMirror

RATES = {"USD": Decimal("42.43")}


def test_mirror_requires_start(store):
    mirror = LedgerMirror(store)
    assert not mirror.running
    with pytest.raises(RuntimeError):
        mirror.wallets


def test_mirror_initial_snapshot(store, cash_wallet, category_service):
    """Starting delivers the current state immediately."""
    category_service.create_category("Hobi", CategoryType.EXPENSE)
    with LedgerMirror(store) as mirror:
        assert mirror.running
        assert [w.id for w in mirror.wallets] == [cash_wallet.id]
        assert mirror.categories(CategoryType.EXPENSE)[-1].name == "Hobi"
        assert len(mirror.categories()) == 13
    assert not mirror.running


def test_mirror_follows_commits(store, transaction_service, cash_wallet, bank_wallet):
    """Every committed mutation refreshes the mirrored collections."""
    mirror = LedgerMirror(store).start()

    first = transaction_service.create_entry(
        "income", "40", cash_wallet.id, "default-salary", date="2024-01-01"
    )
    second = transaction_service.create_transfer(
        "15", cash_wallet.id, bank_wallet.id, date="2024-02-01"
    )

    assert [t.id for t in mirror.transactions] == [second.id, first.id]
    assert mirror.wallet(cash_wallet.id).balance == Decimal("525")
    assert mirror.wallet(bank_wallet.id).balance == Decimal("115")
    assert [t.id for t in mirror.wallet_transactions(bank_wallet.id)] == [second.id]
    assert mirror.wallet("missing") is None

    transaction_service.delete_transaction(first.id)
    assert [t.id for t in mirror.transactions] == [second.id]
    assert mirror.wallet(cash_wallet.id).balance == Decimal("485")
    mirror.stop()


def test_mirror_stop_unsubscribes(store, wallet_service):
    """After stop, new commits are not delivered and the cache is dropped."""
    mirror = LedgerMirror(store).start()
    mirror.stop()
    wallet_service.create_wallet("Yeni", "Nakit")
    mirror.start()
    assert [w.name for w in mirror.wallets] == ["Yeni"]
    mirror.stop()


def test_mirror_totals(store, transaction_service, cash_wallet, dollar_wallet):
    """Totals are converted to TRY; unknown currencies are left out."""
    transaction_service.create_entry("income", "100", cash_wallet.id, "default-salary")
    transaction_service.create_entry("expense", "1", dollar_wallet.id, "default-bill")

    with LedgerMirror(store) as mirror:
        totals = mirror.totals(RATES)
        # 600 TRY + 9 USD * 42.43
        assert totals.net_worth == Decimal("981.87")
        assert totals.total_income == Decimal("100")
        assert totals.total_expense == Decimal("42.43")
        assert totals.excluded_currencies == ()

        totals = mirror.totals({})
        assert totals.net_worth == Decimal("600")
        assert totals.total_expense == Decimal("0")
        assert totals.excluded_currencies == ("USD",)
