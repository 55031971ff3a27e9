"""Tests for document <-> entity conversion."""

from datetime import date, datetime
from decimal import Decimal

from finata.domain.documents import (
    category_from_document,
    coerce_decimal,
    coerce_timestamp,
    transaction_from_document,
    transaction_to_document,
    wallet_from_document,
    wallet_to_document,
)
from finata.domain.entities import CategoryType, Transaction, TransactionType


class TestCoercion:
    """Tests for timestamp and amount coercion."""

    def test_timestamp_passthrough_and_date(self):
        stamp = datetime(2024, 5, 1, 8, 15)
        assert coerce_timestamp(stamp) is stamp
        assert coerce_timestamp(date(2024, 5, 1)) == datetime(2024, 5, 1)

    def test_timestamp_from_string(self):
        assert coerce_timestamp("2024-05-01T08:15:00") == datetime(2024, 5, 1, 8, 15)

    def test_timestamp_fallback_to_now(self):
        before = datetime.now()
        for value in (None, "", "garbage", 12):
            assert before <= coerce_timestamp(value) <= datetime.now()

    def test_decimal_coercion(self):
        assert coerce_decimal(None) == Decimal("0")
        assert coerce_decimal(0.1) == Decimal("0.1")
        assert coerce_decimal("12.50") == Decimal("12.50")
        assert coerce_decimal("n/a") == Decimal("0")


class TestWalletDocuments:
    """Tests for wallet documents."""

    def test_round_trip(self):
        doc = {
            "name": "Euro Hesabı",
            "type": "Euro",
            "currency": "EUR",
            "balance": Decimal("120.5"),
            "initial_balance": Decimal("100"),
            "color": "#ff0000",
            "created_at": datetime(2024, 1, 1),
        }
        wallet = wallet_from_document("w1", doc)
        assert wallet.id == "w1"
        assert wallet.currency == "EUR"
        assert wallet_to_document(wallet) == doc

    def test_missing_fields_get_defaults(self):
        """Currency falls back to the type's currency, color to the default."""
        wallet = wallet_from_document("w1", {"name": "Altın", "type": "Altın"})
        assert wallet.currency == "GRAM"
        assert wallet.balance == Decimal("0")
        assert wallet.color == "#3b82f6"


class TestTransactionDocuments:
    """Tests for transaction documents."""

    def test_entry_document_has_only_entry_fields(self):
        txn = Transaction(
            id="t1",
            type=TransactionType.EXPENSE,
            amount=Decimal("10"),
            date=datetime(2024, 1, 2),
            description=None,
            created_at=datetime(2024, 1, 2, 9),
            wallet_id="w1",
            wallet_name="Cüzdan",
            currency="TRY",
            category_id="default-bill",
            category_name="Fatura",
        )
        doc = transaction_to_document(txn)
        assert doc["type"] == "expense"
        assert "source_wallet_id" not in doc
        assert transaction_from_document("t1", doc) == txn

    def test_transfer_document_has_only_transfer_fields(self):
        txn = Transaction(
            id="t2",
            type=TransactionType.TRANSFER,
            amount=Decimal("5"),
            date=datetime(2024, 1, 2),
            description="Para Transferi",
            created_at=datetime(2024, 1, 2, 9),
            source_wallet_id="w1",
            source_wallet_name="A",
            source_currency="TRY",
            target_wallet_id="w2",
            target_wallet_name="B",
            target_currency="USD",
        )
        doc = transaction_to_document(txn)
        assert "wallet_id" not in doc
        assert "category_id" not in doc
        restored = transaction_from_document("t2", doc)
        assert restored == txn
        assert restored.wallet_ids() == ("w1", "w2")

    def test_string_date_is_coerced(self):
        txn = transaction_from_document(
            "t3", {"type": "income", "amount": "3", "date": "2024-02-03", "wallet_id": "w"}
        )
        assert txn.date == datetime(2024, 2, 3)
        assert txn.amount == Decimal("3")


def test_category_from_document():
    category = category_from_document("c1", {"name": "Hobi", "type": "expense"})
    assert category.type == CategoryType.EXPENSE
    assert not category.is_default
