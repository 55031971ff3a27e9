"""Terminal formatting for amounts and transactions."""

from decimal import Decimal
from typing import Optional

from finata.cli.resolution import short_id
from finata.domain.entities import BASE_CURRENCY, Transaction, TransactionType


def format_amount(amount: Decimal, currency: Optional[str] = BASE_CURRENCY) -> str:
    return f"{amount:,.2f} {currency or '?'}"


def signed_amount(transaction: Transaction) -> str:
    """Amount with the sign it has on its wallet; transfers are unsigned."""
    if transaction.type == TransactionType.INCOME:
        return "+" + format_amount(transaction.amount, transaction.currency)
    if transaction.type == TransactionType.EXPENSE:
        return "-" + format_amount(transaction.amount, transaction.currency)
    return format_amount(transaction.amount, transaction.source_currency)


def transaction_line(transaction: Transaction) -> str:
    """One-line summary used by list views."""
    if transaction.is_transfer:
        where = f"{transaction.source_wallet_name} -> {transaction.target_wallet_name}"
        what = "Transfer"
    else:
        where = transaction.wallet_name or "?"
        what = transaction.category_name or "?"
    return (
        f"{short_id(transaction.id)} | {transaction.date:%Y-%m-%d} | "
        f"{signed_amount(transaction):>20s} | {where:25s} | {what:20s} | "
        f"{transaction.description or ''}"
    )
