"""CLI helpers for resolving wallets, categories and transactions."""

from __future__ import annotations

import click

from finata.cli.error_handling import handle_domain_error
from finata.domain.category import CategoryService
from finata.domain.entities import CategoryType
from finata.domain.transaction import TransactionService
from finata.domain.wallet import WalletService
from finata.utils.wallet_resolver import resolve_wallet

SHORT_ID = 8


def short_id(doc_id: str | None) -> str:
    """Abbreviated id for display; any unique prefix is accepted back."""
    return (doc_id or "")[:SHORT_ID]


def resolve_wallet_or_exit(ctx: click.Context, wallet_service: WalletService, wallet: str) -> str:
    """Resolve wallet name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_wallet(wallet_service, wallet)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_category_or_exit(
    ctx: click.Context,
    category_service: CategoryService,
    category: str,
    category_type: CategoryType,
) -> str:
    """Resolve a category ID or name (case-insensitive) within a type."""
    candidates = category_service.list_categories(category_type)
    wanted = category.strip().lower()
    for candidate in candidates:
        if candidate.id == category.strip():
            return candidate.id
    for candidate in candidates:
        if candidate.name.lower() == wanted:
            return candidate.id
    click.echo(f"Error: No {category_type.value} category '{category}'", err=True)
    ctx.exit(1)


def resolve_transaction_or_exit(
    ctx: click.Context, transaction_service: TransactionService, transaction: str
) -> str:
    """Resolve a full transaction ID or a unique prefix of one."""
    transaction = transaction.strip()
    if transaction_service.get_transaction(transaction) is not None:
        return transaction

    matches = [
        t.id for t in transaction_service.list_transactions() if t.id.startswith(transaction)
    ]
    if len(transaction) >= 4 and len(matches) == 1:
        return matches[0]
    if len(matches) > 1 and len(transaction) >= 4:
        click.echo(f"Error: Transaction ID prefix '{transaction}' is ambiguous", err=True)
    else:
        click.echo(f"Error: Transaction {transaction} not found", err=True)
    ctx.exit(1)
