"""Add income/expense command."""

import click

from finata.cli.error_handling import handle_domain_error
from finata.cli.formatting import signed_amount
from finata.cli.resolution import resolve_category_or_exit, resolve_wallet_or_exit, short_id
from finata.domain.entities import CategoryType
from finata.domain.errors import DomainError
from finata.domain.transaction import TransactionService


@click.command("add")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["income", "expense"]),
    default="expense",
    show_default=True,
    help="Income or expense",
)
@click.option("--wallet", required=True, help="Wallet name or ID")
@click.option("--amount", required=True, help="Positive amount, e.g. 150 or 1.234,56")
@click.option("--category", required=True, help="Category name or ID of the matching type")
@click.option(
    "--date",
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday'); defaults to now",
)
@click.option("--description", help="Transaction description")
@click.pass_context
def add_transaction(
    ctx,
    transaction_type: str,
    wallet: str,
    amount: str,
    category: str,
    date: str | None,
    description: str | None,
):
    """Record an income or expense on a wallet.

    Examples:
        finata add --wallet "Cüzdan" --amount 150 --category "Market Alışverişi"
        finata add --type income --wallet "Ziraat" --amount 35000 --category Maaş --date 2024-01-15
    """
    service = TransactionService(ctx.obj["store"])

    wallet_id = resolve_wallet_or_exit(ctx, service.wallets, wallet)
    category_id = resolve_category_or_exit(
        ctx, service.categories, category, CategoryType(transaction_type)
    )

    try:
        transaction = service.create_entry(
            transaction_type,
            amount,
            wallet_id,
            category_id,
            date=date,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    wallet_obj = service.wallets.require_wallet(wallet_id)
    click.echo(f"Created {transaction.type.value} {short_id(transaction.id)}")
    click.echo(f"  Wallet: {wallet_obj.name}")
    click.echo(f"  Date: {transaction.date:%Y-%m-%d}")
    click.echo(f"  Amount: {signed_amount(transaction)}")
    click.echo(f"  Category: {transaction.category_name}")
    if transaction.description:
        click.echo(f"  Description: {transaction.description}")
    click.echo(f"  New balance: {wallet_obj.balance:,.2f} {wallet_obj.currency}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
