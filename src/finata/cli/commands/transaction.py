"""Transaction management commands."""

from dataclasses import replace

import click

from finata.cli.date_filters import period_option, resolve_cli_date_range
from finata.cli.error_handling import handle_domain_error
from finata.cli.formatting import signed_amount, transaction_line
from finata.cli.resolution import (
    resolve_category_or_exit,
    resolve_transaction_or_exit,
    resolve_wallet_or_exit,
    short_id,
)
from finata.domain.entities import CategoryType
from finata.domain.errors import DomainError
from finata.domain.transaction import TransactionService
from finata.utils.amount_parser import parse_positive_amount
from finata.utils.date_parser import parse_date, to_datetime


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--wallet", help="Wallet name or ID (includes transfers in and out)")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["income", "expense", "transfer"]),
    help="Only this kind of transaction",
)
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last monday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_option
@click.pass_context
def list_transactions(
    ctx,
    wallet: str | None,
    transaction_type: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
):
    """List transactions, newest first."""
    service = TransactionService(ctx.obj["store"])

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    wallet_id = resolve_wallet_or_exit(ctx, service.wallets, wallet) if wallet else None

    transactions = service.list_transactions(
        wallet_id=wallet_id,
        transaction_type=transaction_type,
        start_date=start,
        end_date=end,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 120)
    for transaction in transactions:
        click.echo(transaction_line(transaction))


@transaction_group.command("show")
@click.argument("transaction", metavar="TRANSACTION_ID")
@click.pass_context
def show_transaction(ctx, transaction: str):
    """Show every field of one transaction.

    TRANSACTION_ID may be abbreviated to any unique prefix of 4 or more characters.
    """
    service = TransactionService(ctx.obj["store"])
    transaction_id = resolve_transaction_or_exit(ctx, service, transaction)
    txn = service.require_transaction(transaction_id)

    click.echo(f"\nTransaction ID: {txn.id}")
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Date: {txn.date:%Y-%m-%d %H:%M}")
    click.echo(f"  Amount: {signed_amount(txn)}")
    if txn.is_transfer:
        click.echo(f"  From: {txn.source_wallet_name} ({txn.source_currency})")
        click.echo(f"  To: {txn.target_wallet_name} ({txn.target_currency})")
    else:
        click.echo(f"  Wallet: {txn.wallet_name}")
        click.echo(f"  Category: {txn.category_name}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    click.echo(f"  Created: {txn.created_at:%Y-%m-%d %H:%M}")


@transaction_group.command("edit")
@click.argument("transaction", metavar="TRANSACTION_ID")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["income", "expense"]),
    help="Switch an entry between income and expense (needs a matching --category)",
)
@click.option("--amount", help="New amount")
@click.option("--wallet", help="Move an entry to another wallet (name or ID)")
@click.option("--category", help="New category name or ID")
@click.option("--date", help="New date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--description", help="New description; empty string clears it")
@click.pass_context
def edit_transaction(
    ctx,
    transaction: str,
    transaction_type: str | None,
    amount: str | None,
    wallet: str | None,
    category: str | None,
    date: str | None,
    description: str | None,
):
    """Edit a transaction. Balances are adjusted by the difference.

    Only the fields given are changed. The wallets of a transfer cannot be
    changed; delete it and create a new one instead.

    Examples:
        finata transaction edit 3f9a --amount 80
        finata transaction edit 3f9a --type income --category Maaş
    """
    service = TransactionService(ctx.obj["store"])
    transaction_id = resolve_transaction_or_exit(ctx, service, transaction)
    existing = service.require_transaction(transaction_id)

    try:
        if existing.is_transfer:
            if transaction_type or wallet or category:
                click.echo(
                    "Error: Only --amount, --date and --description can be changed on a transfer",
                    err=True,
                )
                ctx.exit(1)
            updated = service.update_transfer(
                transaction_id, amount=amount, date=date, description=description
            )
        else:
            wallet_id = resolve_wallet_or_exit(ctx, service.wallets, wallet) if wallet else None
            category_id = None
            if category:
                category_type = CategoryType(transaction_type or existing.type.value)
                category_id = resolve_category_or_exit(
                    ctx, service.categories, category, category_type
                )
            updated = service.update_entry(
                transaction_id,
                transaction_type=transaction_type,
                amount=amount,
                wallet_id=wallet_id,
                category_id=category_id,
                date=date,
                description=description,
            )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {short_id(updated.id)}")
    click.echo(transaction_line(updated))


@transaction_group.command("delete")
@click.argument("transaction", metavar="TRANSACTION_ID")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction: str, yes: bool):
    """Delete a transaction and reverse its effect on the wallets."""
    service = TransactionService(ctx.obj["store"])
    transaction_id = resolve_transaction_or_exit(ctx, service, transaction)
    txn = service.require_transaction(transaction_id)

    if not yes:
        click.echo(transaction_line(txn))
        if not click.confirm("Are you sure you want to delete this transaction?"):
            click.echo("Deletion cancelled.")
            return

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted transaction {short_id(transaction_id)}")


@transaction_group.command("copy")
@click.argument("transaction", metavar="TRANSACTION_ID")
@click.option("--amount", help="Amount for the copy (defaults to the original's)")
@click.option("--date", help="Date for the copy (defaults to today)")
@click.option("--description", help="Description for the copy")
@click.pass_context
def copy_transaction(
    ctx, transaction: str, amount: str | None, date: str | None, description: str | None
):
    """Save a new transaction prefilled from an existing one.

    The copy gets today's date unless --date is given.
    """
    service = TransactionService(ctx.obj["store"])
    transaction_id = resolve_transaction_or_exit(ctx, service, transaction)

    try:
        draft = service.copy_transaction(transaction_id)
        if amount is not None:
            draft = replace(draft, amount=parse_positive_amount(amount))
        if date is not None:
            draft = replace(draft, date=to_datetime(parse_date(date)))
        if description is not None:
            draft = replace(draft, description=description)
        copied = service.save_draft(draft)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {short_id(copied.id)} from {short_id(transaction_id)}")
    click.echo(transaction_line(copied))


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
