"""Transfer command."""

import click

from finata.cli.error_handling import handle_domain_error
from finata.cli.formatting import format_amount
from finata.cli.resolution import resolve_wallet_or_exit, short_id
from finata.domain.errors import DomainError
from finata.domain.transaction import TransactionService


@click.command("transfer")
@click.option("--from", "source", required=True, help="Source wallet name or ID")
@click.option("--to", "target", required=True, help="Target wallet name or ID")
@click.option("--amount", required=True, help="Positive amount taken from the source wallet")
@click.option(
    "--date",
    help="Transfer date (YYYY-MM-DD or relative like 'today'); defaults to now",
)
@click.option("--description", help="Description (defaults to 'Para Transferi')")
@click.pass_context
def transfer(
    ctx, source: str, target: str, amount: str, date: str | None, description: str | None
):
    """Move money from one wallet to another.

    The same amount is subtracted from the source and added to the target;
    no currency conversion is applied.

    Examples:
        finata transfer --from "Ziraat" --to "Cüzdan" --amount 200
    """
    service = TransactionService(ctx.obj["store"])

    source_id = resolve_wallet_or_exit(ctx, service.wallets, source)
    target_id = resolve_wallet_or_exit(ctx, service.wallets, target)

    try:
        transaction = service.create_transfer(
            amount, source_id, target_id, date=date, description=description
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    source_wallet = service.wallets.require_wallet(source_id)
    target_wallet = service.wallets.require_wallet(target_id)
    click.echo(f"Created transfer {short_id(transaction.id)}")
    click.echo(f"  {source_wallet.name} -> {target_wallet.name}: {transaction.amount:,.2f}")
    click.echo(f"  Date: {transaction.date:%Y-%m-%d}")
    click.echo(f"  Description: {transaction.description}")
    click.echo(
        f"  Balances: {source_wallet.name} "
        f"{format_amount(source_wallet.balance, source_wallet.currency)}, "
        f"{target_wallet.name} {format_amount(target_wallet.balance, target_wallet.currency)}"
    )


def register_commands(cli):
    """Register transfer command with main CLI."""
    cli.add_command(transfer)
