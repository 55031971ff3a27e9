"""Summary command."""

import click

from finata.cli.formatting import format_amount
from finata.domain.currency import secondary_display
from finata.domain.mirror import LedgerMirror


@click.command("summary")
@click.option("--recent", default=5, show_default=True, help="Number of recent transactions to show")
@click.pass_context
def summary(ctx, recent: int):
    """Show net worth and income/expense totals in TRY.

    Foreign-currency amounts are converted with the current rate table.
    Currencies without a rate are left out of the totals.
    """
    rates = ctx.obj["rates"].load()

    with LedgerMirror(ctx.obj["store"]) as mirror:
        totals = mirror.totals(rates)
        wallets = mirror.wallets
        transactions = mirror.transactions[:recent]

    click.echo("\nSummary")
    click.echo("=" * 60)
    click.echo(f"Net worth:      {format_amount(totals.net_worth):>25s}")
    click.echo(f"Total income:   {format_amount(totals.total_income):>25s}")
    click.echo(f"Total expense:  {format_amount(totals.total_expense):>25s}")
    if totals.excluded_currencies:
        click.echo(f"No rate for: {', '.join(totals.excluded_currencies)} (left out)")

    if wallets:
        click.echo("\nWallets:")
        click.echo("-" * 60)
        for wallet in sorted(wallets, key=lambda w: w.name.lower()):
            line = f"{wallet.name:20s} {format_amount(wallet.balance, wallet.currency):>20s}"
            converted = secondary_display(wallet, rates)
            if converted is not None:
                line += f" (~ {format_amount(converted)})"
            click.echo(line)

    if transactions:
        click.echo("\nRecent transactions:")
        click.echo("-" * 60)
        for transaction in transactions:
            if transaction.is_transfer:
                label = f"{transaction.source_wallet_name} -> {transaction.target_wallet_name}"
            else:
                label = f"{transaction.wallet_name} / {transaction.category_name}"
            click.echo(
                f"{transaction.date:%Y-%m-%d} {transaction.type.value:8s} "
                f"{transaction.amount:>12,.2f}  {label}"
            )


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
