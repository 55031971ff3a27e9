"""Wallet management commands."""

import click

from finata.cli.error_handling import handle_domain_error
from finata.cli.formatting import format_amount
from finata.cli.resolution import resolve_wallet_or_exit, short_id
from finata.domain.currency import secondary_display
from finata.domain.entities import WALLET_TYPES
from finata.domain.errors import DomainError
from finata.domain.wallet import WalletService
from finata.utils.amount_parser import parse_amount


@click.group()
def wallet_group():
    """Manage wallets."""
    pass


@wallet_group.command("create")
@click.argument("name", metavar="WALLET_NAME")
@click.option(
    "--type",
    "wallet_type",
    type=click.Choice(list(WALLET_TYPES)),
    default="Nakit",
    show_default=True,
    help="Wallet type; it decides the wallet's currency",
)
@click.option("--balance", default="0", help="Opening balance (may be negative)")
@click.option("--color", help="Display color, e.g. '#3b82f6'")
@click.pass_context
def create_wallet(ctx, name: str, wallet_type: str, balance: str, color: str | None):
    """Create a new wallet.

    Examples:
        finata wallet create "Cüzdan"
        finata wallet create "Ziraat" --type "Banka Hesabı" --balance 12.500,00
        finata wallet create "Dolar Hesabı" --type Dolar --balance 250
    """
    service = WalletService(ctx.obj["store"])

    try:
        opening = parse_amount(balance)
    except ValueError as e:
        click.echo(f"Error: Invalid balance: {e}", err=True)
        ctx.exit(1)

    try:
        wallet_id = service.create_wallet(
            name=name, wallet_type=wallet_type, initial_balance=opening, color=color
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    wallet = service.require_wallet(wallet_id)
    click.echo(f"Created wallet '{wallet.name}' (ID: {short_id(wallet_id)})")
    click.echo(f"  Type: {wallet.type} ({wallet.currency})")
    click.echo(f"  Balance: {format_amount(wallet.balance, wallet.currency)}")


@wallet_group.command("list")
@click.pass_context
def list_wallets(ctx):
    """List all wallets with their balances.

    Foreign-currency wallets also show their value in TRY.
    """
    service = WalletService(ctx.obj["store"])
    rates = ctx.obj["rates"].load()

    wallets = service.list_wallets()
    if not wallets:
        click.echo("No wallets found.")
        return

    click.echo("\nWallets:")
    click.echo("-" * 90)
    for wallet in wallets:
        line = (
            f"{short_id(wallet.id)} | {wallet.name:20s} | {wallet.type:15s} | "
            f"{format_amount(wallet.balance, wallet.currency):>20s}"
        )
        converted = secondary_display(wallet, rates)
        if converted is not None:
            line += f" (~ {format_amount(converted)})"
        elif wallet.currency != "TRY":
            line += " (no rate)"
        click.echo(line)


@wallet_group.command("types")
def list_wallet_types():
    """List the available wallet types and their currencies."""
    for wallet_type, currency in WALLET_TYPES.items():
        click.echo(f"{wallet_type:15s} {currency}")


@wallet_group.command("edit")
@click.argument("wallet", metavar="WALLET")
@click.option("--name", help="New wallet name")
@click.option(
    "--type",
    "wallet_type",
    type=click.Choice(list(WALLET_TYPES)),
    help="New wallet type (must keep the same currency)",
)
@click.option("--color", help="New display color")
@click.pass_context
def edit_wallet(ctx, wallet: str, name: str | None, wallet_type: str | None, color: str | None):
    """Edit a wallet's name, type or color.

    WALLET can be a wallet name or ID. The balance cannot be edited; it only
    changes through transactions.

    Examples:
        finata wallet edit "Cüzdan" --name "Nakit Cüzdan"
        finata wallet edit "Ziraat" --type "Vadeli Mevduat"
    """
    service = WalletService(ctx.obj["store"])
    wallet_id = resolve_wallet_or_exit(ctx, service, wallet)

    if name is None and wallet_type is None and color is None:
        click.echo("Nothing to change. Use --name, --type or --color.")
        return

    try:
        service.update_wallet(wallet_id, name=name, wallet_type=wallet_type, color=color)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated wallet '{service.require_wallet(wallet_id).name}'")


@wallet_group.command("delete")
@click.argument("wallet", metavar="WALLET")
@click.option(
    "--force",
    is_flag=True,
    help="Delete even if transactions reference the wallet (they are kept)",
)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_wallet(ctx, wallet: str, force: bool, yes: bool):
    """Delete a wallet.

    WALLET can be a wallet name or ID.

    A wallet with transactions can only be deleted with --force. Its
    transactions stay in the ledger; deleting them later does not touch
    any other wallet's balance beyond their own effect.
    """
    service = WalletService(ctx.obj["store"])
    wallet_id = resolve_wallet_or_exit(ctx, service, wallet)
    wallet_obj = service.require_wallet(wallet_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete wallet '{wallet_obj.name}' (ID: {short_id(wallet_id)})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        orphaned = service.delete_wallet(wallet_id, force=force)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted wallet '{wallet_obj.name}'")
    if orphaned:
        click.echo(f"{orphaned} transaction(s) still reference the deleted wallet.")


@wallet_group.command("check")
@click.argument("wallet", metavar="WALLET", required=False)
@click.pass_context
def check_wallets(ctx, wallet: str | None):
    """Check that stored balances match the transactions.

    With no WALLET, every wallet is checked. Exits with status 1 if any
    balance has drifted.
    """
    service = WalletService(ctx.obj["store"])
    if wallet is not None:
        wallets = [service.require_wallet(resolve_wallet_or_exit(ctx, service, wallet))]
    else:
        wallets = service.list_wallets()

    if not wallets:
        click.echo("No wallets found.")
        return

    drifted = 0
    for wallet_obj in wallets:
        check = service.check_wallet(wallet_obj.id)
        if check.is_consistent:
            click.echo(
                f"OK     {wallet_obj.name}: "
                f"{format_amount(check.stored_balance, wallet_obj.currency)} "
                f"({check.transaction_count} transaction(s))"
            )
        else:
            drifted += 1
            click.echo(
                f"DRIFT  {wallet_obj.name}: stored "
                f"{format_amount(check.stored_balance, wallet_obj.currency)}, expected "
                f"{format_amount(check.expected_balance, wallet_obj.currency)}"
            )

    if drifted:
        ctx.exit(1)


def register_commands(cli):
    """Register wallet commands with main CLI."""
    cli.add_command(wallet_group, name="wallet")
