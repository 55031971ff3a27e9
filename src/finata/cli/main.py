"""Main CLI entry point."""

import logging

import click

from finata.cli.error_handling import handle_domain_error
from finata.database.factories import create_sqlite_store
from finata.database.rates import RateTableFile
from finata.domain.errors import DomainError
from finata.settings import Settings

# Import and register all commands at module level
from finata.cli.commands import (
    wallet,
    add,
    transfer,
    transaction,
    category,
    rates,
    summary,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINATA_DB_PATH environment variable)",
    envvar="FINATA_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    help="Ledger owner; each user has separate wallets and transactions",
    envvar="FINATA_USER",
)
@click.option(
    "--rates-path",
    type=click.Path(dir_okay=False),
    help="Path to the exchange-rate table (overrides FINATA_RATES_PATH)",
    envvar="FINATA_RATES_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar="FINATA_LOG_LEVEL",
    help="Logging level (default: WARNING)",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str | None, rates_path: str | None, log_level: str | None):
    """Finata - Wallet and transaction ledger.

    Keep track of money across cash, bank, card, foreign currency, gold and
    crypto wallets. Every income, expense and transfer updates the wallet
    balances it touches.
    """
    ctx.ensure_object(dict)
    try:
        settings = Settings.from_env()
    except DomainError as e:
        handle_domain_error(ctx, e)

    logging.basicConfig(level=(log_level or settings.log_level).upper(), format=LOG_FORMAT)

    # Open the store only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path, user_id=user_id, settings=settings)
        store.connect()
        store.initialize_schema()
        ctx.obj["store"] = store
        ctx.call_on_close(store.disconnect)
        ctx.obj["rates"] = RateTableFile(
            rates_path if rates_path else settings.resolved_rates_path()
        )


# Register all commands
wallet.register_commands(cli)
add.register_commands(cli)
transfer.register_commands(cli)
transaction.register_commands(cli)
category.register_commands(cli)
rates.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
