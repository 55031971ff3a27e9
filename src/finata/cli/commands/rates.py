"""Exchange-rate commands."""

import click

from finata.cli.error_handling import handle_domain_error
from finata.domain.entities import BASE_CURRENCY
from finata.utils.amount_parser import parse_positive_amount


@click.group()
def rates_group():
    """Show and edit exchange rates to TRY."""
    pass


def _show(rates) -> None:
    for code, rate in sorted(rates.items()):
        click.echo(f"1 {code:5s} = {rate:,.4f} {BASE_CURRENCY}")


@rates_group.command("show")
@click.pass_context
def show_rates(ctx):
    """Show the current rate table."""
    _show(ctx.obj["rates"].load())


@rates_group.command("set")
@click.argument("currency")
@click.argument("rate")
@click.pass_context
def set_rate(ctx, currency: str, rate: str):
    """Set the TRY value of one unit of CURRENCY.

    Examples:
        finata rates set USD 42.43
        finata rates set GRAM 5680
    """
    try:
        value = parse_positive_amount(rate)
        ctx.obj["rates"].set_rate(currency, value)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Set 1 {currency.strip().upper()} = {value:,.4f} {BASE_CURRENCY}")


@rates_group.command("reset")
@click.pass_context
def reset_rates(ctx):
    """Restore the default rate table."""
    try:
        rates = ctx.obj["rates"].reset()
    except OSError as e:
        handle_domain_error(ctx, e)
    click.echo("Restored default rates:")
    _show(rates)


def register_commands(cli):
    """Register rates commands with main CLI."""
    cli.add_command(rates_group, name="rates")
