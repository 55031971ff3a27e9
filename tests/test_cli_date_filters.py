"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from finata.cli.date_filters import resolve_cli_date_range
from finata.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_period_with_explicit_dates_rejected(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(), start_date="2024-01-01", end_date=None, period="this-month"
        )

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_period_range():
    start, end = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period="last-year"
    )
    assert (start, end) == get_date_range("last-year")


def test_explicit_dates():
    start, end = resolve_cli_date_range(
        _ctx(), start_date="2024-01-01", end_date="31.01.2024", period=None
    )
    assert start == date(2024, 1, 1)
    assert end == date(2024, 1, 31)


def test_no_filters():
    assert resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period=None) == (
        None,
        None,
    )


def test_invalid_start_date(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(_ctx(), start_date="someday", end_date=None, period=None)
    assert "Invalid start date" in capsys.readouterr().err
