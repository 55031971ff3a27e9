"""Tests for date parser with relative dates."""

from datetime import date, datetime, timedelta

import pytest
from dateutil.relativedelta import relativedelta

from finata.utils.date_parser import PERIODS, get_date_range, parse_date, to_datetime


def test_parse_iso_date():
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_day_first_date():
    """Numeric dates that do not start with the year are read day first."""
    assert parse_date("03.04.2024") == date(2024, 4, 3)
    assert parse_date("15/01/2024") == date(2024, 1, 15)


@pytest.mark.parametrize(
    "text, offset",
    [("today", 0), ("Yesterday", -1), (" tomorrow ", 1)],
)
def test_parse_relative_days(text, offset):
    assert parse_date(text) == date.today() + timedelta(days=offset)


def test_parse_last_weekday():
    """'last friday' is the most recent Friday strictly before today."""
    result = parse_date("last friday")
    assert result.weekday() == 4
    assert 1 <= (date.today() - result).days <= 7


def test_parse_period_starts():
    today = date.today()
    assert parse_date("this month") == today.replace(day=1)
    assert parse_date("last month") == today.replace(day=1) - relativedelta(months=1)
    assert parse_date("this year") == date(today.year, 1, 1)
    assert parse_date("last week").weekday() == 0


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date")


def test_to_datetime_is_midnight():
    assert to_datetime(date(2024, 2, 29)) == datetime(2024, 2, 29)


def test_get_date_range_this_periods_end_today():
    today = date.today()
    for period in ("this-week", "this-month", "this-year"):
        start, end = get_date_range(period)
        assert end == today
        assert start <= today


def test_get_date_range_last_month():
    start, end = get_date_range("last-month")
    first_of_month = date.today().replace(day=1)
    assert end == first_of_month - timedelta(days=1)
    assert start == end.replace(day=1)


def test_get_date_range_last_week_is_monday_to_sunday():
    start, end = get_date_range("last-week")
    assert start.weekday() == 0
    assert end - start == timedelta(days=6)
    assert end < date.today()


def test_get_date_range_last_year():
    start, end = get_date_range("last-year")
    year = date.today().year - 1
    assert (start, end) == (date(year, 1, 1), date(year, 12, 31))


def test_every_period_resolves():
    for period in PERIODS:
        start, end = get_date_range(period)
        assert start <= end


def test_get_date_range_invalid_period():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")
