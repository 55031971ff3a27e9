"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

PERIODS = ("this-week", "this-month", "this-year", "last-week", "last-month", "last-year")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "15.01.2024", "January 15, 2024"
    - Relative days: "today", "yesterday", "tomorrow", "last friday"
    - Period starts: "this month", "last month", "this year", "last week", ...

    Day-first is assumed for ambiguous numeric dates ("03.04.2024" is 3 April).

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    relative_days = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative_days:
        return relative_days[text]

    if text.startswith("last ") or text.startswith("this "):
        which, period = text.split(" ", 1)
        if period in WEEKDAYS and which == "last":
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7 or 7
            return today - timedelta(days=days_ago)
        if period in ("week", "month", "year"):
            return get_date_range(f"{which}-{period}")[0]

    try:
        if text[:4].isdigit():
            return date_parser.parse(text).date()
        return date_parser.parse(text, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def to_datetime(value: date) -> datetime:
    """Midnight of ``value`` as a datetime, the form transactions store."""
    return datetime(value.year, value.month, value.day)


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of PERIODS

    Returns:
        Tuple of (start_date, end_date); "this" periods end today

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()
    monday = today - timedelta(days=today.weekday())
    first_of_month = today.replace(day=1)
    first_of_year = today.replace(month=1, day=1)

    if period == "this-week":
        return (monday, today)
    elif period == "this-month":
        return (first_of_month, today)
    elif period == "this-year":
        return (first_of_year, today)
    elif period == "last-week":
        start_date = monday - timedelta(days=7)
        return (start_date, start_date + timedelta(days=6))
    elif period == "last-month":
        return (first_of_month - relativedelta(months=1), first_of_month - timedelta(days=1))
    elif period == "last-year":
        return (first_of_year - relativedelta(years=1), first_of_year - timedelta(days=1))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
