"""Utility functions for finata."""

from finata.utils.date_parser import parse_date
from finata.utils.amount_parser import parse_amount, parse_positive_amount

__all__ = ["parse_date", "parse_amount", "parse_positive_amount"]
