"""Utility functions for debtsync."""

from debtsync.utils.date_parser import parse_date
from debtsync.utils.amount_parser import parse_amount, format_amount

__all__ = ["parse_date", "parse_amount", "format_amount"]
