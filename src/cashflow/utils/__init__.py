"""Utility functions for cashflow."""

from cashflow.utils.date_parser import parse_date
from cashflow.utils.amount_parser import parse_amount, parse_cell_amount

__all__ = ["parse_date", "parse_amount", "parse_cell_amount"]
