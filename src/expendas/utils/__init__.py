"""Utility functions for expendas."""

from expendas.utils.date_parser import parse_date
from expendas.utils.amount_parser import parse_amount, parse_positive_amount
from expendas.utils.selection_parser import parse_days, parse_months

__all__ = ["parse_date", "parse_amount", "parse_positive_amount", "parse_days", "parse_months"]
