"""Display formatting for CLI output."""

from decimal import Decimal
from typing import Optional


def format_currency(amount: Decimal) -> str:
    """Format an amount as '$1,234.56' or '-$50.00'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(ratio: Optional[Decimal]) -> str:
    """Format a ratio as a percentage with sign, e.g. '+12.50%'."""
    if ratio is None:
        return "n/a"
    return f"{ratio * 100:+.2f}%"
