"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_OFFSET_PATTERN = re.compile(r"^in (\d+) (day|week|month|year)s?$")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates and relative dates useful for scheduling:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - "today", "yesterday", "tomorrow"
    - "next month" / "next year": first day of the next month or year
    - "next friday": the coming Friday, never today
    - "in 3 days", "in 2 weeks", "in 1 month", "in 1 year"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    if today is None:
        today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
        "next year": today.replace(month=1, day=1) + relativedelta(years=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    if text.startswith("next ") and text[5:] in WEEKDAYS:
        days_ahead = (WEEKDAYS.index(text[5:]) - today.weekday()) % 7
        return today + timedelta(days=days_ahead or 7)

    match = _OFFSET_PATTERN.match(text)
    if match:
        count = int(match.group(1))
        unit = match.group(2)
        if unit == "day":
            return today + timedelta(days=count)
        if unit == "week":
            return today + timedelta(weeks=count)
        if unit == "month":
            return today + relativedelta(months=count)
        return today + relativedelta(years=count)

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError, TypeError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
