"""Parsing of day-of-month and month-of-year selections."""

from expendas.domain.recurrence import MONTH_NAMES


def _split(text: str) -> list[str]:
    return [part.strip() for part in text.replace(" ", ",").split(",") if part.strip()]


def parse_days(days_str: str) -> list[int]:
    """Parse a day selection such as "1,15" or "1 15 31".

    Ordinal suffixes are accepted ("1st,15th").

    Returns:
        Sorted list of unique days

    Raises:
        ValueError: If a part is not a day between 1 and 31
    """
    days = set()
    for part in _split(days_str):
        number = part.lower().rstrip("stndrh") or part
        try:
            day = int(number)
        except ValueError:
            raise ValueError(f"'{part}' is not a day of the month")
        if not 1 <= day <= 31:
            raise ValueError(f"Day {day} is out of range (1-31)")
        days.add(day)
    if not days:
        raise ValueError("No days given")
    return sorted(days)


def parse_month(month_str: str) -> int:
    """Parse one month into its index (0 for January).

    Accepts full or abbreviated names ("march", "Mar") and the calendar
    number ("3").

    Raises:
        ValueError: If the text names no month
    """
    text = month_str.strip().lower()
    if text.isdigit():
        number = int(text)
        if not 1 <= number <= 12:
            raise ValueError(f"Month {number} is out of range (1-12)")
        return number - 1
    if len(text) >= 3:
        for index, name in enumerate(MONTH_NAMES):
            if name.lower().startswith(text):
                return index
    raise ValueError(f"'{month_str.strip()}' is not a month")


def parse_months(months_str: str) -> list[int]:
    """Parse a month selection such as "jan,mar" or "1,3" into indexes.

    Returns:
        Sorted list of unique month indexes (0 for January)

    Raises:
        ValueError: If a part names no month
    """
    months = sorted({parse_month(part) for part in _split(months_str)})
    if not months:
        raise ValueError("No months given")
    return months
