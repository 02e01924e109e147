"""Recurring payment schedules.

A payment repeats either every N weeks on the weekday of its date, or on
selected days of the month, optionally restricted to selected months of the
year. This module describes a schedule in words, reports problems with it,
applies edits to it and lists the dates it falls on.

Nothing here raises on bad data: problems are returned as advisory messages
from ``describe``.
"""

import calendar
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from typing import Optional, Union

from dateutil import rrule

WEEKLY = "weekly"
DATES = "dates"

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Month lengths in a common year and in a leap year
_SHORTEST_MONTH_DAYS = tuple(calendar.monthrange(2023, m)[1] for m in range(1, 13))
_LONGEST_MONTH_DAYS = tuple(calendar.monthrange(2024, m)[1] for m in range(1, 13))


@dataclass(frozen=True)
class RecurrenceFields:
    """Recurrence part of a payment."""

    date: date
    repeats_weekly: Optional[int] = None
    repeats_on_days_of_month: tuple[int, ...] = ()
    repeats_on_months_of_year: tuple[int, ...] = ()
    repeats_until_date: Optional[date] = None

    def __post_init__(self):
        # Accept any iterable for the selections
        object.__setattr__(self, "repeats_on_days_of_month", tuple(self.repeats_on_days_of_month or ()))
        object.__setattr__(self, "repeats_on_months_of_year", tuple(self.repeats_on_months_of_year or ()))

    @classmethod
    def from_payment(cls, payment) -> "RecurrenceFields":
        """Build recurrence fields from a Payment entity."""
        return cls(
            date=payment.date,
            repeats_weekly=payment.repeats_weekly,
            repeats_on_days_of_month=payment.repeats_on_days_of_month,
            repeats_on_months_of_year=payment.repeats_on_months_of_year,
            repeats_until_date=payment.repeats_until_date,
        )

    @property
    def repeats(self) -> bool:
        return self.repeats_weekly is not None or len(self.repeats_on_days_of_month) > 0

    @property
    def repeats_type(self) -> str:
        return WEEKLY if self.repeats_weekly is not None else DATES

    @property
    def repeats_monthly(self) -> bool:
        return self.repeats_weekly is None and len(self.repeats_on_days_of_month) > 0


@dataclass(frozen=True)
class RecurrenceFeedback:
    """Description of a schedule plus advisory problems."""

    description: str
    errors: list[str] = field(default_factory=list)


def ordinal(n: int) -> str:
    """Return 1st, 2nd, 3rd, 4th, ... for an integer."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def join_words(words: list[str]) -> str:
    """Join words as 'a', 'a and b' or 'a, b and c'."""
    if not words:
        return ""
    if len(words) == 1:
        return words[0]
    return f"{', '.join(words[:-1])} and {words[-1]}"


def format_long_date(value: date) -> str:
    """Format a date as 'March 1, 2025'."""
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def _valid_days(days) -> list[int]:
    return sorted({d for d in days if isinstance(d, int) and 1 <= d <= 31})


def _valid_months(months) -> list[int]:
    return sorted({m for m in months if isinstance(m, int) and 0 <= m <= 11})


def describe(fields: RecurrenceFields) -> RecurrenceFeedback:
    """Describe a schedule and list problems with it.

    Args:
        fields: Recurrence fields of a payment

    Returns:
        RecurrenceFeedback with a one sentence description and a list of
        advisory error messages (empty when the schedule is consistent)
    """
    return RecurrenceFeedback(description=_description(fields), errors=_errors(fields))


def _description(fields: RecurrenceFields) -> str:
    if fields.repeats_weekly is not None:
        weeks = fields.repeats_weekly
        cadence = f"every {weeks} weeks" if weeks > 1 else "every week"
        text = f"Repeats {cadence} on {WEEKDAY_NAMES[fields.date.weekday()]}"
    elif fields.repeats_on_days_of_month:
        days = _valid_days(fields.repeats_on_days_of_month) or sorted(set(fields.repeats_on_days_of_month))
        day_text = join_words([ordinal(d) for d in days])
        months = _valid_months(fields.repeats_on_months_of_year)
        if months:
            text = f"Repeats monthly on the {day_text}, in {join_words([MONTH_NAMES[m] for m in months])}"
        else:
            text = f"Repeats monthly on the {day_text} of every month"
    else:
        return "Does not repeat."

    if fields.repeats_until_date is not None:
        text += f", until {format_long_date(fields.repeats_until_date)}"
    return text + "."


def _errors(fields: RecurrenceFields) -> list[str]:
    errors = []
    days = fields.repeats_on_days_of_month
    months = fields.repeats_on_months_of_year
    until = fields.repeats_until_date

    if fields.repeats_weekly is not None and days:
        errors.append("Choose either a weekly or a monthly schedule, not both.")
    if fields.repeats_weekly is not None and fields.repeats_weekly < 1:
        errors.append("A weekly payment must repeat at least every week.")

    for day in sorted(set(days) - set(_valid_days(days))):
        errors.append(f"{day} is not a day of the month.")
    for month in sorted(set(months) - set(_valid_months(months))):
        errors.append(f"{month} is not a month of the year.")

    if days and fields.date.day not in days:
        errors.append(f"The {ordinal(fields.date.day)} must be selected because the payment starts on it.")
    if months and fields.date.month - 1 not in months:
        errors.append(
            f"{MONTH_NAMES[fields.date.month - 1]} must be selected because the payment starts in it."
        )

    if months and not fields.repeats_monthly:
        errors.append("Months can only be selected for a monthly payment.")
    if until is not None and not fields.repeats:
        errors.append("End date is set but the payment does not repeat.")
    if until is not None and until < fields.date:
        errors.append("End date is before start date.")

    if fields.repeats_monthly:
        errors.extend(_skipped_day_errors(_valid_days(days), _valid_months(months)))

    return errors


def _skipped_day_errors(days: list[int], months: list[int]) -> list[str]:
    errors = []
    considered = months or list(range(12))
    for day in days:
        if all(day > _LONGEST_MONTH_DAYS[m] for m in considered):
            names = join_words([MONTH_NAMES[m] for m in considered])
            errors.append(f"The {ordinal(day)} never occurs in {names}.")
            continue
        short = [m for m in considered if day > _SHORTEST_MONTH_DAYS[m]]
        if short:
            names = join_words([MONTH_NAMES[m] for m in short])
            errors.append(f"Months without a {ordinal(day)} skip that payment: {names}.")
    return errors


# Edits


@dataclass(frozen=True)
class SetRepeating:
    enabled: bool


@dataclass(frozen=True)
class SetRepeatType:
    repeats_type: str  # WEEKLY or DATES


@dataclass(frozen=True)
class SetWeeklyInterval:
    weeks: int


@dataclass(frozen=True)
class ToggleDay:
    day: int


@dataclass(frozen=True)
class SetMonthRestriction:
    enabled: bool


@dataclass(frozen=True)
class ToggleMonth:
    month: int


@dataclass(frozen=True)
class SetEndDate:
    until: Optional[date]


@dataclass(frozen=True)
class SetAnchorDate:
    date: date


Action = Union[
    SetRepeating,
    SetRepeatType,
    SetWeeklyInterval,
    ToggleDay,
    SetMonthRestriction,
    ToggleMonth,
    SetEndDate,
    SetAnchorDate,
]


def reduce(state: RecurrenceFields, action: Action) -> RecurrenceFields:
    """Apply one edit to a schedule.

    Edits that do not apply to the current mode are ignored, and so is an
    attempt to deselect the start date's own day or month. After every edit
    the start date's day and month are part of any non-empty selection.

    Raises:
        TypeError: If action is not one of the known edits
    """
    if isinstance(action, SetRepeating):
        new_state = replace(
            state,
            repeats_weekly=1 if action.enabled else None,
            repeats_on_days_of_month=(),
            repeats_on_months_of_year=(),
            repeats_until_date=None,
        )
    elif isinstance(action, SetRepeatType):
        if action.repeats_type == DATES:
            new_state = replace(state, repeats_weekly=None, repeats_on_days_of_month=(state.date.day,))
        elif action.repeats_type == WEEKLY:
            new_state = replace(
                state, repeats_weekly=1, repeats_on_days_of_month=(), repeats_on_months_of_year=()
            )
        else:
            new_state = state
    elif isinstance(action, SetWeeklyInterval):
        if state.repeats_weekly is not None and action.weeks >= 1:
            new_state = replace(state, repeats_weekly=action.weeks)
        else:
            new_state = state
    elif isinstance(action, ToggleDay):
        if state.repeats_monthly and 1 <= action.day <= 31 and action.day != state.date.day:
            new_state = replace(
                state, repeats_on_days_of_month=_toggle(state.repeats_on_days_of_month, action.day)
            )
        else:
            new_state = state
    elif isinstance(action, SetMonthRestriction):
        if not action.enabled:
            new_state = replace(state, repeats_on_months_of_year=())
        elif state.repeats_monthly:
            new_state = replace(state, repeats_on_months_of_year=(state.date.month - 1,))
        else:
            new_state = state
    elif isinstance(action, ToggleMonth):
        if (
            state.repeats_monthly
            and state.repeats_on_months_of_year
            and 0 <= action.month <= 11
            and action.month != state.date.month - 1
        ):
            new_state = replace(
                state, repeats_on_months_of_year=_toggle(state.repeats_on_months_of_year, action.month)
            )
        else:
            new_state = state
    elif isinstance(action, SetEndDate):
        if action.until is None or state.repeats:
            new_state = replace(state, repeats_until_date=action.until)
        else:
            new_state = state
    elif isinstance(action, SetAnchorDate):
        new_state = replace(state, date=action.date)
    else:
        raise TypeError(f"Unknown recurrence action: {action!r}")

    return normalize(new_state)


def _toggle(values: tuple[int, ...], value: int) -> tuple[int, ...]:
    if value in values:
        return tuple(v for v in values if v != value)
    return tuple(sorted({*values, value}))


def normalize(fields: RecurrenceFields) -> RecurrenceFields:
    """Sort the selections and add the start date's day and month to them.

    Empty selections stay empty and chosen values are never removed.
    """
    days = fields.repeats_on_days_of_month
    if days:
        days = tuple(sorted({*days, fields.date.day}))
    months = fields.repeats_on_months_of_year
    if months:
        months = tuple(sorted({*months, fields.date.month - 1}))
    if days == fields.repeats_on_days_of_month and months == fields.repeats_on_months_of_year:
        return fields
    return replace(fields, repeats_on_days_of_month=days, repeats_on_months_of_year=months)


def occurrences(fields: RecurrenceFields, start: date, end: date) -> list[date]:
    """List the dates in [start, end] on which the payment falls.

    The start date of the payment always counts. Weekly schedules take
    precedence when both weekly and monthly fields are set, and days that a
    month does not have are skipped in that month.
    """
    if end < start:
        return []

    dates = {fields.date}
    last = end
    if fields.repeats_until_date is not None:
        last = min(last, fields.repeats_until_date)

    rule = None
    dtstart = datetime.combine(fields.date, time())
    until = datetime.combine(last, time())
    if last >= fields.date:
        if fields.repeats_weekly is not None:
            rule = rrule.rrule(rrule.WEEKLY, interval=max(fields.repeats_weekly, 1), dtstart=dtstart, until=until)
        elif fields.repeats_on_days_of_month:
            days = _valid_days(fields.repeats_on_days_of_month)
            months = [m + 1 for m in _valid_months(fields.repeats_on_months_of_year)]
            if days:
                rule = rrule.rrule(
                    rrule.MONTHLY,
                    bymonthday=days,
                    bymonth=months or None,
                    dtstart=dtstart,
                    until=until,
                )

    if rule is not None:
        dates.update(dt.date() for dt in rule)

    return sorted(d for d in dates if start <= d <= end)
