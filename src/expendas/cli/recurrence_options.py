"""CLI helpers for schedule options shared by several commands."""

from datetime import date
from typing import Optional

import click

from expendas.domain import recurrence
from expendas.domain.recurrence import RecurrenceFields
from expendas.utils.date_parser import parse_date
from expendas.utils.selection_parser import parse_days, parse_months


def recurrence_options(func):
    """Add --weekly, --days, --months and --until options to a command."""
    options = [
        click.option("--weekly", type=click.IntRange(min=1), help="Repeat every N weeks on the same weekday"),
        click.option("--days", help="Repeat monthly on these days (e.g., '1,15')"),
        click.option("--months", help="Only repeat in these months (e.g., 'jan,jul' or '1,7')"),
        click.option("--until", help="Last date the payment may repeat on"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def schedule_edits(
    weekly: Optional[int] = None,
    days: Optional[list[int]] = None,
    months: Optional[list[int]] = None,
    until: Optional[date] = None,
    no_repeat: bool = False,
    no_until: bool = False,
) -> list[recurrence.Action]:
    """Translate schedule options into recurrence edits.

    Given days and months replace the current selection; the start date's
    own day and month are always kept.
    """
    edits: list[recurrence.Action] = []
    if no_repeat:
        edits.append(recurrence.SetRepeating(False))
    if weekly is not None:
        edits.append(recurrence.SetRepeatType(recurrence.WEEKLY))
        edits.append(recurrence.SetWeeklyInterval(weekly))
    if days:
        edits.append(recurrence.SetRepeatType(recurrence.DATES))
        edits.extend(recurrence.ToggleDay(day) for day in days)
    if months:
        edits.append(recurrence.SetMonthRestriction(False))
        edits.append(recurrence.SetMonthRestriction(True))
        edits.extend(recurrence.ToggleMonth(month) for month in months)
    if no_until:
        edits.append(recurrence.SetEndDate(None))
    elif until is not None:
        edits.append(recurrence.SetEndDate(until))
    return edits


def parse_schedule_options_or_exit(
    ctx: click.Context,
    weekly: Optional[int],
    days: Optional[str],
    months: Optional[str],
    until: Optional[str],
    no_repeat: bool = False,
    no_until: bool = False,
) -> list[recurrence.Action]:
    """Validate and parse schedule options, or exit with a CLI error."""
    if weekly is not None and days:
        click.echo("Error: Use either --weekly or --days, not both.", err=True)
        ctx.exit(1)
    if no_repeat and (weekly is not None or days or months or until):
        click.echo("Error: --no-repeat cannot be combined with other schedule options.", err=True)
        ctx.exit(1)
    if no_until and until:
        click.echo("Error: Use either --until or --no-until, not both.", err=True)
        ctx.exit(1)

    parsed_days = None
    if days:
        try:
            parsed_days = parse_days(days)
        except ValueError as e:
            click.echo(f"Error: Invalid days: {e}", err=True)
            ctx.exit(1)

    parsed_months = None
    if months:
        try:
            parsed_months = parse_months(months)
        except ValueError as e:
            click.echo(f"Error: Invalid months: {e}", err=True)
            ctx.exit(1)

    until_date = None
    if until:
        try:
            until_date = parse_date(until)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return schedule_edits(
        weekly=weekly,
        days=parsed_days,
        months=parsed_months,
        until=until_date,
        no_repeat=no_repeat,
        no_until=no_until,
    )


def build_new_schedule_or_exit(
    ctx: click.Context,
    start: date,
    weekly: Optional[int],
    days: Optional[str],
    months: Optional[str],
    until: Optional[str],
) -> RecurrenceFields:
    """Build the schedule of a new payment from CLI options.

    Months need --days and an end date needs --weekly or --days, since a new
    payment has no schedule to apply them to otherwise.
    """
    if months and not days:
        click.echo("Error: --months requires --days.", err=True)
        ctx.exit(1)
    if until and weekly is None and not days:
        click.echo("Error: --until requires --weekly or --days.", err=True)
        ctx.exit(1)

    edits = parse_schedule_options_or_exit(ctx, weekly, days, months, until)
    schedule = RecurrenceFields(date=start)
    for edit in edits:
        schedule = recurrence.reduce(schedule, edit)
    return schedule


def check_updated_schedule_or_exit(
    ctx: click.Context,
    current: RecurrenceFields,
    new_date: Optional[date],
    edits: list[recurrence.Action],
    months: Optional[str],
    until: Optional[str],
) -> RecurrenceFields:
    """Apply schedule edits to a stored schedule, or exit if one would be ignored.

    An end date only applies to a repeating payment and months only to one
    that repeats on days of the month.
    """
    schedule = current
    if new_date is not None:
        schedule = recurrence.reduce(schedule, recurrence.SetAnchorDate(new_date))
    for edit in edits:
        schedule = recurrence.reduce(schedule, edit)

    if until and not schedule.repeats:
        click.echo("Error: --until requires a repeating payment; add --weekly or --days.", err=True)
        ctx.exit(1)
    if months and not schedule.repeats_monthly:
        click.echo("Error: --months requires a payment that repeats on days of the month; add --days.", err=True)
        ctx.exit(1)
    return schedule
