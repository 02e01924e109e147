"""Payment and transfer commands."""

from datetime import date, timedelta
from decimal import Decimal

import click
from dateutil.relativedelta import relativedelta

from expendas.cli.account_resolution import resolve_account_or_exit
from expendas.cli.error_handling import echo_feedback, handle_domain_error
from expendas.cli.formatting import format_currency
from expendas.cli.recurrence_options import (
    build_new_schedule_or_exit,
    check_updated_schedule_or_exit,
    parse_schedule_options_or_exit,
    recurrence_options,
)
from expendas.domain import recurrence
from expendas.domain.account import AccountService
from expendas.domain.errors import DomainError
from expendas.domain.payment import PaymentService
from expendas.domain.recurrence import RecurrenceFields
from expendas.utils.amount_parser import parse_amount, parse_positive_amount
from expendas.utils.date_parser import parse_date


def _parse_date_or_exit(ctx, value: str, label: str = "date") -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _parse_amount_or_exit(ctx, value: str):
    try:
        return parse_positive_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def _echo_payment(payment, account_name: str) -> None:
    kind = "Deposit" if payment.is_income else "Payment"
    if payment.is_paycheck:
        kind = "Paycheck"
    click.echo(f"  {kind} on {account_name}")
    click.echo(f"  Date: {payment.date}")
    click.echo(f"  Amount: {format_currency(payment.amount)}")
    if payment.description:
        click.echo(f"  Description: {payment.description}")


@click.group()
def payment_group():
    """Manage payments, deposits and transfers."""
    pass


@payment_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--date", "date_str", required=True, help="Payment date (YYYY-MM-DD or relative like 'today', 'next friday')")
@click.option("--amount", required=True, help="Amount without sign (e.g., 50.00)")
@click.option("--income", is_flag=True, help="Record a deposit instead of a payment")
@click.option("--paycheck", is_flag=True, help="Mark a deposit as a paycheck (implies --income)")
@click.option("--description", help="Payment description")
@recurrence_options
@click.pass_context
def add_payment(
    ctx,
    account: str,
    date_str: str,
    amount: str,
    income: bool,
    paycheck: bool,
    description: str | None,
    weekly: int | None,
    days: str | None,
    months: str | None,
    until: str | None,
):
    """Add a payment or deposit, optionally repeating.

    Examples:
        expendas payment add --account Checking --date 2024-03-01 --amount 1500 --description Rent --days 1
        expendas payment add --account Checking --date 2024-03-08 --amount 2100 --paycheck --weekly 2
        expendas payment add --account Visa --date 2024-01-15 --amount 99 --days 15 --months jan,jul
    """
    db = ctx.obj["db"]
    payment_service = PaymentService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account)
    start = _parse_date_or_exit(ctx, date_str)
    magnitude = _parse_amount_or_exit(ctx, amount)
    schedule = build_new_schedule_or_exit(ctx, start, weekly, days, months, until)
    is_income = income or paycheck

    try:
        payment_id = payment_service.create_payment(
            account_id=account_id,
            date=start,
            amount=magnitude if is_income else -magnitude,
            description=description,
            is_paycheck=paycheck,
            repeats_weekly=schedule.repeats_weekly,
            repeats_on_days_of_month=schedule.repeats_on_days_of_month,
            repeats_on_months_of_year=schedule.repeats_on_months_of_year,
            repeats_until_date=schedule.repeats_until_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    payment = payment_service.get_payment(payment_id)
    click.echo(f"Created payment {payment_id}")
    _echo_payment(payment, account_service.get_account(account_id).name)
    echo_feedback(payment_service.feedback(payment_id))


@payment_group.command("transfer")
@click.option("--from", "from_account", help="Account name or ID to transfer from")
@click.option("--to", "to_account", help="Account name or ID to transfer to")
@click.option("--amount", default="0", help="Amount to transfer (e.g., 250.00)")
@click.option("--date", "date_str", default="today", show_default=True, help="Transfer date")
@recurrence_options
@click.pass_context
def transfer(
    ctx,
    from_account: str | None,
    to_account: str | None,
    amount: str,
    date_str: str,
    weekly: int | None,
    days: str | None,
    months: str | None,
    until: str | None,
):
    """Transfer money between two accounts.

    The transfer is recorded as a payment on the source account and a
    deposit on the destination account.

    Examples:
        expendas payment transfer --from Checking --to Savings --amount 200 --date 2024-03-01 --days 1
    """
    db = ctx.obj["db"]
    payment_service = PaymentService(db)
    account_service = AccountService(db)

    from_id = resolve_account_or_exit(ctx, account_service, from_account) if from_account else None
    to_id = resolve_account_or_exit(ctx, account_service, to_account) if to_account else None
    start = _parse_date_or_exit(ctx, date_str)
    schedule = build_new_schedule_or_exit(ctx, start, weekly, days, months, until)

    # Zero and negative amounts are rejected by the transfer checks
    try:
        magnitude = parse_amount(amount) if amount.strip() else Decimal("0")
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        withdrawal_id, deposit_id = payment_service.create_transfer(
            from_account_id=from_id,
            to_account_id=to_id,
            amount=magnitude,
            date=start,
            repeats_weekly=schedule.repeats_weekly,
            repeats_on_days_of_month=schedule.repeats_on_days_of_month,
            repeats_on_months_of_year=schedule.repeats_on_months_of_year,
            repeats_until_date=schedule.repeats_until_date,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    source = account_service.get_account(from_id)
    destination = account_service.get_account(to_id)
    click.echo(
        f"Transferred {format_currency(magnitude)} from '{source.name}' to '{destination.name}' "
        f"(payments {withdrawal_id} and {deposit_id})"
    )
    echo_feedback(payment_service.feedback(withdrawal_id))


@payment_group.command("list")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.pass_context
def list_payments(ctx, account: str | None, start_date: str | None, end_date: str | None):
    """List payments, newest first."""
    db = ctx.obj["db"]
    payment_service = PaymentService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    start = _parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = _parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    payments = payment_service.list_payments(account_id=account_id, start_date=start, end_date=end)
    if not payments:
        click.echo("No payments found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}
    click.echo(f"{'ID':>4s}  {'Date':10s}  {'Account':18s}  {'Amount':>12s}  Description")
    click.echo("-" * 80)
    for payment in payments:
        repeat_marker = " (repeats)" if RecurrenceFields.from_payment(payment).repeats else ""
        click.echo(
            f"{payment.id:4d}  {payment.date.isoformat():10s}  {accounts.get(payment.account_id, '?')[:18]:18s}  "
            f"{format_currency(payment.amount):>12s}  {payment.description or ''}{repeat_marker}"
        )


@payment_group.command("show")
@click.argument("payment_id", type=int)
@click.option("--start-date", help="First date of upcoming dates to list (default: payment date)")
@click.option("--through", help="Last date of upcoming dates to list (default: 3 months after start)")
@click.pass_context
def show_payment(ctx, payment_id: int, start_date: str | None, through: str | None):
    """Show a payment, its schedule and the dates it falls on."""
    db = ctx.obj["db"]
    payment_service = PaymentService(db)
    account_service = AccountService(db)

    try:
        payment = payment_service.require_payment(payment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    start = _parse_date_or_exit(ctx, start_date, "start date") if start_date else payment.date
    end = _parse_date_or_exit(ctx, through, "end date") if through else start + relativedelta(months=3)

    click.echo(f"Payment {payment.id}")
    _echo_payment(payment, account_service.get_account(payment.account_id).name)
    echo_feedback(payment_service.feedback(payment_id))

    dates = payment_service.upcoming(payment_id, start, end)
    if not dates:
        click.echo(f"No dates between {start} and {end}.")
        return
    click.echo(f"  Dates between {start} and {end}:")
    for day in dates:
        click.echo(f"    {day.isoformat()} ({day.strftime('%a')})")


@payment_group.command("upcoming")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", default="today", show_default=True, help="First date to include")
@click.option("--end-date", help="Last date to include (default: 30 days after start)")
@click.pass_context
def upcoming_payments(ctx, account: str | None, start_date: str, end_date: str | None):
    """List every payment date in a period, including repeats."""
    db = ctx.obj["db"]
    payment_service = PaymentService(db)
    account_service = AccountService(db)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    start = _parse_date_or_exit(ctx, start_date, "start date")
    end = _parse_date_or_exit(ctx, end_date, "end date") if end_date else start + timedelta(days=30)

    items = payment_service.occurrences_between(start, end, account_id=account_id)
    if not items:
        click.echo("No payments due.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}
    total = sum((payment.amount for _, payment in items), start=0)
    for day, payment in items:
        click.echo(
            f"{day.isoformat()}  {accounts.get(payment.account_id, '?')[:18]:18s}  "
            f"{format_currency(payment.amount):>12s}  {payment.description or ''}"
        )
    click.echo("-" * 60)
    click.echo(f"Net: {format_currency(total)} over {len(items)} payment{'s' if len(items) != 1 else ''}")


@payment_group.command("update")
@click.argument("payment_id", type=int)
@click.option("--account", help="Account name or ID")
@click.option("--date", "date_str", help="New payment date; its day and month join existing selections")
@click.option("--amount", help="New amount without sign")
@click.option("--income/--expense", default=None, help="Make this a deposit or a payment")
@click.option("--paycheck/--not-paycheck", default=None, help="Mark or unmark as a paycheck")
@click.option("--description", help="New description, or empty string to clear")
@recurrence_options
@click.option("--no-repeat", is_flag=True, help="Stop repeating")
@click.option("--no-until", is_flag=True, help="Remove the end date")
@click.pass_context
def update_payment(
    ctx,
    payment_id: int,
    account: str | None,
    date_str: str | None,
    amount: str | None,
    income: bool | None,
    paycheck: bool | None,
    description: str | None,
    weekly: int | None,
    days: str | None,
    months: str | None,
    until: str | None,
    no_repeat: bool,
    no_until: bool,
):
    """Update a payment.

    Only the given fields change. --days and --months replace the current
    selection; the payment date's own day and month are always kept.

    Examples:
        expendas payment update 4 --amount 1550
        expendas payment update 4 --days 1,15 --until 2024-12-31
        expendas payment update 4 --no-repeat
    """
    db = ctx.obj["db"]
    payment_service = PaymentService(db)
    account_service = AccountService(db)

    try:
        payment = payment_service.require_payment(payment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    account_id = resolve_account_or_exit(ctx, account_service, account) if account else None
    new_date = _parse_date_or_exit(ctx, date_str) if date_str else None
    edits = parse_schedule_options_or_exit(ctx, weekly, days, months, until, no_repeat, no_until)
    check_updated_schedule_or_exit(ctx, RecurrenceFields.from_payment(payment), new_date, edits, months, until)

    is_income = payment.is_income
    if paycheck:
        is_income = True
    elif income is not None:
        is_income = income
    magnitude = _parse_amount_or_exit(ctx, amount) if amount is not None else abs(payment.amount)
    new_amount = magnitude if is_income else -magnitude

    changes = {}
    if description is not None:
        changes["description"] = description or None

    try:
        payment_service.update_payment(
            payment_id,
            account_id=account_id,
            date=new_date,
            amount=new_amount,
            is_paycheck=paycheck,
            edits=edits,
            **changes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated payment {payment_id}")
    echo_feedback(payment_service.feedback(payment_id))


@payment_group.command("delete")
@click.argument("payment_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_payment(ctx, payment_id: int, yes: bool):
    """Delete a payment.

    Deleting one side of a transfer leaves the other side in place.
    """
    db = ctx.obj["db"]
    payment_service = PaymentService(db)

    try:
        payment_service.require_payment(payment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete payment {payment_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        payment_service.delete_payment(payment_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted payment {payment_id}")


@click.command("describe")
@click.option("--date", "date_str", required=True, help="Start date of the schedule")
@recurrence_options
@click.option("--through", help="Also list the dates up to this date")
@click.pass_context
def describe_schedule(
    ctx,
    date_str: str,
    weekly: int | None,
    days: str | None,
    months: str | None,
    until: str | None,
    through: str | None,
):
    """Describe a schedule without saving anything.

    Examples:
        expendas describe --date 2024-03-15 --days 1,15
        expendas describe --date 2024-03-15 --weekly 2 --until 2024-06-30 --through 2024-05-01
    """
    start = _parse_date_or_exit(ctx, date_str)
    schedule = build_new_schedule_or_exit(ctx, start, weekly, days, months, until)
    feedback = recurrence.describe(schedule)

    click.echo(feedback.description)
    for message in feedback.errors:
        click.echo(f"Warning: {message}", err=True)

    if through:
        end = _parse_date_or_exit(ctx, through, "end date")
        for day in recurrence.occurrences(schedule, start, end):
            click.echo(f"  {day.isoformat()} ({day.strftime('%a')})")


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
    cli.add_command(describe_schedule)
