"""Tests for payment, transfer and describe commands."""

from datetime import date
from decimal import Decimal

from expendas.cli.main import cli
from expendas.cli.recurrence_options import schedule_edits
from expendas.domain import recurrence


def invoke(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def test_payment_add_weekly(cli_runner, temp_db, sample_account):
    """Test adding a repeating payment."""
    result = invoke(
        cli_runner, temp_db,
        "payment", "add", "--account", "checking", "--date", "2024-03-15", "--amount", "42.50",
        "--description", "Groceries", "--weekly", "1",
    )

    assert result.exit_code == 0
    assert "Created payment 1" in result.output
    assert "Payment on Checking" in result.output
    assert "Amount: -$42.50" in result.output
    assert "Schedule: Repeats every week on Friday." in result.output


def test_payment_add_paycheck(cli_runner, temp_db, payment_service, sample_account):
    result = invoke(
        cli_runner, temp_db,
        "payment", "add", "--account", "Checking", "--date", "2024-03-08", "--amount", "2100",
        "--paycheck", "--weekly", "2",
    )
    assert result.exit_code == 0
    assert "Paycheck on Checking" in result.output

    payment = payment_service.get_payment(1)
    assert payment.amount == Decimal("2100.00")
    assert payment.is_paycheck
    assert payment.repeats_weekly == 2


def test_payment_add_monthly_with_warning(cli_runner, temp_db, sample_account):
    result = invoke(
        cli_runner, temp_db,
        "payment", "add", "--account", "Checking", "--date", "2024-01-31", "--amount", "100", "--days", "31",
    )
    assert result.exit_code == 0
    assert "Schedule: Repeats monthly on the 31st of every month." in result.output
    assert "Warning: Months without a 31st skip that payment" in result.output


def test_payment_add_rejects_weekly_and_days(cli_runner, temp_db, sample_account):
    result = invoke(
        cli_runner, temp_db,
        "payment", "add", "--account", "Checking", "--date", "2024-03-15", "--amount", "1",
        "--weekly", "1", "--days", "1",
    )
    assert result.exit_code == 1
    assert "Use either --weekly or --days, not both." in result.output


def test_payment_add_months_need_days(cli_runner, temp_db, sample_account):
    result = invoke(
        cli_runner, temp_db,
        "payment", "add", "--account", "Checking", "--date", "2024-03-15", "--amount", "1", "--months", "jan",
    )
    assert result.exit_code == 1
    assert "--months requires --days." in result.output


def test_payment_add_invalid_amount(cli_runner, temp_db, sample_account):
    result = invoke(
        cli_runner, temp_db,
        "payment", "add", "--account", "Checking", "--date", "2024-03-15", "--amount", "lots",
    )
    assert result.exit_code == 1
    assert "Invalid amount format" in result.output


def test_payment_add_unknown_account(cli_runner, temp_db):
    result = invoke(
        cli_runner, temp_db,
        "payment", "add", "--account", "Nowhere", "--date", "2024-03-15", "--amount", "1",
    )
    assert result.exit_code == 1
    assert "Account 'Nowhere' not found" in result.output


def test_transfer(cli_runner, temp_db, sample_accounts):
    result = invoke(
        cli_runner, temp_db,
        "payment", "transfer", "--from", "Checking", "--to", "Savings", "--amount", "200",
        "--date", "2024-03-15", "--days", "15",
    )
    assert result.exit_code == 0
    assert "Transferred $200.00 from 'Checking' to 'Savings' (payments 1 and 2)" in result.output
    assert "Schedule: Repeats monthly on the 15th of every month." in result.output

    result = invoke(cli_runner, temp_db, "payment", "list")
    assert "Transfer to Savings (repeats)" in result.output
    assert "Transfer from Checking (repeats)" in result.output


def test_transfer_missing_source(cli_runner, temp_db, sample_accounts):
    result = invoke(cli_runner, temp_db, "payment", "transfer", "--to", "Savings", "--amount", "10")
    assert result.exit_code == 1
    assert "Error: Select account to transfer from." in result.output


def test_transfer_same_account(cli_runner, temp_db, sample_accounts):
    result = invoke(
        cli_runner, temp_db, "payment", "transfer", "--from", "Checking", "--to", "checking", "--amount", "10"
    )
    assert result.exit_code == 1
    assert "Error: Select a different account to transfer to." in result.output


def test_transfer_missing_amount(cli_runner, temp_db, sample_accounts):
    result = invoke(cli_runner, temp_db, "payment", "transfer", "--from", "Checking", "--to", "Savings")
    assert result.exit_code == 1
    assert "Error: Enter the amount to transfer." in result.output


def test_payment_list_empty(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "payment", "list")
    assert result.exit_code == 0
    assert "No payments found." in result.output


def test_payment_show(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(
        account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"), repeats_weekly=2
    )
    result = invoke(cli_runner, temp_db, "payment", "show", "1", "--through", "2024-04-15")
    assert result.exit_code == 0
    assert "Schedule: Repeats every 2 weeks on Friday." in result.output
    assert "2024-03-15 (Fri)" in result.output
    assert "2024-03-29 (Fri)" in result.output
    assert "2024-04-12 (Fri)" in result.output


def test_payment_show_missing(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "payment", "show", "9")
    assert result.exit_code == 1
    assert "Payment 9 not found" in result.output


def test_payment_upcoming(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(
        account_id=sample_account.id,
        date=date(2024, 3, 1),
        amount=Decimal("-1500"),
        description="Rent",
        repeats_on_days_of_month=[1],
    )
    result = invoke(
        cli_runner, temp_db, "payment", "upcoming", "--start-date", "2024-03-01", "--end-date", "2024-05-31"
    )
    assert result.exit_code == 0
    assert "2024-04-01" in result.output
    assert "2024-05-01" in result.output
    assert "Net: -$4,500.00 over 3 payments" in result.output


def test_payment_upcoming_empty(cli_runner, temp_db, sample_account):
    result = invoke(
        cli_runner, temp_db, "payment", "upcoming", "--start-date", "2024-03-01", "--end-date", "2024-03-31"
    )
    assert result.exit_code == 0
    assert "No payments due." in result.output


def test_payment_update(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(
        account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"), description="Gym"
    )
    result = invoke(
        cli_runner, temp_db,
        "payment", "update", "1", "--amount", "25", "--days", "1,15", "--until", "2024-12-31",
    )
    assert result.exit_code == 0
    assert "Updated payment 1" in result.output
    assert "Repeats monthly on the 1st and 15th of every month, until December 31, 2024." in result.output

    payment = payment_service.get_payment(1)
    assert payment.amount == Decimal("-25.00")
    assert payment.description == "Gym"

    result = invoke(cli_runner, temp_db, "payment", "update", "1", "--no-repeat", "--description", "")
    assert result.exit_code == 0
    assert "Schedule: Does not repeat." in result.output

    payment = payment_service.get_payment(1)
    assert payment.repeats_on_days_of_month == ()
    assert payment.description is None


def test_payment_update_income(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"))
    result = invoke(cli_runner, temp_db, "payment", "update", "1", "--income")
    assert result.exit_code == 0
    assert payment_service.get_payment(1).amount == Decimal("20.00")


def test_payment_update_rejects_no_repeat_with_schedule(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"))
    result = invoke(cli_runner, temp_db, "payment", "update", "1", "--no-repeat", "--weekly", "2")
    assert result.exit_code == 1
    assert "--no-repeat cannot be combined" in result.output


def test_payment_update_until_needs_repeating_payment(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"))
    result = invoke(cli_runner, temp_db, "payment", "update", "1", "--until", "2024-12-31")
    assert result.exit_code == 1
    assert "--until requires a repeating payment" in result.output
    assert "Updated payment" not in result.output
    assert payment_service.get_payment(1).repeats_until_date is None


def test_payment_update_until_with_new_schedule(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"))
    result = invoke(cli_runner, temp_db, "payment", "update", "1", "--weekly", "1", "--until", "2024-12-31")
    assert result.exit_code == 0
    assert payment_service.get_payment(1).repeats_until_date == date(2024, 12, 31)


def test_payment_update_months_need_monthly_payment(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(
        account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"), repeats_weekly=1
    )
    result = invoke(cli_runner, temp_db, "payment", "update", "1", "--months", "jan")
    assert result.exit_code == 1
    assert "--months requires a payment that repeats on days of the month" in result.output
    payment = payment_service.get_payment(1)
    assert payment.repeats_weekly == 1
    assert payment.repeats_on_months_of_year == ()


def test_payment_update_months_on_monthly_payment(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(
        account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"), repeats_on_days_of_month=[15]
    )
    result = invoke(cli_runner, temp_db, "payment", "update", "1", "--months", "jan")
    assert result.exit_code == 0
    assert payment_service.get_payment(1).repeats_on_months_of_year == (0, 2)


def test_payment_show_window(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(
        account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"), repeats_weekly=2
    )
    result = invoke(
        cli_runner, temp_db, "payment", "show", "1", "--start-date", "2024-04-01", "--through", "2024-04-30"
    )
    assert result.exit_code == 0
    assert "Dates between 2024-04-01 and 2024-04-30:" in result.output
    assert "2024-04-12 (Fri)" in result.output
    assert "2024-03-29" not in result.output


def test_payment_delete(cli_runner, temp_db, payment_service, sample_account):
    payment_service.create_payment(account_id=sample_account.id, date=date(2024, 3, 15), amount=Decimal("-20"))
    result = invoke(cli_runner, temp_db, "payment", "delete", "1", "--yes")
    assert result.exit_code == 0
    assert "Deleted payment 1" in result.output

    result = invoke(cli_runner, temp_db, "payment", "delete", "1", "--yes")
    assert result.exit_code == 1
    assert "Payment 1 not found" in result.output


def test_describe(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "describe", "--date", "2024-03-15", "--days", "1,15")
    assert result.exit_code == 0
    assert "Repeats monthly on the 1st and 15th of every month." in result.output
    assert "Warning" not in result.output


def test_describe_with_months_and_dates(cli_runner, temp_db):
    result = invoke(
        cli_runner, temp_db,
        "describe", "--date", "2024-03-15", "--days", "1", "--months", "jan", "--through", "2025-01-31",
    )
    assert result.exit_code == 0
    assert "Repeats monthly on the 1st and 15th, in January and March." in result.output
    assert "2024-03-15 (Fri)" in result.output
    assert "2025-01-01 (Wed)" in result.output
    assert "2024-04-01" not in result.output


def test_describe_until_before_start(cli_runner, temp_db):
    result = invoke(
        cli_runner, temp_db, "describe", "--date", "2024-03-15", "--weekly", "1", "--until", "2024-03-01"
    )
    assert result.exit_code == 0
    assert "Repeats every week on Friday, until March 1, 2024." in result.output
    assert "Warning: End date is before start date." in result.output


def test_describe_until_needs_schedule(cli_runner, temp_db):
    result = invoke(cli_runner, temp_db, "describe", "--date", "2024-03-15", "--until", "2024-06-01")
    assert result.exit_code == 1
    assert "--until requires --weekly or --days." in result.output


def test_schedule_edits_replace_selections():
    edits = schedule_edits(days=[1, 15], months=[0])
    assert edits == [
        recurrence.SetRepeatType(recurrence.DATES),
        recurrence.ToggleDay(1),
        recurrence.ToggleDay(15),
        recurrence.SetMonthRestriction(False),
        recurrence.SetMonthRestriction(True),
        recurrence.ToggleMonth(0),
    ]


def test_schedule_edits_no_repeat():
    assert schedule_edits(no_repeat=True, no_until=True) == [
        recurrence.SetRepeating(False),
        recurrence.SetEndDate(None),
    ]
