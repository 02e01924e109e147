"""Payment domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from expendas.database.base import Database
from expendas.domain import recurrence
from expendas.domain.entities import Payment as PaymentEntity, PaymentData
from expendas.domain.errors import (
    NotFoundError,
    ValidationError,
    TRANSFER_AMOUNT_MISSING,
    TRANSFER_FROM_MISSING,
    TRANSFER_SAME_ACCOUNT,
    TRANSFER_TO_MISSING,
    account_not_found,
    payment_not_found,
)
from expendas.domain.recurrence import RecurrenceFeedback, RecurrenceFields

logger = logging.getLogger(__name__)

_UNSET = object()


def check_schedule(fields: RecurrenceFields) -> None:
    """Reject schedules that cannot be stored.

    Only structural problems raise; ordering problems such as an end date
    before the start date are left to ``recurrence.describe``.

    Raises:
        ValidationError: If the schedule mixes weekly and monthly fields or
            holds out-of-range values
    """
    if fields.repeats_weekly is not None:
        if fields.repeats_on_days_of_month:
            raise ValidationError("A payment cannot repeat both weekly and on days of the month")
        if fields.repeats_weekly < 1:
            raise ValidationError("Weekly interval must be at least 1")
    bad_days = [d for d in fields.repeats_on_days_of_month if not 1 <= d <= 31]
    if bad_days:
        raise ValidationError(f"Invalid day of month: {', '.join(str(d) for d in bad_days)}")
    bad_months = [m for m in fields.repeats_on_months_of_year if not 0 <= m <= 11]
    if bad_months:
        raise ValidationError(f"Invalid month index: {', '.join(str(m) for m in bad_months)}")
    if fields.repeats_on_months_of_year and not fields.repeats_on_days_of_month:
        raise ValidationError("Months can only be selected for a payment that repeats on days of the month")


class PaymentService:
    """Service for managing payments and transfers."""

    def __init__(self, db: Database):
        """Initialize payment service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_payment(
        self,
        account_id: int,
        date: date,
        amount: Decimal,
        description: Optional[str] = None,
        is_paycheck: bool = False,
        repeats_weekly: Optional[int] = None,
        repeats_on_days_of_month: Iterable[int] = (),
        repeats_on_months_of_year: Iterable[int] = (),
        repeats_until_date: Optional[date] = None,
    ) -> int:
        """Create a payment.

        Args:
            account_id: Account ID
            date: Payment date, also the start of any schedule
            amount: Signed amount, negative for money leaving the account
            description: Optional description
            is_paycheck: Mark a deposit as a paycheck
            repeats_weekly: Repeat every N weeks
            repeats_on_days_of_month: Repeat on these days (1-31)
            repeats_on_months_of_year: Only in these months (0 is January)
            repeats_until_date: Last date the payment may repeat on

        Returns:
            Payment ID

        Raises:
            NotFoundError: If account doesn't exist
            ValidationError: If the amount or schedule is invalid
        """
        self._require_account(account_id)
        schedule = recurrence.normalize(
            RecurrenceFields(
                date=date,
                repeats_weekly=repeats_weekly,
                repeats_on_days_of_month=repeats_on_days_of_month,
                repeats_on_months_of_year=repeats_on_months_of_year,
                repeats_until_date=repeats_until_date,
            )
        )
        data = self._payment_data(account_id, amount, description, is_paycheck, schedule)

        payment_id = self.db.create_payment(data)
        logger.info("Created payment %s on account %s", payment_id, account_id)
        self._log_feedback(payment_id, schedule)
        return payment_id

    def create_transfer(
        self,
        from_account_id: Optional[int],
        to_account_id: Optional[int],
        amount: Decimal,
        date: date,
        repeats_weekly: Optional[int] = None,
        repeats_on_days_of_month: Iterable[int] = (),
        repeats_on_months_of_year: Iterable[int] = (),
        repeats_until_date: Optional[date] = None,
    ) -> tuple[int, int]:
        """Move money between two accounts.

        A transfer is stored as two payments sharing date and schedule: a
        withdrawal on the source account and a deposit on the destination.
        Both are written in one database transaction.

        Args:
            from_account_id: Source account ID (None or 0 when not chosen)
            to_account_id: Destination account ID (None or 0 when not chosen)
            amount: Positive amount to move

        Returns:
            Tuple of (withdrawal payment ID, deposit payment ID)

        Raises:
            ValidationError: If an account is missing, both accounts are the
                same, or the amount is not positive
            NotFoundError: If an account doesn't exist
        """
        if not from_account_id:
            raise ValidationError(TRANSFER_FROM_MISSING)
        if not to_account_id:
            raise ValidationError(TRANSFER_TO_MISSING)
        if from_account_id == to_account_id:
            raise ValidationError(TRANSFER_SAME_ACCOUNT)
        if amount is None or amount <= 0:
            raise ValidationError(TRANSFER_AMOUNT_MISSING)

        source = self._require_account(from_account_id)
        destination = self._require_account(to_account_id)

        schedule = recurrence.normalize(
            RecurrenceFields(
                date=date,
                repeats_weekly=repeats_weekly,
                repeats_on_days_of_month=repeats_on_days_of_month,
                repeats_on_months_of_year=repeats_on_months_of_year,
                repeats_until_date=repeats_until_date,
            )
        )
        withdrawal = self._payment_data(
            source.id, -amount, f"Transfer to {destination.name}", False, schedule
        )
        deposit = self._payment_data(
            destination.id, amount, f"Transfer from {source.name}", False, schedule
        )

        withdrawal_id, deposit_id = self.db.create_payments([withdrawal, deposit])
        logger.info(
            "Transferred %s from account %s to account %s (payments %s, %s)",
            amount,
            source.id,
            destination.id,
            withdrawal_id,
            deposit_id,
        )
        self._log_feedback(withdrawal_id, schedule)
        return withdrawal_id, deposit_id

    def get_payment(self, payment_id: int) -> Optional[PaymentEntity]:
        """Get payment by ID.

        Args:
            payment_id: Payment ID

        Returns:
            Payment entity or None if not found
        """
        return self.db.get_payment(payment_id)

    def require_payment(self, payment_id: int) -> PaymentEntity:
        """Get payment by ID, raising NotFoundError if it does not exist."""
        payment = self.db.get_payment(payment_id)
        if payment is None:
            raise NotFoundError(payment_not_found(payment_id))
        return payment

    def update_payment(
        self,
        payment_id: int,
        account_id: Optional[int] = None,
        date: Optional[date] = None,
        amount: Optional[Decimal] = None,
        description=_UNSET,
        is_paycheck: Optional[bool] = None,
        edits: Sequence[recurrence.Action] = (),
    ) -> None:
        """Update a payment.

        Fields left as None keep their value; pass description=None to clear
        the description. A new date is applied as an anchor date change, so
        its day and month join any existing day or month selection. Schedule
        changes are given as recurrence edits, applied in order.

        Raises:
            NotFoundError: If payment or account doesn't exist
            ValidationError: If the amount or resulting schedule is invalid
        """
        payment = self.require_payment(payment_id)
        new_account_id = account_id if account_id is not None else payment.account_id
        if account_id is not None:
            self._require_account(account_id)

        schedule = RecurrenceFields.from_payment(payment)
        if date is not None:
            schedule = recurrence.reduce(schedule, recurrence.SetAnchorDate(date))
        for edit in edits:
            schedule = recurrence.reduce(schedule, edit)

        new_amount = amount if amount is not None else payment.amount
        data = self._payment_data(
            new_account_id,
            new_amount,
            payment.description if description is _UNSET else description,
            is_paycheck if is_paycheck is not None else (payment.is_paycheck and new_amount > 0),
            schedule,
        )
        self.db.update_payment(payment_id, data)
        logger.info("Updated payment %s", payment_id)
        self._log_feedback(payment_id, schedule)

    def delete_payment(self, payment_id: int) -> None:
        """Delete a payment.

        Raises:
            NotFoundError: If payment doesn't exist
        """
        self.require_payment(payment_id)
        self.db.delete_payment(payment_id)
        logger.info("Deleted payment %s", payment_id)

    def list_payments(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[PaymentEntity]:
        """List payments, newest first.

        Args:
            account_id: Optional account ID filter
            start_date: Optional start date filter
            end_date: Optional end date filter

        Returns:
            List of payment entities
        """
        return self.db.list_payments(account_id=account_id, start_date=start_date, end_date=end_date)

    def feedback(self, payment_id: int) -> RecurrenceFeedback:
        """Describe a payment's schedule and list advisory problems."""
        payment = self.require_payment(payment_id)
        return recurrence.describe(RecurrenceFields.from_payment(payment))

    def upcoming(self, payment_id: int, start: date, end: date) -> list[date]:
        """List the dates in [start, end] on which a payment falls."""
        payment = self.require_payment(payment_id)
        return recurrence.occurrences(RecurrenceFields.from_payment(payment), start, end)

    def occurrences_between(
        self, start: date, end: date, account_id: Optional[int] = None
    ) -> list[tuple[date, PaymentEntity]]:
        """Project every payment onto the dates in [start, end].

        Returns:
            (date, payment) pairs sorted by date, then payment ID
        """
        result = []
        for payment in self.db.list_payments(account_id=account_id, end_date=end):
            for day in recurrence.occurrences(RecurrenceFields.from_payment(payment), start, end):
                result.append((day, payment))
        result.sort(key=lambda item: (item[0], item[1].id))
        return result

    def _require_account(self, account_id: int):
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _payment_data(
        self,
        account_id: int,
        amount: Decimal,
        description: Optional[str],
        is_paycheck: bool,
        schedule: RecurrenceFields,
    ) -> PaymentData:
        if amount is None or amount == 0:
            raise ValidationError("Amount must not be zero")
        if is_paycheck and amount < 0:
            raise ValidationError("Only deposits can be marked as a paycheck")
        check_schedule(schedule)

        return PaymentData(
            account_id=account_id,
            date=schedule.date,
            amount=amount,
            description=description,
            is_paycheck=is_paycheck,
            repeats_weekly=schedule.repeats_weekly,
            repeats_on_days_of_month=schedule.repeats_on_days_of_month,
            repeats_on_months_of_year=schedule.repeats_on_months_of_year,
            repeats_until_date=schedule.repeats_until_date,
        )

    def _log_feedback(self, payment_id: int, schedule: RecurrenceFields) -> None:
        for message in recurrence.describe(schedule).errors:
            logger.info("Payment %s schedule: %s", payment_id, message)
