"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum values and JSON lists
only exist as plain columns on the ORM side.
"""

from expendas.domain import entities as domain
from expendas.domain.account_types import AccountType, CreditCardType
from expendas.database.models import (
    Account as ORMAccount,
    Payment as ORMPayment,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=AccountType(orm_account.account_type),
        balance=orm_account.balance,
        created_at=orm_account.created_at,
        credit_card_type=(
            CreditCardType(orm_account.credit_card_type)
            if orm_account.credit_card_type is not None
            else None
        ),
        total_deposits=orm_account.total_deposits,
        total_fixed_income=orm_account.total_fixed_income,
    )


def payment_to_domain(orm_payment: ORMPayment) -> domain.Payment:
    """Convert SQLAlchemy Payment model to domain Payment entity."""
    return domain.Payment(
        id=orm_payment.id,
        account_id=orm_payment.account_id,
        date=orm_payment.date,
        amount=orm_payment.amount,
        description=orm_payment.description,
        is_paycheck=bool(orm_payment.is_paycheck),
        repeats_weekly=orm_payment.repeats_weekly,
        repeats_on_days_of_month=tuple(orm_payment.repeats_on_days_of_month or ()),
        repeats_on_months_of_year=tuple(orm_payment.repeats_on_months_of_year or ()),
        repeats_until_date=orm_payment.repeats_until_date,
        created_at=orm_payment.created_at,
    )
