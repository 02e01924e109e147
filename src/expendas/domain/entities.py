"""Domain model entities for expendas.

These are pure data classes representing business concepts, independent of
database schema. The ORM layer converts to and from them in
``expendas.database.mappers``.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

from expendas.domain.account_types import AccountType, CreditCardType


@dataclass(frozen=True)
class Account:
    """Account domain entity."""

    id: int
    name: str
    account_type: AccountType
    balance: Decimal
    created_at: datetime
    credit_card_type: Optional[CreditCardType] = None
    total_deposits: Optional[Decimal] = None
    total_fixed_income: Optional[Decimal] = None


@dataclass(frozen=True)
class Payment:
    """Payment domain entity.

    A negative amount is money leaving the account, a positive amount is a
    deposit. Month indexes in ``repeats_on_months_of_year`` start at 0 for
    January.
    """

    id: int
    account_id: int
    date: date
    amount: Decimal
    description: Optional[str]
    is_paycheck: bool
    repeats_weekly: Optional[int]
    repeats_on_days_of_month: tuple[int, ...]
    repeats_on_months_of_year: tuple[int, ...]
    repeats_until_date: Optional[date]
    created_at: datetime

    @property
    def is_income(self) -> bool:
        return self.amount > 0


@dataclass(frozen=True)
class PaymentData:
    """Field values of a payment that has not been stored yet."""

    account_id: int
    date: date
    amount: Decimal
    description: Optional[str] = None
    is_paycheck: bool = False
    repeats_weekly: Optional[int] = None
    repeats_on_days_of_month: tuple[int, ...] = ()
    repeats_on_months_of_year: tuple[int, ...] = ()
    repeats_until_date: Optional[date] = None


@dataclass(frozen=True)
class InvestmentPerformance:
    """Derived figures for an investment account."""

    equity: Decimal
    gain: Decimal
    gain_ratio: Optional[Decimal]
