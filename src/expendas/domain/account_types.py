"""Account type variants.

Each account type belongs to a group, and each group carries its own set of
fields. ``fields_for`` is the single place that decides which fields an
account of a given type has.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Kinds of account."""

    CHECKING_ACCOUNT = "Checking_Account"
    SAVINGS_ACCOUNT = "Savings_Account"
    CREDIT_CARD = "Credit_Card"
    LOAN = "Loan"
    CAR_LOAN = "Car_Loan"
    MORTGAGE = "Mortgage"
    INVESTMENT = "Investment"
    RETIREMENT = "Retirement"


class AccountGroup(str, Enum):
    """Account categories sharing a field set."""

    BANK = "bank"
    DEBT = "debt"
    INVESTMENT = "investment"


class CreditCardType(str, Enum):
    """Credit card networks."""

    VISA = "Visa"
    MASTERCARD = "Mastercard"
    AMERICAN_EXPRESS = "American_Express"
    DISCOVER = "Discover"


ACCOUNT_GROUPS: dict[AccountType, AccountGroup] = {
    AccountType.CHECKING_ACCOUNT: AccountGroup.BANK,
    AccountType.SAVINGS_ACCOUNT: AccountGroup.BANK,
    AccountType.CREDIT_CARD: AccountGroup.DEBT,
    AccountType.LOAN: AccountGroup.DEBT,
    AccountType.CAR_LOAN: AccountGroup.DEBT,
    AccountType.MORTGAGE: AccountGroup.DEBT,
    AccountType.INVESTMENT: AccountGroup.INVESTMENT,
    AccountType.RETIREMENT: AccountGroup.INVESTMENT,
}


@dataclass(frozen=True)
class AccountFields:
    """Field set of one account variant."""

    group: AccountGroup
    allows_negative_balance: bool
    has_credit_card_type: bool
    has_investment_totals: bool
    balance_label: str = "Balance"


def fields_for(account_type: AccountType) -> AccountFields:
    """Return the field set for an account type.

    Args:
        account_type: Account type

    Returns:
        AccountFields describing which fields apply
    """
    group = ACCOUNT_GROUPS[account_type]
    if group is AccountGroup.DEBT:
        return AccountFields(
            group=group,
            allows_negative_balance=True,
            has_credit_card_type=account_type is AccountType.CREDIT_CARD,
            has_investment_totals=False,
        )
    if group is AccountGroup.INVESTMENT:
        return AccountFields(
            group=group,
            allows_negative_balance=False,
            has_credit_card_type=False,
            has_investment_totals=True,
            balance_label="Current Balance",
        )
    return AccountFields(
        group=group,
        allows_negative_balance=False,
        has_credit_card_type=False,
        has_investment_totals=False,
    )


def types_in_group(group: AccountGroup) -> list[AccountType]:
    """List the account types belonging to a group."""
    return [t for t, g in ACCOUNT_GROUPS.items() if g is group]


def display_account_type(account_type: Optional[Enum | str]) -> str:
    """Return a human readable name, e.g. 'Credit Card'."""
    if account_type is None:
        return ""
    value = account_type.value if isinstance(account_type, Enum) else account_type
    return value.replace("_", " ")


def parse_account_type(value: str) -> AccountType:
    """Parse an account type from its value or display form.

    Accepts 'Credit_Card', 'credit card', 'credit-card' and so on.

    Raises:
        ValueError: If the value names no account type
    """
    return _parse_choice(AccountType, value, "account type")


def parse_credit_card_type(value: str) -> CreditCardType:
    """Parse a credit card type from its value or display form.

    Raises:
        ValueError: If the value names no credit card type
    """
    return _parse_choice(CreditCardType, value, "credit card type")


def _parse_choice(enum_cls, value: str, label: str):
    key = value.strip().lower().replace(" ", "_").replace("-", "_")
    for member in enum_cls:
        if member.value.lower() == key:
            return member
    options = ", ".join(display_account_type(m) for m in enum_cls)
    raise ValueError(f"Unknown {label} '{value}'. Choose one of: {options}")
