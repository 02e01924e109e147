"""Account domain service."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from expendas.database.base import Database
from expendas.domain.account_types import (
    AccountGroup,
    AccountType,
    CreditCardType,
    display_account_type,
    fields_for,
)
from expendas.domain.entities import Account as AccountEntity, InvestmentPerformance
from expendas.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    duplicate_account_name,
)

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(frozen=True)
class _AccountValues:
    name: str
    account_type: AccountType
    balance: Decimal
    credit_card_type: Optional[CreditCardType]
    total_deposits: Optional[Decimal]
    total_fixed_income: Optional[Decimal]


def capitalize_name(name: str) -> str:
    """Capitalize the first letter of each word, leaving the rest alone.

    'my checking' becomes 'My Checking', 'eTrade IRA' becomes 'ETrade IRA'.
    """
    return " ".join(word[:1].upper() + word[1:] for word in name.split())


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        account_type: AccountType,
        balance: Decimal = Decimal("0"),
        credit_card_type: Optional[CreditCardType] = None,
        total_deposits: Optional[Decimal] = None,
        total_fixed_income: Optional[Decimal] = None,
    ) -> int:
        """Create a new account.

        Args:
            name: Account name (capitalized before saving)
            account_type: Account type
            balance: Opening balance
            credit_card_type: Card network, credit cards only
            total_deposits: Money paid in so far, investment accounts only
            total_fixed_income: Fixed income part of the balance, investment accounts only

        Returns:
            Account ID

        Raises:
            ValidationError: If a field does not apply to the account type
            ConflictError: If account name already exists
        """
        values = self._validate(
            _AccountValues(
                name=capitalize_name(name),
                account_type=account_type,
                balance=balance,
                credit_card_type=credit_card_type,
                total_deposits=total_deposits,
                total_fixed_income=total_fixed_income,
            )
        )
        self._check_name_available(values.name)

        account_id = self.db.create_account(
            name=values.name,
            account_type=values.account_type,
            balance=values.balance,
            credit_card_type=values.credit_card_type,
            total_deposits=values.total_deposits,
            total_fixed_income=values.total_fixed_income,
        )
        logger.info("Created %s account '%s' (ID: %s)", display_account_type(account_type), values.name, account_id)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID, raising NotFoundError if it does not exist."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts sorted by name, ignoring case."""
        return sorted(self.db.list_accounts(), key=lambda acc: acc.name.lower())

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        balance: Optional[Decimal] = None,
        credit_card_type=_UNSET,
        total_deposits=_UNSET,
        total_fixed_income=_UNSET,
    ) -> None:
        """Update an account.

        Fields left out keep their value. Pass None for credit_card_type,
        total_deposits or total_fixed_income to clear them. Changing the type
        clears fields that the new type does not have.

        Raises:
            NotFoundError: If account not found
            ValidationError: If a field does not apply to the account type
            ConflictError: If the new name already exists
        """
        account = self.require_account(account_id)
        new_type = account_type if account_type is not None else account.account_type
        fields = fields_for(new_type)

        def pick(value, current, applies):
            if value is not _UNSET:
                return value
            return current if applies else None

        values = self._validate(
            _AccountValues(
                name=capitalize_name(name) if name is not None else account.name,
                account_type=new_type,
                balance=balance if balance is not None else account.balance,
                credit_card_type=pick(credit_card_type, account.credit_card_type, fields.has_credit_card_type),
                total_deposits=pick(total_deposits, account.total_deposits, fields.has_investment_totals),
                total_fixed_income=pick(
                    total_fixed_income, account.total_fixed_income, fields.has_investment_totals
                ),
            )
        )
        if values.name != account.name:
            self._check_name_available(values.name, exclude_id=account_id)

        self.db.update_account(
            account_id=account_id,
            name=values.name,
            account_type=values.account_type,
            balance=values.balance,
            credit_card_type=values.credit_card_type,
            total_deposits=values.total_deposits,
            total_fixed_income=values.total_fixed_income,
        )
        logger.info("Updated account %s", account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
            DependencyError: If the account still has payments
        """
        self.require_account(account_id)

        payment_count = self.db.get_account_payment_count(account_id)
        if payment_count > 0:
            raise DependencyError(account_delete_blocked(account_id, payment_count))

        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account_id)

    def investment_performance(self, account: AccountEntity) -> InvestmentPerformance:
        """Compute equity and gain figures for an investment account.

        Equity is the balance less fixed income; gain is the balance less
        deposits, and the gain ratio divides the gain by the deposits (or by
        the balance when nothing was deposited).

        Raises:
            ValidationError: If the account is not an investment account
        """
        if fields_for(account.account_type).group is not AccountGroup.INVESTMENT:
            raise ValidationError(f"Account '{account.name}' is not an investment account")

        deposits = account.total_deposits or Decimal("0")
        fixed_income = account.total_fixed_income or Decimal("0")
        gain = account.balance - deposits
        divisor = deposits or account.balance
        gain_ratio = gain / divisor if divisor else None
        return InvestmentPerformance(
            equity=account.balance - fixed_income,
            gain=gain,
            gain_ratio=gain_ratio,
        )

    def _check_name_available(self, name: str, exclude_id: Optional[int] = None) -> None:
        for acc in self.db.list_accounts():
            if acc.id != exclude_id and acc.name.lower() == name.lower():
                raise ConflictError(duplicate_account_name(name))

    def _validate(self, values: _AccountValues) -> _AccountValues:
        if not values.name:
            raise ValidationError("Account name is required")

        fields = fields_for(values.account_type)
        type_label = display_account_type(values.account_type)

        if values.balance < 0 and not fields.allows_negative_balance:
            raise ValidationError(f"{fields.balance_label} cannot be negative for {type_label}")
        if values.credit_card_type is not None and not fields.has_credit_card_type:
            raise ValidationError(f"Card type only applies to credit cards, not {type_label}")
        if not fields.has_investment_totals and (
            values.total_deposits is not None or values.total_fixed_income is not None
        ):
            raise ValidationError(
                f"Total deposits and fixed income only apply to investment accounts, not {type_label}"
            )
        for label, amount in (
            ("Total deposits", values.total_deposits),
            ("Total fixed income", values.total_fixed_income),
        ):
            if amount is not None and amount < 0:
                raise ValidationError(f"{label} cannot be negative")
        return values
