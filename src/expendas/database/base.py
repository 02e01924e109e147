"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from expendas.domain.account_types import AccountType, CreditCardType
from expendas.domain.entities import Account, Payment, PaymentData


class Database(ABC):
    """Abstract database interface for expendas."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        name: str,
        account_type: AccountType,
        balance: Decimal,
        credit_card_type: Optional[CreditCardType] = None,
        total_deposits: Optional[Decimal] = None,
        total_fixed_income: Optional[Decimal] = None,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: str,
        account_type: AccountType,
        balance: Decimal,
        credit_card_type: Optional[CreditCardType] = None,
        total_deposits: Optional[Decimal] = None,
        total_fixed_income: Optional[Decimal] = None,
    ) -> None:
        """Replace all editable fields of an account."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_payment_count(self, account_id: int) -> int:
        """Get count of payments associated with an account."""
        pass

    # Payment operations
    @abstractmethod
    def create_payment(self, data: PaymentData) -> int:
        """Create a payment. Returns payment ID."""
        pass

    @abstractmethod
    def create_payments(self, items: list[PaymentData]) -> list[int]:
        """Create several payments in one transaction.

        Either all payments are stored or, if any insert fails, none are.
        Returns payment IDs in the order of ``items``.
        """
        pass

    @abstractmethod
    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID."""
        pass

    @abstractmethod
    def update_payment(self, payment_id: int, data: PaymentData) -> None:
        """Replace all fields of a payment."""
        pass

    @abstractmethod
    def delete_payment(self, payment_id: int) -> None:
        """Delete a payment."""
        pass

    @abstractmethod
    def list_payments(
        self,
        account_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Payment]:
        """List payments with optional filters.

        Args:
            account_id: Optional account ID filter
            start_date: Optional start date filter (on the payment's date)
            end_date: Optional end date filter (on the payment's date)
        """
        pass
