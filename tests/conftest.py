"""Shared pytest fixtures for expendas tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from expendas.database.factories import create_sqlite_database
from expendas.domain.account import AccountService
from expendas.domain.account_types import AccountType, CreditCardType
from expendas.domain.payment import PaymentService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # CLI tests pass this path to --db-path
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def payment_service(temp_db):
    """Create a PaymentService with a temporary database."""
    return PaymentService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a checking account for testing."""
    account_id = account_service.create_account(
        name="Checking", account_type=AccountType.CHECKING_ACCOUNT, balance=Decimal("1000.00")
    )
    return account_service.get_account(account_id)


@pytest.fixture
def sample_accounts(account_service, sample_account):
    """Create checking, savings and credit card accounts.

    Returns a dict keyed by account name.
    """
    savings_id = account_service.create_account(
        name="Savings", account_type=AccountType.SAVINGS_ACCOUNT, balance=Decimal("500.00")
    )
    visa_id = account_service.create_account(
        name="Visa",
        account_type=AccountType.CREDIT_CARD,
        balance=Decimal("-250.00"),
        credit_card_type=CreditCardType.VISA,
    )
    return {
        "Checking": sample_account,
        "Savings": account_service.get_account(savings_id),
        "Visa": account_service.get_account(visa_id),
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
