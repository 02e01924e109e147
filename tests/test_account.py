"""Tests for the account service and account commands."""

from datetime import date
from decimal import Decimal

import pytest

from expendas.cli.main import cli
from expendas.domain.account import capitalize_name
from expendas.domain.account_types import AccountType, CreditCardType
from expendas.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from expendas.utils.account_resolver import resolve_account


class TestAccountService:
    """Tests for AccountService."""

    def test_create_capitalizes_name(self, account_service):
        account_id = account_service.create_account(name="  my checking ", account_type=AccountType.CHECKING_ACCOUNT)
        account = account_service.get_account(account_id)
        assert account.name == "My Checking"
        assert account.account_type is AccountType.CHECKING_ACCOUNT
        assert account.balance == Decimal("0")

    def test_capitalize_name_keeps_inner_case(self):
        assert capitalize_name("eTrade IRA") == "ETrade IRA"

    def test_create_requires_name(self, account_service):
        with pytest.raises(ValidationError, match="Account name is required"):
            account_service.create_account(name="   ", account_type=AccountType.SAVINGS_ACCOUNT)

    def test_duplicate_name_ignores_case(self, account_service, sample_account):
        with pytest.raises(ConflictError, match="already exists"):
            account_service.create_account(name="checking", account_type=AccountType.SAVINGS_ACCOUNT)

    def test_negative_balance_only_for_debt(self, account_service):
        with pytest.raises(ValidationError, match="Balance cannot be negative for Checking Account"):
            account_service.create_account(
                name="Overdrawn", account_type=AccountType.CHECKING_ACCOUNT, balance=Decimal("-1.00")
            )

        account_id = account_service.create_account(
            name="Car", account_type=AccountType.CAR_LOAN, balance=Decimal("-12000.00")
        )
        assert account_service.get_account(account_id).balance == Decimal("-12000.00")

    def test_credit_card_type(self, account_service):
        account_id = account_service.create_account(
            name="Sapphire",
            account_type=AccountType.CREDIT_CARD,
            balance=Decimal("-350.25"),
            credit_card_type=CreditCardType.VISA,
        )
        assert account_service.get_account(account_id).credit_card_type is CreditCardType.VISA

    def test_card_type_rejected_for_other_types(self, account_service):
        with pytest.raises(ValidationError, match="Card type only applies to credit cards, not Savings Account"):
            account_service.create_account(
                name="Savings",
                account_type=AccountType.SAVINGS_ACCOUNT,
                credit_card_type=CreditCardType.DISCOVER,
            )

    def test_investment_totals_only_for_investments(self, account_service):
        with pytest.raises(ValidationError, match="only apply to investment accounts, not Loan"):
            account_service.create_account(
                name="Student Loan", account_type=AccountType.LOAN, total_deposits=Decimal("100")
            )

    def test_investment_balance_label_in_error(self, account_service):
        with pytest.raises(ValidationError, match="Current Balance cannot be negative for Investment"):
            account_service.create_account(
                name="Brokerage", account_type=AccountType.INVESTMENT, balance=Decimal("-5")
            )

    def test_negative_totals_rejected(self, account_service):
        with pytest.raises(ValidationError, match="Total fixed income cannot be negative"):
            account_service.create_account(
                name="Brokerage", account_type=AccountType.INVESTMENT, total_fixed_income=Decimal("-5")
            )

    def test_list_accounts_sorted_by_name(self, account_service):
        for name in ["zeta", "Alpha", "beta"]:
            account_service.create_account(name=name, account_type=AccountType.SAVINGS_ACCOUNT)
        assert [acc.name for acc in account_service.list_accounts()] == ["Alpha", "Beta", "Zeta"]

    def test_update_account(self, account_service, sample_account):
        account_service.update_account(sample_account.id, name="main checking", balance=Decimal("42.00"))
        account = account_service.get_account(sample_account.id)
        assert account.name == "Main Checking"
        assert account.balance == Decimal("42.00")

    def test_update_type_drops_fields_the_new_type_lacks(self, account_service):
        account_id = account_service.create_account(
            name="Card", account_type=AccountType.CREDIT_CARD, credit_card_type=CreditCardType.MASTERCARD
        )
        account_service.update_account(account_id, account_type=AccountType.CHECKING_ACCOUNT)
        account = account_service.get_account(account_id)
        assert account.account_type is AccountType.CHECKING_ACCOUNT
        assert account.credit_card_type is None

    def test_update_clears_card_type(self, account_service, sample_accounts):
        visa = sample_accounts["Visa"]
        account_service.update_account(visa.id, credit_card_type=None)
        assert account_service.get_account(visa.id).credit_card_type is None

    def test_update_to_taken_name(self, account_service, sample_accounts):
        with pytest.raises(ConflictError):
            account_service.update_account(sample_accounts["Savings"].id, name="visa")

    def test_update_missing_account(self, account_service):
        with pytest.raises(NotFoundError, match="Account 99 not found"):
            account_service.update_account(99, name="Ghost")

    def test_delete_blocked_by_payments(self, account_service, payment_service, sample_account):
        payment_id = payment_service.create_payment(
            account_id=sample_account.id, date=date(2024, 3, 1), amount=Decimal("-20.00")
        )
        with pytest.raises(DependencyError, match="it has 1 payment. Please delete them first."):
            account_service.delete_account(sample_account.id)

        payment_service.delete_payment(payment_id)
        account_service.delete_account(sample_account.id)
        assert account_service.get_account(sample_account.id) is None

    def test_investment_performance(self, account_service):
        account_id = account_service.create_account(
            name="Brokerage",
            account_type=AccountType.INVESTMENT,
            balance=Decimal("11000.00"),
            total_deposits=Decimal("10000.00"),
            total_fixed_income=Decimal("2000.00"),
        )
        performance = account_service.investment_performance(account_service.get_account(account_id))
        assert performance.equity == Decimal("9000.00")
        assert performance.gain == Decimal("1000.00")
        assert performance.gain_ratio == Decimal("0.1")

    def test_investment_performance_without_deposits_or_balance(self, account_service):
        account_id = account_service.create_account(name="Empty IRA", account_type=AccountType.RETIREMENT)
        performance = account_service.investment_performance(account_service.get_account(account_id))
        assert performance.gain == Decimal("0")
        assert performance.gain_ratio is None

    def test_investment_performance_rejects_other_types(self, account_service, sample_account):
        with pytest.raises(ValidationError, match="is not an investment account"):
            account_service.investment_performance(sample_account)


class TestResolveAccount:
    """Tests for resolving account references."""

    def test_by_id(self, account_service, sample_account):
        assert resolve_account(account_service, str(sample_account.id)) == sample_account.id
        assert resolve_account(account_service, sample_account.id) == sample_account.id

    def test_by_name_ignoring_case(self, account_service, sample_account):
        assert resolve_account(account_service, "CHECKING") == sample_account.id

    def test_missing(self, account_service):
        with pytest.raises(NotFoundError, match="Account 'Nope' not found"):
            resolve_account(account_service, "Nope")
        with pytest.raises(NotFoundError, match="Account ID 7 not found"):
            resolve_account(account_service, "7")


def test_account_create(cli_runner, temp_db):
    """Test creating an account from the command line."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "create", "my checking", "--type", "checking account",
         "--balance", "1,200.00"],
    )

    assert result.exit_code == 0
    assert "Created account 'My Checking' (ID: 1)" in result.output


def test_account_create_credit_card(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "create", "Sapphire", "--type", "credit_card",
         "--card-type", "visa", "--balance", "-350.25"],
    )
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "show", "Sapphire"])
    assert result.exit_code == 0
    assert "Type: Credit Card" in result.output
    assert "Card: Visa" in result.output
    assert "Balance: -$350.25" in result.output


def test_account_create_invalid_type(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Wallet", "--type", "wallet"]
    )
    assert result.exit_code == 1
    assert "Invalid account type" in result.output


def test_account_create_duplicate(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Checking", "--type", "savings_account"]
    )
    assert result.exit_code == 1
    assert "Error: Account with name 'Checking' already exists" in result.output


def test_account_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])
    assert result.exit_code == 0
    assert "No accounts found." in result.output


def test_account_list_with_data(cli_runner, temp_db, sample_accounts):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])
    assert result.exit_code == 0
    assert "Checking Account" in result.output
    assert "$1,000.00" in result.output
    assert "-$250.00" in result.output


def test_account_show_investment(cli_runner, temp_db, account_service):
    account_service.create_account(
        name="Brokerage",
        account_type=AccountType.INVESTMENT,
        balance=Decimal("11000.00"),
        total_deposits=Decimal("10000.00"),
    )
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "show", "brokerage"])
    assert result.exit_code == 0
    assert "Current Balance: $11,000.00" in result.output
    assert "Equity: $11,000.00" in result.output
    assert "Total Gain / Loss: $1,000.00 (+10.00%)" in result.output


def test_account_update(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "update", "Checking", "--name", "everyday"]
    )
    assert result.exit_code == 0
    assert "Updated account 'Everyday'" in result.output


def test_account_update_nothing(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "update", "Checking"])
    assert result.exit_code == 0
    assert "Nothing to update." in result.output


def test_account_delete(cli_runner, temp_db, sample_account):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "Checking", "--yes"]
    )
    assert result.exit_code == 0
    assert "Deleted account 'Checking'" in result.output


def test_account_delete_unknown(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "delete", "Ghost", "--yes"])
    assert result.exit_code == 1
    assert "Account 'Ghost' not found" in result.output
