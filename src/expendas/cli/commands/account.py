"""Account management commands."""

import click
from expendas.cli.account_resolution import resolve_account_or_exit
from expendas.cli.error_handling import handle_domain_error
from expendas.cli.formatting import format_currency, format_percentage
from expendas.domain.account import AccountService
from expendas.domain.account_types import (
    AccountType,
    display_account_type,
    fields_for,
    parse_account_type,
    parse_credit_card_type,
)
from expendas.domain.errors import DomainError
from expendas.utils.amount_parser import parse_amount

TYPE_CHOICES = ", ".join(display_account_type(t) for t in AccountType)


def _parse_or_exit(ctx, parser, value, label):
    try:
        return parser(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", required=True, help=f"Account type ({TYPE_CHOICES})")
@click.option("--balance", default="0", show_default=True, help="Current balance")
@click.option("--card-type", help="Card network for credit cards (Visa, Mastercard, American Express, Discover)")
@click.option("--total-deposits", help="Money paid into an investment account so far")
@click.option("--total-fixed-income", help="Fixed income part of an investment balance")
@click.pass_context
def create_account(
    ctx,
    name: str,
    account_type: str,
    balance: str,
    card_type: str | None,
    total_deposits: str | None,
    total_fixed_income: str | None,
):
    """Create a new account.

    Examples:
        expendas account create "My Checking" --type checking_account --balance 1200
        expendas account create "Sapphire" --type credit_card --card-type visa --balance -350.25
        expendas account create "Brokerage" --type investment --balance 10500 --total-deposits 9000
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    try:
        account_id = service.create_account(
            name=name,
            account_type=_parse_or_exit(ctx, parse_account_type, account_type, "account type"),
            balance=_parse_or_exit(ctx, parse_amount, balance, "balance"),
            credit_card_type=(
                _parse_or_exit(ctx, parse_credit_card_type, card_type, "card type") if card_type else None
            ),
            total_deposits=(
                _parse_or_exit(ctx, parse_amount, total_deposits, "total deposits") if total_deposits else None
            ),
            total_fixed_income=(
                _parse_or_exit(ctx, parse_amount, total_fixed_income, "total fixed income")
                if total_fixed_income
                else None
            ),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    account = service.get_account(account_id)
    click.echo(f"Created account '{account.name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {display_account_type(acc.account_type):16s} | "
            f"{format_currency(acc.balance):>14s}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str) -> None:
    """Show an account's details.

    ACCOUNT can be an account name or ID. Investment accounts also show
    equity and total gain or loss.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    acc = service.get_account(account_id)
    fields = fields_for(acc.account_type)

    click.echo(f"{acc.name} (ID: {acc.id})")
    click.echo(f"  Type: {display_account_type(acc.account_type)}")
    if acc.credit_card_type is not None:
        click.echo(f"  Card: {display_account_type(acc.credit_card_type)}")
    click.echo(f"  {fields.balance_label}: {format_currency(acc.balance)}")

    if fields.has_investment_totals:
        performance = service.investment_performance(acc)
        if acc.total_deposits is not None:
            click.echo(f"  Total Deposits: {format_currency(acc.total_deposits)}")
        if acc.total_fixed_income is not None:
            click.echo(f"  Total Fixed Income: {format_currency(acc.total_fixed_income)}")
        click.echo(f"  Equity: {format_currency(performance.equity)}")
        click.echo(
            f"  Total Gain / Loss: {format_currency(performance.gain)} "
            f"({format_percentage(performance.gain_ratio)})"
        )


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", help=f"New account type ({TYPE_CHOICES})")
@click.option("--balance", help="New balance")
@click.option("--card-type", help="Card network, or empty string to clear")
@click.option("--total-deposits", help="Total deposits, or empty string to clear")
@click.option("--total-fixed-income", help="Total fixed income, or empty string to clear")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    account_type: str | None,
    balance: str | None,
    card_type: str | None,
    total_deposits: str | None,
    total_fixed_income: str | None,
) -> None:
    """Update an account.

    ACCOUNT can be an account name or ID. Only the given fields change.
    Changing the type drops fields the new type does not have.

    Examples:
        expendas account update "Sapphire" --balance -120.00
        expendas account update 3 --name "Roth IRA" --type retirement
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)

    changes = {}
    if name is not None:
        changes["name"] = name
    if account_type is not None:
        changes["account_type"] = _parse_or_exit(ctx, parse_account_type, account_type, "account type")
    if balance is not None:
        changes["balance"] = _parse_or_exit(ctx, parse_amount, balance, "balance")
    if card_type is not None:
        changes["credit_card_type"] = (
            _parse_or_exit(ctx, parse_credit_card_type, card_type, "card type") if card_type else None
        )
    if total_deposits is not None:
        changes["total_deposits"] = (
            _parse_or_exit(ctx, parse_amount, total_deposits, "total deposits") if total_deposits else None
        )
    if total_fixed_income is not None:
        changes["total_fixed_income"] = (
            _parse_or_exit(ctx, parse_amount, total_fixed_income, "total fixed income")
            if total_fixed_income
            else None
        )

    if not changes:
        click.echo("Nothing to update.")
        return

    try:
        service.update_account(account_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated account '{service.get_account(account_id).name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if it has no payments. Use
    'payment delete' to remove them first.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
