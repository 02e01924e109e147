"""Utility for resolving account names to IDs."""

from expendas.domain.account import AccountService
from expendas.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Names are matched exactly first, then ignoring case.

    Args:
        account_service: AccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    if isinstance(account, int) or str(account).strip().isdigit():
        account_id = int(account)
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    name = str(account).strip()
    accounts = account_service.list_accounts()
    for acc in accounts:
        if acc.name == name:
            return acc.id
    for acc in accounts:
        if acc.name.lower() == name.lower():
            return acc.id

    raise NotFoundError(f"Account '{name}' not found")
