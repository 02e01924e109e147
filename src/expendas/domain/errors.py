"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


# Transfer validation messages, checked in this order
TRANSFER_FROM_MISSING = "Select account to transfer from."
TRANSFER_TO_MISSING = "Select account to transfer to."
TRANSFER_SAME_ACCOUNT = "Select a different account to transfer to."
TRANSFER_AMOUNT_MISSING = "Enter the amount to transfer."


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def payment_not_found(payment_id: int) -> str:
    """Return message for missing payment."""
    return f"Payment {payment_id} not found"


def duplicate_account_name(name: str) -> str:
    """Return message for an account name that is already taken."""
    return f"Account with name '{name}' already exists"


def account_delete_blocked(account_id: int, payment_count: int) -> str:
    """Return message when account still has payments."""
    return (
        f"Cannot delete account {account_id}: it has "
        f"{payment_count} payment{'s' if payment_count != 1 else ''}. "
        "Please delete them first."
    )
