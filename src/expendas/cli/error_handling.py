"""CLI error handling helpers."""

import click

from expendas.domain.errors import DomainError
from expendas.domain.recurrence import RecurrenceFeedback


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def echo_feedback(feedback: RecurrenceFeedback) -> None:
    """Print a schedule description followed by any advisory warnings."""
    click.echo(f"  Schedule: {feedback.description}")
    for message in feedback.errors:
        click.echo(f"Warning: {message}", err=True)
