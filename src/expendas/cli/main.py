"""Main CLI entry point."""

import logging

import click
from expendas.database.factories import DB_PATH_ENV_VAR, create_sqlite_database

# Import and register all commands at module level
from expendas.cli.commands import account, payment

LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr, at DEBUG when verbose and WARNING otherwise."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV_VAR} environment variable)",
    envvar=DB_PATH_ENV_VAR,
)
@click.option("--verbose", "-v", is_flag=True, help="Log what the application does")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Expendas - Personal finance tracking.

    Record accounts and the payments made from and to them, including
    repeating payments and transfers between accounts.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
payment.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
