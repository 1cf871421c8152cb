"""Main CLI entry point."""

import click
from ledgerpilot.database.factories import create_sqlite_database
from ledgerpilot.logging_config import configure_logging

# Import and register all commands at module level
from ledgerpilot.cli.commands import (
    account,
    balances,
    consolidate,
    entity,
    journal,
    post,
    schedule,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERPILOT_DB_PATH environment variable)",
    envvar="LEDGERPILOT_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="LEDGERPILOT_LOG_LEVEL",
    help="Log level for diagnostics written to stderr",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"], case_sensitive=False),
    default="console",
    show_default=True,
    help="Log output format",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str, log_format: str):
    """Ledgerpilot - turn plain-text business events into a double-entry ledger.

    Post free-text descriptions as balanced journal entries, keep a chart of
    accounts per entity, run depreciation and loan schedules, and view
    balances for one entity or a consolidated group.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level.upper(), format=log_format.lower())

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
entity.register_commands(cli)
account.register_commands(cli)
post.register_commands(cli)
journal.register_commands(cli)
balances.register_commands(cli)
schedule.register_commands(cli)
consolidate.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
