"""Balance report command."""

import click
from ledgerpilot.cli.account_resolution import resolve_entity_or_exit
from ledgerpilot.cli.error_handling import handle_domain_error
from ledgerpilot.cli.formatting import echo_balance_table
from ledgerpilot.cli.period_options import PERIOD_HELP, resolve_cli_period
from ledgerpilot.domain.entity import EntityService
from ledgerpilot.domain.journal import JournalService


@click.command("balances")
@click.option("--entity", help="Entity name or ID (defaults to the first entity)")
@click.option("--period", help=PERIOD_HELP)
@click.option("--no-schedules", is_flag=True, help="Leave out pending scheduled entries")
@click.pass_context
def balances(ctx, entity: str | None, period: str | None, no_schedules: bool):
    """Show opening and closing balances of an entity for one month.

    Closing balances add the month's saved entries and, unless
    --no-schedules is given, the depreciation and loan entries its
    schedules would post that month.

    Examples:
        ledgerpilot balances
        ledgerpilot balances --entity "Sub Co" --period 2025-12
    """
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    resolved_period = resolve_cli_period(ctx, period)

    try:
        result = JournalService(db).period_balances(
            ent.id, resolved_period, include_schedules=not no_schedules
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    echo_balance_table(
        result.opening, result.closing, title=f"Balances of '{ent.name}' for {resolved_period}"
    )


def register_commands(cli):
    """Register balances command with main CLI."""
    cli.add_command(balances)
