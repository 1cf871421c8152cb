"""Group consolidation command."""

import click
from ledgerpilot.cli.account_resolution import resolve_entity_or_exit
from ledgerpilot.cli.error_handling import handle_domain_error
from ledgerpilot.cli.formatting import echo_balance_table
from ledgerpilot.domain.entity import EntityService
from ledgerpilot.domain.journal import JournalService
from ledgerpilot.utils.date_parser import parse_period


@click.command("consolidate")
@click.option("--group", "group", required=True, help="Group (parent) entity name or ID")
@click.option("--period", help="Month to consolidate (YYYY-MM); whole ledger if omitted")
@click.option("--no-schedules", is_flag=True, help="Leave out pending scheduled entries")
@click.pass_context
def consolidate(ctx, group: str, period: str | None, no_schedules: bool):
    """Consolidate a group entity with its subsidiaries.

    Entities with a consolidation method other than 'none' and ownership
    above zero are summed into the group, then intercompany receivable,
    payable and loan balances are eliminated.

    Examples:
        ledgerpilot consolidate --group "Main Entity"
        ledgerpilot consolidate --group "Main Entity" --period 2025-12
    """
    db = ctx.obj["db"]
    entity_service = EntityService(db)
    group_entity = resolve_entity_or_exit(ctx, entity_service, group)

    resolved_period = None
    if period is not None:
        try:
            resolved_period = parse_period(period)
        except ValueError as e:
            click.echo(f"Error: Invalid period: {e}", err=True)
            ctx.exit(1)

    try:
        result = JournalService(db).consolidate(
            group_entity.id, period=resolved_period, include_schedules=not no_schedules
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    names = {entity.id: entity.name for entity in entity_service.list_entities()}
    click.echo(f"\nIncluded entities ({len(result.included_entity_ids)}):")
    for entity_id in result.included_entity_ids:
        click.echo(f"  {names.get(entity_id, entity_id)}")

    scope = "all periods" if resolved_period is None else resolved_period
    echo_balance_table(
        result.consolidated_opening,
        result.consolidated_closing,
        title=f"Consolidated balances of '{group_entity.name}' ({scope})",
    )

    if not result.eliminations:
        click.echo("\nNo eliminations.")
        return

    click.echo("\nEliminations:")
    for record in result.eliminations:
        click.echo(f"  {record.account:<32s} {record.amount:>14,.2f}  {record.note}")


def register_commands(cli):
    """Register consolidate command with main CLI."""
    cli.add_command(consolidate)
