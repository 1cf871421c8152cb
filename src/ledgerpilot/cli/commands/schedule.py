"""Depreciation and loan schedule commands."""

import click
from ledgerpilot.cli.account_resolution import resolve_entity_or_exit
from ledgerpilot.cli.error_handling import handle_domain_error
from ledgerpilot.cli.formatting import echo_entry
from ledgerpilot.cli.period_options import PERIOD_HELP, resolve_cli_period
from ledgerpilot.domain.entities import Currency
from ledgerpilot.domain.entity import EntityService
from ledgerpilot.domain.journal import JournalService
from ledgerpilot.domain.schedule_definitions import ScheduleDefinitionService
from ledgerpilot.utils.amount_parser import parse_amount, parse_rate
from ledgerpilot.utils.date_parser import parse_date

ENTITY_OPTION_HELP = "Entity name or ID (defaults to the first entity)"
CURRENCY_CHOICE = click.Choice([c.value for c in Currency], case_sensitive=False)


@click.group()
def schedule_group():
    """Manage depreciation and loan schedules."""
    pass


@schedule_group.command("add-asset")
@click.argument("name", metavar="ASSET_NAME")
@click.option("--cost", required=True, help="Acquisition cost")
@click.option("--life", "life_months", type=int, required=True, help="Useful life in months")
@click.option("--in-service", "in_service", required=True, help="In-service date (YYYY-MM-DD)")
@click.option("--salvage", default="0", show_default=True, help="Salvage value")
@click.option("--currency", type=CURRENCY_CHOICE, help="Currency (defaults to the entity's)")
@click.option("--asset-account", default="Equipment", show_default=True)
@click.option("--accumulated-account", default="Accumulated Depreciation", show_default=True)
@click.option("--expense-account", default="Depreciation Expense", show_default=True)
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.pass_context
def add_asset(
    ctx,
    name: str,
    cost: str,
    life_months: int,
    in_service: str,
    salvage: str,
    currency: str | None,
    asset_account: str,
    accumulated_account: str,
    expense_account: str,
    entity: str | None,
):
    """Add a straight-line depreciation schedule.

    Examples:
        ledgerpilot schedule add-asset "Delivery Van" --cost 60000 --life 60 --in-service 2025-01-15
        ledgerpilot schedule add-asset "Laptop" --cost 4200 --life 36 --in-service today --salvage 200
    """
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = ScheduleDefinitionService(db)

    try:
        schedule = service.add_asset(
            entity_id=ent.id,
            name=name,
            in_service_date=parse_date(in_service),
            cost=parse_amount(cost),
            useful_life_months=life_months,
            salvage_value=parse_amount(salvage),
            currency=Currency(currency.upper()) if currency else None,
            asset_account=asset_account,
            accumulated_depreciation_account=accumulated_account,
            depreciation_expense_account=expense_account,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added asset schedule '{schedule.name}' (ID: {schedule.id})")


@schedule_group.command("add-liability")
@click.argument("name", metavar="LOAN_NAME")
@click.option("--principal", required=True, help="Loan principal")
@click.option("--rate", required=True, help="Annual interest rate (0.06 or 6%)")
@click.option("--term", "term_months", type=int, required=True, help="Term in months")
@click.option("--start", "start", required=True, help="Start date (YYYY-MM-DD)")
@click.option("--currency", type=CURRENCY_CHOICE, help="Currency (defaults to the entity's)")
@click.option("--liability-account", default="Loan Payable", show_default=True)
@click.option("--interest-account", default="Interest Expense", show_default=True)
@click.option("--cash-account", default="Cash", show_default=True)
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.pass_context
def add_liability(
    ctx,
    name: str,
    principal: str,
    rate: str,
    term_months: int,
    start: str,
    currency: str | None,
    liability_account: str,
    interest_account: str,
    cash_account: str,
    entity: str | None,
):
    """Add a loan repaid in equal principal instalments plus interest.

    Interest each month is simple interest on the balance outstanding at
    the start of that month.

    Examples:
        ledgerpilot schedule add-liability "Bank Loan" --principal 120000 --rate 6% --term 24 --start 2025-01-01
    """
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = ScheduleDefinitionService(db)

    try:
        schedule = service.add_liability(
            entity_id=ent.id,
            name=name,
            start_date=parse_date(start),
            principal=parse_amount(principal),
            annual_rate=parse_rate(rate),
            term_months=term_months,
            currency=Currency(currency.upper()) if currency else None,
            liability_account=liability_account,
            interest_expense_account=interest_account,
            cash_account=cash_account,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added liability schedule '{schedule.name}' (ID: {schedule.id})")


@schedule_group.command("list")
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.pass_context
def list_schedules(ctx, entity: str | None):
    """List asset and liability schedules of an entity."""
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = ScheduleDefinitionService(db)

    assets = service.list_assets(ent.id)
    liabilities = service.list_liabilities(ent.id)
    if not assets and not liabilities:
        click.echo("No schedules found.")
        return

    if assets:
        click.echo("\nAssets:")
        click.echo("-" * 96)
        for asset in assets:
            click.echo(
                f"{asset.id[:8]} | {asset.name:24s} | {asset.currency.value} {asset.cost:>12,.2f} | "
                f"salvage {asset.salvage_value:,.2f} | {asset.useful_life_months} months from "
                f"{asset.in_service_date.isoformat()}"
            )

    if liabilities:
        click.echo("\nLiabilities:")
        click.echo("-" * 96)
        for loan in liabilities:
            click.echo(
                f"{loan.id[:8]} | {loan.name:24s} | {loan.currency.value} {loan.principal:>12,.2f} | "
                f"{loan.annual_rate * 100:.2f}% | {loan.term_months} months from "
                f"{loan.start_date.isoformat()}"
            )


@schedule_group.command("delete")
@click.argument("schedule_id", metavar="SCHEDULE_ID")
@click.pass_context
def delete_schedule(ctx, schedule_id: str) -> None:
    """Delete a schedule by ID or by the prefix shown in 'schedule list'.

    Entries already posted from the schedule stay in the journal.
    """
    service = ScheduleDefinitionService(ctx.obj["db"])
    known = [s.id for s in service.list_assets()] + [s.id for s in service.list_liabilities()]
    matches = [sid for sid in known if sid == schedule_id] or [
        sid for sid in known if sid.startswith(schedule_id)
    ]
    if len(matches) != 1:
        problem = "not found" if not matches else "is ambiguous"
        click.echo(f"Error: Schedule '{schedule_id}' {problem}", err=True)
        ctx.exit(1)

    if not click.confirm(f"Are you sure you want to delete schedule {matches[0][:8]}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_schedule(matches[0])
        click.echo(f"Deleted schedule {matches[0][:8]}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@schedule_group.command("preview")
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.option("--period", help=PERIOD_HELP)
@click.pass_context
def preview(ctx, entity: str | None, period: str | None):
    """Show what each schedule posts in a month."""
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    resolved_period = resolve_cli_period(ctx, period)

    try:
        depreciation, loans = ScheduleDefinitionService(db).preview(ent.id, resolved_period)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not depreciation and not loans:
        click.echo(f"Nothing scheduled for {resolved_period}.")
        return

    click.echo(f"\nSchedules of '{ent.name}' for {resolved_period}:")
    click.echo("=" * 80)
    for row in depreciation:
        click.echo(f"Depreciation | {row.name:24s} | {row.monthly_depreciation:>12,.2f}")
    for row in loans:
        click.echo(
            f"Loan         | {row.name:24s} | principal {row.principal_payment:,.2f} + "
            f"interest {row.interest_payment:,.2f} = {row.total_payment:,.2f}"
        )


@schedule_group.command("post")
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.option("--period", help=PERIOD_HELP)
@click.pass_context
def post_schedules(ctx, entity: str | None, period: str | None):
    """Save the month's scheduled entries to the journal.

    Entries that were already saved for the month are skipped, so running
    this twice posts nothing the second time.
    """
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    resolved_period = resolve_cli_period(ctx, period)
    service = JournalService(db)

    pending = service.scheduled_entries(ent.id, resolved_period)
    if not pending:
        click.echo(f"No pending scheduled entries for {resolved_period}.")
        return

    for entry in pending:
        echo_entry(entry, show_id=False)
    try:
        saved_ids = service.materialize_schedules(ent.id, resolved_period)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Posted {len(saved_ids)} scheduled entr{'y' if len(saved_ids) == 1 else 'ies'}.")


def register_commands(cli):
    """Register schedule commands with main CLI."""
    cli.add_command(schedule_group, name="schedule")
