"""Journal viewing, editing and deletion commands."""

from decimal import Decimal

import click
from ledgerpilot.cli.account_resolution import resolve_account_or_exit, resolve_entity_or_exit
from ledgerpilot.cli.error_handling import handle_domain_error
from ledgerpilot.cli.formatting import echo_entry
from ledgerpilot.cli.period_options import PERIOD_HELP, resolve_cli_period
from ledgerpilot.domain.account import AccountService
from ledgerpilot.domain.entities import Currency, JournalLine
from ledgerpilot.domain.entity import EntityService
from ledgerpilot.domain.journal import JournalService
from ledgerpilot.utils.amount_parser import parse_amount
from ledgerpilot.utils.date_parser import parse_date


@click.group()
def journal_group():
    """View, edit and delete saved journal entries."""
    pass


@journal_group.command("list")
@click.option("--entity", help="Entity name or ID (defaults to the first entity)")
@click.option("--period", help=PERIOD_HELP)
@click.option("--all", "show_all", is_flag=True, help="Show every period")
@click.pass_context
def list_entries(ctx, entity: str | None, period: str | None, show_all: bool):
    """List saved entries of an entity, for the current month by default."""
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = JournalService(db)

    resolved_period = None if show_all else resolve_cli_period(ctx, period)
    entries = service.list_entries(entity_id=ent.id, period=resolved_period)
    if not entries:
        click.echo("No journal entries found.")
        return

    scope = "all periods" if resolved_period is None else resolved_period
    click.echo(f"\nJournal of '{ent.name}' ({scope}): {len(entries)} entr{'y' if len(entries) == 1 else 'ies'}")
    click.echo("=" * 80)
    for entry in entries:
        echo_entry(entry)
        click.echo("")


@journal_group.command("edit")
@click.argument("entry_id", metavar="ENTRY_ID")
@click.option("--date", "date_str", help="New date (YYYY-MM-DD or relative like 'today')")
@click.option(
    "--currency",
    type=click.Choice([c.value for c in Currency], case_sensitive=False),
    help="New currency",
)
@click.option("--memo", help="New memo")
@click.option(
    "--line",
    "line_options",
    multiple=True,
    help="Replacement line as ACCOUNT:DEBIT:CREDIT (repeat for each line)",
)
@click.pass_context
def edit_entry(
    ctx,
    entry_id: str,
    date_str: str | None,
    currency: str | None,
    memo: str | None,
    line_options: tuple[str, ...],
) -> None:
    """Edit a saved entry.

    Changes only the fields that are given. Passing --line replaces all of
    the entry's lines, and the result must still balance.

    Examples:
        ledgerpilot journal edit 3f2a9c1b --memo "Printer paper"
        ledgerpilot journal edit 3f2a9c1b --line "Office Supplies:300:" --line "Cash::300"
    """
    db = ctx.obj["db"]
    service = JournalService(db)
    try:
        entry = service.find_entry(entry_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    new_date = None
    if date_str is not None:
        try:
            new_date = parse_date(date_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    lines = None
    if line_options:
        account_service = AccountService(db)
        lines = []
        for raw_line in line_options:
            parts = raw_line.rsplit(":", 2)
            if len(parts) != 3:
                click.echo(f"Error: Invalid line '{raw_line}', expected ACCOUNT:DEBIT:CREDIT", err=True)
                ctx.exit(1)
            account, debit, credit = parts
            acc = resolve_account_or_exit(ctx, account_service, entry.entity_id, account.strip())
            try:
                lines.append(
                    JournalLine(
                        acc.name,
                        parse_amount(debit) if debit.strip() else Decimal("0"),
                        parse_amount(credit) if credit.strip() else Decimal("0"),
                    )
                )
            except ValueError as e:
                click.echo(f"Error: Invalid amount format: {e}", err=True)
                ctx.exit(1)

    try:
        updated = service.update_entry(
            entry.id,
            date=new_date,
            currency=Currency(currency.upper()) if currency else None,
            memo=memo,
            lines=lines,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated entry {entry.id[:8]}")
    echo_entry(updated)


@journal_group.command("delete")
@click.argument("entry_id", metavar="ENTRY_ID")
@click.pass_context
def delete_entry(ctx, entry_id: str) -> None:
    """Delete a saved entry.

    ENTRY_ID can be the full ID or the 8-character prefix shown by
    'journal list'.

    Examples:
        ledgerpilot journal delete 3f2a9c1b
    """
    service = JournalService(ctx.obj["db"])
    try:
        entry = service.find_entry(entry_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    echo_entry(entry)
    if not click.confirm("Are you sure you want to delete this entry?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_entry(entry.id)
        click.echo(f"Deleted entry {entry.id[:8]}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
