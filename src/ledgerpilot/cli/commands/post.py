"""Post free-text business events to the ledger."""

import click
from ledgerpilot.cli.account_resolution import resolve_entity_or_exit
from ledgerpilot.cli.error_handling import handle_domain_error
from ledgerpilot.cli.formatting import echo_entry
from ledgerpilot.domain.entities import ComposerDefaults, Currency
from ledgerpilot.domain.entity import EntityService
from ledgerpilot.domain.journal import JournalService
from ledgerpilot.utils.amount_parser import parse_rate
from ledgerpilot.utils.date_parser import parse_date


@click.command("post")
@click.argument("text", nargs=-1, required=True)
@click.option("--entity", help="Entity name or ID (defaults to the first entity)")
@click.option("--unit", help="Business unit name to stamp on the entries")
@click.option("--dry-run", is_flag=True, help="Show the entries without saving them")
@click.option("--vat/--no-vat", default=True, show_default=True, help="Split VAT on buy/sell")
@click.option("--vat-rate", default="0.05", show_default=True, help="VAT rate (0.05 or 5%)")
@click.option("--vat-exclusive", is_flag=True, help="Amounts exclude VAT (VAT is added on top)")
@click.option("--ar-ap", is_flag=True, help="Settle buy/sell/spend on account instead of cash")
@click.option(
    "--currency",
    type=click.Choice([c.value for c in Currency], case_sensitive=False),
    help="Currency for text that names none (defaults to the entity's base currency)",
)
@click.option("--expense-account", help="Default expense account for unmatched debits")
@click.option("--today", "today_str", help="Reference date for undated text and year inference")
@click.option(
    "--allow-unresolved", is_flag=True, help="Save even if some accounts are not in the chart"
)
@click.pass_context
def post(
    ctx,
    text: tuple[str, ...],
    entity: str | None,
    unit: str | None,
    dry_run: bool,
    vat: bool,
    vat_rate: str,
    vat_exclusive: bool,
    ar_ap: bool,
    currency: str | None,
    expense_account: str | None,
    today_str: str | None,
    allow_unresolved: bool,
):
    """Turn a free-text description into balanced journal entries.

    Each sentence or clause naming an action (borrow, lend, buy, sell,
    spend/pay) and an amount becomes one entry. Dates and currencies carry
    over to later clauses that do not state their own.

    Examples:
        ledgerpilot post "On 25/12/25 I borrowed 1000 from a friend"
        ledgerpilot post "Bought a laptop for 4200 AED then paid 150 for fuel" --dry-run
        ledgerpilot post "Sold consulting services to Acme for 10,000" --ar-ap
    """
    db = ctx.obj["db"]
    entity_service = EntityService(db)
    journal_service = JournalService(db)
    ent = resolve_entity_or_exit(ctx, entity_service, entity)

    today = None
    if today_str is not None:
        try:
            today = parse_date(today_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    try:
        rate = parse_rate(vat_rate)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    business_unit_id = None
    if unit is not None:
        matches = [bu for bu in ent.business_units if bu.name.lower() == unit.strip().lower()]
        if not matches:
            click.echo(f"Error: Business unit '{unit}' not found in '{ent.name}'", err=True)
            ctx.exit(1)
        business_unit_id = matches[0].id

    defaults = ComposerDefaults(
        currency=Currency(currency.upper()) if currency else ent.base_currency,
        vat_enabled=vat,
        vat_rate=rate,
        vat_inclusive=not vat_exclusive,
        use_ar_ap=ar_ap,
        default_expense_account=expense_account or ComposerDefaults.default_expense_account,
    )

    try:
        result = journal_service.compose_preview(
            " ".join(text),
            ent.id,
            defaults=defaults,
            business_unit_id=business_unit_id,
            today=today,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not result.entries:
        click.echo("No business events recognized in the text.")
        return

    click.echo(f"\n{len(result.entries)} entr{'y' if len(result.entries) == 1 else 'ies'} for '{ent.name}':")
    click.echo("=" * 80)
    for entry in result.entries:
        echo_entry(entry, show_id=False)
        click.echo("")

    if result.unresolved:
        click.echo(
            "Warning: accounts not in the chart: " + ", ".join(result.unresolved), err=True
        )
        if not dry_run and not allow_unresolved:
            click.echo(
                "Error: Create the accounts first or re-run with --allow-unresolved", err=True
            )
            ctx.exit(1)

    if dry_run:
        click.echo("Dry run: nothing saved.")
        return

    try:
        saved_ids = journal_service.save_entries(result.entries)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Saved {len(saved_ids)} entr{'y' if len(saved_ids) == 1 else 'ies'}.")


def register_commands(cli):
    """Register post command with main CLI."""
    cli.add_command(post)
