"""Entity management commands."""

import click
from decimal import Decimal, InvalidOperation
from ledgerpilot.cli.account_resolution import resolve_entity_or_exit
from ledgerpilot.cli.error_handling import handle_domain_error
from ledgerpilot.domain.entities import ConsolidationMethod, Currency
from ledgerpilot.domain.entity import EntityService

CURRENCY_CHOICE = click.Choice([c.value for c in Currency], case_sensitive=False)
METHOD_CHOICE = click.Choice([m.value for m in ConsolidationMethod], case_sensitive=False)


@click.group()
def entity_group():
    """Manage legal entities."""
    pass


@entity_group.command("create")
@click.argument("name", metavar="ENTITY_NAME")
@click.option("--currency", type=CURRENCY_CHOICE, default="AED", show_default=True, help="Base currency")
@click.option("--no-chart", is_flag=True, help="Do not seed the default chart of accounts")
@click.pass_context
def create_entity(ctx, name: str, currency: str, no_chart: bool):
    """Create a new entity with the default chart of accounts.

    Examples:
        ledgerpilot entity create "Holding LLC"
        ledgerpilot entity create "Europe GmbH" --currency EUR
    """
    service = EntityService(ctx.obj["db"])
    try:
        entity = service.create_entity(
            name=name, base_currency=Currency(currency.upper()), seed_chart=not no_chart
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created entity '{entity.name}' (ID: {entity.id})")
    if not no_chart:
        click.echo("Seeded default chart of accounts")


@entity_group.command("list")
@click.pass_context
def list_entities(ctx):
    """List all entities."""
    service = EntityService(ctx.obj["db"])

    entities = service.list_entities()
    if not entities:
        click.echo("No entities found.")
        return

    click.echo("\nEntities:")
    click.echo("-" * 96)
    for ent in entities:
        units = ", ".join(unit.name for unit in ent.business_units) or "-"
        click.echo(
            f"{ent.id[:8]} | {ent.name:24s} | {ent.base_currency.value} | "
            f"{ent.policy.method.value:6s} {ent.policy.ownership_pct:>6.2f}% | Units: {units}"
        )


@entity_group.command("policy")
@click.argument("entity", metavar="ENTITY")
@click.option("--ownership", help="Ownership percentage (0-100)")
@click.option("--method", type=METHOD_CHOICE, help="Consolidation method")
@click.option("--functional-currency", type=CURRENCY_CHOICE, help="Functional currency")
@click.option(
    "--intercompany/--no-intercompany", default=None, help="Enable or disable intercompany eliminations"
)
@click.option("--ar-account", help="Intercompany receivable account name")
@click.option("--ap-account", help="Intercompany payable account name")
@click.option("--loan-receivable-account", help="Intercompany loan receivable account name")
@click.option("--loan-payable-account", help="Intercompany loan payable account name")
@click.pass_context
def update_policy(
    ctx,
    entity: str,
    ownership: str | None,
    method: str | None,
    functional_currency: str | None,
    intercompany: bool | None,
    ar_account: str | None,
    ap_account: str | None,
    loan_receivable_account: str | None,
    loan_payable_account: str | None,
):
    """Show or change the consolidation policy of an entity.

    ENTITY can be an entity name or ID. Without options the current policy
    is shown.

    Examples:
        ledgerpilot entity policy "Sub Co" --ownership 80 --method full
        ledgerpilot entity policy "Associate" --method equity
        ledgerpilot entity policy "Holding LLC" --no-intercompany
    """
    service = EntityService(ctx.obj["db"])
    ent = resolve_entity_or_exit(ctx, service, entity)

    ownership_pct = None
    if ownership is not None:
        try:
            ownership_pct = Decimal(ownership.strip().rstrip("%"))
        except InvalidOperation:
            click.echo(f"Error: Invalid ownership percentage: '{ownership}'", err=True)
            ctx.exit(1)

    try:
        ent = service.update_policy(
            ent.id,
            ownership_pct=ownership_pct,
            method=ConsolidationMethod(method.lower()) if method else None,
            functional_currency=Currency(functional_currency.upper()) if functional_currency else None,
            intercompany_enabled=intercompany,
            ar_account=ar_account,
            ap_account=ap_account,
            loan_receivable_account=loan_receivable_account,
            loan_payable_account=loan_payable_account,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    policy = ent.policy
    ic = policy.intercompany
    click.echo(f"Policy of '{ent.name}':")
    click.echo(f"  Ownership: {policy.ownership_pct:.2f}%")
    click.echo(f"  Method: {policy.method.value}")
    click.echo(f"  Functional currency: {policy.functional_currency.value}")
    click.echo(f"  Intercompany eliminations: {'enabled' if ic.enabled else 'disabled'}")
    click.echo(f"    A/R vs A/P: {ic.ar_account} / {ic.ap_account}")
    click.echo(f"    Loans: {ic.loan_receivable_account} / {ic.loan_payable_account}")


@entity_group.command("add-unit")
@click.argument("entity", metavar="ENTITY")
@click.argument("name", metavar="UNIT_NAME")
@click.pass_context
def add_unit(ctx, entity: str, name: str):
    """Add a business unit to an entity.

    Examples:
        ledgerpilot entity add-unit "Holding LLC" "Dubai Branch"
    """
    service = EntityService(ctx.obj["db"])
    ent = resolve_entity_or_exit(ctx, service, entity)
    try:
        unit_id = service.add_business_unit(ent.id, name)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Added business unit '{name}' to '{ent.name}' (ID: {unit_id})")


def register_commands(cli):
    """Register entity commands with main CLI."""
    cli.add_command(entity_group, name="entity")
