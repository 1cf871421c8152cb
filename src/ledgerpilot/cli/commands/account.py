"""Account (chart of accounts) management commands."""

import click
from ledgerpilot.cli.account_resolution import resolve_account_or_exit, resolve_entity_or_exit
from ledgerpilot.cli.error_handling import handle_domain_error
from ledgerpilot.domain.account import AccountService
from ledgerpilot.domain.balances import pretty_balance
from ledgerpilot.domain.entities import NormalSide
from ledgerpilot.domain.entity import EntityService
from ledgerpilot.utils.amount_parser import parse_amount

ENTITY_OPTION_HELP = "Entity name or ID (defaults to the first entity)"


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.option(
    "--side",
    type=click.Choice([s.value for s in NormalSide], case_sensitive=False),
    default="debit",
    show_default=True,
    help="Normal side of the account",
)
@click.option("--opening", help="Opening balance (magnitude)")
@click.option("--credit", "opening_is_credit", is_flag=True, help="Opening balance is a net credit")
@click.pass_context
def create_account(
    ctx, name: str, entity: str | None, side: str, opening: str | None, opening_is_credit: bool
):
    """Create a new account in an entity's chart.

    Examples:
        ledgerpilot account create "Office Supplies"
        ledgerpilot account create "Share Capital" --side credit --opening 50000 --credit
    """
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = AccountService(db)

    try:
        opening_balance = abs(parse_amount(opening)) if opening is not None else parse_amount("0")
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)
    if opening_is_credit:
        opening_balance = -opening_balance

    try:
        account_id = service.create_account(
            entity_id=ent.id,
            name=name,
            normal_side=NormalSide(side.lower()),
            opening_balance=opening_balance,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' in '{ent.name}' (ID: {account_id})")


@account_group.command("list")
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.pass_context
def list_accounts(ctx, entity: str | None):
    """List the chart of accounts of an entity."""
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = AccountService(db)

    accounts = service.list_accounts(ent.id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo(f"\nAccounts of '{ent.name}':")
    click.echo("-" * 72)
    for acc in accounts:
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:32s} | {acc.normal_side.value:6s} | "
            f"Opening: {pretty_balance(acc.opening_balance)}"
        )


@account_group.command("set-opening")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount", metavar="AMOUNT")
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.option("--credit", "is_credit", is_flag=True, help="Amount is a net credit")
@click.pass_context
def set_opening(ctx, account: str, amount: str, entity: str | None, is_credit: bool):
    """Set the opening balance of an account.

    ACCOUNT can be an account name or ID. AMOUNT is a net debit unless
    --credit is given.

    Examples:
        ledgerpilot account set-opening Cash 10000
        ledgerpilot account set-opening "Loan Payable" 25000 --credit
    """
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = AccountService(db)
    acc = resolve_account_or_exit(ctx, service, ent.id, account)

    try:
        value = abs(parse_amount(amount))
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)
    if is_credit:
        value = -value

    try:
        service.set_opening_balance(acc.id, value)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Opening balance of '{acc.name}' set to {pretty_balance(value)}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.pass_context
def rename_account(ctx, account: str, new_name: str, entity: str | None):
    """Rename an account.

    ACCOUNT can be an account name or ID. Saved entries keep the old name.

    Examples:
        ledgerpilot account rename "Office Supplies" "Stationery"
    """
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = AccountService(db)
    acc = resolve_account_or_exit(ctx, service, ent.id, account)

    try:
        service.rename_account(acc.id, new_name)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed account '{acc.name}' to '{service.get_account(acc.id).name}'")


@account_group.command("set-side")
@click.argument("account", metavar="ACCOUNT")
@click.argument("side", type=click.Choice([s.value for s in NormalSide], case_sensitive=False))
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.pass_context
def set_side(ctx, account: str, side: str, entity: str | None):
    """Set the normal side of an account.

    Examples:
        ledgerpilot account set-side "Share Capital" credit
    """
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = AccountService(db)
    acc = resolve_account_or_exit(ctx, service, ent.id, account)

    try:
        service.set_normal_side(acc.id, NormalSide(side.lower()))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Normal side of '{acc.name}' set to {side.lower()}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--entity", help=ENTITY_OPTION_HELP)
@click.pass_context
def delete_account(ctx, account: str, entity: str | None) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    Journal entries and schedules that name the account are kept.

    Examples:
        ledgerpilot account delete "Office Supplies"
        ledgerpilot account delete 14
    """
    db = ctx.obj["db"]
    ent = resolve_entity_or_exit(ctx, EntityService(db), entity)
    service = AccountService(db)
    acc = resolve_account_or_exit(ctx, service, ent.id, account)

    # Confirm deletion
    if not click.confirm(f"Are you sure you want to delete account '{acc.name}' (ID: {acc.id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(acc.id)
        click.echo(f"Deleted account '{acc.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
