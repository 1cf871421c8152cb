"""CLI helpers for resolving entities and accounts given by name or ID."""

from __future__ import annotations

import click
from ledgerpilot.cli.error_handling import handle_domain_error
from ledgerpilot.domain.account import AccountService
from ledgerpilot.domain.entities import Account, Entity
from ledgerpilot.domain.entity import EntityService
from ledgerpilot.utils.account_resolver import resolve_account


def resolve_entity_or_exit(
    ctx: click.Context, entity_service: EntityService, entity: str | None
) -> Entity:
    """Resolve an entity name or ID (default entity when None), or exit with a CLI error."""
    try:
        return entity_service.resolve_entity(entity)
    except ValueError as exc:
        handle_domain_error(ctx, exc)


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, entity_id: str, account: str | int
) -> Account:
    """Resolve account name or ID within an entity's chart, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, entity_id, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
