"""CLI helpers for period resolution."""

from datetime import date

import click

from ledgerpilot.utils.date_parser import parse_period

PERIOD_HELP = "Period as YYYY-MM, or this-month, last-month, next-month"


def resolve_cli_period(ctx, period: str | None, today: date | None = None) -> str:
    """Resolve a --period option to "YYYY-MM"; the current month when omitted."""
    if period is None:
        period = "this-month"
    try:
        return parse_period(period, today=today)
    except ValueError as e:
        click.echo(f"Error: Invalid period: {e}", err=True)
        ctx.exit(1)
