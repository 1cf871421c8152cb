"""Plain-text rendering of entries and balance tables."""

from decimal import Decimal
from typing import Mapping

import click

from ledgerpilot.domain.balances import pretty_balance
from ledgerpilot.domain.entities import JournalEntry


def echo_entry(entry: JournalEntry, show_id: bool = True) -> None:
    """Print one entry with its lines, debits first column, credits second."""
    header = f"{entry.date.isoformat()}  {entry.currency.value}  {entry.memo}"
    if show_id:
        header = f"[{entry.id[:8]}] {header}"
    click.echo(header)
    for line in entry.lines:
        if line.debit > 0:
            click.echo(f"    Dr {line.account:<32s} {line.debit:>14,.2f}")
        if line.credit > 0:
            click.echo(f"        Cr {line.account:<28s} {'':>14s} {line.credit:>14,.2f}")


def echo_balance_table(
    opening: Mapping[str, Decimal], closing: Mapping[str, Decimal], title: str
) -> None:
    """Print an account / opening / closing table."""
    click.echo(f"\n{title}")
    click.echo("-" * 72)
    click.echo(f"{'Account':<36s} {'Opening':>16s} {'Closing':>16s}")
    click.echo("-" * 72)
    for name in closing:
        click.echo(
            f"{name:<36s} {pretty_balance(opening.get(name, 0)):>16s} "
            f"{pretty_balance(closing[name]):>16s}"
        )
    click.echo("-" * 72)
    debits = sum((value for value in closing.values() if value > 0), Decimal("0"))
    credits = -sum((value for value in closing.values() if value < 0), Decimal("0"))
    click.echo(f"Closing totals: Dr {debits:,.2f} / Cr {credits:,.2f}")
