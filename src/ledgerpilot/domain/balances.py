"""Balance calculator.

Balances are signed: positive is a net debit, negative a net credit. The
opening map holds the chart's stated opening balances; the closing map adds
every supplied entry on top.
"""

from decimal import Decimal
from typing import Iterable

from ledgerpilot.domain.entities import (
    Account,
    BalanceSet,
    FormattedBalance,
    JournalEntry,
    JournalLine,
)
from ledgerpilot.utils.amount_parser import ZERO, round_money, to_decimal
from ledgerpilot.utils.date_parser import period_bounds

BALANCE_EPSILON = Decimal("0.01")
DISPLAY_EPSILON = Decimal("0.005")


def sum_debits(lines: Iterable[JournalLine]) -> Decimal:
    return round_money(sum((to_decimal(ln.debit) for ln in lines), ZERO))


def sum_credits(lines: Iterable[JournalLine]) -> Decimal:
    return round_money(sum((to_decimal(ln.credit) for ln in lines), ZERO))


def is_balanced(entry: JournalEntry, epsilon: Decimal = BALANCE_EPSILON) -> bool:
    """True if the entry's debits and credits agree within ``epsilon``."""
    return abs(sum_debits(entry.lines) - sum_credits(entry.lines)) <= epsilon


def compute_balances(
    accounts: Iterable[Account], entries: Iterable[JournalEntry]
) -> BalanceSet:
    """Compute opening and closing balances per account name.

    Account names that appear only in entries get an implicit zero opening
    balance in both maps. Neither input is modified, and the order of the
    entries has no effect on the result.

    Args:
        accounts: Chart of accounts with opening balances
        entries: Journal entries to apply

    Returns:
        BalanceSet with signed opening and closing maps
    """
    opening: dict[str, Decimal] = {}
    for account in accounts:
        opening[account.name] = round_money(account.opening_balance)

    closing = dict(opening)
    for entry in entries:
        for ln in entry.lines:
            if ln.account not in opening:
                opening[ln.account] = ZERO
                closing[ln.account] = ZERO
            closing[ln.account] += to_decimal(ln.debit) - to_decimal(ln.credit)

    closing = {name: round_money(value) for name, value in closing.items()}
    return BalanceSet(opening=opening, closing=closing)


def format_balance(value) -> FormattedBalance:
    """Split a signed balance into a Dr/Cr label and a magnitude.

    Magnitudes below half a cent are shown as "Dr 0.00".
    """
    value = to_decimal(value)
    if abs(value) < DISPLAY_EPSILON:
        return FormattedBalance(side="Dr", amount=ZERO)
    side = "Dr" if value > 0 else "Cr"
    return FormattedBalance(side=side, amount=round_money(abs(value)))


def pretty_balance(value) -> str:
    formatted = format_balance(value)
    return f"{formatted.amount:.2f} {formatted.side}"


def entries_in_period(entries: Iterable[JournalEntry], period: str) -> list[JournalEntry]:
    """Entries dated inside the "YYYY-MM" period."""
    start, end = period_bounds(period)
    return [entry for entry in entries if start <= entry.date <= end]
