"""Entry synthesizer.

Every action kind has a fixed debit/credit shape. The synthesizer fills the
shape with amounts (splitting VAT where it applies), maps account names onto
the entity's chart through the account resolver and refuses to emit anything
that does not balance.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence
import uuid

import structlog

from ledgerpilot.domain.balances import BALANCE_EPSILON, sum_credits, sum_debits
from ledgerpilot.domain.entities import (
    ActionKind,
    ComposeResult,
    ComposerDefaults,
    Currency,
    EntrySource,
    JournalEntry,
    JournalLine,
    ParsedEvent,
)
from ledgerpilot.domain.extractor import extract_events, parse_currency
from ledgerpilot.utils.account_resolver import resolve_account_name, resolve_line_account
from ledgerpilot.utils.amount_parser import ZERO, round_money, to_decimal
from ledgerpilot.utils.date_parser import find_date_in_text

logger = structlog.get_logger(__name__)

CASH = "Cash"
LOAN_PAYABLE = "Loan Payable"
LOAN_RECEIVABLE = "Loan Receivable"
ACCOUNTS_PAYABLE = "Accounts Payable"
ACCOUNTS_RECEIVABLE = "Accounts Receivable"
REVENUE = "Revenue"
INPUT_VAT = "Input VAT"
OUTPUT_VAT = "Output VAT"

ENTRY_NAMESPACE = uuid.UUID("6f1c2b3a-8d4e-4f5a-9b6c-7d8e9f0a1b2c")


@dataclass(frozen=True)
class VatSplit:
    base: Decimal
    vat: Decimal
    total: Decimal


@dataclass(frozen=True)
class PostingContext:
    """Running date and currency applied to events that state neither."""

    date: date
    currency: Currency


def split_vat(amount, rate, inclusive: bool) -> VatSplit:
    """Split an amount into base and VAT.

    Inclusive amounts already contain the tax (base = A / (1 + r)); exclusive
    amounts get it added on top (total = A + A * r). Values are rounded to
    cents as they are computed.
    """
    amount = to_decimal(amount)
    rate = to_decimal(rate)
    if rate <= 0:
        total = round_money(amount)
        return VatSplit(base=total, vat=ZERO, total=total)

    if inclusive:
        base = amount / (1 + rate)
        return VatSplit(
            base=round_money(base),
            vat=round_money(amount - base),
            total=round_money(amount),
        )

    vat = amount * rate
    return VatSplit(
        base=round_money(amount),
        vat=round_money(vat),
        total=round_money(amount + vat),
    )


def line(account: str, debit=ZERO, credit=ZERO) -> JournalLine:
    return JournalLine(account=account, debit=round_money(debit), credit=round_money(credit))


def build_template_lines(
    event: ParsedEvent, defaults: ComposerDefaults, category_account: Optional[str] = None
) -> list[JournalLine]:
    """Fill the fixed posting template of the event's action.

    Args:
        event: Parsed event with action and amount
        defaults: Composer settings (VAT, AR/AP mode, default expense account)
        category_account: Debit account for buy/spend; defaults to the
            default expense account

    Returns:
        Journal lines with template account names
    """
    amount = event.amount
    expense_account = category_account or defaults.default_expense_account
    settlement_payable = ACCOUNTS_PAYABLE if defaults.use_ar_ap else CASH
    settlement_receivable = ACCOUNTS_RECEIVABLE if defaults.use_ar_ap else CASH

    vat_rate = ZERO
    if event.action in (ActionKind.BUY, ActionKind.SELL) and defaults.vat_enabled:
        vat_rate = to_decimal(defaults.vat_rate)
    vat = split_vat(amount, vat_rate, defaults.vat_inclusive)

    if event.action == ActionKind.BORROW:
        return [line(CASH, debit=amount), line(LOAN_PAYABLE, credit=amount)]

    if event.action == ActionKind.LEND:
        return [line(LOAN_RECEIVABLE, debit=amount), line(CASH, credit=amount)]

    if event.action == ActionKind.BUY:
        lines = [line(expense_account, debit=vat.base)]
        if vat.vat > 0:
            lines.append(line(INPUT_VAT, debit=vat.vat))
        lines.append(line(settlement_payable, credit=vat.total))
        return lines

    if event.action == ActionKind.SELL:
        lines = [line(settlement_receivable, debit=vat.total), line(REVENUE, credit=vat.base)]
        if vat.vat > 0:
            lines.append(line(OUTPUT_VAT, credit=vat.vat))
        return lines

    if event.action == ActionKind.SPEND:
        return [line(expense_account, debit=amount), line(settlement_payable, credit=amount)]

    raise ValueError(f"Unknown action '{event.action}'")


def build_memo(event: ParsedEvent) -> str:
    parts = [event.action.value.upper()]
    if event.counterparty:
        parts.append(event.counterparty)
    if event.item:
        parts.append(f"({event.item})")
    parts.append(event.raw.strip())
    return " - ".join(parts)


def make_entry_id(entity_id: str, position: int, raw: str, entry_date: date) -> str:
    """Deterministic entry id so identical input always yields identical entries."""
    return str(uuid.uuid5(ENTRY_NAMESPACE, f"{entity_id}|{position}|{entry_date.isoformat()}|{raw}"))


def resolve_category_account(
    hint: Optional[str], allowed_accounts: Optional[Sequence[str]], defaults: ComposerDefaults
) -> Optional[str]:
    """Use a category hint only if it matches an account in the chart."""
    if not hint or not allowed_accounts:
        return None
    resolution = resolve_account_name(hint, allowed_accounts, defaults.similarity_threshold)
    return resolution.name


def resolve_lines(
    lines: Iterable[JournalLine],
    allowed_accounts: Sequence[str],
    defaults: ComposerDefaults,
) -> list[JournalLine]:
    """Rename each line's account to its canonical chart name where possible.

    Unmatched pure debits go to the default expense account; other unmatched
    lines keep their name and show up as unresolved.
    """
    resolved = []
    for ln in lines:
        resolution = resolve_line_account(
            ln.account,
            allowed_accounts,
            ln.debit,
            ln.credit,
            defaults.default_expense_account,
            defaults.similarity_threshold,
        )
        account = resolution.name if resolution.resolved else ln.account
        resolved.append(JournalLine(account=account, debit=ln.debit, credit=ln.credit))
    return resolved


def synthesize_entry(
    event: ParsedEvent,
    defaults: ComposerDefaults,
    context: PostingContext,
    allowed_accounts: Optional[Sequence[str]] = None,
    entity_id: str = "entity-default",
    business_unit_id: Optional[str] = None,
    entry_id: Optional[str] = None,
) -> Optional[JournalEntry]:
    """Build one balanced journal entry from an event.

    Args:
        event: Parsed event
        defaults: Composer settings
        context: Date and currency used when the event has none
        allowed_accounts: Account names of the active entity's chart; when
            given, every line is resolved against it
        entity_id: Owning entity
        business_unit_id: Optional business unit
        entry_id: Explicit id; derived from the event when omitted

    Returns:
        The entry, or None if its lines do not balance
    """
    entry_date = event.date or context.date
    currency = event.currency or context.currency

    category_account = resolve_category_account(event.category_hint, allowed_accounts, defaults)
    lines = build_template_lines(event, defaults, category_account)
    if allowed_accounts:
        lines = resolve_lines(lines, allowed_accounts, defaults)

    total_debit = sum_debits(lines)
    total_credit = sum_credits(lines)
    if abs(total_debit - total_credit) > BALANCE_EPSILON:
        logger.warning(
            "entry_dropped_unbalanced",
            raw=event.raw,
            debits=str(total_debit),
            credits=str(total_credit),
        )
        return None

    return JournalEntry(
        id=entry_id or make_entry_id(entity_id, 0, event.raw, entry_date),
        date=entry_date,
        currency=currency,
        memo=build_memo(event),
        entity_id=entity_id,
        lines=tuple(lines),
        business_unit_id=business_unit_id,
        source=EntrySource.SAVED,
    )


def find_unresolved(entries: Iterable[JournalEntry], allowed_accounts: Sequence[str]) -> list[str]:
    """Account names used by entries that are not in the chart, in first-seen order."""
    chart = set(allowed_accounts)
    unresolved: list[str] = []
    for entry in entries:
        for ln in entry.lines:
            if ln.account not in chart and ln.account not in unresolved:
                unresolved.append(ln.account)
    return unresolved


def compose_entries(
    text: str,
    defaults: Optional[ComposerDefaults] = None,
    allowed_accounts: Optional[Sequence[str]] = None,
    entity_id: str = "entity-default",
    business_unit_id: Optional[str] = None,
    today: Optional[date] = None,
) -> ComposeResult:
    """Run the whole pipeline: free text to events to balanced entries.

    The posting context starts at the first date in the text (or ``today``)
    and the first currency in the text (or the default currency), and moves
    forward with each event that states its own.

    Returns:
        ComposeResult with the events, the entries that balanced and the
        account names that could not be matched to the chart
    """
    defaults = defaults or ComposerDefaults()
    today = today or date.today()
    events = extract_events(text, today=today)

    context = PostingContext(
        date=find_date_in_text(text, today) or today,
        currency=parse_currency(text) or defaults.currency,
    )

    entries = []
    for position, event in enumerate(events):
        context = PostingContext(
            date=event.date or context.date,
            currency=event.currency or context.currency,
        )
        entry = synthesize_entry(
            event,
            defaults,
            context,
            allowed_accounts=allowed_accounts,
            entity_id=entity_id,
            business_unit_id=business_unit_id,
            entry_id=make_entry_id(entity_id, position, event.raw, context.date),
        )
        if entry is not None:
            entries.append(entry)

    unresolved = find_unresolved(entries, allowed_accounts) if allowed_accounts else []
    if unresolved:
        logger.info("compose_unresolved_accounts", accounts=unresolved)

    return ComposeResult(events=tuple(events), entries=tuple(entries), unresolved=tuple(unresolved))
