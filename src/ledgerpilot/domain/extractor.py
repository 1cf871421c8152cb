"""Text event extractor.

Turns a block of free text ("On 25/12/25 I borrowed 1000 from a friend, then
spent 200 on fuel") into ParsedEvent records, one per clause that names both
an action and an amount.
"""

from dataclasses import dataclass
from datetime import date
from functools import reduce
from typing import Optional
import re

import structlog

from ledgerpilot.domain.entities import ActionKind, Currency, ParsedEvent
from ledgerpilot.utils.amount_parser import find_amount_in_text
from ledgerpilot.utils.date_parser import find_date_in_text, scrub_dates

logger = structlog.get_logger(__name__)

SENTENCE_SPLIT_RE = re.compile(r"(?:[.!?](?=\s|$)|[;\n])+")
CONNECTIVE_SPLIT_RE = re.compile(r"\b(?:and then|then|also)\b", re.IGNORECASE)

CURRENCY_PATTERNS = (
    (Currency.AED, re.compile(r"\b(?:aed|dh|dhs|dirham|dirhams)\b", re.IGNORECASE)),
    (Currency.USD, re.compile(r"\b(?:usd|dollar|dollars)\b|\$", re.IGNORECASE)),
    (Currency.EUR, re.compile(r"\b(?:eur|euro|euros)\b|€", re.IGNORECASE)),
)

# Checked in order; "lend" before "borrow" so "loaned" is not read as a borrowing.
ACTION_PATTERNS = (
    (ActionKind.LEND, re.compile(r"\b(?:lend|lends|lending|lent|loaned)\b", re.IGNORECASE)),
    (ActionKind.BORROW, re.compile(r"\b(?:borrow|borrows|borrowing|borrowed)\b", re.IGNORECASE)),
    (
        ActionKind.BUY,
        re.compile(
            r"\b(?:buy|buys|buying|bought|purchase|purchases|purchasing|purchased)\b",
            re.IGNORECASE,
        ),
    ),
    (ActionKind.SELL, re.compile(r"\b(?:sell|sells|selling|sold)\b", re.IGNORECASE)),
    (
        ActionKind.SPEND,
        re.compile(r"\b(?:spend|spends|spending|spent|pay|pays|paying|paid)\b", re.IGNORECASE),
    ),
)

_PARTY_STOP = r"(?=\s+(?:on|for|at|in|with|and|worth|of)\b|\s*[\d,.;\n]|\s*$)"
TO_PARTY_RE = re.compile(rf"\bto\s+([a-z][a-z' &-]*?){_PARTY_STOP}", re.IGNORECASE)
FROM_PARTY_RE = re.compile(rf"\bfrom\s+([a-z][a-z' &-]*?){_PARTY_STOP}", re.IGNORECASE)
FRIEND_RE = re.compile(r"\b(?:a|my)\s+friend\b", re.IGNORECASE)

ITEM_RE = re.compile(
    r"\b(?:buy|buys|buying|bought|purchase|purchased|sell|sells|selling|sold)\b\s+(.+?)\s+\bfor\b",
    re.IGNORECASE,
)
HINT_PATTERNS = (
    re.compile(r"\bon\s+([^,.;\n]+)$", re.IGNORECASE),
    re.compile(r"\bfor\s+([^,.;\n]+)$", re.IGNORECASE),
    re.compile(r"\bof\s+([^,.;\n]+)$", re.IGNORECASE),
)
DANGLING_PREPOSITION_RE = re.compile(r"\s*\b(?:on|in|at|of|for)\s*$", re.IGNORECASE)
HAS_LETTER_RE = re.compile(r"[a-z]", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractionContext:
    """Date and currency carried forward from earlier clauses."""

    date: Optional[date] = None
    currency: Optional[Currency] = None


def split_clauses(text: str) -> list[str]:
    """Split text on sentence terminators and connective words."""
    clauses = []
    for sentence in SENTENCE_SPLIT_RE.split(text):
        for clause in CONNECTIVE_SPLIT_RE.split(sentence):
            clause = clause.strip(" \t,")
            if clause:
                clauses.append(clause)
    return clauses


def parse_currency(text: str) -> Optional[Currency]:
    for currency, pattern in CURRENCY_PATTERNS:
        if pattern.search(text):
            return currency
    return None


def parse_action(text: str) -> Optional[ActionKind]:
    for action, pattern in ACTION_PATTERNS:
        if pattern.search(text):
            return action
    return None


def parse_counterparty(text: str, action: ActionKind) -> Optional[str]:
    """Who the money went to (lend/sell) or came from (borrow/buy)."""
    match = None
    if action in (ActionKind.LEND, ActionKind.SELL):
        match = TO_PARTY_RE.search(text)
    elif action in (ActionKind.BORROW, ActionKind.BUY):
        match = FROM_PARTY_RE.search(text)

    if match:
        party = match.group(1).strip()
        if FRIEND_RE.fullmatch(party):
            return "Friend"
        if party:
            return party

    if FRIEND_RE.search(text):
        return "Friend"
    return None


def parse_item(text: str, action: ActionKind) -> Optional[str]:
    if action not in (ActionKind.BUY, ActionKind.SELL):
        return None
    match = ITEM_RE.search(text)
    if match:
        return match.group(1).strip()
    return None


def parse_category_hint(scrubbed: str, action: ActionKind) -> Optional[str]:
    """Trailing "on ..."/"for ..."/"of ..." phrase of a buy or spend clause.

    The hint only suggests an account; the synthesizer decides whether the
    chart has anything that matches it.
    """
    if action not in (ActionKind.BUY, ActionKind.SPEND):
        return None

    text = DANGLING_PREPOSITION_RE.sub("", scrubbed.strip())
    for pattern in HINT_PATTERNS:
        match = pattern.search(text)
        if match:
            hint = match.group(1).strip()
            if HAS_LETTER_RE.search(hint):
                return hint
    return None


def parse_clause(
    clause: str, context: ExtractionContext, today: date
) -> tuple[Optional[ParsedEvent], ExtractionContext]:
    """Parse one clause, returning its event (if any) and the updated context."""
    clause_date = find_date_in_text(clause, today)
    clause_currency = parse_currency(clause)
    context = ExtractionContext(
        date=clause_date or context.date,
        currency=clause_currency or context.currency,
    )

    action = parse_action(clause)
    scrubbed = scrub_dates(clause, today)
    amount = find_amount_in_text(scrubbed)
    if action is None or amount is None:
        logger.debug("clause_skipped", clause=clause, action=action, amount=amount)
        return None, context

    event = ParsedEvent(
        action=action,
        amount=amount,
        raw=clause,
        date=context.date,
        currency=context.currency,
        counterparty=parse_counterparty(clause, action),
        item=parse_item(clause, action),
        category_hint=parse_category_hint(scrubbed, action),
    )
    return event, context


def extract_events(text: str, today: Optional[date] = None) -> list[ParsedEvent]:
    """Extract business events from free text.

    The text is split into clauses; the most recent explicit date and
    currency are carried forward into clauses that state neither. The carry
    starts from the first date and currency found anywhere in the text. When
    no clause yields an event the whole text is tried once as a single clause.

    Args:
        text: Free text, any length
        today: Reference date for year inference (defaults to date.today())

    Returns:
        Events in the order their clauses appear
    """
    raw = text.strip()
    if not raw:
        return []
    today = today or date.today()

    seed = ExtractionContext(date=find_date_in_text(raw, today), currency=parse_currency(raw))

    def step(acc, clause):
        events, context = acc
        event, context = parse_clause(clause, context, today)
        if event is not None:
            events = events + [event]
        return events, context

    events, _ = reduce(step, split_clauses(raw), ([], seed))

    if not events:
        event, _ = parse_clause(raw, seed, today)
        if event is not None:
            events = [event]

    logger.debug("events_extracted", count=len(events))
    return events
