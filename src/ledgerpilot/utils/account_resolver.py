"""Resolving loose account names against a chart of accounts.

Resolution never invents an account. A candidate either maps onto an
existing name (exactly or by similarity), is rerouted to the default expense
account when it is a pure debit, or is reported back as unresolved.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Optional
import re

import structlog

from ledgerpilot.domain.errors import NotFoundError, account_name_not_found

if TYPE_CHECKING:
    from ledgerpilot.domain.account import AccountService
    from ledgerpilot.domain.entities import Account

logger = structlog.get_logger(__name__)

DEFAULT_THRESHOLD = 0.72
CONTAINMENT_SCORE = 0.92
JACCARD_WEIGHT = 0.75
EDIT_WEIGHT = 0.25
EDIT_FLOOR_WEIGHT = 0.85

STOP_WORDS = frozenset({"a", "an", "the", "of", "for", "to", "and", "in", "on"})

_DISALLOWED_RE = re.compile(r"[^a-z0-9/\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"[a-z0-9]+")


class ResolutionMethod(str, Enum):
    """How a candidate name was mapped onto the chart."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    FALLBACK = "fallback"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class AccountResolution:
    """Outcome of resolving one candidate name."""

    raw: str
    name: Optional[str]
    method: ResolutionMethod
    score: float = 0.0

    @property
    def resolved(self) -> bool:
        return self.name is not None


def normalize_account_name(name: str) -> str:
    """Lowercase, spell out '&', keep only alphanumerics, spaces and '/'."""
    text = name.lower().replace("&", " and ")
    text = _DISALLOWED_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def levenshtein(a: str, b: str) -> int:
    """Classic edit distance (insert, delete, substitute all cost 1)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def _tokens(text: str) -> set[str]:
    return {token for token in _TOKEN_RE.findall(text) if token not in STOP_WORDS}


def account_similarity(a: str, b: str) -> float:
    """Score how alike two account names are, from 0.0 to 1.0.

    Both names are normalized first. Identical names score 1.0; one name
    contained in the other as a whole-word run scores 0.92. Otherwise the
    score blends token-set Jaccard similarity (stop-words removed) with
    normalized edit similarity, and is never lower than 0.85 times the edit
    similarity alone so that short, nearly identical names still match.
    """
    left = normalize_account_name(a)
    right = normalize_account_name(b)
    if not left or not right:
        return 0.0
    if left == right:
        return 1.0
    if f" {left} " in f" {right} " or f" {right} " in f" {left} ":
        return CONTAINMENT_SCORE

    left_tokens = _tokens(left)
    right_tokens = _tokens(right)
    union = left_tokens | right_tokens
    jaccard = len(left_tokens & right_tokens) / len(union) if union else 0.0

    edit_similarity = 1 - levenshtein(left, right) / max(len(left), len(right))
    blended = JACCARD_WEIGHT * jaccard + EDIT_WEIGHT * edit_similarity
    return max(blended, EDIT_FLOOR_WEIGHT * edit_similarity)


def resolve_account_name(
    candidate: str,
    chart: Iterable[str],
    threshold: float = DEFAULT_THRESHOLD,
) -> AccountResolution:
    """Map a free-text account name onto an existing chart entry.

    Tries an exact match on normalized names first, then the single most
    similar chart name. Ties keep the earlier chart entry.

    Args:
        candidate: Raw account name as typed or extracted
        chart: Existing account names of the active entity
        threshold: Minimum similarity for a fuzzy match

    Returns:
        AccountResolution with ``name`` set, or method UNRESOLVED
    """
    names = list(chart)
    key = normalize_account_name(candidate)

    if key:
        for name in names:
            if normalize_account_name(name) == key:
                return AccountResolution(candidate, name, ResolutionMethod.EXACT, 1.0)

    best_name = None
    best_score = 0.0
    for name in names:
        score = account_similarity(candidate, name)
        if score > best_score:
            best_name, best_score = name, score

    if best_name is not None and best_score >= threshold:
        logger.debug(
            "account_fuzzy_match", candidate=candidate, account=best_name, score=round(best_score, 4)
        )
        return AccountResolution(candidate, best_name, ResolutionMethod.FUZZY, best_score)

    return AccountResolution(candidate, None, ResolutionMethod.UNRESOLVED, best_score)


def resolve_line_account(
    candidate: str,
    chart: Iterable[str],
    debit: Decimal,
    credit: Decimal,
    default_expense_account: str,
    threshold: float = DEFAULT_THRESHOLD,
) -> AccountResolution:
    """Resolve the account of a journal line, applying the fallback rule.

    A pure debit line (debit > 0, credit == 0) whose account cannot be
    matched is rerouted to ``default_expense_account``. Any other unmatched
    line stays unresolved so the caller can report it.
    """
    resolution = resolve_account_name(candidate, chart, threshold)
    if resolution.resolved:
        return resolution

    if debit > 0 and credit == 0:
        logger.debug(
            "account_fallback", candidate=candidate, account=default_expense_account
        )
        return AccountResolution(
            candidate, default_expense_account, ResolutionMethod.FALLBACK, resolution.score
        )

    logger.info("account_unresolved", candidate=candidate)
    return resolution


def resolve_account(account_service: AccountService, entity_id: str, account: str | int) -> Account:
    """Resolve an account name or ID to a stored account of an entity.

    Args:
        account_service: AccountService instance
        entity_id: Entity whose chart is searched
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account entity

    Raises:
        NotFoundError: If no account matches
    """
    accounts = account_service.list_accounts(entity_id)

    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None:
        for acc in accounts:
            if acc.id == account_id:
                return acc
        raise NotFoundError(account_name_not_found(str(account), entity_id))

    resolution = resolve_account_name(str(account), [acc.name for acc in accounts])
    if resolution.resolved:
        for acc in accounts:
            if acc.name == resolution.name:
                return acc

    raise NotFoundError(account_name_not_found(str(account), entity_id))
