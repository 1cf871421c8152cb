"""Consolidation engine.

Rolls the balances of a group of entities up into one set of totals and
removes intercompany balances that would otherwise be counted twice.
Entities using the equity method are summed like fully consolidated ones.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Sequence

import structlog

from ledgerpilot.domain.balances import compute_balances
from ledgerpilot.domain.entities import (
    Account,
    ConsolidationMethod,
    ConsolidationResult,
    EliminationRecord,
    Entity,
    EntityBalances,
    IntercompanyPolicy,
    JournalEntry,
)
from ledgerpilot.utils.amount_parser import ZERO, round_money

logger = structlog.get_logger(__name__)

RECEIVABLE_PAYABLE_NOTE = "Eliminate intercompany A/R vs A/P"
LOANS_NOTE = "Eliminate intercompany loans"


def is_included(entity: Entity, group_entity_id: str) -> bool:
    """The group itself always; others unless excluded by method or 0% owned."""
    if entity.id == group_entity_id:
        return True
    return entity.policy.method != ConsolidationMethod.NONE and entity.policy.ownership_pct > 0


def _add_into(totals: dict[str, Decimal], balances: Mapping[str, Decimal]) -> None:
    for account, amount in balances.items():
        totals[account] = round_money(totals.get(account, ZERO) + amount)


def eliminate_pair(
    closing: dict[str, Decimal], first: str, second: str, note: str
) -> list[EliminationRecord]:
    """Net two intercompany accounts against each other in ``closing``.

    Only balances on opposite sides are eliminated, by the smaller of the
    two magnitudes. Returns one record per account touched.
    """
    first_balance = closing.get(first, ZERO)
    second_balance = closing.get(second, ZERO)
    if first_balance == 0 or second_balance == 0:
        return []
    if (first_balance > 0) == (second_balance > 0):
        return []

    amount = min(abs(first_balance), abs(second_balance))
    direction = -1 if first_balance > 0 else 1
    closing[first] = round_money(first_balance + direction * amount)
    closing[second] = round_money(second_balance - direction * amount)

    return [
        EliminationRecord(account=first, amount=amount, note=note),
        EliminationRecord(account=second, amount=amount, note=note),
    ]


def apply_eliminations(
    closing: dict[str, Decimal], policy: IntercompanyPolicy
) -> list[EliminationRecord]:
    if not policy.enabled:
        return []
    records = eliminate_pair(closing, policy.ar_account, policy.ap_account, RECEIVABLE_PAYABLE_NOTE)
    records += eliminate_pair(
        closing, policy.loan_receivable_account, policy.loan_payable_account, LOANS_NOTE
    )
    return records


def consolidate_group(
    entities: Sequence[Entity],
    accounts_by_entity: Mapping[str, Iterable[Account]],
    entries: Iterable[JournalEntry],
    group_entity_id: str,
) -> ConsolidationResult:
    """Consolidate the balances of a group.

    Args:
        entities: All known entities
        accounts_by_entity: Chart of accounts per entity id
        entries: Journal entries of any entity
        group_entity_id: Parent entity; its intercompany policy governs
            eliminations

    Returns:
        ConsolidationResult; empty if the group entity is unknown
    """
    group = next((entity for entity in entities if entity.id == group_entity_id), None)
    if group is None:
        logger.warning("consolidation_group_not_found", group_entity_id=group_entity_id)
        return ConsolidationResult(
            included_entity_ids=(),
            entity_balances=(),
            consolidated_opening={},
            consolidated_closing={},
            eliminations=(),
        )

    included = [entity for entity in entities if is_included(entity, group_entity_id)]
    all_entries = list(entries)

    entity_balances = []
    for entity in included:
        own_entries = [entry for entry in all_entries if entry.entity_id == entity.id]
        balances = compute_balances(accounts_by_entity.get(entity.id, ()), own_entries)
        entity_balances.append(
            EntityBalances(entity_id=entity.id, opening=balances.opening, closing=balances.closing)
        )

    opening: dict[str, Decimal] = {}
    closing: dict[str, Decimal] = {}
    for balances in entity_balances:
        _add_into(opening, balances.opening)
        _add_into(closing, balances.closing)

    eliminations = apply_eliminations(closing, group.policy.intercompany)
    logger.debug(
        "group_consolidated",
        group_entity_id=group_entity_id,
        included=len(included),
        eliminations=len(eliminations),
    )

    return ConsolidationResult(
        included_entity_ids=tuple(entity.id for entity in included),
        entity_balances=tuple(entity_balances),
        consolidated_opening=opening,
        consolidated_closing=closing,
        eliminations=tuple(eliminations),
    )
