"""Schedule generator.

Asset and liability schedules are standing definitions. For a given month
they produce derived journal entries (straight-line depreciation, loan
repayments) that are never stored by this module. Each derived entry carries
a marker in its memo; once an entry with the same marker has been saved to
the ledger, the derived one is suppressed so the month is not counted twice.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional
import uuid

import structlog

from ledgerpilot.domain.entities import (
    AssetSchedule,
    DepreciationPreview,
    EntrySource,
    JournalEntry,
    JournalLine,
    LiabilitySchedule,
    LoanPreview,
    ScheduleKind,
)
from ledgerpilot.utils.amount_parser import ZERO, round_money, to_decimal
from ledgerpilot.utils.date_parser import month_index, period_bounds

logger = structlog.get_logger(__name__)

SCHEDULE_NAMESPACE = uuid.UUID("0b7e4c1d-2a3f-4e5b-8c6d-9e0f1a2b3c4d")
MONTHS_PER_YEAR = 12


@dataclass(frozen=True)
class LoanInstalment:
    """Principal and interest due on a loan in one month."""

    principal: Decimal
    interest: Decimal
    total: Decimal


def schedule_marker(schedule_id: str, period: str, kind: ScheduleKind) -> str:
    """Tag identifying the entry a schedule posts for a period."""
    kind = ScheduleKind(kind)
    return f"[SCHEDULED:{kind.value}:{schedule_id}:{period}]"


def depreciation_charge(asset: AssetSchedule, period: str) -> Optional[Decimal]:
    """Straight-line charge for the period, or None outside the asset's life.

    The in-service month is month 0; the last charge falls in month N-1.
    """
    index = month_index(asset.in_service_date, period)
    if index < 0 or index >= asset.useful_life_months:
        return None

    depreciable = to_decimal(asset.cost) - to_decimal(asset.salvage_value)
    monthly = round_money(depreciable / asset.useful_life_months)
    if monthly <= 0:
        return None
    return monthly


def loan_instalment(liability: LiabilitySchedule, period: str) -> Optional[LoanInstalment]:
    """Repayment due for the period, or None outside the loan term.

    Principal is repaid in equal monthly parts. Interest is simple interest
    on the balance still outstanding at the start of the month. The
    principal part never exceeds that balance.
    """
    index = month_index(liability.start_date, period)
    if index < 0 or index >= liability.term_months:
        return None

    principal = to_decimal(liability.principal)
    per_month = round_money(principal / liability.term_months)
    remaining = max(round_money(principal - per_month * index), ZERO)
    principal_paid = round_money(min(max(per_month, ZERO), remaining))

    interest = round_money(remaining * to_decimal(liability.annual_rate) / MONTHS_PER_YEAR)
    total = round_money(principal_paid + interest)
    if total <= 0:
        return None
    return LoanInstalment(principal=principal_paid, interest=interest, total=total)


def _entry_id(marker: str) -> str:
    return str(uuid.uuid5(SCHEDULE_NAMESPACE, marker))


def build_depreciation_entry(
    asset: AssetSchedule, period: str, amount: Decimal
) -> JournalEntry:
    marker = schedule_marker(asset.id, period, ScheduleKind.DEPRECIATION)
    _, period_end = period_bounds(period)
    return JournalEntry(
        id=_entry_id(marker),
        date=period_end,
        currency=asset.currency,
        memo=f"{marker} Depreciation - {asset.name} ({period})",
        entity_id=asset.entity_id,
        business_unit_id=asset.business_unit_id,
        source=EntrySource.SCHEDULED,
        lines=(
            JournalLine(account=asset.depreciation_expense_account, debit=amount, credit=ZERO),
            JournalLine(account=asset.accumulated_depreciation_account, debit=ZERO, credit=amount),
        ),
    )


def build_loan_entry(
    liability: LiabilitySchedule, period: str, instalment: LoanInstalment
) -> JournalEntry:
    marker = schedule_marker(liability.id, period, ScheduleKind.LOAN)
    _, period_end = period_bounds(period)

    lines = []
    if instalment.interest > 0:
        lines.append(
            JournalLine(
                account=liability.interest_expense_account, debit=instalment.interest, credit=ZERO
            )
        )
    if instalment.principal > 0:
        lines.append(
            JournalLine(account=liability.liability_account, debit=instalment.principal, credit=ZERO)
        )
    lines.append(JournalLine(account=liability.cash_account, debit=ZERO, credit=instalment.total))

    return JournalEntry(
        id=_entry_id(marker),
        date=period_end,
        currency=liability.currency,
        memo=f"{marker} Loan Payment - {liability.name} ({period})",
        entity_id=liability.entity_id,
        business_unit_id=liability.business_unit_id,
        source=EntrySource.SCHEDULED,
        lines=tuple(lines),
    )


def _already_saved(marker: str, saved_entries: list[JournalEntry]) -> bool:
    return any(marker in entry.memo for entry in saved_entries)


def generate_scheduled_entries(
    period: str,
    entity_id: str,
    saved_entries: Iterable[JournalEntry],
    assets: Iterable[AssetSchedule],
    liabilities: Iterable[LiabilitySchedule],
) -> list[JournalEntry]:
    """Derive the scheduled entries of one entity for one month.

    Args:
        period: Target month, "YYYY-MM"
        entity_id: Entity whose schedules are used; others are ignored
        saved_entries: Ledger entries checked for already-posted markers
        assets: Asset (depreciation) schedules
        liabilities: Liability (loan) schedules

    Returns:
        Entries dated at the end of the month, assets first, in input order
    """
    saved = list(saved_entries)
    generated = []

    for asset in assets:
        if asset.entity_id != entity_id:
            continue
        amount = depreciation_charge(asset, period)
        if amount is None:
            continue
        marker = schedule_marker(asset.id, period, ScheduleKind.DEPRECIATION)
        if _already_saved(marker, saved):
            logger.info("scheduled_entry_suppressed", marker=marker)
            continue
        generated.append(build_depreciation_entry(asset, period, amount))

    for liability in liabilities:
        if liability.entity_id != entity_id:
            continue
        instalment = loan_instalment(liability, period)
        if instalment is None:
            continue
        marker = schedule_marker(liability.id, period, ScheduleKind.LOAN)
        if _already_saved(marker, saved):
            logger.info("scheduled_entry_suppressed", marker=marker)
            continue
        generated.append(build_loan_entry(liability, period, instalment))

    logger.debug("scheduled_entries_generated", period=period, entity_id=entity_id, count=len(generated))
    return generated


def build_schedule_previews(
    period: str,
    entity_id: str,
    assets: Iterable[AssetSchedule],
    liabilities: Iterable[LiabilitySchedule],
) -> tuple[list[DepreciationPreview], list[LoanPreview]]:
    """What each schedule of the entity posts in the period, saved or not."""
    depreciation = []
    for asset in assets:
        if asset.entity_id != entity_id:
            continue
        amount = depreciation_charge(asset, period)
        if amount is None:
            continue
        depreciation.append(
            DepreciationPreview(
                schedule_id=asset.id,
                name=asset.name,
                period=period,
                monthly_depreciation=amount,
                entry=build_depreciation_entry(asset, period, amount),
            )
        )

    loans = []
    for liability in liabilities:
        if liability.entity_id != entity_id:
            continue
        instalment = loan_instalment(liability, period)
        if instalment is None:
            continue
        loans.append(
            LoanPreview(
                schedule_id=liability.id,
                name=liability.name,
                period=period,
                principal_payment=instalment.principal,
                interest_payment=instalment.interest,
                total_payment=instalment.total,
                entry=build_loan_entry(liability, period, instalment),
            )
        )

    return depreciation, loans
