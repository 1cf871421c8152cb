"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic. Policies are stored as flat
columns on the entity row and rebuilt into nested dataclasses here.
"""

from decimal import Decimal

from ledgerpilot.domain import entities as domain
from ledgerpilot.database.models import (
    Account as ORMAccount,
    AssetSchedule as ORMAssetSchedule,
    BusinessUnit as ORMBusinessUnit,
    Entity as ORMEntity,
    JournalEntry as ORMJournalEntry,
    JournalLine as ORMJournalLine,
    LiabilitySchedule as ORMLiabilitySchedule,
)


def _money(value) -> Decimal:
    return Decimal(str(value if value is not None else 0)).quantize(Decimal("0.01"))


def business_unit_to_domain(orm_unit: ORMBusinessUnit) -> domain.BusinessUnit:
    """Convert SQLAlchemy BusinessUnit model to domain BusinessUnit entity."""
    return domain.BusinessUnit(id=orm_unit.id, name=orm_unit.name)


def entity_to_domain(orm_entity: ORMEntity) -> domain.Entity:
    """Convert SQLAlchemy Entity model to domain Entity entity."""
    return domain.Entity(
        id=orm_entity.id,
        name=orm_entity.name,
        base_currency=domain.Currency(orm_entity.base_currency),
        business_units=tuple(business_unit_to_domain(unit) for unit in orm_entity.business_units),
        policy=domain.EntityPolicy(
            ownership_pct=Decimal(str(orm_entity.ownership_pct)),
            method=domain.ConsolidationMethod(orm_entity.method),
            functional_currency=domain.Currency(orm_entity.functional_currency),
            intercompany=domain.IntercompanyPolicy(
                enabled=orm_entity.intercompany_enabled,
                ar_account=orm_entity.intercompany_ar_account,
                ap_account=orm_entity.intercompany_ap_account,
                loan_receivable_account=orm_entity.intercompany_loan_receivable_account,
                loan_payable_account=orm_entity.intercompany_loan_payable_account,
            ),
        ),
        created_at=orm_entity.created_at,
    )


def apply_policy(orm_entity: ORMEntity, policy: domain.EntityPolicy) -> None:
    """Copy a domain policy onto the flat policy columns of an entity row."""
    orm_entity.ownership_pct = policy.ownership_pct
    orm_entity.method = policy.method.value
    orm_entity.functional_currency = policy.functional_currency.value
    orm_entity.intercompany_enabled = policy.intercompany.enabled
    orm_entity.intercompany_ar_account = policy.intercompany.ar_account
    orm_entity.intercompany_ap_account = policy.intercompany.ap_account
    orm_entity.intercompany_loan_receivable_account = policy.intercompany.loan_receivable_account
    orm_entity.intercompany_loan_payable_account = policy.intercompany.loan_payable_account


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        entity_id=orm_account.entity_id,
        name=orm_account.name,
        normal_side=domain.NormalSide(orm_account.normal_side),
        opening_balance=_money(orm_account.opening_balance),
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalLine:
    return domain.JournalLine(
        account=orm_line.account,
        debit=_money(orm_line.debit),
        credit=_money(orm_line.credit),
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with lines) to domain JournalEntry."""
    return domain.JournalEntry(
        id=orm_entry.id,
        date=orm_entry.date,
        currency=domain.Currency(orm_entry.currency),
        memo=orm_entry.memo,
        entity_id=orm_entry.entity_id,
        business_unit_id=orm_entry.business_unit_id,
        source=domain.EntrySource(orm_entry.source),
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
    )


def journal_lines_to_orm(lines) -> list[ORMJournalLine]:
    """Build SQLAlchemy JournalLine rows, numbered in entry order."""
    return [
        ORMJournalLine(
            position=position,
            account=line.account,
            debit=line.debit,
            credit=line.credit,
        )
        for position, line in enumerate(lines)
    ]


def journal_entry_to_orm(entry: domain.JournalEntry) -> ORMJournalEntry:
    """Build a SQLAlchemy JournalEntry (with lines) from a domain entry."""
    return ORMJournalEntry(
        id=entry.id,
        entity_id=entry.entity_id,
        business_unit_id=entry.business_unit_id,
        date=entry.date,
        currency=domain.Currency(entry.currency).value,
        memo=entry.memo,
        source=domain.EntrySource(entry.source).value,
        lines=journal_lines_to_orm(entry.lines),
    )


def asset_schedule_to_domain(orm_schedule: ORMAssetSchedule) -> domain.AssetSchedule:
    """Convert SQLAlchemy AssetSchedule model to domain AssetSchedule."""
    return domain.AssetSchedule(
        id=orm_schedule.id,
        entity_id=orm_schedule.entity_id,
        business_unit_id=orm_schedule.business_unit_id,
        name=orm_schedule.name,
        in_service_date=orm_schedule.in_service_date,
        cost=_money(orm_schedule.cost),
        salvage_value=_money(orm_schedule.salvage_value),
        useful_life_months=orm_schedule.useful_life_months,
        currency=domain.Currency(orm_schedule.currency),
        asset_account=orm_schedule.asset_account,
        accumulated_depreciation_account=orm_schedule.accumulated_depreciation_account,
        depreciation_expense_account=orm_schedule.depreciation_expense_account,
    )


def asset_schedule_to_orm(schedule: domain.AssetSchedule) -> ORMAssetSchedule:
    return ORMAssetSchedule(
        id=schedule.id,
        entity_id=schedule.entity_id,
        business_unit_id=schedule.business_unit_id,
        name=schedule.name,
        in_service_date=schedule.in_service_date,
        cost=schedule.cost,
        salvage_value=schedule.salvage_value,
        useful_life_months=schedule.useful_life_months,
        currency=domain.Currency(schedule.currency).value,
        asset_account=schedule.asset_account,
        accumulated_depreciation_account=schedule.accumulated_depreciation_account,
        depreciation_expense_account=schedule.depreciation_expense_account,
    )


def liability_schedule_to_domain(orm_schedule: ORMLiabilitySchedule) -> domain.LiabilitySchedule:
    """Convert SQLAlchemy LiabilitySchedule model to domain LiabilitySchedule."""
    return domain.LiabilitySchedule(
        id=orm_schedule.id,
        entity_id=orm_schedule.entity_id,
        business_unit_id=orm_schedule.business_unit_id,
        name=orm_schedule.name,
        start_date=orm_schedule.start_date,
        principal=_money(orm_schedule.principal),
        annual_rate=Decimal(str(orm_schedule.annual_rate)),
        term_months=orm_schedule.term_months,
        currency=domain.Currency(orm_schedule.currency),
        liability_account=orm_schedule.liability_account,
        interest_expense_account=orm_schedule.interest_expense_account,
        cash_account=orm_schedule.cash_account,
    )


def liability_schedule_to_orm(schedule: domain.LiabilitySchedule) -> ORMLiabilitySchedule:
    return ORMLiabilitySchedule(
        id=schedule.id,
        entity_id=schedule.entity_id,
        business_unit_id=schedule.business_unit_id,
        name=schedule.name,
        start_date=schedule.start_date,
        principal=schedule.principal,
        annual_rate=schedule.annual_rate,
        term_months=schedule.term_months,
        currency=domain.Currency(schedule.currency).value,
        liability_account=schedule.liability_account,
        interest_expense_account=schedule.interest_expense_account,
        cash_account=schedule.cash_account,
    )
