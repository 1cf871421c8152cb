"""Schedule definition domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional
import uuid

import structlog

from ledgerpilot.database.base import Database
from ledgerpilot.domain.entities import (
    AssetSchedule,
    Currency,
    DepreciationPreview,
    LiabilitySchedule,
    LoanPreview,
)
from ledgerpilot.domain.errors import (
    NotFoundError,
    ValidationError,
    account_name_not_found,
    entity_not_found,
    schedule_not_found,
)
from ledgerpilot.domain.schedules import build_schedule_previews
from ledgerpilot.utils.account_resolver import resolve_account_name
from ledgerpilot.utils.amount_parser import round_money, to_decimal

logger = structlog.get_logger(__name__)


class ScheduleDefinitionService:
    """Service for managing asset and liability schedules of an entity."""

    def __init__(self, db: Database):
        """Initialize schedule definition service.

        Args:
            db: Database instance
        """
        self.db = db

    def _chart_account(self, entity_id: str, name: str) -> str:
        """Canonical chart name for ``name``; schedules never post to unknown accounts."""
        chart = [acc.name for acc in self.db.list_accounts(entity_id)]
        resolution = resolve_account_name(name, chart)
        if not resolution.resolved:
            raise NotFoundError(account_name_not_found(name, entity_id))
        return resolution.name

    def _entity_currency(self, entity_id: str, currency: Optional[Currency]) -> Currency:
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))
        return Currency(currency) if currency is not None else entity.base_currency

    def add_asset(
        self,
        entity_id: str,
        name: str,
        in_service_date: date,
        cost: Decimal,
        useful_life_months: int,
        salvage_value: Decimal = Decimal("0"),
        currency: Optional[Currency] = None,
        asset_account: str = "Equipment",
        accumulated_depreciation_account: str = "Accumulated Depreciation",
        depreciation_expense_account: str = "Depreciation Expense",
        business_unit_id: Optional[str] = None,
    ) -> AssetSchedule:
        """Define a straight-line depreciation schedule.

        Raises:
            NotFoundError: If the entity or one of the accounts does not exist
            ValidationError: If the monetary terms are not usable
        """
        currency = self._entity_currency(entity_id, currency)
        cost = round_money(cost)
        salvage_value = round_money(salvage_value)
        if cost <= 0:
            raise ValidationError("Asset cost must be positive")
        if useful_life_months <= 0:
            raise ValidationError("Useful life must be at least one month")
        if salvage_value < 0 or salvage_value > cost:
            raise ValidationError("Salvage value must be between 0 and the asset cost")

        schedule = AssetSchedule(
            id=str(uuid.uuid4()),
            entity_id=entity_id,
            name=name.strip(),
            in_service_date=in_service_date,
            cost=cost,
            useful_life_months=useful_life_months,
            salvage_value=salvage_value,
            currency=currency,
            asset_account=self._chart_account(entity_id, asset_account),
            accumulated_depreciation_account=self._chart_account(
                entity_id, accumulated_depreciation_account
            ),
            depreciation_expense_account=self._chart_account(
                entity_id, depreciation_expense_account
            ),
            business_unit_id=business_unit_id,
        )
        self.db.create_asset_schedule(schedule)
        logger.info("asset_schedule_created", schedule_id=schedule.id, entity_id=entity_id)
        return schedule

    def add_liability(
        self,
        entity_id: str,
        name: str,
        start_date: date,
        principal: Decimal,
        annual_rate: Decimal,
        term_months: int,
        currency: Optional[Currency] = None,
        liability_account: str = "Loan Payable",
        interest_expense_account: str = "Interest Expense",
        cash_account: str = "Cash",
        business_unit_id: Optional[str] = None,
    ) -> LiabilitySchedule:
        """Define a loan repaid in equal principal instalments plus interest.

        ``annual_rate`` is a fraction (0.06 for 6%).

        Raises:
            NotFoundError: If the entity or one of the accounts does not exist
            ValidationError: If the loan terms are not usable
        """
        currency = self._entity_currency(entity_id, currency)
        principal = round_money(principal)
        annual_rate = to_decimal(annual_rate)
        if principal <= 0:
            raise ValidationError("Loan principal must be positive")
        if term_months <= 0:
            raise ValidationError("Loan term must be at least one month")
        if annual_rate < 0 or annual_rate > 1:
            raise ValidationError("Annual rate must be a fraction between 0 and 1")

        schedule = LiabilitySchedule(
            id=str(uuid.uuid4()),
            entity_id=entity_id,
            name=name.strip(),
            start_date=start_date,
            principal=principal,
            annual_rate=annual_rate,
            term_months=term_months,
            currency=currency,
            liability_account=self._chart_account(entity_id, liability_account),
            interest_expense_account=self._chart_account(entity_id, interest_expense_account),
            cash_account=self._chart_account(entity_id, cash_account),
            business_unit_id=business_unit_id,
        )
        self.db.create_liability_schedule(schedule)
        logger.info("liability_schedule_created", schedule_id=schedule.id, entity_id=entity_id)
        return schedule

    def list_assets(self, entity_id: Optional[str] = None) -> list[AssetSchedule]:
        return self.db.list_asset_schedules(entity_id)

    def list_liabilities(self, entity_id: Optional[str] = None) -> list[LiabilitySchedule]:
        return self.db.list_liability_schedules(entity_id)

    def delete_schedule(self, schedule_id: str) -> None:
        """Delete an asset or liability schedule.

        Entries already saved from the schedule stay in the ledger.

        Raises:
            NotFoundError: If no schedule has that ID
        """
        known = {schedule.id for schedule in self.db.list_asset_schedules()}
        known |= {schedule.id for schedule in self.db.list_liability_schedules()}
        if schedule_id not in known:
            raise NotFoundError(schedule_not_found(schedule_id))
        self.db.delete_schedule(schedule_id)
        logger.info("schedule_deleted", schedule_id=schedule_id)

    def preview(
        self, entity_id: str, period: str
    ) -> tuple[list[DepreciationPreview], list[LoanPreview]]:
        """What each of the entity's schedules posts in the "YYYY-MM" period."""
        if self.db.get_entity(entity_id) is None:
            raise NotFoundError(entity_not_found(entity_id))
        return build_schedule_previews(
            period,
            entity_id,
            self.db.list_asset_schedules(entity_id),
            self.db.list_liability_schedules(entity_id),
        )
