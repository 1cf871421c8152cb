"""Account domain service."""

from decimal import Decimal
from typing import Optional

import structlog

from ledgerpilot.database.base import Database
from ledgerpilot.domain.chart import default_chart
from ledgerpilot.domain.entities import Account as AccountEntity, NormalSide
from ledgerpilot.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_name,
    entity_not_found,
)
from ledgerpilot.utils.account_resolver import normalize_account_name
from ledgerpilot.utils.amount_parser import round_money

logger = structlog.get_logger(__name__)


class AccountService:
    """Service for managing an entity's chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_entity(self, entity_id: str) -> None:
        if self.db.get_entity(entity_id) is None:
            raise NotFoundError(entity_not_found(entity_id))

    def create_account(
        self,
        entity_id: str,
        name: str,
        normal_side: NormalSide = NormalSide.DEBIT,
        opening_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account in an entity's chart.

        Names are compared after normalization, so "Office Supplies" and
        "office  supplies" count as the same account.

        Args:
            entity_id: Owning entity
            name: Account name
            normal_side: Debit or credit
            opening_balance: Signed opening balance (positive = net debit)

        Returns:
            Account ID

        Raises:
            NotFoundError: If the entity does not exist
            ValidationError: If the name is empty
            ConflictError: If the chart already has an account with that name
        """
        self._require_entity(entity_id)
        name = " ".join(name.split())
        if not normalize_account_name(name):
            raise ValidationError("Account name cannot be empty")

        key = normalize_account_name(name)
        for acc in self.db.list_accounts(entity_id):
            if normalize_account_name(acc.name) == key:
                raise ConflictError(duplicate_account_name(name, entity_id))

        account_id = self.db.create_account(
            entity_id=entity_id,
            name=name,
            normal_side=NormalSide(normal_side),
            opening_balance=round_money(opening_balance),
        )
        logger.info("account_created", entity_id=entity_id, account=name)
        return account_id

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def list_accounts(self, entity_id: str) -> list[AccountEntity]:
        """List the chart of accounts of an entity.

        Returns:
            List of account entities in creation order
        """
        return self.db.list_accounts(entity_id)

    def account_names(self, entity_id: str) -> list[str]:
        return [acc.name for acc in self.db.list_accounts(entity_id)]

    def set_opening_balance(self, account_id: int, opening_balance: Decimal) -> None:
        """Set the signed opening balance of an account.

        Raises:
            NotFoundError: If account not found
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        self.db.update_account_opening_balance(account_id, round_money(opening_balance))

    def rename_account(self, account_id: int, new_name: str) -> None:
        """Rename an account.

        Saved entries and schedules keep the name they were posted under.

        Raises:
            NotFoundError: If account not found
            ValidationError: If the new name is empty
            ConflictError: If another account of the entity has that name
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        new_name = " ".join(new_name.split())
        key = normalize_account_name(new_name)
        if not key:
            raise ValidationError("Account name cannot be empty")
        for acc in self.db.list_accounts(account.entity_id):
            if acc.id != account_id and normalize_account_name(acc.name) == key:
                raise ConflictError(duplicate_account_name(new_name, account.entity_id))

        self.db.update_account_name(account_id, new_name)
        logger.info(
            "account_renamed", entity_id=account.entity_id, account=account.name, new_name=new_name
        )

    def set_normal_side(self, account_id: int, normal_side: NormalSide) -> None:
        """Set whether an account normally carries a debit or a credit balance.

        Raises:
            NotFoundError: If account not found
            ValueError: If the side is not "debit" or "credit"
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        self.db.update_account_normal_side(account_id, NormalSide(normal_side))

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Entries and schedules name their accounts, so they are left as they
        are; balances keep showing a deleted name with a zero opening.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        self.db.delete_account(account_id)
        logger.info("account_deleted", entity_id=account.entity_id, account=account.name)

    def seed_default_chart(self, entity_id: str) -> int:
        """Add any default accounts the chart is missing. Returns how many were added."""
        self._require_entity(entity_id)
        existing = {normalize_account_name(name) for name in self.account_names(entity_id)}
        added = 0
        for name, side in default_chart():
            if normalize_account_name(name) in existing:
                continue
            self.db.create_account(entity_id, name, side)
            added += 1
        return added
