"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerpilot.domain.entities import (
    Account,
    AssetSchedule,
    Currency,
    Entity,
    EntityPolicy,
    JournalEntry,
    LiabilitySchedule,
    NormalSide,
)


class Database(ABC):
    """Abstract database interface for ledgerpilot."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Entity operations
    @abstractmethod
    def create_entity(
        self, entity_id: str, name: str, base_currency: Currency, policy: EntityPolicy
    ) -> str:
        """Create an entity. Returns entity ID."""
        pass

    @abstractmethod
    def get_entity(self, entity_id: str) -> Optional[Entity]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def get_entity_by_name(self, name: str) -> Optional[Entity]:
        """Get entity by name."""
        pass

    @abstractmethod
    def list_entities(self) -> list[Entity]:
        """List all entities."""
        pass

    @abstractmethod
    def update_entity_policy(self, entity_id: str, policy: EntityPolicy) -> None:
        """Replace the consolidation policy of an entity."""
        pass

    @abstractmethod
    def add_business_unit(self, entity_id: str, unit_id: str, name: str) -> str:
        """Add a business unit to an entity. Returns unit ID."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        entity_id: str,
        name: str,
        normal_side: NormalSide = NormalSide.DEBIT,
        opening_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create an account in an entity's chart. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_name(self, entity_id: str, name: str) -> Optional[Account]:
        """Get account by exact name within an entity."""
        pass

    @abstractmethod
    def list_accounts(self, entity_id: str) -> list[Account]:
        """List the chart of accounts of an entity."""
        pass

    @abstractmethod
    def update_account_opening_balance(self, account_id: int, opening_balance: Decimal) -> None:
        """Set the signed opening balance of an account."""
        pass

    @abstractmethod
    def update_account_name(self, account_id: int, name: str) -> None:
        """Rename an account."""
        pass

    @abstractmethod
    def update_account_normal_side(self, account_id: int, normal_side: NormalSide) -> None:
        """Set the normal side of an account."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(self, entry: JournalEntry) -> str:
        """Store a journal entry with its lines. Returns entry ID."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: str) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        entity_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[JournalEntry]:
        """List journal entries ordered by date, optionally filtered."""
        pass

    @abstractmethod
    def update_journal_entry(self, entry: JournalEntry) -> None:
        """Replace the date, currency, memo and lines of a stored entry."""
        pass

    @abstractmethod
    def delete_journal_entry(self, entry_id: str) -> None:
        """Delete a journal entry and its lines."""
        pass

    # Schedule operations
    @abstractmethod
    def create_asset_schedule(self, schedule: AssetSchedule) -> str:
        """Store an asset schedule. Returns schedule ID."""
        pass

    @abstractmethod
    def list_asset_schedules(self, entity_id: Optional[str] = None) -> list[AssetSchedule]:
        """List asset schedules, optionally filtered by entity."""
        pass

    @abstractmethod
    def create_liability_schedule(self, schedule: LiabilitySchedule) -> str:
        """Store a liability schedule. Returns schedule ID."""
        pass

    @abstractmethod
    def list_liability_schedules(self, entity_id: Optional[str] = None) -> list[LiabilitySchedule]:
        """List liability schedules, optionally filtered by entity."""
        pass

    @abstractmethod
    def delete_schedule(self, schedule_id: str) -> None:
        """Delete an asset or liability schedule by ID."""
        pass
