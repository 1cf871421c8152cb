"""Journal domain service.

Wraps the text-to-entry pipeline, the balance calculator, the schedule
generator and the consolidation engine around the stored ledger.
"""

from dataclasses import replace
from typing import Iterable, Optional
from datetime import date
import uuid

import structlog

from ledgerpilot.database.base import Database
from ledgerpilot.domain.balances import (
    compute_balances,
    is_balanced,
    sum_credits,
    sum_debits,
)
from ledgerpilot.domain.consolidation import consolidate_group, is_included
from ledgerpilot.domain.entities import (
    BalanceSet,
    ComposeResult,
    ComposerDefaults,
    ConsolidationResult,
    Currency,
    JournalEntry,
    JournalLine,
)
from ledgerpilot.domain.errors import (
    NotFoundError,
    ValidationError,
    entity_not_found,
    entry_not_found,
    unbalanced_entry,
)
from ledgerpilot.domain.schedules import generate_scheduled_entries
from ledgerpilot.domain.synthesizer import compose_entries
from ledgerpilot.utils.date_parser import period_bounds

logger = structlog.get_logger(__name__)


class JournalService:
    """Service for composing, storing and reporting journal entries."""

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_entity(self, entity_id: str) -> None:
        if self.db.get_entity(entity_id) is None:
            raise NotFoundError(entity_not_found(entity_id))

    def compose_preview(
        self,
        text: str,
        entity_id: str,
        defaults: Optional[ComposerDefaults] = None,
        business_unit_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ComposeResult:
        """Turn free text into entries against the entity's chart, without saving.

        Args:
            text: Free-text description of one or more business events
            entity_id: Entity whose chart constrains the account names
            defaults: Composer settings (VAT, AR/AP mode, currency)
            business_unit_id: Optional business unit stamped on the entries
            today: Reference date for year inference and undated text

        Returns:
            ComposeResult with events, balanced entries and unresolved names
        """
        self._require_entity(entity_id)
        allowed = [acc.name for acc in self.db.list_accounts(entity_id)]
        return compose_entries(
            text,
            defaults=defaults,
            allowed_accounts=allowed,
            entity_id=entity_id,
            business_unit_id=business_unit_id,
            today=today,
        )

    def _validate_entry(self, entry: JournalEntry) -> None:
        if not entry.lines:
            raise ValidationError("Entry has no lines")
        if any(line.debit < 0 or line.credit < 0 for line in entry.lines):
            raise ValidationError("Line amounts cannot be negative")
        if not is_balanced(entry):
            raise ValidationError(
                unbalanced_entry(sum_debits(entry.lines), sum_credits(entry.lines))
            )
        self._require_entity(entry.entity_id)

    def save_entries(self, entries: Iterable[JournalEntry]) -> list[str]:
        """Validate and store entries, each under a fresh ID.

        Raises:
            ValidationError: If an entry has no lines or does not balance
            NotFoundError: If an entry's entity does not exist
        """
        entries = list(entries)
        for entry in entries:
            self._validate_entry(entry)

        saved_ids = []
        for entry in entries:
            stored = replace(entry, id=str(uuid.uuid4()))
            saved_ids.append(self.db.create_journal_entry(stored))
            logger.info(
                "entry_saved",
                entry_id=stored.id,
                entity_id=stored.entity_id,
                date=stored.date.isoformat(),
                source=stored.source.value,
            )
        return saved_ids

    def get_entry(self, entry_id: str) -> Optional[JournalEntry]:
        return self.db.get_journal_entry(entry_id)

    def find_entry(self, entry_ref: str, entity_id: Optional[str] = None) -> JournalEntry:
        """Find an entry by full ID or by an unambiguous ID prefix.

        Raises:
            NotFoundError: If no entry matches
            ValidationError: If the prefix matches more than one entry
        """
        entry = self.db.get_journal_entry(entry_ref)
        if entry is not None:
            return entry

        matches = [
            candidate
            for candidate in self.db.list_journal_entries(entity_id=entity_id)
            if candidate.id.startswith(entry_ref)
        ]
        if not matches:
            raise NotFoundError(entry_not_found(entry_ref))
        if len(matches) > 1:
            raise ValidationError(f"Entry ID prefix '{entry_ref}' matches {len(matches)} entries")
        return matches[0]

    def list_entries(
        self, entity_id: Optional[str] = None, period: Optional[str] = None
    ) -> list[JournalEntry]:
        """List stored entries, optionally for one entity and one "YYYY-MM" period."""
        start_date = end_date = None
        if period is not None:
            start_date, end_date = period_bounds(period)
        return self.db.list_journal_entries(
            entity_id=entity_id, start_date=start_date, end_date=end_date
        )

    def update_entry(
        self,
        entry_id: str,
        date: Optional[date] = None,
        currency: Optional[Currency] = None,
        memo: Optional[str] = None,
        lines: Optional[Iterable[JournalLine]] = None,
    ) -> JournalEntry:
        """Edit a stored entry. Only the fields that are given change.

        The edited entry is checked the same way as a new one, so a change
        that leaves it without lines or out of balance is refused and the
        stored entry stays as it was.

        Args:
            entry_id: Entry ID to edit
            date: Optional new date
            currency: Optional new currency
            memo: Optional new memo
            lines: Optional lines replacing all current ones

        Returns:
            The entry as stored after the edit

        Raises:
            NotFoundError: If entry not found
            ValidationError: If the edited entry has no lines or does not balance
        """
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))

        changes = {}
        if date is not None:
            changes["date"] = date
        if currency is not None:
            changes["currency"] = Currency(currency)
        if memo is not None:
            changes["memo"] = memo
        if lines is not None:
            changes["lines"] = tuple(lines)

        updated = replace(entry, **changes)
        self._validate_entry(updated)
        self.db.update_journal_entry(updated)
        logger.info("entry_updated", entry_id=entry_id, fields=sorted(changes))
        return updated

    def delete_entry(self, entry_id: str) -> None:
        """Delete a stored entry.

        Raises:
            NotFoundError: If entry not found
        """
        if self.db.get_journal_entry(entry_id) is None:
            raise NotFoundError(entry_not_found(entry_id))
        self.db.delete_journal_entry(entry_id)
        logger.info("entry_deleted", entry_id=entry_id)

    def scheduled_entries(self, entity_id: str, period: str) -> list[JournalEntry]:
        """Entries the entity's schedules would post for the period and has not saved yet."""
        return generate_scheduled_entries(
            period,
            entity_id,
            self.db.list_journal_entries(entity_id=entity_id),
            self.db.list_asset_schedules(entity_id),
            self.db.list_liability_schedules(entity_id),
        )

    def materialize_schedules(self, entity_id: str, period: str) -> list[str]:
        """Save the period's pending scheduled entries to the ledger.

        Saved entries keep their schedule marker, so running this again for
        the same period saves nothing.
        """
        self._require_entity(entity_id)
        pending = self.scheduled_entries(entity_id, period)
        return self.save_entries(pending)

    def period_entries(
        self, entity_id: str, period: str, include_schedules: bool = True
    ) -> list[JournalEntry]:
        """Saved entries dated in the period, plus pending scheduled ones."""
        entries = self.list_entries(entity_id=entity_id, period=period)
        if include_schedules:
            entries = entries + self.scheduled_entries(entity_id, period)
        return entries

    def period_balances(
        self, entity_id: str, period: str, include_schedules: bool = True
    ) -> BalanceSet:
        """Opening and closing balances of an entity for one period.

        Raises:
            NotFoundError: If the entity does not exist
        """
        self._require_entity(entity_id)
        entries = self.period_entries(entity_id, period, include_schedules)
        return compute_balances(self.db.list_accounts(entity_id), entries)

    def consolidate(
        self, group_entity_id: str, period: Optional[str] = None, include_schedules: bool = True
    ) -> ConsolidationResult:
        """Consolidate the group, over one period or over the whole ledger.

        Raises:
            NotFoundError: If the group entity does not exist
        """
        self._require_entity(group_entity_id)
        entities = self.db.list_entities()
        included = [entity for entity in entities if is_included(entity, group_entity_id)]

        accounts_by_entity = {}
        entries: list[JournalEntry] = []
        for entity in included:
            accounts_by_entity[entity.id] = self.db.list_accounts(entity.id)
            if period is None:
                entries.extend(self.list_entries(entity_id=entity.id))
            else:
                entries.extend(self.period_entries(entity.id, period, include_schedules))

        return consolidate_group(entities, accounts_by_entity, entries, group_entity_id)
