"""Entity domain service."""

from dataclasses import replace
from decimal import Decimal
from typing import Optional
import uuid

import structlog

from ledgerpilot.database.base import Database
from ledgerpilot.domain.chart import (
    DEFAULT_BUSINESS_UNIT_NAME,
    DEFAULT_ENTITY_NAME,
    default_chart,
    default_policy,
)
from ledgerpilot.domain.entities import (
    ConsolidationMethod,
    Currency,
    Entity,
    EntityPolicy,
)
from ledgerpilot.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_entity_name,
    entity_not_found,
)

logger = structlog.get_logger(__name__)


class EntityService:
    """Service for managing legal entities and their consolidation policy."""

    def __init__(self, db: Database):
        """Initialize entity service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_entity(
        self,
        name: str,
        base_currency: Currency = Currency.AED,
        policy: Optional[EntityPolicy] = None,
        seed_chart: bool = True,
    ) -> Entity:
        """Create an entity, optionally seeding the default chart of accounts.

        Args:
            name: Entity name (unique)
            base_currency: Reporting currency of the entity
            policy: Consolidation policy; defaults to fully consolidated
            seed_chart: If True, create the default accounts

        Returns:
            The created entity

        Raises:
            ConflictError: If an entity with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Entity name cannot be empty")
        if self.db.get_entity_by_name(name) is not None:
            raise ConflictError(duplicate_entity_name(name))

        base_currency = Currency(base_currency)
        policy = policy or default_policy(base_currency)
        entity_id = str(uuid.uuid4())
        self.db.create_entity(entity_id, name, base_currency, policy)
        self.db.add_business_unit(entity_id, str(uuid.uuid4()), DEFAULT_BUSINESS_UNIT_NAME)

        if seed_chart:
            for account_name, side in default_chart():
                self.db.create_account(entity_id, account_name, side)

        logger.info("entity_created", entity_id=entity_id, name=name, seeded=seed_chart)
        return self.db.get_entity(entity_id)

    def ensure_default_entity(self) -> Entity:
        """Return the first entity, creating "Main Entity" if there is none."""
        entities = self.db.list_entities()
        if entities:
            return entities[0]
        return self.create_entity(DEFAULT_ENTITY_NAME)

    def get_entity(self, entity_id: str) -> Optional[Entity]:
        return self.db.get_entity(entity_id)

    def list_entities(self) -> list[Entity]:
        return self.db.list_entities()

    def resolve_entity(self, entity: Optional[str] = None) -> Entity:
        """Find an entity by ID or name; with no argument, the default entity.

        Raises:
            NotFoundError: If nothing matches
        """
        if entity is None:
            return self.ensure_default_entity()

        found = self.db.get_entity(entity) or self.db.get_entity_by_name(entity)
        if found is None:
            lowered = entity.strip().lower()
            for candidate in self.db.list_entities():
                if candidate.name.lower() == lowered:
                    return candidate
            raise NotFoundError(entity_not_found(entity))
        return found

    def update_policy(
        self,
        entity_id: str,
        ownership_pct: Optional[Decimal] = None,
        method: Optional[ConsolidationMethod] = None,
        functional_currency: Optional[Currency] = None,
        intercompany_enabled: Optional[bool] = None,
        ar_account: Optional[str] = None,
        ap_account: Optional[str] = None,
        loan_receivable_account: Optional[str] = None,
        loan_payable_account: Optional[str] = None,
    ) -> Entity:
        """Change selected fields of an entity's consolidation policy.

        Raises:
            NotFoundError: If the entity does not exist
            ValidationError: If ownership is outside 0-100
        """
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))

        policy = entity.policy
        if ownership_pct is not None:
            ownership_pct = Decimal(str(ownership_pct))
            if ownership_pct < 0 or ownership_pct > 100:
                raise ValidationError("Ownership percentage must be between 0 and 100")
            policy = replace(policy, ownership_pct=ownership_pct)
        if method is not None:
            policy = replace(policy, method=ConsolidationMethod(method))
        if functional_currency is not None:
            policy = replace(policy, functional_currency=Currency(functional_currency))

        intercompany = policy.intercompany
        changes = {
            "enabled": intercompany_enabled,
            "ar_account": ar_account,
            "ap_account": ap_account,
            "loan_receivable_account": loan_receivable_account,
            "loan_payable_account": loan_payable_account,
        }
        changes = {key: value for key, value in changes.items() if value is not None}
        if changes:
            policy = replace(policy, intercompany=replace(intercompany, **changes))

        self.db.update_entity_policy(entity_id, policy)
        logger.info("entity_policy_updated", entity_id=entity_id, method=policy.method.value)
        return self.db.get_entity(entity_id)

    def add_business_unit(self, entity_id: str, name: str) -> str:
        """Add a business unit to an entity. Returns the unit ID.

        Raises:
            NotFoundError: If the entity does not exist
            ConflictError: If the entity already has a unit of that name
        """
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))
        name = name.strip()
        if any(unit.name == name for unit in entity.business_units):
            raise ConflictError(f"Business unit '{name}' already exists in '{entity.name}'")
        return self.db.add_business_unit(entity_id, str(uuid.uuid4()), name)
