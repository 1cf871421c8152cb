"""SQLAlchemy models for ledgerpilot database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Entity(Base):
    """Legal entity model, with its consolidation policy flattened in."""

    __tablename__ = "entities"

    id = Column(String, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    base_currency = Column(String(3), nullable=False, default="AED")
    ownership_pct = Column(Numeric(5, 2), nullable=False, default=100)
    method = Column(String, nullable=False, default="full")
    functional_currency = Column(String(3), nullable=False, default="AED")
    intercompany_enabled = Column(Boolean, default=True, nullable=False)
    intercompany_ar_account = Column(String, nullable=False)
    intercompany_ap_account = Column(String, nullable=False)
    intercompany_loan_receivable_account = Column(String, nullable=False)
    intercompany_loan_payable_account = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    business_units = relationship(
        "BusinessUnit",
        back_populates="entity",
        cascade="all, delete-orphan",
        order_by="BusinessUnit.name",
    )
    accounts = relationship("Account", back_populates="entity", cascade="all, delete-orphan")
    journal_entries = relationship(
        "JournalEntry", back_populates="entity", cascade="all, delete-orphan"
    )


class BusinessUnit(Base):
    """Business unit (branch, department) of an entity."""

    __tablename__ = "business_units"

    id = Column(String, primary_key=True)
    entity_id = Column(String, ForeignKey("entities.id"), nullable=False)
    name = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("entity_id", "name", name="uq_entity_business_unit"),)

    # Relationships
    entity = relationship("Entity", back_populates="business_units")


class Account(Base):
    """Chart of accounts entry, unique by name within an entity."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    entity_id = Column(String, ForeignKey("entities.id"), nullable=False)
    name = Column(String, nullable=False)
    normal_side = Column(String, nullable=False, default="debit")
    opening_balance = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("entity_id", "name", name="uq_entity_account_name"),)

    # Relationships
    entity = relationship("Entity", back_populates="accounts")


class JournalEntry(Base):
    """Journal entry model."""

    __tablename__ = "journal_entries"

    id = Column(String, primary_key=True)
    entity_id = Column(String, ForeignKey("entities.id"), nullable=False)
    business_unit_id = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    currency = Column(String(3), nullable=False)
    memo = Column(String, nullable=False, default="")
    source = Column(String, nullable=False, default="saved")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entity = relationship("Entity", back_populates="journal_entries")
    lines = relationship(
        "JournalLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.position",
    )


class JournalLine(Base):
    """Journal line model. Accounts are referenced by name, not by key."""

    __tablename__ = "journal_lines"

    id = Column(Integer, primary_key=True)
    entry_id = Column(String, ForeignKey("journal_entries.id"), nullable=False)
    position = Column(Integer, nullable=False)
    account = Column(String, nullable=False)
    debit = Column(Numeric(14, 2), nullable=False, default=0)
    credit = Column(Numeric(14, 2), nullable=False, default=0)

    # Relationships
    entry = relationship("JournalEntry", back_populates="lines")


class AssetSchedule(Base):
    """Depreciation schedule model."""

    __tablename__ = "asset_schedules"

    id = Column(String, primary_key=True)
    entity_id = Column(String, ForeignKey("entities.id"), nullable=False)
    business_unit_id = Column(String, nullable=True)
    name = Column(String, nullable=False)
    in_service_date = Column(Date, nullable=False)
    cost = Column(Numeric(14, 2), nullable=False)
    salvage_value = Column(Numeric(14, 2), nullable=False, default=0)
    useful_life_months = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    asset_account = Column(String, nullable=False)
    accumulated_depreciation_account = Column(String, nullable=False)
    depreciation_expense_account = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class LiabilitySchedule(Base):
    """Loan amortization schedule model."""

    __tablename__ = "liability_schedules"

    id = Column(String, primary_key=True)
    entity_id = Column(String, ForeignKey("entities.id"), nullable=False)
    business_unit_id = Column(String, nullable=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    principal = Column(Numeric(14, 2), nullable=False)
    annual_rate = Column(Numeric(9, 6), nullable=False, default=0)
    term_months = Column(Integer, nullable=False)
    currency = Column(String(3), nullable=False)
    liability_account = Column(String, nullable=False)
    interest_expense_account = Column(String, nullable=False)
    cash_account = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
