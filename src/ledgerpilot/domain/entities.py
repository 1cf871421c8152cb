"""Domain model entities for ledgerpilot.

These are pure data classes representing bookkeeping concepts, independent
of the database schema. The engine modules take and return them; the
database layer maps them to and from ORM rows.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class Currency(str, Enum):
    """Currencies understood by the composer."""

    AED = "AED"
    USD = "USD"
    EUR = "EUR"


class ActionKind(str, Enum):
    """Business actions recognized in free text."""

    BORROW = "borrow"
    LEND = "lend"
    BUY = "buy"
    SELL = "sell"
    SPEND = "spend"


class NormalSide(str, Enum):
    """Side on which an account ordinarily carries a positive balance."""

    DEBIT = "debit"
    CREDIT = "credit"


class EntrySource(str, Enum):
    """Where a journal entry came from."""

    SAVED = "saved"
    SCHEDULED = "scheduled"


class ConsolidationMethod(str, Enum):
    """How an entity takes part in a group consolidation."""

    FULL = "full"
    EQUITY = "equity"
    NONE = "none"


class ScheduleKind(str, Enum):
    """Kinds of recurring postings produced by schedules."""

    DEPRECIATION = "depreciation"
    LOAN = "loan"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry.

    ``opening_balance`` is signed: positive is a net debit, negative a net
    credit.
    """

    name: str
    normal_side: NormalSide = NormalSide.DEBIT
    opening_balance: Decimal = Decimal("0")
    id: Optional[int] = None
    entity_id: Optional[str] = None


@dataclass(frozen=True)
class JournalLine:
    """One debit or credit against an account, referenced by name."""

    account: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry; debits and credits must balance within 0.01."""

    id: str
    date: date
    currency: Currency
    memo: str
    entity_id: str
    lines: tuple[JournalLine, ...]
    business_unit_id: Optional[str] = None
    source: EntrySource = EntrySource.SAVED


@dataclass(frozen=True)
class ParsedEvent:
    """A business event recognized in one clause of free text."""

    action: ActionKind
    amount: Decimal
    raw: str
    date: Optional[date] = None
    currency: Optional[Currency] = None
    counterparty: Optional[str] = None
    item: Optional[str] = None
    category_hint: Optional[str] = None


@dataclass(frozen=True)
class BusinessUnit:
    """Business unit (branch, department) inside an entity."""

    id: str
    name: str


@dataclass(frozen=True)
class IntercompanyPolicy:
    """Account names whose group balances are eliminated on consolidation."""

    enabled: bool = True
    ar_account: str = "Intercompany Receivable"
    ap_account: str = "Intercompany Payable"
    loan_receivable_account: str = "Intercompany Loan Receivable"
    loan_payable_account: str = "Intercompany Loan Payable"


@dataclass(frozen=True)
class EntityPolicy:
    """Consolidation policy of an entity."""

    ownership_pct: Decimal = Decimal("100")
    method: ConsolidationMethod = ConsolidationMethod.FULL
    functional_currency: Currency = Currency.AED
    intercompany: IntercompanyPolicy = field(default_factory=IntercompanyPolicy)


@dataclass(frozen=True)
class Entity:
    """Legal entity owning a chart of accounts and a ledger."""

    id: str
    name: str
    base_currency: Currency = Currency.AED
    business_units: tuple[BusinessUnit, ...] = ()
    policy: EntityPolicy = field(default_factory=EntityPolicy)
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AssetSchedule:
    """Fixed asset depreciated straight-line from its in-service month."""

    id: str
    entity_id: str
    name: str
    in_service_date: date
    cost: Decimal
    useful_life_months: int
    salvage_value: Decimal = Decimal("0")
    currency: Currency = Currency.AED
    asset_account: str = "Equipment"
    accumulated_depreciation_account: str = "Accumulated Depreciation"
    depreciation_expense_account: str = "Depreciation Expense"
    business_unit_id: Optional[str] = None


@dataclass(frozen=True)
class LiabilitySchedule:
    """Loan repaid in equal principal instalments plus interest."""

    id: str
    entity_id: str
    name: str
    start_date: date
    principal: Decimal
    annual_rate: Decimal
    term_months: int
    currency: Currency = Currency.AED
    liability_account: str = "Loan Payable"
    interest_expense_account: str = "Interest Expense"
    cash_account: str = "Cash"
    business_unit_id: Optional[str] = None


@dataclass(frozen=True)
class ComposerDefaults:
    """Settings the entry synthesizer applies to every event."""

    currency: Currency = Currency.AED
    vat_enabled: bool = True
    vat_rate: Decimal = Decimal("0.05")
    vat_inclusive: bool = True
    use_ar_ap: bool = False
    default_expense_account: str = "Purchases / Expense"
    similarity_threshold: float = 0.72


@dataclass(frozen=True)
class ComposeResult:
    """Events, entries and unresolved account names produced from text."""

    events: tuple[ParsedEvent, ...]
    entries: tuple[JournalEntry, ...]
    unresolved: tuple[str, ...] = ()


@dataclass(frozen=True)
class BalanceSet:
    """Signed opening and closing balances keyed by account name."""

    opening: dict[str, Decimal]
    closing: dict[str, Decimal]


@dataclass(frozen=True)
class FormattedBalance:
    """Human-facing form of a signed balance."""

    side: str
    amount: Decimal


@dataclass(frozen=True)
class EntityBalances:
    """Balances of one entity inside a consolidation."""

    entity_id: str
    opening: dict[str, Decimal]
    closing: dict[str, Decimal]


@dataclass(frozen=True)
class EliminationRecord:
    """One side of an intercompany elimination."""

    account: str
    amount: Decimal
    note: str


@dataclass(frozen=True)
class ConsolidationResult:
    """Group balances after aggregation and eliminations."""

    included_entity_ids: tuple[str, ...]
    entity_balances: tuple[EntityBalances, ...]
    consolidated_opening: dict[str, Decimal]
    consolidated_closing: dict[str, Decimal]
    eliminations: tuple[EliminationRecord, ...]


@dataclass(frozen=True)
class DepreciationPreview:
    """What an asset schedule will post in a period."""

    schedule_id: str
    name: str
    period: str
    monthly_depreciation: Decimal
    entry: JournalEntry


@dataclass(frozen=True)
class LoanPreview:
    """What a liability schedule will post in a period."""

    schedule_id: str
    name: str
    period: str
    principal_payment: Decimal
    interest_payment: Decimal
    total_payment: Decimal
    entry: JournalEntry
