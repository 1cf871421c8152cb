"""Default chart of accounts and default entity.

A new entity is seeded with the accounts every posting template and schedule
refers to, so text can be posted straight away.
"""

from ledgerpilot.domain.entities import (
    Currency,
    EntityPolicy,
    IntercompanyPolicy,
    NormalSide,
)

DEFAULT_ENTITY_NAME = "Main Entity"
DEFAULT_BUSINESS_UNIT_NAME = "General"

# (name, normal side); order is the order of the chart listing
DEFAULT_CHART = [
    ("Cash", NormalSide.DEBIT),
    ("Accounts Receivable", NormalSide.DEBIT),
    ("Accounts Payable", NormalSide.CREDIT),
    ("Loan Receivable", NormalSide.DEBIT),
    ("Loan Payable", NormalSide.CREDIT),
    ("Revenue", NormalSide.CREDIT),
    ("Purchases / Expense", NormalSide.DEBIT),
    ("Input VAT", NormalSide.DEBIT),
    ("Output VAT", NormalSide.CREDIT),
    # Fixed assets and loans
    ("Equipment", NormalSide.DEBIT),
    ("Accumulated Depreciation", NormalSide.CREDIT),
    ("Depreciation Expense", NormalSide.DEBIT),
    ("Interest Expense", NormalSide.DEBIT),
]

INTERCOMPANY_CHART = [
    ("Intercompany Receivable", NormalSide.DEBIT),
    ("Intercompany Payable", NormalSide.CREDIT),
    ("Intercompany Loan Receivable", NormalSide.DEBIT),
    ("Intercompany Loan Payable", NormalSide.CREDIT),
]


def default_policy(currency: Currency = Currency.AED) -> EntityPolicy:
    """Wholly owned, fully consolidated, intercompany elimination on."""
    return EntityPolicy(
        functional_currency=currency,
        intercompany=IntercompanyPolicy(),
    )


def default_chart(include_intercompany: bool = True) -> list[tuple[str, NormalSide]]:
    if include_intercompany:
        return DEFAULT_CHART + INTERCOMPANY_CHART
    return list(DEFAULT_CHART)
