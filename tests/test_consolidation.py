"""Tests for the consolidation engine."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
from ledgerpilot.domain.consolidation import (
    LOANS_NOTE,
    RECEIVABLE_PAYABLE_NOTE,
    consolidate_group,
    eliminate_pair,
    is_included,
)
from ledgerpilot.domain.entities import (
    Account,
    ConsolidationMethod,
    Currency,
    Entity,
    EntityPolicy,
    IntercompanyPolicy,
    JournalEntry,
    JournalLine,
    NormalSide,
)

PARENT = Entity(id="parent", name="Parent Co")
SUB = Entity(id="sub", name="Sub Co")
ASSOCIATE = Entity(
    id="assoc", name="Associate", policy=EntityPolicy(ownership_pct=Decimal("30"), method=ConsolidationMethod.EQUITY)
)
OUTSIDER = Entity(id="out", name="Outsider", policy=EntityPolicy(method=ConsolidationMethod.NONE))
UNOWNED = Entity(id="zero", name="Unowned", policy=EntityPolicy(ownership_pct=Decimal("0")))


def _accounts(entity_id, **openings):
    return [
        Account(name=name.replace("_", " "), opening_balance=Decimal(value), entity_id=entity_id)
        for name, value in openings.items()
    ]


def test_inclusion_rule():
    assert is_included(PARENT, "parent")
    assert is_included(SUB, "parent")
    assert is_included(ASSOCIATE, "parent")
    assert not is_included(OUTSIDER, "parent")
    assert not is_included(UNOWNED, "parent")


def test_group_is_included_even_if_excluded_by_policy():
    group = replace(OUTSIDER, id="parent")
    assert is_included(group, "parent")


def test_intercompany_receivable_and_payable_eliminated():
    """A +500 receivable against a -500 payable nets to zero on both sides."""
    accounts = {
        "parent": [
            Account(name="Intercompany Receivable", opening_balance=Decimal("500")),
            Account(name="Cash", opening_balance=Decimal("1000")),
        ],
        "sub": [
            Account(
                name="Intercompany Payable",
                normal_side=NormalSide.CREDIT,
                opening_balance=Decimal("-500"),
            ),
            Account(name="Cash", opening_balance=Decimal("250")),
        ],
    }

    result = consolidate_group([PARENT, SUB], accounts, [], "parent")

    assert result.included_entity_ids == ("parent", "sub")
    assert result.consolidated_closing["Intercompany Receivable"] == Decimal("0")
    assert result.consolidated_closing["Intercompany Payable"] == Decimal("0")
    assert result.consolidated_closing["Cash"] == Decimal("1250.00")
    assert [(r.account, r.amount, r.note) for r in result.eliminations] == [
        ("Intercompany Receivable", Decimal("500.00"), RECEIVABLE_PAYABLE_NOTE),
        ("Intercompany Payable", Decimal("500.00"), RECEIVABLE_PAYABLE_NOTE),
    ]
    # Opening balances are reported before eliminations
    assert result.consolidated_opening["Intercompany Receivable"] == Decimal("500.00")


def test_partial_elimination_leaves_remainder():
    closing = {"IC AR": Decimal("800"), "IC AP": Decimal("-300")}
    records = eliminate_pair(closing, "IC AR", "IC AP", "note")

    assert closing == {"IC AR": Decimal("500.00"), "IC AP": Decimal("0.00")}
    assert [r.amount for r in records] == [Decimal("300"), Decimal("300")]


def test_payable_on_first_side_is_eliminated():
    closing = {"IC AR": Decimal("-200"), "IC AP": Decimal("350")}
    eliminate_pair(closing, "IC AR", "IC AP", "note")
    assert closing == {"IC AR": Decimal("0.00"), "IC AP": Decimal("150.00")}


def test_same_sign_balances_are_untouched():
    closing = {"IC AR": Decimal("200"), "IC AP": Decimal("100")}
    assert eliminate_pair(closing, "IC AR", "IC AP", "note") == []
    assert closing == {"IC AR": Decimal("200"), "IC AP": Decimal("100")}


def test_missing_side_is_untouched():
    closing = {"IC AR": Decimal("200")}
    assert eliminate_pair(closing, "IC AR", "IC AP", "note") == []


def test_intercompany_loans_eliminated_from_entries():
    lend = JournalEntry(
        id="l1",
        date=date(2025, 5, 1),
        currency=Currency.AED,
        memo="loan to sub",
        entity_id="parent",
        lines=(
            JournalLine("Intercompany Loan Receivable", Decimal("1000"), Decimal("0")),
            JournalLine("Cash", Decimal("0"), Decimal("1000")),
        ),
    )
    borrow = JournalEntry(
        id="b1",
        date=date(2025, 5, 1),
        currency=Currency.AED,
        memo="loan from parent",
        entity_id="sub",
        lines=(
            JournalLine("Cash", Decimal("1000"), Decimal("0")),
            JournalLine("Intercompany Loan Payable", Decimal("0"), Decimal("1000")),
        ),
    )

    result = consolidate_group([PARENT, SUB], {}, [lend, borrow], "parent")

    assert result.consolidated_closing["Intercompany Loan Receivable"] == Decimal("0")
    assert result.consolidated_closing["Intercompany Loan Payable"] == Decimal("0")
    assert result.consolidated_closing["Cash"] == Decimal("0")
    assert {r.note for r in result.eliminations} == {LOANS_NOTE}


def test_elimination_disabled_by_group_policy():
    group = replace(
        PARENT, policy=EntityPolicy(intercompany=IntercompanyPolicy(enabled=False))
    )
    accounts = {
        "parent": _accounts("parent", Intercompany_Receivable="500"),
        "sub": _accounts("sub", Intercompany_Payable="-500"),
    }

    result = consolidate_group([group, SUB], accounts, [], "parent")

    assert result.eliminations == ()
    assert result.consolidated_closing["Intercompany Receivable"] == Decimal("500.00")


def test_custom_intercompany_account_names():
    group = replace(
        PARENT,
        policy=EntityPolicy(
            intercompany=IntercompanyPolicy(ar_account="Due From Sub", ap_account="Due To Parent")
        ),
    )
    accounts = {
        "parent": _accounts("parent", Due_From_Sub="75"),
        "sub": _accounts("sub", Due_To_Parent="-75"),
    }

    result = consolidate_group([group, SUB], accounts, [], "parent")

    assert result.consolidated_closing["Due From Sub"] == Decimal("0")
    assert len(result.eliminations) == 2


def test_excluded_entities_are_not_summed():
    accounts = {
        "parent": _accounts("parent", Cash="100"),
        "assoc": _accounts("assoc", Cash="40"),
        "out": _accounts("out", Cash="1000"),
    }

    result = consolidate_group([PARENT, ASSOCIATE, OUTSIDER], accounts, [], "parent")

    assert result.included_entity_ids == ("parent", "assoc")
    # Equity-method entities are summed in full
    assert result.consolidated_closing["Cash"] == Decimal("140.00")
    assert [b.entity_id for b in result.entity_balances] == ["parent", "assoc"]


def test_unknown_group_gives_empty_result():
    result = consolidate_group([PARENT, SUB], {}, [], "missing")
    assert result.included_entity_ids == ()
    assert result.consolidated_closing == {}
