"""Tests for the entry synthesizer and the compose pipeline."""

import pytest
from datetime import date
from decimal import Decimal
from ledgerpilot.domain.balances import is_balanced
from ledgerpilot.domain.chart import default_chart
from ledgerpilot.domain.entities import (
    ActionKind,
    ComposerDefaults,
    Currency,
    EntrySource,
    JournalLine,
    ParsedEvent,
)
from ledgerpilot.domain import synthesizer
from ledgerpilot.domain.synthesizer import (
    PostingContext,
    build_template_lines,
    compose_entries,
    split_vat,
    synthesize_entry,
)

TODAY = date(2025, 12, 31)
CHART = [name for name, _side in default_chart()]
CONTEXT = PostingContext(date=TODAY, currency=Currency.AED)


def _event(action, amount, raw="test", **kwargs):
    return ParsedEvent(action=action, amount=Decimal(amount), raw=raw, **kwargs)


def _lines(entry):
    return [(ln.account, ln.debit, ln.credit) for ln in entry.lines]


def test_split_vat_inclusive():
    split = split_vat(Decimal("300"), Decimal("0.05"), inclusive=True)
    assert split.base == Decimal("285.71")
    assert split.vat == Decimal("14.29")
    assert split.total == Decimal("300.00")


def test_split_vat_exclusive():
    split = split_vat(Decimal("100"), Decimal("0.05"), inclusive=False)
    assert split.base == Decimal("100.00")
    assert split.vat == Decimal("5.00")
    assert split.total == Decimal("105.00")


def test_split_vat_zero_rate():
    split = split_vat(Decimal("80"), Decimal("0"), inclusive=True)
    assert (split.base, split.vat, split.total) == (Decimal("80.00"), Decimal("0.00"), Decimal("80.00"))


def test_borrow_template():
    entry = synthesize_entry(_event(ActionKind.BORROW, "1000"), ComposerDefaults(), CONTEXT)
    assert _lines(entry) == [
        ("Cash", Decimal("1000.00"), Decimal("0.00")),
        ("Loan Payable", Decimal("0.00"), Decimal("1000.00")),
    ]


def test_lend_template():
    entry = synthesize_entry(_event(ActionKind.LEND, "250"), ComposerDefaults(), CONTEXT)
    assert _lines(entry) == [
        ("Loan Receivable", Decimal("250.00"), Decimal("0.00")),
        ("Cash", Decimal("0.00"), Decimal("250.00")),
    ]


def test_buy_template_with_inclusive_vat():
    """Test the buy template with VAT included in the amount."""
    entry = synthesize_entry(
        _event(ActionKind.BUY, "300"), ComposerDefaults(), CONTEXT, allowed_accounts=CHART
    )
    assert _lines(entry) == [
        ("Purchases / Expense", Decimal("285.71"), Decimal("0.00")),
        ("Input VAT", Decimal("14.29"), Decimal("0.00")),
        ("Cash", Decimal("0.00"), Decimal("300.00")),
    ]


def test_buy_on_account_without_vat():
    defaults = ComposerDefaults(vat_enabled=False, use_ar_ap=True)
    entry = synthesize_entry(_event(ActionKind.BUY, "120"), defaults, CONTEXT)
    assert _lines(entry) == [
        ("Purchases / Expense", Decimal("120.00"), Decimal("0.00")),
        ("Accounts Payable", Decimal("0.00"), Decimal("120.00")),
    ]


def test_sell_template_with_inclusive_vat():
    entry = synthesize_entry(_event(ActionKind.SELL, "10000"), ComposerDefaults(), CONTEXT)
    assert _lines(entry) == [
        ("Cash", Decimal("10000.00"), Decimal("0.00")),
        ("Revenue", Decimal("0.00"), Decimal("9523.81")),
        ("Output VAT", Decimal("0.00"), Decimal("476.19")),
    ]


def test_sell_on_account_with_exclusive_vat():
    defaults = ComposerDefaults(vat_inclusive=False, use_ar_ap=True)
    entry = synthesize_entry(_event(ActionKind.SELL, "200"), defaults, CONTEXT)
    assert _lines(entry) == [
        ("Accounts Receivable", Decimal("210.00"), Decimal("0.00")),
        ("Revenue", Decimal("0.00"), Decimal("200.00")),
        ("Output VAT", Decimal("0.00"), Decimal("10.00")),
    ]


def test_spend_ignores_vat():
    entry = synthesize_entry(_event(ActionKind.SPEND, "150"), ComposerDefaults(), CONTEXT)
    assert _lines(entry) == [
        ("Purchases / Expense", Decimal("150.00"), Decimal("0.00")),
        ("Cash", Decimal("0.00"), Decimal("150.00")),
    ]


def test_category_hint_picks_matching_account():
    chart = CHART + ["Rent Expense"]
    event = _event(ActionKind.SPEND, "50", category_hint="rent")
    entry = synthesize_entry(event, ComposerDefaults(), CONTEXT, allowed_accounts=chart)
    assert entry.lines[0].account == "Rent Expense"


def test_category_hint_without_match_uses_default_expense():
    event = _event(ActionKind.SPEND, "50", category_hint="rent")
    entry = synthesize_entry(event, ComposerDefaults(), CONTEXT, allowed_accounts=CHART)
    assert entry.lines[0].account == "Purchases / Expense"


def test_unresolved_debit_falls_back_to_default_expense():
    chart = ["Cash", "Purchases / Expense"]
    entry = synthesize_entry(_event(ActionKind.LEND, "75"), ComposerDefaults(), CONTEXT, chart)
    assert [ln.account for ln in entry.lines] == ["Purchases / Expense", "Cash"]


def test_unresolved_credit_keeps_its_name():
    chart = ["Cash", "Purchases / Expense"]
    entry = synthesize_entry(_event(ActionKind.BORROW, "75"), ComposerDefaults(), CONTEXT, chart)
    assert [ln.account for ln in entry.lines] == ["Cash", "Loan Payable"]


def test_event_date_and_currency_override_context():
    event = _event(ActionKind.SPEND, "10", date=date(2025, 1, 2), currency=Currency.USD)
    entry = synthesize_entry(event, ComposerDefaults(), CONTEXT)
    assert entry.date == date(2025, 1, 2)
    assert entry.currency == Currency.USD
    assert entry.source == EntrySource.SAVED


def test_memo_names_action_and_counterparty():
    event = _event(ActionKind.BORROW, "1000", raw="I borrowed 1000 from a friend", counterparty="Friend")
    entry = synthesize_entry(event, ComposerDefaults(), CONTEXT)
    assert entry.memo == "BORROW - Friend - I borrowed 1000 from a friend"


@pytest.mark.parametrize("action", list(ActionKind))
@pytest.mark.parametrize("amount", ["0.01", "99.99", "100", "333.33", "1234567.89"])
@pytest.mark.parametrize("inclusive", [True, False])
def test_templates_always_balance(action, amount, inclusive):
    defaults = ComposerDefaults(vat_rate=Decimal("0.05"), vat_inclusive=inclusive)
    lines = build_template_lines(_event(action, amount), defaults)
    debits = sum(ln.debit for ln in lines)
    credits = sum(ln.credit for ln in lines)
    assert abs(debits - credits) <= Decimal("0.01")


def test_compose_borrow_sentence():
    """Test the canonical borrowing sentence end to end."""
    result = compose_entries("on 25/12/25 I borrowed 1000", allowed_accounts=CHART, today=TODAY)

    assert len(result.events) == 1
    assert len(result.entries) == 1
    entry = result.entries[0]
    assert entry.date == date(2025, 12, 25)
    assert _lines(entry) == [
        ("Cash", Decimal("1000.00"), Decimal("0.00")),
        ("Loan Payable", Decimal("0.00"), Decimal("1000.00")),
    ]
    assert result.unresolved == ()


def test_compose_buy_goods_with_vat():
    result = compose_entries("I bought 300 AED worth of goods", allowed_accounts=CHART, today=TODAY)

    entry = result.entries[0]
    assert entry.currency == Currency.AED
    assert entry.date == TODAY
    assert _lines(entry) == [
        ("Purchases / Expense", Decimal("285.71"), Decimal("0.00")),
        ("Input VAT", Decimal("14.29"), Decimal("0.00")),
        ("Cash", Decimal("0.00"), Decimal("300.00")),
    ]


def test_compose_uses_default_currency_when_text_names_none():
    defaults = ComposerDefaults(currency=Currency.USD)
    result = compose_entries("paid 20 for coffee", defaults=defaults, today=TODAY)
    assert result.entries[0].currency == Currency.USD


def test_compose_reports_unresolved_accounts():
    chart = ["Cash", "Purchases / Expense"]
    result = compose_entries("borrowed 500 from the bank", allowed_accounts=chart, today=TODAY)

    assert len(result.entries) == 1
    assert result.unresolved == ("Loan Payable",)


def test_compose_is_deterministic():
    text = "Bought a laptop for 4200 AED then paid 150 for fuel"
    first = compose_entries(text, allowed_accounts=CHART, entity_id="e1", today=TODAY)
    second = compose_entries(text, allowed_accounts=CHART, entity_id="e1", today=TODAY)

    assert first == second
    assert len({entry.id for entry in first.entries}) == 2


def test_composed_entries_balance():
    text = (
        "On 2025-03-01 bought stock for 1,234.56 then sold goods to Acme for 999.99. "
        "Lent 300 to John; borrowed 5000 from the bank and then paid 45.5 on fuel"
    )
    result = compose_entries(text, allowed_accounts=CHART, today=TODAY)

    assert len(result.entries) == 5
    assert all(is_balanced(entry) for entry in result.entries)


def _short_credit_for_borrow(real_builder):
    def build(event, defaults, category_account=None):
        if event.action == ActionKind.BORROW:
            return [
                JournalLine("Cash", event.amount, Decimal("0")),
                JournalLine("Loan Payable", Decimal("0"), event.amount - Decimal("1")),
            ]
        return real_builder(event, defaults, category_account)

    return build


def test_unbalanced_template_is_dropped(monkeypatch):
    monkeypatch.setattr(
        synthesizer, "build_template_lines", _short_credit_for_borrow(build_template_lines)
    )

    entry = synthesize_entry(_event(ActionKind.BORROW, "1000"), ComposerDefaults(), CONTEXT)

    assert entry is None


def test_compose_omits_unbalanced_entries(monkeypatch):
    monkeypatch.setattr(
        synthesizer, "build_template_lines", _short_credit_for_borrow(build_template_lines)
    )

    result = compose_entries(
        "Borrowed 1000 from the bank then paid 20 for coffee", allowed_accounts=CHART, today=TODAY
    )

    assert [event.action for event in result.events] == [ActionKind.BORROW, ActionKind.SPEND]
    assert len(result.entries) == 1
    assert _lines(result.entries[0]) == [
        ("Purchases / Expense", Decimal("20.00"), Decimal("0.00")),
        ("Cash", Decimal("0.00"), Decimal("20.00")),
    ]
