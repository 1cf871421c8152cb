"""Tests for the text event extractor."""

from datetime import date
from decimal import Decimal
from ledgerpilot.domain.entities import ActionKind, Currency
from ledgerpilot.domain.extractor import (
    extract_events,
    parse_action,
    parse_currency,
    split_clauses,
)

TODAY = date(2025, 12, 31)


def test_borrow_with_two_digit_year():
    """Test the canonical borrowing sentence."""
    events = extract_events("on 25/12/25 I borrowed 1000", today=TODAY)

    assert len(events) == 1
    event = events[0]
    assert event.action == ActionKind.BORROW
    assert event.amount == Decimal("1000.00")
    assert event.date == date(2025, 12, 25)


def test_borrow_from_a_friend():
    events = extract_events("On 25/12/25 I borrowed 1000 from a friend", today=TODAY)

    assert len(events) == 1
    assert events[0].counterparty == "Friend"


def test_buy_worth_of_goods():
    """Amount, currency and category hint of a buy clause."""
    events = extract_events("I bought 300 AED worth of goods", today=TODAY)

    assert len(events) == 1
    event = events[0]
    assert event.action == ActionKind.BUY
    assert event.amount == Decimal("300.00")
    assert event.currency == Currency.AED
    assert event.category_hint == "goods"
    assert event.date is None


def test_sell_with_counterparty_and_item():
    events = extract_events("Sold consulting services to Acme for 10,000", today=TODAY)

    assert len(events) == 1
    event = events[0]
    assert event.action == ActionKind.SELL
    assert event.amount == Decimal("10000.00")
    assert event.counterparty == "Acme"
    assert event.item == "consulting services to Acme"
    assert event.category_hint is None


def test_lend_is_not_read_as_borrow():
    events = extract_events("I loaned 500 to John", today=TODAY)

    assert len(events) == 1
    assert events[0].action == ActionKind.LEND
    assert events[0].counterparty == "John"


def test_spend_category_hint():
    events = extract_events("paid 50 on rent", today=TODAY)

    assert len(events) == 1
    assert events[0].action == ActionKind.SPEND
    assert events[0].category_hint == "rent"


def test_multiple_clauses_carry_currency():
    """A currency named once applies to later clauses."""
    events = extract_events("Bought a laptop for 4200 AED then paid 150 for fuel", today=TODAY)

    assert [e.action for e in events] == [ActionKind.BUY, ActionKind.SPEND]
    assert [e.amount for e in events] == [Decimal("4200.00"), Decimal("150.00")]
    assert events[0].item == "a laptop"
    assert events[1].currency == Currency.AED
    assert events[1].category_hint == "fuel"


def test_date_carries_to_later_sentence():
    events = extract_events(
        "On 2025-03-01 bought paper for 50. Then paid 20 for coffee", today=TODAY
    )

    assert len(events) == 2
    assert events[0].date == date(2025, 3, 1)
    assert events[1].date == date(2025, 3, 1)


def test_later_date_overrides_carried_date():
    events = extract_events(
        "On 2025-03-01 paid 10 for tea. On 2025-03-05 paid 20 for coffee", today=TODAY
    )

    assert [e.date for e in events] == [date(2025, 3, 1), date(2025, 3, 5)]


def test_date_number_is_not_an_amount():
    events = extract_events("On 25/12/2025 paid 150 for fuel", today=TODAY)

    assert len(events) == 1
    assert events[0].amount == Decimal("150.00")


def test_invalid_calendar_date_is_not_an_amount():
    """A date-shaped token that is not a real date is still no amount."""
    events = extract_events("I paid 50 on 31/02", today=date(2026, 10, 16))

    assert len(events) == 1
    assert events[0].amount == Decimal("50.00")
    assert events[0].date is None


def test_month_first_slash_date_is_not_an_amount():
    events = extract_events("I paid 100 on 12/25", today=TODAY)

    assert len(events) == 1
    assert events[0].amount == Decimal("100.00")


def test_clause_without_amount_is_skipped():
    events = extract_events("I bought a laptop. Then paid 20 for coffee", today=TODAY)

    assert len(events) == 1
    assert events[0].action == ActionKind.SPEND


def test_no_events():
    assert extract_events("Hello world", today=TODAY) == []
    assert extract_events("", today=TODAY) == []
    assert extract_events("   ", today=TODAY) == []


def test_whole_text_retry_when_no_clause_matches():
    """Action and amount in different clauses still give one event."""
    events = extract_events("bought. 100", today=TODAY)

    assert len(events) == 1
    assert events[0].action == ActionKind.BUY
    assert events[0].amount == Decimal("100.00")


def test_extraction_is_deterministic():
    text = "On 25/12/25 I borrowed 1000 from a friend, then spent 200 on fuel"
    assert extract_events(text, today=TODAY) == extract_events(text, today=TODAY)


def test_split_clauses():
    assert split_clauses("Paid 10. Bought 20; sold 30 and then lent 5") == [
        "Paid 10",
        "Bought 20",
        "sold 30",
        "lent 5",
    ]


def test_parse_action_and_currency():
    assert parse_action("we purchased stock") == ActionKind.BUY
    assert parse_action("nothing happened") is None
    assert parse_currency("cost $40") == Currency.USD
    assert parse_currency("50 euros") == Currency.EUR
    assert parse_currency("50 dhs") == Currency.AED
    assert parse_currency("fifty") is None
