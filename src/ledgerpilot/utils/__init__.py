"""Utility functions for ledgerpilot."""

from ledgerpilot.utils.date_parser import parse_date, parse_period
from ledgerpilot.utils.amount_parser import parse_amount, parse_rate, round_money
from ledgerpilot.utils.account_resolver import resolve_account, resolve_account_name

__all__ = [
    "parse_date",
    "parse_period",
    "parse_amount",
    "parse_rate",
    "round_money",
    "resolve_account",
    "resolve_account_name",
]
