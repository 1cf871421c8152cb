"""Date parsing utilities.

Two audiences use this module: the CLI, which parses explicit option values
("2025-03-01", "today", "last-month"), and the text event extractor, which
has to find a date phrase somewhere inside a free-text clause.
"""

import re
from datetime import date, timedelta
from typing import Iterator, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

MONTHS = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

_MONTH_NAME = (
    r"(jan(?:uary)?|feb(?:ruary)?|mar(?:ch)?|apr(?:il)?|may|june?|july?"
    r"|aug(?:ust)?|sep(?:t(?:ember)?)?|oct(?:ober)?|nov(?:ember)?|dec(?:ember)?)"
)

ORDINAL_RE = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b", re.IGNORECASE)
ISO_DATE_RE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
SLASH_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{4}|\d{2}))?\b")
DAY_MONTH_RE = re.compile(
    rf"\b(\d{{1,2}})\s+{_MONTH_NAME}\b(?:,?\s+(\d{{4}})\b)?", re.IGNORECASE
)
MONTH_DAY_RE = re.compile(
    rf"\b{_MONTH_NAME}\s+(\d{{1,2}})\b(?:,?\s+(\d{{4}})\b)?", re.IGNORECASE
)
PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


def strip_ordinals(text: str) -> str:
    """Turn "25th" into "25" so day numbers match the date patterns."""
    return ORDINAL_RE.sub(r"\1", text)


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _infer_year(month: int, day: int, today: date) -> Optional[date]:
    """Place a year-less day/month in the current year, or last year if that
    would put it in the future."""
    candidate = _safe_date(today.year, month, day)
    if candidate is None:
        return _safe_date(today.year - 1, month, day)
    if candidate > today:
        return _safe_date(today.year - 1, month, day)
    return candidate


def _iter_dates(
    text: str, today: date
) -> Iterator[tuple[tuple[int, int], Optional[date]]]:
    """Yield (span, date) for every date-shaped phrase, pattern by pattern.

    The date is None when the phrase is not a real calendar date ("31/02",
    US-style "12/25"); its span is still reported so it can be scrubbed.

    Spans refer to ``text`` as given, so callers that scrub should pass the
    ordinal-stripped text.
    """
    for match in ISO_DATE_RE.finditer(text):
        parsed = _safe_date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        yield match.span(), parsed

    for match in SLASH_DATE_RE.finditer(text):
        day, month, year = int(match.group(1)), int(match.group(2)), match.group(3)
        if year is None:
            parsed = _infer_year(month, day, today)
        else:
            full_year = int(year) + 2000 if len(year) == 2 else int(year)
            parsed = _safe_date(full_year, month, day)
        yield match.span(), parsed

    for match in DAY_MONTH_RE.finditer(text):
        day = int(match.group(1))
        month = MONTHS[match.group(2)[:3].lower()]
        year = match.group(3)
        if year is None:
            parsed = _infer_year(month, day, today)
        else:
            parsed = _safe_date(int(year), month, day)
        yield match.span(), parsed

    for match in MONTH_DAY_RE.finditer(text):
        month = MONTHS[match.group(1)[:3].lower()]
        day = int(match.group(2))
        year = match.group(3)
        if year is None:
            parsed = _infer_year(month, day, today)
        else:
            parsed = _safe_date(int(year), month, day)
        yield match.span(), parsed


def find_date_in_text(text: str, today: Optional[date] = None) -> Optional[date]:
    """Find the first recognizable date in a piece of free text.

    Supported forms, tried in this order:
    - ISO: "2025-12-25"
    - Slash, day first: "25/12", "25/12/25", "25/12/2025"
    - Day month: "25 December", "25th Dec 2025"
    - Month day: "December 25", "Dec 25th, 2025"

    When the year is omitted it is taken from ``today``, rolled back one year
    if the result would lie in the future.

    Args:
        text: Free text to search
        today: Reference date for year inference (defaults to date.today())

    Returns:
        The first valid date found, or None
    """
    today = today or date.today()
    for _span, parsed in _iter_dates(strip_ordinals(text), today):
        if parsed is not None:
            return parsed
    return None


def scrub_dates(text: str, today: Optional[date] = None) -> str:
    """Blank out ordinals and every date-shaped phrase in ``text``, valid or not.

    The extractor runs amount and category detection on the scrubbed text so
    that a day-of-month or a year is never taken for an amount.
    """
    today = today or date.today()
    stripped = strip_ordinals(text)
    spans = sorted(span for span, _parsed in _iter_dates(stripped, today))
    if not spans:
        return stripped

    pieces = []
    cursor = 0
    for start, end in spans:
        if start < cursor:
            start = cursor
        if start >= end:
            continue
        pieces.append(stripped[cursor:start])
        pieces.append(" ")
        cursor = end
    pieces.append(stripped[cursor:])
    return "".join(pieces)


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date option value into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "January 15, 2024", "15/01/2024"
    - Relative dates: "today", "yesterday", "tomorrow"

    Args:
        date_str: Date string
        today: Reference date for relative values (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    iso = ISO_DATE_RE.fullmatch(date_str)
    if iso:
        parsed = _safe_date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))
        if parsed is None:
            raise ValueError(f"Could not parse date '{date_str}': invalid calendar date")
        return parsed

    try:
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_period(period_str: str, today: Optional[date] = None) -> str:
    """Parse a period option into canonical "YYYY-MM" form.

    Accepts "YYYY-MM" as well as "this-month", "last-month" and "next-month".

    Raises:
        ValueError: If the period cannot be parsed
    """
    period_str = period_str.strip().lower()
    today = today or date.today()

    relative = {
        "this-month": today,
        "last-month": today - relativedelta(months=1),
        "next-month": today + relativedelta(months=1),
    }
    if period_str in relative:
        return period_of(relative[period_str])

    match = PERIOD_RE.match(period_str)
    if match is None or not 1 <= int(match.group(2)) <= 12:
        raise ValueError(
            f"Unknown period: '{period_str}'. Use YYYY-MM, this-month, last-month or next-month"
        )
    return period_str


def period_of(value: date) -> str:
    """Return the "YYYY-MM" period containing ``value``."""
    return value.strftime("%Y-%m")


def period_bounds(period: str) -> tuple[date, date]:
    """Return the first and last calendar day of a "YYYY-MM" period."""
    match = PERIOD_RE.match(period)
    if match is None:
        raise ValueError(f"Invalid period '{period}', expected YYYY-MM")
    start = date(int(match.group(1)), int(match.group(2)), 1)
    end = start + relativedelta(day=31)
    return start, end


def month_index(start: date, period: str) -> int:
    """Months elapsed from the month of ``start`` to ``period`` (0 = same month)."""
    period_start, _ = period_bounds(period)
    delta = relativedelta(period_start, start.replace(day=1))
    return delta.years * 12 + delta.months
