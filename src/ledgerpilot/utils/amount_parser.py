"""Amount parsing and money rounding utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union
import re

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

NUMBER_RE = re.compile(r"(\d{1,3}(?:,\d{3})+|\d+)(?:\.(\d{1,2}))?")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert an int, float, str or Decimal to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Round to cents, half away from zero (2.345 -> 2.35, -2.345 -> -2.35)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "AED 250"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded to cents

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and codes
    amount_str = re.sub(r"[$€£]|\b(?:aed|usd|eur)\b", "", amount_str, flags=re.IGNORECASE)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if is_negative:
        amount = -amount
    return round_money(amount)


def find_amount_in_text(text: str) -> Optional[Decimal]:
    """Pick the monetary amount out of a (date-scrubbed) clause.

    The last number in the clause wins; amounts are conventionally stated
    after dates and quantities ("on the 3rd I bought 2 chairs for 150").
    Thousands separators and up to two decimals are accepted. Zero is not an
    amount.

    Returns:
        Decimal amount rounded to cents, or None if there is no usable number
    """
    matches = list(NUMBER_RE.finditer(text))
    if not matches:
        return None

    last = matches[-1]
    raw = last.group(1).replace(",", "")
    if last.group(2):
        raw = f"{raw}.{last.group(2)}"

    amount = round_money(Decimal(raw))
    if amount <= 0:
        return None
    return amount


def parse_rate(rate_str: str) -> Decimal:
    """Parse a rate given as a fraction ("0.05") or a percentage ("5%").

    Raises:
        ValueError: If the rate cannot be parsed
    """
    text = rate_str.strip()
    try:
        if text.endswith("%"):
            return Decimal(text[:-1].strip()) / 100
        return Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Could not parse rate '{rate_str}'")
