"""
Debt range parsing
Turns human-written loan size bands ("$5M - $25M", "$100M+", "0-5M")
into numeric intervals in dollars
"""

import math
import re
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel

MILLION = 1_000_000

# Enough digits to quantize any finite float exactly
EXACT = Context(prec=400)

# Leading float prefix, the way a browser's parseFloat reads "12.5abc" as 12.5
# and "Infinity" as inf
NUMBER_PREFIX = re.compile(r'[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)')


class NumericRange(BaseModel):
    """Closed interval; max is inf for "$X+" bands, either side nan if malformed"""
    min: float
    max: float


def parse_amount(token: str) -> float:
    """Parse one side of a range. "25M" -> 25000000.0, "5" -> 5.0, "abc" -> nan"""
    has_million = 'm' in token.lower()
    digits = token.replace('M', '').replace('m', '')
    match = NUMBER_PREFIX.match(digits)
    if not match:
        return math.nan
    value = float(match.group())
    return value * MILLION if has_million else value


def parse_debt_range(range_str: str) -> Optional[NumericRange]:
    """
    Parse a debt range string into a numeric range (in dollars).

    Supported formats include:
    - "$0 - $5M", "0-5M", "$0 to 5M" -> NumericRange(min=0, max=5000000)
    - "$100M+" -> NumericRange(min=100000000, max=inf)
    - "5" -> NumericRange(min=5, max=5), no magnitude is implied without M

    Never raises. Empty input gives None; text outside the grammar gives a
    range holding nan, which overlaps nothing.
    """
    if not range_str:
        return None

    cleaned = re.sub(r'\s', '', str(range_str)).replace(',', '').replace('$', '')

    open_ended = cleaned.endswith('+')
    if open_ended:
        cleaned = cleaned[:-1]

    if '-' in cleaned:
        parts = cleaned.split('-')
    elif 'to' in cleaned.lower():
        parts = re.split('to', cleaned, flags=re.IGNORECASE)
    else:
        value = parse_amount(cleaned)
        return NumericRange(min=value, max=math.inf if open_ended else value)

    low = parse_amount(parts[0])
    high = parse_amount(parts[1]) if parts[1] else low
    return NumericRange(min=low, max=math.inf if open_ended else high)


def ranges_overlap(a: NumericRange, b: NumericRange) -> bool:
    """Closed interval overlap. Any nan bound makes this False."""
    return a.min <= b.max and a.max >= b.min


def round_half_up(value: float, places: int = 0) -> Decimal:
    """Round halves away from zero: 2.5 -> 3, 1.25 -> 1.3 (places=1)"""
    rounded = Decimal(abs(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP, context=EXACT)
    return -rounded if value < 0 else rounded


def format_to_million(amount: float) -> str:
    """2000000 -> "$2M", 4500000 -> "$5M" """
    millions = amount / MILLION
    if math.isnan(millions):
        return "$NaNM"
    if math.isinf(millions):
        return "$-InfinityM" if millions < 0 else "$InfinityM"
    return f"${round_half_up(millions)}M"


def derive_debt_range(min_deal_size: float, max_deal_size: float) -> str:
    """Build a range string from deal size bounds, e.g. "$2M - $50M" """
    return f"{format_to_million(min_deal_size)} - {format_to_million(max_deal_size)}"
