"""
Asking price parsing.

Listing exports carry the price as free text: "$1.2M", "$850k - $900k",
"1,250,000", "Contact Agent". parse_price() turns that into whole dollars or
None. It never raises on malformed text.
"""

import math
import re
from typing import Final, Optional


# Phrases meaning "no numeric price", even when digits are present
NO_PRICE_PATTERN: Final = re.compile(
    r"contact agent|poa|expressions? of interest|price on application"
    r"|price on request|undisclosed|by negotiation|for sale|just listed"
    r"|under contract|listing price not available|auction|submit all offers",
    re.IGNORECASE,
)

# $X[m|k] - $Y[m|k], hyphen or en-dash
RANGE_PATTERN: Final = re.compile(
    r"\$\s*([\d,.]+)\s*([mk])?\s*[-–]\s*\$\s*([\d,.]+)\s*([mk])?",
    re.IGNORECASE,
)

SINGLE_PATTERN: Final = re.compile(r"\$\s*([\d,.]+)\s*([mk])?", re.IGNORECASE)

PLAIN_NUMBER_PATTERN: Final = re.compile(r"^\d+(\.\d+)?$")

# Leading decimal prefix, e.g. "1.2" out of "1.2.3"
_DECIMAL_PREFIX: Final = re.compile(r"^(\d+(?:\.\d*)?|\.\d+)")

SUFFIX_MULTIPLIERS: Final[dict[str, int]] = {
    "m": 1_000_000,
    "k": 1_000,
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def _parse_decimal(digits: str) -> Optional[float]:
    match = _DECIMAL_PREFIX.match(digits.replace(",", ""))
    if not match:
        return None
    value = float(match.group(1))
    # Overlong digit runs overflow to inf
    if not math.isfinite(value):
        return None
    return value


def _to_amount(digits: str, suffix: Optional[str]) -> Optional[int]:
    """Apply an m/k suffix to a comma-grouped number and round."""
    value = _parse_decimal(digits)
    if value is None:
        return None
    multiplier = SUFFIX_MULTIPLIERS.get((suffix or "").lower(), 1)
    amount = value * multiplier
    if not math.isfinite(amount):
        return None
    return round_half_up(amount)


def parse_price(raw) -> Optional[int]:
    """
    Extract an asking price in whole dollars from free text.

    Rules, first match wins:
    1. Empty input -> None
    2. "Contact agent"-style marker -> None
    3. "$X - $Y" range -> rounded mean, or the single parseable bound
    4. "$X" -> value with m/k multiplier
    5. Plain number after stripping ",", "$" and whitespace
    6. Otherwise None

    Args:
        raw: Price cell from the export (any type; None allowed)

    Returns:
        Price in dollars, or None when no numeric price can be read
    """
    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None

    if NO_PRICE_PATTERN.search(text):
        return None

    range_match = RANGE_PATTERN.search(text)
    if range_match:
        low = _to_amount(range_match.group(1), range_match.group(2))
        high = _to_amount(range_match.group(3), range_match.group(4))
        if low is not None and high is not None:
            return round_half_up((low + high) / 2)
        if low is not None:
            return low
        if high is not None:
            return high

    single_match = SINGLE_PATTERN.search(text)
    if single_match:
        amount = _to_amount(single_match.group(1), single_match.group(2))
        if amount is not None:
            return amount

    plain = re.sub(r"[,$\s]", "", text)
    if PLAIN_NUMBER_PATTERN.match(plain):
        value = float(plain)
        if math.isfinite(value):
            return round_half_up(value)

    return None
