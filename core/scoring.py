"""
Distress scoring logic.
"""

import math
import re
from typing import Final, Optional, Tuple, Union

from .models import Priority, ScoreBreakdown


# Phrases signalling seller urgency or financial distress
DISTRESS_KEYWORDS: Final[Tuple[str, ...]] = (
    "mortgagee",
    "receivership",
    "must sell",
    "reduced",
    "all offers considered",
    "vacant possession",
    "liquidation",
    "administration",
    "urgent",
    "below valuation",
    "motivated vendor",
    "deadline",
    "court ordered",
    "bank instructed",
    "priced to sell",
    "price drop",
    "fire sale",
    "distressed",
    "under instructions",
    "expressions of interest",
)

TENANCY_PATTERN: Final = re.compile(
    r"leased|tenant|lease|tenancy|net income", re.IGNORECASE
)

_LEADING_INT: Final = re.compile(r"^\s*([+-]?\d+)")

# Longer digit runs are treated as garbage (CPython refuses to convert them)
MAX_DOM_DIGITS: Final = 4300


def parse_days_on_market(value: Union[int, str, None]) -> Optional[int]:
    """
    Read days on market as an integer.

    Empty strings and "-" mean the value is absent. Strings are read up to the
    first non-digit ("200 days" -> 200).
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    text = str(value)
    if text == "" or text == "-":
        return None
    match = _LEADING_INT.match(text)
    if not match:
        return None
    digits = match.group(1)
    if len(digits.lstrip("+-")) > MAX_DOM_DIGITS:
        return None
    return int(digits)


def priority_for(total: int) -> Priority:
    """Bucket a total score into a priority label."""
    if total >= DistressScorer.HIGH_PRIORITY_THRESHOLD:
        return Priority.HIGH
    elif total >= DistressScorer.MONITOR_THRESHOLD:
        return Priority.MONITOR
    else:
        return Priority.LOW


class DistressScorer:
    """
    Scores a listing for signs of a distressed or motivated seller.

    Scoring methodology:
    - Distress Score (0-50): distinct distress keywords in the description
    - DOM Score (0-30): how long the listing has been on the market
    - Vacancy Score (0-20): vacant possession, or no tenancy language

    The total (0-100) buckets into High Priority / Monitor / Low.
    """

    # Keyword count -> distress score (4 or more keywords = 50)
    KEYWORD_SCORES = (0, 15, 30, 40, 50)

    # Days on market buckets
    DOM_LONG_DAYS = 180  # > 180 days
    DOM_EXTENDED_DAYS = 121  # 121-180 days
    DOM_MODERATE_DAYS = 61  # 61-120 days
    DOM_UNKNOWN_SCORE = 5

    VACANT_POSSESSION_SCORE = 20
    NO_TENANCY_SCORE = 10

    # Priority thresholds (inclusive lower bounds)
    HIGH_PRIORITY_THRESHOLD = 60
    MONITOR_THRESHOLD = 35

    def __init__(self, keywords: Tuple[str, ...] = DISTRESS_KEYWORDS):
        """
        Initialize scorer.

        Args:
            keywords: Distress phrases to look for (lowercase)
        """
        self.keywords = keywords

    def score(
        self,
        description: Optional[str],
        days_on_market: Union[int, str, None] = None,
    ) -> ScoreBreakdown:
        """
        Score a single listing.

        Args:
            description: Listing description text
            days_on_market: Parsed or raw days on market

        Returns:
            ScoreBreakdown with sub-scores, priority and matched keywords.
        """
        desc = (description or "").lower()

        matched = self._match_keywords(desc)
        distress_score = self._calculate_distress_score(len(matched))
        dom_score = self._calculate_dom_score(parse_days_on_market(days_on_market))
        vacancy_score = self._calculate_vacancy_score(desc)

        total = distress_score + dom_score + vacancy_score

        return ScoreBreakdown(
            distress_score=distress_score,
            dom_score=dom_score,
            vacancy_score=vacancy_score,
            priority=priority_for(total),
            matched_keywords=matched,
        )

    def _match_keywords(self, desc: str) -> Tuple[str, ...]:
        """Distinct keywords present in the description, in list order."""
        return tuple(kw for kw in self.keywords if kw in desc)

    def _calculate_distress_score(self, keyword_count: int) -> int:
        index = min(keyword_count, len(self.KEYWORD_SCORES) - 1)
        return self.KEYWORD_SCORES[index]

    def _calculate_dom_score(self, days: Optional[int]) -> int:
        """
        Calculate DOM score (0-30).

        Unknown DOM scores 5, above a fresh listing but below a stale one.
        """
        if days is None:
            return self.DOM_UNKNOWN_SCORE

        if days > self.DOM_LONG_DAYS:
            return 30
        elif days >= self.DOM_EXTENDED_DAYS:
            return 20
        elif days >= self.DOM_MODERATE_DAYS:
            return 10
        else:
            return 0

    def _calculate_vacancy_score(self, desc: str) -> int:
        """
        Calculate vacancy score (0-20).

        "vacant possession" also counts as a distress keyword; both apply.
        """
        if "vacant possession" in desc:
            return self.VACANT_POSSESSION_SCORE
        if not TENANCY_PATTERN.search(desc):
            return self.NO_TENANCY_SCORE
        return 0


_default_scorer = DistressScorer()


def score_listing(
    description: Optional[str],
    days_on_market: Union[int, str, None] = None,
) -> ScoreBreakdown:
    """Score with the default keyword list."""
    return _default_scorer.score(description, days_on_market)
