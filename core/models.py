"""
Data models for the distress scanner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, Optional, Tuple


# Sub-score ceilings
MAX_DISTRESS_SCORE = 50
MAX_DOM_SCORE = 30
MAX_VACANCY_SCORE = 20

# "Show everything" bounds used by the default filter state
PRICE_MIN_DEFAULT = 0
PRICE_MAX_DEFAULT = 999_999_999
DOM_MIN_DEFAULT = 0
DOM_MAX_DEFAULT = 9_999


class Priority(Enum):
    """
    Triage bucket derived from the total score.

    High Priority: score >= 60
    Monitor: 35 <= score < 60
    Low: score < 35
    """
    HIGH = "High Priority"
    MONITOR = "Monitor"
    LOW = "Low"

    @classmethod
    def from_string(cls, value: str) -> Optional["Priority"]:
        """Convert a label to Priority, case-insensitive."""
        normalised = value.lower().strip()
        for member in cls:
            if member.value.lower() == normalised:
                return member
        return None


ALL_PRIORITIES: FrozenSet[Priority] = frozenset(Priority)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Result of scoring one listing description and DOM value."""

    distress_score: int
    dom_score: int
    vacancy_score: int
    priority: Priority
    matched_keywords: Tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return self.distress_score + self.dom_score + self.vacancy_score


@dataclass(frozen=True)
class ScoredProperty:
    """
    A listing row after column mapping, price parsing and scoring.

    Records are immutable. Re-scoring a batch produces new records.
    """

    # Identity / display
    address: str = ""
    suburb: str = ""
    state: str = ""
    postcode: str = ""
    property_type: str = ""
    agent_name: str = ""
    agency: str = ""
    listing_url: str = ""
    council_area: str = ""
    listing_type: str = ""
    description: str = ""
    land_area: str = ""
    building_area: str = ""
    price_text: str = ""

    # Parsed numerics
    asking_price: Optional[int] = None
    days_on_market: Optional[int] = None

    # Scores
    distress_score: int = 0
    dom_score: int = 0
    vacancy_score: int = 0
    priority: Priority = Priority.LOW
    distress_keywords: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate sub-score ranges."""
        if not 0 <= self.distress_score <= MAX_DISTRESS_SCORE:
            raise ValueError(f"distress_score must be between 0 and {MAX_DISTRESS_SCORE}")
        if not 0 <= self.dom_score <= MAX_DOM_SCORE:
            raise ValueError(f"dom_score must be between 0 and {MAX_DOM_SCORE}")
        if not 0 <= self.vacancy_score <= MAX_VACANCY_SCORE:
            raise ValueError(f"vacancy_score must be between 0 and {MAX_VACANCY_SCORE}")

    @property
    def score(self) -> int:
        """Total distress score (0-100)."""
        return self.distress_score + self.dom_score + self.vacancy_score

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation."""
        return {
            "address": self.address,
            "suburb": self.suburb,
            "state": self.state,
            "postcode": self.postcode,
            "property_type": self.property_type,
            "agent_name": self.agent_name,
            "agency": self.agency,
            "listing_url": self.listing_url,
            "council_area": self.council_area,
            "listing_type": self.listing_type,
            "description": self.description,
            "land_area": self.land_area,
            "building_area": self.building_area,
            "price_text": self.price_text,
            "asking_price": self.asking_price,
            "days_on_market": self.days_on_market,
            "score": self.score,
            "priority": self.priority.value,
            "distress_score": self.distress_score,
            "dom_score": self.dom_score,
            "vacancy_score": self.vacancy_score,
            "distress_keywords": list(self.distress_keywords),
        }


@dataclass
class FilterState:
    """
    Query parameters for a scored batch.

    The default instance shows everything. Empty property type and suburb
    selections mean "no restriction"; an empty priority selection matches
    nothing.
    """

    search: str = ""
    priorities: FrozenSet[Priority] = field(default_factory=lambda: ALL_PRIORITIES)
    property_types: FrozenSet[str] = field(default_factory=frozenset)
    suburbs: FrozenSet[str] = field(default_factory=frozenset)
    price_min: int = PRICE_MIN_DEFAULT
    price_max: int = PRICE_MAX_DEFAULT
    score_min: int = 0
    dom_min: int = DOM_MIN_DEFAULT
    dom_max: int = DOM_MAX_DEFAULT

    def __post_init__(self):
        """Validate ranges after initialization."""
        self.priorities = frozenset(self.priorities)
        self.property_types = frozenset(self.property_types)
        self.suburbs = frozenset(self.suburbs)
        if self.price_max < self.price_min:
            raise ValueError("price_max must be >= price_min")
        if self.dom_max < self.dom_min:
            raise ValueError("dom_max must be >= dom_min")
        if self.score_min < 0 or self.score_min > 100:
            raise ValueError("score_min must be between 0 and 100")
