"""
Query Engine for scored listing batches

Implements the filter panel and sortable table behind the scanner:
- Free-text search (address, suburb, property type, description)
- Priority, property type and suburb selections
- Price range (unpriced listings always pass)
- Score floor
- Days-on-market range (unknown DOM compared as 0)
- Stable sort with missing values last in either direction
"""

import unicodedata
from typing import Iterable, List, Optional

from .models import FilterState, Priority, ScoredProperty


# =============================================================================
# Configuration Constants
# =============================================================================

SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_DIRECTIONS = (SORT_ASC, SORT_DESC)

DEFAULT_SORT_KEY = "score"
DEFAULT_SORT_DIR = SORT_DESC

STRING_SORT_KEYS = frozenset({
    "address",
    "suburb",
    "state",
    "postcode",
    "property_type",
    "priority",
    "agent_name",
    "agency",
})

NUMERIC_SORT_KEYS = frozenset({
    "asking_price",
    "days_on_market",
    "score",
    "distress_score",
    "dom_score",
    "vacancy_score",
})

SORT_KEYS = STRING_SORT_KEYS | NUMERIC_SORT_KEYS

SEARCH_FIELDS = ("address", "suburb", "property_type", "description")


class ListingFilter:
    """
    Applies a FilterState to scored properties.

    A property must pass ALL predicates to be kept.
    """

    def __init__(self, filters: Optional[FilterState] = None):
        self._filters = filters or FilterState()

    def apply(self, properties: Iterable[ScoredProperty]) -> List[ScoredProperty]:
        """Return properties passing every predicate, in input order."""
        f = self._filters
        result = list(properties)

        if f.search:
            result = self.filter_by_search(result, f.search)
        result = self.filter_by_priority(result, f.priorities)
        result = self.filter_by_property_type(result, f.property_types)
        result = self.filter_by_suburb(result, f.suburbs)
        result = self.filter_by_price(result, f.price_min, f.price_max)
        result = self.filter_by_score(result, f.score_min)
        result = self.filter_by_days_on_market(result, f.dom_min, f.dom_max)

        return result

    @staticmethod
    def filter_by_search(
        properties: List[ScoredProperty],
        search: str,
    ) -> List[ScoredProperty]:
        """Case-insensitive substring match on any search field."""
        needle = search.lower()
        return [
            p for p in properties
            if any(needle in (getattr(p, name) or "").lower() for name in SEARCH_FIELDS)
        ]

    @staticmethod
    def filter_by_priority(
        properties: List[ScoredProperty],
        priorities: Iterable[Priority],
    ) -> List[ScoredProperty]:
        """Keep selected priorities. An empty selection keeps nothing."""
        selected = set(priorities)
        return [p for p in properties if p.priority in selected]

    @staticmethod
    def filter_by_property_type(
        properties: List[ScoredProperty],
        property_types: Iterable[str],
    ) -> List[ScoredProperty]:
        """Keep selected property types. An empty selection keeps all."""
        selected = set(property_types)
        if not selected:
            return properties
        return [p for p in properties if p.property_type in selected]

    @staticmethod
    def filter_by_suburb(
        properties: List[ScoredProperty],
        suburbs: Iterable[str],
    ) -> List[ScoredProperty]:
        """Keep selected suburbs. An empty selection keeps all."""
        selected = set(suburbs)
        if not selected:
            return properties
        return [p for p in properties if p.suburb in selected]

    @staticmethod
    def filter_by_price(
        properties: List[ScoredProperty],
        price_min: int,
        price_max: int,
    ) -> List[ScoredProperty]:
        """Inclusive price range. Listings without a price always pass."""
        return [
            p for p in properties
            if p.asking_price is None or price_min <= p.asking_price <= price_max
        ]

    @staticmethod
    def filter_by_score(
        properties: List[ScoredProperty],
        score_min: int,
    ) -> List[ScoredProperty]:
        return [p for p in properties if p.score >= score_min]

    @staticmethod
    def filter_by_days_on_market(
        properties: List[ScoredProperty],
        dom_min: int,
        dom_max: int,
    ) -> List[ScoredProperty]:
        """Inclusive DOM range. Unknown DOM is compared as 0."""
        return [
            p for p in properties
            if dom_min <= (p.days_on_market if p.days_on_market is not None else 0) <= dom_max
        ]


def apply_filters(
    properties: Iterable[ScoredProperty],
    filters: Optional[FilterState] = None,
) -> List[ScoredProperty]:
    """Filter properties with a FilterState (default: show everything)."""
    return ListingFilter(filters).apply(properties)


def _sort_value(prop: ScoredProperty, sort_key: str):
    value = getattr(prop, sort_key)
    if isinstance(value, Priority):
        value = value.value
    return value


def sort_properties(
    properties: Iterable[ScoredProperty],
    sort_key: str = DEFAULT_SORT_KEY,
    sort_dir: str = DEFAULT_SORT_DIR,
) -> List[ScoredProperty]:
    """
    Stable sort on a single field.

    Missing values (None) always come last, whatever the direction. Text
    fields compare case-insensitively.

    Raises:
        ValueError: Unknown sort key or direction
    """
    if sort_key not in SORT_KEYS:
        raise ValueError(f"Unknown sort key: {sort_key}")
    if sort_dir not in SORT_DIRECTIONS:
        raise ValueError(f"sort_dir must be one of {SORT_DIRECTIONS}")

    present = []
    missing = []
    for prop in properties:
        if _sort_value(prop, sort_key) is None:
            missing.append(prop)
        else:
            present.append(prop)

    if sort_key in STRING_SORT_KEYS:
        def key(p):
            return collation_key(str(_sort_value(p, sort_key)))
    else:
        def key(p):
            return _sort_value(p, sort_key)

    present.sort(key=key, reverse=(sort_dir == SORT_DESC))
    return present + missing


def collation_key(text: str) -> tuple:
    """
    Locale-style ordering key: letters first, then accents, then case
    (lowercase before uppercase).
    """
    folded = text.casefold()
    base = "".join(
        ch for ch in unicodedata.normalize("NFKD", folded)
        if not unicodedata.combining(ch)
    )
    return (base, folded, text.swapcase())


def query(
    properties: Iterable[ScoredProperty],
    filters: Optional[FilterState] = None,
    sort_key: str = DEFAULT_SORT_KEY,
    sort_dir: str = DEFAULT_SORT_DIR,
    limit: Optional[int] = None,
) -> List[ScoredProperty]:
    """
    Filter then sort a scored batch.

    Args:
        properties: Scored batch (not modified)
        filters: Query parameters (default: show everything)
        sort_key: Field to sort on
        sort_dir: "asc" or "desc"
        limit: Keep only the first N results after sorting

    Returns:
        New list of matching properties
    """
    result = sort_properties(apply_filters(properties, filters), sort_key, sort_dir)
    if limit is not None:
        result = result[:max(limit, 0)]
    return result
