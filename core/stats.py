"""
Batch aggregates: summary counts, keyword frequency and filter options.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .models import Priority, ScoredProperty
from .pricing import round_half_up
from .scoring import DISTRESS_KEYWORDS


@dataclass(frozen=True)
class ScanSummary:
    """Headline numbers for a scored batch."""

    total: int
    high: int
    monitor: int
    low: int
    average_score: Optional[float]  # 1 dp
    average_dom: Optional[int]  # whole days, listings with a DOM only

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "high": self.high,
            "monitor": self.monitor,
            "low": self.low,
            "average_score": self.average_score,
            "average_dom": self.average_dom,
        }


@dataclass(frozen=True)
class Facets:
    """Distinct values offered by the filter panel."""

    suburbs: Tuple[str, ...]
    property_types: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "suburbs": list(self.suburbs),
            "property_types": list(self.property_types),
        }


def summarise(properties: Iterable[ScoredProperty]) -> ScanSummary:
    """Count priorities and average score / DOM across a batch."""
    props = list(properties)
    counts = Counter(p.priority for p in props)

    average_score = None
    if props:
        average_score = round_half_up(sum(p.score for p in props) * 10 / len(props)) / 10

    doms = [p.days_on_market for p in props if p.days_on_market is not None]
    average_dom = round_half_up(sum(doms) / len(doms)) if doms else None

    return ScanSummary(
        total=len(props),
        high=counts[Priority.HIGH],
        monitor=counts[Priority.MONITOR],
        low=counts[Priority.LOW],
        average_score=average_score,
        average_dom=average_dom,
    )


def keyword_frequency(
    properties: Iterable[ScoredProperty],
    keywords: Tuple[str, ...] = DISTRESS_KEYWORDS,
) -> List[Tuple[str, int]]:
    """
    Number of listings matching each distress keyword.

    Keywords with no matches are omitted. Sorted by count descending, ties
    in keyword-list order.
    """
    freq = {kw: 0 for kw in keywords}
    for prop in properties:
        for kw in prop.distress_keywords:
            if kw in freq:
                freq[kw] += 1

    ranked = [(kw, count) for kw, count in freq.items() if count > 0]
    return sorted(ranked, key=lambda item: item[1], reverse=True)


def facet_options(properties: Iterable[ScoredProperty]) -> Facets:
    """Sorted distinct non-empty suburbs and property types."""
    props = list(properties)
    return Facets(
        suburbs=tuple(sorted({p.suburb for p in props if p.suburb})),
        property_types=tuple(sorted({p.property_type for p in props if p.property_type})),
    )
