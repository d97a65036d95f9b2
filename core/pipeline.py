"""
Row Pipeline - Raw Export Rows to Scored Properties

Applies a column map to each raw row, parses the asking price and days on
market, and scores the result. Missing or malformed data degrades to empty
strings and None; no row is ever dropped and input order is preserved.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Optional

from .models import ScoredProperty
from .pricing import parse_price
from .scoring import DistressScorer, parse_days_on_market


logger = logging.getLogger(__name__)


DEFAULT_STATE = "NSW"

# Placeholder some exports use for "no value"
MISSING_MARKER = "-"


class ListingPipeline:
    """
    Orchestrates column mapping, price parsing and scoring for a batch.

    Stateless between calls: the same rows and map always produce the same
    records.
    """

    def __init__(
        self,
        scorer: Optional[DistressScorer] = None,
        default_state: str = DEFAULT_STATE,
    ):
        """
        Initialize pipeline.

        Args:
            scorer: Scorer to use (default keyword list if omitted)
            default_state: State assumed when the row leaves it blank
        """
        self.scorer = scorer or DistressScorer()
        self.default_state = default_state

    def process(
        self,
        raw_rows: Iterable[Mapping[str, Optional[str]]],
        column_map: Mapping[str, str],
    ) -> list[ScoredProperty]:
        """
        Score every row.

        Args:
            raw_rows: Rows keyed by original header strings
            column_map: Canonical field -> raw header

        Returns:
            One ScoredProperty per input row, in input order.
        """
        results = [self.process_row(row, column_map) for row in raw_rows]

        logger.debug(
            "Scored %d rows (%d without price, %d without DOM)",
            len(results),
            sum(1 for p in results if p.asking_price is None),
            sum(1 for p in results if p.days_on_market is None),
        )
        return results

    def process_row(
        self,
        row: Mapping[str, Optional[str]],
        column_map: Mapping[str, str],
    ) -> ScoredProperty:
        """Map, parse and score a single raw row."""

        def get(field_name: str) -> str:
            column = column_map.get(field_name)
            if not column:
                return ""
            value = row.get(column)
            return "" if value is None else str(value)

        price_text = get("asking_price")
        days_on_market = parse_days_on_market(get("days_on_market"))
        description = get("description")

        breakdown = self.scorer.score(description, days_on_market)

        return ScoredProperty(
            address=get("address"),
            suburb=get("suburb"),
            state=get("state").strip() or self.default_state,
            postcode=get("postcode"),
            property_type=get("property_type"),
            agent_name=get("agent_name"),
            agency=get("agency"),
            listing_url=get("listing_url"),
            council_area=get("council_area"),
            listing_type=get("listing_type"),
            description=description,
            land_area=_blank_if_missing(get("land_area")),
            building_area=_blank_if_missing(get("building_area")),
            price_text=price_text,
            asking_price=parse_price(price_text),
            days_on_market=days_on_market,
            distress_score=breakdown.distress_score,
            dom_score=breakdown.dom_score,
            vacancy_score=breakdown.vacancy_score,
            priority=breakdown.priority,
            distress_keywords=breakdown.matched_keywords,
        )


def _blank_if_missing(value: str) -> str:
    return "" if value == MISSING_MARKER else value


def process_rows(
    raw_rows: Iterable[Mapping[str, Optional[str]]],
    column_map: Mapping[str, str],
    default_state: str = DEFAULT_STATE,
) -> list[ScoredProperty]:
    """Score a batch with the default scorer."""
    return ListingPipeline(default_state=default_state).process(raw_rows, column_map)
