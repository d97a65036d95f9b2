"""
Scored Listing Export

Flattens scored properties into the fixed-column export layout. Column order
and labels are part of the contract with downstream spreadsheets and must
not change.
"""

from __future__ import annotations

from datetime import date
from typing import Final, Iterable, Optional

from .models import ScoredProperty


EXPORT_COLUMNS: Final[tuple[str, ...]] = (
    "Address",
    "Suburb",
    "State",
    "Postcode",
    "Property Type",
    "Asking Price (AUD)",
    "Price Text",
    "Land Area (sqm)",
    "Building Area (sqm)",
    "Days on Market",
    "Agent",
    "Agency",
    "Listing URL",
    "Score",
    "Priority",
    "Distress Signals",
    "Distress Score",
    "DOM Score",
    "Vacancy Score",
    "Description",
)

KEYWORD_SEPARATOR: Final[str] = "; "


def to_export_row(prop: ScoredProperty) -> dict[str, object]:
    """
    Flatten one property into an export row.

    A missing asking price and a missing DOM export as empty cells. A zero
    price is a parsed value and exports as 0.
    """
    return {
        "Address": prop.address,
        "Suburb": prop.suburb,
        "State": prop.state,
        "Postcode": prop.postcode,
        "Property Type": prop.property_type,
        "Asking Price (AUD)": "" if prop.asking_price is None else prop.asking_price,
        "Price Text": prop.price_text,
        "Land Area (sqm)": prop.land_area,
        "Building Area (sqm)": prop.building_area,
        "Days on Market": "" if prop.days_on_market is None else prop.days_on_market,
        "Agent": prop.agent_name,
        "Agency": prop.agency,
        "Listing URL": prop.listing_url,
        "Score": prop.score,
        "Priority": prop.priority.value,
        "Distress Signals": KEYWORD_SEPARATOR.join(prop.distress_keywords),
        "Distress Score": prop.distress_score,
        "DOM Score": prop.dom_score,
        "Vacancy Score": prop.vacancy_score,
        "Description": prop.description,
    }


def export_rows(properties: Iterable[ScoredProperty]) -> list[dict[str, object]]:
    """Export rows in input order."""
    return [to_export_row(p) for p in properties]


def export_filename(on: Optional[date] = None) -> str:
    """Download name for an export, e.g. scored_properties_2024-06-01.csv."""
    on = on or date.today()
    return f"scored_properties_{on.isoformat()}.csv"
