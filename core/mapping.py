"""
Column Mapping - Raw Export Headers to Canonical Fields

Listing exports from different portals and CRMs name the same column in
different ways ("Asking Price", "asking_price", "List Price" ...). This
module resolves raw headers to the canonical fields the pipeline reads.

Matching is greedy and order-dependent: fields are resolved in declaration
order, aliases in list order, and a header claimed by an earlier field is
never reused.
"""

from __future__ import annotations

import logging
from typing import Final, Mapping, Optional, Sequence


logger = logging.getLogger(__name__)


# =============================================================================
# Alias Table
# =============================================================================

# Canonical field -> accepted header aliases, in priority order
COLUMN_ALIASES: Final[dict[str, tuple[str, ...]]] = {
    "address": (
        "address", "street address", "street_address", "property address",
        "full address",
    ),
    "suburb": ("suburb", "location", "area"),
    "state": ("state",),
    "postcode": ("postcode", "post code", "zip", "postal code"),
    "property_type": ("property type", "property_type", "type", "category"),
    "asking_price": (
        "asking price", "asking_price", "price", "list price",
        "last listed price", "first listed price", "listed price", "sale price",
    ),
    "land_area": (
        "land area", "land_area", "land size", "land size (m²)", "land_size",
        "land sqm", "land (sqm)",
    ),
    "building_area": (
        "building area", "building_area", "floor size", "floor size (m²)",
        "floor_size", "building sqm", "building (sqm)",
    ),
    "days_on_market": (
        "days on market", "days_on_market", "dom", "days listed", "days",
    ),
    "agent_name": ("agent name", "agent_name", "agent", "listing agent"),
    "agency": ("agency", "agency name", "office"),
    "listing_url": (
        "listing url", "listing_url", "url", "link", "open in rpdata",
        "listing link",
    ),
    "description": (
        "description", "listing description", "details", "comments", "notes",
    ),
    "council_area": ("council area", "council", "lga"),
    "listing_type": ("listing type", "listing_type", "sale method"),
}

CANONICAL_FIELDS: Final[tuple[str, ...]] = tuple(COLUMN_ALIASES)

# Below this many auto-mapped fields the caller should ask for a manual mapping
MIN_AUTO_MAPPED_FIELDS: Final[int] = 3


# =============================================================================
# Matching
# =============================================================================


def normalise_header(value: Optional[str]) -> str:
    """Lowercase, trim and turn underscores/hyphens into spaces."""
    if not value:
        return ""
    return str(value).lower().strip().replace("_", " ").replace("-", " ")


def auto_map(headers: Sequence[str]) -> dict[str, str]:
    """
    Map raw headers to canonical fields using COLUMN_ALIASES.

    Args:
        headers: Header strings from the first row of the export

    Returns:
        Dict of canonical field -> raw header. Unmatched fields are absent.
        Never raises; callers decide what mapping coverage is acceptable.
    """
    normalised = [normalise_header(h) for h in headers]
    column_map: dict[str, str] = {}

    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            target = normalise_header(alias)
            try:
                idx = normalised.index(target)
            except ValueError:
                continue
            header = headers[idx]
            if header in column_map.values():
                continue
            column_map[field_name] = header
            break

    return column_map


def needs_manual_mapping(
    column_map: Mapping[str, str],
    threshold: int = MIN_AUTO_MAPPED_FIELDS,
) -> bool:
    """True when too few fields were mapped to trust the auto-map."""
    needed = len(column_map) < threshold
    if needed:
        logger.info(
            "Auto-mapped %d of %d fields (threshold %d); manual mapping required",
            len(column_map),
            len(CANONICAL_FIELDS),
            threshold,
        )
    return needed


def override_column_map(
    column_map: Mapping[str, str],
    overrides: Mapping[str, Optional[str]],
    headers: Sequence[str],
) -> dict[str, str]:
    """
    Apply manual mapping choices on top of an existing map.

    Args:
        column_map: Map to start from (not modified)
        overrides: Canonical field -> header; an empty value unmaps the field
        headers: Headers present in the file

    Returns:
        A new column map

    Raises:
        ValueError: Unknown canonical field or header not in the file
    """
    result = dict(column_map)
    known_headers = set(headers)

    for field_name, header in overrides.items():
        if field_name not in COLUMN_ALIASES:
            raise ValueError(f"Unknown field: {field_name}")
        if not header:
            result.pop(field_name, None)
            continue
        if header not in known_headers:
            raise ValueError(f"Column not found in file: {header}")
        result[field_name] = header

    return result
