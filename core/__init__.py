"""
Distress Scanner - Core Business Logic

Pipeline for triaging listing exports:
1. Column mapping (raw headers -> canonical fields)
2. Price parsing (free text -> whole dollars)
3. Distress scoring (keywords, days on market, vacancy)
4. Querying (filters, sorting, aggregates)
5. Export (fixed-column CSV layout)

All functions are pure and hold no shared state.
"""

from .models import (
    ScoredProperty,
    ScoreBreakdown,
    Priority,
    FilterState,
    ALL_PRIORITIES,
)
from .mapping import (
    COLUMN_ALIASES,
    CANONICAL_FIELDS,
    MIN_AUTO_MAPPED_FIELDS,
    auto_map,
    normalise_header,
    needs_manual_mapping,
    override_column_map,
)
from .pricing import parse_price
from .scoring import (
    DISTRESS_KEYWORDS,
    DistressScorer,
    parse_days_on_market,
    priority_for,
    score_listing,
)
from .pipeline import ListingPipeline, process_rows
from .query import ListingFilter, apply_filters, sort_properties, query, SORT_KEYS
from .stats import ScanSummary, Facets, summarise, keyword_frequency, facet_options
from .export import EXPORT_COLUMNS, to_export_row, export_rows, export_filename
from .csv_io import (
    UnsupportedFileError,
    detect_delimiter,
    decode_upload,
    read_csv,
    write_csv,
)

__all__ = [
    # Models
    "ScoredProperty",
    "ScoreBreakdown",
    "Priority",
    "FilterState",
    "ALL_PRIORITIES",
    # Column mapping
    "COLUMN_ALIASES",
    "CANONICAL_FIELDS",
    "MIN_AUTO_MAPPED_FIELDS",
    "auto_map",
    "normalise_header",
    "needs_manual_mapping",
    "override_column_map",
    # Pricing
    "parse_price",
    # Scoring
    "DISTRESS_KEYWORDS",
    "DistressScorer",
    "parse_days_on_market",
    "priority_for",
    "score_listing",
    # Pipeline
    "ListingPipeline",
    "process_rows",
    # Query
    "ListingFilter",
    "apply_filters",
    "sort_properties",
    "query",
    "SORT_KEYS",
    # Aggregates
    "ScanSummary",
    "Facets",
    "summarise",
    "keyword_frequency",
    "facet_options",
    # Export
    "EXPORT_COLUMNS",
    "to_export_row",
    "export_rows",
    "export_filename",
    # CSV boundary
    "UnsupportedFileError",
    "detect_delimiter",
    "decode_upload",
    "read_csv",
    "write_csv",
]
