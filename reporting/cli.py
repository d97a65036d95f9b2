#!/usr/bin/env python3
"""
CLI for scoring listing exports.

Usage:
    python -m reporting.cli columns <export.csv>
    python -m reporting.cli summary <export.csv>
    python -m reporting.cli score <export.csv> [-o scored.csv] [filters]

Examples:
    # Check which columns were recognised
    python -m reporting.cli columns exports/sydney_commercial.csv

    # Write High Priority listings, longest on market first
    python -m reporting.cli score exports/sydney_commercial.csv \\
        --priority "High Priority" --sort days_on_market
"""

import argparse
import logging
import sys
from pathlib import Path

from core import (
    CANONICAL_FIELDS,
    EXPORT_COLUMNS,
    FilterState,
    ListingPipeline,
    Priority,
    SORT_KEYS,
    UnsupportedFileError,
    auto_map,
    decode_upload,
    detect_delimiter,
    export_filename,
    export_rows,
    keyword_frequency,
    needs_manual_mapping,
    query,
    read_csv,
    summarise,
    write_csv,
)
from utils.config import Config
from utils.formatting import format_aud


logger = logging.getLogger(__name__)


def load_export(path: Path) -> tuple:
    """
    Read a listing export from disk.

    Returns:
        (headers, rows)

    Raises:
        UnsupportedFileError: Not a .csv or .tsv file
    """
    delimiter = detect_delimiter(path.name)
    return read_csv(decode_upload(path.read_bytes()), delimiter)


def _load_or_report(path_arg: str):
    """Load an export, printing an error and returning None on failure."""
    input_path = Path(path_arg)

    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return None

    try:
        return load_export(input_path)
    except UnsupportedFileError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def cmd_columns(args, config: Config):
    """Show the auto-detected column mapping."""
    loaded = _load_or_report(args.export_file)
    if loaded is None:
        return 1
    headers, _ = loaded

    column_map = auto_map(headers)
    for field_name in CANONICAL_FIELDS:
        print(f"{field_name:<16} {column_map.get(field_name, '-')}")

    print()
    print(f"Mapped {len(column_map)} of {len(CANONICAL_FIELDS)} fields")
    if needs_manual_mapping(column_map, config.min_auto_mapped_fields):
        print("Too few columns recognised - rename headers before scoring")
    return 0


def cmd_summary(args, config: Config):
    """Print headline numbers and distress signal counts."""
    loaded = _load_or_report(args.export_file)
    if loaded is None:
        return 1
    headers, rows = loaded

    column_map = auto_map(headers)
    pipeline = ListingPipeline(default_state=config.default_state)
    properties = pipeline.process(rows, column_map)
    summary = summarise(properties)

    print(f"Total properties: {summary.total}")
    print(f"High Priority:    {summary.high}")
    print(f"Monitor:          {summary.monitor}")
    print(f"Low:              {summary.low}")
    avg_score = "—" if summary.average_score is None else f"{summary.average_score:.1f}"
    avg_dom = "—" if summary.average_dom is None else f"{summary.average_dom}d"
    print(f"Avg score / DOM:  {avg_score} / {avg_dom}")

    frequency = keyword_frequency(properties)
    if frequency:
        print()
        print("Distress signals:")
        for keyword, count in frequency:
            print(f"  {keyword:<24} {count}")

    top = query(properties, limit=5)
    if top:
        print()
        print("Top listings:")
        for p in top:
            print(f"  {p.score:>3}  {format_aud(p.asking_price):>8}  {p.address}, {p.suburb}")
    return 0


def cmd_score(args, config: Config):
    """Score an export and write the filtered results as CSV."""
    loaded = _load_or_report(args.export_file)
    if loaded is None:
        return 1
    headers, rows = loaded

    column_map = auto_map(headers)
    if needs_manual_mapping(column_map, config.min_auto_mapped_fields):
        print(
            f"Error: Only {len(column_map)} columns recognised; "
            "run 'columns' to see which headers matched",
            file=sys.stderr,
        )
        return 1

    try:
        priorities = frozenset(Priority)
        if args.priority:
            priorities = frozenset(Priority.from_string(p) for p in args.priority)
            if None in priorities:
                raise ValueError(f"Unknown priority in {args.priority}")
        filters = FilterState(
            search=args.search or "",
            priorities=priorities,
            property_types=frozenset(args.property_type or []),
            suburbs=frozenset(args.suburb or []),
            score_min=args.min_score,
        )
        pipeline = ListingPipeline(default_state=config.default_state)
        properties = pipeline.process(rows, column_map)
        matches = query(properties, filters, sort_key=args.sort, sort_dir=args.direction)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    output_path = Path(args.output or export_filename())
    output_path.write_text(write_csv(export_rows(matches), EXPORT_COLUMNS), encoding="utf-8")

    print(f"Scored {len(properties)} listings, {len(matches)} matched")
    print(f"Export written: {output_path}")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Distress Scanner - listing export triage",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m reporting.cli columns export.csv
    python -m reporting.cli summary export.csv
    python -m reporting.cli score export.csv -o scored.csv --min-score 35

Output:
    Exports default to: scored_properties_<YYYY-MM-DD>.csv
        """,
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Columns command
    columns_parser = subparsers.add_parser(
        "columns",
        help="Show how export headers map to listing fields",
    )
    columns_parser.add_argument("export_file", help="Path to CSV/TSV export")
    columns_parser.set_defaults(func=cmd_columns)

    # Summary command
    summary_parser = subparsers.add_parser(
        "summary",
        help="Print priority counts and distress signals",
    )
    summary_parser.add_argument("export_file", help="Path to CSV/TSV export")
    summary_parser.set_defaults(func=cmd_summary)

    # Score command
    score_parser = subparsers.add_parser(
        "score",
        help="Score an export and write the results as CSV",
    )
    score_parser.add_argument("export_file", help="Path to CSV/TSV export")
    score_parser.add_argument("-o", "--output", help="Output CSV path")
    score_parser.add_argument("--search", help="Free-text search")
    score_parser.add_argument(
        "--priority",
        action="append",
        help="Priority to keep (repeatable): 'High Priority', Monitor, Low",
    )
    score_parser.add_argument("--property-type", action="append", help="Property type to keep (repeatable)")
    score_parser.add_argument("--suburb", action="append", help="Suburb to keep (repeatable)")
    score_parser.add_argument("--min-score", type=int, default=0, help="Minimum score")
    score_parser.add_argument("--sort", default="score", choices=sorted(SORT_KEYS), help="Sort field")
    score_parser.add_argument("--direction", default="desc", choices=["asc", "desc"], help="Sort direction")
    score_parser.set_defaults(func=cmd_score)

    args = parser.parse_args(argv)

    config = Config.load()
    logging.basicConfig(level=config.log_level)

    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
