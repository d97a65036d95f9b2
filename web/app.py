"""
FastAPI application for the distress scanner.

Stateless JSON/CSV API: every request carries the uploaded export and the
query, so nothing is stored between requests.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from core import (
    CANONICAL_FIELDS,
    EXPORT_COLUMNS,
    FilterState,
    ListingPipeline,
    Priority,
    ScoredProperty,
    UnsupportedFileError,
    auto_map,
    decode_upload,
    detect_delimiter,
    export_filename,
    export_rows,
    facet_options,
    keyword_frequency,
    needs_manual_mapping,
    override_column_map,
    query,
    read_csv,
    summarise,
    write_csv,
)
from core.models import (
    DOM_MAX_DEFAULT,
    DOM_MIN_DEFAULT,
    PRICE_MAX_DEFAULT,
    PRICE_MIN_DEFAULT,
)
from core.query import DEFAULT_SORT_DIR, DEFAULT_SORT_KEY
from utils.config import Config


logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# =============================================================================
# Environment Configuration
# =============================================================================

IS_PRODUCTION = os.getenv("PRODUCTION", "").lower() == "true"

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "").split(",") if os.getenv("ALLOWED_ORIGINS") else []
if not ALLOWED_ORIGINS and not IS_PRODUCTION:
    # Development fallback only
    ALLOWED_ORIGINS = ["http://localhost:8000", "http://127.0.0.1:8000"]


# =============================================================================
# API Response Models
# =============================================================================

class ColumnProposal(BaseModel):
    """Auto-detected column mapping for an uploaded export."""
    headers: List[str]
    fields: List[str]
    column_map: Dict[str, str]
    mapped_count: int
    needs_mapping: bool


# =============================================================================
# Request Parsing
# =============================================================================


@dataclass
class QueryParams:
    """Filter and sort parameters from a scan/export form."""
    filters: FilterState
    sort_key: str
    sort_dir: str
    limit: Optional[int]


def _parse_priorities(values: Optional[List[str]]) -> frozenset:
    if values is None:
        return frozenset(Priority)
    priorities = set()
    for value in values:
        priority = Priority.from_string(value)
        if priority is None:
            raise ValueError(f"Unknown priority: {value}")
        priorities.add(priority)
    return frozenset(priorities)


def query_params(
    search: str = Form(""),
    priority: Optional[List[str]] = Form(None),
    property_type: Optional[List[str]] = Form(None),
    suburb: Optional[List[str]] = Form(None),
    price_min: int = Form(PRICE_MIN_DEFAULT),
    price_max: int = Form(PRICE_MAX_DEFAULT),
    score_min: int = Form(0),
    dom_min: int = Form(DOM_MIN_DEFAULT),
    dom_max: int = Form(DOM_MAX_DEFAULT),
    sort_key: str = Form(DEFAULT_SORT_KEY),
    sort_dir: str = Form(DEFAULT_SORT_DIR),
    limit: Optional[int] = Form(None),
) -> QueryParams:
    """Build QueryParams from form fields. Invalid values raise HTTP 400."""
    try:
        filters = FilterState(
            search=search.strip(),
            priorities=_parse_priorities(priority),
            property_types=frozenset(property_type or []),
            suburbs=frozenset(suburb or []),
            price_min=price_min,
            price_max=price_max,
            score_min=score_min,
            dom_min=dom_min,
            dom_max=dom_max,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return QueryParams(
        filters=filters,
        sort_key=sort_key,
        sort_dir=sort_dir,
        limit=limit,
    )


def _parse_overrides(column_map: Optional[str]) -> Optional[dict]:
    """Decode the optional manual column map (JSON object)."""
    if not column_map:
        return None
    try:
        overrides = json.loads(column_map)
    except json.JSONDecodeError as e:
        raise HTTPException(status_code=400, detail=f"Invalid column_map JSON: {e}")
    if not isinstance(overrides, dict):
        raise HTTPException(status_code=400, detail="column_map must be a JSON object")
    return overrides


async def _read_upload(file: UploadFile) -> tuple:
    """Read an uploaded export into (headers, rows)."""
    try:
        delimiter = detect_delimiter(file.filename)
    except UnsupportedFileError as e:
        logger.warning("Rejected upload %r: not a CSV/TSV file", file.filename)
        raise HTTPException(status_code=400, detail=str(e))

    data = await file.read()
    return read_csv(decode_upload(data), delimiter)


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()

    app = FastAPI(
        title="Distress Scanner",
        description="Distress scoring and triage for listing exports",
        version=VERSION,
        docs_url=None if IS_PRODUCTION else "/docs",
        redoc_url=None if IS_PRODUCTION else "/redoc",
        openapi_url=None if IS_PRODUCTION else "/openapi.json",
        debug=config.debug,
    )

    @app.get("/health", include_in_schema=False)
    def health():
        """Health endpoint. No dependencies, no IO."""
        return {"status": "healthy", "version": VERSION}

    if ALLOWED_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    pipeline = ListingPipeline(default_state=config.default_state)

    def resolve_mapping(headers: list, overrides: Optional[dict]) -> tuple:
        """
        Auto-map headers, then apply manual overrides.

        Returns:
            (column_map, needs_mapping). needs_mapping is only ever True when
            no overrides were supplied.
        """
        column_map = auto_map(headers)
        if overrides is not None:
            try:
                return override_column_map(column_map, overrides, headers), False
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))
        return column_map, needs_manual_mapping(column_map, config.min_auto_mapped_fields)

    def run_query(properties: List[ScoredProperty], params: QueryParams, limit=None):
        try:
            return query(
                properties,
                params.filters,
                sort_key=params.sort_key,
                sort_dir=params.sort_dir,
                limit=limit,
            )
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    @app.post("/api/columns", response_model=ColumnProposal)
    async def columns(file: UploadFile = File(...)):
        """Propose a column mapping for an uploaded export."""
        headers, _ = await _read_upload(file)
        column_map = auto_map(headers)

        return ColumnProposal(
            headers=headers,
            fields=list(CANONICAL_FIELDS),
            column_map=column_map,
            mapped_count=len(column_map),
            needs_mapping=needs_manual_mapping(column_map, config.min_auto_mapped_fields),
        )

    @app.post("/api/scan")
    async def scan(
        file: UploadFile = File(...),
        column_map: Optional[str] = Form(None),
        params: QueryParams = Depends(query_params),
    ):
        """
        Score an uploaded export and return the filtered, sorted results.

        If too few columns could be auto-mapped and no manual column_map was
        sent, the response asks for a mapping instead of scoring.
        """
        headers, rows = await _read_upload(file)
        resolved, needs_mapping = resolve_mapping(headers, _parse_overrides(column_map))

        if needs_mapping:
            return {
                "needs_mapping": True,
                "headers": headers,
                "fields": list(CANONICAL_FIELDS),
                "column_map": resolved,
            }

        properties = pipeline.process(rows, resolved)
        matches = run_query(properties, params)
        limit = params.limit if params.limit is not None else config.max_result_rows

        return {
            "needs_mapping": False,
            "column_map": resolved,
            "summary": summarise(properties).to_dict(),
            "keyword_frequency": [
                {"keyword": kw, "count": count}
                for kw, count in keyword_frequency(properties)
            ],
            "facets": facet_options(properties).to_dict(),
            "total_matches": len(matches),
            "properties": [p.to_dict() for p in matches[:max(limit, 0)]],
        }

    @app.post("/api/export")
    async def export(
        file: UploadFile = File(...),
        column_map: Optional[str] = Form(None),
        params: QueryParams = Depends(query_params),
    ):
        """Score an uploaded export and download the filtered results as CSV."""
        headers, rows = await _read_upload(file)
        resolved, needs_mapping = resolve_mapping(headers, _parse_overrides(column_map))

        if needs_mapping:
            return JSONResponse(
                status_code=400,
                content={"detail": "Manual column mapping required", "headers": headers},
            )

        properties = pipeline.process(rows, resolved)
        matches = run_query(properties, params, limit=params.limit)

        return Response(
            content=write_csv(export_rows(matches), EXPORT_COLUMNS),
            media_type="text/csv",
            headers={
                "Content-Disposition": f'attachment; filename="{export_filename()}"',
            },
        )

    return app


# Create app instance for uvicorn
app = create_app()
