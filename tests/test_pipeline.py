"""
Tests for the row pipeline

Tests cover:
- Field extraction through the column map
- Price and DOM parsing, "-" and blank handling
- State default
- No rows dropped, order preserved
- End-to-end scoring of reference rows
- Round-trip: auto_map -> process -> export preserves parsed values
"""

import pytest

from core.export import export_rows
from core.mapping import auto_map
from core.models import Priority
from core.pipeline import ListingPipeline, process_rows
from core.scoring import DistressScorer


# =============================================================================
# Fixtures
# =============================================================================


HEADERS = [
    "Address",
    "Suburb",
    "State",
    "Postcode",
    "Property Type",
    "Price",
    "Land Size",
    "Floor Size",
    "DOM",
    "Agent",
    "Agency",
    "URL",
    "Description",
]


def make_row(**values):
    row = {h: "" for h in HEADERS}
    row.update(values)
    return row


@pytest.fixture
def column_map():
    return auto_map(HEADERS)


@pytest.fixture
def row_a():
    """Distressed listing: mortgagee auction, long DOM, vacant."""
    return make_row(**{
        "Address": "12 Smith St",
        "Suburb": "Parramatta",
        "Property Type": "Warehouse",
        "Price": "$1.2M",
        "DOM": "200",
        "Description": "Mortgagee auction - must sell, vacant possession",
    })


@pytest.fixture
def row_b():
    """Healthy leased investment, fresh listing."""
    return make_row(**{
        "Address": "3 King St",
        "Suburb": "Newcastle",
        "State": "NSW",
        "Property Type": "Retail",
        "Price": "$900,000",
        "DOM": "20",
        "Description": "Leased investment, net income $50k",
    })


# =============================================================================
# Test: End-to-End Reference Rows
# =============================================================================


class TestReferenceRows:
    """Scores for the two reference listings."""

    def test_row_a_high_priority(self, row_a, column_map):
        [prop] = process_rows([row_a], column_map)

        assert prop.asking_price == 1200000
        assert prop.days_on_market == 200
        assert prop.distress_keywords == ("mortgagee", "must sell", "vacant possession")
        assert prop.distress_score == 40
        assert prop.dom_score == 30
        assert prop.vacancy_score == 20
        assert prop.score == 90
        assert prop.priority == Priority.HIGH

    def test_row_b_low_priority(self, row_b, column_map):
        [prop] = process_rows([row_b], column_map)

        assert prop.asking_price == 900000
        assert prop.days_on_market == 20
        assert prop.distress_keywords == ()
        assert prop.distress_score == 0
        assert prop.dom_score == 0
        assert prop.vacancy_score == 0
        assert prop.score == 0
        assert prop.priority == Priority.LOW


# =============================================================================
# Test: Field Extraction
# =============================================================================


class TestFieldExtraction:
    """Tests for mapping raw cells onto ScoredProperty fields."""

    def test_display_fields_copied(self, row_a, column_map):
        [prop] = process_rows([row_a], column_map)

        assert prop.address == "12 Smith St"
        assert prop.suburb == "Parramatta"
        assert prop.property_type == "Warehouse"
        assert prop.price_text == "$1.2M"

    def test_blank_state_defaults_to_nsw(self, row_a, column_map):
        [prop] = process_rows([row_a], column_map)

        assert prop.state == "NSW"

    def test_state_kept_when_present(self, column_map):
        [prop] = process_rows([make_row(State="VIC")], column_map)

        assert prop.state == "VIC"

    def test_custom_default_state(self, column_map):
        pipeline = ListingPipeline(default_state="QLD")

        [prop] = pipeline.process([make_row()], column_map)

        assert prop.state == "QLD"

    def test_unmapped_state_defaults(self):
        [prop] = process_rows([{"Address": "1 Main Rd"}], {"address": "Address"})

        assert prop.state == "NSW"

    @pytest.mark.parametrize("dom", ["", "-"])
    def test_blank_dom_is_absent_not_zero(self, column_map, dom):
        [prop] = process_rows([make_row(DOM=dom)], column_map)

        assert prop.days_on_market is None
        assert prop.dom_score == 5

    def test_zero_dom_is_zero(self, column_map):
        [prop] = process_rows([make_row(DOM="0")], column_map)

        assert prop.days_on_market == 0
        assert prop.dom_score == 0

    def test_dash_areas_blanked(self, column_map):
        [prop] = process_rows(
            [make_row(**{"Land Size": "-", "Floor Size": "450"})],
            column_map,
        )

        assert prop.land_area == ""
        assert prop.building_area == "450"

    def test_unparseable_price_is_none(self, column_map):
        [prop] = process_rows([make_row(Price="Contact Agent")], column_map)

        assert prop.asking_price is None
        assert prop.price_text == "Contact Agent"

    def test_missing_cells_degrade(self):
        """Short CSV rows arrive with None values."""
        [prop] = process_rows(
            [{"Address": "1 Main Rd", "Price": None, "DOM": None}],
            {"address": "Address", "asking_price": "Price", "days_on_market": "DOM"},
        )

        assert prop.address == "1 Main Rd"
        assert prop.asking_price is None
        assert prop.days_on_market is None

    def test_mapped_header_missing_from_row(self):
        [prop] = process_rows([{}], {"address": "Address"})

        assert prop.address == ""


# =============================================================================
# Test: Batch Behaviour
# =============================================================================


class TestBatch:
    """Tests for batch-level guarantees."""

    def test_no_rows_dropped_and_order_preserved(self, row_a, row_b, column_map):
        rows = [row_b, make_row(), row_a, {}]

        props = process_rows(rows, column_map)

        assert len(props) == 4
        assert [p.address for p in props] == ["3 King St", "", "12 Smith St", ""]

    def test_empty_column_map(self, row_a):
        [prop] = process_rows([row_a], {})

        assert prop.address == ""
        assert prop.asking_price is None
        assert prop.dom_score == 5
        assert prop.vacancy_score == 10

    def test_malformed_row_does_not_fail_batch(self, row_a, row_b, column_map):
        bad = make_row(**{
            "Address": "1 Bad Rd",
            "Price": "$" + "9" * 400,
            "DOM": "9" * 5000,
        })

        props = ListingPipeline().process([row_a, bad, row_b], column_map)

        assert [p.address for p in props] == ["12 Smith St", "1 Bad Rd", "3 King St"]
        assert props[1].asking_price is None
        assert props[1].days_on_market is None
        assert props[1].dom_score == 5
        assert props[0].score == 90

    def test_empty_batch(self, column_map):
        assert process_rows([], column_map) == []

    def test_rescoring_creates_new_records(self, row_a, column_map):
        first = process_rows([row_a], column_map)
        second = process_rows([row_a], column_map)

        assert first == second
        assert first[0] is not second[0]

    def test_custom_scorer(self, row_b, column_map):
        pipeline = ListingPipeline(scorer=DistressScorer(keywords=("leased",)))

        [prop] = pipeline.process([row_b], column_map)

        assert prop.distress_keywords == ("leased",)
        assert prop.distress_score == 15


# =============================================================================
# Test: Round Trip
# =============================================================================


class TestRoundTrip:
    """auto_map -> process -> export keeps parsed prices and DOM."""

    def test_prices_and_dom_survive_export(self, row_a, row_b, column_map):
        rows = [
            row_a,
            row_b,
            make_row(Price="$850k - $900k", DOM="75"),
            make_row(Price="1,250,000", DOM="-"),
            make_row(Price="$0", DOM="0"),
        ]

        props = process_rows(rows, auto_map(HEADERS))
        exported = export_rows(props)

        assert [r["Asking Price (AUD)"] for r in exported] == [1200000, 900000, 875000, 1250000, 0]
        assert [r["Days on Market"] for r in exported] == [200, 20, 75, "", 0]
        for prop, row in zip(props, exported):
            assert row["Score"] == prop.score
            assert row["Priority"] == prop.priority.value
