"""
Tests for column auto-mapping

Tests cover:
- Header normalisation (case, whitespace, underscores, hyphens)
- Alias priority and first-unclaimed-header-wins
- Duplicate headers
- Manual overrides and the manual-mapping gate
"""

import pytest

from core import mapping
from core.mapping import (
    CANONICAL_FIELDS,
    COLUMN_ALIASES,
    auto_map,
    needs_manual_mapping,
    normalise_header,
    override_column_map,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def portal_headers():
    """Headers from a typical portal export."""
    return [
        "Street Address",
        "Suburb",
        "State",
        "Post Code",
        "Property Type",
        "Last Listed Price",
        "Land Size (m²)",
        "Floor Size (m²)",
        "Days on Market",
        "Agent",
        "Agency Name",
        "Open in RPData",
        "Listing Description",
        "LGA",
        "Sale Method",
    ]


# =============================================================================
# Test: Normalisation
# =============================================================================


class TestNormaliseHeader:
    """Tests for header normalisation."""

    def test_lowercases_and_trims(self):
        assert normalise_header("  Asking Price ") == "asking price"

    def test_underscores_and_hyphens_become_spaces(self):
        assert normalise_header("days_on-market") == "days on market"

    def test_none_is_empty(self):
        assert normalise_header(None) == ""


# =============================================================================
# Test: Auto-mapping
# =============================================================================


class TestAutoMap:
    """Tests for greedy alias matching."""

    def test_maps_every_field_of_portal_export(self, portal_headers):
        column_map = auto_map(portal_headers)

        assert set(column_map) == set(CANONICAL_FIELDS)
        assert column_map["address"] == "Street Address"
        assert column_map["postcode"] == "Post Code"
        assert column_map["asking_price"] == "Last Listed Price"
        assert column_map["land_area"] == "Land Size (m²)"
        assert column_map["listing_url"] == "Open in RPData"
        assert column_map["council_area"] == "LGA"

    def test_snake_case_headers(self):
        column_map = auto_map(["street_address", "asking_price", "days_on_market"])

        assert column_map == {
            "address": "street_address",
            "asking_price": "asking_price",
            "days_on_market": "days_on_market",
        }

    def test_unmatched_fields_are_absent(self):
        column_map = auto_map(["Address", "Mystery Column"])

        assert column_map == {"address": "Address"}

    def test_empty_headers(self):
        assert auto_map([]) == {}

    def test_full_string_match_only(self):
        """'Price Text' must not match the 'price' alias by substring."""
        column_map = auto_map(["Price Text", "Addressee"])

        assert column_map == {}

    def test_alias_order_decides_between_candidates(self):
        """'asking price' is listed before 'price' so it wins."""
        column_map = auto_map(["Price", "Asking Price"])

        assert column_map["asking_price"] == "Asking Price"

    def test_last_alias_still_matches(self):
        column_map = auto_map(["Area", "Type"])

        assert column_map == {"suburb": "Area", "property_type": "Type"}

    def test_claimed_header_not_reused(self, monkeypatch):
        """A header claimed by an earlier field is skipped by later fields."""
        monkeypatch.setattr(mapping, "COLUMN_ALIASES", {
            "suburb": ("location",),
            "council_area": ("location", "council"),
        })

        column_map = mapping.auto_map(["Location", "Council"])

        assert column_map == {"suburb": "Location", "council_area": "Council"}

    def test_claimed_header_leaves_field_unmapped(self, monkeypatch):
        monkeypatch.setattr(mapping, "COLUMN_ALIASES", {
            "suburb": ("location",),
            "council_area": ("location",),
        })

        column_map = mapping.auto_map(["Location"])

        assert column_map == {"suburb": "Location"}

    def test_agent_and_office_headers(self):
        column_map = auto_map(["Agent", "Office"])

        assert column_map["agent_name"] == "Agent"
        assert column_map["agency"] == "Office"

    def test_duplicate_headers_first_occurrence_wins(self):
        headers = ["Price", "price"]

        column_map = auto_map(headers)

        assert column_map["asking_price"] == "Price"

    def test_declaration_order_is_preserved(self):
        assert list(COLUMN_ALIASES)[:3] == ["address", "suburb", "state"]
        assert CANONICAL_FIELDS[-1] == "listing_type"

    def test_deterministic(self, portal_headers):
        assert auto_map(portal_headers) == auto_map(list(portal_headers))


# =============================================================================
# Test: Manual Mapping
# =============================================================================


class TestManualMapping:
    """Tests for the mapping gate and overrides."""

    def test_gate_trips_below_three_fields(self):
        assert needs_manual_mapping({"address": "A", "suburb": "B"}) is True

    def test_gate_passes_at_three_fields(self):
        assert needs_manual_mapping({"address": "A", "suburb": "B", "state": "C"}) is False

    def test_custom_threshold(self):
        assert needs_manual_mapping({"address": "A"}, threshold=1) is False

    def test_override_sets_and_unsets(self):
        headers = ["Addr", "Cost", "Suburb"]
        base = auto_map(headers)

        result = override_column_map(
            base,
            {"address": "Addr", "asking_price": "Cost", "suburb": ""},
            headers,
        )

        assert result == {"address": "Addr", "asking_price": "Cost"}
        assert base == {"suburb": "Suburb"}

    def test_override_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="Unknown field"):
            override_column_map({}, {"bedrooms": "Beds"}, ["Beds"])

    def test_override_unknown_header_rejected(self):
        with pytest.raises(ValueError, match="Column not found"):
            override_column_map({}, {"address": "Nope"}, ["Addr"])
