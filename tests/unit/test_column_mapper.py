"""
Unit tests for the column mapper.

Covers:
1. Seeding and set_mapping
2. Custom fields
3. Summary counts and duplicate claims
4. Header auto-detection
"""

from models.schema import Importance
from services.column_mapper import (
    add_custom_field,
    auto_detect_mappings,
    column_for,
    find_duplicate_claims,
    init_mappings,
    remove_custom_field,
    set_mapping,
    summarize,
    unmapped_columns,
)


# ===================
# TEST 1: SEEDING AND SET
# ===================

class TestSetMapping:
    """Seeding and reassigning columns."""

    def test_init_one_unmapped_per_field(self, registry, blank_mappings):
        """Every field gets one unmapped entry."""
        assert len(blank_mappings) == len(registry.get_fields())
        assert all(m.source_column_name is None for m in blank_mappings)
        assert not any(m.is_custom for m in blank_mappings)

    def test_set_mapping(self, blank_mappings):
        """Field points at the column."""
        mappings = set_mapping(blank_mappings, "bedrooms", "Beds")
        assert column_for(mappings, "bedrooms") == "Beds"

    def test_set_mapping_does_not_mutate(self, blank_mappings):
        """Original list is untouched."""
        set_mapping(blank_mappings, "bedrooms", "Beds")
        assert column_for(blank_mappings, "bedrooms") is None

    def test_set_mapping_none_unmaps(self, blank_mappings):
        """None clears the mapping."""
        mappings = set_mapping(blank_mappings, "bedrooms", "Beds")
        mappings = set_mapping(mappings, "bedrooms", None)
        assert column_for(mappings, "bedrooms") is None

    def test_set_mapping_keeps_other_claim(self, blank_mappings):
        """Claiming a column twice leaves the first claim in place."""
        mappings = set_mapping(blank_mappings, "net_bua", "Area")
        mappings = set_mapping(mappings, "gross_bua", "Area")
        assert column_for(mappings, "net_bua") == "Area"
        assert column_for(mappings, "gross_bua") == "Area"

    def test_set_mapping_unknown_field_noop(self, blank_mappings):
        """Unknown field id leaves the list unchanged."""
        mappings = set_mapping(blank_mappings, "nope", "Area")
        assert mappings == blank_mappings


# ===================
# TEST 2: CUSTOM FIELDS
# ===================

class TestCustomFields:
    """Adding and removing custom fields."""

    def test_add_custom_field(self, blank_mappings):
        """Custom entry is appended unmapped."""
        mappings = add_custom_field(blank_mappings, "Sea View Premium")
        custom = mappings[-1]
        assert custom.is_custom
        assert custom.custom_name == "Sea View Premium"
        assert custom.system_field_id == "custom_sea_view_premium"
        assert custom.source_column_name is None

    def test_add_empty_name_noop(self, blank_mappings):
        """Empty name is ignored."""
        assert add_custom_field(blank_mappings, "") == blank_mappings

    def test_add_duplicate_noop(self, blank_mappings):
        """Same display text twice is ignored."""
        once = add_custom_field(blank_mappings, "Corner")
        twice = add_custom_field(once, "Corner")
        assert len(twice) == len(once)

    def test_add_duplicate_is_case_sensitive(self, blank_mappings):
        """Different case counts as a different name."""
        mappings = add_custom_field(blank_mappings, "Corner")
        mappings = add_custom_field(mappings, "corner")
        assert len(mappings) == len(blank_mappings) + 2

    def test_remove_custom_field(self, blank_mappings):
        """Custom field is dropped by display name."""
        mappings = add_custom_field(blank_mappings, "Corner")
        mappings = remove_custom_field(mappings, "Corner")
        assert len(mappings) == len(blank_mappings)


# ===================
# TEST 3: SUMMARY
# ===================

class TestSummarize:
    """Unmapped counts and duplicate claims."""

    def test_blank_summary_counts_tiers(self, registry, blank_mappings):
        """Nothing mapped: every mandatory and important field is counted."""
        summary = summarize(blank_mappings, registry.get_fields())
        assert summary.unmapped_mandatory == len(registry.fields_by_importance(Importance.MANDATORY))
        assert summary.unmapped_important == len(registry.fields_by_importance(Importance.IMPORTANT))
        assert summary.mapped_count == 0
        assert summary.duplicate_claims == 0

    def test_mapping_reduces_counts(self, registry, blank_mappings):
        """Mapping a mandatory field lowers the mandatory count."""
        before = summarize(blank_mappings, registry.get_fields())
        mappings = set_mapping(blank_mappings, "unit_code", "Code")
        after = summarize(mappings, registry.get_fields())
        assert after.unmapped_mandatory == before.unmapped_mandatory - 1
        assert after.mapped_count == 1
        assert "unit_code" not in after.unmapped_mandatory_fields

    def test_custom_field_counts_as_mapped_only(self, registry, blank_mappings):
        """Mapped custom fields count toward mapped_count."""
        mappings = add_custom_field(blank_mappings, "Corner")
        mappings = set_mapping(mappings, "custom_corner", "Corner?")
        summary = summarize(mappings, registry.get_fields())
        assert summary.mapped_count == 1

    def test_duplicate_claims(self, registry, blank_mappings):
        """Two fields on one column are reported."""
        mappings = set_mapping(blank_mappings, "net_bua", "Area")
        mappings = set_mapping(mappings, "gross_bua", "Area")
        claims = find_duplicate_claims(mappings)
        assert len(claims) == 1
        assert claims[0].column == "Area"
        assert claims[0].field_ids == ["net_bua", "gross_bua"]
        assert summarize(mappings, registry.get_fields()).duplicate_claims == 1

    def test_unmapped_columns(self, blank_mappings):
        """Columns no field points at."""
        mappings = set_mapping(blank_mappings, "bedrooms", "Beds")
        assert unmapped_columns(["Beds", "Notes"], mappings) == ["Notes"]


# ===================
# TEST 4: AUTO-DETECT
# ===================

class TestAutoDetect:
    """Header pattern matching."""

    def test_detects_common_headers(self, blank_mappings):
        """Typical developer headers land on the right fields."""
        columns = ["Unit Code", "Project", "Unit Type", "Area (sqm)", "Price", "Status", "Floor", "Bedrooms", "Bathrooms"]
        mappings = auto_detect_mappings(columns, blank_mappings)

        assert column_for(mappings, "unit_code") == "Unit Code"
        assert column_for(mappings, "project_name") == "Project"
        assert column_for(mappings, "unit_type") == "Unit Type"
        assert column_for(mappings, "net_bua") == "Area (sqm)"
        assert column_for(mappings, "prices") == "Price"
        assert column_for(mappings, "status") == "Status"
        assert column_for(mappings, "floor") == "Floor"
        assert column_for(mappings, "bedrooms") == "Bedrooms"
        assert column_for(mappings, "bathrooms") == "Bathrooms"

    def test_header_claims_one_field(self, blank_mappings):
        """A header matching several patterns claims only the first."""
        mappings = auto_detect_mappings(["Garden Area"], blank_mappings)
        assert column_for(mappings, "garden_area") == "Garden Area"
        assert column_for(mappings, "net_bua") is None

    def test_accented_header(self, blank_mappings):
        """Accents are ignored when matching."""
        mappings = auto_detect_mappings(["Área"], blank_mappings)
        assert column_for(mappings, "net_bua") == "Área"

    def test_keeps_existing_mapping(self, blank_mappings):
        """Already-mapped fields are not overwritten."""
        mappings = set_mapping(blank_mappings, "prices", "Total")
        mappings = auto_detect_mappings(["Price"], mappings)
        assert column_for(mappings, "prices") == "Total"

    def test_skips_mapped_headers(self, blank_mappings):
        """A header already claimed elsewhere is left alone."""
        mappings = set_mapping(blank_mappings, "view", "Price")
        mappings = auto_detect_mappings(["Price"], mappings)
        assert column_for(mappings, "prices") is None

    def test_first_header_wins(self, blank_mappings):
        """Two price-like headers: the first claims the field."""
        mappings = auto_detect_mappings(["Price", "Cost"], blank_mappings)
        assert column_for(mappings, "prices") == "Price"

    def test_unknown_header_unmapped(self, blank_mappings):
        """Headers with no pattern stay unmapped."""
        mappings = auto_detect_mappings(["Notes"], blank_mappings)
        assert all(m.source_column_name is None for m in mappings)
