"""
Grouping configuration constants.

Defaults for the unit grouping key and area bucketing. Settings can
override every value here through the environment.
"""

# =============================================================================
# GROUPING KEY
# =============================================================================

# Ordered grouping key: developer -> project -> phase -> category -> type
# -> bedrooms -> floor plan -> garden/roof flag
DEFAULT_GROUPING_FIELDS = (
    "developer_id",
    "project_id",
    "phase_id",
    "property_category",
    "unit_type",
    "bedrooms",
    "floor_plan",
    "has_garden_or_roof",
)

# Grouping fields computed from the unit record rather than read from a column
DERIVED_GROUPING_FIELDS = (
    "area",
    "floor_plan",
    "has_garden_or_roof",
)


# =============================================================================
# AREA BUCKETS
# =============================================================================

# Fallback bucket width in m² when a property type has no entry below
DEFAULT_AREA_BUCKET_SIZE = 25.0

# Bucket width in m² per property type
# Larger types vary more in area, so they get coarser buckets
DEFAULT_AREA_BUCKET_SIZES = {
    "Apartment": 25.0,
    "Studio": 25.0,
    "Chalet": 25.0,
    "Duplex": 50.0,
    "Penthouse": 50.0,
    "Townhouse": 50.0,
    "Twin House": 50.0,
    "Villa": 100.0,
}


# =============================================================================
# UNIT RECORDS
# =============================================================================

# Generated ids look like UNIT-0001 (1-based data row)
DEFAULT_UNIT_ID_PREFIX = "UNIT"
