"""
Unit record schema.

A unit record is one sheet row after mapping and transformation, with the
grouping-relevant attributes pulled out into typed fields.
"""

from typing import Any, Optional
from pydantic import Field

from models.base import PayloadSchema

# Areas whose presence sets the garden/roof grouping flag
OUTDOOR_AREA_FIELDS = ("garden_area", "roof_area", "roof_annex_area")


def _positive_number(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        return float(str(value).replace(",", "")) > 0
    except ValueError:
        return False


class UnitRecord(PayloadSchema):
    """Normalized unit row."""

    unit_id: str = Field(..., min_length=1)
    row_number: int = Field(0, ge=0, description="1-based data row, 0 if not from a sheet")

    unit_type: Optional[str] = None
    property_type: Optional[str] = None
    area: Optional[float] = None
    bedrooms: Optional[int] = None
    price: Optional[float] = None

    floor_plan_id: Optional[str] = None
    render_image_ids: list[str] = Field(default_factory=list)

    # system field id (or custom field name) -> raw cell
    attributes: dict[str, str] = Field(default_factory=dict)

    @property
    def project(self) -> Optional[str]:
        """Project label for naming: name when mapped, else id."""
        return self.attributes.get("project_name") or self.attributes.get("project_id") or None

    @property
    def project_key(self) -> Optional[str]:
        """Project identifier used for per-project grouping overrides."""
        return self.attributes.get("project_id") or self.attributes.get("project_name") or None

    @property
    def has_garden_or_roof(self) -> bool:
        return any(_positive_number(self.attributes.get(f)) for f in OUTDOOR_AREA_FIELDS)

    def value(self, field: str) -> Any:
        """
        Resolve a grouping or tracking field.

        Typed and derived fields win over raw attributes. Empty cells
        resolve to None.
        """
        if field == "unit_type":
            return self.unit_type
        if field == "property_type":
            return self.property_type
        if field == "area":
            return self.area
        if field == "bedrooms":
            return self.bedrooms
        if field in ("price", "prices"):
            return self.price
        if field == "floor_plan":
            return self.floor_plan_id
        if field == "has_garden_or_roof":
            return self.has_garden_or_roof
        return self.attributes.get(field) or None

    def snapshot(self, fields: Optional[tuple[str, ...]] = None) -> dict[str, Any]:
        """
        Attribute snapshot for delta comparison.

        Args:
            fields: Fields to include. None means every typed field plus
                every raw attribute.
        """
        if fields is None:
            fields = ("unit_type", "area", "bedrooms", "price") + tuple(sorted(self.attributes))
        return {f: self.value(f) for f in fields}
