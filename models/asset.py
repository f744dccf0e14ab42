"""
Asset catalog and assignment schemas.

Floor plans match units by (type, area range). Render images match by
type, optionally narrowed by area, and are split into interior/exterior.
"""

from enum import Enum
from typing import Optional
from pydantic import Field

from models.base import BaseSchema


class RenderCategory(str, Enum):
    INTERIOR = "Interior"
    EXTERIOR = "Exterior"


class CatalogEntry(BaseSchema):
    """Generic matchable asset: a unit matches on type and area range."""

    asset_id: str
    type: str
    area_min: Optional[float] = None  # None = unbounded
    area_max: Optional[float] = None
    category: Optional[RenderCategory] = None

    def matches(self, unit_type: Optional[str], area: Optional[float]) -> bool:
        """True if the unit fits this entry (inclusive bounds)."""
        if unit_type is None or self.type != unit_type:
            return False
        if self.area_min is None and self.area_max is None:
            return True
        if area is None:
            return False
        if self.area_min is not None and area < self.area_min:
            return False
        if self.area_max is not None and area > self.area_max:
            return False
        return True


class FloorPlan(BaseSchema):
    """Floor plan catalog entry."""

    id: str
    name: str = ""
    type: str
    area_min: float = Field(..., ge=0)
    area_max: float = Field(..., ge=0)
    image_url: Optional[str] = None

    def to_catalog_entry(self) -> CatalogEntry:
        return CatalogEntry(
            asset_id=self.id,
            type=self.type,
            area_min=self.area_min,
            area_max=self.area_max,
        )


class RenderImage(BaseSchema):
    """Render image catalog entry."""

    id: str
    name: str = ""
    type: str
    category: RenderCategory = RenderCategory.INTERIOR
    area_min: Optional[float] = None
    area_max: Optional[float] = None
    image_url: Optional[str] = None

    def to_catalog_entry(self) -> CatalogEntry:
        return CatalogEntry(
            asset_id=self.id,
            type=self.type,
            area_min=self.area_min,
            area_max=self.area_max,
            category=self.category,
        )


class AssetAssignment(BaseSchema):
    """Assets attached to one unit. Manual flags pin values against auto-assign."""

    unit_id: str
    floor_plan_id: Optional[str] = None
    render_image_ids: list[str] = Field(default_factory=list)
    manual_floor_plan: bool = False
    manual_render_images: bool = False


class AssignmentStats(BaseSchema):
    total_units: int = 0
    with_floor_plan: int = 0
    with_render_images: int = 0
    without_assets: int = 0
    manual: int = 0
