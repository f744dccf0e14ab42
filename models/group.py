"""
Grouping schemas.

Groups are regenerated on every run; ids derive from the composite key so
the same key maps to the same id across runs.
"""

from typing import Any, Optional
from pydantic import Field

from config import settings
from models.base import BaseSchema, PayloadSchema
from models.unit import UnitRecord


class GroupStats(BaseSchema):
    """Unit counts for one group relative to the previous run."""
    total: int = 0
    added: int = 0
    removed: int = 0
    edited: int = 0


class Group(PayloadSchema):
    """Units sharing identical values across the grouping key."""

    id: str
    name: str
    project: Optional[str] = None
    unit_type: Optional[str] = None
    key_attributes: list[tuple[str, Any]] = Field(default_factory=list)
    floor_plan_ref: Optional[str] = None
    render_image_refs: list[str] = Field(default_factory=list)
    units: list[UnitRecord] = Field(default_factory=list)
    stats: GroupStats = Field(default_factory=GroupStats)

    @property
    def key(self) -> tuple:
        """Hashable composite key."""
        return tuple((field, value) for field, value in self.key_attributes)

    @property
    def unit_ids(self) -> list[str]:
        return [u.unit_id for u in self.units]


class GroupingConfig(BaseSchema):
    """
    Grouping key and area bucket configuration.

    `project_fields` holds per-project ordered overrides keyed by project
    id; projects without an entry use `default_fields`.
    """

    default_fields: list[str] = Field(default_factory=lambda: list(settings.default_grouping_fields))
    project_fields: dict[str, list[str]] = Field(default_factory=dict)
    area_bucket_sizes: dict[str, float] = Field(default_factory=lambda: dict(settings.area_bucket_sizes))
    default_area_bucket_size: float = Field(default_factory=lambda: settings.default_area_bucket_size, gt=0)

    def resolve_fields(self, project: Optional[str]) -> list[str]:
        """Ordered grouping fields for a project."""
        if project and project in self.project_fields:
            return list(self.project_fields[project])
        return list(self.default_fields)

    def bucket_size_for(self, property_type: Optional[str]) -> float:
        """Area bucket width for a property type."""
        if property_type:
            size = self.area_bucket_sizes.get(property_type)
            if size and size > 0:
                return size
        return self.default_area_bucket_size


class GroupingOptions(BaseSchema):
    merge_with_existing: bool = False
    preserve_names: bool = False
    auto_create_groups: bool = True  # False holds new-key units out of groups


class GroupingResult(PayloadSchema):
    """Groups of one run plus the units whose key is new."""
    groups: list[Group] = Field(default_factory=list)
    new_units: list[UnitRecord] = Field(default_factory=list)


class GroupSummary(BaseSchema):
    """Display ranges for a group card."""
    group_id: str
    unit_count: int = 0
    area_min: Optional[float] = None
    area_max: Optional[float] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    bathrooms_min: Optional[float] = None
    bathrooms_max: Optional[float] = None


class GroupingStats(BaseSchema):
    """Run-level counts for the grouping screen."""
    total_groups: int = 0
    total_units: int = 0
    grouped_units: int = 0
    new_units: int = 0
    added: int = 0
    removed: int = 0
    edited: int = 0
