"""
Pipeline and endpoint request/response schemas.
"""

from typing import Optional
from pydantic import Field

from models.asset import AssetAssignment, AssignmentStats, FloorPlan, RenderImage
from models.base import PayloadSchema
from models.delta import DeltaEntry, DeltaSummary
from models.group import Group, GroupingConfig, GroupingOptions, GroupingStats, GroupSummary
from models.mapping import ColumnMapping, DuplicateClaim, MappingSummary
from models.sheet import CleanupAction, OrderingIssue, SheetData, TableData, ValidationIssue
from models.transformation import Transformation
from models.unit import UnitRecord


# ===================
# FULL PIPELINE
# ===================

class PipelineRequest(PayloadSchema):
    """
    One ingestion run.

    Empty `mappings` means: seed from the registry and auto-detect from
    the sheet headers.
    """

    sheet: SheetData
    mappings: list[ColumnMapping] = Field(default_factory=list)
    transformations: list[Transformation] = Field(default_factory=list)
    cleanups: list[CleanupAction] = Field(default_factory=list)

    grouping: GroupingConfig = Field(default_factory=GroupingConfig)
    options: GroupingOptions = Field(default_factory=GroupingOptions)
    previous_groups: list[Group] = Field(default_factory=list)

    floor_plans: list[FloorPlan] = Field(default_factory=list)
    render_images: list[RenderImage] = Field(default_factory=list)
    assignments: list[AssetAssignment] = Field(default_factory=list)
    auto_assign_assets: bool = True


class PipelineResult(PayloadSchema):
    """Everything the persistence and UI collaborators consume."""

    mappings: list[ColumnMapping] = Field(default_factory=list)
    mapping_summary: MappingSummary
    table: TableData
    cleanups: list[CleanupAction] = Field(default_factory=list)
    ordering_issues: list[OrderingIssue] = Field(default_factory=list)
    validation_issues: list[ValidationIssue] = Field(default_factory=list)

    units: list[UnitRecord] = Field(default_factory=list)
    groups: list[Group] = Field(default_factory=list)
    new_units: list[UnitRecord] = Field(default_factory=list)
    group_summaries: list[GroupSummary] = Field(default_factory=list)
    group_stats: GroupingStats

    deltas: list[DeltaEntry] = Field(default_factory=list)
    delta_summary: DeltaSummary

    assignments: list[AssetAssignment] = Field(default_factory=list)
    assignment_stats: AssignmentStats


# ===================
# ENDPOINT BODIES
# ===================

class AutoDetectRequest(PayloadSchema):
    columns: list[str]
    mappings: list[ColumnMapping] = Field(default_factory=list)  # empty -> seeded from registry


class MappingSummaryRequest(PayloadSchema):
    mappings: list[ColumnMapping]


class MappingSummaryResponse(PayloadSchema):
    summary: MappingSummary
    duplicate_claims: list[DuplicateClaim] = Field(default_factory=list)


class TransformRequest(PayloadSchema):
    sheet: SheetData
    transformations: list[Transformation] = Field(default_factory=list)
    cleanups: list[CleanupAction] = Field(default_factory=list)


class TransformResponse(PayloadSchema):
    table: TableData
    cleanups: list[CleanupAction] = Field(default_factory=list)
    ordering_issues: list[OrderingIssue] = Field(default_factory=list)


class ValidateRequest(PayloadSchema):
    table: TableData
    mappings: list[ColumnMapping]


class GroupRequest(PayloadSchema):
    units: list[UnitRecord]
    config: GroupingConfig = Field(default_factory=GroupingConfig)
    options: GroupingOptions = Field(default_factory=GroupingOptions)
    previous_groups: list[Group] = Field(default_factory=list)


class GroupResponse(PayloadSchema):
    groups: list[Group] = Field(default_factory=list)
    new_units: list[UnitRecord] = Field(default_factory=list)
    stats: GroupingStats


class DiffRequest(PayloadSchema):
    previous_groups: list[Group] = Field(default_factory=list)
    current_groups: list[Group] = Field(default_factory=list)
    tracked_fields: Optional[list[str]] = None  # None -> default tracked fields


class DiffResponse(PayloadSchema):
    entries: list[DeltaEntry] = Field(default_factory=list)
    summary: DeltaSummary


class AutoAssignRequest(PayloadSchema):
    units: list[UnitRecord]
    floor_plans: list[FloorPlan] = Field(default_factory=list)
    render_images: list[RenderImage] = Field(default_factory=list)
    assignments: list[AssetAssignment] = Field(default_factory=list)


class AutoAssignResponse(PayloadSchema):
    assignments: list[AssetAssignment] = Field(default_factory=list)
    stats: AssignmentStats
