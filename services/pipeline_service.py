"""
Sheet pipeline service: one ingestion run end to end.

mapping -> transformations -> cleanups -> validation -> units
-> assets -> grouping -> delta -> stats

Synchronous and stateless: every run works on its own request snapshot.
"""

from typing import Optional
import structlog

from models.mapping import ColumnMapping
from models.pipeline import PipelineRequest, PipelineResult
from models.sheet import SheetData
from services import column_mapper
from services.asset_assignment import AssetAssignmentBook
from services.cleanup_service import apply_cleanups
from services.delta_tracker import apply_delta_stats, diff, summarize_deltas
from services.grouping_engine import group_stats, group_units, summarize_group
from services.schema_registry import SchemaRegistry, get_schema_registry
from services.sheet_validator import validate_rows
from services.transformation_engine import (
    apply_transformations,
    find_ordering_issues,
    sheet_to_table,
)
from services.unit_builder import build_unit_records

logger = structlog.get_logger(__name__)


class SheetPipelineService:
    """Runs the ingestion engine over one sheet."""

    def __init__(self, registry: Optional[SchemaRegistry] = None):
        self.registry = registry or get_schema_registry()

    def resolve_mappings(self, sheet: SheetData, mappings: list[ColumnMapping]) -> list[ColumnMapping]:
        """Use the given mappings, or seed and auto-detect when empty."""
        if mappings:
            return list(mappings)
        seeded = column_mapper.init_mappings(self.registry.get_fields())
        return column_mapper.auto_detect_mappings(sheet.columns, seeded)

    def run(self, request: PipelineRequest) -> PipelineResult:
        """
        Run the full pipeline.

        Never raises for bad cell data; issues come back as counts and
        lists in the result.
        """
        logger.info(
            "pipeline_started",
            file_name=request.sheet.file_name,
            sheet_name=request.sheet.sheet_name,
            rows=len(request.sheet.rows),
        )

        # Mapping
        mappings = self.resolve_mappings(request.sheet, request.mappings)
        mapping_summary = column_mapper.summarize(mappings, self.registry.get_fields())

        # Transformations and cleanup
        table = sheet_to_table(request.sheet)
        ordering_issues = find_ordering_issues(table.headers, request.transformations)
        table = apply_transformations(table, request.transformations)
        table, cleanups = apply_cleanups(table, request.cleanups)
        validation_issues = validate_rows(table, mappings)

        # Units and assets
        units = build_unit_records(table, mappings)
        book = AssetAssignmentBook(
            request.assignments,
            floor_plans=request.floor_plans or None,
            render_images=request.render_images or None,
        )
        if request.auto_assign_assets:
            book = book.auto_assign_floor_plans(units, request.floor_plans)
            book = book.auto_assign_render_images(units, request.render_images)
        units = book.apply_to_units(units)

        # Grouping and delta
        grouping = group_units(units, request.grouping, request.options, request.previous_groups)
        groups = book.attach_group_assets(grouping.groups)
        deltas = diff(request.previous_groups, groups)
        groups = apply_delta_stats(groups, deltas)

        result = PipelineResult(
            mappings=mappings,
            mapping_summary=mapping_summary,
            table=table,
            cleanups=cleanups,
            ordering_issues=ordering_issues,
            validation_issues=validation_issues,
            units=units,
            groups=groups,
            new_units=grouping.new_units,
            group_summaries=[summarize_group(g) for g in groups],
            group_stats=group_stats(groups, grouping.new_units, deltas),
            deltas=deltas,
            delta_summary=summarize_deltas(deltas),
            assignments=book.to_list(),
            assignment_stats=book.assignment_stats(units),
        )

        logger.info(
            "pipeline_completed",
            units=len(units),
            groups=len(groups),
            new_units=len(grouping.new_units),
            unmapped_mandatory=mapping_summary.unmapped_mandatory,
            validation_issues=len(validation_issues),
            deltas=len(deltas),
        )
        return result


# Singleton instance
_pipeline_service: Optional[SheetPipelineService] = None


def get_pipeline_service() -> SheetPipelineService:
    """Get or create pipeline service instance."""
    global _pipeline_service
    if _pipeline_service is None:
        _pipeline_service = SheetPipelineService()
    return _pipeline_service
