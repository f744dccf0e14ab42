"""
Sheet ingestion API routes.

Stateless: every request carries the snapshot it works on and nothing
is stored between calls.
"""

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.asset import AssetAssignment
from models.mapping import ColumnMapping
from models.pipeline import (
    AutoAssignRequest,
    AutoAssignResponse,
    AutoDetectRequest,
    DiffRequest,
    DiffResponse,
    GroupRequest,
    GroupResponse,
    MappingSummaryRequest,
    MappingSummaryResponse,
    PipelineRequest,
    PipelineResult,
    TransformRequest,
    TransformResponse,
    ValidateRequest,
)
from models.schema import Importance, SystemField
from models.sheet import ValidationIssue
from services import column_mapper
from services.asset_assignment import AssetAssignmentBook
from services.cleanup_service import apply_cleanups
from services.delta_tracker import DEFAULT_TRACKED_FIELDS, apply_delta_stats, diff, summarize_deltas
from services.grouping_engine import group_stats, group_units
from services.pipeline_service import get_pipeline_service
from services.schema_registry import get_schema_registry
from services.sheet_validator import validate_rows
from services.transformation_engine import (
    apply_transformations,
    find_ordering_issues,
    sheet_to_table,
)
from exceptions import AppError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# SCHEMA REGISTRY
# ===================

@router.get("/fields", response_model=list[SystemField])
async def list_fields(
    importance: Optional[Importance] = Query(None, description="Filter by importance tier")
):
    """List system fields in registry order."""
    try:
        registry = get_schema_registry()
        if importance is not None:
            return registry.fields_by_importance(importance)
        return registry.get_fields()
    except Exception as e:
        return handle_error(e)


@router.get("/fields/{field_id}", response_model=SystemField)
async def get_field(field_id: str):
    """
    Get one system field.

    Raises:
        404: Unknown field id
    """
    try:
        return get_schema_registry().get_field(field_id)
    except Exception as e:
        return handle_error(e)


# ===================
# COLUMN MAPPING
# ===================

@router.post("/mappings/auto-detect", response_model=list[ColumnMapping])
async def auto_detect(data: AutoDetectRequest):
    """
    Fill unmapped fields from sheet headers.

    Empty `mappings` are seeded from the registry first.
    """
    try:
        mappings = data.mappings or column_mapper.init_mappings(get_schema_registry().get_fields())
        return column_mapper.auto_detect_mappings(data.columns, mappings)
    except Exception as e:
        return handle_error(e)


@router.post("/mappings/summary", response_model=MappingSummaryResponse)
async def mapping_summary(data: MappingSummaryRequest):
    """Unmapped counts and duplicate column claims."""
    try:
        fields = get_schema_registry().get_fields()
        return MappingSummaryResponse(
            summary=column_mapper.summarize(data.mappings, fields),
            duplicate_claims=column_mapper.find_duplicate_claims(data.mappings),
        )
    except Exception as e:
        return handle_error(e)


# ===================
# TRANSFORMATIONS
# ===================

@router.post("/transform", response_model=TransformResponse)
async def transform(data: TransformRequest):
    """Apply transformations then cleanups to a sheet."""
    try:
        table = sheet_to_table(data.sheet)
        ordering_issues = find_ordering_issues(table.headers, data.transformations)
        table = apply_transformations(table, data.transformations)
        table, cleanups = apply_cleanups(table, data.cleanups)
        return TransformResponse(table=table, cleanups=cleanups, ordering_issues=ordering_issues)
    except Exception as e:
        return handle_error(e)


@router.post("/validate", response_model=list[ValidationIssue])
async def validate(data: ValidateRequest):
    """Advisory row checks on mapped columns."""
    try:
        return validate_rows(data.table, data.mappings)
    except Exception as e:
        return handle_error(e)


# ===================
# GROUPING
# ===================

@router.post("/group", response_model=GroupResponse)
async def group(data: GroupRequest):
    """Group units, optionally against a previous run."""
    try:
        result = group_units(data.units, data.config, data.options, data.previous_groups)
        entries = diff(data.previous_groups, result.groups)
        groups = apply_delta_stats(result.groups, entries)
        return GroupResponse(
            groups=groups,
            new_units=result.new_units,
            stats=group_stats(groups, result.new_units, entries),
        )
    except Exception as e:
        return handle_error(e)


@router.post("/diff", response_model=DiffResponse)
async def diff_groups(data: DiffRequest):
    """Added/removed/edited units between two runs."""
    try:
        tracked = tuple(data.tracked_fields) if data.tracked_fields is not None else DEFAULT_TRACKED_FIELDS
        entries = diff(data.previous_groups, data.current_groups, tracked)
        return DiffResponse(entries=entries, summary=summarize_deltas(entries))
    except Exception as e:
        return handle_error(e)


# ===================
# ASSETS
# ===================

@router.post("/assets/auto-assign", response_model=AutoAssignResponse)
async def auto_assign_assets(data: AutoAssignRequest):
    """Fill floor plans and render images; manual assignments are kept."""
    try:
        book = AssetAssignmentBook(data.assignments, data.floor_plans, data.render_images)
        book = book.auto_assign_floor_plans(data.units).auto_assign_render_images(data.units)
        assignments: list[AssetAssignment] = book.to_list()
        return AutoAssignResponse(assignments=assignments, stats=book.assignment_stats(data.units))
    except Exception as e:
        return handle_error(e)


# ===================
# PIPELINE
# ===================

@router.post("/pipeline", response_model=PipelineResult)
async def run_pipeline(data: PipelineRequest):
    """Run mapping, transformation, grouping, delta and assets in one call."""
    try:
        return get_pipeline_service().run(data)
    except Exception as e:
        return handle_error(e)
