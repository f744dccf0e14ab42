"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema, PayloadSchema
from models.schema import (
    Importance,
    DataType,
    SystemField,
)
from models.mapping import (
    ColumnMapping,
    DuplicateClaim,
    MappingSummary,
)
from models.sheet import (
    SheetData,
    TableData,
    ValidationIssue,
    OrderingIssue,
    CleanupActionType,
    CleanupAction,
)
from models.transformation import (
    TransformationType,
    FormulaOperation,
    SplitConfig,
    MergeConfig,
    StaticConfig,
    FormulaConfig,
    SplitTransformation,
    MergeTransformation,
    StaticTransformation,
    FormulaTransformation,
    Transformation,
)
from models.unit import UnitRecord
from models.group import (
    Group,
    GroupStats,
    GroupingConfig,
    GroupingOptions,
    GroupingResult,
    GroupSummary,
    GroupingStats,
)
from models.delta import (
    DeltaKind,
    DeltaEntry,
    DeltaSummary,
)
from models.asset import (
    RenderCategory,
    CatalogEntry,
    FloorPlan,
    RenderImage,
    AssetAssignment,
    AssignmentStats,
)
from models.pipeline import (
    PipelineRequest,
    PipelineResult,
)

__all__ = [
    # Base
    "BaseSchema",
    "PayloadSchema",
    # Schema registry
    "Importance",
    "DataType",
    "SystemField",
    # Mapping
    "ColumnMapping",
    "DuplicateClaim",
    "MappingSummary",
    # Sheet
    "SheetData",
    "TableData",
    "ValidationIssue",
    "OrderingIssue",
    "CleanupActionType",
    "CleanupAction",
    # Transformations
    "TransformationType",
    "FormulaOperation",
    "SplitConfig",
    "MergeConfig",
    "StaticConfig",
    "FormulaConfig",
    "SplitTransformation",
    "MergeTransformation",
    "StaticTransformation",
    "FormulaTransformation",
    "Transformation",
    # Units and groups
    "UnitRecord",
    "Group",
    "GroupStats",
    "GroupingConfig",
    "GroupingOptions",
    "GroupingResult",
    "GroupSummary",
    "GroupingStats",
    # Delta
    "DeltaKind",
    "DeltaEntry",
    "DeltaSummary",
    # Assets
    "RenderCategory",
    "CatalogEntry",
    "FloorPlan",
    "RenderImage",
    "AssetAssignment",
    "AssignmentStats",
    # Pipeline
    "PipelineRequest",
    "PipelineResult",
]
