"""
Ingestion engine services.

Each module handles one stage of the sheet pipeline.
"""

from services.schema_registry import SchemaRegistry, get_schema_registry, SYSTEM_FIELDS
from services.pipeline_service import SheetPipelineService, get_pipeline_service

__all__ = [
    "SchemaRegistry",
    "get_schema_registry",
    "SYSTEM_FIELDS",
    "SheetPipelineService",
    "get_pipeline_service",
]
