"""
Column mapping schemas.

One mapping per system field, plus any custom fields the user adds.
"""

from typing import Optional
from pydantic import Field

from models.base import BaseSchema, PayloadSchema


class ColumnMapping(PayloadSchema):
    """Binding between a system (or custom) field and a sheet column."""

    system_field_id: str = Field(..., min_length=1)
    source_column_name: Optional[str] = None  # None = unmapped
    is_custom: bool = False
    custom_name: Optional[str] = None

    @property
    def is_mapped(self) -> bool:
        return self.source_column_name is not None


class DuplicateClaim(PayloadSchema):
    """A sheet column claimed by more than one field."""

    column: str
    field_ids: list[str]


class MappingSummary(BaseSchema):
    """
    Advisory counts shown above the mapper.

    Nothing here blocks the pipeline; the operator decides whether to
    proceed with gaps.
    """

    unmapped_mandatory: int = 0
    unmapped_important: int = 0
    mapped_count: int = 0
    duplicate_claims: int = 0
    unmapped_mandatory_fields: list[str] = Field(default_factory=list)
    unmapped_important_fields: list[str] = Field(default_factory=list)
