"""
Sheet data schemas.

SheetData is what the upload/parsing collaborator hands over (rows keyed
by header). TableData is the positional shape the transformation engine
folds over.
"""

from enum import Enum
from typing import Any, Optional
from uuid import uuid4
from pydantic import Field

from models.base import BaseSchema, PayloadSchema


class SheetData(PayloadSchema):
    """Parsed sheet as supplied by the caller."""

    columns: list[str] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    file_name: str = ""
    sheet_name: str = ""
    total_rows: Optional[int] = None

    @property
    def row_count(self) -> int:
        return self.total_rows if self.total_rows is not None else len(self.rows)


class TableData(PayloadSchema):
    """Headers plus positional string rows."""

    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)

    def column_index(self, name: str) -> Optional[int]:
        """Index of a header, or None if absent."""
        try:
            return self.headers.index(name)
        except ValueError:
            return None

    def column_values(self, name: str) -> list[str]:
        """All cells of one column ("" for short rows or a missing column)."""
        index = self.column_index(name)
        if index is None:
            return ["" for _ in self.rows]
        return [row[index] if index < len(row) else "" for row in self.rows]

    def to_records(self) -> list[dict[str, str]]:
        """Rows as header -> cell dicts."""
        return [
            {header: (row[i] if i < len(row) else "") for i, header in enumerate(self.headers)}
            for row in self.rows
        ]


class ValidationIssue(BaseSchema):
    """Single advisory issue found in a row."""
    row: int  # 1-based data row
    column: str
    issue: str


class OrderingIssue(BaseSchema):
    """Transformation reads a column nothing before it provides."""
    transformation_id: str
    position: int
    column: str


class CleanupActionType(str, Enum):
    """Column cleanup operations offered before grouping."""
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"
    CAPITALIZE = "capitalize"
    TRIM = "trim"
    FORMAT_NUMBER = "format_number"
    STANDARDIZE_PROPERTY_TYPE = "standardize_property_type"
    STANDARDIZE_STATUS = "standardize_status"
    STANDARDIZE_FINISHING = "standardize_finishing"
    REMOVE_DUPLICATES = "remove_duplicates"


class CleanupAction(PayloadSchema):
    """One cleanup step. `column` is unused by remove_duplicates."""

    id: str = Field(default_factory=lambda: f"cleanup-{uuid4().hex[:8]}")
    type: CleanupActionType
    column: Optional[str] = None
    description: str = ""
