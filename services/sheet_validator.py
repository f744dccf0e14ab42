"""
Row validation for mapped sheets.

Advisory only: issues are listed for the operator, rows are never
dropped or rejected.
"""

import math
import structlog

from models.mapping import ColumnMapping
from models.sheet import TableData, ValidationIssue
from services.column_mapper import column_for

logger = structlog.get_logger(__name__)

VALID_STATUSES = ("Available", "Reserved", "Sold", "Not Available")

# field id -> label used in the issue text
NUMERIC_FIELDS = (
    ("prices", "price"),
    ("net_bua", "area"),
)


def _is_number(value: str) -> bool:
    """Finite number, thousands separators allowed ("1,250,000")."""
    try:
        number = float(value.strip().replace(",", ""))
    except ValueError:
        return False
    return math.isfinite(number)


def validate_rows(data: TableData, mappings: list[ColumnMapping]) -> list[ValidationIssue]:
    """
    Check mapped numeric and status columns.

    Empty cells are not flagged (missing data is a mapping concern, not a
    format one). Rows are 1-based.

    Returns:
        Issues ordered by check, then row
    """
    issues: list[ValidationIssue] = []

    for field_id, label in NUMERIC_FIELDS:
        column = column_for(mappings, field_id)
        if column is None or data.column_index(column) is None:
            continue
        for row_number, value in enumerate(data.column_values(column), start=1):
            if value.strip() and not _is_number(value):
                issues.append(ValidationIssue(
                    row=row_number,
                    column=column,
                    issue=f'Invalid {label} format: "{value}"',
                ))

    status_column = column_for(mappings, "status")
    if status_column is not None and data.column_index(status_column) is not None:
        for row_number, value in enumerate(data.column_values(status_column), start=1):
            if value.strip() and value not in VALID_STATUSES:
                issues.append(ValidationIssue(
                    row=row_number,
                    column=status_column,
                    issue=f'Invalid status: "{value}"',
                ))

    logger.info("rows_validated", rows=len(data.rows), issues=len(issues))
    return issues
