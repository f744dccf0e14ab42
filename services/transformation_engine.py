"""
Transformation engine: ordered fold of split/merge/static/formula steps.

apply_transformations(data, transformations) -> data

Rules:
- Steps run in `order` (stable, so equal orders keep list order).
- A step may append columns; later steps can read them.
- Bad cells never raise: non-numeric operands read as 0, division by
  zero writes DIVISION_BY_ZERO into the cell.
- Output always has exactly as many rows as the input.

Dependency order is the caller's job. find_ordering_issues() reports
steps that read a column nothing earlier provides, without reordering.
"""

import re
from typing import Any, Callable, Optional
import structlog
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from exceptions import InvalidTransformationError
from models.sheet import OrderingIssue, SheetData, TableData
from models.transformation import (
    FormulaOperation,
    FormulaTransformation,
    MergeTransformation,
    SplitTransformation,
    StaticTransformation,
    Transformation,
    TransformationType,
)
from utils.text_utils import cell_to_str

logger = structlog.get_logger(__name__)

DIVISION_BY_ZERO = "Error: Division by zero"

# Leading numeric prefix, as a spreadsheet user would read "45 sqm"
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_transformation_adapter = TypeAdapter(Transformation)


# ===================
# CONSTRUCTION
# ===================

def build_transformation(payload: dict[str, Any]) -> Transformation:
    """
    Validate a plain dict into a transformation variant.

    Raises:
        InvalidTransformationError: Unknown type or missing/invalid config
    """
    try:
        return _transformation_adapter.validate_python(payload)
    except PydanticValidationError as e:
        errors = [
            {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
            for err in e.errors()
        ]
        logger.warning("invalid_transformation", type=payload.get("type"), errors=len(errors))
        raise InvalidTransformationError(
            message="Invalid transformation definition",
            details={"type": payload.get("type"), "errors": errors},
        )


def sheet_to_table(sheet: SheetData) -> TableData:
    """
    Convert keyed sheet rows into positional string rows.

    Headers come from `sheet.columns`; when empty they are collected from
    the row keys in first-seen order.
    """
    headers = list(sheet.columns)
    if not headers:
        for row in sheet.rows:
            for key in row:
                if key not in headers:
                    headers.append(key)

    rows = [[cell_to_str(row.get(h)) for h in headers] for row in sheet.rows]
    return TableData(headers=headers, rows=rows)


# ===================
# HELPERS
# ===================

def parse_float(cell: Optional[str]) -> float:
    """Leading-number parse; anything non-numeric reads as 0."""
    if not cell:
        return 0.0
    match = _LEADING_NUMBER.match(str(cell))
    if not match:
        return 0.0
    return float(match.group(0))


def format_number(value: float) -> str:
    """Render a formula result: 70.0 -> "70", 0.5 -> "0.5"."""
    if value != value or value in (float("inf"), float("-inf")):
        return str(value)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def _ensure_columns(headers: list[str], rows: list[list[str]], columns: list[str]) -> tuple[list[str], list[list[str]]]:
    """Append missing headers and pad every row to the header width."""
    new_headers = list(headers)
    for col in columns:
        if col not in new_headers:
            new_headers.append(col)

    width = len(new_headers)
    new_rows = [row + [""] * (width - len(row)) if len(row) < width else list(row) for row in rows]
    return new_headers, new_rows


def _index(headers: list[str], column: str) -> Optional[int]:
    try:
        return headers.index(column)
    except ValueError:
        return None


# ===================
# APPLIERS
# ===================

def _apply_split(data: TableData, t: SplitTransformation) -> TableData:
    cfg = t.config
    headers, rows = _ensure_columns(data.headers, data.rows, cfg.target_columns)

    source_index = _index(headers, cfg.source_column)
    if source_index is None:
        logger.debug("split_source_missing", transformation_id=t.id, column=cfg.source_column)
        return TableData(headers=headers, rows=rows)

    target_indices = [headers.index(col) for col in cfg.target_columns]
    for row in rows:
        segments = row[source_index].split(cfg.delimiter)
        for i, target_index in enumerate(target_indices):
            # Fewer segments -> "", extra segments are dropped
            row[target_index] = segments[i] if i < len(segments) else ""

    return TableData(headers=headers, rows=rows)


def _apply_merge(data: TableData, t: MergeTransformation) -> TableData:
    cfg = t.config
    headers, rows = _ensure_columns(data.headers, data.rows, [cfg.target_column])

    source_indices = [i for i in (_index(headers, col) for col in cfg.source_columns) if i is not None]
    target_index = headers.index(cfg.target_column)

    for row in rows:
        values = [row[i] for i in source_indices]
        row[target_index] = cfg.separator.join(v for v in values if v)

    return TableData(headers=headers, rows=rows)


def _apply_static(data: TableData, t: StaticTransformation) -> TableData:
    cfg = t.config
    headers, rows = _ensure_columns(data.headers, data.rows, [cfg.target_column])

    target_index = headers.index(cfg.target_column)
    for row in rows:
        row[target_index] = cfg.value

    return TableData(headers=headers, rows=rows)


def _apply_formula(data: TableData, t: FormulaTransformation) -> TableData:
    cfg = t.config
    headers, rows = _ensure_columns(data.headers, data.rows, [cfg.target_column])

    index1 = _index(headers, cfg.column1)
    index2 = _index(headers, cfg.column2)
    target_index = headers.index(cfg.target_column)
    degraded = 0

    for row in rows:
        cell1 = row[index1] if index1 is not None else ""
        cell2 = row[index2] if index2 is not None else ""
        if not _LEADING_NUMBER.match(cell1) or not _LEADING_NUMBER.match(cell2):
            degraded += 1
        row[target_index] = _compute(cfg.formula, parse_float(cell1), parse_float(cell2))

    if degraded:
        logger.info(
            "formula_operands_defaulted",
            transformation_id=t.id,
            rows=degraded,
            column1=cfg.column1,
            column2=cfg.column2,
        )

    return TableData(headers=headers, rows=rows)


def _compute(operation: FormulaOperation, val1: float, val2: float) -> str:
    if operation == FormulaOperation.MULTIPLY:
        return format_number(val1 * val2)
    if operation == FormulaOperation.ADD:
        return format_number(val1 + val2)
    if operation == FormulaOperation.SUBTRACT:
        return format_number(val1 - val2)
    if val2 == 0:
        return DIVISION_BY_ZERO
    return format_number(val1 / val2)


_APPLIERS: dict[TransformationType, Callable[[TableData, Any], TableData]] = {
    TransformationType.SPLIT: _apply_split,
    TransformationType.MERGE: _apply_merge,
    TransformationType.STATIC: _apply_static,
    TransformationType.FORMULA: _apply_formula,
}


# ===================
# PUBLIC API
# ===================

def apply_transformation(data: TableData, transformation: Transformation) -> TableData:
    """Apply one transformation, returning a new table."""
    applier = _APPLIERS[TransformationType(transformation.type)]
    result = applier(data, transformation)
    logger.debug(
        "transformation_applied",
        transformation_id=transformation.id,
        type=transformation.type,
        columns=len(result.headers),
    )
    return result


def ordered(transformations: list[Transformation]) -> list[Transformation]:
    """Transformations in execution order."""
    return sorted(transformations, key=lambda t: t.order)


def apply_transformations(data: TableData, transformations: list[Transformation]) -> TableData:
    """
    Fold every transformation over the table in execution order.

    The input table is not modified.
    """
    result = TableData(headers=list(data.headers), rows=[list(row) for row in data.rows])
    for transformation in ordered(transformations):
        result = apply_transformation(result, transformation)

    logger.info(
        "transformations_applied",
        count=len(transformations),
        rows=len(result.rows),
        columns=len(result.headers),
    )
    return result


def find_ordering_issues(headers: list[str], transformations: list[Transformation]) -> list[OrderingIssue]:
    """
    Report reads of columns that neither the input nor an earlier step provides.

    Advisory only; the engine still runs the steps as ordered.
    """
    available = set(headers)
    issues = []
    for position, t in enumerate(ordered(transformations)):
        for column in t.reads():
            if column not in available:
                issues.append(OrderingIssue(transformation_id=t.id, position=position, column=column))
        available.update(t.writes())
    return issues
