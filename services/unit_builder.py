"""
Unit builder: turns mapped, transformed rows into UnitRecords.

Reads cells through the column mapping only; unmapped columns never
reach the unit record.
"""

from typing import Optional
import structlog

from config import settings
from models.mapping import ColumnMapping
from models.sheet import TableData
from models.unit import UnitRecord
from utils.text_utils import parse_number

logger = structlog.get_logger(__name__)

# First non-empty wins
UNIT_TYPE_FIELDS = ("unit_type", "property_subtype", "property_type")
AREA_FIELDS = ("net_bua", "gross_bua")


def fallback_unit_id(row_number: int, prefix: Optional[str] = None) -> str:
    """UNIT-0001 style id for rows without a unit code."""
    return f"{prefix or settings.unit_id_prefix}-{row_number:04d}"


def _first_present(attributes: dict[str, str], fields: tuple[str, ...]) -> Optional[str]:
    for field in fields:
        value = attributes.get(field, "").strip()
        if value:
            return value
    return None


def _first_number(attributes: dict[str, str], fields: tuple[str, ...]) -> Optional[float]:
    for field in fields:
        number = parse_number(attributes.get(field))
        if number is not None:
            return number
    return None


def _attribute_columns(data: TableData, mappings: list[ColumnMapping]) -> list[tuple[str, int]]:
    """(attribute key, column index) for every mapping whose column exists."""
    columns = []
    for m in mappings:
        if not m.is_mapped:
            continue
        index = data.column_index(m.source_column_name)
        if index is None:
            logger.debug("mapped_column_missing", field_id=m.system_field_id, column=m.source_column_name)
            continue
        key = m.custom_name if m.is_custom and m.custom_name else m.system_field_id
        columns.append((key, index))
    return columns


def build_unit_record(row: list[str], row_number: int, columns: list[tuple[str, int]]) -> UnitRecord:
    """Build one unit from a positional row."""
    attributes = {key: (row[index] if index < len(row) else "") for key, index in columns}

    bedrooms = parse_number(attributes.get("bedrooms"))

    return UnitRecord(
        unit_id=attributes.get("unit_code", "").strip() or fallback_unit_id(row_number),
        row_number=row_number,
        unit_type=_first_present(attributes, UNIT_TYPE_FIELDS),
        property_type=_first_present(attributes, ("property_type",)),
        area=_first_number(attributes, AREA_FIELDS),
        bedrooms=int(bedrooms) if bedrooms is not None else None,
        price=parse_number(attributes.get("prices")),
        attributes=attributes,
    )


def build_unit_records(data: TableData, mappings: list[ColumnMapping]) -> list[UnitRecord]:
    """
    Build one UnitRecord per row.

    Args:
        data: Table after transformations and cleanups
        mappings: Current column mapping

    Returns:
        Units in row order (row_number is 1-based)
    """
    columns = _attribute_columns(data, mappings)
    units = [
        build_unit_record(row, row_number, columns)
        for row_number, row in enumerate(data.rows, start=1)
    ]

    generated = sum(1 for u in units if not u.attributes.get("unit_code", "").strip())
    logger.info("unit_records_built", units=len(units), generated_ids=generated)
    return units
