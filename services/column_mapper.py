"""
Column mapper: binds sheet columns to system fields.

Every function takes the current mapping list and returns a new one;
nothing is mutated in place.

Two fields may point at the same column. That is allowed (the operator
may do it on purpose) but reported through find_duplicate_claims() and
the summary counts.
"""

import re
from collections import defaultdict
from typing import Optional
import structlog

from models.mapping import ColumnMapping, DuplicateClaim, MappingSummary
from models.schema import Importance, SystemField
from utils.text_utils import custom_field_id, normalize_header

logger = structlog.get_logger(__name__)


# Header patterns for auto-detection, tried in order per header.
# First field whose pattern matches claims the header.
AUTO_DETECT_PATTERNS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("unit_code", (r"unit.*id", r"unit.*code", r"^code$")),
    ("unit_number", (r"unit.*number", r"unit.*no\b")),
    ("project_name", (r"project",)),
    ("developer_id", (r"developer", r"builder", r"company")),
    ("phase_id", (r"phase", r"stage")),
    ("building", (r"building", r"block", r"tower")),
    ("unit_type", (r"type",)),
    ("garden_area", (r"garden",)),
    ("terrace_area", (r"terrace",)),
    ("roof_area", (r"roof",)),
    ("net_bua", (r"area", r"sqm", r"size", r"bua")),
    ("prices", (r"price", r"cost", r"value")),
    ("status", (r"status", r"availability")),
    ("floor", (r"floor", r"level")),
    ("bedrooms", (r"bed", r"bedroom", r"\bbr$")),
    ("bathrooms", (r"bath",)),
    ("view", (r"view",)),
    ("is_parking_included", (r"parking",)),
)


def init_mappings(fields: list[SystemField]) -> list[ColumnMapping]:
    """Seed one unmapped entry per system field."""
    return [ColumnMapping(system_field_id=f.id) for f in fields]


def set_mapping(
    mappings: list[ColumnMapping],
    field_id: str,
    column: Optional[str],
) -> list[ColumnMapping]:
    """
    Point a field at a column (None unmaps).

    Does not unmap another field already holding the same column.
    Unknown field ids leave the list unchanged.
    """
    if not any(m.system_field_id == field_id for m in mappings):
        logger.debug("set_mapping_unknown_field", field_id=field_id)
        return list(mappings)

    return [
        m.model_copy(update={"source_column_name": column}) if m.system_field_id == field_id else m
        for m in mappings
    ]


def add_custom_field(mappings: list[ColumnMapping], name: str) -> list[ColumnMapping]:
    """
    Append an unmapped custom field.

    No-op when the name is empty or an existing custom field has the same
    display text (case-sensitive).
    """
    if not name:
        return list(mappings)
    if any(m.is_custom and m.custom_name == name for m in mappings):
        logger.debug("custom_field_exists", name=name)
        return list(mappings)

    return list(mappings) + [
        ColumnMapping(
            system_field_id=custom_field_id(name),
            is_custom=True,
            custom_name=name,
        )
    ]


def remove_custom_field(mappings: list[ColumnMapping], name: str) -> list[ColumnMapping]:
    """Drop the custom field with this display name."""
    return [m for m in mappings if not (m.is_custom and m.custom_name == name)]


def find_duplicate_claims(mappings: list[ColumnMapping]) -> list[DuplicateClaim]:
    """Columns claimed by more than one field, in first-claim order."""
    claims: dict[str, list[str]] = defaultdict(list)
    for m in mappings:
        if m.source_column_name is not None:
            claims[m.source_column_name].append(m.system_field_id)

    return [
        DuplicateClaim(column=column, field_ids=field_ids)
        for column, field_ids in claims.items()
        if len(field_ids) > 1
    ]


def summarize(mappings: list[ColumnMapping], fields: list[SystemField]) -> MappingSummary:
    """
    Count unmapped mandatory/important fields and mapped entries.

    Custom fields count toward mapped_count only.
    """
    importance_by_id = {f.id: f.importance for f in fields}

    unmapped_mandatory = []
    unmapped_important = []
    mapped_count = 0

    for m in mappings:
        if m.is_mapped:
            mapped_count += 1
            continue
        importance = importance_by_id.get(m.system_field_id)
        if importance == Importance.MANDATORY:
            unmapped_mandatory.append(m.system_field_id)
        elif importance == Importance.IMPORTANT:
            unmapped_important.append(m.system_field_id)

    return MappingSummary(
        unmapped_mandatory=len(unmapped_mandatory),
        unmapped_important=len(unmapped_important),
        mapped_count=mapped_count,
        duplicate_claims=len(find_duplicate_claims(mappings)),
        unmapped_mandatory_fields=unmapped_mandatory,
        unmapped_important_fields=unmapped_important,
    )


def auto_detect_mappings(
    columns: list[str],
    mappings: list[ColumnMapping],
) -> list[ColumnMapping]:
    """
    Fill unmapped fields from header names.

    Each header claims at most one field: the first entry in
    AUTO_DETECT_PATTERNS that matches it and is still unmapped. Headers
    already mapped somewhere are skipped, as are fields absent from
    `mappings`.
    """
    taken_columns = {m.source_column_name for m in mappings if m.is_mapped}
    available = {m.system_field_id for m in mappings if not m.is_mapped and not m.is_custom}
    detected: dict[str, str] = {}

    for column in columns:
        if column in taken_columns:
            continue
        header = normalize_header(column)
        for field_id, patterns in AUTO_DETECT_PATTERNS:
            if field_id not in available or field_id in detected:
                continue
            if any(re.search(p, header) for p in patterns):
                detected[field_id] = column
                break

    logger.info("columns_auto_detected", detected=len(detected), columns=len(columns))

    return [
        m.model_copy(update={"source_column_name": detected[m.system_field_id]})
        if m.system_field_id in detected else m
        for m in mappings
    ]


def column_for(mappings: list[ColumnMapping], field_id: str) -> Optional[str]:
    """Column mapped to a field, or None."""
    for m in mappings:
        if m.system_field_id == field_id:
            return m.source_column_name
    return None


def unmapped_columns(columns: list[str], mappings: list[ColumnMapping]) -> list[str]:
    """Sheet columns no field points at."""
    used = {m.source_column_name for m in mappings if m.is_mapped}
    return [c for c in columns if c not in used]
