"""
Column cleanup actions applied before unit building.

Standardization tables map free-text developer wording onto the values
the schema expects. Matching is on the lowercased cell.

Only remove_duplicates changes the row count.
"""

import re
from typing import Optional
import structlog

from models.sheet import CleanupAction, CleanupActionType, TableData

logger = structlog.get_logger(__name__)


PROPERTY_TYPE_MAPPINGS = {
    "apartment": "Apartment",
    "apt": "Apartment",
    "flat": "Apartment",
    "villa": "Villa",
    "townhouse": "Townhouse",
    "town house": "Townhouse",
    "penthouse": "Penthouse",
    "studio": "Studio",
    "duplex": "Duplex",
    "chalet": "Chalet",
}

FINISHING_TYPE_MAPPINGS = {
    "core & shell": "Core & Shell",
    "core and shell": "Core & Shell",
    "shell": "Core & Shell",
    "fully finished": "Fully Finished",
    "finished": "Fully Finished",
    "semi finished": "Semi-Finished",
    "semi-finished": "Semi-Finished",
    "semi": "Semi-Finished",
    "bare": "Core & Shell",
}

STATUS_MAPPINGS = {
    "available": "Available",
    "avail": "Available",
    "reserved": "Reserved",
    "res": "Reserved",
    "sold": "Sold",
    "sold out": "Sold",
    "not available": "Not Available",
    "na": "Not Available",
}

_STANDARDIZATION_TABLES = {
    CleanupActionType.STANDARDIZE_PROPERTY_TYPE: PROPERTY_TYPE_MAPPINGS,
    CleanupActionType.STANDARDIZE_STATUS: STATUS_MAPPINGS,
    CleanupActionType.STANDARDIZE_FINISHING: FINISHING_TYPE_MAPPINGS,
}


def standardize_value(value: str, table: dict[str, str]) -> str:
    """
    Map a cell through a standardization table.

    Exact match wins; otherwise the longest table key contained in the
    cell ("not available" must not resolve through "available").
    Unmatched cells pass through.
    """
    if not value:
        return value
    lower_value = value.strip().lower()
    if lower_value in table:
        return table[lower_value]
    contained = [key for key in table if key in lower_value]
    if not contained:
        return value
    return table[max(contained, key=len)]


def format_thousands(value: str) -> str:
    """
    "1250000" -> "1,250,000"; "EGP 99.5" -> "99.5".

    Non-numeric cells pass through unchanged.
    """
    stripped = re.sub(r"[^0-9.\-]+", "", value)
    try:
        number = float(stripped)
    except ValueError:
        return value
    if number.is_integer():
        return f"{int(number):,}"
    return f"{number:,.3f}".rstrip("0").rstrip(".")


def _capitalize(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split(" "))


_CELL_OPERATIONS = {
    CleanupActionType.UPPERCASE: (str.upper, 'Converted "{column}" to uppercase'),
    CleanupActionType.LOWERCASE: (str.lower, 'Converted "{column}" to lowercase'),
    CleanupActionType.CAPITALIZE: (_capitalize, 'Capitalized words in "{column}"'),
    CleanupActionType.TRIM: (str.strip, 'Trimmed whitespace in "{column}"'),
    CleanupActionType.FORMAT_NUMBER: (format_thousands, 'Formatted "{column}" as numbers with thousand separators'),
}

_STANDARDIZE_DESCRIPTIONS = {
    CleanupActionType.STANDARDIZE_PROPERTY_TYPE: 'Standardized property types in "{column}"',
    CleanupActionType.STANDARDIZE_STATUS: 'Standardized status values in "{column}"',
    CleanupActionType.STANDARDIZE_FINISHING: 'Standardized finishing types in "{column}"',
}


def _map_column(data: TableData, column: Optional[str], fn) -> Optional[TableData]:
    index = data.column_index(column) if column else None
    if index is None:
        return None
    rows = []
    for row in data.rows:
        new_row = list(row)
        if index < len(new_row) and new_row[index]:
            new_row[index] = fn(new_row[index])
        rows.append(new_row)
    return TableData(headers=list(data.headers), rows=rows)


def _remove_duplicates(data: TableData) -> tuple[TableData, int]:
    seen = set()
    rows = []
    for row in data.rows:
        key = tuple(row)
        if key in seen:
            continue
        seen.add(key)
        rows.append(list(row))
    return TableData(headers=list(data.headers), rows=rows), len(data.rows) - len(rows)


def apply_cleanup(data: TableData, action: CleanupAction) -> tuple[TableData, CleanupAction]:
    """
    Apply one cleanup action.

    Returns:
        (new table, action with its description filled in)
        A missing column leaves the table unchanged.
    """
    action_type = CleanupActionType(action.type)

    if action_type == CleanupActionType.REMOVE_DUPLICATES:
        table, removed = _remove_duplicates(data)
        description = f"Removed {removed} duplicate rows"
        logger.info("duplicates_removed", removed=removed)
        return table, action.model_copy(update={"description": description})

    if action_type in _STANDARDIZATION_TABLES:
        lookup = _STANDARDIZATION_TABLES[action_type]
        table = _map_column(data, action.column, lambda v: standardize_value(v, lookup))
        template = _STANDARDIZE_DESCRIPTIONS[action_type]
    else:
        fn, template = _CELL_OPERATIONS[action_type]
        table = _map_column(data, action.column, fn)

    if table is None:
        logger.debug("cleanup_column_missing", type=action_type.value, column=action.column)
        description = f'Skipped: column "{action.column}" not found'
        return data, action.model_copy(update={"description": description})

    return table, action.model_copy(update={"description": template.format(column=action.column)})


def apply_cleanups(data: TableData, actions: list[CleanupAction]) -> tuple[TableData, list[CleanupAction]]:
    """Apply cleanup actions in order."""
    applied = []
    for action in actions:
        data, done = apply_cleanup(data, action)
        applied.append(done)
    return data, applied
