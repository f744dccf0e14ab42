"""
Grouping engine: partitions unit records by a composite key.

group_units(units, config, options, previous_groups) -> GroupingResult

Rules:
- Units are partitioned by project first; key fields are resolved per
  project (override, else default order).
- `area` in the key is replaced by its bucket label ("100-125").
- Group ids hash the composite key, so the same key gets the same id in
  every run. No randomness anywhere.
- A unit is "new" when its key did not exist in the previous run.
"""

import hashlib
import json
import math
import re
from typing import Any, Optional
import structlog

from models.delta import DeltaEntry
from models.group import (
    Group,
    GroupingConfig,
    GroupingOptions,
    GroupingResult,
    GroupingStats,
    GroupStats,
    GroupSummary,
)
from models.unit import UnitRecord
from services.delta_tracker import summarize_deltas
from utils.text_utils import parse_number

logger = structlog.get_logger(__name__)

# Leading key pair; units of different projects never share a group
PROJECT_KEY_FIELD = "project"

# Key fields already covered by "{project} {unit_type}" in the name
NAME_SKIP_FIELDS = (PROJECT_KEY_FIELD, "developer_id", "project_id", "project_name", "unit_type")

UNNAMED_GROUP = "Unnamed group"


# ===================
# KEYS
# ===================

def area_bucket(area: float, size: float) -> tuple[float, float]:
    """
    Bucket containing `area`, lower edge inclusive.

    area_bucket(117, 25) -> (100, 125); area_bucket(100, 25) -> (100, 125)
    """
    low = math.floor(area / size) * size
    return low, low + size


def _format_edge(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


def format_bucket(bucket: tuple[float, float]) -> str:
    """(100.0, 125.0) -> "100-125"."""
    low, high = bucket
    return f"{_format_edge(low)}-{_format_edge(high)}"


def key_value(unit: UnitRecord, field: str, config: GroupingConfig) -> Any:
    """Value of one key field; area is bucketed by the unit's property type."""
    if field == "area":
        if unit.area is None:
            return None
        size = config.bucket_size_for(unit.property_type)
        return format_bucket(area_bucket(unit.area, size))
    return unit.value(field)


def composite_key(unit: UnitRecord, fields: list[str], config: GroupingConfig) -> tuple:
    """Ordered (field, value) pairs. Missing values stay None."""
    return tuple((field, key_value(unit, field, config)) for field in fields)


def group_key(unit: UnitRecord, config: GroupingConfig) -> tuple:
    """
    Full partition key: the unit's project, then its resolved fields.

    The project pair is always first, even when the resolved fields name
    no project column.
    """
    project = ((PROJECT_KEY_FIELD, unit.project_key),)
    return project + composite_key(unit, config.resolve_fields(unit.project_key), config)


def group_id_for(key: tuple) -> str:
    """Stable id derived from the composite key."""
    payload = json.dumps([list(pair) for pair in key], default=str)
    return "grp-" + hashlib.sha1(payload.encode("utf-8")).hexdigest()[:12]


# ===================
# NAMES
# ===================

def _qualifier(field: str, value: Any) -> Optional[str]:
    if value is None or value == "" or value is False:
        return None
    if field == "bedrooms":
        return f"{value}BR"
    if field == "has_garden_or_roof":
        return "Garden/Roof"
    if field == "area":
        return f"{value} m²"
    return str(value)


def synthesize_name(project: Optional[str], unit_type: Optional[str], key: tuple) -> str:
    """
    "{project} {unit_type} {qualifiers}", whitespace collapsed.

    Qualifiers are the remaining non-empty key values in key order.
    """
    parts = [project or "", unit_type or ""]
    for field, value in key:
        if field in NAME_SKIP_FIELDS:
            continue
        qualifier = _qualifier(field, value)
        if qualifier:
            parts.append(qualifier)

    name = re.sub(r"\s+", " ", " ".join(parts)).strip()
    return name or UNNAMED_GROUP


# ===================
# GROUPING
# ===================

def _partition(units: list[UnitRecord], config: GroupingConfig) -> dict[tuple, list[UnitRecord]]:
    """Units by composite key, keys in first-seen order."""
    partitions: dict[tuple, list[UnitRecord]] = {}
    for unit in units:
        partitions.setdefault(group_key(unit, config), []).append(unit)
    return partitions


def _new_group(key: tuple, units: list[UnitRecord]) -> Group:
    first = units[0]
    return Group(
        id=group_id_for(key),
        name=synthesize_name(first.project, first.unit_type, key),
        project=first.project,
        unit_type=first.unit_type,
        key_attributes=list(key),
        units=list(units),
        stats=GroupStats(total=len(units)),
    )


def group_units(
    units: list[UnitRecord],
    config: Optional[GroupingConfig] = None,
    options: Optional[GroupingOptions] = None,
    previous_groups: Optional[list[Group]] = None,
) -> GroupingResult:
    """
    Group units by composite key.

    Args:
        units: Unit records in sheet order
        config: Key fields and bucket sizes (defaults from settings)
        options: merge/preserve/auto-create switches
        previous_groups: Groups of the prior run, if any

    Returns:
        GroupingResult with groups in first-seen key order and the units
        whose key is new relative to previous_groups
    """
    config = config or GroupingConfig()
    options = options or GroupingOptions()
    previous_by_key = {g.key: g for g in previous_groups or []}

    partitions = _partition(units, config)

    new_units: list[UnitRecord] = []
    groups: list[Group] = []

    for key, members in partitions.items():
        previous = previous_by_key.get(key)

        if previous_by_key and previous is None:
            new_units.extend(members)
            if not options.auto_create_groups:
                continue

        group = _new_group(key, members)

        if previous is not None and options.merge_with_existing:
            group = group.model_copy(update={
                "id": previous.id,
                "name": previous.name,
                "floor_plan_ref": previous.floor_plan_ref,
                "render_image_refs": list(previous.render_image_refs),
            })
        elif previous is not None and options.preserve_names:
            group = group.model_copy(update={"name": previous.name})

        groups.append(group)

    logger.info(
        "grouping_completed",
        units=len(units),
        groups=len(groups),
        new_units=len(new_units),
        held_out=0 if options.auto_create_groups else len(new_units),
    )

    return GroupingResult(groups=groups, new_units=new_units)


def create_groups_for_units(
    units: list[UnitRecord],
    config: Optional[GroupingConfig] = None,
) -> list[Group]:
    """
    Create groups for units held out of a run.

    Same keying as group_units; every member counts as added.
    """
    config = config or GroupingConfig()
    groups = []
    for key, members in _partition(units, config).items():
        group = _new_group(key, members)
        group.stats = GroupStats(total=len(members), added=len(members))
        groups.append(group)

    logger.info("groups_created_for_new_units", units=len(units), groups=len(groups))
    return groups


# ===================
# SUMMARIES
# ===================

def _range(values: list[Optional[float]]) -> tuple[Optional[float], Optional[float]]:
    present = [v for v in values if v is not None]
    if not present:
        return None, None
    return min(present), max(present)


def summarize_group(group: Group) -> GroupSummary:
    """Area, price and bathroom ranges over the group's units."""
    area_min, area_max = _range([u.area for u in group.units])
    price_min, price_max = _range([u.price for u in group.units])
    bathrooms_min, bathrooms_max = _range([parse_number(u.attributes.get("bathrooms")) for u in group.units])

    return GroupSummary(
        group_id=group.id,
        unit_count=len(group.units),
        area_min=area_min,
        area_max=area_max,
        price_min=price_min,
        price_max=price_max,
        bathrooms_min=bathrooms_min,
        bathrooms_max=bathrooms_max,
    )


def group_stats(
    groups: list[Group],
    new_units: Optional[list[UnitRecord]] = None,
    deltas: Optional[list[DeltaEntry]] = None,
) -> GroupingStats:
    """
    Run-level counts. Held-out new units count toward total_units only.

    With `deltas`, added/removed/edited come from the delta entries, so
    units whose previous group vanished still count as removed. Without
    them the per-group stats are summed.
    """
    grouped_ids = {u.unit_id for g in groups for u in g.units}
    held_out = [u for u in new_units or [] if u.unit_id not in grouped_ids]
    grouped = sum(len(g.units) for g in groups)

    if deltas is not None:
        changes = summarize_deltas(deltas)
        added, removed, edited = changes.added, changes.removed, changes.edited
    else:
        added = sum(g.stats.added for g in groups)
        removed = sum(g.stats.removed for g in groups)
        edited = sum(g.stats.edited for g in groups)

    return GroupingStats(
        total_groups=len(groups),
        total_units=grouped + len(held_out),
        grouped_units=grouped,
        new_units=len(new_units or []),
        added=added,
        removed=removed,
        edited=edited,
    )
