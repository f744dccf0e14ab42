"""
Delta tracker: classifies units between two grouping runs.

Pure: the same two group sets always give the same entries.
"""

from typing import Optional
import structlog

from models.delta import DeltaEntry, DeltaKind, DeltaSummary
from models.group import Group, GroupStats
from models.unit import UnitRecord

logger = structlog.get_logger(__name__)

DEFAULT_TRACKED_FIELDS = (
    "area",
    "price",
    "floor",
    "unit_type",
    "bedrooms",
    "bathrooms",
    "status",
)

GROUP_CHANGE = "group"


def _membership(groups: list[Group]) -> dict[str, tuple[str, UnitRecord]]:
    """unit_id -> (group id, unit), first occurrence wins, in group order."""
    members: dict[str, tuple[str, UnitRecord]] = {}
    for group in groups:
        for unit in group.units:
            members.setdefault(unit.unit_id, (group.id, unit))
    return members


def changed_fields(
    previous: UnitRecord,
    current: UnitRecord,
    tracked_fields: Optional[tuple[str, ...]] = DEFAULT_TRACKED_FIELDS,
) -> list[str]:
    """
    Tracked fields whose value differs.

    tracked_fields=None compares every field present in either snapshot.
    """
    if tracked_fields is None:
        fields = list(previous.snapshot())
        fields += [f for f in current.snapshot() if f not in fields]
    else:
        fields = list(tracked_fields)
    return [f for f in fields if previous.value(f) != current.value(f)]


def diff(
    previous_groups: list[Group],
    current_groups: list[Group],
    tracked_fields: Optional[tuple[str, ...]] = DEFAULT_TRACKED_FIELDS,
) -> list[DeltaEntry]:
    """
    Compare two runs.

    Returns:
        Added/Edited entries in current group order, then Removed entries
        in previous group order. Unchanged units produce no entry.
    """
    previous = _membership(previous_groups)
    current = _membership(current_groups)

    entries: list[DeltaEntry] = []

    for unit_id, (group_id, unit) in current.items():
        if unit_id not in previous:
            entries.append(DeltaEntry(unit_id=unit_id, kind=DeltaKind.ADDED, new_group_id=group_id))
            continue

        previous_group_id, previous_unit = previous[unit_id]
        changes = changed_fields(previous_unit, unit, tracked_fields)
        if previous_group_id != group_id:
            changes.append(GROUP_CHANGE)
        if changes:
            entries.append(DeltaEntry(
                unit_id=unit_id,
                kind=DeltaKind.EDITED,
                previous_group_id=previous_group_id,
                new_group_id=group_id,
                changed_fields=changes,
            ))

    for unit_id, (group_id, _) in previous.items():
        if unit_id not in current:
            entries.append(DeltaEntry(unit_id=unit_id, kind=DeltaKind.REMOVED, previous_group_id=group_id))

    summary = summarize_deltas(entries)
    logger.info(
        "delta_computed",
        previous_units=len(previous),
        current_units=len(current),
        added=summary.added,
        removed=summary.removed,
        edited=summary.edited,
    )
    return entries


def summarize_deltas(entries: list[DeltaEntry]) -> DeltaSummary:
    """Count entries per kind."""
    summary = DeltaSummary()
    for entry in entries:
        if entry.kind == DeltaKind.ADDED:
            summary.added += 1
        elif entry.kind == DeltaKind.REMOVED:
            summary.removed += 1
        else:
            summary.edited += 1
    return summary


def apply_delta_stats(groups: list[Group], entries: list[DeltaEntry]) -> list[Group]:
    """
    Recompute each group's stats from delta entries.

    A unit that moved between groups counts as edited in its new group
    and removed from its old one.
    """
    updated = []
    for group in groups:
        stats = GroupStats(total=len(group.units))
        for entry in entries:
            if entry.new_group_id == group.id:
                if entry.kind == DeltaKind.ADDED:
                    stats.added += 1
                elif entry.kind == DeltaKind.EDITED:
                    stats.edited += 1
            elif entry.previous_group_id == group.id:
                # removed outright, or edited into another group
                stats.removed += 1
        updated.append(group.model_copy(update={"stats": stats}))
    return updated
