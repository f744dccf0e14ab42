"""
Asset assignment: floor plans and render images per unit.

auto_assign() is the generic (type, area range) matcher. The
AssetAssignmentBook keeps per-unit assignments as an immutable snapshot:
every operation returns a new book. Manual assignments are pinned and
never overwritten by auto-assign.
"""

import re
from typing import Iterable, Optional
import structlog

from exceptions import CatalogEntryNotFoundError, UnitNotFoundError
from models.asset import (
    AssetAssignment,
    AssignmentStats,
    CatalogEntry,
    FloorPlan,
    RenderCategory,
    RenderImage,
)
from models.group import Group
from models.unit import UnitRecord

logger = structlog.get_logger(__name__)


# ===================
# MATCHING
# ===================

def parse_area_range(text: Optional[str]) -> tuple[Optional[float], Optional[float]]:
    """
    Parse a catalog area range.

    "65-75" -> (65, 75); "65 - 75 m²" -> (65, 75); "200+" -> (200, None);
    "80" -> (80, 80); "" -> (None, None)
    """
    if not text:
        return None, None
    numbers = [float(n) for n in re.findall(r"\d+(?:\.\d+)?", text.replace(",", ""))]
    if not numbers:
        return None, None
    if len(numbers) == 1:
        if "+" in text:
            return numbers[0], None
        return numbers[0], numbers[0]
    low, high = numbers[0], numbers[1]
    return min(low, high), max(low, high)


def matching_entries(unit: UnitRecord, catalog: Iterable[CatalogEntry]) -> list[CatalogEntry]:
    """Catalog entries the unit fits, in catalog order."""
    return [e for e in catalog if e.matches(unit.unit_type, unit.area)]


def _pick(matches: list[CatalogEntry]) -> list[str]:
    """First match per category (uncategorized entries form one category)."""
    picked: dict[Optional[RenderCategory], str] = {}
    for entry in matches:
        picked.setdefault(entry.category, entry.asset_id)
    return list(picked.values())


def auto_assign(units: list[UnitRecord], catalog: list[CatalogEntry]) -> dict[str, list[str]]:
    """
    Match every unit against the catalog.

    Returns:
        unit_id -> asset ids (one per category). Units with no match are
        absent.
    """
    result = {}
    for unit in units:
        picked = _pick(matching_entries(unit, catalog))
        if picked:
            result[unit.unit_id] = picked

    logger.info("auto_assign_matched", units=len(units), matched=len(result), catalog=len(catalog))
    return result


# ===================
# ASSIGNMENT BOOK
# ===================

class AssetAssignmentBook:
    """
    Immutable per-unit asset assignments.

    When floor_plans / render_images are given, manual assignments are
    checked against them.
    """

    def __init__(
        self,
        assignments: Optional[Iterable[AssetAssignment]] = None,
        floor_plans: Optional[list[FloorPlan]] = None,
        render_images: Optional[list[RenderImage]] = None,
    ):
        self._assignments: dict[str, AssetAssignment] = {a.unit_id: a for a in assignments or []}
        self.floor_plans = list(floor_plans) if floor_plans is not None else None
        self.render_images = list(render_images) if render_images is not None else None

    def _with(self, assignments: dict[str, AssetAssignment]) -> "AssetAssignmentBook":
        return AssetAssignmentBook(assignments.values(), self.floor_plans, self.render_images)

    @property
    def assignments(self) -> dict[str, AssetAssignment]:
        return dict(self._assignments)

    def get(self, unit_id: str) -> AssetAssignment:
        """Assignment for a unit (empty if none)."""
        return self._assignments.get(unit_id) or AssetAssignment(unit_id=unit_id)

    def to_list(self) -> list[AssetAssignment]:
        return list(self._assignments.values())

    # ----- auto -----

    def auto_assign_floor_plans(
        self,
        units: list[UnitRecord],
        floor_plans: Optional[list[FloorPlan]] = None,
    ) -> "AssetAssignmentBook":
        """Fill floor plans for units without a manual one."""
        catalog = [fp.to_catalog_entry() for fp in (floor_plans if floor_plans is not None else self.floor_plans or [])]
        matches = auto_assign(units, catalog)

        assignments = self.assignments
        filled = 0
        for unit in units:
            current = self.get(unit.unit_id)
            if current.manual_floor_plan or unit.unit_id not in matches:
                continue
            assignments[unit.unit_id] = current.model_copy(update={"floor_plan_id": matches[unit.unit_id][0]})
            filled += 1

        logger.info("floor_plans_auto_assigned", units=len(units), assigned=filled)
        return self._with(assignments)

    def auto_assign_render_images(
        self,
        units: list[UnitRecord],
        render_images: Optional[list[RenderImage]] = None,
    ) -> "AssetAssignmentBook":
        """Fill first Interior plus first Exterior match for units without manual renders."""
        catalog = [ri.to_catalog_entry() for ri in (render_images if render_images is not None else self.render_images or [])]
        matches = auto_assign(units, catalog)

        assignments = self.assignments
        filled = 0
        for unit in units:
            current = self.get(unit.unit_id)
            if current.manual_render_images or unit.unit_id not in matches:
                continue
            assignments[unit.unit_id] = current.model_copy(update={"render_image_ids": list(matches[unit.unit_id])})
            filled += 1

        logger.info("render_images_auto_assigned", units=len(units), assigned=filled)
        return self._with(assignments)

    # ----- manual -----

    def _check_units(self, unit_ids: list[str], units: Optional[list[UnitRecord]]) -> None:
        if units is None:
            return
        known = {u.unit_id for u in units}
        for unit_id in unit_ids:
            if unit_id not in known:
                raise UnitNotFoundError(unit_id)

    def assign_floor_plan(
        self,
        unit_ids: list[str],
        floor_plan_id: str,
        units: Optional[list[UnitRecord]] = None,
    ) -> "AssetAssignmentBook":
        """
        Manually set a floor plan on units.

        Raises:
            CatalogEntryNotFoundError: Floor plan not in the catalog
            UnitNotFoundError: Unit id not in `units`
        """
        if self.floor_plans is not None and floor_plan_id not in {fp.id for fp in self.floor_plans}:
            raise CatalogEntryNotFoundError(floor_plan_id)
        self._check_units(unit_ids, units)

        assignments = self.assignments
        for unit_id in unit_ids:
            assignments[unit_id] = self.get(unit_id).model_copy(update={
                "floor_plan_id": floor_plan_id,
                "manual_floor_plan": True,
            })

        logger.info("floor_plan_assigned", floor_plan_id=floor_plan_id, units=len(unit_ids))
        return self._with(assignments)

    def assign_render_image(
        self,
        unit_ids: list[str],
        image_id: str,
        units: Optional[list[UnitRecord]] = None,
    ) -> "AssetAssignmentBook":
        """
        Manually add a render image to units (no duplicates).

        Raises:
            CatalogEntryNotFoundError: Image not in the catalog
            UnitNotFoundError: Unit id not in `units`
        """
        if self.render_images is not None and image_id not in {ri.id for ri in self.render_images}:
            raise CatalogEntryNotFoundError(image_id)
        self._check_units(unit_ids, units)

        assignments = self.assignments
        for unit_id in unit_ids:
            current = self.get(unit_id)
            images = list(current.render_image_ids)
            if image_id not in images:
                images.append(image_id)
            assignments[unit_id] = current.model_copy(update={
                "render_image_ids": images,
                "manual_render_images": True,
            })

        logger.info("render_image_assigned", image_id=image_id, units=len(unit_ids))
        return self._with(assignments)

    def unassign(self, unit_id: str, asset_id: str) -> "AssetAssignmentBook":
        """
        Remove an asset from a unit.

        The removal is pinned as manual so auto-assign does not refill it.
        Unknown units or assets leave the book unchanged.
        """
        current = self._assignments.get(unit_id)
        if current is None:
            logger.debug("unassign_unknown_unit", unit_id=unit_id)
            return self

        update = {}
        if current.floor_plan_id == asset_id:
            update["floor_plan_id"] = None
            update["manual_floor_plan"] = True
        if asset_id in current.render_image_ids:
            update["render_image_ids"] = [i for i in current.render_image_ids if i != asset_id]
            update["manual_render_images"] = True
        if not update:
            return self

        assignments = self.assignments
        assignments[unit_id] = current.model_copy(update=update)
        logger.info("asset_unassigned", unit_id=unit_id, asset_id=asset_id)
        return self._with(assignments)

    # ----- derived -----

    def assignment_stats(self, units: list[UnitRecord]) -> AssignmentStats:
        """Counts over `units` (units without an entry count as bare)."""
        stats = AssignmentStats(total_units=len(units))
        for unit in units:
            a = self.get(unit.unit_id)
            if a.floor_plan_id:
                stats.with_floor_plan += 1
            if a.render_image_ids:
                stats.with_render_images += 1
            if not a.floor_plan_id and not a.render_image_ids:
                stats.without_assets += 1
            if a.manual_floor_plan or a.manual_render_images:
                stats.manual += 1
        return stats

    def apply_to_units(self, units: list[UnitRecord]) -> list[UnitRecord]:
        """Copy assignments onto unit records so floor_plan can key groups."""
        result = []
        for unit in units:
            a = self._assignments.get(unit.unit_id)
            if a is None:
                result.append(unit)
                continue
            result.append(unit.model_copy(update={
                "floor_plan_id": a.floor_plan_id,
                "render_image_ids": list(a.render_image_ids),
            }))
        return result

    def attach_group_assets(self, groups: list[Group]) -> list[Group]:
        """
        Set group-level asset refs from member assignments.

        floor_plan_ref is set when every member shares one plan, cleared
        when members disagree, and kept when no member has one.
        render_image_refs becomes the ordered union of member images, or
        is kept when no member has any.
        """
        updated = []
        for group in groups:
            members = [self.get(u.unit_id) for u in group.units]
            plans = {a.floor_plan_id for a in members}

            floor_plan_ref = group.floor_plan_ref
            if plans != {None}:
                floor_plan_ref = plans.pop() if len(plans) == 1 else None

            images: list[str] = []
            for a in members:
                images.extend(i for i in a.render_image_ids if i not in images)

            updated.append(group.model_copy(update={
                "floor_plan_ref": floor_plan_ref,
                "render_image_refs": images or list(group.render_image_refs),
            }))
        return updated
