"""
Schema registry: canonical unit fields.

Immutable; loaded once at import. Importance tiers feed the mapper's
unmapped counts but never block an import.
"""

from typing import Optional
import structlog

from exceptions import SystemFieldNotFoundError
from models.schema import DataType, Importance, SystemField

logger = structlog.get_logger(__name__)

_M = Importance.MANDATORY
_I = Importance.IMPORTANT
_O = Importance.OPTIONAL

SYSTEM_FIELDS: tuple[SystemField, ...] = tuple(
    SystemField(id=fid, display_name=name, importance=importance, data_type=data_type, enum_values=enum_values)
    for fid, name, importance, data_type, enum_values in (
        ("id", "ID", _M, DataType.STRING, ()),
        ("unit_code", "Unit Code", _M, DataType.STRING, ()),
        ("unit_number", "Unit Number", _M, DataType.STRING, ()),
        ("project_id", "Project ID", _M, DataType.STRING, ()),
        ("project_name", "Project Name", _O, DataType.STRING, ()),
        ("phase_id", "Phase ID", _I, DataType.STRING, ()),
        ("developer_id", "Developer ID", _M, DataType.STRING, ()),
        ("building", "Building", _O, DataType.STRING, ()),
        ("property_category", "Property Category", _M, DataType.ENUM, ("Residential", "Commercial", "Administrative", "Medical")),
        ("property_type", "Property Type", _M, DataType.ENUM, ("Apartment", "Studio", "Duplex", "Penthouse", "Townhouse", "Twin House", "Villa", "Chalet")),
        ("property_subtype", "Property Subtype", _I, DataType.STRING, ()),
        ("unit_type", "Unit Type", _I, DataType.STRING, ()),
        ("developer_property_type", "Developer Property Type", _O, DataType.STRING, ()),
        ("net_bua", "Net BUA", _I, DataType.NUMBER, ()),
        ("gross_bua", "Gross BUA", _I, DataType.NUMBER, ()),
        ("price_per_sqm", "Price per SQM", _I, DataType.NUMBER, ()),
        ("bedrooms", "Bedrooms", _I, DataType.NUMBER, ()),
        ("bathrooms", "Bathrooms", _I, DataType.NUMBER, ()),
        ("floor", "Floor", _O, DataType.STRING, ()),
        ("garden_area", "Garden Area", _O, DataType.NUMBER, ()),
        ("roof_area", "Roof Area", _O, DataType.NUMBER, ()),
        ("roof_annex_area", "Roof Annex Area", _O, DataType.NUMBER, ()),
        ("terrace_area", "Terrace Area", _O, DataType.NUMBER, ()),
        ("land_area", "Land Area", _O, DataType.NUMBER, ()),
        ("additional_space_type", "Additional Space Type", _O, DataType.STRING, ()),
        ("additional_space_notes", "Additional Space Notes", _O, DataType.STRING, ()),
        ("currency", "Currency", _M, DataType.ENUM, ("EGP", "USD", "EUR", "AED")),
        ("prices", "Prices", _M, DataType.NUMBER, ()),
        ("maintenance_fee", "Maintenance Fee", _I, DataType.NUMBER, ()),
        ("club_membership_fee", "Club Membership Fee", _O, DataType.NUMBER, ()),
        ("storage_fee", "Storage Fee", _O, DataType.NUMBER, ()),
        ("is_parking_included", "Is Parking Included", _I, DataType.BOOLEAN, ()),
        ("parking_price", "Parking Price", _O, DataType.NUMBER, ()),
        ("cash_discount_percentage", "Cash Discount Percentage", _O, DataType.NUMBER, ()),
        ("orientation", "Orientation", _O, DataType.STRING, ()),
        ("view", "View", _O, DataType.STRING, ()),
        ("status", "Status", _O, DataType.ENUM, ("Available", "Reserved", "Sold", "Not Available")),
    )
)


class SchemaRegistry:
    """Read-only lookup over the system fields."""

    def __init__(self, fields: tuple[SystemField, ...] = SYSTEM_FIELDS):
        self._fields = tuple(fields)
        self._by_id = {f.id: f for f in self._fields}

    def get_fields(self) -> list[SystemField]:
        """All fields in registry order."""
        return list(self._fields)

    def get_field(self, field_id: str) -> SystemField:
        """
        Get a field by id.

        Raises:
            SystemFieldNotFoundError: If the id is unknown
        """
        field = self._by_id.get(field_id)
        if field is None:
            logger.debug("system_field_not_found", field_id=field_id)
            raise SystemFieldNotFoundError(field_id)
        return field

    def find_field(self, field_id: str) -> Optional[SystemField]:
        """Get a field by id, or None."""
        return self._by_id.get(field_id)

    def fields_by_importance(self, importance: Importance) -> list[SystemField]:
        return [f for f in self._fields if f.importance == importance]


_registry: Optional[SchemaRegistry] = None


def get_schema_registry() -> SchemaRegistry:
    global _registry
    if _registry is None:
        _registry = SchemaRegistry()
    return _registry
