"""
System field schemas.

A system field is a canonical attribute of the unit schema that sheet
columns get mapped onto.
"""

from enum import Enum
from pydantic import ConfigDict, Field

from models.base import BaseSchema


class Importance(str, Enum):
    """How much a field matters for an import to be useful."""
    MANDATORY = "mandatory"
    IMPORTANT = "important"
    OPTIONAL = "optional"


class DataType(str, Enum):
    """Value type expected in a mapped column."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ENUM = "enum"


class SystemField(BaseSchema):
    """Canonical target field in the unit schema."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, examples=["net_bua"])
    display_name: str = Field(..., min_length=1, examples=["Net BUA"])
    importance: Importance
    data_type: DataType = DataType.STRING
    enum_values: tuple[str, ...] = ()
