"""
Delta schemas for comparing two grouping runs.
"""

from enum import Enum
from typing import Optional
from pydantic import Field

from models.base import BaseSchema


class DeltaKind(str, Enum):
    """Change classification for a unit between runs."""
    ADDED = "added"
    REMOVED = "removed"
    EDITED = "edited"


class DeltaEntry(BaseSchema):
    unit_id: str
    kind: DeltaKind
    previous_group_id: Optional[str] = None
    new_group_id: Optional[str] = None
    changed_fields: list[str] = Field(default_factory=list)  # "group" when only membership moved


class DeltaSummary(BaseSchema):
    added: int = 0
    removed: int = 0
    edited: int = 0

    @property
    def total(self) -> int:
        return self.added + self.removed + self.edited
