"""
Transformation schemas.

A transformation is a tagged union keyed by `type`. Each variant carries
its own strongly-typed config, so a Split without target columns or a
Formula without operands fails at construction, never mid-row.
"""

from enum import Enum
from typing import Annotated, Literal, Union
from uuid import uuid4
from pydantic import Field, model_validator

from models.base import PayloadSchema


class TransformationType(str, Enum):
    """Supported transformation kinds."""
    SPLIT = "split"
    MERGE = "merge"
    STATIC = "static"
    FORMULA = "formula"


class FormulaOperation(str, Enum):
    """Binary operations available to Formula transformations."""
    MULTIPLY = "multiply"
    ADD = "add"
    SUBTRACT = "subtract"
    DIVIDE = "divide"


# ===================
# CONFIGS
# ===================

class SplitConfig(PayloadSchema):
    source_column: str = Field(..., min_length=1)
    delimiter: str = Field(..., min_length=1)
    target_columns: list[str] = Field(..., min_length=1)


class MergeConfig(PayloadSchema):
    source_columns: list[str] = Field(..., min_length=1)
    target_column: str = Field(..., min_length=1)
    separator: str = " "


class StaticConfig(PayloadSchema):
    target_column: str = Field(..., min_length=1)
    value: str


class FormulaConfig(PayloadSchema):
    target_column: str = Field(..., min_length=1)
    formula: FormulaOperation
    column1: str = Field(..., min_length=1)
    column2: str = Field(..., min_length=1)


# ===================
# VARIANTS
# ===================

class TransformationBase(PayloadSchema):
    """Fields shared by every transformation variant."""

    id: str = Field(default_factory=lambda: f"transform-{uuid4().hex[:8]}")
    name: str = ""
    description: str = ""
    affected_columns: list[str] = Field(default_factory=list)
    order: int = 0

    def reads(self) -> list[str]:
        """Columns this transformation reads."""
        raise NotImplementedError

    def writes(self) -> list[str]:
        """Columns this transformation writes (created when absent)."""
        raise NotImplementedError

    @model_validator(mode="after")
    def _fill_affected_columns(self):
        if not self.affected_columns:
            # Bypass validate_assignment recursion
            object.__setattr__(
                self,
                "affected_columns",
                list(dict.fromkeys(self.reads() + self.writes())),
            )
        return self


class SplitTransformation(TransformationBase):
    type: Literal["split"] = "split"
    config: SplitConfig

    def reads(self) -> list[str]:
        return [self.config.source_column]

    def writes(self) -> list[str]:
        return list(self.config.target_columns)


class MergeTransformation(TransformationBase):
    type: Literal["merge"] = "merge"
    config: MergeConfig

    def reads(self) -> list[str]:
        return list(self.config.source_columns)

    def writes(self) -> list[str]:
        return [self.config.target_column]


class StaticTransformation(TransformationBase):
    type: Literal["static"] = "static"
    config: StaticConfig

    def reads(self) -> list[str]:
        return []

    def writes(self) -> list[str]:
        return [self.config.target_column]


class FormulaTransformation(TransformationBase):
    type: Literal["formula"] = "formula"
    config: FormulaConfig

    def reads(self) -> list[str]:
        return [self.config.column1, self.config.column2]

    def writes(self) -> list[str]:
        return [self.config.target_column]


Transformation = Annotated[
    Union[
        SplitTransformation,
        MergeTransformation,
        StaticTransformation,
        FormulaTransformation,
    ],
    Field(discriminator="type"),
]
