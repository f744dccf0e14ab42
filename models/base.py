"""
Base schemas for all models.
"""

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base for all schemas.

    Features:
        - Auto-trim whitespace from strings
        - Validate on attribute assignment
        - Allow ORM objects (from_attributes)
    """
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
        validate_assignment=True
    )


class PayloadSchema(BaseModel):
    """
    Base for schemas carrying raw sheet text.

    Same as BaseSchema except strings are kept verbatim: delimiters,
    separators, header names and cell values may legitimately contain
    leading or trailing whitespace.
    """
    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True
    )
