"""
Custom exceptions module.

Import from here rather than from exceptions.errors.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    DuplicateError,

    # Schema registry
    SystemFieldNotFoundError,

    # Column mapping

    # Transformations
    InvalidTransformationError,

    # Assets
    CatalogEntryNotFoundError,
    UnitNotFoundError,

    # Sheet parser
    SheetParseError,
    SheetEmptyError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DuplicateError",

    # Schema registry
    "SystemFieldNotFoundError",

    # Column mapping

    # Transformations
    "InvalidTransformationError",

    # Assets
    "CatalogEntryNotFoundError",
    "UnitNotFoundError",

    # Sheet parser
    "SheetParseError",
    "SheetEmptyError",
]
