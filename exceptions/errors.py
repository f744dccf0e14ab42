"""
Custom exception classes for the application.

The engine never raises for bad sheet data: malformed cells degrade to
defaults and gaps are reported as counts. These errors cover lookups,
programmer errors at construction time, and the file/HTTP boundary.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "SYSTEM_FIELD_NOT_FOUND")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class NotFoundError(AppError):
    """Resource not found (404)."""

    def __init__(
        self,
        resource: str,
        identifier: str,
        code: Optional[str] = None
    ):
        super().__init__(
            code=code or f"{resource.upper()}_NOT_FOUND",
            message=f"{resource} not found",
            status_code=404,
            details={"id": identifier}
        )


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


class ConflictError(AppError):
    """Conflict with existing resource (409)."""

    def __init__(
        self,
        message: str,
        code: str = "CONFLICT",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=409,
            details=details
        )


class DuplicateError(ConflictError):
    """Duplicate resource (409)."""

    def __init__(
        self,
        resource: str,
        field: str,
        value: str
    ):
        super().__init__(
            code=f"{resource.upper()}_{field.upper()}_EXISTS",
            message=f"{resource} with this {field} already exists",
            details={field: value}
        )


# ===================
# SCHEMA REGISTRY ERRORS
# ===================

class SystemFieldNotFoundError(NotFoundError):
    """System field id is not in the registry."""

    def __init__(self, field_id: str):
        super().__init__(
            resource="System field",
            identifier=field_id,
            code="SYSTEM_FIELD_NOT_FOUND"
        )


# ===================
# TRANSFORMATION ERRORS
# ===================

class InvalidTransformationError(ValidationError):
    """Transformation definition is missing required config or has a bad type."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="INVALID_TRANSFORMATION",
            message=message,
            details=details
        )


# ===================
# ASSET ERRORS
# ===================

class CatalogEntryNotFoundError(NotFoundError):
    """Floor plan or render image id not in the catalog."""

    def __init__(self, asset_id: str):
        super().__init__(
            resource="Catalog entry",
            identifier=asset_id,
            code="CATALOG_ENTRY_NOT_FOUND"
        )


class UnitNotFoundError(NotFoundError):
    """Unit id not present in the current unit set."""

    def __init__(self, unit_id: str):
        super().__init__(
            resource="Unit",
            identifier=unit_id,
            code="UNIT_NOT_FOUND"
        )


# ===================
# SHEET PARSER ERRORS
# ===================

class SheetParseError(ValidationError):
    """Sheet file could not be read."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="SHEET_PARSE_ERROR",
            message=message,
            details=details
        )


class SheetEmptyError(ValidationError):
    """Sheet has no header row."""

    def __init__(self, file_name: str, sheet_name: Optional[str] = None):
        super().__init__(
            code="SHEET_EMPTY",
            message="Sheet has no columns",
            details={"file_name": file_name, "sheet_name": sheet_name}
        )
