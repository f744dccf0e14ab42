"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Every value has a default so the engine runs without a .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache

from config.grouping import (
    DEFAULT_AREA_BUCKET_SIZE,
    DEFAULT_AREA_BUCKET_SIZES,
    DEFAULT_GROUPING_FIELDS,
    DEFAULT_UNIT_ID_PREFIX,
)


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # GROUPING
    # ===================
    default_area_bucket_size: float = Field(
        default=DEFAULT_AREA_BUCKET_SIZE,
        gt=0,
        le=1000,
        description="Area bucket width (m²) when the property type has no override"
    )
    area_bucket_sizes: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_AREA_BUCKET_SIZES),
        description="Area bucket width (m²) per property type"
    )
    default_grouping_fields: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GROUPING_FIELDS),
        description="Ordered grouping key used when a project has no override"
    )

    # ===================
    # UNIT RECORDS
    # ===================
    unit_id_prefix: str = Field(
        default=DEFAULT_UNIT_ID_PREFIX,
        min_length=1,
        max_length=20,
        description="Prefix for generated unit ids when no unit code is mapped"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are present but invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
