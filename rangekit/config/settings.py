"""
Application settings and configuration management
Uses Pydantic Settings for environment variable handling and validation
"""

from functools import lru_cache
from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource
import json


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Application
    app_name: str = "rangekit Time Range Service"
    environment: str = Field(default="development", description="development, staging or production")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    json_logs: Optional[bool] = Field(
        default=None,
        description="Render logs as JSON (defaults to on in production)"
    )
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    allowed_origins_str: str = Field(
        default='["http://localhost:3000","http://127.0.0.1:3000"]',
        validation_alias="ALLOWED_ORIGINS",
        description="Allowed CORS origins (JSON array or comma-separated)"
    )

    # Date math defaults
    default_timezone: str = Field(
        default="utc",
        description='Zone for resolving ranges: "utc", "browser" (host zone) or an IANA name'
    )
    fiscal_year_start_month: int = Field(
        default=0,
        description="First month of the fiscal year, 0-based (0 = January)"
    )
    week_start: str = Field(
        default="sunday",
        description="First day of the week for /w rounding: sunday, monday or saturday"
    )

    # Interval calculation
    default_resolution: int = Field(
        default=1000,
        description="Data points per range when a caller does not supply a resolution"
    )

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_parse_none_str="null",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to exclude .env file loading"""
        return init_settings, env_settings, file_secret_settings

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("fiscal_year_start_month")
    @classmethod
    def validate_fiscal_year_start_month(cls, v):
        if not 0 <= v <= 11:
            raise ValueError("Fiscal year start month must be between 0 (January) and 11 (December)")
        return v

    @field_validator("week_start")
    @classmethod
    def validate_week_start(cls, v):
        valid_days = ["sunday", "monday", "saturday"]
        if v.lower() not in valid_days:
            raise ValueError(f"Week start must be one of {valid_days}")
        return v.lower()

    @field_validator("default_resolution")
    @classmethod
    def validate_default_resolution(cls, v):
        if v <= 0:
            raise ValueError("Default resolution must be positive")
        return v

    @property
    def allowed_origins(self) -> List[str]:
        """Parse and return allowed_origins as a list"""
        raw = self.allowed_origins_str.strip()

        # Try JSON parsing first
        if raw.startswith('[') and raw.endswith(']'):
            try:
                return json.loads(raw)
            except (json.JSONDecodeError, ValueError):
                pass

        # Fall back to comma-separated
        if ',' in raw:
            return [origin.strip() for origin in raw.split(",") if origin.strip()]

        # Single value
        if raw:
            return [raw]

        return ["http://localhost:3000", "http://127.0.0.1:3000"]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment.lower() == "development"

    @property
    def use_json_logs(self) -> bool:
        if self.json_logs is None:
            return self.is_production
        return self.json_logs


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings
    Uses lru_cache to avoid reading environment variables multiple times
    """
    return Settings()


def clear_settings_cache() -> None:
    """
    Clear the settings cache. Used primarily for testing.
    After calling this, the next call to get_settings() will
    create a new Settings instance with fresh environment variables.
    """
    get_settings.cache_clear()
