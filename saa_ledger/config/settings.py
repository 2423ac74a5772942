"""
Configuration Management for SAA Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Export formats (delimiter, currency format, sheet naming) are the only
knobs the core exposes, and they are validated at startup.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExportSettings(BaseSettings):
    """CSV and spreadsheet export configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SAA_EXPORT_",
        extra="ignore"
    )

    csv_delimiter: str = Field(
        default=",",
        min_length=1,
        max_length=1,
        description="Single-character delimiter for CSV exports"
    )
    currency_format: str = Field(
        default="R$ #,##0.00",
        description="Spreadsheet number format applied to monetary cells"
    )
    sheet_name_max_length: int = Field(
        default=31,
        ge=8,
        le=31,
        description="Maximum sheet name length accepted by the workbook format"
    )
    column_width_padding: int = Field(
        default=2,
        ge=0,
        le=20,
        description="Characters added to the widest cell when sizing payment columns"
    )
    statement_sheet_prefix: str = Field(
        default="PC - ",
        description="Prefix distinguishing the statement sheet from the payment sheet"
    )
    statement_column_widths: list[int] = Field(
        default_factory=lambda: [45, 20, 20, 20, 25, 25, 25],
        description="Fixed column widths of the statement sheet"
    )

    @field_validator('csv_delimiter')
    @classmethod
    def validate_delimiter(cls, v: str) -> str:
        """The quote character and line breaks cannot double as a delimiter."""
        if v in {'"', "\n", "\r"}:
            raise ValueError(f"Unsupported CSV delimiter: {v!r}")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )
    audit_history_size: int = Field(
        default=200,
        ge=0,
        description="Audit events kept in memory per logger (oldest dropped first)"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def export(self) -> ExportSettings:
        return ExportSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.export
        results["export"] = True
    except Exception as e:
        results["export"] = False
        results["export_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
