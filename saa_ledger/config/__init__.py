"""Configuration package."""

from saa_ledger.config.settings import (
    AppSettings,
    ExportSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "ExportSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
