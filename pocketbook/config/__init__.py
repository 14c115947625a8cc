"""Configuration package."""

from pocketbook.config.settings import (
    AnalyticsSettings,
    AppSettings,
    RecordStoreSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AnalyticsSettings",
    "AppSettings",
    "RecordStoreSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
