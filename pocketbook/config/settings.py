"""
Configuration Management for Pocketbook

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The aggregation engine itself takes explicit arguments; only the
dashboard service and the record store read settings.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    """Defaults for the dashboard computations."""
    
    model_config = SettingsConfigDict(
        env_prefix="POCKETBOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    default_window: str = Field(
        default="last_12_months",
        pattern="^(last_7_days|last_30_days|last_12_weeks|last_12_months|last_5_years|last_6_months)$",
        description="Window used for the cash flow chart"
    )
    default_period: str = Field(
        default="this_month",
        pattern="^(today|this_week|this_month|this_year|all_time)$",
        description="Period preset used for overview totals"
    )
    recent_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of rows in the recent transactions list"
    )
    uncategorized_label: str = Field(
        default="Uncategorized",
        min_length=1,
        description="Label used for events without a category"
    )
    currency_symbol: str = Field(
        default="₹",
        description="Currency symbol shown in the UI"
    )


class RecordStoreSettings(BaseSettings):
    """Remote record store (PostgREST-style backend) configuration."""
    
    model_config = SettingsConfigDict(
        env_prefix="SUPABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )
    
    url: str = Field(
        ...,
        description="Base URL of the backend project, e.g. https://xyz.supabase.co"
    )
    anon_key: str = Field(
        ...,
        description="Public API key sent as the apikey header"
    )
    access_token: Optional[str] = Field(
        default=None,
        description="User access token; falls back to the anon key"
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="HTTP timeout for record fetches"
    )
    
    @field_validator('url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended safely."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Record store URL must be http(s): {v}")
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
    
    # Sub-settings are loaded lazily so a missing record store
    # configuration does not prevent the analytics from running.
    
    @property
    def analytics(self) -> AnalyticsSettings:
        return AnalyticsSettings()
    
    @property
    def record_store(self) -> RecordStoreSettings:
        return RecordStoreSettings()
    
    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).
    
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.
    
    Returns a dict of {setting_name: is_valid}, plus
    "<name>_error" entries describing failures.
    """
    results = {}
    
    settings = get_settings()
    
    for name in ("analytics", "record_store", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)
    
    return results
