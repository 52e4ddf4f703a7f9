"""
Configuration Management for SimpliFinance

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Defaults are complete, so the tracker runs with no environment at all;
every value can still be overridden for a particular install.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from simplifinance.constants import DEFAULT_PENDENCY_MARKER


class StorageSettings(BaseSettings):
    """Local snapshot storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SIMPLIFINANCE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    snapshot_path: Path = Field(
        default=Path.home() / ".simplifinance" / "snapshot.json",
        description="Path to the local key-value snapshot file"
    )
    storage_key: str = Field(
        default="finance_entries",
        min_length=1,
        description="Key under which the entry collection is stored"
    )
    save_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a snapshot write is attempted"
    )

    @field_validator("snapshot_path")
    @classmethod
    def expand_snapshot_path(cls, v: Path) -> Path:
        return v.expanduser()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SIMPLIFINANCE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = False
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for the local structured log"
    )

    # Replication
    pendency_marker: str = Field(
        default=DEFAULT_PENDENCY_MARKER,
        min_length=1,
        description="Suffix appended to carried-forward unpaid entries"
    )

    # Presentation
    currency_symbol: str = Field(
        default="R$",
        description="Symbol shown in front of amounts"
    )

    # Validation thresholds
    max_installments: int = Field(
        default=360,
        ge=2,
        description="Upper bound on an installment plan"
    )
    max_entry_amount: float = Field(
        default=10_000_000.0,
        gt=0,
        description="Amounts above this are flagged for review"
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
    def storage(self) -> StorageSettings:
        return StorageSettings()

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

    Returns a dict of {setting_name: is_valid}, plus `<name>_error`
    entries for the ones that failed. Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
