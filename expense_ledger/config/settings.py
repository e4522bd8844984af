"""
Configuration Management for Expense Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see which knobs exist (default currency, budget
thresholds, storage backend) and ensures they are validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Core ledger behaviour.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_currency: str = Field(
        default="USD",
        min_length=1,
        description="Currency selected when nothing has been stored yet"
    )
    near_limit_percent: float = Field(
        default=80.0,
        ge=0.0,
        description="Budget usage (percent) at which a budget is near its limit"
    )
    exceeded_percent: float = Field(
        default=100.0,
        ge=0.0,
        description="Budget usage (percent) at which a budget is exceeded"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug logging"
    )

    @field_validator('default_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Currency codes are stored upper-case."""
        return v.strip().upper()

    @model_validator(mode='after')
    def validate_thresholds(self) -> 'LedgerSettings':
        """The near band must sit below the exceeded band."""
        if self.near_limit_percent > self.exceeded_percent:
            raise ValueError("near_limit_percent cannot be above exceeded_percent")
        return self


class StorageSettings(BaseSettings):
    """Storage adapter configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json_file",
        pattern="^(memory|json_file)$",
        description="Which storage adapter to use"
    )
    data_dir: Path = Field(
        default=Path("ledger_data"),
        description="Directory holding one JSON file per stored key"
    )
    write_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for a file write before giving up"
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
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()


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

    Returns a dict of {setting_name: is_valid}, with an
    ``<name>_error`` entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.ledger
        results["ledger"] = True
    except ValueError as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)

    try:
        _ = settings.storage
        results["storage"] = True
    except ValueError as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    return results
