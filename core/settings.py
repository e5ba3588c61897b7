"""
Settings

Environment (or .env) configuration for the API server and the export
script: database, write token, logging and timezone.
"""

from typing import Optional

import pytz
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (postgres URLs get a connection pool, anything else goes
    # through playhouse.db_url)
    database_url: str = "sqlite:///battle_stats.db"
    db_max_connections: int = 20
    db_stale_timeout: int = 300  # seconds before an idle pooled connection is recycled

    # Bearer token guarding the ingestion endpoints
    api_token: Optional[SecretStr] = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # "json" or "console"
    service_name: str = "battle-stats-core"

    # Timezone used for run timestamps
    timezone: str = "UTC"

    # Dashboard origins allowed to call the API
    cors_origins: list[str] = [
        "http://localhost:3000",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is either json or console."""
        lower_v = v.lower()
        if lower_v not in {"json", "console"}:
            raise ValueError("log_format must be 'json' or 'console'")
        return lower_v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is known to pytz."""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone '{v}'")
        return v


# Default settings instance for convenience
settings = Settings()
