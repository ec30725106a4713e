"""
Application settings module.

Manages all configuration via environment variables using pydantic-settings.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostgresSettings(BaseSettings):
    """PostgreSQL connection settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="PG_", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    user: str = "admin"
    password: str = "1234"
    database: str = "unma_dev"
    pool_max: int = 10


class MatchingSettings(BaseSettings):
    """Matching and dashboard settings."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MATCHING_", extra="ignore")

    max_distance: int = 50          # Postal-code distance units (~km)
    result_limit: int = 20          # Top-N compatible rides
    repository_timeout: float = 10.0  # Seconds per repository call
    proximity_min_group_size: int = 2
    page_limit: int = 20


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    cors_origins: str = "*"

    postgres: PostgresSettings = PostgresSettings()
    matching: MatchingSettings = MatchingSettings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
