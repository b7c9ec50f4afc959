"""
Application settings for API Relay.

Values are read from environment variables prefixed with ``API_RELAY_``
and from an optional ``.env`` file in the working directory.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime configuration.

    Attributes:
        storage_backend: Record store implementation ("memory" or "sql")
        database_url: SQLAlchemy URL used by the "sql" backend
        relay_timeout: Upper bound in seconds for a relayed request
        follow_redirects: Whether relayed requests follow redirects
        log_level: Root logging level
        cors_origins: Origins allowed by the CORS middleware
    """
    storage_backend: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite:///./api_relay.db"
    relay_timeout: float = 30.0
    follow_redirects: bool = True
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_prefix="API_RELAY_", env_file=".env")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
