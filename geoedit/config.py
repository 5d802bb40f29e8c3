"""
Configuration management for the geoedit engine.

Provides type-safe settings using Pydantic BaseSettings with
environment variable support and .env file loading.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Editing engine settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Editing behaviour
    close_ring_tolerance: float = Field(
        default=0.0,
        ge=0.0,
        description=(
            "Per-axis ground-coordinate tolerance for treating a click as "
            "closing a polygon ring (0 means exact equality)"
        ),
    )
    initial_mode: str = Field(
        default="view",
        description="Editing mode a new session starts in",
    )

    # MCP server configuration
    server_name: str = Field(
        default="geoedit",
        description="MCP server name",
    )
    server_version: str = Field(
        default="0.1.0",
        description="MCP server version",
    )

    # Environment
    environment: str = Field(
        default="development",
        description="Environment (development/production)",
    )

    # Debug mode
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
