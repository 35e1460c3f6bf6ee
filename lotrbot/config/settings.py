"""
Application settings and configuration management.

Uses Pydantic Settings for validation and environment variable support.
Database credentials and the Discord token are required: constructing the
settings without them raises a ValidationError, which is fatal at startup.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotSettings(BaseSettings):
    """Discord bot configuration."""

    name: str = Field(default="LOTR Mod Bot", description="Bot display name")
    token: str = Field(description="Discord bot token (DISCORD_TOKEN)")
    bot_id: int | None = Field(
        default=None,
        description="User ID whose mentions count as a prefix. "
                    "If None, the logged-in user's ID is used.",
    )
    default_prefix: str = Field(
        default="!", description="Prefix materialized for guilds without a stored one"
    )
    activity: str = Field(
        default="The Lord of the Rings Mod: Bringing Middle-earth to Minecraft",
        description="'Playing' status shown once the bot is ready",
    )

    model_config = SettingsConfigDict(
        env_prefix="DISCORD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


class DatabaseSettings(BaseSettings):
    """MySQL connection configuration."""

    server: str = Field(description="Database host name or IP (DB_SERVER)")
    port: int = Field(description="Database TCP port (DB_PORT)")
    user: str = Field(description="Database user (DB_USER)")
    password: str = Field(description="Database password (DB_PASSWORD)")
    name: str = Field(description="Database schema name (DB_NAME)")

    pool_minsize: int = Field(default=1, ge=0, description="Connections kept open in the pool")
    pool_maxsize: int = Field(default=10, ge=1, description="Upper bound on pooled connections")
    connect_timeout: float = Field(
        default=10.0, gt=0, description="Seconds to wait for a new connection"
    )

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )


class Settings(BaseSettings):
    """Main application settings."""

    # Environment
    environment: Literal["development", "production"] = Field(
        default="development", description="Deployment environment"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    log_file: Path | None = Field(default=None, description="Log file path")

    # Sub-configurations
    bot: BotSettings = Field(default_factory=BotSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from file and environment.

    The sub-configurations read their own prefixed variables, so the
    env file is handed to each of them as well.

    Args:
        env_file: Path to .env file (optional)

    Returns:
        Loaded settings instance
    """
    global _settings
    if env_file:
        _settings = Settings(
            bot=BotSettings(_env_file=env_file),
            database=DatabaseSettings(_env_file=env_file),
            _env_file=env_file,
        )
    else:
        _settings = Settings()
    return _settings
