from typing import Final

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    DEFAULT_DATABASE_URL,
    DEFAULT_HOST,
    DEFAULT_MAX_OVERFLOW,
    DEFAULT_POOL_RECYCLE,
    DEFAULT_POOL_SIZE,
    DEFAULT_POOL_TIMEOUT,
    DEFAULT_PORT,
)

_LOG_LEVELS: Final = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env files."""

    # Server configuration
    debug: bool = Field(default=False, description="Enable debug mode")
    host: str = Field(default=DEFAULT_HOST, description="Server host")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Server port")

    # Database configuration
    database_url: str = Field(
        default=DEFAULT_DATABASE_URL,
        min_length=1,
        description="Database connection URL (location, user and credentials)",
    )
    pool_size: int = Field(
        default=DEFAULT_POOL_SIZE, ge=1, le=100, description="Pooled connections"
    )
    max_overflow: int = Field(
        default=DEFAULT_MAX_OVERFLOW,
        ge=0,
        le=100,
        description="Extra connections allowed above pool_size under load",
    )
    pool_timeout: float = Field(
        default=DEFAULT_POOL_TIMEOUT,
        gt=0,
        description="Seconds to wait for a free connection before giving up",
    )
    pool_recycle: int = Field(
        default=DEFAULT_POOL_RECYCLE,
        description="Recycle connections older than this many seconds (-1 disables)",
    )
    run_migrations: bool = Field(
        default=True, description="Apply pending schema migrations at startup"
    )

    # Application configuration
    app_name: str = Field(default="Newsdesk", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")

    # Logging configuration
    log_level: str | None = Field(
        default=None, description="Override the log level derived from debug"
    )
    log_to_file: bool = Field(
        default=False, description="Force logging to file even in debug mode"
    )

    # Pydantic Settings configuration
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Strip whitespace; an empty connection string is a configuration error."""
        v = v.strip()
        if not v:
            raise ValueError("DATABASE_URL must not be empty")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str | None) -> str | None:
        if v is None:
            return None
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level '{v}'")
        return level

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.debug

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")


# Global settings instance
settings: Final = Settings()
