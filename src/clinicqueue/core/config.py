"""
Configuration management for the clinic queue service.

This module provides centralized configuration using Pydantic Settings
for environment-based configuration management.
"""

from typing import Optional

import os
from pathlib import Path

from pydantic import Field, model_validator, validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__


class DatabaseSettings(BaseSettings):
    """Database configuration settings."""

    model_config = SettingsConfigDict(env_prefix="MONGO_")

    backend: str = Field(default="memory", description="Repository backend (memory or mongo)")
    uri: str = Field(default="", description="MongoDB connection URI")
    db_name: str = Field(default="clinicqueue", description="MongoDB database name")

    @validator("backend")
    def validate_backend(cls, v: str) -> str:
        """Validate backend name."""
        valid_backends = ["memory", "mongo"]
        if v.lower() not in valid_backends:
            raise ValueError(f"Backend must be one of: {valid_backends}")
        return v.lower()

    @model_validator(mode="after")
    def validate_mongo_uri(self) -> "DatabaseSettings":
        """MongoDB URI is only required when the mongo backend is selected."""
        if self.backend != "mongo":
            return self
        if not self.uri:
            raise ValueError("MongoDB URI is required. Please set MONGO_URI environment variable.")
        if not self.uri.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                "MongoDB URI must start with 'mongodb://' or 'mongodb+srv://'"
            )
        return self


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO", description="Logging level")
    format: str = Field(default="json", description="Log format (json or text)")

    @validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @validator("format")
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ["json", "text"]:
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class QueueSettings(BaseSettings):
    """Token allocation and queue display settings."""

    model_config = SettingsConfigDict(env_prefix="QUEUE_")

    token_scope: str = Field(
        default="clinic",
        description="Token sequence scope: 'clinic' (per clinic+date) or 'doctor' (per doctor+date)",
    )
    token_prefix: str = Field(default="A", description="Token letter used for clinic-scoped sequences")
    token_width: int = Field(default=3, description="Zero-padded digits in a token")
    default_max_tokens_per_day: int = Field(default=20, description="Cap applied when a doctor is registered without one")
    activity_display_limit: int = Field(default=20, description="Activity entries returned when no limit is given")
    timezone: str = Field(default="UTC", description="IANA timezone that defines the clinic's 'today'")

    @validator("token_scope")
    def validate_token_scope(cls, v: str) -> str:
        if v.lower() not in ["clinic", "doctor"]:
            raise ValueError("Token scope must be 'clinic' or 'doctor'")
        return v.lower()

    @validator("token_prefix")
    def validate_token_prefix(cls, v: str) -> str:
        if len(v) != 1 or not v.isalpha() or not v.isascii():
            raise ValueError("Token prefix must be a single letter")
        return v.upper()

    @validator("token_width")
    def validate_token_width(cls, v: int) -> int:
        if not 2 <= v <= 6:
            raise ValueError("Token width must be between 2 and 6")
        return v

    @validator("default_max_tokens_per_day", "activity_display_limit")
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Value must be positive")
        return v


class HandlerSettings(BaseSettings):
    """Handler identity header settings (identity is not verified here)."""

    model_config = SettingsConfigDict(env_prefix="HANDLER_")

    require_header: bool = Field(default=False, description="Reject state-changing requests without X-Handler-ID")
    default_id: str = Field(default="front-desk", description="Handler ID used when the header is absent")
    default_name: str = Field(default="Front Desk", description="Handler name used when the header is absent")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Application settings
    app_name: str = Field(default="Clinic Queue", description="Application name")
    app_version: str = Field(default=__version__, description="Application version")
    app_env: str = Field(default="development", description="Application environment")
    debug: bool = Field(default=False, description="Debug mode")
    port: int = Field(default=8000, description="Application port")
    host: str = Field(default="0.0.0.0", description="Application host")

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    handler: HandlerSettings = Field(default_factory=HandlerSettings)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Override sub-settings with environment variables
        self.database = DatabaseSettings()
        self.logging = LoggingSettings()
        self.queue = QueueSettings()
        self.handler = HandlerSettings()

    @validator("app_env")
    def validate_app_env(cls, v: str) -> str:
        """Validate application environment."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"App environment must be one of: {valid_envs}")
        return v.lower()

    @validator("port")
    def validate_port(cls, v: int) -> int:
        """Validate port number."""
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.app_env == "testing"


# Global settings instance (loaded after attempting to read .env)
_settings: Optional[Settings] = None


def _load_env_file_if_available() -> None:
    """Best-effort load of .env by searching current and parent directories.

    This helps in environments where the working directory isn't the project
    root and pydantic's env_file doesn't get resolved as expected.
    """
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
        return

    cwd = Path(os.getcwd()).resolve()
    for parent in [cwd, *cwd.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            # Do not override already-set environment variables
            load_dotenv(dotenv_path=str(candidate), override=False)
            break


def get_settings() -> Settings:
    """Get application settings instance (lazy-init with .env discovery)."""
    global _settings
    if _settings is None:
        _load_env_file_if_available()
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
