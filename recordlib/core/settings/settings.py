"""Settings and configuration management.

This module provides the runtime configuration of recordlib, with
environment variable handling, configuration file loading (JSON or YAML)
and logging setup.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RecordlibSettings(BaseSettings):
    """Runtime settings for recordlib with environment variable support."""

    log_level: str = Field(
        default="WARNING",
        validation_alias=AliasChoices("RECORDLIB_LOG_LEVEL", "log_level"),
    )
    import_fallback: bool = Field(
        default=True,
        validation_alias=AliasChoices("RECORDLIB_IMPORT_FALLBACK", "import_fallback"),
        description="Resolve named references through importable module paths",
    )
    allow_schema_redefinition: bool = Field(
        default=True,
        validation_alias=AliasChoices("RECORDLIB_ALLOW_SCHEMA_REDEFINITION", "allow_schema_redefinition"),
        description="Replace an already registered schema name instead of raising",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Log level must be one of: {list(VALID_LOG_LEVELS)}")
        return v.upper()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


_settings: Optional[RecordlibSettings] = None


def load_settings(config_file: Union[str, Path]) -> RecordlibSettings:
    """Load settings from a JSON or YAML file.

    Values in the file take precedence over environment variables. A file may
    either hold the settings at top level or under a ``recordlib`` section.

    Args:
        config_file: Path to the configuration file

    Returns:
        Settings instance
    """
    path = Path(config_file)
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() in (".yml", ".yaml"):
            config_data = yaml.safe_load(f) or {}
        else:
            config_data = json.load(f)

    if "recordlib" in config_data:
        config_data = config_data["recordlib"]

    settings = RecordlibSettings(**config_data)
    logger.debug(f"Loaded settings from {path}: {settings.model_dump()}")
    return settings


def get_settings() -> RecordlibSettings:
    """Get the process-wide settings, creating them on first use."""
    global _settings
    if _settings is None:
        _settings = RecordlibSettings()
    return _settings


def set_settings(settings: RecordlibSettings) -> None:
    """Replace the process-wide settings."""
    global _settings
    _settings = settings


def reload_settings() -> RecordlibSettings:
    """Re-read settings from the environment."""
    global _settings
    _settings = RecordlibSettings()
    return _settings


def configure_logging(settings: Optional[RecordlibSettings] = None) -> None:
    """Apply the configured log level to the ``recordlib`` logger hierarchy.

    Handlers are left to the application.
    """
    settings = settings or get_settings()
    logging.getLogger("recordlib").setLevel(settings.log_level)
