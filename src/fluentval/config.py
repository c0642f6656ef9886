"""Configuration management for fluentval using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .messages import DEFAULT_MESSAGES

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".fluentval.json"


class OutputFormat(str, Enum):
    """Output format types."""
    TABLE = "table"
    JSON = "json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"
    TRACE = "trace"

    def to_logging_level(self) -> int:
        """Map to a standard library logging level (trace collapses to DEBUG)."""
        return {
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.TRACE: logging.DEBUG,
        }[self]


class MessagesConfig(BaseModel):
    """Message template overrides, keyed by rule kind."""
    overrides: dict[str, str] = Field(default_factory=dict)

    @field_validator("overrides")
    @classmethod
    def validate_override_kinds(cls, v):
        unknown = sorted(set(v) - set(DEFAULT_MESSAGES))
        if unknown:
            raise ValueError(f"unknown rule kinds in message overrides: {', '.join(unknown)}")
        return v

    def template_for(self, kind: str) -> str:
        """Return the effective template for a rule kind."""
        return self.overrides.get(kind, DEFAULT_MESSAGES[kind])


class RegistryConfig(BaseModel):
    """Validator registry configuration section."""
    annotation_fallback: bool = Field(alias="annotationFallback", default=True)

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """CLI output configuration section."""
    format: OutputFormat = OutputFormat.TABLE

    model_config = ConfigDict(use_enum_values=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN


class FluentvalConfig(BaseModel):
    """Complete fluentval configuration model."""
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> FluentvalConfig:
    """Load configuration from ``config_path`` or the nearest .fluentval.json.

    Without a file the defaults are returned.

    Raises:
        ValueError: If the file is not valid JSON or not a valid configuration
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None or not path.exists():
        logger.debug("No configuration file found, using defaults")
        return create_default_config()

    logger.debug(f"Loading configuration from {path}")
    try:
        with open(path, encoding="utf-8") as f:
            return FluentvalConfig.model_validate(json.load(f))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e
    except (OSError, ValidationError) as e:
        raise ValueError(f"Failed to load config from {path}: {e}") from e


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest .fluentval.json in ``start_dir`` or its parents."""
    current = Path(start_dir if start_dir is not None else Path.cwd()).resolve()
    for directory in (current, *current.parents):
        config_file = directory / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file
    return None


def create_default_config() -> FluentvalConfig:
    """Create default configuration."""
    return FluentvalConfig()
