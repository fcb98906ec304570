"""Configuration management for treeschema using Pydantic models."""

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .callbacks import ValidatorPolicy

CONFIG_FILENAME = ".treeschema.json"


class OutputFormat(str, Enum):
    """Report output formats."""
    TABLE = "table"
    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"

    def to_logging(self) -> int:
        return {
            LogLevel.ERROR: logging.ERROR,
            LogLevel.WARN: logging.WARNING,
            LogLevel.INFO: logging.INFO,
            LogLevel.DEBUG: logging.DEBUG,
        }[self]


class ValidationConfig(BaseModel):
    """Data validation configuration section."""
    allow_unknown_keys: bool = Field(alias="allowUnknownKeys", default=False)

    model_config = ConfigDict(populate_by_name=True)


class MergeConfig(BaseModel):
    """Schema merge configuration section."""
    validator_policy: ValidatorPolicy = Field(alias="validatorPolicy", default=ValidatorPolicy.REPORT_ALL)

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class OutputConfig(BaseModel):
    """Report output configuration section."""
    format: OutputFormat = OutputFormat.TABLE
    max_errors: int = Field(alias="maxErrors", default=50)

    @field_validator("max_errors")
    @classmethod
    def validate_max_errors(cls, v):
        if v < 1:
            raise ValueError("max_errors must be >= 1")
        return v

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class TreeSchemaConfig(BaseModel):
    """Complete treeschema configuration model."""
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> TreeSchemaConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .treeschema.json

    Returns:
        TreeSchemaConfig: Loaded and validated configuration

    Raises:
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                config_data = json.load(f)
            return TreeSchemaConfig(**config_data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
        except Exception as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")

    return create_default_config()


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .treeschema.json by searching up the directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILENAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def create_default_config() -> TreeSchemaConfig:
    """Create default configuration."""
    return TreeSchemaConfig()
