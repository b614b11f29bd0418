"""Configuration management for confcheck using Pydantic models."""

import json
import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from confcheck.analysis.msg import Level

CONFIG_FILE_NAME = ".confcheck.json"

_CODE_PATTERN = re.compile(r"^[A-Z]{2}\d{4}$")
_DNS1123_LABEL = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?$")


class OutputFormat(str, Enum):
    """Output format types."""
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class AnalysisConfig(BaseModel):
    """Analysis configuration section."""
    default_namespace: str = Field(alias="defaultNamespace", default="default")
    fail_threshold: Level = Field(alias="failThreshold", default=Level.ERROR)
    output_threshold: Level = Field(alias="outputThreshold", default=Level.INFO)
    suppress: list[str] = Field(default_factory=list)

    @field_validator("default_namespace")
    @classmethod
    def validate_default_namespace(cls, v):
        if not _DNS1123_LABEL.match(v):
            raise ValueError(f"default_namespace must be a DNS-1123 label, got: {v}")
        return v

    @field_validator("suppress")
    @classmethod
    def validate_suppress_codes(cls, v):
        """Validate suppressed message codes look like catalog codes."""
        for code in v:
            if not _CODE_PATTERN.match(code):
                raise ValueError(f"suppress entries must be message codes like CC0106, got: {code}")
        return v

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.TABLE

    model_config = ConfigDict(use_enum_values=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class ConfcheckConfig(BaseModel):
    """Complete confcheck configuration model."""
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> ConfcheckConfig:
    """Load the confcheck settings for an analysis run.

    An explicit ``config_path`` wins; otherwise the nearest ``.confcheck.json``
    above the working directory is used. Without either, analysis runs with
    the built-in defaults.

    Raises:
        ValueError: If the file is unreadable, is not JSON, or holds
            settings confcheck does not accept
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None or not path.is_file():
        return ConfcheckConfig()

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ValueError(f"Cannot read confcheck config {path}: {e}") from e

    try:
        settings = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(settings, dict):
        raise ValueError(f"Invalid confcheck settings in {path}: top level must be an object")

    try:
        return ConfcheckConfig.model_validate(settings)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValueError(f"Invalid confcheck settings in {path}: {problems}") from e


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest .confcheck.json at or above ``start_dir``."""
    start = Path(start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None
