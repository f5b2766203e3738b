"""Configuration management for valkit using Pydantic models."""

import json
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from valkit.validation.framework import Validator
from valkit.validation.rules import (
    ContainsRule,
    EndsWithRule,
    LengthRule,
    OneOfRule,
    RangeRule,
    RegexRule,
    StartsWithRule,
)
from valkit.values import ParameterType

CONFIG_FILE_NAME = ".valkit.json"


class OutputFormat(str, Enum):
    """Output format types."""
    TABLE = "table"
    JSON = "json"
    MARKDOWN = "markdown"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


class RuleKind(str, Enum):
    """Configurable rule kinds."""
    RANGE = "range"
    LENGTH = "length"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    REGEX = "regex"
    ONE_OF = "one_of"


# Options each kind cannot do without
_REQUIRED_OPTIONS: dict[RuleKind, tuple[str, ...]] = {
    RuleKind.CONTAINS: ("substring",),
    RuleKind.STARTS_WITH: ("prefix",),
    RuleKind.ENDS_WITH: ("suffix",),
    RuleKind.REGEX: ("pattern",),
    RuleKind.ONE_OF: ("choices",),
}


class RuleConfig(BaseModel):
    """One configured rule published under its own function name."""
    name: str
    kind: RuleKind
    minimum: float | None = None
    maximum: float | None = None
    substring: str | None = None
    prefix: str | None = None
    suffix: str | None = None
    pattern: str | None = None
    choices: list[str] | None = None
    parameter_type: ParameterType | None = Field(alias="parameterType", default=None)

    model_config = ConfigDict(populate_by_name=True, extra="forbid", allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v[0].isalpha() or not v.replace("_", "").isalnum() or v.lower() != v:
            raise ValueError(f"rule name must be lowercase letters, digits and underscores, got: {v!r}")
        return v

    @model_validator(mode="after")
    def validate_options(self):
        if self.kind in (RuleKind.RANGE, RuleKind.LENGTH):
            if self.minimum is None and self.maximum is None:
                raise ValueError(f"{self.kind.value} rule '{self.name}' needs minimum and/or maximum")
        if self.kind == RuleKind.LENGTH:
            for label, bound in (("minimum", self.minimum), ("maximum", self.maximum)):
                if bound is not None and not float(bound).is_integer():
                    raise ValueError(f"length rule '{self.name}' {label} must be a whole number, got {bound}")
        for option in _REQUIRED_OPTIONS.get(self.kind, ()):
            if getattr(self, option) is None:
                raise ValueError(f"{self.kind.value} rule '{self.name}' needs option '{option}'")
        return self

    def to_validator(self) -> Validator:
        """Construct the configured rule.

        Raises:
            ConfigurationError: If the rule rejects its configuration
        """
        if self.kind == RuleKind.RANGE:
            validator: Validator = RangeRule(self.minimum, self.maximum)
        elif self.kind == RuleKind.LENGTH:
            validator = LengthRule(
                None if self.minimum is None else int(self.minimum),
                None if self.maximum is None else int(self.maximum),
            )
        elif self.kind == RuleKind.CONTAINS:
            validator = ContainsRule(self.substring)
        elif self.kind == RuleKind.STARTS_WITH:
            validator = StartsWithRule(self.prefix)
        elif self.kind == RuleKind.ENDS_WITH:
            validator = EndsWithRule(self.suffix)
        elif self.kind == RuleKind.REGEX:
            validator = RegexRule(self.pattern)
        else:
            validator = OneOfRule(self.choices)
        return validator


class CatalogConfig(BaseModel):
    """Function catalog configuration section."""
    disabled: list[str] = Field(default_factory=list)
    rules: list[RuleConfig] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class OutputConfig(BaseModel):
    """Output configuration section."""
    format: OutputFormat = OutputFormat.TABLE

    model_config = ConfigDict(use_enum_values=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class ValkitConfig(BaseModel):
    """Complete valkit configuration model."""
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> ValkitConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .valkit.json

    Returns:
        ValkitConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If config file specified but not found
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path is None:
        return create_default_config()

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data: Any = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}") from e

    try:
        return ValkitConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}") from e


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find .valkit.json configuration file by searching up directory tree.

    Args:
        start_dir: Directory to start search from (default: current directory)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_dir is None:
        start_dir = Path.cwd()

    current = Path(start_dir).resolve()

    while True:
        config_file = current / CONFIG_FILE_NAME
        if config_file.exists():
            return config_file

        parent = current.parent
        if parent == current:  # Reached root directory
            break
        current = parent

    return None


def create_default_config() -> ValkitConfig:
    """Create default configuration: built-in catalog, warnings-only logging."""
    return ValkitConfig()
