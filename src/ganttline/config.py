"""Configuration for chart layout, loaded from ``ganttline.yaml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from . import context
from .exceptions import ConfigError
from .geometry import DEFAULT_COLUMN_WIDTH
from .models import DEFAULT_COLOR

CONFIG_FILENAME = "ganttline.yaml"


class GanttConfig(BaseModel):
    """Layout and behaviour settings for a chart."""

    column_width: int = Field(default=DEFAULT_COLUMN_WIDTH, gt=0)  # Pixels per week column
    sidebar_width: int = Field(default=300, ge=0)  # Task-name column
    row_height: int = Field(default=48, gt=0)
    indent_step: int = Field(default=20, ge=0)  # Extra left padding per nesting level
    base_padding: int = Field(default=12, ge=0)
    default_color: str = DEFAULT_COLOR
    text_width: int = Field(default=72, gt=0)  # Timeline columns in the text backend
    allow_cross_parent_reorder: bool = True

    @field_validator("default_color")
    @classmethod
    def check_color(cls, v: str) -> str:
        """Require a CSS hex color."""
        if not v.startswith("#") or len(v) not in (4, 7):
            raise ValueError(f"default_color must be a hex color like '#0394ff', got '{v}'")
        return v

    def indent_for(self, depth: int) -> int:
        return depth * self.indent_step + self.base_padding


class GanttlineConfig(BaseModel):
    """Top-level config file contents."""

    gantt: GanttConfig = Field(default_factory=GanttConfig)


def load_config(config_path: Path | str) -> GanttlineConfig:
    """Load configuration from a YAML file.

    Raises:
        ConfigError: If the file is missing, unparsable or fails validation
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {config_path}: {e}") from e

    if data is None:
        return GanttlineConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the root level")

    try:
        return GanttlineConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e


def discover_config(
    tasks_path: Path | str | None = None,
    config_path: Path | str | None = None,
) -> GanttlineConfig:
    """Find and load the configuration for a task file.

    Search order:
    1. Explicit config_path argument
    2. Global context (set via CLI --config)
    3. Task file directory / ganttline.yaml
    4. Current directory / ganttline.yaml

    Falls back to defaults when nothing is found. An explicitly named file
    that does not exist is an error.
    """
    if config_path is not None:
        return load_config(config_path)

    ctx_config = context.get_config_path()
    if ctx_config is not None:
        return load_config(ctx_config)

    if tasks_path is not None:
        dir_config = Path(tasks_path).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_config(dir_config)

    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return GanttlineConfig()
