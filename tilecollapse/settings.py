"""Generation settings.

Settings come from four layers, later ones winning:
1. Defaults on GenerationSettings
2. A YAML settings file
3. TILECOLLAPSE_* environment variables (a .env file is loaded by the CLI)
4. Explicit overrides, usually command-line flags

Usage:
    settings = load_settings(Path("settings.yaml"), width=40)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tilecollapse.core.errors import TileCollapseError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TILECOLLAPSE_"

# Packaged sample rule files
CONFIG_DIR = Path(__file__).parent / "config"
DEFAULT_RULES_PATH = CONFIG_DIR / "terrain.wfcin"


class SettingsError(TileCollapseError):
    """Settings could not be loaded or failed validation."""

    pass


class GenerationSettings(BaseModel):
    """Parameters for one generation run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    width: int = Field(default=20, gt=0)
    height: int = Field(default=20, gt=0)
    tile_size: int = Field(default=32, gt=0)
    seed: int | None = None
    max_attempts: int = Field(default=1, gt=0)
    output: Path = Path("output.png")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SettingsError(f"Couldn't read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {path} must contain a mapping")
    return data


def _read_env(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect TILECOLLAPSE_<FIELD> variables for known fields."""
    values: dict[str, Any] = {}
    for name in GenerationSettings.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None and raw.strip() != "":
            values[name] = raw.strip()
    return values


def load_settings(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> GenerationSettings:
    """
    Build settings from a YAML file, the environment and overrides.

    Args:
        path: YAML settings file (None = defaults only)
        environ: Environment mapping (default: os.environ)
        **overrides: Explicit values; None values are ignored

    Returns:
        Validated GenerationSettings

    Raises:
        SettingsError: If the file cannot be read or any value is invalid
    """
    values: dict[str, Any] = {}
    if path is not None:
        values.update(_read_yaml(Path(path)))
        logger.debug(f"Loaded settings file {path}: {sorted(values)}")

    env_values = _read_env(os.environ if environ is None else environ)
    if env_values:
        logger.debug(f"Settings from environment: {sorted(env_values)}")
    values.update(env_values)

    values.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return GenerationSettings.model_validate(values)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings: {e}") from e
