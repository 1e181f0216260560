# shapeforge/config/loader.py
"""
Layered configuration loading.

Merge strategy:
    1. Package defaults (shapeforge/config/default.yaml) - always loaded
    2. User config file - overrides defaults
    3. Explicit overrides (e.g. CLI flags) - override both

The merged document is validated into CodegenSettings.

Usage:
    from shapeforge.config.loader import load_settings

    settings = load_settings("codegen.yaml", overrides={"module_name": "weather"})
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from shapeforge.core.exceptions import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import CONFIG

from .schema import CodegenSettings

logger = get_logger(__name__)

DEFAULTS_PATH = Path(__file__).parent / "default.yaml"


# =============================================================================
# Deep Merge
# =============================================================================


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge ``override`` into ``base``; lists are replaced, not merged.

    Examples:
        >>> deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"c": 10}})
        {'a': 1, 'b': {'c': 10, 'd': 3}}
    """
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


# =============================================================================
# Loading
# =============================================================================


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML mapping.

    Raises:
        ConfigNotFoundError: If the file doesn't exist
        ConfigParseError: If the YAML is invalid or not a mapping
    """
    p = Path(path)
    if not p.exists():
        raise ConfigNotFoundError("Config file not found", path=p)

    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}", path=p) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError("Config root must be a mapping", path=p)
    return data


def load_defaults() -> Dict[str, Any]:
    return load_yaml(DEFAULTS_PATH)


def load_settings(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> CodegenSettings:
    """
    Build validated settings from defaults, an optional user file and overrides.

    Raises:
        ConfigValidationError: If the merged document does not match the schema
    """
    merged = load_defaults()
    source: Optional[Path] = None
    if path is not None:
        source = Path(path)
        merged = deep_merge(merged, load_yaml(source))
        logger.debug(f"{CONFIG} Merged user config from {source}")
    if overrides:
        merged = deep_merge(merged, {k: v for k, v in overrides.items() if v is not None})

    try:
        return CodegenSettings.model_validate(merged)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration: {e}", path=source) from e


__all__ = ["deep_merge", "load_yaml", "load_defaults", "load_settings", "DEFAULTS_PATH"]
