# shapeforge/cli/utils.py
"""Helpers shared by CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

import typer

from shapeforge.config.loader import load_settings
from shapeforge.config.schema import CodegenSettings
from shapeforge.core.exceptions import ShapeforgeError
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import CLI
from shapeforge.model.shapes import ShapeId
from shapeforge.symbols.naming import to_snake_case

from .ui import ui

logger = get_logger(__name__)


def load_run_settings(
    config: Optional[Path],
    service: Optional[str] = None,
    module_name: Optional[str] = None,
    protocol: Optional[str] = None,
    python_server: bool = False,
) -> CodegenSettings:
    """
    Settings from package defaults, an optional file and command-line flags.

    Without a config file the crate name defaults to the snake_case service
    name.
    """
    overrides: Dict[str, Any] = {"service": service, "module_name": module_name, "protocol": protocol}
    if config is None and service is not None and module_name is None and "#" in service:
        overrides["module_name"] = to_snake_case(ShapeId.parse(service).name)
    if python_server:
        overrides["codegen"] = {"python_server": True}
    logger.debug(f"{CLI} Loading settings (config={config})")
    return load_settings(config, overrides)


def fail(error: ShapeforgeError) -> None:
    """Print ``error`` and exit with status 1."""
    ui.error(str(error))
    raise typer.Exit(code=1)


__all__ = ["load_run_settings", "fail"]
