# shapeforge/cli/commands/decorators.py
"""
Decorators command.

Lists every registered decorator with its order and whether the configured
manifest selects it.

Usage:
    shapeforge decorators
    shapeforge decorators -c shapeforge.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from shapeforge.cli.ui import ui
from shapeforge.cli.utils import fail
from shapeforge.core.exceptions import ConfigValidationError, ShapeforgeError


def command(config: Optional[Path] = None) -> None:
    from shapeforge.config.loader import deep_merge, load_defaults, load_yaml
    from shapeforge.config.schema import DecoratorManifest
    from shapeforge.core.registry import build_registry

    try:
        document = load_defaults()
        if config is not None:
            document = deep_merge(document, load_yaml(config))
        try:
            manifest = DecoratorManifest.model_validate(document.get("decorators") or {})
        except ValidationError as e:
            raise ConfigValidationError(f"Invalid decorator manifest: {e}", path=config) from e
        registry = build_registry(manifest.scan_packages)
        selected = set(registry.select(manifest))
    except ShapeforgeError as e:
        fail(e)
        return

    rows = []
    for name in registry.list_available():
        decorator_class = registry.get(name)
        rows.append(
            [
                name,
                str(getattr(decorator_class, "order", 0)),
                "yes" if decorator_class in selected else "no",
            ]
        )
    ui.table("Decorators", ["Name", "Order", "Selected"], rows)
