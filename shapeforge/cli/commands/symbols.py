# shapeforge/cli/commands/symbols.py
"""
Symbols command.

Shows the resolved symbol of every shape in the service closure, the
derives its metadata carries, and any naming collisions.

Usage:
    shapeforge symbols weather.json -s example.weather#Weather
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from shapeforge.cli.ui import ui
from shapeforge.cli.utils import fail, load_run_settings
from shapeforge.core.exceptions import ShapeforgeError


def command(
    model: Path,
    service: Optional[str] = None,
    config: Optional[Path] = None,
    python_server: bool = False,
) -> None:
    from shapeforge.model.loader import load_model
    from shapeforge.pipeline import CodegenPipeline

    try:
        settings = load_run_settings(config, service, python_server=python_server)
        context = CodegenPipeline(settings).prepare(load_model(model))
    except ShapeforgeError as e:
        fail(e)
        return

    table = context.expect_symbol_table()
    rows = [
        [str(shape_id), symbol.rendered, symbol.metadata.derives_attribute()]
        for shape_id, symbol in table.items()
    ]
    ui.table(f"Symbols of {context.service_id}", ["Shape", "Symbol", "Derives"], rows)

    for diagnostic in context.reporter.diagnostics:
        ui.warning(str(diagnostic))
