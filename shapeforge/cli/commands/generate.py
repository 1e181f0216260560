# shapeforge/cli/commands/generate.py
"""
Generate command.

Usage:
    shapeforge generate weather.json -s example.weather#Weather -o out/weather
    shapeforge generate model.yaml -c shapeforge.yaml --plan
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from shapeforge.cli.ui import console, ui
from shapeforge.cli.utils import fail, load_run_settings
from shapeforge.core.exceptions import GenerationError, ShapeforgeError
from shapeforge.logging.logger import configure_logging, get_logger
from shapeforge.logging.tags import CLI

logger = get_logger(__name__)


def command(
    model: Path,
    service: Optional[str] = None,
    module_name: Optional[str] = None,
    config: Optional[Path] = None,
    output: Optional[Path] = None,
    protocol: Optional[str] = None,
    python_server: bool = False,
    plan: bool = False,
    verbose: bool = False,
) -> None:
    """Run the pipeline and write (or list) the generated files."""
    from shapeforge.model.loader import load_model
    from shapeforge.pipeline import CodegenPipeline

    if verbose:
        configure_logging(logging.DEBUG)

    try:
        settings = load_run_settings(config, service, module_name, protocol, python_server)
        graph = load_model(model)
        result = CodegenPipeline(settings).run(graph)
    except GenerationError as e:
        for diagnostic in e.diagnostics:
            ui.error(str(diagnostic))
        raise typer.Exit(code=1)
    except ShapeforgeError as e:
        fail(e)
        return

    if plan:
        console.print_json(json.dumps(result.plan.to_dict()))
        return

    ui.header(f"Generated {settings.module_name}", str(settings.service))
    for warning in result.diagnostics:
        ui.warning(str(warning))

    if output is None:
        ui.table(
            "Files",
            ["Path", "Lines"],
            [[path, str(text.count("\n"))] for path, text in result.files.items()],
        )
        ui.info("Pass --output to write the crate to disk.")
        return

    written = result.write(output)
    logger.info(f"{CLI} Wrote {len(written)} file(s) to {output}")
    ui.success(f"Wrote {len(written)} file(s) to {output}")
