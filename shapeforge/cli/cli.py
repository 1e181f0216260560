# shapeforge/cli/cli.py
"""
Shapeforge CLI - Main application.

Commands:
    shapeforge generate      Generate a server crate for a service
    shapeforge symbols       Show the resolved symbol of every shape
    shapeforge decorators    List available decorators
    shapeforge version       Show the version

NOTE: Commands use lazy loading - imports only happen when a command is invoked.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="shapeforge",
    help="Shapeforge - server code generator for shape-graph service models.",
    no_args_is_help=True,
    add_completion=False,
)


# =============================================================================
# LAZY COMMANDS
# =============================================================================


@app.command("generate")
def generate(
    model: Path = typer.Argument(..., help="Model document (JSON or YAML)."),
    service: Optional[str] = typer.Option(None, "--service", "-s", help="Absolute service shape id."),
    module_name: Optional[str] = typer.Option(None, "--module-name", "-m", help="Generated crate name."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML file."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory to write the crate to."),
    protocol: Optional[str] = typer.Option(None, "--protocol", "-p", help="Protocol trait id to use."),
    python_server: bool = typer.Option(False, "--python-server", help="Resolve Python server wrapper types."),
    plan: bool = typer.Option(False, "--plan", help="Print the builder plan as JSON instead of files."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    """Generate the server crate of a service."""
    from shapeforge.cli.commands import generate as mod

    mod.command(
        model=model,
        service=service,
        module_name=module_name,
        config=config,
        output=output,
        protocol=protocol,
        python_server=python_server,
        plan=plan,
        verbose=verbose,
    )


@app.command("symbols")
def symbols(
    model: Path = typer.Argument(..., help="Model document (JSON or YAML)."),
    service: Optional[str] = typer.Option(None, "--service", "-s", help="Absolute service shape id."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML file."),
    python_server: bool = typer.Option(False, "--python-server", help="Resolve Python server wrapper types."),
) -> None:
    """Show the resolved symbol of every shape in the service closure."""
    from shapeforge.cli.commands import symbols as mod

    mod.command(model=model, service=service, config=config, python_server=python_server)


@app.command("decorators")
def decorators(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Settings YAML file."),
) -> None:
    """List available decorators and whether a run would use them."""
    from shapeforge.cli.commands import decorators as mod

    mod.command(config=config)


@app.command("version")
def version() -> None:
    """Show the version."""
    from shapeforge.cli.commands import version as mod

    mod.command()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
