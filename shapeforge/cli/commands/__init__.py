# shapeforge/cli/commands/__init__.py
"""CLI command implementations, imported lazily by shapeforge.cli.cli."""
