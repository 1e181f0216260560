# shapeforge/diagnostics/__init__.py
"""Error/Validation Reporter."""

from .reporter import Diagnostic, DiagnosticReporter, Severity

__all__ = ["Diagnostic", "DiagnosticReporter", "Severity"]
