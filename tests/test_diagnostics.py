# tests/test_diagnostics.py
"""
Tests for the diagnostic reporter and the exceptions it raises.
"""

from __future__ import annotations

import pytest

from shapeforge.core.exceptions import (
    CompositionError,
    ConfigError,
    GenerationError,
    ModelError,
    ShapeforgeError,
    ShapeNotFoundError,
)
from shapeforge.diagnostics.reporter import Diagnostic, DiagnosticReporter, Severity
from shapeforge.model.shapes import ShapeId


class TestDiagnostic:
    def test_str_includes_context(self):
        diagnostic = Diagnostic(
            code="naming-collision",
            message="'crate::model::City' is produced by both a#City and b#City",
            shape_id="b#City",
            decorator="S3",
            section="OperationSection.OperationImplBlock",
        )

        assert str(diagnostic) == (
            "[error] naming-collision: 'crate::model::City' is produced by both a#City and b#City "
            "(shape=b#City, decorator=S3, section=OperationSection.OperationImplBlock)"
        )

    def test_str_without_context(self):
        diagnostic = Diagnostic(code="unused", message="nothing uses this", severity=Severity.WARNING)

        assert str(diagnostic) == "[warning] unused: nothing uses this"
        assert not diagnostic.is_error


class TestDiagnosticReporter:
    def test_collects_in_report_order(self):
        reporter = DiagnosticReporter()

        reporter.warning("w1", "first")
        reporter.error("e1", "second", shape_id=ShapeId.parse("ex#Thing"))
        reporter.error("e2", "third")

        assert [d.code for d in reporter] == ["w1", "e1", "e2"]
        assert [d.code for d in reporter.errors] == ["e1", "e2"]
        assert [d.code for d in reporter.warnings] == ["w1"]
        assert len(reporter) == 3

    def test_shape_ids_are_stored_as_text(self):
        reporter = DiagnosticReporter()

        diagnostic = reporter.error("e", "bad", shape_id=ShapeId.parse("ex#Thing$member"))

        assert diagnostic.shape_id == "ex#Thing$member"

    def test_warnings_do_not_abort(self):
        reporter = DiagnosticReporter()
        reporter.warning("w", "just a warning")

        reporter.raise_if_errors()

        assert not reporter.has_errors

    def test_errors_abort_with_every_diagnostic(self):
        reporter = DiagnosticReporter()
        reporter.error("e1", "first")
        reporter.warning("w", "ignored")
        reporter.error("e2", "second")

        with pytest.raises(GenerationError) as exc_info:
            reporter.raise_if_errors()

        assert [d.code for d in exc_info.value.diagnostics] == ["e1", "e2"]
        assert "Generation failed with 2 error(s):" in str(exc_info.value)
        assert "- [error] e2: second" in str(exc_info.value)

    def test_diagnostics_returns_a_copy(self):
        reporter = DiagnosticReporter()
        reporter.error("e", "x")

        reporter.diagnostics.clear()

        assert len(reporter) == 1


class TestExceptions:
    def test_everything_derives_from_the_base_error(self):
        for error_type in (ModelError, ShapeNotFoundError, CompositionError, ConfigError, GenerationError):
            assert issubclass(error_type, ShapeforgeError)

    def test_model_error_names_the_shape(self):
        assert str(ModelError("Broken", ShapeId.parse("ex#Thing"))) == "Broken (shape: ex#Thing)"
        assert str(ModelError("Broken")) == "Broken"

    def test_composition_error_names_decorator_and_section(self):
        error = CompositionError("S3", "LibRsSection.LibRsBody", "boom")

        assert error.decorator == "S3"
        assert error.section == "LibRsSection.LibRsBody"
        assert str(error) == "Decorator 'S3' failed to render section 'LibRsSection.LibRsBody': boom"

    def test_config_error_names_the_file(self, tmp_path):
        path = tmp_path / "shapeforge.yaml"

        assert str(ConfigError("Bad", path)) == f"Bad (file: {path})"
