# shapeforge/diagnostics/reporter.py
"""
Error/Validation Reporter - collects structural problems found during a run.

Components report problems instead of raising them one at a time, so that a
single run can surface every naming collision or missing piece at once. The
pipeline calls ``raise_if_errors`` before returning any artifacts; a run with
error diagnostics never produces output.

Usage:
    reporter = DiagnosticReporter()
    reporter.error("naming-collision", "...", shape_id=shape.id)
    reporter.raise_if_errors()
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from shapeforge.core.exceptions import GenerationError
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import DIAGNOSTICS

logger = get_logger(__name__)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """
    One reported problem, with enough context to localize the fix.

    Attributes:
        code: Stable machine-readable code (``naming-collision``)
        message: Human-readable description
        severity: ERROR aborts the run, WARNING does not
        shape_id: Offending shape, if any
        decorator: Offending decorator, if any
        section: Section being rendered, if any
    """

    code: str
    message: str
    severity: Severity = Severity.ERROR
    shape_id: Optional[str] = None
    decorator: Optional[str] = None
    section: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        context = []
        if self.shape_id:
            context.append(f"shape={self.shape_id}")
        if self.decorator:
            context.append(f"decorator={self.decorator}")
        if self.section:
            context.append(f"section={self.section}")
        suffix = f" ({', '.join(context)})" if context else ""
        return f"[{self.severity.value}] {self.code}: {self.message}{suffix}"


class DiagnosticReporter:
    """Accumulates diagnostics for one generation run."""

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> Diagnostic:
        self._diagnostics.append(diagnostic)
        if diagnostic.is_error:
            logger.error(f"{DIAGNOSTICS} {diagnostic}")
        else:
            logger.warning(f"{DIAGNOSTICS} {diagnostic}")
        return diagnostic

    def error(
        self,
        code: str,
        message: str,
        *,
        shape_id: Optional[object] = None,
        decorator: Optional[str] = None,
        section: Optional[str] = None,
    ) -> Diagnostic:
        return self.report(
            Diagnostic(
                code=code,
                message=message,
                severity=Severity.ERROR,
                shape_id=str(shape_id) if shape_id is not None else None,
                decorator=decorator,
                section=section,
            )
        )

    def warning(
        self,
        code: str,
        message: str,
        *,
        shape_id: Optional[object] = None,
        decorator: Optional[str] = None,
        section: Optional[str] = None,
    ) -> Diagnostic:
        return self.report(
            Diagnostic(
                code=code,
                message=message,
                severity=Severity.WARNING,
                shape_id=str(shape_id) if shape_id is not None else None,
                decorator=decorator,
                section=section,
            )
        )

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self._diagnostics if d.is_error]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self._diagnostics if not d.is_error]

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self._diagnostics)

    def raise_if_errors(self) -> None:
        """
        Abort the run if any error was reported.

        Raises:
            GenerationError: Carrying every error diagnostic in report order
        """
        errors = self.errors
        if errors:
            raise GenerationError(errors)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)


__all__ = ["Severity", "Diagnostic", "DiagnosticReporter"]
