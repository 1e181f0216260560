# shapeforge/core/exceptions.py
"""
All exceptions raised while generating code.

Hierarchy:
    ShapeforgeError
    ├── ModelError - required shape or trait is absent
    │   └── ShapeNotFoundError - unknown shape id
    ├── SymbolError - symbol resolution failures
    │   └── NamingCollisionError - two origins resolve to the same name
    ├── CompositionError - a decorator failed in a hook or while rendering
    ├── TemplateError - a code template could not be rendered
    ├── RegistrationError - section/decorator registry misuse
    │   ├── DuplicateSectionError
    │   ├── UnknownSectionError
    │   └── DuplicateDecoratorError
    ├── ConfigError - configuration failures
    └── GenerationError - the run finished with error diagnostics

Generation-time errors are unrecoverable for the run. Errors of the generated
artifact itself (missing operation handlers) live in shapeforge.runtime.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from shapeforge.diagnostics.reporter import Diagnostic


class ShapeforgeError(Exception):
    """
    Base exception for all generation errors.

    Examples:
        >>> try:
        ...     pipeline.run(model)
        ... except ShapeforgeError as e:
        ...     print(f"Generation failed: {e}")
    """

    pass


# =============================================================================
# Model Errors
# =============================================================================


class ModelError(ShapeforgeError):
    """The shape graph is missing something a generator depends on."""

    def __init__(self, message: str, shape_id: Optional[object] = None):
        self.shape_id = shape_id
        if shape_id is not None:
            message = f"{message} (shape: {shape_id})"
        super().__init__(message)


class ShapeNotFoundError(ModelError):
    """Raised when a shape id is not part of the graph."""

    pass


# =============================================================================
# Symbol Errors
# =============================================================================


class SymbolError(ShapeforgeError):
    """Symbol resolution failed."""

    pass


class NamingCollisionError(SymbolError):
    """Two shapes (or two decorators) produced the same target name."""

    def __init__(self, name: str, first_origin: str, second_origin: str):
        self.name = name
        self.first_origin = first_origin
        self.second_origin = second_origin
        super().__init__(
            f"Name {name!r} is produced by both {first_origin} and {second_origin}"
        )


# =============================================================================
# Composition Errors
# =============================================================================


class CompositionError(ShapeforgeError):
    """
    A decorator failed: while rendering its contribution to a section, or
    inside one of its hooks (``hook`` is then set).
    """

    def __init__(self, decorator: str, section: str = "", reason: str = "", hook: str = ""):
        self.decorator = decorator
        self.section = section
        self.hook = hook
        if hook:
            message = f"Decorator {decorator!r} failed in hook {hook!r}"
            if section:
                message = f"{message} for {section!r}"
        else:
            message = f"Decorator {decorator!r} failed to render section {section!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TemplateError(ShapeforgeError):
    """A code template referenced an unbound name or could not be parsed."""

    pass


# =============================================================================
# Registration Errors
# =============================================================================


class RegistrationError(ShapeforgeError):
    """Base error for section and decorator registration."""

    pass


class DuplicateSectionError(RegistrationError):
    """A section name was registered twice with different context types."""

    pass


class UnknownSectionError(RegistrationError):
    """A contribution or render targeted a section that was never registered."""

    pass


class DuplicateDecoratorError(RegistrationError):
    """Two decorators share the same name."""

    pass


# =============================================================================
# Config Errors
# =============================================================================


class ConfigError(ShapeforgeError):
    """Base error for configuration issues."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path:
            message = f"{message} (file: {path})"
        super().__init__(message)


class ConfigNotFoundError(ConfigError):
    """Raised when a config file doesn't exist."""

    pass


class ConfigParseError(ConfigError):
    """Raised when YAML parsing fails."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when config doesn't match the schema."""

    pass


# =============================================================================
# Run Errors
# =============================================================================


class GenerationError(ShapeforgeError):
    """The run recorded one or more error-level diagnostics."""

    def __init__(self, diagnostics: Sequence["Diagnostic"]):
        self.diagnostics = list(diagnostics)
        lines = [f"Generation failed with {len(self.diagnostics)} error(s):"]
        lines.extend(f"- {d}" for d in self.diagnostics)
        super().__init__("\n".join(lines))


__all__ = [
    "ShapeforgeError",
    "ModelError",
    "ShapeNotFoundError",
    "SymbolError",
    "NamingCollisionError",
    "CompositionError",
    "TemplateError",
    "RegistrationError",
    "DuplicateSectionError",
    "UnknownSectionError",
    "DuplicateDecoratorError",
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "GenerationError",
]
