# shapeforge/core/__init__.py
"""
Core building blocks shared by every component.

Only the exception hierarchy is re-exported here; the run context and the
decorator registry are imported from their modules
(``shapeforge.core.context``, ``shapeforge.core.registry``).
"""

from .exceptions import (
    CompositionError,
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    DuplicateDecoratorError,
    DuplicateSectionError,
    GenerationError,
    ModelError,
    NamingCollisionError,
    RegistrationError,
    ShapeforgeError,
    ShapeNotFoundError,
    SymbolError,
    TemplateError,
    UnknownSectionError,
)

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
