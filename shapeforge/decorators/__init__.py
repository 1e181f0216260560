# shapeforge/decorators/__init__.py
"""
Decorator Composition Engine.

Public API:
    - CodegenDecorator: protocol every decorator satisfies
    - BaseDecorator: neutral defaults for every hook
    - CombinedCodegenDecorator: ordering, folding and section registration
"""

from .base import BaseDecorator, CodegenDecorator, ExtraSection, ServiceScopedDecorator
from .combined import CombinedCodegenDecorator

__all__ = [
    "CodegenDecorator",
    "BaseDecorator",
    "ServiceScopedDecorator",
    "ExtraSection",
    "CombinedCodegenDecorator",
]
