# shapeforge/config/__init__.py
"""Run configuration: pydantic schema and layered YAML loading."""

from .loader import deep_merge, load_settings, load_yaml
from .schema import CodegenFlags, CodegenSettings, DecoratorManifest, RuntimeConfigSettings

__all__ = [
    "CodegenSettings",
    "CodegenFlags",
    "DecoratorManifest",
    "RuntimeConfigSettings",
    "load_settings",
    "load_yaml",
    "deep_merge",
]
