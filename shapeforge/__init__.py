# shapeforge/__init__.py
"""
Shapeforge - server code generator for shape-graph service models.

Public API:
    - CodegenPipeline, GenerationResult: end-to-end generation
    - CodegenSettings, load_settings: run configuration
    - load_model, load_model_from_dict: model documents
"""

from shapeforge.config.loader import load_settings
from shapeforge.config.schema import CodegenSettings
from shapeforge.model.loader import load_model, load_model_from_dict
from shapeforge.pipeline import CodegenPipeline, GenerationResult

__version__ = "0.1.0"

__all__ = [
    "CodegenPipeline",
    "GenerationResult",
    "CodegenSettings",
    "load_settings",
    "load_model",
    "load_model_from_dict",
    "__version__",
]
