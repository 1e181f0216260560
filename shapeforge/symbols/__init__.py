# shapeforge/symbols/__init__.py
"""
Symbol Resolver - shape → target-language symbol.

Public API:
    - build_symbol_provider: assemble a resolver chain from stages
    - SymbolVisitor: base structural mapping
    - SERVER_STAGES / PYTHON_SERVER_STAGES: built-in stage chains
    - SymbolTable: resolved closure of a service with collision detection
    - Symbol, SymbolMetadata, Derive: resolver output
"""

from .metadata import BaseSymbolMetadataStage, StreamingShapeMetadataStage, metadata_for
from .naming import escape_if_needed, escape_type_name, member_name, to_pascal_case, to_snake_case
from .provider import (
    SymbolProvider,
    SymbolProviderStage,
    SymbolVisitor,
    SymbolVisitorConfig,
    build_symbol_provider,
)
from .stages import (
    PYTHON_SERVER_STAGES,
    SERVER_STAGES,
    EventStreamStage,
    MemoizingStage,
    PythonServerWrapperStage,
    ReservedWordStage,
    StreamingShapeStage,
    stages_for,
)
from .symbol import (
    Derive,
    PythonServerRuntimeTypes,
    RuntimeConfig,
    RuntimeType,
    RuntimeTypes,
    Symbol,
    SymbolMetadata,
)
from .table import SymbolTable

__all__ = [
    "SymbolProvider",
    "SymbolProviderStage",
    "SymbolVisitor",
    "SymbolVisitorConfig",
    "build_symbol_provider",
    "BaseSymbolMetadataStage",
    "StreamingShapeMetadataStage",
    "EventStreamStage",
    "StreamingShapeStage",
    "PythonServerWrapperStage",
    "ReservedWordStage",
    "MemoizingStage",
    "SERVER_STAGES",
    "PYTHON_SERVER_STAGES",
    "stages_for",
    "metadata_for",
    "SymbolTable",
    "Symbol",
    "SymbolMetadata",
    "Derive",
    "RuntimeConfig",
    "RuntimeType",
    "RuntimeTypes",
    "PythonServerRuntimeTypes",
    "escape_if_needed",
    "escape_type_name",
    "member_name",
    "to_pascal_case",
    "to_snake_case",
]
