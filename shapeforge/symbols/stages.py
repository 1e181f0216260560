# shapeforge/symbols/stages.py
"""
Override stages for the symbol resolver.

Each stage decides per shape whether to delegate, substitute, or rename.
Member-level substitutions only apply to members of synthetic operation
envelopes (structures carrying SyntheticInputTrait or SyntheticOutputTrait);
the same member shape inside an ordinary nested structure keeps the default
mapping.

Built-in chains:
    SERVER_STAGES         - Rust server generation
    PYTHON_SERVER_STAGES  - Rust server exposing Python wrapper types
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import SYMBOLS
from shapeforge.model.shapes import MemberShape, Shape, ShapeId, ShapeKind
from shapeforge.model.traits import EnumTrait, SyntheticInputTrait, SyntheticOutputTrait

from .metadata import BaseSymbolMetadataStage, StreamingShapeMetadataStage
from .naming import escape_type_name, to_pascal_case
from .provider import ERRORS_MODULE, StageFactory, SymbolProviderStage
from .symbol import PythonServerRuntimeTypes, RuntimeTypes, Symbol, SymbolMetadata

logger = get_logger(__name__)


def synthetic_container(stage: SymbolProviderStage, shape: Shape) -> Optional[Shape]:
    """The member's container if it is an operation envelope, else None."""
    if not isinstance(shape, MemberShape):
        return None
    container = stage.model.get_shape(shape.container)
    if container is None:
        return None
    if container.has_trait(SyntheticInputTrait) or container.has_trait(SyntheticOutputTrait):
        return container
    return None


# =============================================================================
# Substitution Stages
# =============================================================================


class StreamingShapeStage(SymbolProviderStage):
    """Streaming blob members of operation envelopes become ByteStream."""

    def resolve(self, shape: Shape) -> Symbol:
        if synthetic_container(self, shape) is None:
            return self.inner.resolve(shape)

        target = self.model.get_shape(shape.target)  # type: ignore[attr-defined]
        if target is None or target.kind != ShapeKind.BLOB or not self.model.is_streaming(shape):
            return self.inner.resolve(shape)

        logger.debug(f"{SYMBOLS} {shape.id} resolved to ByteStream")
        return RuntimeTypes.byte_stream(self.runtime_config).to_symbol(wrapped=True)


class EventStreamStage(SymbolProviderStage):
    """
    Streaming union members of operation envelopes become event streams.

    Inputs receive an EventStreamSender, outputs a Receiver; both carry the
    union's generated error type.
    """

    def resolve(self, shape: Shape) -> Symbol:
        container = synthetic_container(self, shape)
        if container is None:
            return self.inner.resolve(shape)

        target = self.model.get_shape(shape.target)  # type: ignore[attr-defined]
        if target is None or target.kind != ShapeKind.UNION or not self.model.is_streaming(shape):
            return self.inner.resolve(shape)

        union = self.inner.resolve(target)
        error_name = f"{to_pascal_case(target.id.name)}Error"
        error = Symbol(name=error_name, namespace=ERRORS_MODULE, rust_type=f"{ERRORS_MODULE}::{error_name}")
        if container.has_trait(SyntheticInputTrait):
            wrapper = RuntimeTypes.event_stream_sender(self.runtime_config)
        else:
            wrapper = RuntimeTypes.event_stream_receiver(self.runtime_config)

        return Symbol(
            name=wrapper.name,
            namespace=wrapper.namespace,
            rust_type=f"{wrapper.full_name}<{union.rendered}, {error.rendered}>",
            metadata=SymbolMetadata(wrapped=True),
            references=(union, error),
        )


class PythonServerWrapperStage(SymbolProviderStage):
    """
    Swaps runtime types that cannot cross into Python for their wrappers.

    Blobs and timestamps resolve to the Python server's wrapper types, and a
    streaming blob member of an operation envelope resolves to its ByteStream.
    """

    def resolve(self, shape: Shape) -> Symbol:
        rc = self.runtime_config

        if shape.kind == ShapeKind.BLOB:
            return PythonServerRuntimeTypes.blob(rc).to_symbol(wrapped=True)
        if shape.kind == ShapeKind.TIMESTAMP:
            return PythonServerRuntimeTypes.date_time(rc).to_symbol(wrapped=True)

        if synthetic_container(self, shape) is not None:
            target = self.model.get_shape(shape.target)  # type: ignore[attr-defined]
            if target is not None and target.kind == ShapeKind.BLOB and self.model.is_streaming(shape):
                return PythonServerRuntimeTypes.byte_stream(rc).to_symbol(wrapped=True)

        return self.inner.resolve(shape)


# =============================================================================
# Naming Stages
# =============================================================================


class ReservedWordStage(SymbolProviderStage):
    """Renames generated types that would shadow prelude types (``Result`` → ``ResultValue``)."""

    _NAMED_KINDS = (ShapeKind.STRUCTURE, ShapeKind.UNION, ShapeKind.OPERATION)

    def resolve(self, shape: Shape) -> Symbol:
        symbol = self.inner.resolve(shape)
        named = shape.kind in self._NAMED_KINDS or (
            shape.kind == ShapeKind.STRING and shape.has_trait(EnumTrait)
        )
        if not named:
            return symbol

        escaped = escape_type_name(symbol.name)
        if escaped == symbol.name:
            return symbol
        logger.debug(f"{SYMBOLS} Renamed {symbol.name} to {escaped} for {shape.id}")
        return symbol.renamed(escaped)


class MemoizingStage(SymbolProviderStage):
    """
    Caches resolutions per shape id for the lifetime of one provider chain.

    Repeated resolution returns the very same Symbol object.
    """

    def __init__(self, inner, model, config):
        super().__init__(inner, model, config)
        self._cache: Dict[ShapeId, Symbol] = {}

    def resolve(self, shape: Shape) -> Symbol:
        cached = self._cache.get(shape.id)
        if cached is not None:
            return cached
        symbol = self.inner.resolve(shape)
        self._cache[shape.id] = symbol
        return symbol

    def __len__(self) -> int:
        return len(self._cache)


# =============================================================================
# Pre-configured Chains (innermost first)
# =============================================================================


SERVER_STAGES: Tuple[StageFactory, ...] = (
    EventStreamStage,
    StreamingShapeStage,
    BaseSymbolMetadataStage,
    StreamingShapeMetadataStage,
    ReservedWordStage,
    MemoizingStage,
)

PYTHON_SERVER_STAGES: Tuple[StageFactory, ...] = (
    PythonServerWrapperStage,
    EventStreamStage,
    BaseSymbolMetadataStage,
    StreamingShapeMetadataStage,
    ReservedWordStage,
    MemoizingStage,
)


def stages_for(python_server: bool, extra: Optional[List[StageFactory]] = None) -> List[StageFactory]:
    """
    Stage list for a target.

    ``extra`` stages are inserted before the naming and memoization stages so
    that their output is still renamed and cached.
    """
    base = list(PYTHON_SERVER_STAGES if python_server else SERVER_STAGES)
    if extra:
        base = base[:-2] + list(extra) + base[-2:]
    return base


__all__ = [
    "StreamingShapeStage",
    "EventStreamStage",
    "PythonServerWrapperStage",
    "ReservedWordStage",
    "MemoizingStage",
    "SERVER_STAGES",
    "PYTHON_SERVER_STAGES",
    "stages_for",
    "synthetic_container",
]
