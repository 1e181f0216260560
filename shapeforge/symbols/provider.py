# shapeforge/symbols/provider.py
"""
Symbol Resolver - maps shapes to target-language symbols.

The resolver is an explicit chain of small stages. Every stage implements the
SymbolProvider protocol and holds a reference to its inner provider; the
innermost provider is the SymbolVisitor, which performs the structural
kind → type mapping. Stages are composed by ordered wrapping:

    provider = SymbolVisitor(model, service, config)
    for stage in (EventStreamStage, StreamingShapeStage, ...):
        provider = stage(provider, model, config)

so any stage can be inserted, removed, or reordered without touching the
others. See shapeforge.symbols.stages for the built-in stages.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol, Sequence, Set, runtime_checkable

from shapeforge.core.exceptions import ModelError
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import SYMBOLS
from shapeforge.model.graph import ShapeGraph
from shapeforge.model.shapes import MemberShape, Shape, ShapeId, ShapeKind
from shapeforge.model.traits import (
    EnumTrait,
    ErrorTrait,
    RequiredTrait,
    SyntheticInputTrait,
    SyntheticOutputTrait,
)

from .naming import to_pascal_case
from .symbol import RuntimeConfig, RuntimeTypes, Symbol, box_of, option_of

logger = get_logger(__name__)


@runtime_checkable
class SymbolProvider(Protocol):
    """
    Protocol for every resolver stage.

    Implementations must be deterministic: resolving the same shape twice
    under the same configuration returns equal symbols.
    """

    def resolve(self, shape: Shape) -> Symbol:
        ...


@dataclass(frozen=True)
class SymbolVisitorConfig:
    """
    Base mapping configuration.

    Attributes:
        runtime_config: Location of runtime crates
        nullability_check: If True, non-required members resolve to Option<T>
    """

    runtime_config: RuntimeConfig = RuntimeConfig()
    nullability_check: bool = True


# Generated module each category of structure lives in.
INPUTS_MODULE = "crate::input"
OUTPUTS_MODULE = "crate::output"
ERRORS_MODULE = "crate::error"
MODEL_MODULE = "crate::model"
OPERATION_MODULE = "crate::operation_shape"

_NUMBER_TYPES: Dict[str, str] = {
    "byte": "i8",
    "short": "i16",
    "integer": "i32",
    "intEnum": "i32",
    "long": "i64",
    "float": "f32",
    "double": "f64",
    "bigInteger": "i128",
    "bigDecimal": "f64",
}


class SymbolVisitor:
    """
    Base stage: structural mapping shape kind → canonical target type.

    Structures resolve to a generated record named after the shape, placed in
    the input, output, error or model module depending on its traits.
    Members resolve to their target's symbol, optional unless required, and
    boxed when they close a cycle.
    """

    def __init__(
        self,
        model: ShapeGraph,
        service: Optional[Shape] = None,
        config: SymbolVisitorConfig = SymbolVisitorConfig(),
    ):
        self.model = model
        self.service = service
        self.config = config
        self._in_progress: Set[ShapeId] = set()
        # Outermost provider of the chain; nested targets resolve through it.
        self.root: SymbolProvider = self
        self._dispatch: Dict[ShapeKind, Callable[[Shape], Symbol]] = {
            ShapeKind.STRUCTURE: self.structure_shape,
            ShapeKind.UNION: self.union_shape,
            ShapeKind.MEMBER: self._member_dispatch,
            ShapeKind.LIST: self.list_shape,
            ShapeKind.MAP: self.map_shape,
            ShapeKind.STRING: self.string_shape,
            ShapeKind.NUMBER: self.number_shape,
            ShapeKind.BOOLEAN: self.boolean_shape,
            ShapeKind.BLOB: self.blob_shape,
            ShapeKind.TIMESTAMP: self.timestamp_shape,
            ShapeKind.OPERATION: self.operation_shape,
            ShapeKind.SERVICE: self.service_shape,
        }

    @property
    def runtime_config(self) -> RuntimeConfig:
        return self.config.runtime_config

    def resolve(self, shape: Shape) -> Symbol:
        handler = self._dispatch.get(shape.kind)
        if handler is None:
            raise ModelError(f"No symbol mapping for shape kind {shape.kind.value!r}", shape.id)
        if shape.id in self._in_progress:
            raise ModelError("Collection shapes reference each other without a structure", shape.id)
        self._in_progress.add(shape.id)
        try:
            return handler(shape)
        finally:
            self._in_progress.discard(shape.id)

    # -------------------------------------------------------------------------
    # Simple shapes
    # -------------------------------------------------------------------------

    @staticmethod
    def _simple(rust_type: str) -> Symbol:
        return Symbol(
            name=rust_type.rsplit("::", 1)[-1],
            namespace=rust_type.rpartition("::")[0],
            rust_type=rust_type,
        )

    def string_shape(self, shape: Shape) -> Symbol:
        if shape.has_trait(EnumTrait):
            name = to_pascal_case(shape.id.name)
            return Symbol(name=name, namespace=MODEL_MODULE, rust_type=f"{MODEL_MODULE}::{name}")
        return self._simple("std::string::String")

    def number_shape(self, shape: Shape) -> Symbol:
        rust = _NUMBER_TYPES.get(shape.number_type or "integer", "i32")
        return Symbol(name=rust, rust_type=rust)

    def boolean_shape(self, shape: Shape) -> Symbol:
        return Symbol(name="bool", rust_type="bool")

    def blob_shape(self, shape: Shape) -> Symbol:
        return RuntimeTypes.blob(self.runtime_config).to_symbol()

    def timestamp_shape(self, shape: Shape) -> Symbol:
        return RuntimeTypes.date_time(self.runtime_config).to_symbol()

    # -------------------------------------------------------------------------
    # Aggregate shapes
    # -------------------------------------------------------------------------

    def _record(self, shape: Shape, module: str) -> Symbol:
        name = to_pascal_case(shape.id.name)
        return Symbol(name=name, namespace=module, rust_type=f"{module}::{name}")

    def structure_shape(self, shape: Shape) -> Symbol:
        if shape.has_trait(SyntheticInputTrait):
            module = INPUTS_MODULE
        elif shape.has_trait(SyntheticOutputTrait):
            module = OUTPUTS_MODULE
        elif shape.has_trait(ErrorTrait):
            module = ERRORS_MODULE
        else:
            module = MODEL_MODULE
        return self._record(shape, module)

    def union_shape(self, shape: Shape) -> Symbol:
        return self._record(shape, MODEL_MODULE)

    def list_shape(self, shape: Shape) -> Symbol:
        item = self.root.resolve(shape.members[0]) if shape.members else self._simple("()")
        return Symbol(
            name="Vec",
            namespace="std::vec",
            rust_type=f"std::vec::Vec<{item.rendered}>",
            references=(item,),
        )

    def map_shape(self, shape: Shape) -> Symbol:
        value_member = shape.member("value")
        if value_member is None:
            raise ModelError("Map shape has no value member", shape.id)
        value = self.root.resolve(value_member)
        return Symbol(
            name="HashMap",
            namespace="std::collections",
            rust_type=f"std::collections::HashMap<std::string::String, {value.rendered}>",
            references=(value,),
        )

    def operation_shape(self, shape: Shape) -> Symbol:
        return self._record(shape, OPERATION_MODULE)

    def service_shape(self, shape: Shape) -> Symbol:
        name = to_pascal_case(shape.id.name)
        return Symbol(name=name, namespace="crate", rust_type=f"crate::{name}")

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    def _member_dispatch(self, shape: Shape) -> Symbol:
        if not isinstance(shape, MemberShape):
            raise ModelError("Member kind on a non-member shape", shape.id)
        return self.member_shape(shape)

    def member_shape(self, shape: MemberShape) -> Symbol:
        target = self.model.expect_shape(shape.target)
        symbol = self.root.resolve(target)

        container = self.model.get_shape(shape.container)
        in_collection = container is not None and container.kind in (ShapeKind.LIST, ShapeKind.MAP)
        if not in_collection and self.model.is_recursive_member(shape):
            symbol = box_of(symbol)

        if self.config.nullability_check and not in_collection and not shape.has_trait(RequiredTrait):
            symbol = option_of(symbol)
        return symbol


class SymbolProviderStage:
    """
    Base for override stages: holds the inner provider and delegates to it.

    Subclasses override ``resolve`` and decide per shape whether to delegate
    unchanged, substitute a different symbol, or annotate the inner symbol.
    """

    def __init__(self, inner: SymbolProvider, model: ShapeGraph, config: SymbolVisitorConfig):
        self.inner = inner
        self.model = model
        self.config = config

    @property
    def runtime_config(self) -> RuntimeConfig:
        return self.config.runtime_config

    def resolve(self, shape: Shape) -> Symbol:
        return self.inner.resolve(shape)


def _innermost(provider: SymbolProvider) -> SymbolProvider:
    while isinstance(provider, SymbolProviderStage):
        provider = provider.inner
    return provider


StageFactory = Callable[[SymbolProvider, ShapeGraph, SymbolVisitorConfig], SymbolProvider]


def build_symbol_provider(
    model: ShapeGraph,
    service: Optional[Shape],
    config: SymbolVisitorConfig,
    stages: Sequence[StageFactory],
    base: Optional[SymbolProvider] = None,
) -> SymbolProvider:
    """
    Assemble a resolver chain.

    Args:
        model: Shape graph the resolver reads
        service: Service being generated
        config: Base mapping configuration
        stages: Stage factories, innermost first
        base: Replacement base stage (defaults to SymbolVisitor)

    Returns:
        The outermost provider of the chain
    """
    provider: SymbolProvider = base if base is not None else SymbolVisitor(model, service, config)
    for factory in stages:
        provider = factory(provider, model, config)
    innermost = _innermost(provider)
    if isinstance(innermost, SymbolVisitor):
        innermost.root = provider
    logger.debug(
        f"{SYMBOLS} Built resolver chain: "
        f"{' -> '.join(getattr(f, '__name__', repr(f)) for f in reversed(stages))} -> base"
    )
    return provider


__all__ = [
    "SymbolProvider",
    "SymbolVisitor",
    "SymbolVisitorConfig",
    "SymbolProviderStage",
    "StageFactory",
    "build_symbol_provider",
    "INPUTS_MODULE",
    "OUTPUTS_MODULE",
    "ERRORS_MODULE",
    "MODEL_MODULE",
    "OPERATION_MODULE",
]
