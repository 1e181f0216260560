# shapeforge/decorators/base.py
"""
Decorator protocol - the extension unit of the generator.

A decorator may transform the model, override protocols, add resolver
stages, contribute customizations to the built-in section families,
declare ad-hoc sections, and write extra code into the generated crate.
Every hook has a neutral default in BaseDecorator, so a decorator only
overrides what it needs.

Usage:
    class MyDecorator(BaseDecorator):
        name = "Mine"
        order = 10

        def lib_rs_customizations(self, context, base):
            return base + [MyLibRsCustomization()]
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    ClassVar,
    List,
    Protocol,
    Tuple,
    runtime_checkable,
)

from shapeforge.model.graph import ShapeGraph
from shapeforge.model.shapes import Shape, ShapeId
from shapeforge.protocols.map import ProtocolMap
from shapeforge.sections.customization import (
    ConfigCustomization,
    LibRsCustomization,
    OperationCustomization,
    ServerBuilderCustomization,
)
from shapeforge.sections.section import AdHocSection, SectionWriter
from shapeforge.symbols.provider import StageFactory

if TYPE_CHECKING:
    from shapeforge.config.schema import CodegenSettings
    from shapeforge.core.context import CodegenContext
    from shapeforge.generators.crate import RustCrate

ExtraSection = Tuple[AdHocSection, SectionWriter]


@runtime_checkable
class CodegenDecorator(Protocol):
    """
    Protocol every decorator satisfies.

    ``name`` must be unique within a run. ``order`` decides composition:
    lower runs first, ties keep registration order.
    """

    name: str
    order: int

    def transform_model(self, service: Shape, model: ShapeGraph) -> ShapeGraph:
        ...

    def protocols(self, service_id: ShapeId, current: ProtocolMap) -> ProtocolMap:
        ...

    def symbol_stages(self, settings: "CodegenSettings") -> List[StageFactory]:
        ...

    def operation_customizations(
        self,
        context: "CodegenContext",
        operation: Shape,
        base: List[OperationCustomization],
    ) -> List[OperationCustomization]:
        ...

    def lib_rs_customizations(
        self, context: "CodegenContext", base: List[LibRsCustomization]
    ) -> List[LibRsCustomization]:
        ...

    def config_customizations(
        self, context: "CodegenContext", base: List[ConfigCustomization]
    ) -> List[ConfigCustomization]:
        ...

    def server_builder_customizations(
        self, context: "CodegenContext", base: List[ServerBuilderCustomization]
    ) -> List[ServerBuilderCustomization]:
        ...

    def extra_sections(self, context: "CodegenContext") -> List[ExtraSection]:
        ...

    def extras(self, context: "CodegenContext", crate: "RustCrate") -> None:
        ...


class BaseDecorator:
    """Neutral implementation of every hook. Subclasses set ``name``."""

    name: ClassVar[str] = ""
    order: ClassVar[int] = 0

    def transform_model(self, service: Shape, model: ShapeGraph) -> ShapeGraph:
        return model

    def protocols(self, service_id: ShapeId, current: ProtocolMap) -> ProtocolMap:
        return current

    def symbol_stages(self, settings: "CodegenSettings") -> List[StageFactory]:
        return []

    def operation_customizations(
        self,
        context: "CodegenContext",
        operation: Shape,
        base: List[OperationCustomization],
    ) -> List[OperationCustomization]:
        return base

    def lib_rs_customizations(
        self, context: "CodegenContext", base: List[LibRsCustomization]
    ) -> List[LibRsCustomization]:
        return base

    def config_customizations(
        self, context: "CodegenContext", base: List[ConfigCustomization]
    ) -> List[ConfigCustomization]:
        return base

    def server_builder_customizations(
        self, context: "CodegenContext", base: List[ServerBuilderCustomization]
    ) -> List[ServerBuilderCustomization]:
        return base

    def extra_sections(self, context: "CodegenContext") -> List[ExtraSection]:
        return []

    def extras(self, context: "CodegenContext", crate: "RustCrate") -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, order={self.order})"


class ServiceScopedDecorator(BaseDecorator):
    """
    A decorator whose behavior only applies to one service.

    Hooks of subclasses call ``applies`` with the service id they were given
    and return the neutral result for every other service.
    """

    service_id: ClassVar[str] = ""

    def applies(self, service_id: ShapeId) -> bool:
        return str(service_id) == self.service_id


__all__ = ["CodegenDecorator", "BaseDecorator", "ServiceScopedDecorator", "ExtraSection"]
