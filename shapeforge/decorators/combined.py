# shapeforge/decorators/combined.py
"""
CombinedCodegenDecorator - folds every decorator of a run into one.

Composition rules:
- decorators are stably sorted by ``order`` (ties keep the given order)
- list-returning hooks are folded: each decorator receives the previous
  decorator's result as its ``base`` and returns the new list
- model transforms and protocol maps are folded the same way
- extras run in order; fragments they add to the crate are attributed

A decorator that raises inside any hook aborts the run with a
CompositionError naming the decorator and the hook.

``register_sections`` turns the folded customizations into section
registry contributions. Every contribution is attributed to the decorator
that introduced the customization, so ordering and failures are reported
per decorator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Sequence, Tuple

from shapeforge.core.exceptions import CompositionError, DuplicateDecoratorError
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import DECORATORS
from shapeforge.model.graph import ShapeGraph
from shapeforge.model.shapes import Shape, ShapeId
from shapeforge.protocols.map import ProtocolMap
from shapeforge.sections.customization import NamedSectionGenerator, OperationCustomization
from shapeforge.sections.section import (
    EMPTY_SECTION,
    LibRsSection,
    OperationSection,
    ServerBuilderSection,
    ServiceConfig,
)
from shapeforge.sections.writable import Writable
from shapeforge.symbols.provider import StageFactory

from .base import CodegenDecorator

if TYPE_CHECKING:
    from shapeforge.config.schema import CodegenSettings
    from shapeforge.core.context import CodegenContext
    from shapeforge.generators.crate import RustCrate

logger = get_logger(__name__)

Owned = Tuple[CodegenDecorator, NamedSectionGenerator]


def _qualified(decorator: Any) -> str:
    cls = type(decorator)
    return f"{cls.__module__}.{cls.__qualname__}"


def _call_hook(decorator: CodegenDecorator, hook: str, *args: Any) -> Any:
    """Call one decorator hook; failures are attributed to the decorator."""
    try:
        return getattr(decorator, hook)(*args)
    except CompositionError:
        raise
    except Exception as e:
        raise CompositionError(decorator.name, reason=str(e), hook=hook) from e


class _ForOperation:
    """Restricts an operation customization to one operation's sections."""

    def __init__(self, operation: ShapeId, customization: OperationCustomization):
        self.operation = operation
        self.customization = customization

    def __call__(self, section: OperationSection) -> Writable:
        if getattr(section, "operation", None) != self.operation:
            return EMPTY_SECTION
        return self.customization.section(section)


class CombinedCodegenDecorator:
    """
    The root decorator of a run.

    Raises:
        DuplicateDecoratorError: If two decorators share a name
    """

    name = "Combined"
    order = 0

    def __init__(self, decorators: Sequence[CodegenDecorator]):
        seen: Dict[str, CodegenDecorator] = {}
        for decorator in decorators:
            existing = seen.get(decorator.name)
            if existing is not None:
                raise DuplicateDecoratorError(
                    f"Duplicate decorator name {decorator.name!r}: "
                    f"{_qualified(existing)} and {_qualified(decorator)}"
                )
            seen[decorator.name] = decorator

        indexed = list(enumerate(decorators))
        self.decorators: List[CodegenDecorator] = [
            d for _, d in sorted(indexed, key=lambda pair: (pair[1].order, pair[0]))
        ]
        logger.debug(f"{DECORATORS} Composition order: {self.names()}")

    def names(self) -> List[str]:
        return [d.name for d in self.decorators]

    def __len__(self) -> int:
        return len(self.decorators)

    # -------------------------------------------------------------------------
    # Folded hooks
    # -------------------------------------------------------------------------

    def transform_model(self, service: Shape, model: ShapeGraph) -> ShapeGraph:
        current = model
        for decorator in self.decorators:
            transformed = _call_hook(decorator, "transform_model", service, current)
            if transformed is not current:
                logger.info(f"{DECORATORS} {decorator.name} transformed the model")
            current = transformed
        return current

    def protocols(self, service_id: ShapeId, current: ProtocolMap) -> ProtocolMap:
        for decorator in self.decorators:
            current = _call_hook(decorator, "protocols", service_id, current)
        return current

    def symbol_stages(self, settings: "CodegenSettings") -> List[StageFactory]:
        stages: List[StageFactory] = []
        for decorator in self.decorators:
            stages.extend(_call_hook(decorator, "symbol_stages", settings))
        return stages

    def operation_customizations(
        self, context: "CodegenContext", operation: Shape, base: List[OperationCustomization]
    ) -> List[OperationCustomization]:
        return [c for _, c in self._fold("operation_customizations", base, context, operation)]

    def lib_rs_customizations(self, context: "CodegenContext", base: List) -> List:
        return [c for _, c in self._fold("lib_rs_customizations", base, context)]

    def config_customizations(self, context: "CodegenContext", base: List) -> List:
        return [c for _, c in self._fold("config_customizations", base, context)]

    def server_builder_customizations(self, context: "CodegenContext", base: List) -> List:
        return [c for _, c in self._fold("server_builder_customizations", base, context)]

    def extras(self, context: "CodegenContext", crate: "RustCrate") -> None:
        for decorator in self.decorators:
            with crate.contributed_by(decorator.name):
                _call_hook(decorator, "extras", context, crate)

    def _fold(self, hook: str, base: List, *args: Any) -> List[Owned]:
        """
        Fold ``hook`` over the decorators, remembering which decorator
        introduced each customization.
        """
        current = list(base)
        owners: Dict[int, CodegenDecorator] = {}
        for decorator in self.decorators:
            result = list(_call_hook(decorator, hook, *args, current))
            for customization in result:
                owners.setdefault(id(customization), decorator)
            current = result
        return [(owners.get(id(c), self), c) for c in current]

    # -------------------------------------------------------------------------
    # Section registration
    # -------------------------------------------------------------------------

    def register_sections(self, context: "CodegenContext") -> None:
        """Contribute every customization and ad-hoc section writer of the run."""
        registry = context.sections

        families = (
            (LibRsSection, "lib_rs_customizations"),
            (ServiceConfig, "config_customizations"),
            (ServerBuilderSection, "server_builder_customizations"),
        )
        for family, hook in families:
            for owner, customization in self._fold(hook, [], context):
                registry.contribute(family.family, owner, customization.section)

        for operation in context.model.contained_operations(context.service):
            for owner, customization in self._fold("operation_customizations", [], context, operation):
                registry.contribute(
                    OperationSection.family, owner, _ForOperation(operation.id, customization)
                )

        for decorator in self.decorators:
            for section, writer in list(_call_hook(decorator, "extra_sections", context)):
                registry.register(section.name, section.context_type)
                registry.contribute(section.name, decorator, writer)

        logger.debug(f"{DECORATORS} Registered contributions for {registry.sections()}")


__all__ = ["CombinedCodegenDecorator"]
