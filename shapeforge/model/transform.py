# shapeforge/model/transform.py
"""
Model transforms.

Transforms never mutate a graph; they return a new one. Decorators use
ModelTransformer to attach traits, and the pipeline uses OperationNormalizer
to give every operation its own synthetic request/response envelopes.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Optional

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import MODEL

from .graph import ShapeGraph
from .shapes import MemberShape, Shape, ShapeId, ShapeKind
from .traits import SyntheticInputTrait, SyntheticOutputTrait

logger = get_logger(__name__)

SYNTHETIC_NAMESPACE_SUFFIX = ".synthetic"


class ModelTransformer:
    """Stateless helpers producing modified copies of a ShapeGraph."""

    @staticmethod
    def map_shapes(graph: ShapeGraph, fn: Callable[[Shape], Shape]) -> ShapeGraph:
        """Apply ``fn`` to every top-level shape; identity results are kept as-is."""
        changed = []
        for shape in graph.top_level_shapes():
            mapped = fn(shape)
            if mapped is not shape:
                changed.append(mapped)
        if not changed:
            return graph
        return graph.replace_shapes(changed)


def _reparent(members: tuple, container: ShapeId) -> tuple:
    return tuple(
        replace(m, id=container.with_member(m.member_name))
        for m in members
        if isinstance(m, MemberShape)
    )


class OperationNormalizer:
    """
    Gives every operation of a service dedicated input and output structures.

    The synthetic envelope copies the original structure's members (an
    operation without input/output gets an empty one) and carries
    SyntheticInputTrait / SyntheticOutputTrait, which the streaming resolver
    stages rely on.
    """

    def __init__(self, service_id: ShapeId):
        self.service_id = service_id

    @staticmethod
    def synthetic_id(operation: Shape, suffix: str) -> ShapeId:
        return ShapeId(
            operation.id.namespace + SYNTHETIC_NAMESPACE_SUFFIX,
            f"{operation.id.name}{suffix}",
        )

    def _envelope(
        self,
        graph: ShapeGraph,
        operation: Shape,
        original: Optional[ShapeId],
        suffix: str,
        trait_type: type,
    ) -> Shape:
        envelope_id = self.synthetic_id(operation, suffix)
        source = graph.get_shape(original) if original is not None else None
        traits = tuple(source.traits) if source is not None else ()
        members = _reparent(source.members, envelope_id) if source is not None else ()
        return Shape(
            id=envelope_id,
            kind=ShapeKind.STRUCTURE,
            traits=traits + (trait_type(operation=operation.id, original_id=original),),
            members=members,
        )

    def transform(self, graph: ShapeGraph) -> ShapeGraph:
        service = graph.expect_shape(self.service_id)
        new_shapes: List[Shape] = []

        for operation in graph.contained_operations(service):
            current_input = graph.get_shape(operation.input) if operation.input else None
            if current_input is not None and current_input.has_trait(SyntheticInputTrait):
                continue

            input_shape = self._envelope(
                graph, operation, operation.input, "Input", SyntheticInputTrait
            )
            output_shape = self._envelope(
                graph, operation, operation.output, "Output", SyntheticOutputTrait
            )
            new_shapes.extend([input_shape, output_shape])
            new_shapes.append(replace(operation, input=input_shape.id, output=output_shape.id))

        if not new_shapes:
            return graph

        logger.info(
            f"{MODEL} Normalized {len(new_shapes) // 3} operation(s) of {self.service_id}"
        )
        return graph.replace_shapes(new_shapes)


__all__ = ["ModelTransformer", "OperationNormalizer", "SYNTHETIC_NAMESPACE_SUFFIX"]
