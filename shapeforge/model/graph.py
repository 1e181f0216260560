# shapeforge/model/graph.py
"""
ShapeGraph - the validated, immutable interface model.

The graph indexes every top-level shape and every member shape by id. It is
built once per generation run; transforms produce a new graph instead of
mutating this one.

Traversal helpers (walk_shapes, contained_operations, can_reach) always track
visited ids, so cyclic models terminate.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Set

from shapeforge.core.exceptions import ShapeNotFoundError
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import MODEL

from .shapes import MemberShape, Shape, ShapeId, ShapeKind
from .traits import StreamingTrait

logger = get_logger(__name__)


class ShapeGraph:
    """
    Immutable set of shapes with reference traversal.

    Examples:
        >>> graph = ShapeGraph(shapes)
        >>> service = graph.expect_shape(ShapeId.parse("example#Weather"))
        >>> [op.id.name for op in graph.contained_operations(service)]
        ['GetCity', 'GetForecast']
    """

    def __init__(self, shapes: Iterable[Shape]):
        index: Dict[ShapeId, Shape] = {}
        for shape in shapes:
            index[shape.id] = shape
            for m in shape.members:
                index[m.id] = m
        self._shapes: Mapping[ShapeId, Shape] = MappingProxyType(index)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_shape(self, shape_id: ShapeId) -> Optional[Shape]:
        return self._shapes.get(shape_id)

    def expect_shape(self, shape_id: ShapeId) -> Shape:
        shape = self._shapes.get(shape_id)
        if shape is None:
            raise ShapeNotFoundError("Shape not found in model", shape_id=shape_id)
        return shape

    def expect_member(self, shape_id: ShapeId) -> MemberShape:
        shape = self.expect_shape(shape_id)
        if not isinstance(shape, MemberShape):
            raise ShapeNotFoundError("Shape is not a member", shape_id=shape_id)
        return shape

    def __contains__(self, shape_id: object) -> bool:
        return shape_id in self._shapes

    def __len__(self) -> int:
        return len(self._shapes)

    def __iter__(self) -> Iterator[Shape]:
        """Iterate top-level shapes in id order."""
        return iter(self.top_level_shapes())

    def top_level_shapes(self) -> List[Shape]:
        return [
            self._shapes[sid]
            for sid in sorted(self._shapes)
            if not isinstance(self._shapes[sid], MemberShape)
        ]

    def shapes_of_kind(self, kind: ShapeKind) -> List[Shape]:
        return [s for s in self.top_level_shapes() if s.kind == kind]

    def replace_shapes(self, replacements: Iterable[Shape]) -> "ShapeGraph":
        """Return a new graph with the given shapes added or replaced."""
        merged: Dict[ShapeId, Shape] = {s.id: s for s in self.top_level_shapes()}
        for shape in replacements:
            merged[shape.id] = shape
        return ShapeGraph(merged.values())

    # -------------------------------------------------------------------------
    # Traversal
    # -------------------------------------------------------------------------

    def neighbors(self, shape: Shape) -> List[ShapeId]:
        """Shape ids directly referenced by ``shape``."""
        refs: List[ShapeId] = []
        if isinstance(shape, MemberShape):
            refs.append(shape.target)
            return refs
        refs.extend(m.id for m in shape.members)
        if shape.input is not None:
            refs.append(shape.input)
        if shape.output is not None:
            refs.append(shape.output)
        refs.extend(shape.errors)
        refs.extend(shape.operations)
        return refs

    def walk_shapes(
        self,
        start: Shape,
        predicate: Optional[Callable[[Shape], bool]] = None,
    ) -> List[Shape]:
        """
        Collect every shape reachable from ``start`` (including it).

        Depth-first with a visited set; the result order is deterministic for
        a given graph. References to unknown ids are skipped, the model
        validator is responsible for reporting them.
        """
        visited: Set[ShapeId] = set()
        ordered: List[Shape] = []
        stack: List[ShapeId] = [start.id]

        while stack:
            current_id = stack.pop()
            if current_id in visited:
                continue
            visited.add(current_id)

            current = self._shapes.get(current_id)
            if current is None:
                continue
            ordered.append(current)
            # Reverse so that the first neighbor is visited first.
            stack.extend(reversed(self.neighbors(current)))

        if predicate is not None:
            ordered = [s for s in ordered if predicate(s)]
        return ordered

    def can_reach(self, start: ShapeId, goal: ShapeId) -> bool:
        """True if ``goal`` is reachable from ``start`` through one or more references."""
        visited: Set[ShapeId] = set()
        start_shape = self._shapes.get(start)
        if start_shape is None:
            return False
        stack: List[ShapeId] = list(self.neighbors(start_shape))

        while stack:
            current_id = stack.pop()
            if current_id == goal:
                return True
            if current_id in visited:
                continue
            visited.add(current_id)
            current = self._shapes.get(current_id)
            if current is not None:
                stack.extend(self.neighbors(current))
        return False

    def contained_operations(self, service: Shape) -> List[Shape]:
        """All operations bound to ``service``, in stable id order."""
        operations = [self.expect_shape(op_id) for op_id in service.operations]
        return sorted(operations, key=lambda op: op.id)

    # -------------------------------------------------------------------------
    # Streaming queries
    # -------------------------------------------------------------------------

    def is_streaming(self, shape: Shape) -> bool:
        """True for a streaming shape or a member targeting one."""
        if isinstance(shape, MemberShape):
            target = self.get_shape(shape.target)
            return target is not None and target.has_trait(StreamingTrait)
        return shape.has_trait(StreamingTrait)

    def has_streaming_member(self, shape: Shape) -> bool:
        return any(self.is_streaming(m) for m in shape.members)

    def is_recursive_member(self, shape: MemberShape) -> bool:
        """True if the member's target can reach back to the member's container."""
        target = self.get_shape(shape.target)
        if target is None or target.kind not in (ShapeKind.STRUCTURE, ShapeKind.UNION):
            return False
        return shape.target == shape.container or self.can_reach(shape.target, shape.container)

    def describe(self) -> str:
        counts: Dict[str, int] = {}
        for s in self.top_level_shapes():
            counts[s.kind.value] = counts.get(s.kind.value, 0) + 1
        parts = ", ".join(f"{k}={v}" for k, v in sorted(counts.items()))
        return f"ShapeGraph({parts})"


def log_graph(graph: ShapeGraph) -> None:
    logger.debug(f"{MODEL} Loaded {graph.describe()}")


__all__ = ["ShapeGraph", "log_graph"]
