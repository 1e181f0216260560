# shapeforge/model/shapes.py
"""
Shape Graph nodes.

A Shape is an immutable node of the interface model. Composite shapes own
their MemberShapes, but members only *reference* their targets by ShapeId, so
the graph may contain shared or cyclic references.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterator, Optional, Tuple, Type, TypeVar

from shapeforge.core.exceptions import ModelError

from .traits import Trait

T = TypeVar("T", bound=Trait)


class ShapeKind(str, Enum):
    """Kinds of shapes the generator understands."""

    SERVICE = "service"
    OPERATION = "operation"
    STRUCTURE = "structure"
    UNION = "union"
    MEMBER = "member"
    LIST = "list"
    MAP = "map"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    BLOB = "blob"
    TIMESTAMP = "timestamp"

    @property
    def is_aggregate(self) -> bool:
        return self in {ShapeKind.STRUCTURE, ShapeKind.UNION, ShapeKind.LIST, ShapeKind.MAP}


@dataclass(frozen=True)
class ShapeId:
    """
    Namespace-qualified shape identifier.

    Examples:
        >>> ShapeId.parse("example.weather#GetForecast")
        ShapeId(namespace='example.weather', name='GetForecast', member=None)
        >>> str(ShapeId.parse("example#Foo$bar"))
        'example#Foo$bar'
    """

    namespace: str
    name: str
    member: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> "ShapeId":
        if "#" not in text:
            raise ModelError(f"Invalid shape id {text!r}: missing namespace separator '#'")
        namespace, rest = text.split("#", 1)
        member: Optional[str] = None
        if "$" in rest:
            rest, member = rest.split("$", 1)
        if not namespace or not rest:
            raise ModelError(f"Invalid shape id {text!r}")
        return cls(namespace=namespace, name=rest, member=member)

    def with_member(self, member: str) -> "ShapeId":
        return ShapeId(self.namespace, self.name, member)

    def without_member(self) -> "ShapeId":
        return ShapeId(self.namespace, self.name)

    @property
    def sort_key(self) -> Tuple[str, str, str]:
        return (self.namespace, self.name, self.member or "")

    def __lt__(self, other: "ShapeId") -> bool:
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        base = f"{self.namespace}#{self.name}"
        return f"{base}${self.member}" if self.member else base


@dataclass(frozen=True)
class Shape:
    """
    A node in the interface graph.

    Only the fields relevant to ``kind`` are populated:
    - structure/union: members
    - list: members (a single ``member``)
    - map: members (``key`` and ``value``)
    - operation: input, output, errors
    - service: operations, version
    - number: number_type (integer, long, float, ...)
    """

    id: ShapeId
    kind: ShapeKind
    traits: Tuple[Trait, ...] = ()
    members: Tuple["MemberShape", ...] = ()
    input: Optional[ShapeId] = None
    output: Optional[ShapeId] = None
    errors: Tuple[ShapeId, ...] = ()
    operations: Tuple[ShapeId, ...] = ()
    version: Optional[str] = None
    number_type: Optional[str] = None

    # -------------------------------------------------------------------------
    # Trait queries
    # -------------------------------------------------------------------------

    def has_trait(self, trait_type: Type[Trait]) -> bool:
        return any(isinstance(t, trait_type) for t in self.traits)

    def has_trait_id(self, trait_id: str) -> bool:
        return any(t.id == trait_id for t in self.traits)

    def get_trait(self, trait_type: Type[T]) -> Optional[T]:
        for t in self.traits:
            if isinstance(t, trait_type):
                return t
        return None

    def expect_trait(self, trait_type: Type[T]) -> T:
        found = self.get_trait(trait_type)
        if found is None:
            raise ModelError(f"Expected trait {trait_type.trait_id!r}", shape_id=self.id)
        return found

    def with_trait(self, trait: Trait) -> "Shape":
        """Return a copy with ``trait`` added (replacing one of the same id)."""
        kept = tuple(t for t in self.traits if t.id != trait.id)
        return replace(self, traits=kept + (trait,))

    # -------------------------------------------------------------------------
    # Members
    # -------------------------------------------------------------------------

    def member(self, name: str) -> Optional["MemberShape"]:
        for m in self.members:
            if m.member_name == name:
                return m
        return None

    def iter_members(self) -> Iterator["MemberShape"]:
        return iter(self.members)

    @property
    def is_structure(self) -> bool:
        return self.kind == ShapeKind.STRUCTURE

    @property
    def is_union(self) -> bool:
        return self.kind == ShapeKind.UNION

    @property
    def is_operation(self) -> bool:
        return self.kind == ShapeKind.OPERATION


@dataclass(frozen=True)
class MemberShape(Shape):
    """A named member of a composite shape, referencing its target by id."""

    target: ShapeId = field(default_factory=lambda: ShapeId("smithy.api", "Unit"))

    @property
    def member_name(self) -> str:
        return self.id.member or ""

    @property
    def container(self) -> ShapeId:
        return self.id.without_member()


def member(container: ShapeId, name: str, target: ShapeId, *traits: Trait) -> MemberShape:
    """Convenience constructor for member shapes."""
    return MemberShape(
        id=container.with_member(name),
        kind=ShapeKind.MEMBER,
        traits=tuple(traits),
        target=target,
    )


__all__ = ["ShapeKind", "ShapeId", "Shape", "MemberShape", "member"]
