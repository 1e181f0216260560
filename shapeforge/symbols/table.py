# shapeforge/symbols/table.py
"""
SymbolTable - resolves every shape of a service closure once.

The table is the hand-off between the resolver and the generators: names of
generated types are claimed here, and two origins claiming the same
module-qualified name are reported as a naming collision with both origins
named. Nothing is picked arbitrarily; the run fails at ``raise_if_errors``.
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from shapeforge.diagnostics.reporter import DiagnosticReporter
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import SYMBOLS
from shapeforge.model.graph import ShapeGraph
from shapeforge.model.shapes import MemberShape, Shape, ShapeId, ShapeKind
from shapeforge.model.traits import EnumTrait

from .provider import SymbolProvider
from .symbol import Symbol

logger = get_logger(__name__)

NAMING_COLLISION = "naming-collision"


def generates_type(shape: Shape) -> bool:
    """True if the shape becomes a named generated type."""
    if shape.kind in (ShapeKind.STRUCTURE, ShapeKind.UNION, ShapeKind.OPERATION):
        return True
    return shape.kind == ShapeKind.STRING and shape.has_trait(EnumTrait)


class SymbolTable:
    """
    Shape id → Symbol for one service, plus the registry of claimed names.

    Examples:
        >>> table = SymbolTable.build(model, service, provider, reporter)
        >>> table[ShapeId.parse("example#City")].rendered
        'crate::model::City'
    """

    def __init__(self, reporter: DiagnosticReporter):
        self.reporter = reporter
        self._symbols: Dict[ShapeId, Symbol] = {}
        self._claims: Dict[str, str] = {}

    @classmethod
    def build(
        cls,
        model: ShapeGraph,
        service: Shape,
        provider: SymbolProvider,
        reporter: DiagnosticReporter,
    ) -> "SymbolTable":
        table = cls(reporter)
        for shape in model.walk_shapes(service):
            if shape.id.namespace == "smithy.api" and not isinstance(shape, MemberShape):
                continue
            symbol = provider.resolve(shape)
            table._symbols[shape.id] = symbol
            if generates_type(shape):
                table.claim(symbol.full_name, str(shape.id))

        logger.debug(f"{SYMBOLS} Symbol table holds {len(table._symbols)} symbol(s)")
        return table

    def claim(self, name: str, origin: str) -> bool:
        """
        Reserve ``name`` for ``origin``.

        Returns False (and reports a collision) if another origin holds it.
        Re-claiming by the same origin is a no-op.
        """
        holder = self._claims.get(name)
        if holder is None:
            self._claims[name] = origin
            return True
        if holder == origin:
            return True

        first, second = sorted((holder, origin))
        self.reporter.error(
            NAMING_COLLISION,
            f"{name!r} is produced by both {first} and {second}",
            shape_id=second,
        )
        return False

    def owner_of(self, name: str) -> Optional[str]:
        return self._claims.get(name)

    def get(self, shape_id: ShapeId) -> Optional[Symbol]:
        return self._symbols.get(shape_id)

    def __getitem__(self, shape_id: ShapeId) -> Symbol:
        return self._symbols[shape_id]

    def __contains__(self, shape_id: object) -> bool:
        return shape_id in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __iter__(self) -> Iterator[ShapeId]:
        return iter(sorted(self._symbols))

    def items(self) -> List[Tuple[ShapeId, Symbol]]:
        """All entries in shape id order."""
        return [(sid, self._symbols[sid]) for sid in sorted(self._symbols)]

    def generated_names(self) -> List[Tuple[str, str]]:
        """(qualified name, origin) for every claimed name, sorted by name."""
        return sorted(self._claims.items())


__all__ = ["SymbolTable", "generates_type", "NAMING_COLLISION"]
