# shapeforge/model/loader.py
"""
Model loading - builds a ShapeGraph from a JSON or YAML model document.

The document follows the JSON AST layout:

    smithy: "2.0"
    shapes:
      example#Weather:
        type: service
        version: "2006-03-01"
        operations:
          - target: example#GetCity
        traits:
          aws.protocols#restJson1: {}

Full model validation is out of scope; the loader only rejects documents it
cannot turn into shapes at all.

Usage:
    from shapeforge.model.loader import load_model

    graph = load_model("weather.json")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union

import yaml

from shapeforge.core.exceptions import ModelError
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import MODEL

from .graph import ShapeGraph, log_graph
from .shapes import MemberShape, Shape, ShapeId, ShapeKind
from .traits import Trait, build_trait

logger = get_logger(__name__)

PRELUDE_NAMESPACE = "smithy.api"

# Model "type" values mapped onto the generator's shape kinds.
_TYPE_KINDS: Dict[str, ShapeKind] = {
    "service": ShapeKind.SERVICE,
    "operation": ShapeKind.OPERATION,
    "structure": ShapeKind.STRUCTURE,
    "union": ShapeKind.UNION,
    "list": ShapeKind.LIST,
    "set": ShapeKind.LIST,
    "map": ShapeKind.MAP,
    "string": ShapeKind.STRING,
    "enum": ShapeKind.STRING,
    "boolean": ShapeKind.BOOLEAN,
    "blob": ShapeKind.BLOB,
    "timestamp": ShapeKind.TIMESTAMP,
    "byte": ShapeKind.NUMBER,
    "short": ShapeKind.NUMBER,
    "integer": ShapeKind.NUMBER,
    "intEnum": ShapeKind.NUMBER,
    "long": ShapeKind.NUMBER,
    "float": ShapeKind.NUMBER,
    "double": ShapeKind.NUMBER,
    "bigInteger": ShapeKind.NUMBER,
    "bigDecimal": ShapeKind.NUMBER,
}

_PRELUDE: Tuple[Tuple[str, str], ...] = (
    ("String", "string"),
    ("Blob", "blob"),
    ("Boolean", "boolean"),
    ("Timestamp", "timestamp"),
    ("Byte", "byte"),
    ("Short", "short"),
    ("Integer", "integer"),
    ("Long", "long"),
    ("Float", "float"),
    ("Double", "double"),
    ("BigInteger", "bigInteger"),
    ("BigDecimal", "bigDecimal"),
)


# =============================================================================
# Public API
# =============================================================================


def load_model(path: Union[str, Path]) -> ShapeGraph:
    """
    Load a model document from disk.

    Raises:
        ModelError: If the file is missing or is not a valid model document
    """
    p = Path(path)
    if not p.exists():
        raise ModelError(f"Model file not found: {p}")

    try:
        with p.open("r", encoding="utf-8") as f:
            document = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ModelError(f"Invalid model syntax in {p}: {e}") from e

    logger.info(f"{MODEL} Loading model from {p}")
    return load_model_from_dict(document)


def load_model_from_dict(document: Mapping[str, Any]) -> ShapeGraph:
    """Build a ShapeGraph from an already-parsed model document."""
    if not isinstance(document, Mapping):
        raise ModelError("Model document root must be a mapping")

    raw_shapes = document.get("shapes")
    if not isinstance(raw_shapes, Mapping):
        raise ModelError("Model document has no 'shapes' mapping")

    shapes: List[Shape] = list(prelude_shapes())
    for raw_id, body in raw_shapes.items():
        shapes.append(_build_shape(ShapeId.parse(str(raw_id)), body))

    graph = ShapeGraph(shapes)
    log_graph(graph)
    return graph


def prelude_shapes() -> List[Shape]:
    """Simple shapes every model can target without declaring them."""
    shapes: List[Shape] = []
    for name, type_name in _PRELUDE:
        kind = _TYPE_KINDS[type_name]
        shapes.append(
            Shape(
                id=ShapeId(PRELUDE_NAMESPACE, name),
                kind=kind,
                number_type=type_name if kind == ShapeKind.NUMBER else None,
            )
        )
    shapes.append(Shape(id=ShapeId(PRELUDE_NAMESPACE, "Unit"), kind=ShapeKind.STRUCTURE))
    return shapes


# =============================================================================
# Shape Construction
# =============================================================================


def _build_traits(raw: Any, shape_id: ShapeId) -> Tuple[Trait, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, Mapping):
        raise ModelError("Traits must be a mapping of trait id to value", shape_id=shape_id)
    return tuple(build_trait(str(trait_id), value) for trait_id, value in raw.items())


def _target(raw: Any, shape_id: ShapeId, what: str) -> ShapeId:
    if not isinstance(raw, Mapping) or "target" not in raw:
        raise ModelError(f"{what} must be an object with a 'target'", shape_id=shape_id)
    return ShapeId.parse(str(raw["target"]))


def _build_member(container: ShapeId, name: str, raw: Any) -> MemberShape:
    member_id = container.with_member(name)
    return MemberShape(
        id=member_id,
        kind=ShapeKind.MEMBER,
        traits=_build_traits(raw.get("traits") if isinstance(raw, Mapping) else None, member_id),
        target=_target(raw, member_id, "Member"),
    )


def _build_shape(shape_id: ShapeId, body: Any) -> Shape:
    if not isinstance(body, Mapping):
        raise ModelError("Shape body must be a mapping", shape_id=shape_id)

    type_name = body.get("type")
    kind = _TYPE_KINDS.get(str(type_name))
    if kind is None:
        raise ModelError(f"Unsupported shape type {type_name!r}", shape_id=shape_id)

    traits = _build_traits(body.get("traits"), shape_id)
    members: Tuple[MemberShape, ...] = ()

    if kind in (ShapeKind.STRUCTURE, ShapeKind.UNION):
        raw_members = body.get("members") or {}
        members = tuple(_build_member(shape_id, str(n), m) for n, m in raw_members.items())
    elif kind == ShapeKind.LIST:
        members = (_build_member(shape_id, "member", body.get("member")),)
    elif kind == ShapeKind.MAP:
        members = (
            _build_member(shape_id, "key", body.get("key")),
            _build_member(shape_id, "value", body.get("value")),
        )

    if type_name == "enum":
        traits = traits + (build_trait("smithy.api#enum", list((body.get("members") or {}).keys())),)

    return Shape(
        id=shape_id,
        kind=kind,
        traits=traits,
        members=members,
        input=_target(body["input"], shape_id, "Input") if body.get("input") else None,
        output=_target(body["output"], shape_id, "Output") if body.get("output") else None,
        errors=tuple(_target(e, shape_id, "Error") for e in body.get("errors") or ()),
        operations=tuple(_target(o, shape_id, "Operation") for o in body.get("operations") or ()),
        version=str(body["version"]) if body.get("version") is not None else None,
        number_type=str(type_name) if kind == ShapeKind.NUMBER else None,
    )


__all__ = ["load_model", "load_model_from_dict", "prelude_shapes", "PRELUDE_NAMESPACE"]
