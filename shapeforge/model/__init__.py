# shapeforge/model/__init__.py
"""
Shape Graph - the validated interface model consumed by the generator.

Public API:
    - ShapeGraph: immutable graph with visited-set traversal
    - Shape, MemberShape, ShapeId, ShapeKind: graph nodes
    - Traits: StreamingTrait, PatternTrait, SyntheticInputTrait, ...
    - load_model / load_model_from_dict: model document loading
    - ModelTransformer, OperationNormalizer: graph-to-graph transforms
"""

from .graph import ShapeGraph
from .loader import load_model, load_model_from_dict
from .shapes import MemberShape, Shape, ShapeId, ShapeKind, member
from .traits import (
    AllowInvalidXmlRootTrait,
    AwsJson1_0Trait,
    DocumentationTrait,
    DynamicTrait,
    EnumTrait,
    ErrorTrait,
    HttpErrorTrait,
    HttpTrait,
    PatternTrait,
    RefactoredStructureTrait,
    RequiredTrait,
    RestJson1Trait,
    RestXmlTrait,
    SensitiveTrait,
    StreamingTrait,
    SyntheticInputTrait,
    SyntheticOutputTrait,
    Trait,
)
from .transform import ModelTransformer, OperationNormalizer

__all__ = [
    "ShapeGraph",
    "Shape",
    "MemberShape",
    "ShapeId",
    "ShapeKind",
    "member",
    "load_model",
    "load_model_from_dict",
    "ModelTransformer",
    "OperationNormalizer",
    "Trait",
    "DynamicTrait",
    "AllowInvalidXmlRootTrait",
    "AwsJson1_0Trait",
    "DocumentationTrait",
    "EnumTrait",
    "ErrorTrait",
    "HttpErrorTrait",
    "HttpTrait",
    "PatternTrait",
    "RefactoredStructureTrait",
    "RequiredTrait",
    "RestJson1Trait",
    "RestXmlTrait",
    "SensitiveTrait",
    "StreamingTrait",
    "SyntheticInputTrait",
    "SyntheticOutputTrait",
]
