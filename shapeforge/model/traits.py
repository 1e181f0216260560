# shapeforge/model/traits.py
"""
Trait catalog - typed annotations attached to shapes.

Every trait is a frozen dataclass identified by a namespace-qualified
``trait_id``. Traits that the loader does not know about are preserved as
DynamicTrait so that decorators can still query them by id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type


@dataclass(frozen=True)
class Trait:
    """Base class for all traits."""

    trait_id: ClassVar[str] = ""

    @property
    def id(self) -> str:
        return self.trait_id

    @property
    def is_synthetic(self) -> bool:
        """Synthetic traits are added by the generator and never serialized back."""
        return False

    def to_node(self) -> Dict[str, Any]:
        return {}


@dataclass(frozen=True)
class DynamicTrait(Trait):
    """A trait the loader has no class for; keeps its raw value."""

    name: str = ""
    value: Any = None

    @property
    def id(self) -> str:
        return self.name

    def to_node(self) -> Dict[str, Any]:
        return self.value if isinstance(self.value, dict) else {"value": self.value}


# =============================================================================
# Prelude Traits
# =============================================================================


@dataclass(frozen=True)
class StreamingTrait(Trait):
    trait_id: ClassVar[str] = "smithy.api#streaming"


@dataclass(frozen=True)
class RequiredTrait(Trait):
    trait_id: ClassVar[str] = "smithy.api#required"


@dataclass(frozen=True)
class SensitiveTrait(Trait):
    trait_id: ClassVar[str] = "smithy.api#sensitive"


@dataclass(frozen=True)
class PatternTrait(Trait):
    trait_id: ClassVar[str] = "smithy.api#pattern"

    pattern: str = ""

    def to_node(self) -> Dict[str, Any]:
        return {"value": self.pattern}


@dataclass(frozen=True)
class EnumTrait(Trait):
    trait_id: ClassVar[str] = "smithy.api#enum"

    values: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ErrorTrait(Trait):
    trait_id: ClassVar[str] = "smithy.api#error"

    kind: str = "client"

    @property
    def is_client_error(self) -> bool:
        return self.kind == "client"


@dataclass(frozen=True)
class HttpTrait(Trait):
    trait_id: ClassVar[str] = "smithy.api#http"

    method: str = "GET"
    uri: str = "/"
    code: int = 200


@dataclass(frozen=True)
class HttpErrorTrait(Trait):
    trait_id: ClassVar[str] = "smithy.api#httpError"

    code: int = 500


@dataclass(frozen=True)
class DocumentationTrait(Trait):
    trait_id: ClassVar[str] = "smithy.api#documentation"

    text: str = ""


# =============================================================================
# Protocol Traits
# =============================================================================


@dataclass(frozen=True)
class RestJson1Trait(Trait):
    trait_id: ClassVar[str] = "aws.protocols#restJson1"


@dataclass(frozen=True)
class RestXmlTrait(Trait):
    trait_id: ClassVar[str] = "aws.protocols#restXml"

    no_error_wrapping: bool = False


@dataclass(frozen=True)
class AwsJson1_0Trait(Trait):
    trait_id: ClassVar[str] = "aws.protocols#awsJson1_0"


# =============================================================================
# Synthetic Traits (added by model transforms, never authored)
# =============================================================================


@dataclass(frozen=True)
class SyntheticInputTrait(Trait):
    """Marks a structure as the request envelope of ``operation``."""

    trait_id: ClassVar[str] = "smithy.api.internal#syntheticInput"

    operation: Optional[object] = None
    original_id: Optional[object] = None

    @property
    def is_synthetic(self) -> bool:
        return True


@dataclass(frozen=True)
class SyntheticOutputTrait(Trait):
    """Marks a structure as the response envelope of ``operation``."""

    trait_id: ClassVar[str] = "smithy.api.internal#syntheticOutput"

    operation: Optional[object] = None
    original_id: Optional[object] = None

    @property
    def is_synthetic(self) -> bool:
        return True


@dataclass(frozen=True)
class RefactoredStructureTrait(Trait):
    """
    Applied to a refactored shape; records the member whose structure it came from.
    """

    trait_id: ClassVar[str] = "smithy.api.internal#refactoredMember"

    source_member: Optional[object] = None

    @property
    def is_synthetic(self) -> bool:
        return True

    def to_node(self) -> Dict[str, Any]:
        return {"originalSource": str(self.source_member)}


@dataclass(frozen=True)
class AllowInvalidXmlRootTrait(Trait):
    """Lets a structure's XML root element differ from its shape name."""

    trait_id: ClassVar[str] = "smithy.api.internal#allowInvalidXmlRoot"

    @property
    def is_synthetic(self) -> bool:
        return True


# =============================================================================
# Trait Lookup
# =============================================================================


def _build_http(value: Mapping[str, Any]) -> HttpTrait:
    return HttpTrait(
        method=str(value.get("method", "GET")).upper(),
        uri=str(value.get("uri", "/")),
        code=int(value.get("code", 200)),
    )


def _build_enum(value: Any) -> EnumTrait:
    if isinstance(value, list):
        return EnumTrait(
            values=tuple(v["value"] if isinstance(v, dict) else str(v) for v in value)
        )
    return EnumTrait()


TRAIT_FACTORIES: Dict[str, Any] = {
    StreamingTrait.trait_id: lambda value: StreamingTrait(),
    RequiredTrait.trait_id: lambda value: RequiredTrait(),
    SensitiveTrait.trait_id: lambda value: SensitiveTrait(),
    PatternTrait.trait_id: lambda value: PatternTrait(pattern=str(value)),
    EnumTrait.trait_id: _build_enum,
    ErrorTrait.trait_id: lambda value: ErrorTrait(kind=str(value)),
    HttpTrait.trait_id: _build_http,
    HttpErrorTrait.trait_id: lambda value: HttpErrorTrait(code=int(value)),
    DocumentationTrait.trait_id: lambda value: DocumentationTrait(text=str(value)),
    RestJson1Trait.trait_id: lambda value: RestJson1Trait(),
    RestXmlTrait.trait_id: lambda value: RestXmlTrait(
        no_error_wrapping=bool((value or {}).get("noErrorWrapping", False))
    ),
    AwsJson1_0Trait.trait_id: lambda value: AwsJson1_0Trait(),
}


def build_trait(trait_id: str, value: Any) -> Trait:
    """Create a typed trait from its id and raw model value."""
    factory = TRAIT_FACTORIES.get(trait_id)
    if factory is None:
        return DynamicTrait(name=trait_id, value=value)
    return factory(value)


TraitType = Type[Trait]

__all__ = [
    "Trait",
    "TraitType",
    "DynamicTrait",
    "StreamingTrait",
    "RequiredTrait",
    "SensitiveTrait",
    "PatternTrait",
    "EnumTrait",
    "ErrorTrait",
    "HttpTrait",
    "HttpErrorTrait",
    "DocumentationTrait",
    "RestJson1Trait",
    "RestXmlTrait",
    "AwsJson1_0Trait",
    "SyntheticInputTrait",
    "SyntheticOutputTrait",
    "RefactoredStructureTrait",
    "AllowInvalidXmlRootTrait",
    "build_trait",
]
