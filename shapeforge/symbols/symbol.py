# shapeforge/symbols/symbol.py
"""
Symbol types - the resolved target-language representation of a shape.

Symbols are frozen value objects. Resolver stages never mutate a symbol;
they return a new one (``with_metadata``, ``renamed``), so two resolutions of
the same shape under the same configuration compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class Derive(str, Enum):
    """Derivable capabilities attached to generated types."""

    DEBUG = "Debug"
    CLONE = "Clone"
    PARTIAL_EQ = "PartialEq"
    EQ = "Eq"
    HASH = "Hash"
    PARTIAL_ORD = "PartialOrd"
    ORD = "Ord"
    DEFAULT = "Default"


# Rendering order of derives in generated attributes.
DERIVE_ORDER: Tuple[Derive, ...] = tuple(Derive)


@dataclass(frozen=True)
class SymbolMetadata:
    """
    Cross-cutting annotations for a symbol.

    Attributes:
        derives: Capabilities the generated type derives
        nullable: Whether the value is optional at use sites
        wrapped: Whether a non-native wrapper type was substituted
        boxed: Whether the value is heap-indirected to break a cycle
        visibility: Visibility of the generated item
        renamed_from: Original name when a stage renamed the symbol
    """

    derives: FrozenSet[Derive] = frozenset()
    nullable: bool = False
    wrapped: bool = False
    boxed: bool = False
    visibility: str = "pub"
    renamed_from: Optional[str] = None

    def with_derives(self, *derives: Derive) -> "SymbolMetadata":
        return replace(self, derives=self.derives | frozenset(derives))

    def without_derives(self, *derives: Derive) -> "SymbolMetadata":
        return replace(self, derives=self.derives - frozenset(derives))

    def derives_attribute(self) -> str:
        """Render ``#[derive(...)]``, or an empty string without derives."""
        ordered = [d.value for d in DERIVE_ORDER if d in self.derives]
        if not ordered:
            return ""
        return f"#[derive({', '.join(ordered)})]"


@dataclass(frozen=True)
class Symbol:
    """
    A target-language type reference.

    Attributes:
        name: Bare type name (``GetCityInput``, ``String``)
        namespace: Module path the type lives in (``crate::input``); empty for builtins
        rust_type: Fully rendered type at use sites (``Option<crate::model::City>``)
        metadata: Derives, nullability, wrapping flags
        references: Inner symbols of generic types (list item, map value, option)
    """

    name: str
    namespace: str = ""
    rust_type: str = ""
    metadata: SymbolMetadata = field(default_factory=SymbolMetadata)
    references: Tuple["Symbol", ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.namespace}::{self.name}" if self.namespace else self.name

    @property
    def rendered(self) -> str:
        return self.rust_type or self.full_name

    def with_metadata(self, metadata: SymbolMetadata) -> "Symbol":
        return replace(self, metadata=metadata)

    def renamed(self, name: str) -> "Symbol":
        old_full = self.full_name
        new = replace(
            self,
            name=name,
            metadata=replace(self.metadata, renamed_from=self.name),
        )
        rust_type = self.rust_type.replace(old_full, new.full_name) if self.rust_type else ""
        return replace(new, rust_type=rust_type)

    def __str__(self) -> str:
        return self.rendered


def option_of(inner: Symbol) -> Symbol:
    return Symbol(
        name="Option",
        namespace="std::option",
        rust_type=f"std::option::Option<{inner.rendered}>",
        metadata=replace(inner.metadata, nullable=True),
        references=(inner,),
    )


def box_of(inner: Symbol) -> Symbol:
    return Symbol(
        name="Box",
        namespace="std::boxed",
        rust_type=f"std::boxed::Box<{inner.rendered}>",
        metadata=replace(inner.metadata, boxed=True),
        references=(inner,),
    )


# =============================================================================
# Runtime Types
# =============================================================================


@dataclass(frozen=True)
class RuntimeConfig:
    """
    Where the generated code finds its runtime crates.

    Attributes:
        crate_prefix: Prefix of runtime crate names (``aws-smithy`` → ``aws-smithy-types``)
        version: Runtime crate version
        relative_path: Local path to the runtime crates instead of a registry version
    """

    crate_prefix: str = "aws-smithy"
    version: str = "0.1.0"
    relative_path: Optional[str] = None

    def crate(self, suffix: str) -> str:
        """Rust use-name of a runtime crate (dashes become underscores)."""
        return f"{self.crate_prefix}-{suffix}".replace("-", "_")


@dataclass(frozen=True)
class RuntimeType:
    """A type or item exported by a runtime crate (``aws_smithy_types::Blob``)."""

    name: str
    namespace: str

    @property
    def full_name(self) -> str:
        return f"{self.namespace}::{self.name}" if self.name else self.namespace

    def resolve(self, path: str) -> "RuntimeType":
        """Resolve a path relative to this type, e.g. ``routing::Route``."""
        head, _, tail = path.rpartition("::")
        namespace = self.full_name if not head else f"{self.full_name}::{head}"
        return RuntimeType(name=tail, namespace=namespace)

    def to_symbol(self, **metadata_flags: bool) -> Symbol:
        return Symbol(
            name=self.name,
            namespace=self.namespace,
            rust_type=self.full_name,
            metadata=SymbolMetadata(**metadata_flags),
        )

    def __str__(self) -> str:
        return self.full_name


def crate_root(runtime_config: RuntimeConfig, suffix: str) -> RuntimeType:
    return RuntimeType(name="", namespace=runtime_config.crate(suffix))


class RuntimeTypes:
    """Runtime items the generator refers to."""

    @staticmethod
    def blob(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "types").resolve("Blob")

    @staticmethod
    def date_time(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "types").resolve("DateTime")

    @staticmethod
    def byte_stream(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "http").resolve("byte_stream::ByteStream")

    @staticmethod
    def event_stream_sender(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "http").resolve("event_stream::EventStreamSender")

    @staticmethod
    def event_stream_receiver(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "http").resolve("event_stream::Receiver")

    @staticmethod
    def generic_error(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "types").resolve("error::ErrorMetadata")

    @staticmethod
    def generic_error_builder(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "types").resolve("error::metadata::Builder")

    @staticmethod
    def http_server(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "http-server")

    @staticmethod
    def smithy_xml(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "xml")

    @staticmethod
    def smithy_json(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "json")


class PythonServerRuntimeTypes:
    """Wrapper types used exclusively by the Python server runtime."""

    @staticmethod
    def _types(rc: RuntimeConfig) -> RuntimeType:
        return crate_root(rc, "http-server-python").resolve("types")

    @classmethod
    def blob(cls, rc: RuntimeConfig) -> RuntimeType:
        return RuntimeType(name="Blob", namespace=cls._types(rc).full_name)

    @classmethod
    def byte_stream(cls, rc: RuntimeConfig) -> RuntimeType:
        return RuntimeType(name="ByteStream", namespace=cls._types(rc).full_name)

    @classmethod
    def date_time(cls, rc: RuntimeConfig) -> RuntimeType:
        return RuntimeType(name="DateTime", namespace=cls._types(rc).full_name)


__all__ = [
    "Derive",
    "SymbolMetadata",
    "Symbol",
    "option_of",
    "box_of",
    "RuntimeConfig",
    "RuntimeType",
    "RuntimeTypes",
    "PythonServerRuntimeTypes",
    "crate_root",
]
