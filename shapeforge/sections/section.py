# shapeforge/sections/section.py
"""
Section variants - named extension points with typed context payloads.

Every extension point is a family (a base class naming the point) and a
closed set of variants (frozen dataclasses carrying the context the
contributor needs). Customizations dispatch on the variant with isinstance
checks and return EMPTY_SECTION for variants they don't react to.

Families:
    OperationSection   - operation-level code (error parsing extras)
    LibRsSection       - crate root (attributes, body)
    ServiceConfig      - service config struct, impl and builder
    ServerBuilderSection - generated service builder
    SdkConfigSection   - ad-hoc: copy shared SDK config into a service config builder
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Generic, Optional, Tuple, Type, TypeVar, Union

from .writable import EMPTY_WRITABLE, Writable, writable

S = TypeVar("S", bound="Section")

# Contribution of a customization that does not react to a section.
EMPTY_SECTION: Writable = EMPTY_WRITABLE


@dataclass(frozen=True)
class Section:
    """Base of all section variants. ``family`` is the registry key."""

    family: ClassVar[str] = ""

    @property
    def variant(self) -> str:
        return type(self).__name__

    @property
    def qualified_name(self) -> str:
        return f"{self.family}.{self.variant}"


# =============================================================================
# Operation Sections
# =============================================================================


@dataclass(frozen=True)
class OperationSection(Section):
    family: ClassVar[str] = "OperationSection"


@dataclass(frozen=True)
class PopulateGenericErrorExtras(OperationSection):
    """
    Add extra fields to a generic error while it is parsed.

    Attributes:
        builder_name: Binding of the generic error builder
        response_name: Binding of the HTTP response
        operation: Id of the operation whose error parser is being written
    """

    builder_name: str = "builder"
    response_name: str = "response"
    operation: Optional[object] = None


@dataclass(frozen=True)
class OperationImplBlock(OperationSection):
    """Inside ``impl <Operation>``."""

    operation_name: str = ""
    operation: Optional[object] = None


# =============================================================================
# Crate Root Sections
# =============================================================================


@dataclass(frozen=True)
class LibRsSection(Section):
    family: ClassVar[str] = "LibRsSection"


@dataclass(frozen=True)
class LibRsAttributes(LibRsSection):
    """Crate-level attributes at the top of the crate root."""


@dataclass(frozen=True)
class LibRsBody(LibRsSection):
    """Items appended to the crate root after the generated modules."""

    module_name: str = ""


# =============================================================================
# Service Config Sections
# =============================================================================


@dataclass(frozen=True)
class ServiceConfig(Section):
    family: ClassVar[str] = "ServiceConfig"


@dataclass(frozen=True)
class ConfigStruct(ServiceConfig):
    """Fields of ``pub struct Config``."""


@dataclass(frozen=True)
class ConfigImpl(ServiceConfig):
    """Inside ``impl Config``."""


@dataclass(frozen=True)
class BuilderStruct(ServiceConfig):
    """Fields of the config ``Builder``."""


@dataclass(frozen=True)
class BuilderImpl(ServiceConfig):
    """Inside ``impl Builder``."""


@dataclass(frozen=True)
class BuilderBuild(ServiceConfig):
    """Field initializers inside ``Builder::build``."""


# =============================================================================
# Server Builder Sections
# =============================================================================


@dataclass(frozen=True)
class ServerBuilderSection(Section):
    family: ClassVar[str] = "ServerBuilderSection"


@dataclass(frozen=True)
class BuilderBuildPrelude(ServerBuilderSection):
    """Statements at the top of the service builder's ``build``."""

    service_name: str = ""


@dataclass(frozen=True)
class ServiceImplExtras(ServerBuilderSection):
    """Extra methods inside ``impl <Service>``."""

    service_name: str = ""


OperationSectionVariant = Union[PopulateGenericErrorExtras, OperationImplBlock]
LibRsSectionVariant = Union[LibRsAttributes, LibRsBody]
ServiceConfigVariant = Union[ConfigStruct, ConfigImpl, BuilderStruct, BuilderImpl, BuilderBuild]
ServerBuilderVariant = Union[BuilderBuildPrelude, ServiceImplExtras]

SECTION_FAMILIES: Tuple[Type[Section], ...] = (
    OperationSection,
    LibRsSection,
    ServiceConfig,
    ServerBuilderSection,
)


# =============================================================================
# Ad-hoc Sections
# =============================================================================


SectionWriter = Callable[[Any], Writable]


class AdHocSection(Generic[S]):
    """
    A detached extension point declared outside the built-in families.

    ``create`` pairs the point with a writer so decorators can return the
    result straight from ``extra_sections``.
    """

    def __init__(self, name: str, context_type: Type[S]):
        self.name = name
        self.context_type = context_type

    def create(self, writer: Callable[[S], Writable]) -> Tuple["AdHocSection[S]", SectionWriter]:
        return (self, writer)

    def __repr__(self) -> str:
        return f"AdHocSection({self.name!r})"


@dataclass(frozen=True)
class CopySdkConfigToClientConfig(Section):
    """
    Copy settings from the shared SDK config into a service config builder.

    Every contribution must be a complete statement, e.g.
    ``builder.set_foo(input.foo());``.

    Attributes:
        sdk_config: Binding of the shared config reference
        service_config_builder: Binding of the owned service config builder
    """

    family: ClassVar[str] = "SdkConfig"

    sdk_config: str = "input"
    service_config_builder: str = "builder"


class _SdkConfigSection(AdHocSection[CopySdkConfigToClientConfig]):
    def __init__(self) -> None:
        super().__init__("SdkConfig", CopySdkConfigToClientConfig)

    def copy_field(
        self, field_name: str, map_block: Optional[Writable] = None
    ) -> Tuple[AdHocSection[CopySdkConfigToClientConfig], SectionWriter]:
        """
        Copy a field whose accessor and setter share ``field_name``.

        Examples:
            >>> SdkConfigSection.copy_field("region")
            # renders: builder.set_region(input.region());
        """

        def write(section: CopySdkConfigToClientConfig) -> Writable:
            mapped = writable(".map(#{map})", map=map_block) if map_block is not None else EMPTY_WRITABLE
            return writable(
                f"{section.service_config_builder}.set_{field_name}"
                f"({section.sdk_config}.{field_name}()#{{map}});",
                map=mapped,
            )

        return self.create(write)


SdkConfigSection = _SdkConfigSection()


__all__ = [
    "Section",
    "EMPTY_SECTION",
    "OperationSection",
    "PopulateGenericErrorExtras",
    "OperationImplBlock",
    "LibRsSection",
    "LibRsAttributes",
    "LibRsBody",
    "ServiceConfig",
    "ConfigStruct",
    "ConfigImpl",
    "BuilderStruct",
    "BuilderImpl",
    "BuilderBuild",
    "ServerBuilderSection",
    "BuilderBuildPrelude",
    "ServiceImplExtras",
    "OperationSectionVariant",
    "LibRsSectionVariant",
    "ServiceConfigVariant",
    "ServerBuilderVariant",
    "SECTION_FAMILIES",
    "AdHocSection",
    "SectionWriter",
    "CopySdkConfigToClientConfig",
    "SdkConfigSection",
]
