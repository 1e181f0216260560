# shapeforge/sections/__init__.py
"""
Section Registry and fragment emission.

Public API:
    - Section variants (OperationSection, LibRsSection, ServiceConfig, ...)
    - AdHocSection / SdkConfigSection: detached extension points
    - SectionRegistry: register / contribute / render
    - NamedSectionGenerator and family customization bases
    - CodeWriter, writable, join: fragment trees
"""

from .customization import (
    ConfigCustomization,
    LibRsCustomization,
    NamedSectionGenerator,
    OperationCustomization,
    ServerBuilderCustomization,
)
from .registry import Contribution, Fragment, SectionRegistry
from .section import (
    EMPTY_SECTION,
    AdHocSection,
    BuilderBuild,
    BuilderBuildPrelude,
    BuilderImpl,
    BuilderStruct,
    ConfigImpl,
    ConfigStruct,
    CopySdkConfigToClientConfig,
    LibRsAttributes,
    LibRsBody,
    LibRsSection,
    OperationImplBlock,
    OperationSection,
    PopulateGenericErrorExtras,
    SdkConfigSection,
    Section,
    ServerBuilderSection,
    ServiceConfig,
    ServiceImplExtras,
)
from .writable import EMPTY_WRITABLE, CodeWriter, Writable, join, render_to_string, writable

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
    "AdHocSection",
    "CopySdkConfigToClientConfig",
    "SdkConfigSection",
    "SectionRegistry",
    "Contribution",
    "Fragment",
    "NamedSectionGenerator",
    "OperationCustomization",
    "LibRsCustomization",
    "ConfigCustomization",
    "ServerBuilderCustomization",
    "CodeWriter",
    "Writable",
    "writable",
    "join",
    "render_to_string",
    "EMPTY_WRITABLE",
]
