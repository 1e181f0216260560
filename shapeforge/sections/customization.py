# shapeforge/sections/customization.py
"""
Customizations - section generators contributed by decorators.

A customization belongs to exactly one section family and answers every
variant of that family: with a fragment for the variants it reacts to and
EMPTY_SECTION for the rest.

Usage:
    class NewFromShared(ConfigCustomization):
        def section(self, section):
            if isinstance(section, ConfigImpl):
                return writable("pub fn new(...) -> Self { ... }")
            return EMPTY_SECTION
"""

from __future__ import annotations

from typing import ClassVar, Type

from .section import (
    EMPTY_SECTION,
    LibRsSection,
    OperationSection,
    Section,
    ServerBuilderSection,
    ServiceConfig,
)
from .writable import Writable


class NamedSectionGenerator:
    """Base for customizations of one section family."""

    family: ClassVar[Type[Section]] = Section

    def section(self, section: Section) -> Writable:
        return EMPTY_SECTION

    @property
    def name(self) -> str:
        return type(self).__name__


class OperationCustomization(NamedSectionGenerator):
    family: ClassVar[Type[Section]] = OperationSection


class LibRsCustomization(NamedSectionGenerator):
    family: ClassVar[Type[Section]] = LibRsSection


class ConfigCustomization(NamedSectionGenerator):
    family: ClassVar[Type[Section]] = ServiceConfig


class ServerBuilderCustomization(NamedSectionGenerator):
    family: ClassVar[Type[Section]] = ServerBuilderSection


__all__ = [
    "NamedSectionGenerator",
    "OperationCustomization",
    "LibRsCustomization",
    "ConfigCustomization",
    "ServerBuilderCustomization",
]
