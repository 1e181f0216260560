# shapeforge/core/context.py
"""
CodegenContext - everything one generation run shares.

The context is created by CodegenPipeline after the model transforms have
run, and is then filled in step by step (symbol table, protocol, root
decorator). Generators and decorators only read from it.

Nothing in here is process-global: two pipelines running in the same
process each own a context, a section registry and a diagnostic reporter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from shapeforge.diagnostics.reporter import DiagnosticReporter
from shapeforge.logging.logger import get_logger
from shapeforge.sections.registry import SectionRegistry
from shapeforge.symbols.naming import to_pascal_case

if TYPE_CHECKING:
    from shapeforge.config.schema import CodegenSettings
    from shapeforge.decorators.combined import CombinedCodegenDecorator
    from shapeforge.model.graph import ShapeGraph
    from shapeforge.model.shapes import Shape, ShapeId
    from shapeforge.protocols.base import ServerProtocol
    from shapeforge.symbols.provider import SymbolProvider
    from shapeforge.symbols.symbol import RuntimeConfig
    from shapeforge.symbols.table import SymbolTable


@dataclass
class CodegenContext:
    """
    Shared state of one generation run.

    Attributes:
        model: The transformed shape graph
        service: The service shape being generated
        settings: Run settings
        symbol_provider: Outermost stage of the resolver chain
        sections: Section registry owned by this run
        reporter: Diagnostics collected during this run
        symbol_table: Resolved service closure (set after resolution)
        protocol: Selected protocol (set after protocol resolution)
        root_decorator: Combined decorator of this run
    """

    model: "ShapeGraph"
    service: "Shape"
    settings: "CodegenSettings"
    symbol_provider: "SymbolProvider"
    sections: SectionRegistry = field(default_factory=SectionRegistry.with_defaults)
    reporter: DiagnosticReporter = field(default_factory=DiagnosticReporter)
    symbol_table: Optional["SymbolTable"] = None
    protocol: Optional["ServerProtocol"] = None
    root_decorator: Optional["CombinedCodegenDecorator"] = None
    logger: logging.Logger = field(default_factory=lambda: get_logger("shapeforge.run"))

    @property
    def service_id(self) -> "ShapeId":
        return self.service.id

    @property
    def service_name(self) -> str:
        """Generated service type name (``Weather``)."""
        return to_pascal_case(self.service.id.name)

    @property
    def runtime_config(self) -> "RuntimeConfig":
        return self.settings.runtime.to_runtime_config()

    @property
    def module_name(self) -> str:
        return self.settings.module_name

    @property
    def module_use_name(self) -> str:
        return self.settings.module_use_name

    def expect_protocol(self) -> "ServerProtocol":
        if self.protocol is None:
            raise RuntimeError("Protocol has not been resolved for this run yet")
        return self.protocol

    def expect_symbol_table(self) -> "SymbolTable":
        if self.symbol_table is None:
            raise RuntimeError("Symbol table has not been built for this run yet")
        return self.symbol_table


__all__ = ["CodegenContext"]
