# shapeforge/pipeline.py
"""
CodegenPipeline - end-to-end generation of one service.

Flow: decorators → model transforms → resolver chain → symbol table →
protocol → sections → service/operations/envelopes/config/lib → artifacts

Every run owns its context, section registry and diagnostic reporter, so
pipelines can run side by side in one process.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from shapeforge.config.schema import CodegenSettings
from shapeforge.core.context import CodegenContext
from shapeforge.core.exceptions import ModelError
from shapeforge.core.registry import DecoratorRegistry, build_registry
from shapeforge.decorators.base import CodegenDecorator
from shapeforge.decorators.combined import CombinedCodegenDecorator
from shapeforge.diagnostics.reporter import Diagnostic, DiagnosticReporter
from shapeforge.generators.config import ServiceConfigGenerator
from shapeforge.generators.crate import RustCrate
from shapeforge.generators.envelopes import EnvelopeGenerator
from shapeforge.generators.lib import SERVICE_MODULE, LibRsGenerator
from shapeforge.generators.operations import OperationGenerator
from shapeforge.generators.service import ServerServiceGenerator, ServicePlan
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import PIPELINE
from shapeforge.model.graph import ShapeGraph
from shapeforge.model.shapes import ShapeId, ShapeKind
from shapeforge.model.transform import OperationNormalizer
from shapeforge.protocols.map import default_protocols
from shapeforge.symbols.provider import SymbolVisitorConfig, build_symbol_provider
from shapeforge.symbols.stages import stages_for
from shapeforge.symbols.table import SymbolTable

logger = get_logger(__name__)

# Third-party crates every generated server depends on.
BASE_DEPENDENCIES = {
    "bytes": "1",
    "http": "0.2",
    "http-body": "0.4",
    "tower": "0.4",
}
RUNTIME_CRATES = ("http-server", "http", "types")


@dataclass
class GenerationResult:
    """
    Output of one run.

    Attributes:
        files: Path → text of every generated file, sorted by path
        diagnostics: Warnings reported during the run
        plan: Builder/router plan of the service
        context: The run's context (model, symbols, sections)
    """

    files: Dict[str, str]
    plan: ServicePlan
    context: CodegenContext
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def write(self, output_dir: Union[str, Path]) -> List[Path]:
        """Write every file below ``output_dir``; returns the written paths."""
        root = Path(output_dir)
        written = []
        for relative, text in self.files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
            written.append(path)
        logger.info(f"{PIPELINE} Wrote {len(written)} file(s) to {root}")
        return written


class CodegenPipeline:
    """
    Code generation orchestrator.

    Usage:
        >>> settings = load_settings("shapeforge.yaml")
        >>> result = CodegenPipeline(settings).run(load_model("weather.json"))
        >>> result.write("out/weather")
    """

    def __init__(
        self,
        settings: CodegenSettings,
        decorators: Optional[Sequence[CodegenDecorator]] = None,
        registry: Optional[DecoratorRegistry] = None,
    ):
        self.settings = settings
        self._explicit = list(decorators) if decorators is not None else None
        self._registry = registry

    def _assemble_decorators(self) -> CombinedCodegenDecorator:
        if self._explicit is not None:
            return CombinedCodegenDecorator(self._explicit)
        manifest = self.settings.decorators
        registry = self._registry or build_registry(manifest.scan_packages)
        classes = registry.select(manifest)
        return CombinedCodegenDecorator(DecoratorRegistry.instantiate(classes))

    def run(self, model: ShapeGraph) -> GenerationResult:
        """
        Generate the crate of the configured service.

        Raises:
            ModelError: If the service is missing or declares no supported protocol
            GenerationError: If any error diagnostic was reported
            CompositionError: If a decorator contribution fails
        """
        context = self.prepare(model)
        root = context.root_decorator
        settings = self.settings
        service_id = context.service_id

        # Step 6: Sections
        root.register_sections(context)
        context.sections.freeze()

        plan = ServicePlan.from_context(context)
        context.reporter.raise_if_errors()

        # Step 7: Render
        crate = RustCrate(settings.module_name, settings.module_version, context.runtime_config)
        for suffix in RUNTIME_CRATES:
            crate.add_runtime_dependency(suffix)
        for name, requirement in BASE_DEPENDENCIES.items():
            crate.add_dependency(name, requirement)

        crate.with_module(SERVICE_MODULE, ServerServiceGenerator(context, plan).render())
        OperationGenerator(context, plan).write(crate)
        EnvelopeGenerator(context, plan).write(crate)
        ServiceConfigGenerator(context).write(crate)
        root.extras(context, crate)
        LibRsGenerator(context, plan).write(crate)
        files = crate.render()

        context.reporter.raise_if_errors()
        for warning in context.reporter.warnings:
            logger.warning(f"{PIPELINE} {warning}")
        logger.info(f"{PIPELINE} Generated {len(files)} file(s) for {service_id}")
        return GenerationResult(
            files=files,
            plan=plan,
            context=context,
            diagnostics=list(context.reporter.warnings),
        )

    def prepare(self, model: ShapeGraph) -> CodegenContext:
        """
        Run everything before section registration: decorators, model
        transforms, resolver chain, symbol table and protocol.

        Naming collisions are reported, not raised, so tooling can show them.
        """
        settings = self.settings
        service_id = ShapeId.parse(settings.service)
        service = model.expect_shape(service_id)
        if service.kind != ShapeKind.SERVICE:
            raise ModelError(f"Expected a service shape, got {service.kind.value}", service_id)

        logger.info(f"{PIPELINE} Generating {service_id} as crate '{settings.module_name}'")
        rc = settings.runtime.to_runtime_config()

        # Step 1: Decorators
        root = self._assemble_decorators()
        logger.info(f"{PIPELINE} Decorators: {root.names()}")

        # Step 2: Model transforms
        model = root.transform_model(service, model)
        if settings.codegen.normalize_operations:
            model = OperationNormalizer(service_id).transform(model)
        service = model.expect_shape(service_id)

        # Step 3: Resolver chain
        stages = stages_for(settings.codegen.python_server, root.symbol_stages(settings))
        provider = build_symbol_provider(
            model, service, SymbolVisitorConfig(runtime_config=rc), stages
        )
        context = CodegenContext(
            model=model,
            service=service,
            settings=settings,
            symbol_provider=provider,
            reporter=DiagnosticReporter(),
            root_decorator=root,
        )

        # Step 4: Symbol table
        context.symbol_table = SymbolTable.build(model, service, provider, context.reporter)

        # Step 5: Protocol
        protocols = root.protocols(service_id, default_protocols())
        context.protocol = protocols.resolve(service, rc, settings.protocol)
        logger.info(f"{PIPELINE} Protocol: {context.protocol!r}")
        return context


__all__ = ["CodegenPipeline", "GenerationResult"]
