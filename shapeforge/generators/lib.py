# shapeforge/generators/lib.py
"""
Crate root generator.

Writes ``src/lib.rs`` last, once every other module is known:
LibRsAttributes contributions, crate docs, one declaration per module of the
crate, the service re-exports, then LibRsBody contributions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from shapeforge.model.traits import DocumentationTrait
from shapeforge.sections.section import LibRsAttributes, LibRsBody
from shapeforge.sections.writable import Writable, writable

from .crate import LIB_RS
from .service import ServicePlan

if TYPE_CHECKING:
    from shapeforge.core.context import CodegenContext
    from shapeforge.generators.crate import RustCrate

SERVICE_MODULE = "service"

# Modules only the crate itself uses.
PRIVATE_MODULES = frozenset({"protocol_serde"})


def module_names(paths: List[str]) -> List[str]:
    """``src/config.rs`` → ``config``; the crate root itself is skipped."""
    names = []
    for path in paths:
        if path == LIB_RS or not path.startswith("src/"):
            continue
        names.append(path[len("src/") : -len(".rs")].replace("/", "::"))
    return names


class LibRsGenerator:
    def __init__(self, context: "CodegenContext", plan: ServicePlan):
        self.context = context
        self.plan = plan

    def crate_docs(self) -> Writable:
        doc = self.context.service.get_trait(DocumentationTrait)
        lines = [f"//! {line}".rstrip() for line in doc.text.strip().splitlines()] if doc else []
        if lines:
            lines.append("//!")
        lines.append(f"//! Server crate for the `{self.plan.service_id}` service.")
        return writable("#{Docs}", Docs="\n".join(lines))

    def module_declarations(self, crate: "RustCrate") -> Writable:
        lines = []
        for name in module_names(crate.modules()):
            visibility = "mod" if name in PRIVATE_MODULES else "pub mod"
            lines.append(f"{visibility} {name};")
        return writable("\n".join(lines))

    def render(self, crate: "RustCrate") -> Writable:
        sections = self.context.sections
        return writable(
            """
            #{Attributes}
            #![allow(clippy::module_inception)]
            #![allow(clippy::derive_partial_eq_without_eq)]
            #{Docs}

            #{Modules}

            pub use crate::#{service_module}::{#{Service}, #{Builder}, MissingOperationsError};

            #{Body}
            """,
            Attributes=sections.render_joined(LibRsAttributes()),
            Docs=self.crate_docs(),
            Modules=self.module_declarations(crate),
            service_module=SERVICE_MODULE,
            Service=self.plan.service_name,
            Builder=self.plan.builder_name,
            Body=sections.render_joined(LibRsBody(module_name=self.context.module_use_name)),
        )

    def write(self, crate: "RustCrate") -> None:
        crate.with_module("lib", self.render(crate))


__all__ = ["LibRsGenerator", "SERVICE_MODULE", "module_names"]
