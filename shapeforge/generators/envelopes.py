# shapeforge/generators/envelopes.py
"""
Envelope generator - the operation input and output structures.

Every operation gets one struct in ``input`` and one in ``output``, named as
in the ServicePlan. Field types come from the resolved member symbols and the
``#[derive(...)]`` attribute from the structure's symbol metadata, so an
envelope with a streaming member does not derive ``PartialEq``.

An operation without an input (or output) shape gets an empty struct with
the default record derives.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import GENERATOR
from shapeforge.model.shapes import Shape, ShapeId
from shapeforge.sections.writable import CodeWriter, Writable, writable
from shapeforge.symbols.metadata import RECORD_DERIVES, metadata_for
from shapeforge.symbols.naming import member_name
from shapeforge.symbols.symbol import SymbolMetadata

from .service import ServicePlan, documentation_lines

if TYPE_CHECKING:
    from shapeforge.core.context import CodegenContext
    from shapeforge.generators.crate import RustCrate

logger = get_logger(__name__)

INPUT_MODULE = "input"
OUTPUT_MODULE = "output"


class EnvelopeGenerator:
    def __init__(self, context: "CodegenContext", plan: ServicePlan):
        self.context = context
        self.plan = plan

    def _shape(self, shape_id: Optional[ShapeId]) -> Optional[Shape]:
        if shape_id is None:
            return None
        return self.context.model.expect_shape(shape_id)

    def structure(self, name: str, shape: Optional[Shape]) -> Writable:
        provider = self.context.symbol_provider
        if shape is None:
            metadata = SymbolMetadata().with_derives(*RECORD_DERIVES)
            members = []
        else:
            metadata = metadata_for(provider, shape)
            members = list(shape.iter_members())

        def fields(w: CodeWriter) -> None:
            for member in members:
                w.write("#[allow(missing_docs)]")
                w.write(
                    "pub #{Field}: #{Type},",
                    Field=member_name(member.member_name),
                    Type=provider.resolve(member).rendered,
                )

        return writable(
            """
            #{Docs}
            #[non_exhaustive]
            #{Derives}
            pub struct #{Name} {
                #{Fields}
            }
            """,
            Docs=documentation_lines(shape) if shape is not None else writable(),
            Derives=metadata.derives_attribute(),
            Name=name,
            Fields=fields,
        )

    def write(self, crate: "RustCrate") -> None:
        model = self.context.model
        for op in self.plan.operations:
            operation = model.expect_shape(op.shape_id)
            crate.with_module(INPUT_MODULE, self.structure(op.input_name, self._shape(operation.input)))
            crate.with_module(OUTPUT_MODULE, self.structure(op.output_name, self._shape(operation.output)))

        logger.debug(
            f"{GENERATOR} Wrote {len(self.plan.operations)} input/output pair(s) for {self.plan.service_name}"
        )


__all__ = ["EnvelopeGenerator", "INPUT_MODULE", "OUTPUT_MODULE"]
