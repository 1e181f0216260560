# shapeforge/generators/operations.py
"""
Operation Generator - operation shapes, operation errors and error parsers.

For every operation of the service (in shape id order) this writes:
- ``operation_shape``: a zero-sized struct implementing ``OperationShape``,
  followed by an ``impl`` block when OperationImplBlock has contributions
- ``error``: the operation error enum (only for operations with errors)
- ``protocol_serde``: the operation's HTTP error parser, with the
  PopulateGenericErrorExtras contributions spliced in after the generic
  error has been parsed

``parse_http_generic_error`` is written once per crate by the protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import GENERATOR
from shapeforge.model.shapes import Shape
from shapeforge.sections.section import OperationImplBlock, PopulateGenericErrorExtras
from shapeforge.sections.writable import CodeWriter, Writable, is_empty, writable
from shapeforge.symbols.naming import to_pascal_case
from shapeforge.symbols.symbol import RuntimeTypes

from .service import OperationPlan, ServicePlan, documentation_lines

if TYPE_CHECKING:
    from shapeforge.core.context import CodegenContext
    from shapeforge.generators.crate import RustCrate

logger = get_logger(__name__)

OPERATION_SHAPE_MODULE = "operation_shape"
ERROR_MODULE = "error"
PROTOCOL_SERDE_MODULE = "protocol_serde"

GENERIC_BUILDER = "generic_builder"
RESPONSE = "response"


class OperationGenerator:
    """Writes the per-operation modules of one service."""

    def __init__(self, context: "CodegenContext", plan: ServicePlan):
        self.context = context
        self.plan = plan
        self.protocol = context.expect_protocol()
        rc = context.runtime_config
        self.scope = {
            "SmithyHttpServer": RuntimeTypes.http_server(rc),
            "Error": RuntimeTypes.generic_error(rc),
            "Bytes": "bytes::Bytes",
            "Response": "http::Response",
        }

    def _operations(self) -> List[Shape]:
        return [self.context.model.expect_shape(op.shape_id) for op in self.plan.operations]

    # -------------------------------------------------------------------------
    # operation_shape
    # -------------------------------------------------------------------------

    def operation_shape(self, op: OperationPlan, shape: Shape) -> Writable:
        error_type = f"crate::error::{op.error_name}" if op.has_errors else "std::convert::Infallible"
        impl_block = self.context.sections.render_joined(
            OperationImplBlock(operation_name=op.struct_name, operation=op.shape_id)
        )
        extras: Writable = writable()
        if not is_empty(impl_block):
            extras = writable(
                """

                impl #{Struct} {
                    #{Body}
                }
                """,
                Struct=op.struct_name,
                Body=impl_block,
            )

        return writable(
            """
            #{Docs}
            pub struct #{Struct};

            impl #{SmithyHttpServer}::operation::OperationShape for #{Struct} {
                const NAME: &'static str = "#{Name}";

                type Input = crate::input::#{Input};
                type Output = crate::output::#{Output};
                type Error = #{ErrorType};
            }
            #{Extras}
            """,
            Docs=documentation_lines(shape),
            Struct=op.struct_name,
            Name=op.absolute_name,
            Input=op.input_name,
            Output=op.output_name,
            ErrorType=error_type,
            Extras=extras,
            **self.scope,
        )

    # -------------------------------------------------------------------------
    # error
    # -------------------------------------------------------------------------

    def operation_error(self, op: OperationPlan, shape: Shape) -> Writable:
        variants = [to_pascal_case(error_id.name) for error_id in shape.errors]

        def variant_lines(w: CodeWriter) -> None:
            for variant in variants:
                w.write(f"#[allow(missing_docs)]\n{variant}(crate::error::{variant}),")

        def display_arms(w: CodeWriter) -> None:
            for variant in variants:
                w.write(f"Self::{variant}(inner) => inner.fmt(f),")

        return writable(
            """
            /// Error type for the `#{Struct}` operation.
            #[non_exhaustive]
            #[derive(std::fmt::Debug)]
            pub enum #{ErrorName} {
                #{Variants}
                /// An unexpected error occurred (e.g., invalid JSON returned by the service or an unknown error code).
                Unhandled(#{Error}),
            }

            impl #{ErrorName} {
                /// Creates the `#{ErrorName}::Unhandled` variant from a generic error.
                pub fn generic(err: #{Error}) -> Self {
                    Self::Unhandled(err)
                }

                /// Creates the `#{ErrorName}::Unhandled` variant from any error type.
                pub fn unhandled(err: impl std::fmt::Display) -> Self {
                    Self::Unhandled(#{Error}::builder().message(err.to_string()).build())
                }
            }

            impl std::fmt::Display for #{ErrorName} {
                fn fmt(&self, f: &mut std::fmt::Formatter<'_>) -> std::fmt::Result {
                    match self {
                        #{DisplayArms}
                        Self::Unhandled(inner) => inner.fmt(f),
                    }
                }
            }

            impl std::error::Error for #{ErrorName} {}
            """,
            Struct=op.struct_name,
            ErrorName=op.error_name,
            Variants=variant_lines,
            DisplayArms=display_arms,
            **self.scope,
        )

    # -------------------------------------------------------------------------
    # protocol_serde
    # -------------------------------------------------------------------------

    def error_parser(self, op: OperationPlan, shape: Shape) -> Writable:
        extras = self.context.sections.render_joined(
            PopulateGenericErrorExtras(
                builder_name=GENERIC_BUILDER,
                response_name=RESPONSE,
                operation=op.shape_id,
            )
        )
        error_type = f"crate::error::{op.error_name}" if op.has_errors else self.scope["Error"]
        map_err = f"crate::error::{op.error_name}::unhandled" if op.has_errors else "|e| #{Error}::builder().message(e.to_string()).build()"
        finish = (
            f"Err(crate::error::{op.error_name}::generic({GENERIC_BUILDER}.build()))"
            if op.has_errors
            else f"Err({GENERIC_BUILDER}.build())"
        )
        return writable(
            f"""
            #[allow(clippy::unnecessary_wraps)]
            pub fn {self.protocol.operation_error_fn_name(shape)}(
                {RESPONSE}: &#{{Response}}<#{{Bytes}}>,
            ) -> std::result::Result<crate::output::#{{Output}}, #{{ErrorType}}> {{
                #[allow(unused_mut)]
                let mut {GENERIC_BUILDER} = parse_http_generic_error({RESPONSE}).map_err({map_err})?;
                #{{Extras}}
                {finish}
            }}
            """,
            Output=op.output_name,
            ErrorType=error_type,
            Extras=extras,
            **self.scope,
        )

    # -------------------------------------------------------------------------
    # Crate
    # -------------------------------------------------------------------------

    def write(self, crate: "RustCrate") -> None:
        operations = self._operations()
        for op, shape in zip(self.plan.operations, operations):
            crate.with_module(OPERATION_SHAPE_MODULE, self.operation_shape(op, shape))
            if op.has_errors:
                crate.with_module(ERROR_MODULE, self.operation_error(op, shape))

        if operations:
            crate.with_module(
                PROTOCOL_SERDE_MODULE,
                self.protocol.render_parse_http_generic_error(operations[0]),
            )
            for op, shape in zip(self.plan.operations, operations):
                crate.with_module(PROTOCOL_SERDE_MODULE, self.error_parser(op, shape))

        logger.debug(
            f"{GENERATOR} Wrote {len(operations)} operation shape(s) for {self.plan.service_name}"
        )


__all__ = ["OperationGenerator", "OPERATION_SHAPE_MODULE", "ERROR_MODULE", "PROTOCOL_SERDE_MODULE"]
