# shapeforge/generators/service.py
"""
Service Generator - builder, router and service struct of one service.

Two layers:
- ServicePlan: the pure, ordered description of what gets generated
  (operations sorted by shape id, builder field names, setter names,
  request specs). Tooling and the reference runtime read the plan directly.
- ServerServiceGenerator: renders the plan into Writables.

Every user-facing listing (builder fields, setters, missing-operation
checks, router entries, request-spec functions) follows the plan's
operation order, so output is byte-for-byte reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import GENERATOR
from shapeforge.model.shapes import Shape, ShapeId, ShapeKind
from shapeforge.model.traits import DocumentationTrait, EnumTrait, PatternTrait
from shapeforge.runtime.routing import RequestSpec
from shapeforge.runtime.service import OperationBinding
from shapeforge.sections.section import BuilderBuildPrelude, ServiceImplExtras
from shapeforge.sections.writable import CodeWriter, Writable, join, writable
from shapeforge.symbols.naming import escape_if_needed, to_pascal_case, to_snake_case
from shapeforge.symbols.provider import ERRORS_MODULE, MODEL_MODULE
from shapeforge.symbols.symbol import RuntimeTypes, crate_root

if TYPE_CHECKING:
    from shapeforge.core.context import CodegenContext

logger = get_logger(__name__)

REQUEST_SPECS_MODULE = "request_specs"
BUILDER_BODY_GENERIC = "Body"
BUILDER_PLUGIN_GENERIC = "Plugin"

# Members of the generated builder that operation slots must not shadow.
BUILDER_MEMBERS = ("plugin", "build", "build_unchecked")

UNEXPECTED_ERROR_MSG = (
    "this should never panic since we are supposed to check beforehand that a handler "
    "has been registered for this operation; please file a bug report"
)


# =============================================================================
# Plan
# =============================================================================


@dataclass(frozen=True)
class OperationPlan:
    """
    One operation as laid out in the generated builder.

    Attributes:
        shape_id: Operation shape id
        struct_name: Name of the operation's zero-sized struct
        field_name: Builder slot and setter name (reserved words escaped)
        spec_fn_name: Name of the request-spec function
        spec: Request-matching specification under the service's protocol
        input_name: Generated input type name
        output_name: Generated output type name
        error_name: Generated operation error name (None without errors)
    """

    shape_id: ShapeId
    struct_name: str
    field_name: str
    spec_fn_name: str
    spec: RequestSpec
    input_name: str
    output_name: str
    error_name: Optional[str] = None

    @property
    def absolute_name(self) -> str:
        return str(self.shape_id)

    @property
    def setter_name(self) -> str:
        return f".{self.field_name}()"

    @property
    def operation_setter_name(self) -> str:
        return f"{self.field_name}_operation"

    @property
    def has_errors(self) -> bool:
        return self.error_name is not None

    def binding(self) -> OperationBinding:
        return OperationBinding(name=self.absolute_name, field_name=self.field_name, spec=self.spec)


@dataclass(frozen=True)
class ServicePlan:
    """Ordered description of one service's generated builder and router."""

    service_id: ShapeId
    service_name: str
    builder_name: str
    crate_name: str
    operations: Tuple[OperationPlan, ...]

    @classmethod
    def from_context(cls, context: "CodegenContext") -> "ServicePlan":
        """
        Compute the plan. Builder field collisions are reported to the run's
        reporter with both operations named.
        """
        model = context.model
        provider = context.symbol_provider
        protocol = context.expect_protocol()
        service_name = context.service_name
        builder_name = f"{service_name}Builder"

        entries: List[OperationPlan] = []
        for operation in model.contained_operations(context.service):
            symbol = provider.resolve(operation)
            struct_name = to_pascal_case(symbol.name)
            field_name = escape_if_needed(to_snake_case(symbol.name))
            input_shape = model.expect_shape(operation.input) if operation.input else None
            output_shape = model.expect_shape(operation.output) if operation.output else None
            entries.append(
                OperationPlan(
                    shape_id=operation.id,
                    struct_name=struct_name,
                    field_name=field_name,
                    spec_fn_name=field_name,
                    spec=protocol.request_spec(operation, context.service),
                    input_name=provider.resolve(input_shape).name if input_shape else f"{struct_name}Input",
                    output_name=provider.resolve(output_shape).name if output_shape else f"{struct_name}Output",
                    error_name=f"{struct_name}Error" if operation.errors else None,
                )
            )

        plan = cls(
            service_id=context.service_id,
            service_name=service_name,
            builder_name=builder_name,
            crate_name=context.module_use_name,
            operations=tuple(entries),
        )
        plan._claim_names(context)
        logger.debug(
            f"{GENERATOR} Planned {builder_name} with fields {plan.field_names()}"
        )
        return plan

    def _claim_names(self, context: "CodegenContext") -> None:
        table = context.expect_symbol_table()
        builder_origin = f"{self.builder_name} (generated builder)"
        for member in BUILDER_MEMBERS:
            table.claim(f"{self.builder_name}.{member}", builder_origin)
        for op in self.operations:
            table.claim(f"{self.builder_name}.{op.field_name}", op.absolute_name)
            table.claim(f"{self.builder_name}.{op.operation_setter_name}", op.absolute_name)
            if op.error_name is not None:
                table.claim(f"{ERRORS_MODULE}::{op.error_name}", f"{op.absolute_name} (operation error)")

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def field_names(self) -> List[str]:
        return [op.field_name for op in self.operations]

    def operation(self, shape_id: ShapeId) -> OperationPlan:
        for op in self.operations:
            if op.shape_id == shape_id:
                return op
        raise KeyError(str(shape_id))

    def bindings(self) -> List[OperationBinding]:
        """Bindings for the reference runtime's ServiceBuilder, in plan order."""
        return [op.binding() for op in self.operations]

    def missing_operations(self, registered: Sequence[str]) -> Dict[str, str]:
        """Operation name → setter name for every field not in ``registered``."""
        done = set(registered)
        return {op.absolute_name: op.setter_name for op in self.operations if op.field_name not in done}

    def has_errors(self) -> bool:
        return any(op.has_errors for op in self.operations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service": str(self.service_id),
            "service_name": self.service_name,
            "builder": self.builder_name,
            "operations": [
                {
                    "name": op.absolute_name,
                    "field": op.field_name,
                    "setter": op.setter_name,
                    "request_spec": str(op.spec),
                }
                for op in self.operations
            ],
        }


# =============================================================================
# Doc helpers
# =============================================================================


def handler_imports(crate_name: str, plan: ServicePlan, comment_token: str = "///") -> Writable:
    """
    ``use <crate>::{input, output[, error]};`` for handler examples.

    Writes nothing for a service without operations.
    """
    if not plan.operations:
        return writable()
    error_import = ", error" if plan.has_errors() else ""
    return writable(f"{comment_token} use {crate_name}::{{input, output{error_import}}};")


def doc_handler(op: OperationPlan, handler_name: str = "handler", comment_token: str = "///") -> Writable:
    """An async handler stub for ``op``, as doc comment lines."""
    if op.error_name is not None:
        output = f"Result<output::{op.output_name}, error::{op.error_name}>"
    else:
        output = f"output::{op.output_name}"
    return writable(
        f"""
        {comment_token} async fn {handler_name}(input: input::{op.input_name}) -> {output} {{
        {comment_token}     todo!()
        {comment_token} }}
        """
    )


def documentation_lines(shape: Shape) -> Writable:
    doc = shape.get_trait(DocumentationTrait)
    if doc is None or not doc.text.strip():
        return writable()
    # Bound as a value: documentation text is never parsed as a template.
    lines = [f"/// {line}".rstrip() for line in doc.text.strip().splitlines()]
    return writable("#{Docs}", Docs="\n".join(lines))


# =============================================================================
# Generator
# =============================================================================


class ServerServiceGenerator:
    """
    Renders the builder, MissingOperationsError, request specs and service
    struct of one service.

    Examples:
        >>> plan = ServicePlan.from_context(context)
        >>> text = render_to_string(ServerServiceGenerator(context, plan).render())
    """

    def __init__(self, context: "CodegenContext", plan: ServicePlan):
        self.context = context
        self.plan = plan
        rc = context.runtime_config
        protocol = context.expect_protocol()
        self.scope: Dict[str, Any] = {
            "Bytes": "bytes::Bytes",
            "Http": "http",
            "HttpBody": "http_body",
            "Tower": "tower",
            "SmithyHttp": crate_root(rc, "http"),
            "SmithyHttpServer": RuntimeTypes.http_server(rc),
            "Protocol": protocol.marker_struct(),
            "Router": protocol.router_type(),
            "SpecType": protocol.request_spec_type(),
            "Service": plan.service_name,
            "Builder": plan.builder_name,
            "CrateName": plan.crate_name,
            "BodyT": BUILDER_BODY_GENERIC,
            "PluginT": BUILDER_PLUGIN_GENERIC,
        }

    # -------------------------------------------------------------------------
    # Builder
    # -------------------------------------------------------------------------

    def builder_fields(self) -> Writable:
        def write(w: CodeWriter) -> None:
            for op in self.plan.operations:
                w.write(
                    "#{field}: Option<#{SmithyHttpServer}::routing::Route<#{BodyT}>>,",
                    field=op.field_name,
                    **self.scope,
                )
            w.write("plugin: #{PluginT},", **self.scope)

        return write

    def builder_setters(self) -> Writable:
        def write(w: CodeWriter) -> None:
            for index, op in enumerate(self.plan.operations):
                if index:
                    w.write("")
                w.write(
                    """
                    /// Sets the [`#{Struct}`](crate::operation_shape::#{Struct}) operation.
                    ///
                    /// This should be an async function satisfying the [`Handler`](#{SmithyHttpServer}::operation::Handler) trait.
                    /// See the [operation module documentation](#{SmithyHttpServer}::operation) for more information.
                    ///
                    /// ## Example
                    ///
                    /// ```no_run
                    /// use #{CrateName}::#{Service};
                    ///
                    #{HandlerImports}
                    ///
                    #{Handler}
                    ///
                    /// let app = #{Service}::builder_without_plugins()
                    ///     .#{field}(handler)
                    ///     /* Set other handlers */
                    ///     .build()
                    ///     .unwrap();
                    /// ## let app: #{Service}<#{SmithyHttpServer}::routing::Route<#{SmithyHttp}::body::SdkBody>> = app;
                    /// ```
                    ///
                    pub fn #{field}<HandlerType, Extensions>(self, handler: HandlerType) -> Self
                    where
                        HandlerType: #{SmithyHttpServer}::operation::Handler<crate::operation_shape::#{Struct}, Extensions>,
                        #{SmithyHttpServer}::operation::Operation<#{SmithyHttpServer}::operation::IntoService<crate::operation_shape::#{Struct}, HandlerType>>:
                            #{SmithyHttpServer}::operation::Upgradable<
                                #{Protocol},
                                crate::operation_shape::#{Struct},
                                Extensions,
                                #{BodyT},
                                #{PluginT},
                            >
                    {
                        use #{SmithyHttpServer}::operation::OperationShapeExt;
                        self.#{field}_operation(crate::operation_shape::#{Struct}::from_handler(handler))
                    }

                    /// Sets the [`#{Struct}`](crate::operation_shape::#{Struct}) operation.
                    ///
                    /// This should be an [`Operation`](#{SmithyHttpServer}::operation::Operation) created from
                    /// [`#{Struct}`](crate::operation_shape::#{Struct}) using either
                    /// [`OperationShape::from_handler`](#{SmithyHttpServer}::operation::OperationShapeExt::from_handler) or
                    /// [`OperationShape::from_service`](#{SmithyHttpServer}::operation::OperationShapeExt::from_service).
                    pub fn #{field}_operation<Operation, Extensions>(mut self, operation: Operation) -> Self
                    where
                        Operation: #{SmithyHttpServer}::operation::Upgradable<
                            #{Protocol},
                            crate::operation_shape::#{Struct},
                            Extensions,
                            #{BodyT},
                            #{PluginT},
                        >
                    {
                        self.#{field} = Some(operation.upgrade(&self.plugin));
                        self
                    }
                    """,
                    Struct=op.struct_name,
                    field=op.field_name,
                    HandlerImports=handler_imports(self.plan.crate_name, self.plan),
                    Handler=doc_handler(op),
                    **self.scope,
                )

        return write

    def pattern_initializations(self) -> Writable:
        """
        ``<Type>::compile_regex();`` for every ``@pattern`` string (not
        ``@enum``) reachable from the service, after a comment line.
        """
        if not self.context.settings.codegen.eager_pattern_regex:
            return writable()

        def is_pattern_string(shape: Shape) -> bool:
            return (
                shape.kind == ShapeKind.STRING
                and shape.has_trait(PatternTrait)
                and not shape.has_trait(EnumTrait)
            )

        patterns = self.context.model.walk_shapes(self.context.service, is_pattern_string)
        if not patterns:
            return writable()

        lines = ["// Eagerly initialize regexes for `@pattern` strings."]
        lines.extend(
            f"{MODEL_MODULE}::{to_pascal_case(shape.id.name)}::compile_regex();" for shape in patterns
        )
        return writable("\n".join(lines))

    def build_method(self) -> Writable:
        checks = []
        routes = []
        for op in self.plan.operations:
            checks.append(
                f"if self.{op.field_name}.is_none() {{\n"
                f'    missing_operation_names.push((crate::operation_shape::{op.struct_name}::NAME, "{op.setter_name}"));\n'
                f"}}"
            )
            routes.append(
                f"({REQUEST_SPECS_MODULE}::{op.spec_fn_name}(), self.{op.field_name}.expect(unexpected_error_msg)),"
            )

        prelude = self.context.sections.render_joined(BuilderBuildPrelude(self.plan.service_name))
        return writable(
            """
            /// Constructs a [`#{Service}`] from the arguments provided to the builder.
            ///
            /// Forgetting to register a handler for one or more operations will result in an error.
            ///
            /// Check out [`#{Builder}::build_unchecked`] if you'd prefer the service to return status code 500 when an
            /// unspecified route requested.
            pub fn build(self) -> Result<#{Service}<#{SmithyHttpServer}::routing::Route<#{BodyT}>>, MissingOperationsError>
            {
                #{Prelude}
                let router = {
                    use #{SmithyHttpServer}::operation::OperationShape;
                    let mut missing_operation_names = std::vec::Vec::new();
                    #{NullabilityChecks}
                    if !missing_operation_names.is_empty() {
                        return Err(MissingOperationsError {
                            operation_names2setter_methods: missing_operation_names,
                        });
                    }
                    let unexpected_error_msg = "#{UnexpectedErrorMsg}";

                    #{PatternInitializations}

                    #{Router}::from_iter([
                        #{RoutesArrayElements}
                    ])
                };
                Ok(#{Service} {
                    router: #{SmithyHttpServer}::routing::RoutingService::new(router),
                })
            }
            """,
            Prelude=prelude,
            NullabilityChecks="\n".join(checks),
            RoutesArrayElements="\n".join(routes),
            PatternInitializations=self.pattern_initializations(),
            UnexpectedErrorMsg=UNEXPECTED_ERROR_MSG,
            **self.scope,
        )

    def build_unchecked_method(self) -> Writable:
        def pairs(w: CodeWriter) -> None:
            for op in self.plan.operations:
                w.write(
                    """
                    (
                        #{specs}::#{spec_fn}(),
                        self.#{field}.unwrap_or_else(|| {
                            #{SmithyHttpServer}::routing::Route::new(<#{SmithyHttpServer}::operation::FailOnMissingOperation as #{SmithyHttpServer}::operation::Upgradable<
                                #{Protocol},
                                crate::operation_shape::#{Struct},
                                (),
                                _,
                                _,
                            >>::upgrade(#{SmithyHttpServer}::operation::FailOnMissingOperation, &self.plugin))
                        })
                    ),
                    """,
                    specs=REQUEST_SPECS_MODULE,
                    spec_fn=op.spec_fn_name,
                    field=op.field_name,
                    Struct=op.struct_name,
                    **self.scope,
                )

        return writable(
            """
            /// Constructs a [`#{Service}`] from the arguments provided to the builder.
            /// Operations without a handler default to returning 500 Internal Server Error to the caller.
            ///
            /// Check out [`#{Builder}::build`] if you'd prefer the builder to fail if one or more operations do
            /// not have a registered handler.
            pub fn build_unchecked(self) -> #{Service}<#{SmithyHttpServer}::routing::Route<#{BodyT}>>
            where
                #{BodyT}: Send + 'static
            {
                let router = #{Router}::from_iter([
                    #{Pairs}
                ]);
                #{Service} {
                    router: #{SmithyHttpServer}::routing::RoutingService::new(router),
                }
            }
            """,
            Pairs=pairs,
            **self.scope,
        )

    def builder(self) -> Writable:
        return writable(
            """
            /// The service builder for [`#{Service}`].
            ///
            /// Constructed via [`#{Service}::builder_with_plugins`] or [`#{Service}::builder_without_plugins`].
            pub struct #{Builder}<#{BodyT}, #{PluginT}> {
                #{Fields}
            }

            impl<#{BodyT}, #{PluginT}> #{Builder}<#{BodyT}, #{PluginT}> {
                #{Setters}
            }

            impl<#{BodyT}, #{PluginT}> #{Builder}<#{BodyT}, #{PluginT}> {
                #{BuildMethod}

                #{BuildUncheckedMethod}
            }
            """,
            Fields=self.builder_fields(),
            Setters=self.builder_setters(),
            BuildMethod=self.build_method(),
            BuildUncheckedMethod=self.build_unchecked_method(),
            **self.scope,
        )

    # -------------------------------------------------------------------------
    # Errors and request specs
    # -------------------------------------------------------------------------

    def missing_operations_error(self) -> Writable:
        return writable(
            r"""
            /// The error encountered when calling the [`#{Builder}::build`] method if one or more operation handlers are not
            /// specified.
            #[derive(Debug)]
            pub struct MissingOperationsError {
                operation_names2setter_methods: std::vec::Vec<(&'static str, &'static str)>,
            }

            impl std::fmt::Display for MissingOperationsError {
                fn fmt(&self, f: &mut std::fmt::Formatter<'_>) -> std::fmt::Result {
                    write!(
                        f,
                        "You must specify a handler for all operations attached to `#{Service}`.\n\
                        We are missing handlers for the following operations:\n",
                    )?;
                    for (operation_name, _) in &self.operation_names2setter_methods {
                        writeln!(f, "- {}", operation_name)?;
                    }

                    writeln!(f, "\nUse the dedicated methods on `#{Builder}` to register the missing handlers:")?;
                    for (_, setter_name) in &self.operation_names2setter_methods {
                        writeln!(f, "- {}", setter_name)?;
                    }
                    Ok(())
                }
            }

            impl std::error::Error for MissingOperationsError {}
            """,
            **self.scope,
        )

    def request_specs_module(self) -> Writable:
        protocol = self.context.expect_protocol()

        def functions(w: CodeWriter) -> None:
            for op in self.plan.operations:
                w.write(
                    """
                    pub(super) fn #{spec_fn}() -> #{SpecType} {
                        #{Spec}
                    }
                    """,
                    spec_fn=op.spec_fn_name,
                    Spec=protocol.render_request_spec(op.spec),
                    **self.scope,
                )

        return writable(
            """
            mod #{specs} {
                #{SpecFunctions}
            }
            """,
            specs=REQUEST_SPECS_MODULE,
            SpecFunctions=functions,
        )

    # -------------------------------------------------------------------------
    # Service struct
    # -------------------------------------------------------------------------

    def not_set_fields(self) -> Writable:
        return writable("\n".join(f"{op.field_name}: None," for op in self.plan.operations))

    def service_struct(self) -> Writable:
        extras = self.context.sections.render_joined(ServiceImplExtras(self.plan.service_name))
        return writable(
            """
            #{Docs}
            ///
            /// See the [root](crate) documentation for more information.
            #[derive(Clone)]
            pub struct #{Service}<S = #{SmithyHttpServer}::routing::Route> {
                router: #{SmithyHttpServer}::routing::RoutingService<#{Router}<S>, #{Protocol}>,
            }

            impl #{Service}<()> {
                /// Constructs a builder for [`#{Service}`].
                /// You must specify what plugins should be applied to the operations in this service.
                ///
                /// Use [`#{Service}::builder_without_plugins`] if you don't need to apply plugins.
                ///
                /// Check out [`PluginPipeline`](#{SmithyHttpServer}::plugin::PluginPipeline) if you need to apply
                /// multiple plugins.
                pub fn builder_with_plugins<Body, Plugin>(plugin: Plugin) -> #{Builder}<Body, Plugin> {
                    #{Builder} {
                        #{NotSetFields}
                        plugin
                    }
                }

                /// Constructs a builder for [`#{Service}`].
                ///
                /// Use [`#{Service}::builder_with_plugins`] if you need to specify plugins.
                pub fn builder_without_plugins<Body>() -> #{Builder}<Body, #{SmithyHttpServer}::plugin::IdentityPlugin> {
                    Self::builder_with_plugins(#{SmithyHttpServer}::plugin::IdentityPlugin)
                }
            }

            impl<S> #{Service}<S> {
                /// Converts [`#{Service}`] into a [`MakeService`](tower::make::MakeService).
                pub fn into_make_service(self) -> #{SmithyHttpServer}::routing::IntoMakeService<Self> {
                    #{SmithyHttpServer}::routing::IntoMakeService::new(self)
                }

                /// Converts [`#{Service}`] into a [`MakeService`](tower::make::MakeService) with [`ConnectInfo`](#{SmithyHttpServer}::request::connect_info::ConnectInfo).
                pub fn into_make_service_with_connect_info<C>(self) -> #{SmithyHttpServer}::routing::IntoMakeServiceWithConnectInfo<Self, C> {
                    #{SmithyHttpServer}::routing::IntoMakeServiceWithConnectInfo::new(self)
                }

                /// Applies a [`Layer`](#{Tower}::Layer) uniformly to all routes.
                pub fn layer<L>(self, layer: &L) -> #{Service}<L::Service>
                where
                    L: #{Tower}::Layer<S>
                {
                    #{Service} {
                        router: self.router.map(|s| s.layer(layer))
                    }
                }

                /// Applies [`Route::new`](#{SmithyHttpServer}::routing::Route::new) to all routes.
                ///
                /// This has the effect of erasing all types accumulated via [`layer`](#{Service}::layer).
                pub fn boxed<B>(self) -> #{Service}<#{SmithyHttpServer}::routing::Route<B>>
                where
                    S: #{Tower}::Service<
                        #{Http}::Request<B>,
                        Response = #{Http}::Response<#{SmithyHttpServer}::body::BoxBody>,
                        Error = std::convert::Infallible>,
                    S: Clone + Send + 'static,
                    S::Future: Send + 'static,
                {
                    self.layer(&#{Tower}::layer::layer_fn(#{SmithyHttpServer}::routing::Route::new))
                }

                #{Extras}
            }

            impl<B, RespB, S> #{Tower}::Service<#{Http}::Request<B>> for #{Service}<S>
            where
                S: #{Tower}::Service<#{Http}::Request<B>, Response = #{Http}::Response<RespB>> + Clone,
                RespB: #{HttpBody}::Body<Data = #{Bytes}> + Send + 'static,
                RespB::Error: Into<Box<dyn std::error::Error + Send + Sync>>
            {
                type Response = #{Http}::Response<#{SmithyHttpServer}::body::BoxBody>;
                type Error = S::Error;
                type Future = #{SmithyHttpServer}::routing::RoutingFuture<S, B>;

                fn poll_ready(&mut self, cx: &mut std::task::Context) -> std::task::Poll<Result<(), Self::Error>> {
                    self.router.poll_ready(cx)
                }

                fn call(&mut self, request: #{Http}::Request<B>) -> Self::Future {
                    self.router.call(request)
                }
            }
            """,
            Docs=documentation_lines(self.context.service),
            NotSetFields=self.not_set_fields(),
            Extras=extras,
            **self.scope,
        )

    def render(self) -> Writable:
        logger.debug(
            f"{GENERATOR} Rendering {self.plan.service_name} with "
            f"{len(self.plan.operations)} operation(s)"
        )
        return join(
            [
                self.builder(),
                self.missing_operations_error(),
                self.request_specs_module(),
                self.service_struct(),
            ],
            separator="",
        )


__all__ = [
    "OperationPlan",
    "ServicePlan",
    "ServerServiceGenerator",
    "handler_imports",
    "doc_handler",
    "documentation_lines",
    "REQUEST_SPECS_MODULE",
    "BUILDER_MEMBERS",
]
