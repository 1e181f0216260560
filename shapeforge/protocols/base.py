# shapeforge/protocols/base.py
"""
Server protocol base - the protocol collaborator invoked by the pipeline.

A protocol knows three things the generator needs:
- the request-matching specification of each operation
- the marker and router types the generated service uses
- how to parse the generic part of an error response

Serialization itself is out of scope. Each protocol both renders its
generic-error parser as a fragment and implements the same logic in Python
(``parse_generic_error``) so that overrides can be exercised directly.
"""

from __future__ import annotations

from typing import Callable, ClassVar, Dict

from shapeforge.model.shapes import Shape
from shapeforge.runtime.errors import ErrorMetadataBuilder
from shapeforge.runtime.http import Response
from shapeforge.runtime.routing import RequestSpec, SegmentKind
from shapeforge.sections.writable import Writable, writable
from shapeforge.symbols.naming import to_snake_case
from shapeforge.symbols.symbol import RuntimeConfig, RuntimeType, RuntimeTypes


class ServerProtocol:
    """
    Base class for protocols.

    Subclasses set ``name``, ``trait_id`` and ``module`` (the runtime module
    of their marker struct) and implement ``request_spec`` and
    ``parse_generic_error``.
    """

    name: ClassVar[str] = ""
    trait_id: ClassVar[str] = ""
    module: ClassVar[str] = ""
    marker_name: ClassVar[str] = ""

    def __init__(self, runtime_config: RuntimeConfig):
        self.runtime_config = runtime_config
        self.http_server = RuntimeTypes.http_server(runtime_config)

    # -------------------------------------------------------------------------
    # Types
    # -------------------------------------------------------------------------

    def marker_struct(self) -> RuntimeType:
        return self.http_server.resolve(f"proto::{self.module}::{self.marker_name}")

    def router_type(self) -> RuntimeType:
        return self.http_server.resolve("proto::rest::router::RestRouter")

    def request_spec_type(self) -> RuntimeType:
        return self.http_server.resolve("routing::request_spec::RequestSpec")

    def error_module(self) -> str:
        """Inline module holding the generic error parser."""
        return f"crate::protocol_serde::{self.module}_errors"

    def error_scope(self) -> Dict[str, object]:
        return {
            "Bytes": "bytes::Bytes",
            "Response": "http::Response",
            "ErrorBuilder": RuntimeTypes.generic_error_builder(self.runtime_config),
            "Error": RuntimeTypes.generic_error(self.runtime_config),
            "DecodeError": self.decode_error_type(),
            "base_errors": self.error_module(),
        }

    def decode_error_type(self) -> RuntimeType:
        return RuntimeTypes.smithy_json(self.runtime_config).resolve("deserialize::error::DeserializeError")

    # -------------------------------------------------------------------------
    # Request matching
    # -------------------------------------------------------------------------

    def request_spec(self, operation: Shape, service: Shape) -> RequestSpec:
        raise NotImplementedError

    def render_request_spec(self, spec: RequestSpec) -> Writable:
        """Rust expression constructing ``spec``."""
        segments = []
        for s in spec.path:
            if s.kind == SegmentKind.LITERAL:
                segments.append(f'#{{Spec}}::PathSegment::Literal(String::from("{s.value}"))')
            elif s.kind == SegmentKind.LABEL:
                segments.append("#{Spec}::PathSegment::Label")
            else:
                segments.append("#{Spec}::PathSegment::Greedy")
        query = []
        for q in spec.query:
            if q.value is None:
                query.append(f'#{{Spec}}::QuerySegment::Key(String::from("{q.key}"))')
            else:
                query.append(
                    f'#{{Spec}}::QuerySegment::KeyValue(String::from("{q.key}"), String::from("{q.value}"))'
                )
        return writable(
            f"""
            #{{Spec}}::RequestSpec::new(
                http::Method::{spec.method},
                #{{Spec}}::UriSpec::new(
                    #{{Spec}}::PathAndQuerySpec::new(
                        #{{Spec}}::PathSpec::from_vector_unchecked(vec![{", ".join(segments)}]),
                        #{{Spec}}::QuerySpec::from_vector_unchecked(vec![{", ".join(query)}]),
                    )
                ),
            )
            """,
            Spec=self.http_server.resolve("routing::request_spec"),
        )

    # -------------------------------------------------------------------------
    # Generic error parsing
    # -------------------------------------------------------------------------

    def parse_generic_error(self, response: Response) -> ErrorMetadataBuilder:
        raise NotImplementedError

    def render_parse_http_generic_error(self, operation: Shape) -> Writable:
        """The ``parse_http_generic_error`` function used by ``operation``'s error parser."""
        return writable(
            """
            pub fn parse_http_generic_error(response: &#{Response}<#{Bytes}>) -> Result<#{ErrorBuilder}, #{DecodeError}> {
                #{base_errors}::parse_generic_error(response.body().as_ref())
            }
            """,
            **self.error_scope(),
        )

    def operation_error_fn_name(self, operation: Shape) -> str:
        return f"parse_{to_snake_case(operation.id.name)}_http_error"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


ProtocolFactory = Callable[[RuntimeConfig], ServerProtocol]


__all__ = ["ServerProtocol", "ProtocolFactory"]
