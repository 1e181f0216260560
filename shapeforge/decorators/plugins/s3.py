# shapeforge/decorators/plugins/s3.py
"""
S3 customizations.

Everything here is conditioned on the service id: for
``com.amazonaws.s3#AmazonS3`` the decorator

- overrides restXml with S3ProtocolOverride (HEAD responses have no body,
  so an empty error body is not a decode failure; a 404 becomes NotFound)
- allows an invalid XML root on GetObjectAttributesOutput
- strips the ``{Bucket}`` label from every HTTP path
- adds the extended request id to every parsed generic error
- re-exports ``ErrorExt`` from the crate root

Every other service is left exactly as it was.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, ClassVar, FrozenSet, List, Mapping, Optional

from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import DECORATORS
from shapeforge.model.graph import ShapeGraph
from shapeforge.model.shapes import Shape, ShapeId, ShapeKind
from shapeforge.model.traits import AllowInvalidXmlRootTrait, HttpTrait, RestXmlTrait
from shapeforge.model.transform import ModelTransformer
from shapeforge.protocols.map import ProtocolMap
from shapeforge.protocols.rest import RestXmlProtocol
from shapeforge.runtime.errors import ErrorMetadata, ErrorMetadataBuilder
from shapeforge.runtime.http import Response
from shapeforge.sections.customization import LibRsCustomization, OperationCustomization
from shapeforge.sections.section import (
    EMPTY_SECTION,
    LibRsBody,
    LibRsSection,
    OperationSection,
    PopulateGenericErrorExtras,
)
from shapeforge.sections.writable import Writable, writable
from shapeforge.symbols.symbol import RuntimeType, RuntimeTypes

from ..base import ServiceScopedDecorator

if TYPE_CHECKING:
    from shapeforge.core.context import CodegenContext
    from shapeforge.generators.crate import RustCrate

logger = get_logger(__name__)

S3_SERVICE_ID = "com.amazonaws.s3#AmazonS3"
EXTENDED_REQUEST_ID = "s3_extended_request_id"
EXTENDED_REQUEST_ID_HEADER = "x-amz-id-2"

# Inline module of the generated crate holding the S3 error helpers.
S3_ERRORS = RuntimeType(name="s3_errors", namespace="crate")


def apply_extended_error(builder: ErrorMetadataBuilder, headers: Mapping[str, str]) -> ErrorMetadataBuilder:
    """Copy the ``x-amz-id-2`` header into the error's extras."""
    for key, value in headers.items():
        if key.lower() == EXTENDED_REQUEST_ID_HEADER:
            return builder.custom(EXTENDED_REQUEST_ID, value)
    return builder


def extended_request_id(error: ErrorMetadata) -> Optional[str]:
    return error.extras.get(EXTENDED_REQUEST_ID)


# =============================================================================
# Protocol Override
# =============================================================================


class S3ProtocolOverride(RestXmlProtocol):
    """restXml, except that an empty error body yields an (optionally NotFound) builder."""

    def parse_generic_error(self, response: Response) -> ErrorMetadataBuilder:
        if not response.body:
            builder = ErrorMetadata.builder()
            if response.status == 404:
                builder = builder.code("NotFound")
            return builder
        return super().parse_generic_error(response)

    def render_parse_http_generic_error(self, operation: Shape) -> Writable:
        scope = self.error_scope()
        scope["XmlDecodeError"] = self.decode_error_type()
        return writable(
            """
            pub fn parse_http_generic_error(response: &#{Response}<#{Bytes}>) -> Result<#{ErrorBuilder}, #{XmlDecodeError}> {
                // S3 HEAD responses have no response body to for an error code. Therefore,
                // check the HTTP response status and populate an error code for 404s.
                if response.body().is_empty() {
                    let mut builder = #{Error}::builder();
                    if response.status().as_u16() == 404 {
                        builder = builder.code("NotFound");
                    }
                    Ok(builder)
                } else {
                    #{base_errors}::parse_generic_error(response.body().as_ref())
                }
            }
            """,
            **scope,
        )


# =============================================================================
# Model Transforms
# =============================================================================


class StripBucketFromHttpPath:
    """Removes the ``{Bucket}`` label from the URI of every ``@http`` operation."""

    @staticmethod
    def strip(uri: str) -> str:
        """
        Examples:
            >>> StripBucketFromHttpPath.strip("/{Bucket}/{Key+}")
            '/{Key+}'
            >>> StripBucketFromHttpPath.strip("/{Bucket}?uploads")
            '/?uploads'
        """
        return uri.replace("{Bucket}/", "").replace("{Bucket}", "")

    def transform(self, model: ShapeGraph) -> ShapeGraph:
        def strip_operation(shape: Shape) -> Shape:
            http = shape.get_trait(HttpTrait)
            if shape.kind != ShapeKind.OPERATION or http is None:
                return shape
            uri = self.strip(http.uri)
            if uri == http.uri:
                return shape
            return shape.with_trait(replace(http, uri=uri))

        return ModelTransformer.map_shapes(model, strip_operation)


# =============================================================================
# Customizations
# =============================================================================


class S3ParseExtendedRequestId(OperationCustomization):
    """Adds the S3 extended request id to a generic error's extras."""

    def section(self, section: OperationSection) -> Writable:
        if isinstance(section, PopulateGenericErrorExtras):
            return writable(
                f"{section.builder_name} = #{{S3Errors}}::apply_extended_error("
                f"{section.builder_name}, {section.response_name}.headers());",
                S3Errors=S3_ERRORS,
            )
        return EMPTY_SECTION


class S3PubUse(LibRsCustomization):
    def section(self, section: LibRsSection) -> Writable:
        if isinstance(section, LibRsBody):
            return writable("pub use #{S3Errors}::ErrorExt;", S3Errors=S3_ERRORS)
        return EMPTY_SECTION


class S3Decorator(ServiceScopedDecorator):
    """Top level decorator for S3."""

    name = "S3"
    order = 0
    service_id = S3_SERVICE_ID

    # GetObjectAttributes responds with GetObjectAttributes_Response_ as its root.
    invalid_xml_root_allow_list: ClassVar[FrozenSet[ShapeId]] = frozenset(
        {ShapeId.parse("com.amazonaws.s3#GetObjectAttributesOutput")}
    )

    def protocols(self, service_id: ShapeId, current: ProtocolMap) -> ProtocolMap:
        if not self.applies(service_id):
            return current
        return current + {RestXmlTrait.trait_id: S3ProtocolOverride}

    def transform_model(self, service: Shape, model: ShapeGraph) -> ShapeGraph:
        if not self.applies(service.id):
            return model

        def allow_invalid_root(shape: Shape) -> Shape:
            if shape.kind != ShapeKind.STRUCTURE or shape.id not in self.invalid_xml_root_allow_list:
                return shape
            logger.info(f"{DECORATORS} Adding AllowInvalidXmlRoot trait to {shape.id}")
            return shape.with_trait(AllowInvalidXmlRootTrait())

        model = ModelTransformer.map_shapes(model, allow_invalid_root)
        return StripBucketFromHttpPath().transform(model)

    def operation_customizations(
        self,
        context: "CodegenContext",
        operation: Shape,
        base: List[OperationCustomization],
    ) -> List[OperationCustomization]:
        if not self.applies(context.service_id):
            return base
        return base + [S3ParseExtendedRequestId()]

    def lib_rs_customizations(
        self, context: "CodegenContext", base: List[LibRsCustomization]
    ) -> List[LibRsCustomization]:
        if not self.applies(context.service_id):
            return base
        return base + [S3PubUse()]

    def extras(self, context: "CodegenContext", crate: "RustCrate") -> None:
        if not self.applies(context.service_id):
            return
        rc = context.runtime_config
        crate.with_module(
            "s3_errors",
            writable(
                f"""
                const EXTENDED_REQUEST_ID: &str = "{EXTENDED_REQUEST_ID}";

                /// S3-specific service error additions.
                pub trait ErrorExt {{
                    /// Returns the S3 Extended Request ID necessary when contacting AWS Support.
                    fn extended_request_id(&self) -> Option<&str>;
                }}

                impl ErrorExt for #{{Error}} {{
                    fn extended_request_id(&self) -> Option<&str> {{
                        self.extra(EXTENDED_REQUEST_ID)
                    }}
                }}

                /// Parses the S3 Extended Request ID out of S3 error response headers.
                pub fn apply_extended_error(
                    error: #{{ErrorBuilder}},
                    headers: &http::HeaderMap<http::HeaderValue>,
                ) -> #{{ErrorBuilder}} {{
                    let mut builder = error;
                    let host_id = headers
                        .get("{EXTENDED_REQUEST_ID_HEADER}")
                        .and_then(|header_value| header_value.to_str().ok());
                    if let Some(host_id) = host_id {{
                        builder = builder.custom(EXTENDED_REQUEST_ID, host_id);
                    }}
                    builder
                }}
                """,
                Error=RuntimeTypes.generic_error(rc),
                ErrorBuilder=RuntimeTypes.generic_error_builder(rc),
            ),
        )


__all__ = [
    "S3Decorator",
    "S3ProtocolOverride",
    "S3ParseExtendedRequestId",
    "S3PubUse",
    "StripBucketFromHttpPath",
    "apply_extended_error",
    "extended_request_id",
    "S3_SERVICE_ID",
]
