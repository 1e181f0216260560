# tests/test_s3.py
"""
Tests for the S3 decorator: protocol override, model transforms and the
generated error helpers. Other services must come out untouched.
"""

from __future__ import annotations

import pytest

from shapeforge.decorators.plugins.s3 import (
    S3Decorator,
    S3ParseExtendedRequestId,
    S3ProtocolOverride,
    S3PubUse,
    StripBucketFromHttpPath,
    apply_extended_error,
    extended_request_id,
)
from shapeforge.model.shapes import ShapeId
from shapeforge.model.traits import AllowInvalidXmlRootTrait, HttpTrait
from shapeforge.protocols.map import default_protocols
from shapeforge.protocols.rest import RestXmlProtocol
from shapeforge.runtime.errors import DecodeError, ErrorMetadata
from shapeforge.runtime.http import Response
from shapeforge.sections.section import LibRsAttributes, LibRsBody, OperationImplBlock, PopulateGenericErrorExtras
from shapeforge.sections.writable import render_to_string
from shapeforge.symbols.symbol import RuntimeConfig

S3 = ShapeId.parse("com.amazonaws.s3#AmazonS3")
STORAGE = ShapeId.parse("example.storage#Storage")
ATTRIBUTES_OUTPUT = ShapeId.parse("com.amazonaws.s3#GetObjectAttributesOutput")


def uris(model, namespace):
    return {
        shape.id.name: shape.expect_trait(HttpTrait).uri
        for shape in model
        if shape.id.namespace == namespace and shape.has_trait(HttpTrait)
    }


# =============================================================================
# Model Transforms
# =============================================================================


class TestStripBucketFromHttpPath:
    @pytest.mark.parametrize(
        "uri, expected",
        [
            ("/{Bucket}/{Key+}", "/{Key+}"),
            ("/{Bucket}?uploads", "/?uploads"),
            ("/{Bucket}/{Key+}?attributes", "/{Key+}?attributes"),
            ("/", "/"),
            ("/buckets/{Name}", "/buckets/{Name}"),
        ],
    )
    def test_strip(self, uri, expected):
        assert StripBucketFromHttpPath.strip(uri) == expected

    def test_transform_rewrites_every_operation(self, s3_model):
        transformed = StripBucketFromHttpPath().transform(s3_model)

        assert uris(transformed, "com.amazonaws.s3") == {
            "GetObject": "/{Key+}",
            "HeadObject": "/{Key+}",
            "GetObjectAttributes": "/{Key+}?attributes",
        }
        assert uris(s3_model, "com.amazonaws.s3")["GetObject"] == "/{Bucket}/{Key+}"


class TestS3Transform:
    def test_s3_model_is_transformed(self, s3_model):
        service = s3_model.expect_shape(S3)

        transformed = S3Decorator().transform_model(service, s3_model)

        assert transformed.expect_shape(ATTRIBUTES_OUTPUT).has_trait(AllowInvalidXmlRootTrait)
        assert not transformed.expect_shape(
            ShapeId.parse("com.amazonaws.s3#GetObjectOutput")
        ).has_trait(AllowInvalidXmlRootTrait)
        assert uris(transformed, "com.amazonaws.s3")["HeadObject"] == "/{Key+}"

    def test_other_services_are_returned_as_is(self, storage_model):
        service = storage_model.expect_shape(STORAGE)

        assert S3Decorator().transform_model(service, storage_model) is storage_model

    def test_protocol_override_only_for_s3(self):
        decorator = S3Decorator()
        base = default_protocols()

        overlaid = decorator.protocols(S3, base)

        assert overlaid["aws.protocols#restXml"] is S3ProtocolOverride
        assert decorator.protocols(STORAGE, base) is base


# =============================================================================
# Protocol Override
# =============================================================================


class TestS3ProtocolOverride:
    @pytest.mark.parametrize("status, code", [(404, "NotFound"), (500, None), (403, None)])
    def test_empty_body(self, status, code):
        protocol = S3ProtocolOverride(RuntimeConfig(), wrapped_errors=False)

        error = protocol.parse_generic_error(Response(status)).build()

        assert error.code == code
        assert error.message is None

    def test_non_empty_body_is_parsed_as_rest_xml(self):
        protocol = S3ProtocolOverride(RuntimeConfig(), wrapped_errors=False)
        body = b"<Error><Code>NoSuchKey</Code><Message>missing</Message></Error>"

        error = protocol.parse_generic_error(Response(404, body=body)).build()

        assert error.code == "NoSuchKey"
        assert error.message == "missing"

    def test_empty_body_is_a_decode_error_without_the_override(self):
        with pytest.raises(DecodeError):
            RestXmlProtocol(RuntimeConfig(), wrapped_errors=False).parse_generic_error(Response(404))

    def test_render_checks_for_empty_bodies(self, s3_model):
        protocol = S3ProtocolOverride(RuntimeConfig(), wrapped_errors=False)
        operation = s3_model.expect_shape(ShapeId.parse("com.amazonaws.s3#HeadObject"))

        text = render_to_string(protocol.render_parse_http_generic_error(operation))

        assert "if response.body().is_empty() {" in text
        assert 'builder = builder.code("NotFound");' in text
        assert "crate::rest_xml_unwrapped_errors::parse_generic_error(response.body().as_ref())" in text


# =============================================================================
# Extended Request Id
# =============================================================================


class TestExtendedRequestId:
    def test_header_is_copied(self):
        builder = apply_extended_error(ErrorMetadata.builder().code("NoSuchKey"), {"X-Amz-Id-2": "host-id"})

        assert extended_request_id(builder.build()) == "host-id"

    def test_missing_header(self):
        error = apply_extended_error(ErrorMetadata.builder(), {"x-amz-request-id": "abc"}).build()

        assert extended_request_id(error) is None

    def test_parse_extended_request_id_section(self):
        section = PopulateGenericErrorExtras(builder_name="generic_builder", response_name="response")

        text = render_to_string(S3ParseExtendedRequestId().section(section))

        assert text == (
            "generic_builder = crate::s3_errors::apply_extended_error(generic_builder, response.headers());\n"
        )
        assert render_to_string(S3ParseExtendedRequestId().section(OperationImplBlock())) == ""

    def test_pub_use(self):
        assert render_to_string(S3PubUse().section(LibRsBody())) == "pub use crate::s3_errors::ErrorExt;\n"
        assert render_to_string(S3PubUse().section(LibRsAttributes())) == ""


# =============================================================================
# Generated Crate
# =============================================================================


class TestGeneratedS3Crate:
    def test_routes_have_no_bucket(self, generate, s3_model, s3_settings):
        result = generate(s3_model, s3_settings)

        assert [str(op.spec) for op in result.plan.operations] == [
            "GET /{Key+}",
            "GET /{Key+}?attributes",
            "HEAD /{Key+}",
        ]
        assert isinstance(result.context.protocol, S3ProtocolOverride)
        assert result.context.protocol.wrapped_errors is False

    def test_synthetic_output_keeps_invalid_root(self, generate, s3_model, s3_settings):
        result = generate(s3_model, s3_settings)
        model = result.context.model

        synthetic = model.expect_shape(ShapeId.parse("com.amazonaws.s3.synthetic#GetObjectAttributesOutput"))

        assert synthetic.has_trait(AllowInvalidXmlRootTrait)
        assert model.expect_shape(ATTRIBUTES_OUTPUT).has_trait(AllowInvalidXmlRootTrait)

    def test_error_parsers_read_the_extended_request_id(self, generate, s3_model, s3_settings):
        serde = generate(s3_model, s3_settings).files["src/protocol_serde.rs"]

        assert serde.count("pub fn parse_http_generic_error(") == 1
        assert "response.status().as_u16() == 404" in serde
        assert serde.count("crate::s3_errors::apply_extended_error(generic_builder, response.headers());") == 3

    def test_crate_root_exports_error_ext(self, generate, s3_model, s3_settings):
        result = generate(s3_model, s3_settings)

        lib = result.files["src/lib.rs"]

        assert "pub use crate::s3_errors::ErrorExt;" in lib
        assert "src/s3_errors.rs" in result.files
        assert "pub trait ErrorExt {" in result.files["src/s3_errors.rs"]
        assert '.get("x-amz-id-2")' in result.files["src/s3_errors.rs"]

    def test_other_rest_xml_services_are_untouched(self, generate, storage_model, storage_settings):
        result = generate(storage_model, storage_settings)

        assert type(result.context.protocol) is RestXmlProtocol
        assert "src/s3_errors.rs" not in result.files
        assert "s3_errors" not in result.files["src/lib.rs"]
        assert "apply_extended_error" not in result.files["src/protocol_serde.rs"]
        assert [str(op.spec) for op in result.plan.operations][0] == "GET /{Bucket}/{Key+}"
