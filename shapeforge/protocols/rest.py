# shapeforge/protocols/rest.py
"""
HTTP-binding protocols: restJson1 and restXml.

Both route by the operation's ``@http`` trait; they differ in how an error
body is decoded.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ElementTree
from typing import ClassVar, Optional

from shapeforge.model.shapes import Shape
from shapeforge.model.traits import HttpTrait, RestJson1Trait, RestXmlTrait
from shapeforge.runtime.errors import DecodeError, ErrorMetadataBuilder, sanitize_error_code
from shapeforge.runtime.http import Response
from shapeforge.runtime.routing import RequestSpec
from shapeforge.symbols.symbol import RuntimeType, RuntimeTypes

from .base import ServerProtocol

ERROR_TYPE_HEADER = "x-amzn-errortype"
REQUEST_ID_HEADER = "x-amzn-requestid"


class RestProtocol(ServerProtocol):
    """Routes by ``@http``; operations without it are a model error."""

    def request_spec(self, operation: Shape, service: Shape) -> RequestSpec:
        http = operation.expect_trait(HttpTrait)
        return RequestSpec.from_uri(http.method, http.uri)


class RestJson1Protocol(RestProtocol):
    name: ClassVar[str] = "restJson1"
    trait_id: ClassVar[str] = RestJson1Trait.trait_id
    module: ClassVar[str] = "rest_json_1"
    marker_name: ClassVar[str] = "RestJson1"

    def parse_generic_error(self, response: Response) -> ErrorMetadataBuilder:
        """
        Code from the ``x-amzn-errortype`` header, else ``code`` / ``__type``
        in the body; message from ``message`` / ``Message``.

        Raises:
            DecodeError: If a non-empty body is not a JSON object
        """
        builder = ErrorMetadataBuilder()
        document = _json_object(response.body)

        code = response.header(ERROR_TYPE_HEADER) or document.get("code") or document.get("__type")
        if code:
            builder.code(sanitize_error_code(str(code)))
        message = document.get("message") or document.get("Message")
        if message:
            builder.message(str(message))
        request_id = response.header(REQUEST_ID_HEADER)
        if request_id:
            builder.custom("request_id", request_id)
        return builder


def _json_object(body: bytes) -> dict:
    if not body.strip():
        return {}
    try:
        document = json.loads(body)
    except ValueError as e:
        raise DecodeError(f"invalid JSON error body: {e}") from e
    if not isinstance(document, dict):
        raise DecodeError("JSON error body must be an object")
    return document


class RestXmlProtocol(RestProtocol):
    """
    restXml. Errors are wrapped in ``<ErrorResponse>`` unless the service
    declares ``noErrorWrapping``.
    """

    name: ClassVar[str] = "restXml"
    trait_id: ClassVar[str] = RestXmlTrait.trait_id
    module: ClassVar[str] = "rest_xml"
    marker_name: ClassVar[str] = "RestXml"

    def __init__(self, runtime_config, wrapped_errors: bool = True):
        super().__init__(runtime_config)
        self.wrapped_errors = wrapped_errors

    def error_module(self) -> str:
        kind = "wrapped" if self.wrapped_errors else "unwrapped"
        return f"crate::rest_xml_{kind}_errors"

    def decode_error_type(self) -> RuntimeType:
        return RuntimeTypes.smithy_xml(self.runtime_config).resolve("decode::XmlDecodeError")

    def parse_generic_error(self, response: Response) -> ErrorMetadataBuilder:
        """
        Raises:
            DecodeError: If the body is empty or not the expected XML document
        """
        error = self._error_element(response.body)
        builder = ErrorMetadataBuilder()
        code = _child_text(error, "Code")
        if code:
            builder.code(code)
        message = _child_text(error, "Message")
        if message:
            builder.message(message)
        request_id = _child_text(error, "RequestId")
        if request_id:
            builder.custom("request_id", request_id)
        return builder

    def _error_element(self, body: bytes) -> ElementTree.Element:
        if not body.strip():
            raise DecodeError("invalid XML: empty error body")
        try:
            root = ElementTree.fromstring(body)
        except ElementTree.ParseError as e:
            raise DecodeError(f"invalid XML: {e}") from e

        if not self.wrapped_errors:
            if root.tag != "Error":
                raise DecodeError(f"expected <Error> root, found <{root.tag}>")
            return root

        if root.tag != "ErrorResponse":
            raise DecodeError(f"expected <ErrorResponse> root, found <{root.tag}>")
        error = root.find("Error")
        if error is None:
            raise DecodeError("no <Error> element in <ErrorResponse>")
        request_id = root.find("RequestId")
        if request_id is not None and error.find("RequestId") is None:
            error.append(request_id)
        return error


def _child_text(element: ElementTree.Element, tag: str) -> Optional[str]:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    return child.text.strip()


__all__ = ["RestProtocol", "RestJson1Protocol", "RestXmlProtocol"]
