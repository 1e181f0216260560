# shapeforge/protocols/aws_json.py
"""awsJson1_0 - RPC protocol routed by the ``x-amz-target`` header."""

from __future__ import annotations

from typing import ClassVar

from shapeforge.model.shapes import Shape
from shapeforge.model.traits import AwsJson1_0Trait
from shapeforge.runtime.routing import RequestSpec
from shapeforge.sections.writable import Writable, writable
from shapeforge.symbols.symbol import RuntimeType

from .rest import RestJson1Protocol

TARGET_HEADER = "x-amz-target"


class AwsJson1_0Protocol(RestJson1Protocol):
    name: ClassVar[str] = "awsJson1_0"
    trait_id: ClassVar[str] = AwsJson1_0Trait.trait_id
    module: ClassVar[str] = "aws_json_10"
    marker_name: ClassVar[str] = "AwsJson1_0"

    def router_type(self) -> RuntimeType:
        return self.http_server.resolve("proto::aws_json::router::AwsJsonRouter")

    def request_spec_type(self) -> RuntimeType:
        return RuntimeType(name="String", namespace="std::string")

    def request_spec(self, operation: Shape, service: Shape) -> RequestSpec:
        target = f"{service.id.name}.{operation.id.name}"
        return RequestSpec(method="POST", header=(TARGET_HEADER, target))

    def render_request_spec(self, spec: RequestSpec) -> Writable:
        target = spec.header[1] if spec.header else ""
        return writable(f'String::from("{target}")')


__all__ = ["AwsJson1_0Protocol", "TARGET_HEADER"]
