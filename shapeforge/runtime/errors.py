# shapeforge/runtime/errors.py
"""
Generic error metadata produced by protocol error parsers.

ErrorMetadata is what a protocol can tell about an error response before the
operation-specific error type is known: a code, a message, and extras such as
request ids.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


class DecodeError(ValueError):
    """An error body could not be decoded."""

    pass


@dataclass(frozen=True)
class ErrorMetadata:
    code: Optional[str] = None
    message: Optional[str] = None
    extras: Dict[str, str] = field(default_factory=dict)

    @property
    def request_id(self) -> Optional[str]:
        return self.extras.get("request_id")

    @classmethod
    def builder(cls) -> "ErrorMetadataBuilder":
        return ErrorMetadataBuilder()


class ErrorMetadataBuilder:
    """
    Builder mirroring the generated ``error::metadata::Builder``.

    Examples:
        >>> ErrorMetadata.builder().code("NotFound").build().code
        'NotFound'
    """

    def __init__(self) -> None:
        self._code: Optional[str] = None
        self._message: Optional[str] = None
        self._extras: Dict[str, str] = {}

    def code(self, code: str) -> "ErrorMetadataBuilder":
        self._code = code
        return self

    def message(self, message: str) -> "ErrorMetadataBuilder":
        self._message = message
        return self

    def custom(self, key: str, value: str) -> "ErrorMetadataBuilder":
        self._extras[key] = value
        return self

    def build(self) -> ErrorMetadata:
        return ErrorMetadata(code=self._code, message=self._message, extras=dict(self._extras))


def sanitize_error_code(raw: str) -> str:
    """
    Strip namespaces and trailing URIs from an error type.

    Examples:
        >>> sanitize_error_code("aws.protocoltests#FooError:http://internal")
        'FooError'
    """
    code = raw.split(":", 1)[0]
    return code.rsplit("#", 1)[-1]


__all__ = [
    "DecodeError",
    "ErrorMetadata",
    "ErrorMetadataBuilder",
    "sanitize_error_code",
]
