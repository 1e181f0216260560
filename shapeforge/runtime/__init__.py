# shapeforge/runtime/__init__.py
"""
Reference runtime of generated services.

Public API:
    - ServiceBuilder, Service, Router, MissingOperationsError, FailOnMissingOperation
    - Request, Response, RequestSpec
    - ErrorMetadata, DecodeError
    - uuid_v4, IdempotencyTokenProvider
"""

from .errors import DecodeError, ErrorMetadata, ErrorMetadataBuilder, sanitize_error_code
from .http import Request, Response
from .idempotency import IdempotencyTokenProvider, default_provider, uuid_v4
from .routing import PathSegment, QuerySegment, RequestSpec, SegmentKind
from .service import (
    MISSING_HANDLER_STATUS,
    UNKNOWN_OPERATION_STATUS,
    FailOnMissingOperation,
    MissingOperationsError,
    OperationBinding,
    Route,
    Router,
    Service,
    ServiceBuilder,
)

__all__ = [
    "Request",
    "Response",
    "RequestSpec",
    "PathSegment",
    "QuerySegment",
    "SegmentKind",
    "ErrorMetadata",
    "ErrorMetadataBuilder",
    "DecodeError",
    "sanitize_error_code",
    "OperationBinding",
    "FailOnMissingOperation",
    "MissingOperationsError",
    "Route",
    "Router",
    "Service",
    "ServiceBuilder",
    "MISSING_HANDLER_STATUS",
    "UNKNOWN_OPERATION_STATUS",
    "uuid_v4",
    "IdempotencyTokenProvider",
    "default_provider",
]
