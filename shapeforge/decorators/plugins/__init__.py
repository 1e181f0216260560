# shapeforge/decorators/plugins/__init__.py
"""
Built-in decorators.

BUILTIN_DECORATORS is the explicit registration list used by
``shapeforge.core.registry.build_registry``. Adding a decorator means adding
it here; nothing registers itself on import.
"""

from .idempotency_token import IdempotencyTokenDecorator
from .s3 import S3Decorator
from .sdk_config import GenericSmithySdkConfigSettings, SdkConfigDecorator

BUILTIN_DECORATORS = (
    SdkConfigDecorator,
    GenericSmithySdkConfigSettings,
    IdempotencyTokenDecorator,
    S3Decorator,
)

__all__ = [
    "BUILTIN_DECORATORS",
    "SdkConfigDecorator",
    "GenericSmithySdkConfigSettings",
    "IdempotencyTokenDecorator",
    "S3Decorator",
]
