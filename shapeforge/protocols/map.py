# shapeforge/protocols/map.py
"""
ProtocolMap - protocol trait id → protocol factory.

Maps are immutable; decorators return a new map from their ``protocols``
hook (``current + {RestXmlTrait.trait_id: S3ProtocolOverride}``).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from shapeforge.core.exceptions import ModelError
from shapeforge.logging.logger import get_logger
from shapeforge.logging.tags import PROTOCOL
from shapeforge.model.shapes import Shape
from shapeforge.model.traits import RestXmlTrait
from shapeforge.symbols.symbol import RuntimeConfig

from .aws_json import AwsJson1_0Protocol
from .base import ProtocolFactory, ServerProtocol
from .rest import RestJson1Protocol, RestXmlProtocol

logger = get_logger(__name__)


class ProtocolMap(Mapping[str, ProtocolFactory]):
    def __init__(self, factories: Optional[Mapping[str, ProtocolFactory]] = None):
        self._factories: Mapping[str, ProtocolFactory] = MappingProxyType(dict(factories or {}))

    def __getitem__(self, trait_id: str) -> ProtocolFactory:
        return self._factories[trait_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def __add__(self, other: Mapping[str, ProtocolFactory]) -> "ProtocolMap":
        merged: Dict[str, ProtocolFactory] = dict(self._factories)
        merged.update(other)
        return ProtocolMap(merged)

    def resolve(
        self,
        service: Shape,
        runtime_config: RuntimeConfig,
        preferred: Optional[str] = None,
    ) -> ServerProtocol:
        """
        Instantiate the protocol for ``service``.

        The preferred trait id wins if the service declares it; otherwise the
        first protocol trait on the service with a registered factory.

        Raises:
            ModelError: If the service declares no supported protocol
        """
        declared = [t.id for t in service.traits if t.id in self._factories]
        if preferred is not None:
            if preferred not in declared:
                raise ModelError(
                    f"Service does not support requested protocol {preferred!r}; "
                    f"supported: {declared}",
                    service.id,
                )
            chosen = preferred
        elif declared:
            chosen = declared[0]
        else:
            raise ModelError(
                f"Service declares no supported protocol; known protocols: {sorted(self._factories)}",
                service.id,
            )

        factory = self._factories[chosen]
        protocol = factory(runtime_config)
        xml = service.get_trait(RestXmlTrait)
        if isinstance(protocol, RestXmlProtocol) and xml is not None and xml.no_error_wrapping:
            protocol.wrapped_errors = False
        logger.debug(f"{PROTOCOL} {service.id} uses {protocol!r} ({chosen})")
        return protocol


def default_protocols() -> ProtocolMap:
    return ProtocolMap(
        {
            RestJson1Protocol.trait_id: RestJson1Protocol,
            RestXmlProtocol.trait_id: RestXmlProtocol,
            AwsJson1_0Protocol.trait_id: AwsJson1_0Protocol,
        }
    )


__all__ = ["ProtocolMap", "default_protocols"]
