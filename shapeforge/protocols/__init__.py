# shapeforge/protocols/__init__.py
"""
Server protocols.

Public API:
    - ServerProtocol: base class
    - RestJson1Protocol, RestXmlProtocol, AwsJson1_0Protocol
    - ProtocolMap, default_protocols: trait id → protocol factory
"""

from .aws_json import AwsJson1_0Protocol
from .base import ProtocolFactory, ServerProtocol
from .map import ProtocolMap, default_protocols
from .rest import RestJson1Protocol, RestProtocol, RestXmlProtocol

__all__ = [
    "ServerProtocol",
    "ProtocolFactory",
    "RestProtocol",
    "RestJson1Protocol",
    "RestXmlProtocol",
    "AwsJson1_0Protocol",
    "ProtocolMap",
    "default_protocols",
]
