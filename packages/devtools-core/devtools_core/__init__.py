"""Typed client for the Chrome DevTools remote-debugging protocol.

``DevToolsClient`` speaks the wire protocol; the typed bindings generated
from a schema live in :mod:`devtools_core.proto`.
"""

from devtools_core.cdp_client import ConnectionState, DevToolsClient
from devtools_core.errors import (
    CallError,
    ClientError,
    DecodeError,
    DiscoveryError,
    GenerationError,
    SchemaError,
    TransportError,
)

__all__ = [
    "CallError",
    "ClientError",
    "ConnectionState",
    "DecodeError",
    "DevToolsClient",
    "DiscoveryError",
    "GenerationError",
    "SchemaError",
    "TransportError",
]
