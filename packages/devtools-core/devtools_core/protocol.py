"""Shared protocol contracts and constants for the DevTools client.

Defines :class:`Transport` -- the formal contract the RPC client speaks
to.  The production implementation wraps a ``websockets`` connection;
tests substitute a scripted in-memory transport.  Having an explicit
Protocol means the type checker catches API drift between the two.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

JsonObject = dict[str, Any]

# ---------------------------------------------------------------------------
# Connection defaults
# ---------------------------------------------------------------------------

DEFAULT_HOST: str = "localhost"
"""Host the browser's remote-debugging HTTP endpoint listens on."""

DEFAULT_PORT: int = 9222
"""Chrome's conventional ``--remote-debugging-port``."""

# ---------------------------------------------------------------------------
# Timeout / size constants
# ---------------------------------------------------------------------------

TIMEOUT_DISCOVERY: float = 5.0
"""How long the ``/json`` discovery request may take (seconds)."""

TIMEOUT_OPEN: float = 10.0
"""How long the WebSocket opening handshake may take (seconds)."""

MAX_MESSAGE_SIZE: int = 64 * 1024 * 1024
"""Largest incoming frame accepted.  Screenshots and DOM snapshots are big."""


# ---------------------------------------------------------------------------
# Transport protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class Transport(Protocol):
    """A persistent bidirectional text-message connection.

    ``recv`` blocks until one whole message is available.  Implementations
    raise :class:`~devtools_core.errors.TransportError` on I/O failure.
    """

    def send(self, message: str) -> None: ...
    def recv(self) -> str | bytes: ...
    def close(self) -> None: ...
